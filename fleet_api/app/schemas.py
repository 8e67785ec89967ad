from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VehicleStatus(str, Enum):
    AVAILABLE = "Available"
    IN_USE = "InUse"
    MAINTENANCE = "Maintenance"


STATUS_VALUES = tuple(s.value for s in VehicleStatus)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -------- Vehicles --------
class Vehicle(_CamelModel):
    id: str
    license_plate: str = Field(..., alias="licensePlate")
    model: str
    status: VehicleStatus
    created_at: str = Field(..., alias="createdAt")


# Fields stay optional so missing values reach the service and get its error codes.
class VehicleCreate(_CamelModel):
    license_plate: Optional[str] = Field(default=None, alias="licensePlate")
    model: Optional[str] = None


class VehicleStatusUpdate(_CamelModel):
    status: Optional[str] = None


class VehiclePlateUpdate(_CamelModel):
    license_plate: Optional[str] = Field(default=None, alias="licensePlate")


class VehicleDeleted(_CamelModel):
    deleted_id: str = Field(..., alias="deletedId")


# -------- Errors --------
class ServiceErrorBody(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ServiceErrorBody


# -------- Stats --------
class FleetSummary(_CamelModel):
    total: int
    by_status: Dict[str, int] = Field(..., alias="byStatus")
    maintenance_cap: int = Field(..., alias="maintenanceCap")
    maintenance_slots_left: int = Field(..., alias="maintenanceSlotsLeft")


VehicleList = List[Vehicle]
