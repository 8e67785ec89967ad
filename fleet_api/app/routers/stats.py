from fastapi import APIRouter, Depends

from ..schemas import FleetSummary
from ..services.vehicles import VehicleService, get_vehicle_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=FleetSummary)
def fleet_summary(service: VehicleService = Depends(get_vehicle_service)):
    return service.summary()
