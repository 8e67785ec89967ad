from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from ..results import Result, ServiceError, http_status_for
from ..schemas import (
    ErrorResponse,
    Vehicle,
    VehicleCreate,
    VehicleDeleted,
    VehiclePlateUpdate,
    VehicleStatusUpdate,
)
from ..security import check_admin_approval
from ..services import audit_logs
from ..services.vehicles import VehicleService, get_vehicle_service

ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 403, 404, 409)
}

router = APIRouter(prefix="/vehicles", tags=["vehicles"], responses=ERROR_RESPONSES)


def _error_response(error: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=http_status_for(error.code), content={"error": error.to_dict()})


def _send_result(request: Request, result: Result, event: str) -> Any:
    if not result.ok:
        audit_logs.attach_request_metadata(request, event=f"{event}_rejected", error_code=result.error.code.value)
        return _error_response(result.error)
    return result.data


@router.get("", response_model=List[Vehicle])
def list_vehicles(service: VehicleService = Depends(get_vehicle_service)):
    return service.list_vehicles()


@router.post("", response_model=Vehicle, status_code=201)
def create_vehicle(
    request: Request,
    payload: Optional[VehicleCreate] = None,
    service: VehicleService = Depends(get_vehicle_service),
):
    payload = payload or VehicleCreate()
    result = service.create_vehicle(payload.license_plate, payload.model)
    if result.ok:
        audit_logs.attach_request_metadata(
            request,
            event="vehicle_created",
            vehicle_id=result.data["id"],
            license_plate=result.data["licensePlate"],
        )
    return _send_result(request, result, "vehicle_create")


@router.patch("/{license_plate}/status", response_model=Vehicle)
def edit_vehicle_status(
    license_plate: str,
    request: Request,
    payload: Optional[VehicleStatusUpdate] = None,
    service: VehicleService = Depends(get_vehicle_service),
):
    payload = payload or VehicleStatusUpdate()
    result = service.edit_vehicle_status(license_plate, payload.status)
    if result.ok:
        audit_logs.attach_request_metadata(
            request,
            event="vehicle_status_changed",
            vehicle_id=result.data["id"],
            status=result.data["status"],
        )
    return _send_result(request, result, "vehicle_status")


@router.patch("/{vehicle_id}/plate", response_model=Vehicle)
def edit_vehicle_plate(
    vehicle_id: str,
    request: Request,
    payload: Optional[VehiclePlateUpdate] = None,
    service: VehicleService = Depends(get_vehicle_service),
):
    payload = payload or VehiclePlateUpdate()
    result = service.edit_vehicle_plate(vehicle_id, payload.license_plate)
    if result.ok:
        audit_logs.attach_request_metadata(
            request,
            event="vehicle_plate_changed",
            vehicle_id=vehicle_id,
            license_plate=result.data["licensePlate"],
        )
    return _send_result(request, result, "vehicle_plate")


@router.delete("/{vehicle_id}", response_model=VehicleDeleted)
def delete_vehicle(
    vehicle_id: str,
    request: Request,
    x_admin_token: Optional[str] = Header(default=None),
    service: VehicleService = Depends(get_vehicle_service),
):
    approval = check_admin_approval(x_admin_token)
    if not approval.ok:
        return _send_result(request, approval, "vehicle_delete")
    result = service.delete_vehicle(vehicle_id)
    if result.ok:
        audit_logs.attach_request_metadata(request, event="vehicle_deleted", vehicle_id=vehicle_id)
    return _send_result(request, result, "vehicle_delete")
