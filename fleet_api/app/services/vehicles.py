import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request

from ..db import VehicleStore
from ..plates import allowed_transitions, maintenance_cap, normalize_plate, validate_plate
from ..results import Ok, Result, ServiceErrorCode, err
from ..schemas import STATUS_VALUES, VehicleStatus

logger = logging.getLogger(__name__)

AVAILABLE = VehicleStatus.AVAILABLE.value
MAINTENANCE = VehicleStatus.MAINTENANCE.value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VehicleService:
    """
    Business rules for the fleet: plate format and uniqueness, the status
    state machine, the maintenance cap and the delete restriction.

    Every operation returns a Result. The store is persisted once after each
    successful change; no-ops and rejected requests never write.
    """

    def __init__(self, store: VehicleStore, *, clock: Callable[[], datetime] = _utcnow):
        self._store = store
        self._clock = clock
        self._lock = Lock()

    @property
    def _vehicles(self) -> List[Dict[str, Any]]:
        return self._store.vehicles

    def _find_by_plate(self, normalized: str) -> Optional[Dict[str, Any]]:
        return next((v for v in self._vehicles if v["licensePlate"] == normalized), None)

    def _find_by_id(self, vehicle_id: str) -> Optional[Dict[str, Any]]:
        return next((v for v in self._vehicles if v["id"] == vehicle_id), None)

    def _new_id(self) -> str:
        millis = int(self._clock().timestamp() * 1000)
        taken = {v["id"] for v in self._vehicles}
        while f"v{millis}" in taken:
            millis += 1
        return f"v{millis}"

    def list_vehicles(self) -> List[Dict[str, Any]]:
        return list(self._vehicles)

    def get_vehicle(self, vehicle_id: str) -> Result[Dict[str, Any]]:
        vehicle = self._find_by_id(vehicle_id)
        if vehicle is None:
            return err(ServiceErrorCode.VEHICLE_NOT_FOUND, "Vehicle not found")
        return Ok(vehicle)

    def create_vehicle(self, license_plate: Optional[str], model: Optional[str]) -> Result[Dict[str, Any]]:
        if not license_plate:
            return err(ServiceErrorCode.LICENSE_PLATE_REQUIRED, "licensePlate is required")
        if not model:
            return err(ServiceErrorCode.MODEL_REQUIRED, "model is required")

        validated = validate_plate(license_plate)
        if not validated.ok:
            return validated
        normalized = validated.data

        with self._lock:
            if self._find_by_plate(normalized) is not None:
                logger.debug("rejected duplicate plate %s on create", normalized)
                return err(ServiceErrorCode.DUPLICATE_LICENSE_PLATE, "A vehicle with this license plate already exists")

            vehicle = {
                "id": self._new_id(),
                "licensePlate": normalized,
                "model": model,
                "status": AVAILABLE,
                "createdAt": _iso_timestamp(self._clock()),
            }
            self._vehicles.append(vehicle)
            self._store.persist()

        logger.info("created vehicle %s with plate %s", vehicle["id"], normalized)
        return Ok(vehicle)

    def edit_vehicle_status(self, license_plate: Optional[str], new_status: Optional[str]) -> Result[Dict[str, Any]]:
        if new_status not in STATUS_VALUES:
            return err(ServiceErrorCode.INVALID_STATUS, "Invalid vehicle status")
        new_status = VehicleStatus(new_status).value

        with self._lock:
            vehicle = self._find_by_plate(normalize_plate(license_plate))
            if vehicle is None:
                return err(ServiceErrorCode.VEHICLE_NOT_FOUND, "Vehicle not found")

            current = vehicle["status"]
            if current == new_status:
                return Ok(vehicle)

            if new_status not in allowed_transitions(current):
                logger.debug("rejected transition %s -> %s for %s", current, new_status, vehicle["id"])
                return err(
                    ServiceErrorCode.ILLEGAL_STATUS_TRANSITION,
                    "Illegal status transition from Maintenance. Allowed: Available only",
                )

            if new_status == MAINTENANCE:
                cap = maintenance_cap(len(self._vehicles))
                in_maintenance = sum(1 for v in self._vehicles if v["status"] == MAINTENANCE)
                if in_maintenance + 1 > cap:
                    logger.debug("maintenance cap %d reached, rejected %s", cap, vehicle["id"])
                    return err(
                        ServiceErrorCode.MAINTENANCE_CAP_EXCEEDED,
                        f"Maintenance cap exceeded: up to {cap} vehicles (5%) allowed",
                    )

            vehicle["status"] = new_status
            self._store.persist()

        logger.info("vehicle %s status %s -> %s", vehicle["id"], current, new_status)
        return Ok(vehicle)

    def edit_vehicle_plate(self, vehicle_id: str, new_license_plate: Optional[str]) -> Result[Dict[str, Any]]:
        with self._lock:
            vehicle = self._find_by_id(vehicle_id)
            if vehicle is None:
                return err(ServiceErrorCode.VEHICLE_NOT_FOUND, "Vehicle not found")

            validated = validate_plate(new_license_plate)
            if not validated.ok:
                return validated
            normalized = validated.data

            previous = vehicle["licensePlate"]
            if normalized == previous:
                return Ok(vehicle)

            if any(v["licensePlate"] == normalized and v["id"] != vehicle_id for v in self._vehicles):
                logger.debug("rejected duplicate plate %s for %s", normalized, vehicle_id)
                return err(ServiceErrorCode.DUPLICATE_LICENSE_PLATE, "A vehicle with this license plate already exists")

            vehicle["licensePlate"] = normalized
            self._store.persist()

        logger.info("vehicle %s plate %s -> %s", vehicle_id, previous, normalized)
        return Ok(vehicle)

    def delete_vehicle(self, vehicle_id: str) -> Result[Dict[str, str]]:
        with self._lock:
            index = next((i for i, v in enumerate(self._vehicles) if v["id"] == vehicle_id), None)
            if index is None:
                return err(ServiceErrorCode.VEHICLE_NOT_FOUND, "Vehicle not found")

            if self._vehicles[index]["status"] != AVAILABLE:
                return err(ServiceErrorCode.NOT_ALLOWED_STATUS_FOR_DELETE, "Only Available vehicles can be deleted")

            del self._vehicles[index]
            self._store.persist()

        logger.info("deleted vehicle %s", vehicle_id)
        return Ok({"deletedId": vehicle_id})

    def summary(self) -> Dict[str, Any]:
        vehicles = self.list_vehicles()
        by_status = {status: 0 for status in STATUS_VALUES}
        for vehicle in vehicles:
            by_status[vehicle["status"]] = by_status.get(vehicle["status"], 0) + 1
        cap = maintenance_cap(len(vehicles))
        return {
            "total": len(vehicles),
            "byStatus": by_status,
            "maintenanceCap": cap,
            "maintenanceSlotsLeft": max(0, cap - by_status[MAINTENANCE]),
        }


def get_vehicle_service(request: Request) -> VehicleService:
    return request.app.state.vehicle_service
