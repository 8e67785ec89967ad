import re
from typing import Optional, Tuple

from .results import Ok, Result, ServiceErrorCode, err
from .schemas import VehicleStatus

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_PLATE_PATTERN = re.compile(r"^[A-Z0-9]{5,10}$")

INVALID_PLATE_MESSAGE = "Invalid license plate: must be 5-10 alphanumeric characters (A-Z, 0-9)"

MAINTENANCE_PERCENT = 5


def normalize_plate(plate: Optional[str]) -> str:
    """Uppercase the plate and drop spaces, dashes and anything else non-alphanumeric."""
    return _NON_ALNUM.sub("", (plate or "").upper())


def is_valid_plate(normalized: str) -> bool:
    return bool(_PLATE_PATTERN.match(normalized))


def validate_plate(plate: Optional[str]) -> Result[str]:
    normalized = normalize_plate(plate)
    if not is_valid_plate(normalized):
        return err(ServiceErrorCode.INVALID_LICENSE_PLATE, INVALID_PLATE_MESSAGE)
    return Ok(normalized)


def maintenance_cap(total_vehicles: int) -> int:
    """
    Maximum number of vehicles allowed in Maintenance at the same time:
    5% of the fleet rounded down, but never less than one.
    """
    return max(1, total_vehicles * MAINTENANCE_PERCENT // 100)


def allowed_transitions(status: str) -> Tuple[str, ...]:
    if status == VehicleStatus.MAINTENANCE.value:
        return (VehicleStatus.AVAILABLE.value,)
    return tuple(s.value for s in VehicleStatus if s.value != status)
