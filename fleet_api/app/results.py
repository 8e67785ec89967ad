from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union

T = TypeVar("T")


class ServiceErrorCode(str, Enum):
    LICENSE_PLATE_REQUIRED = "LICENSE_PLATE_REQUIRED"
    MODEL_REQUIRED = "MODEL_REQUIRED"
    INVALID_LICENSE_PLATE = "INVALID_LICENSE_PLATE"
    DUPLICATE_LICENSE_PLATE = "DUPLICATE_LICENSE_PLATE"
    VEHICLE_NOT_FOUND = "VEHICLE_NOT_FOUND"
    INVALID_STATUS = "INVALID_STATUS"
    ILLEGAL_STATUS_TRANSITION = "ILLEGAL_STATUS_TRANSITION"
    MAINTENANCE_CAP_EXCEEDED = "MAINTENANCE_CAP_EXCEEDED"
    NOT_ALLOWED_STATUS_FOR_DELETE = "NOT_ALLOWED_STATUS_FOR_DELETE"
    ADMIN_APPROVAL_REQUIRED = "ADMIN_APPROVAL_REQUIRED"


@dataclass(frozen=True)
class ServiceError:
    code: ServiceErrorCode
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Err:
    error: ServiceError
    ok: bool = field(default=False, init=False)


Result = Union[Ok[T], Err]


def err(code: ServiceErrorCode, message: str) -> Err:
    return Err(ServiceError(code, message))


HTTP_STATUS_BY_CODE: Dict[ServiceErrorCode, int] = {
    ServiceErrorCode.LICENSE_PLATE_REQUIRED: 400,
    ServiceErrorCode.MODEL_REQUIRED: 400,
    ServiceErrorCode.INVALID_LICENSE_PLATE: 400,
    ServiceErrorCode.INVALID_STATUS: 400,
    ServiceErrorCode.DUPLICATE_LICENSE_PLATE: 409,
    ServiceErrorCode.ILLEGAL_STATUS_TRANSITION: 409,
    ServiceErrorCode.MAINTENANCE_CAP_EXCEEDED: 409,
    ServiceErrorCode.NOT_ALLOWED_STATUS_FOR_DELETE: 409,
    ServiceErrorCode.VEHICLE_NOT_FOUND: 404,
    ServiceErrorCode.ADMIN_APPROVAL_REQUIRED: 403,
}


def http_status_for(code: Any) -> int:
    try:
        return HTTP_STATUS_BY_CODE[ServiceErrorCode(code)]
    except (KeyError, ValueError):
        return 500
