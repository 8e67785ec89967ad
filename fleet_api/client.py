"""
HTTP client for the fleet API, used by the smoke script and by front ends
that want Result values instead of raw responses.
"""

import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .app.results import Err, Ok, Result, ServiceError, ServiceErrorCode

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"

ERROR_MESSAGES: Dict[ServiceErrorCode, str] = {
    ServiceErrorCode.LICENSE_PLATE_REQUIRED: "License plate is required.",
    ServiceErrorCode.MODEL_REQUIRED: "Model is required.",
    ServiceErrorCode.INVALID_LICENSE_PLATE: "Invalid plate: must be 5-10 alphanumeric characters.",
    ServiceErrorCode.DUPLICATE_LICENSE_PLATE: "This license plate already exists.",
    ServiceErrorCode.VEHICLE_NOT_FOUND: "Vehicle not found.",
    ServiceErrorCode.INVALID_STATUS: "Invalid vehicle status.",
    ServiceErrorCode.ILLEGAL_STATUS_TRANSITION: "Illegal status transition: Maintenance can only move to Available.",
    ServiceErrorCode.MAINTENANCE_CAP_EXCEEDED: "Maintenance cap (5%) exceeded.",
    ServiceErrorCode.NOT_ALLOWED_STATUS_FOR_DELETE: "Only Available vehicles can be deleted.",
    ServiceErrorCode.ADMIN_APPROVAL_REQUIRED: "Admin approval required. Please enter the correct admin password.",
}


def error_message(code: Any) -> str:
    try:
        return ERROR_MESSAGES[ServiceErrorCode(code)]
    except (KeyError, ValueError):
        return "Unknown error."


def _parse_error(response: requests.Response) -> ServiceError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        try:
            return ServiceError(ServiceErrorCode(error.get("code")), error.get("message") or "")
        except ValueError:
            pass
    return ServiceError(ServiceErrorCode.VEHICLE_NOT_FOUND, "Unknown error")


class FleetClient:
    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None, timeout: float = 5.0):
        self.base_url = (base_url or os.environ.get("FLEET_API_BASE") or DEFAULT_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Result[Any]:
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if not response.ok:
            error = _parse_error(response)
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, error.code.value)
            return Err(error)
        return Ok(response.json())

    def list_vehicles(self) -> List[Dict[str, Any]]:
        result = self._request("GET", "/vehicles")
        return result.data if result.ok else []

    def create_vehicle(self, license_plate: str, model: str) -> Result[Dict[str, Any]]:
        return self._request("POST", "/vehicles", json={"licensePlate": license_plate, "model": model})

    def edit_status(self, license_plate: str, status: str) -> Result[Dict[str, Any]]:
        return self._request("PATCH", f"/vehicles/{quote(license_plate, safe='')}/status", json={"status": status})

    def edit_plate(self, vehicle_id: str, license_plate: str) -> Result[Dict[str, Any]]:
        return self._request(
            "PATCH",
            f"/vehicles/{quote(vehicle_id, safe='')}/plate",
            json={"licensePlate": license_plate},
        )

    def delete_vehicle(self, vehicle_id: str, admin_token: str) -> Result[Dict[str, str]]:
        return self._request(
            "DELETE",
            f"/vehicles/{quote(vehicle_id, safe='')}",
            headers={"x-admin-token": admin_token},
        )
