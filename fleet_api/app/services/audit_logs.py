from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request

logger = logging.getLogger(__name__)

IGNORED_PATHS = {"/", "/health"}
IGNORED_METHODS = {"OPTIONS", "HEAD"}


def attach_request_metadata(request: Request, **fields: Any) -> None:
    metadata = getattr(request.state, "audit_metadata", None)
    if not isinstance(metadata, dict):
        metadata = {}
    metadata.update({key: value for key, value in fields.items() if value is not None})
    request.state.audit_metadata = metadata


def should_log(request: Request) -> bool:
    return request.method not in IGNORED_METHODS and request.url.path not in IGNORED_PATHS


def log_event(
    *,
    action: str,
    resource: Optional[str],
    resource_id: Optional[str],
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    ip_address: Optional[str],
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    payload = {
        "action": action,
        "resource": resource,
        "resource_id": resource_id,
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
        "ip_address": ip_address,
        "metadata": metadata or {},
    }
    logger.log(
        logging.ERROR if status_code >= 500 else logging.INFO,
        "%s %s -> %s (%.1f ms)%s",
        method,
        path,
        status_code,
        duration_ms,
        f" {payload['metadata']}" if payload["metadata"] else "",
        extra={"audit": payload},
    )


def log_request_event(request: Request, *, status_code: int, duration_ms: float) -> None:
    route = request.scope.get("route")
    resource = getattr(route, "path", None) if route is not None else None
    metadata: Dict[str, Any] = {}
    extra_metadata = getattr(request.state, "audit_metadata", None)
    if isinstance(extra_metadata, dict):
        metadata.update(extra_metadata)
    if request.url.query:
        metadata.setdefault("query_string", request.url.query)
    log_event(
        action=f"{request.method} {resource or request.url.path}",
        resource=resource,
        resource_id=_extract_resource_id(request.path_params),
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=duration_ms,
        ip_address=_client_ip(request),
        metadata=metadata,
    )
    request.state.audit_metadata = None


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


def _extract_resource_id(path_params: Dict[str, Any]) -> Optional[str]:
    for key in ("vehicle_id", "license_plate"):
        value = path_params.get(key)
        if value:
            return str(value)
    return None
