import logging
import time

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..services import audit_logs

logger = logging.getLogger(__name__)


class AuditLogMiddleware(BaseHTTPMiddleware):
    """Emits one audit record per request once the response status is known."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if not audit_logs.should_log(request):
            return await call_next(request)

        start_time = time.perf_counter()
        # stays 500 when the endpoint raises instead of returning
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            try:
                audit_logs.log_request_event(request, status_code=status_code, duration_ms=elapsed_ms)
            except Exception as exc:  # pragma: no cover
                logger.warning("audit logging failed for %s %s: %s", request.method, request.url.path, exc)


def register_audit_logging(app: FastAPI) -> None:
    app.add_middleware(AuditLogMiddleware)
