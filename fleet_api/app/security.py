import hmac
import logging
import os
from typing import Optional

from .results import Ok, Result, ServiceErrorCode, err

logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "x-admin-token"


def _get_admin_token() -> Optional[str]:
    return os.environ.get("ADMIN_DELETE_TOKEN") or None


def check_admin_approval(token: Optional[str]) -> Result[None]:
    """
    Compare the admin header against ADMIN_DELETE_TOKEN. When the variable is not
    configured no request is approved.
    """
    expected = _get_admin_token()
    if not expected:
        logger.warning("ADMIN_DELETE_TOKEN is not set; refusing admin request")
        return err(ServiceErrorCode.ADMIN_APPROVAL_REQUIRED, "Admin approval required")
    if not token or not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        return err(ServiceErrorCode.ADMIN_APPROVAL_REQUIRED, "Admin approval required")
    return Ok(None)
