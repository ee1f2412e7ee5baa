import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from app.core import config

logger = logging.getLogger(__name__)


def require_admin_key(x_admin_key: Optional[str] = Header(None)) -> None:
    """
    Guard for /admin routes. When ADMIN_API_KEY is unset the routes stay open
    (the mobile admin screen has no login of its own).
    """
    expected = config.ADMIN_API_KEY
    if not expected:
        return
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        logger.warning("[Admin] Rejected request with missing or invalid X-Admin-Key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin key"
        )


def verify_revenuecat_authorization(authorization: Optional[str] = Header(None)) -> None:
    """RevenueCat sends the configured shared secret verbatim in Authorization."""
    expected = config.REVENUECAT_WEBHOOK_AUTH
    if not expected:
        return
    if not authorization or not hmac.compare_digest(authorization, expected):
        logger.warning("[RevenueCat Webhook] Rejected request with invalid Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook authorization"
        )
