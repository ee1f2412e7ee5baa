"""
Admin endpoints: collected-email listing/export/clear and manual premium grants.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import AppError
from app.db.session import get_db
from app.dependencies.auth import require_admin_key
from app.dependencies.services import get_email_audit_log
from app.schemas.admin import ExportEmailsRequest, GrantPremiumRequest
from app.services.email_audit import EmailAuditLog, record_to_dict
from app.services.subscriptions import grant_premium
from app.utils.dates import isoformat_utc

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.get("/emails")
def get_emails(audit_log: EmailAuditLog = Depends(get_email_audit_log)):
    try:
        emails = [record_to_dict(r) for r in audit_log.get_all_emails()]
        stats = audit_log.get_stats()
    except Exception as e:
        logger.error("[Admin Emails] Failed to get emails: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve emails"
        )
    return {"emails": emails, "stats": stats, "success": True}


@router.get("/emails/stats")
def get_email_stats(audit_log: EmailAuditLog = Depends(get_email_audit_log)):
    try:
        stats = audit_log.get_stats()
    except Exception as e:
        logger.error("[Admin Emails] Failed to get email stats: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve email statistics"
        )
    return {"stats": stats, "success": True}


@router.post("/emails/export")
def export_emails(
    request: Optional[ExportEmailsRequest] = None,
    audit_log: EmailAuditLog = Depends(get_email_audit_log),
):
    """Export collected emails as plain text (default) or CSV."""
    export_format = request.format if request else "text"
    try:
        if export_format == "csv":
            content = audit_log.export_as_csv()
        else:
            content = audit_log.export_as_text()
    except Exception as e:
        logger.error("[Admin Emails] Failed to export emails: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export emails"
        )
    return {"content": content, "format": export_format, "success": True}


@router.post("/emails/clear")
def clear_emails(audit_log: EmailAuditLog = Depends(get_email_audit_log)):
    try:
        audit_log.clear()
    except Exception as e:
        logger.error("[Admin Emails] Failed to clear emails: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear emails"
        )
    return {"success": True, "message": "All emails have been cleared"}


@router.post("/users/grant-premium")
def grant_premium_access(request: GrantPremiumRequest, db: Session = Depends(get_db)):
    """Grant monthly (30d), annual (365d) or lifetime (no expiry) premium."""
    logger.info("[Admin] Granting premium access to %s with plan: %s", request.email, request.plan)
    try:
        user = grant_premium(db, request.email, request.plan)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return {
        "success": True,
        "user": {
            "id": user.id,
            "email": user.email,
            "subscriptionPlan": user.subscription_plan,
            "subscriptionStatus": user.subscription_status,
            "subscriptionExpiresAt": isoformat_utc(user.subscription_expires_at),
        },
        "message": f"Premium {request.plan} plan granted successfully",
    }
