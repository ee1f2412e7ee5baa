import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.errors import DatastoreUnavailableError, UserNotFoundError
from app.core.plans import ACTIVE_STATUS, get_plan_expiry
from app.models.user import User
from app.services.auth_service import normalize_email
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def grant_premium(db: Session, email: str, plan: str) -> User:
    """Give `email` an active premium plan, bypassing the store (support/comp accounts)."""
    email = normalize_email(email)
    try:
        user = db.query(User).filter(User.email == email).first()
    except OperationalError as e:
        logger.error("[Admin] Database query error: %s", e)
        raise DatastoreUnavailableError()
    if not user:
        raise UserNotFoundError(f"User with email {email} not found")

    now = utcnow()
    expires_at = get_plan_expiry(plan, now)

    user.subscription_plan = plan
    user.subscription_status = ACTIVE_STATUS
    user.subscription_expires_at = expires_at
    user.subscription_purchased_at = now
    user.last_sync_at = now
    try:
        db.commit()
        db.refresh(user)
    except OperationalError as e:
        db.rollback()
        logger.error("[Admin] Premium grant commit failed: %s", e)
        raise DatastoreUnavailableError()

    logger.info(
        "[Admin] Premium access granted to %s: plan=%s expires=%s",
        email,
        plan,
        expires_at.isoformat() if expires_at else "never (lifetime)",
    )
    return user
