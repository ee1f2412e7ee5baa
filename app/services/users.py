import logging

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.errors import DatastoreUnavailableError, UserNotFoundError
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: str) -> User:
    try:
        user = db.query(User).filter(User.id == user_id).first()
    except OperationalError as e:
        logger.error("[User] Database query error: %s", e)
        raise DatastoreUnavailableError()
    if not user:
        raise UserNotFoundError()
    return user
