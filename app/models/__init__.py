from app.models.user import User
from app.models.email_record import EmailRecord, EmailSource

__all__ = [
    "User",
    "EmailRecord",
    "EmailSource",
]
