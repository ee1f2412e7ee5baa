import enum

from sqlalchemy import Column, Integer, String, DateTime, Index
from app.db.base import Base


class EmailSource(str, enum.Enum):
    SIGNUP = "signup"
    LOGIN = "login"


class EmailRecord(Base):
    """
    Admin audit trail of addresses that signed up or logged in.
    One row per (email, user_id); repeat activity overwrites source/timestamp.
    """
    __tablename__ = "email_records"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    source = Column(String, nullable=False, index=True)  # EmailSource value
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index("ix_email_records_email_user_id", "email", "user_id", unique=True),
    )
