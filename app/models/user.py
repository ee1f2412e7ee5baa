import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.core.plans import FREE_PLAN, INACTIVE_STATUS
from app.db.base import Base


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)  # NULL for accounts created outside email/password signup
    supabase_id = Column(String, unique=True, index=True, nullable=True)  # Mirrored Supabase Auth user ID
    subscription_plan = Column(String, default=FREE_PLAN, nullable=False)  # free | monthly | annual | lifetime
    subscription_status = Column(String, default=INACTIVE_STATUS, nullable=False)
    subscription_expires_at = Column(DateTime(timezone=True), nullable=True)  # NULL = never (lifetime) or no plan
    subscription_purchased_at = Column(DateTime(timezone=True), nullable=True)
    last_sync_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
