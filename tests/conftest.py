import os

# Must be set before anything under app/ is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_API_KEY"] = ""
os.environ["REVENUECAT_WEBHOOK_AUTH"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.errors import SupabaseError
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.dependencies.services import (
    get_auth_service,
    get_email_audit_log,
    get_profile_data_service,
)
from app.main import app
from app.schemas.auth import UserData
from app.services.auth_service import AuthService
from app.services.email_audit import EmailAuditLog


class FakeIdentityMirror:
    def __init__(self):
        self.created = []
        self.fail_with = None

    def create_user(self, email, password):
        if self.fail_with:
            raise self.fail_with
        supabase_id = f"sb-{len(self.created) + 1}"
        self.created.append((email, supabase_id))
        return supabase_id


class FakeProfileData:
    def __init__(self):
        self.rows = {}
        self.fail_with = None
        self.requested = []

    def get_user_data(self, user_id):
        self.requested.append(user_id)
        if self.fail_with:
            raise self.fail_with
        return self.rows.get(user_id)

    def save_user_data(self, user_id, data):
        if self.fail_with:
            raise self.fail_with
        synced_at = "2026-10-01T10:00:00+00:00"
        self.rows[user_id] = data.model_copy(update={"last_sync_at": synced_at})
        return synced_at

    def delete_user_data(self, user_id):
        if self.fail_with:
            raise self.fail_with
        self.rows.pop(user_id, None)


class BrokenAuditLog:
    def add_email(self, email, user_id, source):
        raise RuntimeError("audit table unavailable")


@pytest.fixture
def db_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(db_tables):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def audit_log(db_tables):
    return EmailAuditLog(SessionLocal)


@pytest.fixture
def identity_mirror():
    return FakeIdentityMirror()


@pytest.fixture
def profile_data():
    return FakeProfileData()


@pytest.fixture
def auth_service(identity_mirror, profile_data, audit_log):
    return AuthService(identity_mirror, profile_data, audit_log)


@pytest.fixture
def client(auth_service, audit_log, profile_data):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_email_audit_log] = lambda: audit_log
    app.dependency_overrides[get_profile_data_service] = lambda: profile_data
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def broken_audit_log():
    return BrokenAuditLog()


@pytest.fixture
def sample_user_data():
    return UserData(goal="Run a marathon", timeline="6 months", completed_tasks=["t1"])


@pytest.fixture
def supabase_down():
    return SupabaseError("Supabase request failed: connection refused")
