"""
Application-scoped services. Built once in the startup hook, kept on
app.state, and handed to routes through the getters below so tests can swap
them with app.dependency_overrides.
"""
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from app.core import config
from app.services.auth_service import AuthService
from app.services.email_audit import EmailAuditLog
from app.services.profile_data import SupabaseProfileDataService
from app.services.supabase_identity import SupabaseIdentityMirror


@dataclass
class ServiceContainer:
    auth: AuthService
    email_audit: EmailAuditLog
    profile_data: SupabaseProfileDataService


def build_services(session_factory: sessionmaker) -> ServiceContainer:
    email_audit = EmailAuditLog(session_factory)
    identity_mirror = SupabaseIdentityMirror(
        config.SUPABASE_URL,
        config.SUPABASE_SERVICE_ROLE_KEY,
        timeout=config.SUPABASE_TIMEOUT_SECONDS,
    )
    profile_data = SupabaseProfileDataService(
        config.SUPABASE_URL,
        config.SUPABASE_SERVICE_ROLE_KEY,
        timeout=config.SUPABASE_TIMEOUT_SECONDS,
    )
    return ServiceContainer(
        auth=AuthService(identity_mirror, profile_data, email_audit),
        email_audit=email_audit,
        profile_data=profile_data,
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_auth_service(request: Request) -> AuthService:
    return get_services(request).auth


def get_email_audit_log(request: Request) -> EmailAuditLog:
    return get_services(request).email_audit


def get_profile_data_service(request: Request) -> SupabaseProfileDataService:
    return get_services(request).profile_data
