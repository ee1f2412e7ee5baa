"""
Email/password signup and login.

The users table is the source of truth. Supabase mirroring, the email audit log
and the profile read are best-effort: their failures are logged and never
change the result (and never roll back the user row).
"""
import logging

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.errors import (
    DatastoreUnavailableError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
)
from app.models.email_record import EmailSource
from app.models.user import User
from app.schemas.auth import LoginResponse, SignupResponse, UserSummary
from app.services.email_audit import EmailAuditLog
from app.services.profile_data import SupabaseProfileDataService
from app.services.supabase_identity import SupabaseIdentityMirror
from app.utils.auth import generate_session_token, hash_password, verify_password
from app.utils.best_effort import best_effort
from app.utils.dates import isoformat_utc

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def user_summary(user: User) -> UserSummary:
    return UserSummary(id=user.id, email=user.email, created_at=isoformat_utc(user.created_at))


class AuthService:
    def __init__(
        self,
        identity_mirror: SupabaseIdentityMirror,
        profile_data: SupabaseProfileDataService,
        email_audit: EmailAuditLog,
    ):
        self.identity_mirror = identity_mirror
        self.profile_data = profile_data
        self.email_audit = email_audit

    def _find_user(self, db: Session, email: str) -> User:
        try:
            return db.query(User).filter(User.email == email).first()
        except OperationalError as e:
            logger.error("[Auth] Database query error: %s", e)
            raise DatastoreUnavailableError()

    def signup(self, db: Session, email: str, password: str) -> SignupResponse:
        email = normalize_email(email)

        if self._find_user(db, email):
            raise EmailAlreadyRegisteredError()

        user = User(email=email, hashed_password=hash_password(password))
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            raise EmailAlreadyRegisteredError()
        except OperationalError as e:
            db.rollback()
            logger.error("[Signup] User creation error: %s", e)
            raise DatastoreUnavailableError()

        summary = user_summary(user)
        logger.info("[Signup] Created user %s", user.id)

        supabase_user_id = None
        mirrored = best_effort("Signup", self.identity_mirror.create_user, email, password)
        if mirrored.ok:
            linked = best_effort("Signup", self._link_supabase_id, db, user, mirrored.value)
            if linked.ok:
                supabase_user_id = mirrored.value

        # Audit outcome deliberately ignored
        best_effort("Signup", self.email_audit.add_email, email, summary.id, EmailSource.SIGNUP.value)

        return SignupResponse(
            user=summary,
            token=generate_session_token(summary.id),
            supabase_user_id=supabase_user_id,
        )

    @staticmethod
    def _link_supabase_id(db: Session, user: User, supabase_id: str) -> None:
        try:
            user.supabase_id = supabase_id
            db.commit()
        except Exception:
            db.rollback()
            raise

    def login(self, db: Session, email: str, password: str) -> LoginResponse:
        email = normalize_email(email)

        user = self._find_user(db, email)
        if not user or not user.hashed_password:
            raise InvalidCredentialsError()
        if not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError()

        summary = user_summary(user)
        token = generate_session_token(user.id)

        best_effort("Login", self.email_audit.add_email, email, user.id, EmailSource.LOGIN.value)

        profile = best_effort("Login", self.profile_data.get_user_data, user.id)
        user_data = profile.value if profile.ok else None

        return LoginResponse(user=summary, token=token, user_data=user_data)
