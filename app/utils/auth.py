import hashlib
import secrets
import time

from passlib.context import CryptContext

from app.core.config import BCRYPT_ROUNDS

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a mismatch or for a stored value passlib cannot identify."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def generate_session_token(user_id: str) -> str:
    """
    Opaque session token: sha256 of user id, current time (ms) and a random value.
    Nothing is stored server-side and there is no way to verify it later.
    """
    payload = f"{user_id}-{int(time.time() * 1000)}-{secrets.token_hex(8)}"
    return hashlib.sha256(payload.encode()).hexdigest()
