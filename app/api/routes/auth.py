from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import AppError
from app.db.session import get_db
from app.dependencies.services import get_auth_service
from app.schemas.auth import LoginRequest, SignupRequest
from app.services.auth_service import AuthService

router = APIRouter()


@router.post("/signup")
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an email/password account.
    The Supabase mirror and email audit entry are best-effort; the response
    carries supabaseUserId = null when mirroring did not happen.
    """
    try:
        result = service.signup(db, request.email, request.password)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return result.model_dump(by_alias=True)


@router.post("/login")
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Log in with email/password.
    Unknown email and wrong password return the same 401 message.
    userData is null when the profile could not be loaded.
    """
    try:
        result = service.login(db, request.email, request.password)
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return result.model_dump(by_alias=True)
