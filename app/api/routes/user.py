"""
Goal/roadmap state sync for the mobile app, stored in Supabase user_data.
The user must exist in the users table; Supabase failures surface as 502.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import AppError, SupabaseError
from app.db.session import get_db
from app.dependencies.services import get_profile_data_service
from app.schemas.auth import UserData
from app.services.profile_data import SupabaseProfileDataService
from app.services.users import get_user_by_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _existing_user_id(db: Session, user_id: str) -> str:
    try:
        return get_user_by_id(db, user_id).id
    except AppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{user_id}/data")
def sync_user_data(
    user_id: str,
    payload: UserData,
    db: Session = Depends(get_db),
    profile_data: SupabaseProfileDataService = Depends(get_profile_data_service),
):
    """Replace the stored state with the app's copy; lastSyncAt is set server-side."""
    user_id = _existing_user_id(db, user_id)
    try:
        last_sync_at = profile_data.save_user_data(user_id, payload)
    except SupabaseError as e:
        logger.error("[User Sync] Failed to save user data for %s: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to sync user data"
        )
    return {"success": True, "lastSyncAt": last_sync_at}


@router.get("/{user_id}/data")
def get_user_data(
    user_id: str,
    db: Session = Depends(get_db),
    profile_data: SupabaseProfileDataService = Depends(get_profile_data_service),
):
    user_id = _existing_user_id(db, user_id)
    try:
        data = profile_data.get_user_data(user_id)
    except SupabaseError as e:
        logger.error("[User Sync] Failed to load user data for %s: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to retrieve user data"
        )
    return {
        "success": True,
        "userData": data.model_dump(by_alias=True) if data else None,
    }


@router.delete("/{user_id}/data")
def clear_user_data(
    user_id: str,
    db: Session = Depends(get_db),
    profile_data: SupabaseProfileDataService = Depends(get_profile_data_service),
):
    user_id = _existing_user_id(db, user_id)
    try:
        profile_data.delete_user_data(user_id)
    except SupabaseError as e:
        logger.error("[User Sync] Failed to clear user data for %s: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to clear user data"
        )
    return {"success": True, "message": "User data cleared"}
