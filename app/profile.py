# app/profile.py - Profile of the signed-in user
from fastapi import APIRouter, Depends, HTTPException

from app.database import AccountStore, get_store
from app.schemas.auth import AuthResponse, ProfileUpdateRequest
from app.schemas.user import PublicUser
from app.services import auth_service
from app.utils import get_current_user_id, to_http_exception

router = APIRouter()


@router.get("", response_model=AuthResponse)
async def get_profile(
        user_id: str = Depends(get_current_user_id),
        store: AccountStore = Depends(get_store)
):
    """Get user profile"""
    try:
        user = auth_service.get_profile(store, user_id)
        return AuthResponse(success=True, message="Profile loaded", user=PublicUser.from_user(user))

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Profile lookup")


@router.patch("", response_model=AuthResponse)
async def update_profile(
        request: ProfileUpdateRequest,
        user_id: str = Depends(get_current_user_id),
        store: AccountStore = Depends(get_store)
):
    """Update the fields present in the body"""
    try:
        user = auth_service.update_profile(store, user_id, request)
        return AuthResponse(success=True, message="Profile updated", user=PublicUser.from_user(user))

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Profile update")
