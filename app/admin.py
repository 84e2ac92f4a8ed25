# app/admin.py - Administrative user listing and bulk clear
from fastapi import APIRouter, Depends
import logging

from app.database import AccountStore, get_store
from app.schemas.auth import UserListResponse
from app.schemas.user import PublicUser
from app.utils import verify_admin_key, to_http_exception

router = APIRouter(dependencies=[Depends(verify_admin_key)])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=UserListResponse)
async def list_users(store: AccountStore = Depends(get_store)):
    """All users, newest first"""
    try:
        users = store.get_all_users()
    except Exception as e:
        raise to_http_exception(e, "User listing")

    return UserListResponse(
        success=True,
        count=len(users),
        users=[PublicUser.from_user(user) for user in users]
    )


@router.delete("/users")
async def clear_users(store: AccountStore = Depends(get_store)):
    """Delete every user"""
    try:
        deleted = store.clear_all_users()
    except Exception as e:
        raise to_http_exception(e, "User clear")

    logger.warning(f"⚠️ Admin cleared {deleted} users")
    return {"success": True, "deleted": deleted}
