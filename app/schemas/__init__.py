# app/schemas/__init__.py
from app.schemas.user import CollegeData, User, UserUpdate, PublicUser

__all__ = [
    "CollegeData",
    "User",
    "UserUpdate",
    "PublicUser"
]
