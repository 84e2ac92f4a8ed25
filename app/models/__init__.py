# app/models/__init__.py
"""
Import all models to ensure they are registered with SQLAlchemy
"""

from app.models.user import Base, UserRecord, USER_COLUMN_MIGRATIONS

# Export all models
__all__ = [
    "Base",
    "UserRecord",
    "USER_COLUMN_MIGRATIONS"
]
