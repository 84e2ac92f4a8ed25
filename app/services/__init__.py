# app/services/__init__.py
"""
Import all services for easy access
"""

from app.services import auth_service

# Export services
__all__ = [
    "auth_service"
]
