# app/utils.py - Shared route dependencies and error translation
import logging
from fastapi import HTTPException, Depends, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import settings
from app.core.security import verify_token
from app.database import StoreUnavailableError
from app.services.auth_service import AccountError

# Setup logging
logger = logging.getLogger(__name__)

# Bearer scheme for token authentication
security = HTTPBearer()


# ================================
# AUTHENTICATION UTILITIES
# ================================

def get_current_user_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Extract the user id from the bearer JWT"""
    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user_id


async def verify_admin_key(x_api_key: str = Header(None)):
    """Verify the x-api-key header against ADMIN_API_KEY"""
    if not settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Admin API is disabled")

    if not x_api_key:
        raise HTTPException(status_code=401, detail="x-api-key header is required")

    if x_api_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")

    return x_api_key


# ================================
# ERROR TRANSLATION
# ================================

def to_http_exception(exc: Exception, action: str) -> HTTPException:
    """Map a service or store failure onto an HTTP error"""
    if isinstance(exc, AccountError):
        return HTTPException(exc.status_code, exc.message)

    if isinstance(exc, StoreUnavailableError):
        logger.error(f"❌ {action} failed, store unavailable: {str(exc)}")
        return HTTPException(503, "Service temporarily unavailable")

    logger.error(f"❌ {action} error: {str(exc)}")
    return HTTPException(500, f"{action} failed: {str(exc)}" if settings.debug else f"{action} failed")
