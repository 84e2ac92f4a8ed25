import secrets
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from app.config import settings
import logging

logger = logging.getLogger(__name__)


def check_password(plain_password: str, stored_password: str) -> bool:
    """Compare a login password with the stored one"""
    # Stored as received at signup; see DESIGN.md before changing the format
    return secrets.compare_digest(plain_password.encode("utf-8"), stored_password.encode("utf-8"))


def generate_verification_token() -> str:
    """URL-safe random token for the email verification link"""
    return secrets.token_urlsafe(32)


def verification_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=settings.verification_token_expire_hours)


def create_access_token(user_id: str) -> str:
    """Create JWT token for a user id"""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.access_token_expire_days)
    issued_at = datetime.now(timezone.utc)

    to_encode = {
        "sub": user_id,
        "exp": expire,
        "iat": issued_at
    }

    token = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    logger.info(f"🔑 JWT token created for user {user_id}, expires at {expire}")

    return token


def verify_token(token: str) -> str | None:
    """Verify JWT token and return the user id"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])

        user_id = payload.get("sub")
        exp = payload.get("exp")

        if exp and datetime.now(timezone.utc).timestamp() > exp:
            logger.error(f"❌ Token has expired for user {user_id}")
            return None

        if not user_id:
            logger.error("❌ No subject found in token payload")
            return None

        return user_id

    except JWTError as e:
        logger.error(f"❌ JWT Error during token verification: {str(e)}")
        return None
