import uuid
import logging
from datetime import datetime, timezone
from typing import Tuple
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from app.database import AccountStore
from app.schemas.auth import SignupRequest, ProfileUpdateRequest
from app.schemas.user import User, UserUpdate
from app.core.security import (
    check_password, create_access_token, generate_verification_token, verification_token_expiry
)

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Expected failure of an account flow, carried to the client as-is"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalize_email(value: str) -> str:
    """Same normalization EmailStr applies at signup; non-emails come back unchanged"""
    try:
        return validate_email(value)[1]
    except PydanticCustomError:
        return value


def register_user(store: AccountStore, request: SignupRequest) -> User:
    """Create an unverified account with a fresh verification token"""
    email = str(request.university_email)
    if store.email_exists(email):
        raise AccountError("Email already registered")

    user = User(
        id=str(uuid.uuid4()),
        full_name=request.full_name.strip(),
        university_email=email,
        password=request.password,
        phone_number=request.phone_number,
        university_name=request.university_name,
        university_id=request.university_id,
        program=request.program,
        year_of_study=request.year_of_study,
        is_email_verified=False,
        verification_token=generate_verification_token(),
        verification_token_expiry=verification_token_expiry(),
    )
    store.add_user(user)

    logger.info(f"✅ User registered: {email}")
    return user


def verify_user_email(store: AccountStore, token: str) -> Tuple[User, str]:
    """Mark the token's owner verified and return it with an access token"""
    user = store.find_user_by_verification_token(token)
    if not user:
        raise AccountError("Invalid verification token")

    if user.is_email_verified:
        return user, create_access_token(user.id)

    expiry = user.verification_token_expiry
    if expiry is None or expiry < datetime.now(timezone.utc):
        raise AccountError("Verification link has expired. Please request a new one.")

    store.update_user(user.id, UserUpdate(is_email_verified=True))
    user = user.model_copy(update={"is_email_verified": True})

    logger.info(f"✅ Email verified for {user.university_email}")
    return user, create_access_token(user.id)


def resend_verification(store: AccountStore, email: str) -> User:
    """Issue a new verification token for an unverified account"""
    user = store.find_user_by_email(normalize_email(email))
    if not user:
        raise AccountError("Account not found", status_code=404)

    if user.is_email_verified:
        raise AccountError("Email is already verified")

    token = generate_verification_token()
    expiry = verification_token_expiry()
    store.update_user(user.id, UserUpdate(verification_token=token, verification_token_expiry=expiry))

    logger.info(f"🔁 New verification token issued for {email}")
    return user.model_copy(update={"verification_token": token, "verification_token_expiry": expiry})


def login_user(store: AccountStore, email_or_username: str, password: str) -> Tuple[User, str]:
    """Login by email or full name"""
    user = store.find_user(email_or_username)
    normalized = normalize_email(email_or_username)
    if not user and normalized != email_or_username:
        user = store.find_user(normalized)

    if not user or not check_password(password, user.password):
        raise AccountError("Invalid email or password", status_code=401)

    if not user.is_email_verified:
        raise AccountError("Please verify your email first", status_code=403)

    return user, create_access_token(user.id)


def get_profile(store: AccountStore, user_id: str) -> User:
    user = store.find_user_by_id(user_id)
    if not user:
        raise AccountError("User not found", status_code=404)
    return user


def update_profile(store: AccountStore, user_id: str, request: ProfileUpdateRequest) -> User:
    """Apply the profile fields present in the request"""
    changes = request.model_dump(exclude_unset=True)
    if not store.update_user(user_id, UserUpdate.model_validate(changes)):
        raise AccountError("User not found", status_code=404)

    return get_profile(store, user_id)
