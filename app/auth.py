# app/auth.py - Signup, email verification and login
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks
import logging

from app.database import AccountStore, get_store
from app.email import send_verification_email
from app.schemas.auth import (
    SignupRequest, LoginRequest, VerifyEmailRequest, ResendVerificationRequest, AuthResponse
)
from app.schemas.user import PublicUser
from app.services import auth_service
from app.utils import to_http_exception

router = APIRouter()
logger = logging.getLogger(__name__)


async def send_verification_background(email: str, full_name: str, token: str):
    """Send verification email in background"""
    success = await send_verification_email(email, full_name, token)
    if not success:
        logger.error(f"❌ Verification email not delivered to {email}")


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
        request: SignupRequest,
        background_tasks: BackgroundTasks,
        store: AccountStore = Depends(get_store)
):
    """Register new user"""
    try:
        user = auth_service.register_user(store, request)
        background_tasks.add_task(
            send_verification_background, user.university_email, user.full_name, user.verification_token
        )

        return AuthResponse(
            success=True,
            message="Registration successful. Please verify your email.",
            user=PublicUser.from_user(user)
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Registration")


@router.post("/verify-email", response_model=AuthResponse)
async def verify_email(request: VerifyEmailRequest, store: AccountStore = Depends(get_store)):
    """Verify email with the token from the link"""
    try:
        user, token = auth_service.verify_user_email(store, request.token)
        return AuthResponse(
            success=True,
            message="Email verified successfully",
            token=token,
            user=PublicUser.from_user(user)
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Email verification")


@router.post("/resend-verification", response_model=AuthResponse)
async def resend_verification(
        request: ResendVerificationRequest,
        background_tasks: BackgroundTasks,
        store: AccountStore = Depends(get_store)
):
    """Send a new verification link"""
    try:
        user = auth_service.resend_verification(store, str(request.email))
        background_tasks.add_task(
            send_verification_background, user.university_email, user.full_name, user.verification_token
        )
        return AuthResponse(success=True, message="Verification email sent")

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Resend verification")


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, store: AccountStore = Depends(get_store)):
    """User login with email or full name"""
    try:
        user, token = auth_service.login_user(store, request.email_or_username, request.password)
        return AuthResponse(
            success=True,
            message="Login successful",
            token=token,
            user=PublicUser.from_user(user)
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "Login")
