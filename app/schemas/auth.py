# app/schemas/auth.py - Request and response bodies for the auth and profile routes
from typing import List, Optional
from pydantic import EmailStr, Field, model_validator

from app.schemas.user import CamelModel, CollegeData, PublicUser


class SignupRequest(CamelModel):
    full_name: str = Field(min_length=1)
    university_email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    phone_number: Optional[str] = None
    university_name: Optional[str] = None
    university_id: Optional[str] = None
    program: Optional[str] = None
    year_of_study: Optional[str] = None

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelModel):
    email_or_username: str
    password: str


class VerifyEmailRequest(CamelModel):
    token: str


class ResendVerificationRequest(CamelModel):
    email: EmailStr


class ProfileUpdateRequest(CamelModel):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    university_name: Optional[str] = None
    university_id: Optional[str] = None
    program: Optional[str] = None
    year_of_study: Optional[str] = None
    college_data: Optional[CollegeData] = None


class AuthResponse(CamelModel):
    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[PublicUser] = None


class UserListResponse(CamelModel):
    success: bool
    count: int
    users: List[PublicUser]
