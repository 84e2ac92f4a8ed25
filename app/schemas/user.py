# app/schemas/user.py
from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and on disk"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CollegeData(CamelModel):
    department: str
    courses: List[str] = Field(default_factory=list)
    academic_year: str
    semester: str
    advisor: Optional[str] = None
    gpa: Optional[float] = None


class User(CamelModel):
    id: str
    full_name: str
    university_email: str
    password: str
    phone_number: Optional[str] = None
    university_name: Optional[str] = None
    university_id: Optional[str] = None
    program: Optional[str] = None
    year_of_study: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_email_verified: bool = False
    verification_token: Optional[str] = None
    verification_token_expiry: Optional[datetime] = None
    college_data: Optional[CollegeData] = None


class UserUpdate(CamelModel):
    """Partial update: only fields that are set and not None get written"""

    full_name: Optional[str] = None
    university_email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    university_name: Optional[str] = None
    university_id: Optional[str] = None
    program: Optional[str] = None
    year_of_study: Optional[str] = None
    created_at: Optional[datetime] = None
    is_email_verified: Optional[bool] = None
    verification_token: Optional[str] = None
    verification_token_expiry: Optional[datetime] = None
    college_data: Optional[CollegeData] = None


class PublicUser(CamelModel):
    """User as returned by the API (no password, no verification token)"""

    id: str
    full_name: str
    university_email: str
    phone_number: Optional[str] = None
    university_name: Optional[str] = None
    university_id: Optional[str] = None
    program: Optional[str] = None
    year_of_study: Optional[str] = None
    created_at: datetime
    is_email_verified: bool
    college_data: Optional[CollegeData] = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls.model_validate(user.model_dump(exclude={"password", "verification_token", "verification_token_expiry"}))
