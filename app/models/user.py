# app/models/user.py
from sqlalchemy import Column, String, Boolean, text
from sqlalchemy.orm import declarative_base

from app.models.types import UTCDateTime, CollegeDataJSON

Base = declarative_base()


class UserRecord(Base):
    __tablename__ = "users"

    # Column names are camelCase on disk
    id = Column("id", String, primary_key=True)
    full_name = Column("fullName", String, nullable=False)
    university_email = Column("universityEmail", String, unique=True, nullable=False)
    password = Column("password", String, nullable=False)

    # PROFILE
    phone_number = Column("phoneNumber", String, nullable=True)
    university_name = Column("universityName", String, nullable=True)
    university_id = Column("universityId", String, nullable=True)
    program = Column("program", String, nullable=True)
    year_of_study = Column("yearOfStudy", String, nullable=True)

    # VERIFICATION
    is_email_verified = Column("isEmailVerified", Boolean, default=False, server_default=text("0"))
    verification_token = Column("verificationToken", String, nullable=True)
    verification_token_expiry = Column("verificationTokenExpiry", UTCDateTime, nullable=True)

    college_data = Column("collegeData", CollegeDataJSON, nullable=True)
    created_at = Column("createdAt", UTCDateTime, server_default=text("CURRENT_TIMESTAMP"))


# Columns added after the first release of the users table, in the order they shipped
USER_COLUMN_MIGRATIONS = [
    ("isEmailVerified", "BOOLEAN DEFAULT 0"),
    ("verificationToken", "TEXT"),
    ("verificationTokenExpiry", "DATETIME"),
    ("collegeData", "TEXT"),
]
