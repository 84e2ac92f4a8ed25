# app/models/types.py
"""
Column types for values SQLite can only hold as text.
"""

from datetime import datetime, timezone
from sqlalchemy import String, Text
from sqlalchemy.types import TypeDecorator

from app.schemas.user import CollegeData


class UTCDateTime(TypeDecorator):
    """ISO 8601 UTC text with microseconds, read back as an aware datetime"""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    def process_result_value(self, value, dialect):
        if not value:
            return None
        # Rows written by CURRENT_TIMESTAMP carry no offset and are UTC
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)


class CollegeDataJSON(TypeDecorator):
    """CollegeData stored as a JSON document"""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return CollegeData.model_validate(value).model_dump_json(by_alias=True)

    def process_result_value(self, value, dialect):
        if not value:
            return None
        return CollegeData.model_validate_json(value)
