# app/database.py - Account store over a single SQLite file
"""
Durable storage for user accounts.

The store owns one SQLAlchemy engine for the lifetime of the process. The
schema is created on first use and older files are brought up to date by
adding the columns listed in USER_COLUMN_MIGRATIONS. Build one store at
startup, call initialize(), and hand the same instance to every consumer.
"""

import logging
import os
import threading
from pathlib import Path
from typing import List, Optional

from fastapi import Request
from sqlalchemy import create_engine, func, or_, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Base, UserRecord, USER_COLUMN_MIGRATIONS
from app.schemas.user import User, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data") / "users.db"


class StoreUnavailableError(RuntimeError):
    """The persistence layer could not be opened, or was closed"""


class AccountStore:
    """CRUD over the users table"""

    def __init__(self, db_path=DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self._engine: Optional[Engine] = None
        self._lock = threading.Lock()
        self._initialized = False
        self._closed = False
        self._init_error: Optional[Exception] = None

    # ================================
    # LIFECYCLE
    # ================================

    def initialize(self) -> None:
        """Open the database and bring the schema up to date, once"""
        if self._initialized:
            return

        with self._lock:
            if self._closed:
                raise StoreUnavailableError("Account store has been closed")
            if self._initialized:
                return
            if self._init_error is not None:
                raise StoreUnavailableError("Persistence layer unavailable") from self._init_error

            engine = None
            try:
                self._ensure_data_directory()
                engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    connect_args={"check_same_thread": False}
                )
                self._create_schema(engine)
            except (OSError, SQLAlchemyError) as e:
                if engine is not None:
                    engine.dispose()
                self._init_error = e
                logger.error(f"❌ Database initialization failed: {str(e)}")
                raise StoreUnavailableError("Persistence layer unavailable") from e

            self._engine = engine
            self._initialized = True
            logger.info(f"✅ SQLite database initialized at {self.db_path}")

    def close(self) -> None:
        """Release the engine. A closed store is never reopened."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            self._initialized = False
            self._closed = True

    def _ensure_data_directory(self):
        data_dir = self.db_path.parent
        if not data_dir.exists():
            os.makedirs(data_dir, exist_ok=True)
            logger.info(f"📁 Created data directory {data_dir}")

    def _create_schema(self, engine: Engine):
        with engine.begin() as conn:
            Base.metadata.create_all(bind=conn)

            rows = conn.execute(text("PRAGMA table_info(users)")).fetchall()
            columns = [row[1] for row in rows]

            for name, ddl in USER_COLUMN_MIGRATIONS:
                if name not in columns:
                    conn.execute(text(f"ALTER TABLE users ADD COLUMN {name} {ddl}"))
                    logger.info(f"   - Added {name} column")

    def _session(self) -> Session:
        if self._closed:
            raise StoreUnavailableError("Account store has been closed")
        self.initialize()
        with self._lock:
            engine = self._engine
        if engine is None:
            raise StoreUnavailableError("Account store has been closed")
        return Session(engine)

    # ================================
    # WRITES
    # ================================

    def add_user(self, user: User) -> None:
        """Insert a new user. Raises IntegrityError if the email is taken."""
        with self._session() as db:
            db.add(UserRecord(**user.model_dump()))
            db.commit()

    def update_user(self, user_id: str, updates: UserUpdate) -> bool:
        """
        Write the fields that are set on `updates` and not None.

        Returns False when no row has `user_id`. Nothing is executed when
        no field applies; that case returns True.
        """
        values = {
            key: value
            for key, value in updates.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not values:
            return True

        with self._session() as db:
            matched = db.query(UserRecord).filter(UserRecord.id == user_id).update(
                values, synchronize_session=False
            )
            db.commit()

        if not matched:
            logger.warning(f"⚠️ update_user matched no row for id {user_id}")
        return bool(matched)

    def clear_all_users(self) -> int:
        with self._session() as db:
            deleted = db.query(UserRecord).delete()
            db.commit()

        logger.info(f"🧹 All users cleared from database ({deleted} removed)")
        return deleted

    # ================================
    # READS
    # ================================

    def find_user(self, email_or_username: str) -> Optional[User]:
        """Exact email or case-insensitive full name"""
        with self._session() as db:
            record = db.query(UserRecord).filter(
                or_(
                    UserRecord.university_email == email_or_username,
                    func.lower(UserRecord.full_name) == func.lower(email_or_username)
                )
            ).first()
            return self._to_user(record) if record else None

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        with self._session() as db:
            record = db.get(UserRecord, user_id)
            return self._to_user(record) if record else None

    def find_user_by_verification_token(self, token: str) -> Optional[User]:
        """Does not look at the expiry; callers compare it themselves"""
        with self._session() as db:
            record = db.query(UserRecord).filter(UserRecord.verification_token == token).first()
            return self._to_user(record) if record else None

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self._session() as db:
            record = db.query(UserRecord).filter(UserRecord.university_email == email).first()
            return self._to_user(record) if record else None

    def email_exists(self, email: str) -> bool:
        with self._session() as db:
            count = db.query(UserRecord).filter(UserRecord.university_email == email).count()
            return count > 0

    def get_all_users(self) -> List[User]:
        """Newest first"""
        with self._session() as db:
            # julianday() reads both ISO text and CURRENT_TIMESTAMP text
            records = db.query(UserRecord).order_by(
                func.julianday(UserRecord.created_at).desc(),
                UserRecord.created_at.desc()
            ).all()
            return [self._to_user(record) for record in records]

    def table_columns(self) -> List[str]:
        """Column names of the users table, in table order"""
        with self._session() as db:
            rows = db.execute(text("PRAGMA table_info(users)")).fetchall()
            return [row[1] for row in rows]

    @staticmethod
    def _to_user(record: UserRecord) -> User:
        return User.model_validate({
            "id": record.id,
            "full_name": record.full_name,
            "university_email": record.university_email,
            "password": record.password,
            "phone_number": record.phone_number,
            "university_name": record.university_name,
            "university_id": record.university_id,
            "program": record.program,
            "year_of_study": record.year_of_study,
            "created_at": record.created_at,
            "is_email_verified": bool(record.is_email_verified),
            "verification_token": record.verification_token,
            "verification_token_expiry": record.verification_token_expiry,
            "college_data": record.college_data,
        })


def get_store(request: Request) -> AccountStore:
    """FastAPI dependency: the store created by the app lifespan"""
    return request.app.state.store
