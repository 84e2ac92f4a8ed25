import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from app.config import settings
from app.database import AccountStore
from app.main import create_app
from app.schemas.user import CollegeData, User

ADMIN_KEY = "test-admin-key"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "users.db"


@pytest.fixture
def store(db_path):
    """A fresh store on a temporary database file, closed after the test"""
    account_store = AccountStore(db_path)
    yield account_store
    account_store.close()


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", ADMIN_KEY)
    with TestClient(create_app(store)) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    """Build a User; every call gets a distinct id and email unless given"""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"user-{n}",
            "full_name": f"Student {n}",
            "university_email": f"student{n}@snuchennai.edu.in",
            "password": "correct horse battery",
            "created_at": datetime(2024, 9, 1, 8, 30, tzinfo=timezone.utc) + timedelta(minutes=n),
        }
        fields.update(overrides)
        return User(**fields)

    return _make


@pytest.fixture
def college_data():
    return CollegeData(
        department="Computer Science",
        courses=["Data Structures", "Operating Systems", "Linear Algebra"],
        academic_year="2024-2025",
        semester="Fall",
        advisor="Dr. Rao",
        gpa=8.75,
    )
