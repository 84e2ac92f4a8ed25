import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError

from app.database import AccountStore, StoreUnavailableError
from app.schemas.user import UserUpdate


# ================================
# INITIALIZATION
# ================================

def test_initialize_creates_directory_and_schema(store, db_path):
    assert not db_path.parent.exists()

    store.initialize()

    assert db_path.exists()
    assert store.table_columns() == [
        "id", "fullName", "universityEmail", "password", "phoneNumber",
        "universityName", "universityId", "program", "yearOfStudy",
        "isEmailVerified", "verificationToken", "verificationTokenExpiry",
        "collegeData", "createdAt",
    ]


def test_initialize_twice_is_a_noop(store, monkeypatch):
    calls = []
    original = AccountStore._create_schema

    def counting(self, engine):
        calls.append(engine)
        return original(self, engine)

    monkeypatch.setattr(AccountStore, "_create_schema", counting)

    store.initialize()
    store.initialize()
    store.email_exists("nobody@example.com")

    assert len(calls) == 1


def test_concurrent_first_calls_create_schema_once(store, monkeypatch):
    calls = []
    original = AccountStore._create_schema
    barrier = threading.Barrier(8)

    def counting(self, engine):
        calls.append(engine)
        return original(self, engine)

    monkeypatch.setattr(AccountStore, "_create_schema", counting)

    def first_call(_):
        barrier.wait()
        return store.email_exists("nobody@example.com")

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(first_call, range(8)))

    assert results == [False] * 8
    assert len(calls) == 1


def test_existing_database_gets_missing_columns(db_path):
    db_path.parent.mkdir(parents=True)
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(text("""
            CREATE TABLE users (
                id TEXT PRIMARY KEY,
                fullName TEXT NOT NULL,
                universityEmail TEXT UNIQUE NOT NULL,
                password TEXT NOT NULL,
                phoneNumber TEXT,
                universityName TEXT,
                universityId TEXT,
                program TEXT,
                yearOfStudy TEXT,
                createdAt DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """))
        conn.execute(text(
            "INSERT INTO users (id, fullName, universityEmail, password) "
            "VALUES ('legacy-1', 'Old Timer', 'old@snuchennai.edu.in', 'secret123')"
        ))
    engine.dispose()

    store = AccountStore(db_path)
    try:
        columns = store.table_columns()
        for name in ("isEmailVerified", "verificationToken", "verificationTokenExpiry", "collegeData"):
            assert name in columns

        user = store.find_user_by_id("legacy-1")
        assert user.is_email_verified is False
        assert user.college_data is None
        assert user.verification_token_expiry is None
        assert user.created_at.tzinfo is not None
    finally:
        store.close()

    # A second open of the migrated file adds nothing and does not fail
    reopened = AccountStore(db_path)
    try:
        reopened.initialize()
        assert reopened.table_columns() == columns
    finally:
        reopened.close()


def test_initialization_failure_is_sticky(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    store = AccountStore(blocker / "users.db")

    with pytest.raises(StoreUnavailableError):
        store.initialize()
    with pytest.raises(StoreUnavailableError):
        store.find_user_by_id("anything")


def test_close_without_open_is_safe(store):
    store.close()
    store.close()


def test_closed_store_is_not_reopened(store, make_user):
    store.add_user(make_user())
    store.close()

    with pytest.raises(StoreUnavailableError):
        store.get_all_users()
    with pytest.raises(StoreUnavailableError):
        store.initialize()


# ================================
# WRITES AND READS
# ================================

def test_add_then_find_by_id_round_trips_every_field(store, make_user, college_data):
    user = make_user(
        phone_number="+91 98765 43210",
        university_name="Shiv Nadar University Chennai",
        university_id="21CS1042",
        program="B.Tech CSE",
        year_of_study="3",
        is_email_verified=True,
        verification_token="tok-123",
        verification_token_expiry=datetime(2024, 9, 2, 8, 30, 15, 123456, tzinfo=timezone.utc),
        college_data=college_data,
    )

    store.add_user(user)

    assert store.find_user_by_id(user.id) == user


def test_round_trip_with_optional_fields_absent(store, make_user):
    user = make_user()
    store.add_user(user)

    found = store.find_user_by_id(user.id)
    assert found == user
    assert found.college_data is None
    assert found.is_email_verified is False


def test_non_utc_timestamps_come_back_as_utc(store, make_user):
    ist = timezone(timedelta(hours=5, minutes=30))
    user = make_user(created_at=datetime(2024, 9, 1, 14, 0, tzinfo=ist))
    store.add_user(user)

    found = store.find_user_by_id(user.id)
    assert found.created_at == user.created_at
    assert found.created_at.utcoffset() == timedelta(0)


def test_duplicate_email_is_rejected(store, make_user):
    first = make_user(university_email="same@snuchennai.edu.in")
    store.add_user(first)
    assert store.email_exists("same@snuchennai.edu.in")

    with pytest.raises(IntegrityError):
        store.add_user(make_user(university_email="same@snuchennai.edu.in"))

    assert len(store.get_all_users()) == 1


def test_email_exists_false_for_unknown(store):
    assert store.email_exists("ghost@snuchennai.edu.in") is False


def test_find_user_by_email_or_name(store, make_user):
    user = make_user(full_name="Aanya Sharma", university_email="aanya@snuchennai.edu.in")
    store.add_user(user)

    assert store.find_user("aanya@snuchennai.edu.in").id == user.id
    assert store.find_user("aanya sharma").id == user.id
    assert store.find_user("AANYA SHARMA").id == user.id
    assert store.find_user("AANYA@snuchennai.edu.in") is None
    assert store.find_user("Someone Else") is None


def test_find_user_by_id_missing(store):
    assert store.find_user_by_id("missing") is None


def test_find_user_by_verification_token(store, make_user):
    expired = datetime(2000, 1, 1, tzinfo=timezone.utc)
    user = make_user(verification_token="abc", verification_token_expiry=expired)
    store.add_user(user)

    # Expiry is not checked by the lookup
    assert store.find_user_by_verification_token("abc").id == user.id
    assert store.find_user_by_verification_token("does-not-exist") is None


def test_update_changes_only_named_fields(store, make_user):
    user = make_user(verification_token="keep-me")
    store.add_user(user)

    assert store.update_user(user.id, UserUpdate(is_email_verified=True)) is True

    found = store.find_user_by_id(user.id)
    assert found.is_email_verified is True
    assert found.verification_token == "keep-me"
    assert found.full_name == user.full_name
    assert found.created_at == user.created_at


def test_update_skips_fields_set_to_none(store, make_user):
    user = make_user(program="B.Tech CSE", verification_token="tok")
    store.add_user(user)

    store.update_user(user.id, UserUpdate(program=None, verification_token=None, year_of_study="2"))

    found = store.find_user_by_id(user.id)
    assert found.program == "B.Tech CSE"
    assert found.verification_token == "tok"
    assert found.year_of_study == "2"


def test_update_encodes_college_data_and_expiry(store, make_user, college_data):
    user = make_user()
    store.add_user(user)
    expiry = datetime(2030, 5, 17, 12, 0, 0, 500, tzinfo=timezone.utc)

    store.update_user(user.id, UserUpdate(college_data=college_data, verification_token_expiry=expiry))

    found = store.find_user_by_id(user.id)
    assert found.college_data == college_data
    assert found.college_data.courses == ["Data Structures", "Operating Systems", "Linear Algebra"]
    assert found.verification_token_expiry == expiry


def test_empty_update_executes_nothing(store, make_user, monkeypatch):
    store.add_user(make_user())

    def no_session():
        raise AssertionError("no statement expected")

    monkeypatch.setattr(store, "_session", no_session)
    assert store.update_user("user-1", UserUpdate()) is True


def test_update_unknown_id_reports_no_match(store):
    assert store.update_user("missing", UserUpdate(full_name="Nobody")) is False


def test_get_all_users_newest_first(store, make_user):
    base = datetime(2024, 9, 1, tzinfo=timezone.utc)
    a = make_user(full_name="A", created_at=base)
    b = make_user(full_name="B", created_at=base + timedelta(seconds=1))
    c = make_user(full_name="C", created_at=base + timedelta(days=1))
    for user in (a, b, c):
        store.add_user(user)

    assert [user.full_name for user in store.get_all_users()] == ["C", "B", "A"]


def test_clear_all_users(store, make_user):
    store.add_user(make_user())
    store.add_user(make_user())

    assert store.clear_all_users() == 2
    assert store.get_all_users() == []


def test_stored_representations(store, make_user, college_data, db_path):
    user = make_user(is_email_verified=True, college_data=college_data)
    store.add_user(user)

    engine = create_engine(f"sqlite:///{db_path}")
    with engine.connect() as conn:
        row = conn.execute(text(
            "SELECT isEmailVerified, createdAt, collegeData FROM users WHERE id = :id"
        ), {"id": user.id}).one()
    engine.dispose()

    assert row[0] == 1
    assert row[1] == "2024-09-01T08:31:00.000000+00:00"
    assert '"academicYear":"2024-2025"' in row[2]


def test_get_all_users_orders_current_timestamp_rows_by_time(store, make_user, db_path):
    store.initialize()
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO users (id, fullName, universityEmail, password, createdAt) "
            "VALUES ('legacy-evening', 'Evening', 'evening@snuchennai.edu.in', 'pw', '2024-09-01 20:00:00')"
        ))
    engine.dispose()

    store.add_user(make_user(full_name="Morning", created_at=datetime(2024, 9, 1, 9, 0, tzinfo=timezone.utc)))
    store.add_user(make_user(full_name="Next Day", created_at=datetime(2024, 9, 2, 7, 0, tzinfo=timezone.utc)))

    assert [user.full_name for user in store.get_all_users()] == ["Next Day", "Evening", "Morning"]


def test_find_user_by_email_ignores_full_name(store, make_user):
    owner = make_user(university_email="ann@snuchennai.edu.in")
    namesake = make_user(full_name="ann@snuchennai.edu.in")
    store.add_user(namesake)
    store.add_user(owner)

    assert store.find_user_by_email("ann@snuchennai.edu.in").id == owner.id
    assert store.find_user_by_email("nobody@snuchennai.edu.in") is None


def test_failed_initialization_disposes_engine(store, monkeypatch):
    disposed = []
    real_dispose = Engine.dispose

    def tracking_dispose(self, *args, **kwargs):
        disposed.append(self)
        return real_dispose(self, *args, **kwargs)

    def broken_schema(self, engine):
        raise OperationalError("CREATE TABLE users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Engine, "dispose", tracking_dispose)
    monkeypatch.setattr(AccountStore, "_create_schema", broken_schema)

    with pytest.raises(StoreUnavailableError):
        store.initialize()

    assert len(disposed) == 1


def test_close_during_operation_raises_store_unavailable(store, monkeypatch):
    real_initialize = store.initialize

    def initialize_then_close():
        real_initialize()
        store.close()

    monkeypatch.setattr(store, "initialize", initialize_then_close)

    with pytest.raises(StoreUnavailableError):
        store.get_all_users()
