import itertools
import os
import tempfile

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_roleplay.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["PASSWORD_RESET_TOKEN_EXPIRE_MINUTES"] = "120"
for _smtp_var in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASSWORD"):
    os.environ[_smtp_var] = ""

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from app.core.security import get_password_hash
from app.db.models.user import User as UserModel
from app.main import app
import app.repositories.api_token as api_token_repo

DEFAULT_PASSWORD = "12345678"

GROUP_PAYLOAD = {
    "name": "test",
    "description": "test",
    "schedule": "test",
    "location": "test",
    "chronic": "test",
}


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        # Clean up - remove test database file and WAL files
        for suffix in ("", "-wal", "-shm"):
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def create_user(db: Session):
    """Factory creating a fresh user per call; returns its data and plaintext password."""
    counter = itertools.count(1)

    def _create_user(
        email: str | None = None,
        username: str | None = None,
        password: str = DEFAULT_PASSWORD,
        avatar: str | None = "https://example.com/avatar.png",
    ) -> dict:
        n = next(counter)
        user = UserModel(
            email=email or f"player{n}@example.com",
            username=username or f"player{n}",
            password_hash=get_password_hash(password),
            avatar=avatar,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return {
            "id": user.id,
            "email": user.email,
            "username": user.username,
            "password": password,
        }

    return _create_user


@pytest.fixture(scope="function")
def login(db: Session):
    """Open a session for a user dict and return the Authorization headers."""

    def _login(user: dict) -> dict[str, str]:
        token = api_token_repo.create_token(db, user["id"])
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture(scope="function")
def user_dict(create_user) -> dict:
    return create_user()


@pytest.fixture(scope="function")
def user_headers(login, user_dict: dict) -> dict[str, str]:
    return login(user_dict)


@pytest.fixture(scope="function")
def create_group(client):
    """Create a group through the API as the user behind ``headers``."""

    def _create_group(headers: dict[str, str], **fields) -> dict:
        response = client.post(
            "/api/v1/groups", json={**GROUP_PAYLOAD, **fields}, headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create_group
