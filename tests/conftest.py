"""
Pytest configuration.

Every test gets its own in-memory SQLite database and a FastAPI TestClient
whose session and credential validator dependencies point at it. Access
tokens are HS256 JWTs signed with a test secret.
"""

import os
from datetime import datetime, timedelta, timezone

# Set environment variables before the application modules read them
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["VAPI_API_KEY"] = "test-vapi-secret"
os.environ["APP_TIMEZONE"] = "Europe/Berlin"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
for _name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER"):
    os.environ.pop(_name, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from zimmr.auth import JwtCredentialValidator, get_credential_validator  # noqa: E402
from zimmr.database import Base, get_db  # noqa: E402
from zimmr.main import app  # noqa: E402

TEST_JWT_SECRET = "test-jwt-secret"
VAPI_HEADERS = {"x-vapi-secret": "test-vapi-secret"}


def make_token(user_id, email=None, full_name=None, secret=TEST_JWT_SECRET, expires_in=3600):
    """Mint a Supabase-style access token"""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user_id, **kwargs):
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


def _memory_engine(foreign_keys=False):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if foreign_keys:

        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    Base.metadata.create_all(bind=engine)
    return engine


def _client_for(factory):
    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_credential_validator] = lambda: JwtCredentialValidator(
        TEST_JWT_SECRET
    )
    return TestClient(app)


@pytest.fixture
def session_factory():
    engine = _memory_engine()
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    yield _client_for(session_factory)
    app.dependency_overrides.clear()


@pytest.fixture
def fk_client():
    """Client on a database that enforces foreign keys, like Postgres does"""
    engine = _memory_engine(foreign_keys=True)
    yield _client_for(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def alice(client):
    """Headers of a craftsman whose row already exists, plus its id"""
    headers = auth_headers("user-alice", email="alice@example.com", full_name="Alice Schmidt")
    response = client.get("/profile", headers=headers)
    assert response.status_code == 200
    return headers, response.json()["id"]


@pytest.fixture
def bob(client):
    headers = auth_headers("user-bob", email="bob@example.com", full_name="Bob Weber")
    response = client.get("/profile", headers=headers)
    assert response.status_code == 200
    return headers, response.json()["id"]
