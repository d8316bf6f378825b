import os

# Settings are read at import time; configure them before the app is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models.enquiry  # noqa: F401
import models.log  # noqa: F401
import utils.hashing
from config import settings
from database import Base, get_db
from main import app
from models.users import Role, User
from utils.clock import utcnow
from utils.hashing import get_password_hash
from utils.tokenJWT import get_token_service

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(utils.hashing, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def token_service():
    return get_token_service()


@pytest.fixture
def make_user(db_session):
    def _make_user(email="admin@example.com", role=Role.ADMIN, password=DEFAULT_PASSWORD,
                   username=None, is_active=True):
        now = utcnow()
        user = User(
            username=username or email.split("@")[0].replace(".", ""),
            first_name="Ada",
            last_name="Lovelace",
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


def fake_user(role=Role.ADMIN, **overrides):
    values = {"id": "a" * 32, "email": "admin@example.com", "username": "admin", "role": role}
    values.update(overrides)
    return SimpleNamespace(**values)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(token_service):
    return bearer(token_service.issue(fake_user(Role.ADMIN)))


@pytest.fixture
def super_admin_headers(token_service):
    return bearer(token_service.issue(fake_user(Role.SUPER_ADMIN, username="root")))


def encode_raw_claims(secret=None, **claims):
    """Sign an arbitrary payload, bypassing the role checks in TokenService."""
    now = utcnow()
    payload = {
        "user_id": "b" * 32,
        "email": "someone@example.com",
        "username": "someone",
        "iat": int(now.timestamp()),
        "nbf": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
        "iss": "rgp-backend-enquiry",
        "sub": "b" * 32,
    }
    payload.update(claims)
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm="HS256")
