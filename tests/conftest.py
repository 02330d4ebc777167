"""
Shared fixtures. The app runs in-process on an in-memory SQLite database;
outbound email is captured instead of sent.
"""
import os

# Must be set before app.config is imported anywhere (settings are cached)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["MAILGUN_DOMAIN"] = ""
os.environ["MAP_PROVIDER_API_KEY"] = ""
os.environ["OTP_CLEANUP_ENABLED"] = "false"
os.environ["SUPERADMIN_EMAIL"] = ""
os.environ["SUPERADMIN_PASSWORD"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.user import User, UserRole, UserStatus
from app.services import email as email_service
from app.services.auth import create_access_token, get_password_hash

DEFAULT_PASSWORD = "secret-pass"


class Outbox:
    def __init__(self):
        self.messages = []
        self.fail = False

    def send(self, to_email, subject, html_content, text_content=None):
        if self.fail:
            return False
        self.messages.append({"to": to_email, "subject": subject, "html": html_content, "text": text_content or ""})
        return True

    def to(self, email):
        return [m for m in self.messages if m["to"] == email]


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr(email_service, "send_email", box.send)
    return box


@pytest.fixture(autouse=True)
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.customer, email=None, status=UserStatus.active, password=DEFAULT_PASSWORD, **fields):
        counter["n"] += 1
        user = User(
            name=fields.pop("name", f"{role.value.title()} {counter['n']}"),
            email=email or f"{role.value}{counter['n']}@estatehub.in",
            hashed_password=get_password_hash(password),
            role=role,
            status=status,
            verified=True,
            is_email_verified=fields.pop("is_email_verified", True),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def headers_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


@pytest.fixture
def auth_headers():
    return headers_for


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.admin, email="admin@estatehub.in")


@pytest.fixture
def superadmin(make_user):
    return make_user(UserRole.superadmin, email="root@estatehub.in")


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.customer, email="customer@estatehub.in")
