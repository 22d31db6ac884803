"""Shared pytest fixtures for the API and service tests."""

from __future__ import annotations

import os

os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef"
os.environ["DB_URL"] = "sqlite://"
os.environ["FRONTEND_URL"] = "http://localhost:3000/"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["MAIL_OVERRIDE_TO"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hobbylist.core.security import hash_password  # noqa: E402
from hobbylist.db.database import Base, get_db  # noqa: E402
from hobbylist.main import app  # noqa: E402
from hobbylist.models import User  # noqa: E402
from hobbylist.utils.email_utils import ResendMailer, get_mailer  # noqa: E402


class FakeMailer(ResendMailer):
    """Records outgoing mail instead of calling Resend."""

    def __init__(self, fail: bool = False):
        super().__init__(api_key="re_fake", sender="HobbyList <onboarding@resend.dev>")
        self.fail = fail
        self.sent: list[dict] = []

    def send_mail(self, to_email, subject, html_body):
        if self.fail:
            raise RuntimeError("provider unavailable")
        self.sent.append({"to": to_email, "subject": subject, "html": html_body})
        return True


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db_session(engine) -> Session:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def client(db_session: Session, mailer: FakeMailer) -> TestClient:
    """Test client wired to the in-memory database and the fake mailer."""

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session: Session):
    """Factory persisting a user with a real password hash."""

    def _make(email: str = "test@example.com", password: str = "password123", *, active: bool = False) -> User:
        user = User(email=email, password_hash=hash_password(password), is_active=active)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make
