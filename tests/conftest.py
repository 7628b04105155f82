import os

# Entorno de prueba: tiene que quedar definido antes de importar la app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["EMAIL_SECRET"] = "test-secret"
os.environ["FRONTEND_URL"] = "http://localhost:5173"
os.environ["EMAIL_USER"] = "shop@artisanwoodendoors.com"
os.environ["EMAIL_PASS"] = "app-password"
os.environ.pop("ENV", None)
os.environ.pop("PORT", None)
os.environ.pop("RESEND_API_KEY", None)
os.environ.pop("TRUST_PROXY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from artisan_doors.database import Base, get_db
from artisan_doors.main import app
from artisan_doors.models.subscriber import Subscriber  # noqa: F401
from artisan_doors.services import email_service
from artisan_doors.services.rate_limiter import contact_form_limiter, subscription_limiter
from artisan_doors.services.template_manager import template_manager


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(autouse=True)
def reset_state():
    subscription_limiter.reset()
    contact_form_limiter.reset()
    template_manager.clear_cache()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def outbox(monkeypatch):
    """Reemplaza el envío real de emails y guarda cada mensaje."""
    sent = []

    def fake_send_email(to, subject, html=None, text=None, from_name=None, from_address=None, reply_to=None):
        sent.append({
            "to": to,
            "subject": subject,
            "html": html,
            "text": text,
            "from_name": from_name,
            "reply_to": reply_to,
        })

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent


@pytest.fixture
def failing_email(monkeypatch):
    def broken_send_email(*args, **kwargs):
        raise email_service.EmailDeliveryError("SMTP down")

    monkeypatch.setattr(email_service, "send_email", broken_send_email)


@pytest.fixture
def client(db_session, outbox):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)
