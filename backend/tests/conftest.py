# =============================================================================
# ASSETDESK - TEST CONFIGURATION
# =============================================================================
# Global fixtures: one SQLite database file per test, API client, users and
# tokens, and an outbox capturing every email instead of sending it.
# =============================================================================

import os
import smtplib
from typing import Dict, Any, Generator, List

import pytest
from fastapi.testclient import TestClient

# Test environment BEFORE importing the app
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite:///assetdesk_test.db"
os.environ["SMTP_PASSWORD"] = "test-smtp-key"
os.environ["ADMIN_USERNAME"] = ""
os.environ["ADMIN_PASSWORD"] = ""

from assetdesk.auth.security import create_access_token
from assetdesk.config import config
from assetdesk.database import connection, init_database
from assetdesk.main import app
from assetdesk.services.companies import create_company
from assetdesk.services.email.providers.smtp import SmtpProvider
from assetdesk.services.users import create_user

from factories import CompanyFactory, UserFactory


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def database(tmp_path, monkeypatch) -> str:
    """Fresh schema in a per-test SQLite file; returns its URL."""
    url = f"sqlite:///{tmp_path / 'assetdesk.db'}"
    monkeypatch.setattr(config, "DATABASE_URL", url)
    init_database(url)
    return url


@pytest.fixture
def db(database):
    """Direct connection for arranging data and checking results."""
    with connection(database) as conn:
        yield conn


# =============================================================================
# CLIENT FIXTURES
# =============================================================================

@pytest.fixture
def client(database) -> Generator[TestClient, None, None]:
    """TestClient bound to the per-test database (schema already created)."""
    yield TestClient(app)


def _headers_for(user: Dict[str, Any]) -> Dict[str, str]:
    token, _ = create_access_token(user["id"], user["username"], user["role"])
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# USER FIXTURES
# =============================================================================

@pytest.fixture
def admin_user(db) -> Dict[str, Any]:
    data = UserFactory.create_admin()
    user = create_user(db, data)
    return {**user, "password": data["password"]}


@pytest.fixture
def regular_user(db) -> Dict[str, Any]:
    data = UserFactory()
    user = create_user(db, data)
    return {**user, "password": data["password"]}


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    """Bearer headers of an admin."""
    return _headers_for(admin_user)


@pytest.fixture
def user_headers(regular_user) -> Dict[str, str]:
    """Bearer headers of a non-admin user."""
    return _headers_for(regular_user)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def company(db) -> Dict[str, Any]:
    return create_company(db, CompanyFactory())


@pytest.fixture
def webhook_defaults(db, monkeypatch) -> Dict[str, Any]:
    """
    Fallback company and system user for inbound email, wired into config.
    """
    fallback = create_company(db, CompanyFactory(name="Unassigned Inbox", contact_email=None))
    system = create_user(db, UserFactory(username="system"))
    monkeypatch.setattr(config, "FALLBACK_COMPANY_ID", fallback["id"])
    monkeypatch.setattr(config, "SYSTEM_USER_ID", system["id"])
    return {"company": fallback, "user": system}


# =============================================================================
# EMAIL FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def outbox(monkeypatch) -> List[Dict[str, str]]:
    """
    Captures outgoing emails; nothing reaches a real SMTP server.
    """
    sent = []

    def fake_send(self, to, subject, body_html):
        sent.append({"to": to, "subject": subject, "body": body_html})

    monkeypatch.setattr(SmtpProvider, "send_email", fake_send)
    return sent


@pytest.fixture
def smtp_down(monkeypatch):
    """Every send fails as if the relay refused the connection."""

    def failing_send(self, to, subject, body_html):
        raise smtplib.SMTPConnectError(421, "Service not available")

    monkeypatch.setattr(SmtpProvider, "send_email", failing_send)


# =============================================================================
# MARKER CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """
    Custom markers.
    """
    config.addinivalue_line(
        "markers", "integration: tests going through the HTTP API and database"
    )
    config.addinivalue_line(
        "markers", "unit: isolated tests"
    )
