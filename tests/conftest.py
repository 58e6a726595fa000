"""
Pytest fixtures for the invoice kernel test suite.

Provides:
- Structured-logging fixtures (captured_logs)
- A database engine and session per test
- A DeterministicClock and the default derivation engine
- A FastAPI TestClient wired to the test database

Environment Variables:
- DATABASE_URL: database to run against.  If not set, an in-memory SQLite
  database is used.  Point it at a PostgreSQL database to run the same
  suite against the production backend.
"""

import json
import logging
import os
from io import StringIO
from typing import Generator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from invoice_config import AppConfig
from invoice_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from invoice_kernel.domain.clock import DeterministicClock
from invoice_kernel.domain.derivation import DefaultRates, DerivationEngine
from invoice_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from invoice_kernel.services.account_service import AccountService
from invoice_kernel.services.invoice_service import InvoiceService

DEFAULT_TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"

TEST_SECRET_KEY = "test-secret-key-for-invoice-suite"


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_TEST_DATABASE_URL)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "api: HTTP-level tests through TestClient")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture invoice_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, invoice_service):
            invoice_service.create_invoice(...)
            logs = captured_logs()
            assert any(r["message"] == "invoice_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("invoice_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh engine and schema for each test."""
    engine = init_engine_from_url(get_database_url(), echo=False)
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine) -> Generator[Session, None, None]:
    """A session whose uncommitted work is rolled back after the test."""
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock()


@pytest.fixture
def default_rates() -> DefaultRates:
    return DefaultRates.of("0.04", "0.10")


@pytest.fixture
def derivation_engine(default_rates) -> DerivationEngine:
    return DerivationEngine(default_rates)


@pytest.fixture
def account_service(session, deterministic_clock) -> AccountService:
    return AccountService(session, deterministic_clock)


@pytest.fixture
def invoice_service(session, derivation_engine, deterministic_clock) -> InvoiceService:
    return InvoiceService(session, derivation_engine, deterministic_clock)


@pytest.fixture
def account(account_service):
    """A registered, verified account."""
    return account_service.register("owner@example.com", "password123")


@pytest.fixture
def other_account(account_service):
    return account_service.register("other@example.com", "password123")


@pytest.fixture
def owner_id(account) -> UUID:
    return account.id


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        jwt_secret_key=TEST_SECRET_KEY,
        database_url=get_database_url(),
    )


@pytest.fixture
def app(db_engine, app_config, deterministic_clock):
    from invoice_api.app import create_app

    return create_app(
        app_config,
        session_factory=get_session_factory(),
        clock=deterministic_clock,
    )


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account through the API and return the response JSON."""

    def _register(email: str = "user@example.com", password: str = "password123") -> dict:
        response = client.post(
            "/api/v1/auth/register", json={"email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register) -> dict[str, str]:
    token = register()["jwt"]
    return {"Authorization": f"Bearer {token}"}
