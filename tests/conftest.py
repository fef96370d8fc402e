"""Pytest configuration and fixtures."""

import itertools
import os
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_stripe_secret_key")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_webhook_secret")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("OPERATOR_EMAIL", "ops@example.com")
os.environ.setdefault("FRONTEND_URL", "https://shop.example.com")
os.environ.setdefault("KEEP_ALIVE_ENABLED", "false")
os.environ.setdefault("ADMIN_JWT_SECRET", "test-admin-secret")


class FakeResponse:
    """Mimics the postgrest APIResponse shape used by the services."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Minimal in-memory stand-in for a postgrest query builder."""

    def __init__(self, table: "FakeTable") -> None:
        self._table = table
        self._op = "select"
        self._payload: dict[str, Any] | None = None
        self._filters: list[tuple[str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, *columns: str) -> "FakeQuery":
        self._op = "select"
        return self

    def insert(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "insert"
        self._payload = dict(data)
        return self

    def update(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = dict(data)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def execute(self) -> FakeResponse:
        if self._table.fail_with is not None:
            raise self._table.fail_with

        if self._op == "insert":
            return FakeResponse([dict(self._table.add(self._payload or {}))])

        rows = [
            row for row in self._table.rows
            if all(row.get(column) == value for column, value in self._filters)
        ]

        if self._op == "update":
            for row in rows:
                row.update(self._payload or {})
            return FakeResponse([dict(row) for row in rows])

        if self._order:
            column, desc = self._order
            rows = sorted(rows, key=lambda r: r.get(column), reverse=desc)
        if self._limit is not None:
            rows = rows[: self._limit]
        return FakeResponse([dict(row) for row in rows])


class FakeTable:
    """Rows of one table plus an optional forced failure.

    Only id and timestamps get defaults; columns the insert omits stay unset,
    like nullable columns without a DEFAULT.
    """

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None
        self._ids = itertools.count(1)
        self._base = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def add(self, data: dict[str, Any]) -> dict[str, Any]:
        row_id = next(self._ids)
        created = (self._base + timedelta(minutes=row_id)).isoformat()
        row = {
            "id": row_id,
            "created_at": created,
            "updated_at": created,
            **data,
        }
        self.rows.append(row)
        return row


class FakeSupabase:
    """In-memory Supabase client exposing table(name)."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, FakeTable()))

    def orders(self) -> FakeTable:
        return self.tables.setdefault("orders", FakeTable())


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from beatstore.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def fake_supabase() -> Generator[FakeSupabase, None, None]:
    """Provide an in-memory Supabase client wired into every consumer.

    Yields:
        FakeSupabase: The fake client; inspect fake_supabase.orders().rows.
    """
    fake = FakeSupabase()
    with patch("beatstore.core.supabase.get_supabase_client", return_value=fake), \
         patch("beatstore.services.order_service.get_supabase_client", return_value=fake):
        yield fake


@pytest.fixture
def mock_stripe() -> Generator[MagicMock, None, None]:
    """Provide a mocked Stripe module for checkout and webhook services.

    Yields:
        MagicMock: Stands in for the stripe module returned by get_stripe().
    """
    mock = MagicMock()
    with patch("beatstore.services.checkout_service.get_stripe", return_value=mock), \
         patch("beatstore.services.webhook_service.get_stripe", return_value=mock):
        yield mock


@pytest.fixture
def mock_resend() -> Generator[MagicMock, None, None]:
    """Provide a mocked Resend module.

    Yields:
        MagicMock: resend.Emails.send returns {"id": "email_123"}.
    """
    with patch("beatstore.services.email_service.resend") as mock:
        mock.Emails.send.return_value = {"id": "email_123"}
        yield mock


@pytest.fixture(autouse=True)
def reset_keep_alive() -> Generator[None, None, None]:
    """Give every test a fresh keep-alive scheduler singleton."""
    import beatstore.core.keep_alive as keep_alive

    keep_alive._scheduler = None
    yield
    keep_alive._scheduler = None


@pytest.fixture
def client(
    fake_supabase: FakeSupabase, mock_stripe: MagicMock, mock_resend: MagicMock
) -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from beatstore.main import app

    with TestClient(app) as test_client:
        yield test_client
