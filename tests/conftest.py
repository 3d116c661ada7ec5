"""Pytest configuration and fixtures."""

import copy
import os
from collections.abc import Generator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")

SERVICE_MODULES = (
    "src.services.device_profile_service",
    "src.services.admin_config_service",
    "src.services.admin_auth_service",
)


class FakeResponse:
    """Stand-in for a PostgREST APIResponse."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Chainable query builder over an in-memory table.

    Supports the subset of the Supabase builder the services use:
    select/insert/upsert/update followed by eq/limit and execute.
    """

    def __init__(self, table: "FakeTable") -> None:
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload: dict[str, Any] | None = None
        self._on_conflict = ""
        self._ignore_duplicates = False
        self._filters: list[tuple[str, Any]] = []
        self._limit: int | None = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, row: dict[str, Any]) -> "FakeQuery":
        self._op = "insert"
        self._payload = row
        return self

    def upsert(
        self, row: dict[str, Any], on_conflict: str = "", ignore_duplicates: bool = False
    ) -> "FakeQuery":
        self._op = "upsert"
        self._payload = row
        self._on_conflict = on_conflict
        self._ignore_duplicates = ignore_duplicates
        return self

    def update(self, changes: dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = changes
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._columns == "*":
            return copy.deepcopy(row)
        columns = [c.strip() for c in self._columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in columns}

    def execute(self) -> FakeResponse:
        if self._op == "insert":
            return FakeResponse([self._table.add(self._payload)])

        if self._op == "upsert":
            key = self._on_conflict
            clash = [r for r in self._table.rows if key and r.get(key) == self._payload.get(key)]
            if clash:
                if self._ignore_duplicates:
                    return FakeResponse([])
                clash[0].update(copy.deepcopy(self._payload))
                return FakeResponse([copy.deepcopy(clash[0])])
            return FakeResponse([self._table.add(self._payload)])

        matched = [row for row in self._table.rows if self._matches(row)]
        if self._limit is not None:
            matched = matched[: self._limit]

        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse([copy.deepcopy(row) for row in matched])

        return FakeResponse([self._project(row) for row in matched])


class FakeTable:
    """An in-memory collection with generated ids."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: list[dict[str, Any]] = []
        self._next_id = 1

    def add(self, row: dict[str, Any]) -> dict[str, Any]:
        stored = {"id": f"{self.name}-{self._next_id}", **copy.deepcopy(row)}
        self._next_id += 1
        self.rows.append(stored)
        return copy.deepcopy(stored)


class FakeSupabase:
    """Minimal in-memory stand-in for the Supabase client."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return FakeQuery(self.tables[name])

    def rows(self, name: str) -> list[dict[str, Any]]:
        return self.tables[name].rows if name in self.tables else []


class FakeClock:
    """Controllable replacement for the service clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def fake_supabase() -> Generator[FakeSupabase, None, None]:
    """Patch every service to use one shared in-memory store.

    Yields:
        FakeSupabase: The store, for seeding and inspecting rows.
    """
    fake = FakeSupabase()
    patchers = [patch(f"{module}.get_supabase_client", return_value=fake) for module in SERVICE_MODULES]
    patchers.append(patch("src.core.supabase.get_supabase_client", return_value=fake))
    for patcher in patchers:
        patcher.start()
    yield fake
    for patcher in patchers:
        patcher.stop()


@pytest.fixture
def clock() -> Generator[FakeClock, None, None]:
    """Freeze the device profile service clock at 2024-06-15 12:00 UTC.

    Yields:
        FakeClock: Set ``clock.now`` to move time.
    """
    fake_clock = FakeClock(datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc))
    with patch("src.services.device_profile_service._utc_now", fake_clock):
        yield fake_clock


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client for health checks.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(fake_supabase: FakeSupabase) -> Generator[TestClient, None, None]:
    """Provide a test client backed by the in-memory store.

    Args:
        fake_supabase: In-memory store fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
