"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
JWT helpers, an in-memory stand-in for the Supabase table API, and a mocked
identity provider.
"""

import copy
import itertools
from collections import defaultdict
from datetime import datetime, timezone, timedelta
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import jwt  # PyJWT
import pytest
from postgrest.exceptions import APIError

from modules.auth.models import Identity


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

TEST_USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"


def create_test_token(
    user_id: str = TEST_USER_ID,
    email: str = "test@example.com",
    expired: bool = False,
    email_verified: bool = True,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        email_verified: Whether the email should be marked as verified

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "email_confirmed_at": now.isoformat() if email_verified else None,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


# -----------------------------------------------------------------------------
# In-memory Supabase tables
# -----------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Records one chained table query and runs it against FakeSupabase."""

    def __init__(self, store: "FakeSupabase", table: str):
        self._store = store
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[tuple[str, Any]] = []
        self.ordering: Optional[tuple[str, bool]] = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self.action, self.columns = "select", columns
        return self

    def insert(self, payload: dict[str, Any]) -> "FakeQuery":
        self.action, self.payload = "insert", payload
        return self

    def upsert(self, payload: dict[str, Any]) -> "FakeQuery":
        self.action, self.payload = "upsert", payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeQuery":
        self.action, self.payload = "update", payload
        return self

    def delete(self) -> "FakeQuery":
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.ordering = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        return FakeResponse(self._store.run(self))


class FakeSupabase:
    """
    Minimal in-memory implementation of the Supabase table API.

    Supports the calls the repositories make: select/insert/upsert/update/
    delete with eq filters and a single order. Failures can be injected per
    (table, action) with fail().
    """

    PRIMARY_KEYS = {
        "profiles": ("user_id",),
        "sections": ("user_id", "name"),
        "tasks": ("id",),
        "habits": ("id",),
        "timers": ("id",),
    }

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.queries: list[FakeQuery] = []
        self._failures: set[tuple[str, str]] = set()
        self._clock = itertools.count()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        self.tables[table].extend(copy.deepcopy(list(rows)))

    def rows(self, table: str, **filters: Any) -> list[dict[str, Any]]:
        return [r for r in self.tables[table] if all(r.get(k) == v for k, v in filters.items())]

    def fail(self, table: str, action: str) -> None:
        self._failures.add((table, action))

    def heal(self) -> None:
        self._failures.clear()

    def writes(self, table: Optional[str] = None) -> list[FakeQuery]:
        return [
            q for q in self.queries
            if q.action != "select" and (table is None or q.table == table)
        ]

    def run(self, query: FakeQuery) -> list[dict[str, Any]]:
        self.queries.append(query)
        if (query.table, query.action) in self._failures:
            raise APIError({"message": f"injected {query.action} failure", "code": "500"})

        handler = getattr(self, f"_{query.action}")
        return copy.deepcopy(handler(query))

    # Actions

    def _matching(self, query: FakeQuery) -> list[dict[str, Any]]:
        return [
            row for row in self.tables[query.table]
            if all(row.get(column) == value for column, value in query.filters)
        ]

    def _select(self, query: FakeQuery) -> list[dict[str, Any]]:
        rows = self._matching(query)
        if query.ordering:
            column, desc = query.ordering
            # Postgres puts NULLs last ascending and first descending
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, r.get(column) or ""),
                reverse=desc,
            )
        if query.columns != "*":
            wanted = [c.strip() for c in query.columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return rows

    def _key(self, table: str, row: dict[str, Any]) -> tuple:
        return tuple(row.get(c) for c in self.PRIMARY_KEYS.get(table, ("id",)))

    def _with_defaults(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        row = dict(row)
        stamp = (
            datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))
        ).isoformat()
        if table == "timers" and row.get("timestamp") is None:
            row["timestamp"] = stamp
        if table == "profiles" and row.get("date_created") is None:
            row["date_created"] = stamp
        return row

    def _insert(self, query: FakeQuery) -> list[dict[str, Any]]:
        row = self._with_defaults(query.table, query.payload)
        key = self._key(query.table, row)
        if any(self._key(query.table, r) == key for r in self.tables[query.table]):
            raise APIError({"message": "duplicate key value", "code": "23505"})
        self.tables[query.table].append(row)
        return [row]

    def _upsert(self, query: FakeQuery) -> list[dict[str, Any]]:
        row = self._with_defaults(query.table, query.payload)
        key = self._key(query.table, row)
        rows = self.tables[query.table]
        for index, existing in enumerate(rows):
            if self._key(query.table, existing) == key:
                rows[index] = row
                return [row]
        rows.append(row)
        return [row]

    def _update(self, query: FakeQuery) -> list[dict[str, Any]]:
        matched = self._matching(query)
        for row in matched:
            row.update(query.payload)
        return matched

    def _delete(self, query: FakeQuery) -> list[dict[str, Any]]:
        matched = self._matching(query)
        self.tables[query.table] = [r for r in self.tables[query.table] if r not in matched]
        return matched


class FakeClock:
    """Manually advanced clock for stopwatch tests."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 1, 6, 9, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Empty in-memory Supabase tables."""
    return FakeSupabase()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return TEST_USER_ID


@pytest.fixture
def test_identity(test_user_id: str) -> Identity:
    return Identity(id=test_user_id, email="test@example.com")


@pytest.fixture
def identity(test_identity: Identity) -> AsyncMock:
    """Identity provider mock with a signed-in user."""
    provider = AsyncMock()
    provider.session = None
    provider.use_access_token = MagicMock()
    provider.get_current_user.return_value = test_identity
    provider.list_linked_providers.return_value = set()
    return provider


@pytest.fixture
def auth_token(test_user_id: str) -> str:
    """Create a valid auth token for testing."""
    return create_test_token(user_id=test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
