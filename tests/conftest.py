"""
Pytest configuration for keyword suggestion backend tests.

Sets up test environment and global fixtures.
"""
import os
from typing import Any, Callable, Dict, List, Optional

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("AI_RETRY_INITIAL_DELAY", "0")


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    """
    Minimal stand-in for the PostgREST query builder.

    Supports the calls the service layer makes: select/insert/update/delete,
    eq, in_, is_, not_, order, range and execute.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._count: Optional[str] = None
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._negate_next = False
        self._order: Optional[tuple] = None
        self._range: Optional[tuple] = None

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self._op = "select"
        self._count = count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    @property
    def not_(self) -> "FakeQuery":
        self._negate_next = True
        return self

    def _add_filter(self, predicate: Callable[[Dict[str, Any]], bool]) -> "FakeQuery":
        if self._negate_next:
            self._negate_next = False
            self._filters.append(lambda row: not predicate(row))
        else:
            self._filters.append(predicate)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._add_filter(lambda row: str(row.get(column)) == str(value))

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        wanted = {str(v) for v in values}
        return self._add_filter(lambda row: str(row.get(column)) in wanted)

    def is_(self, column: str, value: str) -> "FakeQuery":
        assert value == "null"
        return self._add_filter(lambda row: row.get(column) is None)

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def execute(self) -> FakeResponse:
        if (self._table, self._op) in self._db.failures:
            raise self._db.failures[(self._table, self._op)]

        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for row in payload:
                stored = {**row, "id": self._db.next_id()}
                rows.append(stored)
                inserted.append(dict(stored))
            return FakeResponse(inserted)

        matched = [row for row in rows if all(f(row) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return FakeResponse([dict(row) for row in matched])

        if self._op == "delete":
            self._db.tables[self._table] = [row for row in rows if row not in matched]
            return FakeResponse([dict(row) for row in matched])

        total = len(matched)
        if self._order:
            column, desc = self._order
            matched = sorted(
                matched,
                key=lambda row: (row.get(column) is None, row.get(column) or 0),
                reverse=desc,
            )
        if self._range:
            start, end = self._range
            matched = matched[start:end + 1]
        if self._db.max_rows is not None:
            matched = matched[:self._db.max_rows]

        return FakeResponse(
            [dict(row) for row in matched],
            count=total if self._count == "exact" else None,
        )


class FakeSupabase:
    """In-memory Supabase client: table name -> list of row dicts."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {"facilities": [], "keywords": []}
        self.failures: Dict[tuple, Exception] = {}
        # Server-side row cap on select responses (PostgREST max-rows); counts are unaffected
        self.max_rows: Optional[int] = None
        self._id = 0

    def next_id(self) -> int:
        self._id += 1
        return self._id

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_on(self, table: str, op: str, error: Exception) -> None:
        """Make every (table, op) query raise error."""
        self.failures[(table, op)] = error


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Empty in-memory Supabase client."""
    return FakeSupabase()


@pytest.fixture
def sample_facility() -> Dict[str, Any]:
    return {
        "facility_name": "Sample Diner",
        "business_type": "restaurant",
        "address": "東京都渋谷区神南1-2-3",
        "phone": "03-1234-5678",
        "business_hours": "11:00-22:00",
        "closed_days": "月曜日",
    }
