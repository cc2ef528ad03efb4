"""Shared fixtures: an in-memory stand-in for the Supabase query builder."""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from digistore.catalog import CatalogClient, CatalogState
from digistore.config import Settings
from digistore.main import create_app
from digistore.notifications import Notifier
from digistore.session import ADMIN_PASSWORD, ADMIN_USERNAME

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Optional[Dict[str, Any]] = None
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None

    def select(self, columns: str = "*"):
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def execute(self) -> FakeResponse:
        self.db.calls.append(self.op)
        failure = self.db.failures.pop(self.op, None)
        if failure is not None:
            raise failure
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for payload in payloads:
                row = dict(payload)
                row["id"] = str(uuid4())
                row["created_at"] = self.db.next_timestamp()
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "delete":
            removed = [dict(row) for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(removed)

        result = [dict(row) for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda row: row.get(column) or "", reverse=desc)
        return FakeResponse(result)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self._ticks = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        self._ticks += 1
        return (_EPOCH + timedelta(minutes=self._ticks)).isoformat()

    def fail(self, op: str, exc: Exception) -> None:
        """Make the next ``op`` ("select", "insert", ...) raise ``exc``."""
        self.failures[op] = exc

    def seed(self, *titles: str) -> List[Dict[str, Any]]:
        rows = []
        for title in titles:
            rows.extend(
                self.table("products")
                .insert({"title": title, "description": f"{title} description", "image": "https://img.test/x.png", "price": "$5"})
                .execute()
                .data
            )
        self.calls.clear()
        return rows


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def catalog(fake_db: FakeSupabase, notifier: Notifier) -> CatalogClient:
    return CatalogClient(fake_db, CatalogState(), notifier)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SUPABASE_URL="https://example.supabase.co",
        SUPABASE_KEY="test-anon-key",
        SESSION_SECRET="test-session-secret-0123456789",
        APP_ENV="test",
        WHATSAPP_CONTACT="15550100000",
    )


@pytest.fixture
def client(settings: Settings, fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    app = create_app(settings=settings, db=fake_db)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    resp = client.post(
        "/admin/login",
        data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    return client
