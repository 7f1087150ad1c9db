from __future__ import annotations

import copy
import itertools
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from postgrest.exceptions import APIError

from bittle.config import settings
from bittle.core.cache import QueryCache
from bittle.core.context import RequestContext, get_context, get_public_context

ORG_ID = "org-1"

# Tables whose rows get a created_at stamp on insert when none is given
_STAMPED = {"form", "challenges", "form_submission"}


@dataclass
class _FakeResponse:
    data: Any


class _FakeQuery:
    """Just enough of the postgrest request builder for the query layer."""

    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[tuple[str, Callable[[Any], bool]]] = []
        self.orders: list[tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._single = False

    # ---- builders ----
    def select(self, columns: str = "*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload: Any):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, patch: dict):
        self.op = "update"
        self.payload = patch
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, lambda v: v == value))
        return self

    def in_(self, column: str, values: list):
        allowed = list(values)
        self.filters.append((column, lambda v: v in allowed))
        return self

    def order(self, column: str, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def single(self):
        self._single = True
        return self

    # ---- execution ----
    def _matches(self, row: dict) -> bool:
        return all(check(row.get(col)) for col, check in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        cols = [c.strip() for c in self.columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in cols}

    def execute(self) -> _FakeResponse:
        self.store.calls.append((self.table, self.op))
        failure = self.store.failures.get((self.table, self.op))
        if failure:
            raise failure

        rows = self.store.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = dict(item)
                row.setdefault("id", self.store.next_id(self.table))
                if self.table in _STAMPED:
                    row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return _FakeResponse(inserted)

        matched = [r for r in rows if self._matches(r)]

        if self.op == "update":
            for r in matched:
                r.update(self.payload)
            return _FakeResponse([copy.deepcopy(r) for r in matched])

        if self.op == "delete":
            self.store.tables[self.table] = [r for r in rows if not self._matches(r)]
            return _FakeResponse([copy.deepcopy(r) for r in matched])

        for column, desc in reversed(self.orders):
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column) or 0), reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        data = [self._project(r) for r in matched]

        if self._single:
            if len(data) != 1:
                raise APIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": "PGRST116",
                    "details": f"The result contains {len(data)} rows",
                    "hint": None,
                })
            return _FakeResponse(data[0])
        return _FakeResponse(data)


class FakeSupabase:
    def __init__(self, tables: Optional[dict[str, list[dict]]] = None):
        self.tables: dict[str, list[dict]] = copy.deepcopy(tables or {})
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str]] = []
        self._ids = itertools.count(1)

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self, name)

    def next_id(self, table: str) -> str:
        return f"{table}-{next(self._ids)}"

    def fail(self, table: str, op: str, message: str = "permission denied", code: str = "42501"):
        self.failures[(table, op)] = APIError(
            {"message": message, "code": code, "details": None, "hint": None}
        )

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture()
def xq7z_store() -> FakeSupabase:
    """One tree (code XQ7Z) with two members in one group and one edge."""
    return FakeSupabase({
        "form": [{
            "id": "form-1",
            "author": ORG_ID,
            "created_at": "2025-09-01T12:00:00+00:00",
            "deadline": None,
            "code": "XQ7Z",
            "title": "Fall pairings",
        }],
        "organization": [{"id": ORG_ID, "name": "Chess Club", "affiliation": None}],
        "family_tree": [{
            "id": "tree-1",
            "question_id": "q-1",
            "title": "Fall tree",
            "description": None,
            "form_id": "form-1",
            "code": "XQ7Z",
            "author_id": ORG_ID,
        }],
        "group": [{
            "id": "group-1",
            "family_tree_id": "tree-1",
            "position_x": 100,
            "position_y": 100,
            "width": "300px",
            "height": "200px",
        }],
        "tree_member": [
            {
                "id": "m-big",
                "family_tree_id": "tree-1",
                "identifier": "Ada",
                "form_submission_id": "sub-1",
                "is_big": True,
                "group_id": "group-1",
                "position_x": 64,
                "position_y": 50,
            },
            {
                "id": "m-little",
                "family_tree_id": "tree-1",
                "identifier": "Grace",
                "form_submission_id": "sub-2",
                "is_big": False,
                "group_id": None,
                "position_x": 400,
                "position_y": 300,
            },
        ],
        "connections": [{
            "id": "conn-1",
            "family_tree_id": "tree-1",
            "big_id": "m-big",
            "little_id": "m-little",
            "points": 5,
        }],
    })


@pytest.fixture()
def cache() -> QueryCache:
    return QueryCache(ttl_seconds=60)


def make_token(sub: str = ORG_ID, **claims: Any) -> str:
    payload = {
        "sub": sub,
        "email": "club@example.com",
        "aud": settings.JWT_AUDIENCE,
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture()
def make_client(cache: QueryCache):
    """TestClient whose request context uses the given fake store."""
    from bittle.main import app

    def _make(fake: FakeSupabase) -> TestClient:
        ctx = RequestContext(client=fake, user_id=ORG_ID, cache=cache)
        app.dependency_overrides[get_context] = lambda: ctx
        app.dependency_overrides[get_public_context] = lambda: ctx
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
