import json
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import psycopg2
import pytest

from json2pg.config import Config


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self._conn = conn
        self._result: List[Tuple[Any, ...]] = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query: str, params: Sequence[Any] = ()) -> None:
        self._conn.executed.append((query, list(params)))
        if "information_schema.columns" in query:
            if self._conn.schema_error is not None:
                raise self._conn.schema_error
            self._result = list(self._conn.columns)
            return

        for p in params:
            if isinstance(p, str) and "\x00" in p:
                raise ValueError("A string literal cannot contain NUL (0x00) characters.")

        idx = self._conn.insert_calls
        self._conn.insert_calls += 1
        if idx in self._conn.fail_inserts:
            raise psycopg2.IntegrityError(f"duplicate key value for insert #{idx}")
        self.rowcount = self._conn.rowcounts.get(idx, 1)

    def fetchall(self) -> List[Tuple[Any, ...]]:
        return self._result


class FakeConnection:
    """Stands in for a psycopg2 connection; answers the column lookup and counts inserts."""

    def __init__(
        self,
        columns: Sequence[Tuple[str, str]] = (),
        fail_inserts: Optional[Set[int]] = None,
        rowcounts: Optional[Dict[int, int]] = None,
        schema_error: Optional[Exception] = None,
    ):
        self.columns = list(columns)
        self.fail_inserts = fail_inserts or set()
        self.rowcounts = rowcounts or {}
        self.schema_error = schema_error
        self.executed: List[Tuple[str, List[Any]]] = []
        self.insert_calls = 0
        self.autocommit = False
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True

    @property
    def inserts(self) -> List[Tuple[str, List[Any]]]:
        return [(q, p) for q, p in self.executed if q.startswith("INSERT")]


EVENT_COLUMNS = [
    ("id", "integer"),
    ("name", "text"),
    ("created_at", "timestamp with time zone"),
    ("payload", "jsonb"),
    ("tags", "ARRAY"),
    ("active", "boolean"),
]


@pytest.fixture
def make_config():
    def _make(**overrides) -> Config:
        values = dict(
            user="root",
            password="",
            host="localhost",
            port=5432,
            database="appdb",
            table="events",
            file="events.json",
            ignore_errors=False,
        )
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def write_json(tmp_path):
    def _write(payload: Any, name: str = "input.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write
