"""Pytest configuration and fixtures."""
import os
import re

import pytest

from kindkart import create_app
from kindkart.utils import rate_limit


def _squash(sql: str) -> str:
    return re.sub(r"\s+", " ", sql).strip()


class FakeCursor:
    """Cursor that answers from the rules registered on its FakeConnection."""

    def __init__(self, conn):
        self.conn = conn
        self.rowcount = -1
        self._rows = []
        self._batch = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    @property
    def connection(self):
        return self.conn

    def mogrify(self, template, args):
        self._batch.append(tuple(args))
        return repr(tuple(args)).encode()

    def execute(self, sql, params=None):
        if isinstance(sql, bytes):
            # assembled by psycopg2.extras.execute_values from mogrify() calls
            sql, params, self._batch = sql.decode(), self._batch, []
        sql = _squash(sql)
        self.conn.executed.append((sql, params))
        rule = self.conn.match(sql)
        if rule is None:
            self._rows, self.rowcount = [], 0
            return
        if rule.get("error") is not None:
            raise rule["error"]
        rows = rule.get("rows") or []
        if callable(rows):
            rows = rows(params)
        self._rows = list(rows)
        rowcount = rule.get("rowcount")
        self.rowcount = len(self._rows) if rowcount is None else rowcount

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows


class FakeConnection:
    encoding = "UTF8"

    def __init__(self):
        self.rules = []
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def on(self, fragment, *, rows=None, rowcount=None, error=None):
        """Answer statements containing `fragment` (first registered wins)."""
        self.rules.append(
            {"fragment": _squash(fragment), "rows": rows, "rowcount": rowcount, "error": error}
        )
        return self

    def match(self, sql):
        for rule in self.rules:
            if rule["fragment"] in sql:
                return rule
        return None

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def statements(self, fragment):
        fragment = _squash(fragment)
        return [(sql, params) for sql, params in self.executed if fragment in sql]


class FakePool:
    def __init__(self, conn):
        self.conn = conn
        self.returned = 0

    def getconn(self):
        return self.conn

    def putconn(self, conn):
        self.returned += 1


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def make_app(conn, upload_dir):
    """Build an app over the fake pool; keyword overrides land in app.config."""

    def _make(**overrides):
        config = {
            "TESTING": True,
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
            "UPLOAD_DIR": str(upload_dir),
            "RATE_LIMIT_ENABLED": False,
            "LOG_LEVEL": "WARNING",
        }
        config.update(overrides)
        return create_app(config, db_pool=FakePool(conn))

    rate_limit.reset()
    yield _make
    rate_limit.reset()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(scope="session")
def require_db():
    """Skip tests that need a real database when DATABASE_URL is not set."""
    if not os.getenv("DATABASE_URL"):
        pytest.skip("DATABASE_URL not set; skipping integration test")
