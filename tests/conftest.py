"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dblayer import init  # noqa: E402
from dblayer.models import Result  # noqa: E402


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh SQLite database file."""
    return str(tmp_path / "test.db")


@pytest.fixture
def calls():
    """Recorder shared by event handlers in a test."""
    return []


@pytest.fixture
def make_db(db_path):
    """Factory: initialize the library with options and return a Database."""

    def factory(**options):
        options.setdefault("suppress_errors", True)
        return init(**options)(db_path)

    return factory


@pytest_asyncio.fixture
async def db(make_db):
    """Database with a populated users table."""
    database = make_db()
    await database.none(
        "create table users (id integer primary key, name text, active integer)"
    )
    await database.none(
        "insert into users (name, active) values ('alice', 1), ('bob', 1), ('carol', 0)"
    )
    return database


class FakeDriver:
    """Driver double recording every call."""

    def __init__(self, rows=None):
        self.client = Mock(name="client")
        self.connect = AsyncMock(return_value=self.client)
        self.release = AsyncMock()
        self.execute = AsyncMock(
            return_value=Result(rows=list(rows or []), row_count=len(rows or []))
        )
        self.end = AsyncMock()
        self.batches = []

    def begin(self, mode=None):
        return mode.begin() if mode is not None else "begin"

    async def iterate(self, client, query, values=None, batch_size=100):
        for batch in self.batches:
            yield batch


@pytest.fixture
def fake_driver():
    """Driver double returning one row."""
    return FakeDriver(rows=[{"id": 1}])
