"""SQLite driver implementation."""

from collections.abc import Mapping
from typing import Any, AsyncIterator

import aiosqlite

from ..config import resolve_db_path
from ..logging_config import get_logger
from ..models import Result
from ..txmode import IsolationLevel, TransactionMode

logger = get_logger(__name__)


def _bind(values: Any) -> Any:
    """Normalize query values into what sqlite3 accepts."""
    if values is None:
        return ()
    if isinstance(values, (list, tuple, Mapping)):
        return values
    return (values,)


class SQLiteDriver:
    """aiosqlite-backed driver. Every connect() opens a new connection."""

    def __init__(self, timeout: float = 5.0):
        self._timeout = timeout
        self._clients: set[aiosqlite.Connection] = set()

    def database_path(self, cn: Any) -> Any:
        """Database file for connection details (string or mapping)."""
        if isinstance(cn, Mapping):
            cn = cn.get("database")
        return resolve_db_path(cn)

    async def connect(self, cn: Any) -> aiosqlite.Connection:
        """Open a connection in autocommit mode; transactions are explicit."""
        client = await aiosqlite.connect(
            self.database_path(cn), timeout=self._timeout, isolation_level=None
        )
        client.row_factory = aiosqlite.Row
        self._clients.add(client)
        return client

    async def release(self, client: aiosqlite.Connection) -> None:
        """Close a connection."""
        self._clients.discard(client)
        await client.close()

    async def execute(
        self, client: aiosqlite.Connection, query: str, values: Any = None
    ) -> Result:
        """Execute one statement and return all of its rows."""
        async with client.execute(query, _bind(values)) as cursor:
            rows = [dict(row) for row in await cursor.fetchall()]
            columns = [d[0] for d in cursor.description or ()]
            row_count = len(rows) if cursor.description else cursor.rowcount
        return Result(rows=rows, row_count=max(row_count, 0), columns=columns)

    async def iterate(
        self,
        client: aiosqlite.Connection,
        query: str,
        values: Any = None,
        batch_size: int = 100,
    ) -> AsyncIterator[list[dict]]:
        """Execute one statement and yield its rows in batches."""
        async with client.execute(query, _bind(values)) as cursor:
            while True:
                batch = await cursor.fetchmany(batch_size)
                if not batch:
                    break
                yield [dict(row) for row in batch]

    def begin(self, mode: TransactionMode | None = None) -> str:
        """
        Begin statement for a transaction mode.

        SQLite transactions are always serializable, so modes map onto
        its locking behavior: read-only takes no lock up front (deferred),
        serializable takes an exclusive lock, any other explicit level or
        read-write takes the write lock immediately.
        """
        if mode is None:
            return "begin"
        if mode.read_only:
            return "begin deferred"
        if mode.level is IsolationLevel.SERIALIZABLE:
            return "begin exclusive"
        if mode.level is not IsolationLevel.NONE or mode.read_only is False:
            return "begin immediate"
        return "begin"

    async def end(self) -> None:
        """Close connections that were never released."""
        if self._clients:
            logger.warning("Closing %d unreleased connection(s)", len(self._clients))
        for client in list(self._clients):
            await self.release(client)
