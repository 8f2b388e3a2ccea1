"""Protocol objects: root database, tasks, transactions, shared connections."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterator, Callable

from ..errors import QueryResultError, QueryResultErrorCode
from ..logging_config import get_logger
from ..models import EventContext, PendingContext, QueryResult, Result, TaskContext
from ..txmode import TransactionMode
from .builder import build_protocol
from .namespace import LockableNamespace

logger = get_logger(__name__)

TaskCallback = Callable[["Task"], Any]


def _unpack(query: Any, values: Any) -> tuple[Any, Any]:
    """Query text and values from a query string or a {text, values} mapping."""
    if isinstance(query, Mapping):
        if values is None:
            values = query.get("values")
        return query.get("text"), values
    return query, values


def _apply_mask(result: Result, mask: QueryResult, query: Any, values: Any) -> Any:
    """Data for the mask, or QueryResultError when the row count does not fit."""
    rows = result.rows
    if not rows:
        if mask & QueryResult.NONE:
            return rows if mask & QueryResult.MANY else None
        code = QueryResultErrorCode.NO_DATA
    elif len(rows) == 1 and mask & QueryResult.ONE:
        return rows[0]
    elif mask & QueryResult.MANY:
        return rows
    elif mask & QueryResult.ONE:
        code = QueryResultErrorCode.MULTIPLE
    else:
        code = QueryResultErrorCode.NOT_EMPTY
    raise QueryResultError(code, result=result, query=query, values=values)


class BaseProtocol(LockableNamespace):
    """Query methods shared by every protocol object."""

    def __init__(
        self,
        library: Any,
        cn: Any = None,
        ctx: TaskContext | None = None,
        client: Any = None,
        in_transaction: bool = False,
    ):
        super().__init__()
        self._library = library
        self._cn = cn
        self._ctx = ctx
        self._client = client
        self._in_transaction = in_transaction

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[Any]:
        """Connection of this level, or a new one for the duration of the block."""
        if self._client is not None:
            yield self._client
            return
        client = await self._library.acquire(self._cn)
        try:
            yield client
        finally:
            await self._library.release(client)

    def _event(self, client: Any, query: Any = None, values: Any = None) -> EventContext:
        return EventContext(
            client=client, query=query, params=values, task_context=self._ctx
        )

    async def _execute(
        self, client: Any, query: Any, values: Any, mask: QueryResult | None
    ) -> Any:
        events = self._library.events
        text, values = _unpack(query, values)
        e = self._event(client, query, values)

        if not isinstance(text, str) or not text.strip():
            err = TypeError("Invalid query format.")
            events.error(err, e)
            raise err

        error = events.query(e)
        if error is not None:
            events.error(error, e)
            raise error

        try:
            result = await self._library.driver.execute(client, text, values)
        except Exception as err:
            events.error(err, e)
            raise

        if result.rows:
            error = events.receive(result.rows, result, e)
            if error is not None:
                events.error(error, e)
                raise error

        if mask is None:
            return result
        try:
            return _apply_mask(result, mask, query, values)
        except QueryResultError as err:
            events.error(err, e)
            raise

    async def query(
        self, query: Any, values: Any = None, mask: QueryResult = QueryResult.ANY
    ) -> Any:
        """
        Execute a query and return data matching the result mask.

        Args:
            query: Query text, or a mapping with "text" and optional "values".
            values: Values bound by the driver.
            mask: Number of rows expected.

        Returns:
            A row (ONE), a list of rows (MANY), or None (NONE),
            depending on the mask and the rows received.

        Raises:
            QueryResultError: The rows received do not fit the mask.
            InternalError: A query or receive handler failed.
        """
        async with self._connection() as client:
            return await self._execute(client, query, values, QueryResult(mask))

    async def none(self, query: Any, values: Any = None) -> None:
        """Execute a query expecting no rows."""
        return await self.query(query, values, QueryResult.NONE)

    async def one(self, query: Any, values: Any = None) -> dict:
        """Execute a query expecting exactly one row."""
        return await self.query(query, values, QueryResult.ONE)

    async def many(self, query: Any, values: Any = None) -> list[dict]:
        """Execute a query expecting one or more rows."""
        return await self.query(query, values, QueryResult.MANY)

    async def one_or_none(self, query: Any, values: Any = None) -> dict | None:
        """Execute a query expecting at most one row."""
        return await self.query(query, values, QueryResult.ONE | QueryResult.NONE)

    async def many_or_none(self, query: Any, values: Any = None) -> list[dict]:
        """Execute a query expecting any number of rows."""
        return await self.query(query, values, QueryResult.ANY)

    async def any(self, query: Any, values: Any = None) -> list[dict]:
        """Same as many_or_none()."""
        return await self.query(query, values, QueryResult.ANY)

    async def result(self, query: Any, values: Any = None) -> Result:
        """Execute a query and return the raw Result."""
        async with self._connection() as client:
            return await self._execute(client, query, values, None)

    async def stream(
        self, query: Any, values: Any = None, batch_size: int = 100
    ) -> AsyncIterator[list[dict]]:
        """
        Execute a query and yield its rows in batches.

        The `receive` event fires for every batch, with no Result. Wrap the
        iterator in contextlib.aclosing() when it may be abandoned early.
        """
        events = self._library.events
        text, values = _unpack(query, values)
        async with self._connection() as client:
            e = self._event(client, query, values)
            if not isinstance(text, str) or not text.strip():
                err = TypeError("Invalid query format.")
                events.error(err, e)
                raise err

            error = events.query(e)
            if error is not None:
                events.error(error, e)
                raise error

            async with aclosing(
                self._library.driver.iterate(client, text, values, batch_size)
            ) as batches:
                while True:
                    try:
                        batch = await batches.__anext__()
                    except StopAsyncIteration:
                        break
                    except Exception as err:
                        events.error(err, e)
                        raise
                    error = events.receive(batch, None, e)
                    if error is not None:
                        events.error(error, e)
                        raise error
                    yield batch

    async def task(
        self, callback: TaskCallback, tag: Any = None, context: Any = None
    ) -> Any:
        """
        Run a callback with a task: a protocol object bound to one connection.

        The callback may be a coroutine function. A bound method callback
        makes its instance the receiver recorded in the task context.
        """
        return await self._run(callback, tag, context, False, None)

    async def tx(
        self,
        callback: TaskCallback,
        tag: Any = None,
        context: Any = None,
        mode: TransactionMode | None = None,
    ) -> Any:
        """
        Run a callback inside a transaction.

        Commits when the callback succeeds and rolls back when it raises.
        Inside another transaction a savepoint is used instead.
        """
        return await self._run(callback, tag, context, True, mode)

    async def _run(
        self,
        callback: TaskCallback,
        tag: Any,
        context: Any,
        is_transaction: bool,
        mode: TransactionMode | None,
    ) -> Any:
        if not callable(callback):
            raise TypeError("Callback function must be specified.")
        if context is None and inspect.ismethod(callback):
            context = callback.__self__

        events = self._library.events
        notify = events.transact if is_transaction else events.task

        async with self._connection() as client:
            ctx = PendingContext.create(is_transaction, tag, context, parent=self._ctx)
            t = build_protocol(
                Task,
                self._library,
                cn=self._cn,
                ctx=ctx,
                client=client,
                in_transaction=self._in_transaction or is_transaction,
            )
            e = EventContext(client=client, task_context=ctx)
            notify(e)
            try:
                if is_transaction:
                    value = await t._transact(callback, self._in_transaction, mode)
                else:
                    value = await _invoke(callback, t)
            except BaseException as err:
                # Cancellation included: every start gets its finish
                notify(e.with_task_context(ctx.settle(False, err)))
                raise
            notify(e.with_task_context(ctx.settle(True, value)))
            return value


async def _invoke(callback: TaskCallback, t: Task) -> Any:
    value = callback(t)
    if inspect.isawaitable(value):
        value = await value
    return value


class Task(BaseProtocol):
    """Protocol object of a task or transaction level."""

    @property
    def ctx(self) -> TaskContext | None:
        """Context of this task or transaction, as it was at the start."""
        return self._ctx

    async def _command(self, sql: str) -> None:
        await self._execute(self._client, self._library.cap(sql), None, None)

    async def _transact(
        self,
        callback: TaskCallback,
        nested: bool,
        mode: TransactionMode | None,
    ) -> Any:
        level = self._ctx.level
        if nested:
            if mode is not None:
                logger.debug("Transaction mode ignored for nested transaction")
            await self._command(f"savepoint level_{level}")
        else:
            await self._command(self._library.driver.begin(mode))

        try:
            value = await _invoke(callback, self)
        except Exception:
            if nested:
                await self._command(f"rollback to savepoint level_{level}")
            else:
                await self._command("rollback")
            raise

        if nested:
            await self._command(f"release savepoint level_{level}")
        else:
            await self._command("commit")
        return value


class SharedConnection(BaseProtocol):
    """Protocol object holding one connection until its block exits."""

    @property
    def client(self) -> Any:
        """Driver connection in use."""
        return self._client


class Database(BaseProtocol):
    """Root protocol object; every operation acquires its own connection."""

    @property
    def cn(self) -> Any:
        """Connection details this database was created with."""
        return self._cn

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[SharedConnection]:
        """Hold one connection for several operations."""
        client = await self._library.acquire(self._cn)
        try:
            yield build_protocol(
                SharedConnection, self._library, cn=self._cn, client=client
            )
        finally:
            await self._library.release(client)
