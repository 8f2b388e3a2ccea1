"""Library instance: validated options, events, driver and the root namespace."""

from collections.abc import Mapping
from typing import Any

from .driver import SQLiteDriver
from .errors import InternalError, QueryResultError, QueryResultErrorCode
from .events import Events
from .logging_config import get_logger
from .models import EventContext, QueryResult
from .options import InitOptions, parse_options
from .protocol import Database, Namespace, NamespaceGuard, build_protocol
from .txmode import IsolationLevel, TransactionMode
from .utils import mask_connection

logger = get_logger(__name__)


class Library(Namespace):
    """
    One initialized instance of the library.

    Calling it with connection details creates a Database. Every public
    member is read-only once init() returns (unless no_locking is set).
    """

    def __init__(self, options: InitOptions):
        super().__init__(
            options=options,
            events=Events(options, suppress_errors=options.suppress_errors),
            guard=NamespaceGuard(no_locking=options.no_locking),
            driver=options.driver if options.driver is not None else SQLiteDriver(),
            QueryResult=QueryResult,
            QueryResultError=QueryResultError,
            QueryResultErrorCode=QueryResultErrorCode,
            InternalError=InternalError,
            txmode=Namespace(
                IsolationLevel=IsolationLevel,
                TransactionMode=TransactionMode,
            ),
        )

    def __call__(self, cn: Any) -> Database:
        """Create a database object for the connection details."""
        if not cn or not isinstance(cn, (str, Mapping)):
            raise TypeError("Invalid connection details.")
        return build_protocol(Database, self, cn=cn)

    def cap(self, sql: str) -> str:
        """Library-generated SQL, capitalized when cap_sql is set."""
        return sql.upper() if self.options.cap_sql else sql

    async def acquire(self, cn: Any) -> Any:
        """Open a driver connection, firing `connect`, or `error` on failure."""
        try:
            client = await self.driver.connect(cn)
        except Exception as err:
            self.events.error(err, EventContext(cn=mask_connection(cn)))
            raise
        self.events.connect(client)
        return client

    async def release(self, client: Any) -> None:
        """Release a driver connection, firing `disconnect`."""
        self.events.disconnect(client)
        await self.driver.release(client)

    async def end(self) -> None:
        """Shut down the driver (call when exiting the application)."""
        await self.driver.end()


def init(options: Any = None, **kwargs: Any) -> Library:
    """
    Initialize the library.

    Args:
        options: Mapping of options or an InitOptions instance.
        **kwargs: Options given as keywords; they override `options`.

    Returns:
        A locked Library. Call it with connection details to get a Database.

    Raises:
        TypeError: Invalid options, or connection details passed instead.

    Example:
        dbl = init(query=lambda e: print(e.query))
        db = dbl("app.db")
        rows = await db.any("select * from users where active = ?", [True])
    """
    library = Library(parse_options(options, **kwargs))
    library.guard.lock(library, deep=True)
    logger.debug(
        "Library initialized (no_locking=%s, suppress_errors=%s)",
        library.options.no_locking,
        library.options.suppress_errors,
    )
    return library
