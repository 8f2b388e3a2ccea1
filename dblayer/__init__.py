"""
dblayer: asyncio database access with lifecycle events.

Example:
    import dblayer

    dbl = dblayer.init(
        query=lambda e: print("QUERY:", e.query),
        extend=lambda obj: setattr(obj, "users", UsersRepository(obj)),
    )
    db = dbl("app.db")

    async def load(t):
        user = await t.one("select * from users where id = ?", [1])
        return await t.any("select * from orders where user_id = ?", [user["id"]])

    orders = await db.task(load, tag="load-orders")
"""

__version__ = "0.1.0"

from .errors import (
    InternalError,
    QueryResultError,
    QueryResultErrorCode,
    WriteProtectionError,
)
from .events import Events, IEvents
from .library import Library, init
from .models import (
    EventContext,
    PendingContext,
    QueryResult,
    Result,
    SettledContext,
    TaskContext,
    TraceEvent,
)
from .monitor import Monitor
from .options import InitOptions
from .protocol import (
    Database,
    LockableNamespace,
    Namespace,
    NamespaceGuard,
    SharedConnection,
    Task,
    build_protocol,
)
from .txmode import IsolationLevel, TransactionMode
from .utils import mask_connection

__all__ = [
    # Entry point
    "init",
    "Library",
    "InitOptions",
    # Models
    "EventContext",
    "PendingContext",
    "SettledContext",
    "TaskContext",
    "QueryResult",
    "Result",
    "TraceEvent",
    # Errors
    "InternalError",
    "QueryResultError",
    "QueryResultErrorCode",
    "WriteProtectionError",
    # Components
    "Events",
    "IEvents",
    "Monitor",
    "Database",
    "Task",
    "SharedConnection",
    "LockableNamespace",
    "Namespace",
    "NamespaceGuard",
    "build_protocol",
    # Transaction modes
    "IsolationLevel",
    "TransactionMode",
    # Helpers
    "mask_connection",
]
