"""Driver abstraction consumed by the protocol layer."""

from typing import Any, AsyncIterator, Protocol

from ..models import Result
from ..txmode import TransactionMode


class IDriver(Protocol):
    """Low-level database access: connections, execution, parameter binding."""

    async def connect(self, cn: Any) -> Any:
        """Open a connection and return the driver client."""
        ...

    async def release(self, client: Any) -> None:
        """Release a connection obtained from connect()."""
        ...

    async def execute(self, client: Any, query: str, values: Any = None) -> Result:
        """Execute one statement and return all of its rows."""
        ...

    def iterate(
        self, client: Any, query: str, values: Any = None, batch_size: int = 100
    ) -> AsyncIterator[list[dict]]:
        """Execute one statement and yield its rows in batches."""
        ...

    def begin(self, mode: TransactionMode | None = None) -> str:
        """Statement that opens a transaction in the given mode."""
        ...

    async def end(self) -> None:
        """Shut down the driver."""
        ...
