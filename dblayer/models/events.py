"""Event context model shared by query, receive, error, task and transact events."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .context import TaskContext


@dataclass(frozen=True)
class EventContext:
    """
    Details of the operation an event refers to.

    Attributes:
        client: Active driver connection.
        query: Original query text or query object (query/receive/error).
        params: Query values, set whenever the caller supplied any.
        task_context: Set for task/transact events and for queries run
            inside a task or transaction.
        cn: Connection details with the password masked, only for
            connection-related errors.
    """

    client: Any = None
    query: Any = None
    params: Any = None
    task_context: TaskContext | None = None
    cn: Any = None

    def with_task_context(self, task_context: TaskContext) -> EventContext:
        """Copy of this context bound to another task context."""
        return replace(self, task_context=task_context)
