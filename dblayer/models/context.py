"""Task and transaction context models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union


@dataclass(frozen=True)
class PendingContext:
    """
    Context of a task or transaction that is still running.

    Sent with the start notification and with every query event
    executed inside the task or transaction.

    Attributes:
        is_transaction: True for a transaction, False for a task.
        start: When the task or transaction started (UTC).
        tag: Caller-supplied identifier, opaque to the library.
        context: Receiver object the callback was invoked with, if any.
        level: Nesting depth, 0 for the outermost task or transaction.
        parent: Context of the enclosing level, if nested.
    """

    is_transaction: bool
    start: datetime
    tag: Any = None
    context: Any = None
    level: int = 0
    parent: TaskContext | None = None

    finish = None
    success = None
    result = None

    @classmethod
    def create(
        cls,
        is_transaction: bool,
        tag: Any = None,
        context: Any = None,
        parent: TaskContext | None = None,
    ) -> PendingContext:
        """Create a context for a task or transaction starting now."""
        return cls(
            is_transaction=is_transaction,
            start=datetime.now(timezone.utc),
            tag=tag,
            context=context,
            level=0 if parent is None else parent.level + 1,
            parent=parent,
        )

    def settle(self, success: bool, result: Any) -> SettledContext:
        """Finish the context, with the resolved value or the raised error."""
        return SettledContext(
            is_transaction=self.is_transaction,
            start=self.start,
            finish=datetime.now(timezone.utc),
            success=success,
            result=result,
            tag=self.tag,
            context=self.context,
            level=self.level,
            parent=self.parent,
        )


@dataclass(frozen=True)
class SettledContext:
    """
    Context of a finished task or transaction.

    `result` holds the resolved value when `success` is True,
    and the exception that was raised otherwise.
    """

    is_transaction: bool
    start: datetime
    finish: datetime
    success: bool
    result: Any
    tag: Any = None
    context: Any = None
    level: int = 0
    parent: TaskContext | None = None

    @property
    def duration(self) -> float:
        """Seconds between start and finish."""
        return (self.finish - self.start).total_seconds()


TaskContext = Union[PendingContext, SettledContext]
