"""Core data models for dblayer."""

from .context import PendingContext, SettledContext, TaskContext
from .events import EventContext
from .result import QueryResult, Result
from .tracing import TraceEvent

__all__ = [
    # Task / transaction context
    "PendingContext",
    "SettledContext",
    "TaskContext",
    # Events
    "EventContext",
    # Results
    "QueryResult",
    "Result",
    # Tracing
    "TraceEvent",
]
