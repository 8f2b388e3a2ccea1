"""Tracing data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single recorded library event."""

    id: str
    event_type: str  # e.g. "query", "task", "error"
    data: dict  # self-contained summary for display
    timestamp: datetime
