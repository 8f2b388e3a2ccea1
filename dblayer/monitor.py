"""Monitor: logs and records every library event."""

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from .events import EVENT_NAMES
from .logging_config import get_logger
from .models import EventContext, TraceEvent

logger = get_logger(__name__)


class Monitor:
    """
    Wraps event handlers so that every event is logged and recorded.

    Existing handlers keep running after the monitor's own handler, and
    their exceptions propagate as before.
    """

    def __init__(self, level: int = logging.INFO, summary_length: int = 100):
        self._level = level
        self._summary_length = summary_length
        self.events: list[TraceEvent] = []

    def attach(
        self,
        options: Mapping[str, Any] | None = None,
        events: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        """Options with monitoring handlers for the given events (all by default)."""
        attached = dict(options or {})
        for name in events if events is not None else EVENT_NAMES:
            if name not in EVENT_NAMES:
                raise ValueError(f"Unknown event: {name}")
            attached[name] = self._wrap(name, attached.get(name))
        return attached

    def clear(self) -> None:
        """Forget recorded events."""
        self.events.clear()

    def track(self, event_type: str, data: dict) -> TraceEvent:
        """Log an event and record it."""
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        self.events.append(trace_event)
        logger.log(
            logging.ERROR if event_type == "error" else self._level,
            "%s: %s",
            event_type,
            data,
            extra={"context": {"event": event_type}},
        )
        return trace_event

    def _wrap(
        self, name: str, handler: Callable[..., Any] | None
    ) -> Callable[..., Any]:
        def monitored(*args: Any) -> Any:
            self.track(name, self._summarize(name, args))
            if handler is not None:
                return handler(*args)
            return None

        return monitored

    def _summarize(self, name: str, args: tuple) -> dict:
        if name in ("connect", "disconnect"):
            return {"client": type(args[0]).__name__}
        if name == "extend":
            return {"target": type(args[0]).__name__}
        if name == "receive":
            data, result, e = args
            summary = self._context(e)
            summary["rows"] = len(data)
            summary["streamed"] = result is None
            return summary
        if name == "error":
            err, e = args
            summary = self._context(e)
            summary["error"] = f"{type(err).__name__}: {err}"
            if e.cn is not None:
                summary["cn"] = e.cn
            return summary
        # query, task, transact
        return self._context(args[0])

    def _context(self, e: EventContext) -> dict:
        summary: dict[str, Any] = {}
        if e.query is not None:
            summary["query"] = str(e.query)[: self._summary_length]
        if e.params is not None:
            summary["params"] = e.params
        ctx = e.task_context
        if ctx is not None:
            summary["tag"] = ctx.tag
            summary["level"] = ctx.level
            summary["transaction"] = ctx.is_transaction
            if ctx.finish is None:
                summary["phase"] = "start"
            else:
                summary["phase"] = "finish"
                summary["success"] = ctx.success
                summary["duration"] = ctx.duration
        return summary
