"""
Event dispatcher: notifies user handlers at points of the connection,
query, task and transaction lifecycle.

Two failure policies:
- Veto-capable (query, receive): a handler exception is returned wrapped in
  InternalError, and the operation fails with it.
- Fire-and-forget (connect, disconnect, task, transact, error, extend): a
  handler exception is absorbed and reported to the diagnostic sink.

Handlers are called synchronously; their return values are ignored.
"""

import traceback
from typing import Any, Callable, Protocol

from ..errors import InternalError
from ..logging_config import get_logger
from ..models import EventContext, Result

logger = get_logger(__name__)

EVENT_NAMES = (
    "connect",
    "disconnect",
    "query",
    "receive",
    "task",
    "transact",
    "error",
    "extend",
)


class IEvents(Protocol):
    """Lifecycle notifications for one library instance."""

    def connect(self, client: Any) -> None:
        """New connection acquired."""
        ...

    def disconnect(self, client: Any) -> None:
        """Connection released."""
        ...

    def query(self, e: EventContext) -> InternalError | None:
        """Query about to execute. Returns the error that must fail it, if any."""
        ...

    def receive(
        self, data: list[dict], result: Result | None, e: EventContext
    ) -> InternalError | None:
        """Rows received. Returns the error that must fail the request, if any."""
        ...

    def task(self, e: EventContext) -> None:
        """Task start or finish."""
        ...

    def transact(self, e: EventContext) -> None:
        """Transaction start or finish."""
        ...

    def error(self, err: Any, e: EventContext) -> None:
        """Error surfaced by the library."""
        ...

    def extend(self, obj: Any) -> None:
        """Protocol object constructed and ready for extension."""
        ...


class Events:
    """Dispatches lifecycle events to the handlers found in the options."""

    def __init__(self, options: Any = None, suppress_errors: bool = False):
        self._options = options
        self._suppress_errors = suppress_errors

    @property
    def suppress_errors(self) -> bool:
        """Whether the diagnostic sink is silenced."""
        return self._suppress_errors

    def handler(self, name: str) -> Callable[..., Any] | None:
        """Registered handler for an event, or None."""
        if self._options is None:
            return None
        if isinstance(self._options, dict):
            fn = self._options.get(name)
        else:
            fn = getattr(self._options, name, None)
        return fn if callable(fn) else None

    def connect(self, client: Any) -> None:
        self._notify("connect", client)

    def disconnect(self, client: Any) -> None:
        self._notify("disconnect", client)

    def query(self, e: EventContext) -> InternalError | None:
        return self._veto("query", e)

    def receive(
        self, data: list[dict], result: Result | None, e: EventContext
    ) -> InternalError | None:
        return self._veto("receive", data, result, e)

    def task(self, e: EventContext) -> None:
        self._notify("task", e)

    def transact(self, e: EventContext) -> None:
        self._notify("transact", e)

    def error(self, err: Any, e: EventContext) -> None:
        # The reported error keeps propagating whatever the handler does
        self._notify("error", err, e)

    def extend(self, obj: Any) -> None:
        self._notify("extend", obj)

    def unexpected(self, event: str, err: Any) -> None:
        """
        Report a handler failure that was absorbed.

        Writes the event name and the error's traceback (or message, or
        raw value) to the log, unless suppress_errors is set.
        """
        if self._suppress_errors:
            return

        logger.error(
            "Unexpected error in '%s' event handler.",
            event,
            extra={"context": {"event": event}},
        )
        if err is not None:
            logger.error(_describe(err), extra={"context": {"event": event}})

    def _notify(self, name: str, *args: Any) -> None:
        fn = self.handler(name)
        if fn is None:
            return
        try:
            fn(*args)
        except Exception as err:
            self.unexpected(name, err)

    def _veto(self, name: str, *args: Any) -> InternalError | None:
        fn = self.handler(name)
        if fn is None:
            return None
        try:
            fn(*args)
        except Exception as err:
            return InternalError(err)
        return None


def _describe(err: Any) -> str:
    """Traceback if available, else message, else the raw value."""
    if isinstance(err, BaseException):
        if err.__traceback__ is not None:
            return "".join(
                traceback.format_exception(type(err), err, err.__traceback__)
            ).rstrip()
        message = str(err)
        if message:
            return message
    return repr(err)
