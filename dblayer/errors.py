"""Exceptions raised by dblayer."""

from enum import Enum
from typing import Any


class InternalError(Exception):
    """
    Failure of a user event handler that vetoes an operation.

    Raised by queries when a `query` or `receive` handler throws.
    The original exception is kept in `error` and as `__cause__`.
    """

    def __init__(self, error: Any):
        self.error = error
        message = str(error) if isinstance(error, BaseException) else repr(error)
        super().__init__(message)
        if isinstance(error, BaseException):
            self.__cause__ = error


class WriteProtectionError(AttributeError):
    """Attempt to change a read-only member of a protocol namespace."""

    def __init__(self, target: Any, name: str):
        self.target_type = type(target).__name__
        self.name = name
        super().__init__(
            f"Cannot assign to read-only property '{name}' of {self.target_type}."
        )


class QueryResultErrorCode(int, Enum):
    """Reasons for a query result not matching its expected mask."""

    NO_DATA = 0
    NOT_EMPTY = 1
    MULTIPLE = 2


_MESSAGES = {
    QueryResultErrorCode.NO_DATA: "No data returned from the query.",
    QueryResultErrorCode.NOT_EMPTY: "No return data was expected.",
    QueryResultErrorCode.MULTIPLE: "Multiple rows were not expected.",
}


class QueryResultError(Exception):
    """Query returned a number of rows that the requested mask does not allow."""

    def __init__(
        self,
        code: QueryResultErrorCode,
        result: Any = None,
        query: Any = None,
        values: Any = None,
    ):
        self.code = code
        self.message = _MESSAGES[code]
        self.result = result
        self.query = query
        self.values = values
        super().__init__(self.message)

    @property
    def received(self) -> int:
        """Number of rows that were received."""
        if self.result is None:
            return 0
        return len(self.result.rows)
