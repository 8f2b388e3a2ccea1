"""Query result models."""

from dataclasses import dataclass, field
from enum import IntFlag


class QueryResult(IntFlag):
    """Mask of the number of rows a query is expected to return."""

    ONE = 1
    MANY = 2
    NONE = 4
    ANY = 6  # MANY | NONE


@dataclass
class Result:
    """Raw result of a single statement, as produced by the driver."""

    rows: list[dict] = field(default_factory=list)
    row_count: int = 0
    columns: list[str] = field(default_factory=list)
