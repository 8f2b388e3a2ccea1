"""Transaction modes."""

from enum import Enum


class IsolationLevel(str, Enum):
    """Transaction isolation levels."""

    NONE = ""
    SERIALIZABLE = "serializable"
    REPEATABLE_READ = "repeatable read"
    READ_COMMITTED = "read committed"


class TransactionMode:
    """
    Settings of the statement that opens a transaction.

    Args:
        level: Isolation level.
        read_only: True for "read only", False for "read write",
                   None to leave it to the server default.
        deferrable: Only valid for serializable read-only transactions.
    """

    def __init__(
        self,
        level: IsolationLevel = IsolationLevel.NONE,
        read_only: bool | None = None,
        deferrable: bool | None = None,
    ):
        level = IsolationLevel(level)
        if deferrable is not None and not (
            level is IsolationLevel.SERIALIZABLE and read_only
        ):
            raise ValueError(
                "Deferrable mode requires a serializable read-only transaction."
            )
        self.level = level
        self.read_only = read_only
        self.deferrable = deferrable

    def begin(self) -> str:
        """Begin statement for servers with isolation levels (PostgreSQL syntax)."""
        parts = ["begin"]
        if self.level is not IsolationLevel.NONE:
            parts.append(f"isolation level {self.level.value}")
        if self.read_only is not None:
            parts.append("read only" if self.read_only else "read write")
        if self.deferrable is not None:
            parts.append("deferrable" if self.deferrable else "not deferrable")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"TransactionMode(level={self.level!r}, read_only={self.read_only!r}, "
            f"deferrable={self.deferrable!r})"
        )
