"""Driver module."""

from .base import IDriver
from .sqlite import SQLiteDriver

__all__ = ["IDriver", "SQLiteDriver"]
