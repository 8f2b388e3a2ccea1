"""Events module."""

from .dispatcher import EVENT_NAMES, Events, IEvents

__all__ = ["EVENT_NAMES", "Events", "IEvents"]
