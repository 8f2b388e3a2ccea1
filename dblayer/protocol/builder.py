"""Construction of protocol objects, with the extension point."""

from typing import Any, TypeVar

from .namespace import LockableNamespace

P = TypeVar("P", bound=LockableNamespace)


def build_protocol(cls: type[P], library: Any, **state: Any) -> P:
    """
    Build a fresh protocol object for one level (root, task, transaction).

    1. Construct the object, installing the built-in members.
    2. Seal the built-ins, so extensions cannot replace them.
    3. Fire the `extend` event with the object.
    4. Lock the object, extensions included.

    Nothing is shared between levels: each call yields its own object,
    and `extend` runs against it.
    """
    obj = cls(library, **state)
    library.guard.seal(obj)
    library.events.extend(obj)
    library.guard.lock(obj)
    return obj
