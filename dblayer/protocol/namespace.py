"""Read-only protection for protocol namespaces."""

from typing import Any

from ..errors import WriteProtectionError


class LockableNamespace:
    """
    Object whose members can be made read-only.

    Sealed members (the built-ins) reject assignment and deletion while
    new members may still be added. Once locked, the whole namespace
    rejects any change.
    """

    def __init__(self) -> None:
        object.__setattr__(self, "_sealed", frozenset())
        object.__setattr__(self, "_locked", False)

    def __setattr__(self, name: str, value: Any) -> None:
        self._check_write(name)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        self._check_write(name)
        object.__delattr__(self, name)

    def _check_write(self, name: str) -> None:
        state = self.__dict__
        if state.get("_locked", False) or name in state.get("_sealed", ()):
            raise WriteProtectionError(self, name)


class Namespace(LockableNamespace):
    """Lockable namespace built from keyword members."""

    def __init__(self, **members: Any) -> None:
        super().__init__()
        for name, value in members.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        items = ", ".join(
            f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_")
        )
        return f"{type(self).__name__}({items})"


def public_members(target: LockableNamespace) -> frozenset[str]:
    """Names of all public members, including those defined on the class."""
    return frozenset(name for name in dir(target) if not name.startswith("_"))


def is_locked(target: Any) -> bool:
    """Whether the target namespace has been locked."""
    return isinstance(target, LockableNamespace) and target.__dict__.get(
        "_locked", False
    )


class NamespaceGuard:
    """
    Applies read-only protection to protocol namespaces.

    With no_locking=True every call is a no-op, leaving namespaces
    open to extension and override (for mock injection in tests).
    """

    def __init__(self, no_locking: bool = False):
        self._no_locking = no_locking

    @property
    def no_locking(self) -> bool:
        return self._no_locking

    def seal(self, target: LockableNamespace) -> None:
        """Make the current public members read-only, keep adding open."""
        if self._no_locking or is_locked(target):
            return
        object.__setattr__(target, "_sealed", public_members(target))

    def lock(self, target: LockableNamespace, deep: bool = False) -> None:
        """Make the namespace read-only. Locking twice is a no-op."""
        if self._no_locking:
            return
        self._lock(target, deep, set())

    def _lock(self, target: LockableNamespace, deep: bool, seen: set[int]) -> None:
        seen.add(id(target))
        if not is_locked(target):
            object.__setattr__(target, "_sealed", public_members(target))
            object.__setattr__(target, "_locked", True)
        if not deep:
            return
        for name, value in vars(target).items():
            if name.startswith("_"):
                continue
            if isinstance(value, LockableNamespace) and id(value) not in seen:
                self._lock(value, deep, seen)
