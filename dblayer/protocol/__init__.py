"""Protocol module: database objects and namespace protection."""

from .builder import build_protocol
from .database import BaseProtocol, Database, SharedConnection, Task
from .namespace import LockableNamespace, Namespace, NamespaceGuard, is_locked

__all__ = [
    "BaseProtocol",
    "Database",
    "LockableNamespace",
    "Namespace",
    "NamespaceGuard",
    "SharedConnection",
    "Task",
    "build_protocol",
    "is_locked",
]
