"""Environment-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

from dotenv import load_dotenv

PathLike = Union[str, Path]

TRUE_VALUES = {"1", "true", "yes", "on"}

_env_loaded = False


def load_environment(dotenv_path: PathLike | None = None) -> None:
    """Load variables from a .env file once. Existing variables win."""
    global _env_loaded
    if _env_loaded and dotenv_path is None:
        return
    load_dotenv(dotenv_path)
    _env_loaded = True


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to a path usable by the sqlite driver."""
    if env_value is None:
        env_value = os.getenv("DATABASE_URL")
    if not env_value or str(env_value) == ":memory:":
        return ":memory:"

    value = str(env_value)
    if value.startswith("sqlite:///"):
        value = value[len("sqlite:///"):]

    candidate = Path(value)
    return candidate if candidate.is_absolute() else Path.cwd() / candidate
