"""Library initialization options."""

from collections.abc import Mapping
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import env_flag, load_environment
from .utils import is_connection_details

Handler = Optional[Callable[..., Any]]


class InitOptions(BaseModel):
    """
    Options of one library instance.

    Event handlers are optional; each must be callable. Flags not given
    explicitly fall back to DBLAYER_NO_LOCKING / DBLAYER_SUPPRESS_ERRORS.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", arbitrary_types_allowed=True
    )

    # Events
    connect: Handler = None
    disconnect: Handler = None
    query: Handler = None
    receive: Handler = None
    task: Handler = None
    transact: Handler = None
    error: Handler = None
    extend: Handler = None

    # Behavior
    no_locking: bool = Field(
        default_factory=lambda: env_flag("DBLAYER_NO_LOCKING")
    )
    suppress_errors: bool = Field(
        default_factory=lambda: env_flag("DBLAYER_SUPPRESS_ERRORS")
    )
    cap_sql: bool = False
    driver: Any = None


def parse_options(options: Any = None, **kwargs: Any) -> InitOptions:
    """
    Validate initialization options.

    Raises:
        TypeError: Connection details were passed instead of options,
                   or the options are invalid.
    """
    if options is not None and is_connection_details(options):
        # Most common mistake: passing connection details to init()
        raise TypeError(
            "Invalid library initialization: must initialize the library "
            "before creating a database object."
        )

    if isinstance(options, InitOptions):
        if not kwargs:
            return options
        values = {name: getattr(options, name) for name in InitOptions.model_fields}
        values.update(kwargs)
    elif options is None or isinstance(options, Mapping):
        values = {**(options or {}), **kwargs}
    else:
        raise TypeError("Invalid initialization options.")

    load_environment()
    try:
        return InitOptions(**values)
    except ValidationError as e:
        raise TypeError(f"Invalid initialization options: {e}") from e
