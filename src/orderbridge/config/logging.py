"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import InvalidConfigurationError

LOG_LEVEL_VAR: Final[str] = "ORDERBRIDGE_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every request line at INFO, including query strings.
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def resolve_log_level(value: str | int | None = None) -> int:
    """Turn a level name or number into a ``logging`` level.

    ``None`` reads ``ORDERBRIDGE_LOG_LEVEL`` and defaults to INFO.
    """

    if isinstance(value, int):
        return value
    name = (value or optional_env_var(LOG_LEVEL_VAR, "INFO")).upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise InvalidConfigurationError(LOG_LEVEL_VAR, name, "a logging level name")
    return level


def configure_logging(*, level: str | int | None = None, force: bool = False) -> None:
    """Configure the root logger with a terse CLI format.

    Third-party HTTP loggers stay at WARNING unless DEBUG is requested.
    """

    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(
            resolved if resolved <= logging.DEBUG else logging.WARNING
        )
