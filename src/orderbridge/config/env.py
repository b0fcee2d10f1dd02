"""Typed readers for environment-backed settings.

Blank values count as unset everywhere, so an empty line in a ``.env`` file
never overrides a default.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def _read(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return every named variable, or raise naming all that are missing."""

    values = {name: _read(name) for name in names}
    missing = sorted(name for name, value in values.items() if value is None)
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in values.items() if value is not None}


def optional_env_var(name: str, default: str) -> str:
    value = _read(name)
    return default if value is None else value


def optional_env_int(name: str, default: int, *, minimum: int = 0) -> int:
    value = _read(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise InvalidConfigurationError(name, value, "an integer") from None
    if parsed < minimum:
        raise InvalidConfigurationError(name, value, f"an integer >= {minimum}")
    return parsed


def optional_env_float(name: str, default: float) -> float:
    value = _read(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise InvalidConfigurationError(name, value, "a number of seconds") from None
    if parsed < 0:
        raise InvalidConfigurationError(name, value, "a non-negative number of seconds")
    return parsed


def optional_env_flag(name: str, *, default: bool = False) -> bool:
    value = _read(name)
    if value is None:
        return default
    folded = value.casefold()
    if folded in {"1", "true", "yes", "on"}:
        return True
    if folded in {"0", "false", "no", "off"}:
        return False
    raise InvalidConfigurationError(name, value, "a boolean flag")
