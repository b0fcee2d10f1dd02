"""Errors raised while loading orderbridge configuration."""

from __future__ import annotations

from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Base class for unusable configuration."""


class MissingConfigurationError(ConfigurationError):
    """One or more required settings are unset or blank."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class InvalidConfigurationError(ConfigurationError):
    """A setting is present but cannot be interpreted."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} for {name}: expected {expected}")
