"""Errors raised by the order ingestion domain."""

from __future__ import annotations


class ParseError(ValueError):
    """Raised when file content cannot be read as a table at all."""


class UnknownFormatError(ParseError):
    """Raised when no marketplace dialect matches and no fallback is configured."""

    def __init__(self, message: str, *, header: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.header = header


class RowError(ValueError):
    """Raised when a single row cannot be mapped; the batch continues without it."""

    def __init__(self, message: str, *, row_number: int | None = None) -> None:
        super().__init__(message)
        self.row_number = row_number
