"""Creation-date windows for remote order fetches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import NamedTuple, Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_utc(value: datetime | None, *, assume_utc: bool = False) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        if not assume_utc:
            raise ValueError("Time window values must include timezone information")
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ResolvedWindow(NamedTuple):
    """Concrete UTC bounds; either side may be open."""

    start: datetime | None
    end: datetime | None

    def require_start(self) -> datetime:
        if self.start is None:
            raise ValueError("Remote fetch needs a start timestamp or a lookback")
        return self.start


@dataclass(frozen=True)
class TimeWindow:
    """Requested bounds for a fetch run.

    ``lookback`` counts back from ``end`` (or from now when ``end`` is unset)
    and only ever narrows an explicit ``start``.
    """

    start: datetime | None = None
    end: datetime | None = None
    lookback: timedelta | None = None

    def resolve(self, *, clock: Clock = _utcnow) -> ResolvedWindow:
        start = _to_utc(self.start)
        end = _to_utc(self.end)

        if self.lookback is not None:
            if self.lookback < timedelta(0):
                raise ValueError("Lookback duration must be non-negative")
            anchor = end or _to_utc(clock(), assume_utc=True)
            assert anchor is not None
            earliest = anchor - self.lookback
            start = earliest if start is None else max(start, earliest)
            end = anchor

        if start is not None and end is not None and start > end:
            raise ValueError("Time window start must be before end")
        return ResolvedWindow(start, end)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing ``Z`` and naive values mean UTC."""

    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    result = _to_utc(parsed, assume_utc=True)
    assert result is not None
    return result


__all__ = ["Clock", "ResolvedWindow", "TimeWindow", "parse_iso_datetime"]
