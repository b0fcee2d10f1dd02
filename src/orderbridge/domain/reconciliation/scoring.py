"""Scoring of manifest rows against existing orders.

Each :class:`Signal` is a relaxed predicate over one identity field; a
:class:`MatchPolicy` decides how many signals make a candidate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .contracts import ManifestRow, Signal

if TYPE_CHECKING:
    from orderbridge.domain.model import CanonicalOrder

PHONE_SUFFIX_LENGTH: Final[int] = 6
_PHONE_NOISE: Final[dict[int, None]] = str.maketrans("", "", " -+")


@dataclass(frozen=True, slots=True)
class MatchPolicy:
    min_signals: int = 2
    phone_suffix_length: int = PHONE_SUFFIX_LENGTH

    def accepts(self, signals: frozenset[Signal]) -> bool:
        return len(signals) >= self.min_signals


def phone_suffix(phone: str, length: int = PHONE_SUFFIX_LENGTH) -> str | None:
    """Return the last ``length`` digits, or ``None`` for numbers that are too short."""

    stripped = phone.translate(_PHONE_NOISE)
    digits = "".join(char for char in stripped if char.isdigit())
    if len(digits) < length:
        return None
    return digits[-length:]


def names_match(order: CanonicalOrder, name: str) -> bool:
    expected = f"{order.first_name} {order.last_name}".strip().casefold()
    return bool(expected) and expected == name.strip().casefold()


def phones_match(order: CanonicalOrder, phone: str, length: int = PHONE_SUFFIX_LENGTH) -> bool:
    ours = phone_suffix(order.phone, length)
    theirs = phone_suffix(phone, length)
    return ours is not None and ours == theirs


def cities_match(order: CanonicalOrder, city: str) -> bool:
    expected = order.city.strip().casefold()
    return bool(expected) and expected == city.strip().casefold()


def matched_signals(
    order: CanonicalOrder,
    row: ManifestRow,
    policy: MatchPolicy | None = None,
) -> frozenset[Signal]:
    active_policy = policy or MatchPolicy()
    signals: set[Signal] = set()
    if names_match(order, row.name):
        signals.add(Signal.NAME)
    if phones_match(order, row.phone, active_policy.phone_suffix_length):
        signals.add(Signal.PHONE)
    if cities_match(order, row.city):
        signals.add(Signal.CITY)
    return frozenset(signals)
