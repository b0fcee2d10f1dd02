"""Shared reconciliation contract components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from orderbridge.domain.model import CanonicalOrder


class MatchTier(StrEnum):
    """How confidently a manifest row was tied to an existing order."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    AMBIGUOUS = "ambiguous"
    NONE = "none"


class Signal(StrEnum):
    """Relaxed identity predicates used when the reference does not resolve."""

    NAME = "name"
    PHONE = "phone"
    CITY = "city"


@dataclass(frozen=True, slots=True, kw_only=True)
class ManifestRow:
    """One line of a carrier shipping manifest."""

    reference: str
    carrier: str = ""
    tracking_number: str = ""
    name: str = ""
    phone: str = ""
    city: str = ""
    row_number: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchResult:
    """Resolution of one manifest row.

    ``orders`` holds every line item to update (empty unless the tier is
    exact or fuzzy). ``candidate_order_ids`` lists the competing marketplace
    orders of an ambiguous match.
    """

    tier: MatchTier
    reference: str
    orders: tuple[CanonicalOrder, ...] = ()
    signals: frozenset[Signal] = field(default_factory=frozenset[Signal])
    candidate_order_ids: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.tier in (MatchTier.EXACT, MatchTier.FUZZY)

    def explanation(self) -> str:
        """Human-readable ``reference → order (name)`` line for fuzzy matches."""

        if not self.orders:
            return self.reference
        target = self.orders[0]
        return f"{self.reference} → {target.order_id} ({target.full_name})"
