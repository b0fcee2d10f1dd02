"""Resolve manifest rows to existing orders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import MatchResult, MatchTier
from .scoring import MatchPolicy, matched_signals

if TYPE_CHECKING:
    from collections.abc import Sequence

    from orderbridge.domain.model import CanonicalOrder

    from .contracts import ManifestRow, Signal


def _exact_matches(reference: str, orders: Sequence[CanonicalOrder]) -> tuple[CanonicalOrder, ...]:
    by_order_id = tuple(order for order in orders if order.order_id == reference)
    if by_order_id:
        return by_order_id
    return tuple(order for order in orders if order.order_item_id == reference)


def resolve_row(
    row: ManifestRow,
    orders: Sequence[CanonicalOrder],
    *,
    policy: MatchPolicy | None = None,
) -> MatchResult:
    """Match ``row`` by reference first, then by relaxed identity signals.

    Fuzzy candidates are grouped by marketplace order: line items of the same
    order count as one candidate. More than one candidate order is ambiguous
    and nothing is resolved. When no order reaches the policy but several tie
    on the best partial overlap (say, the same city), the row is ambiguous too
    rather than not found.
    """

    active_policy = policy or MatchPolicy()
    reference = row.reference.strip()

    exact = _exact_matches(reference, orders)
    if exact:
        return MatchResult(tier=MatchTier.EXACT, reference=reference, orders=exact)

    by_order: dict[str, frozenset[Signal]] = {}
    for order in orders:
        signals = matched_signals(order, row, active_policy)
        if len(signals) > len(by_order.get(order.order_id, frozenset())):
            by_order[order.order_id] = signals

    candidates = {
        order_id: signals
        for order_id, signals in by_order.items()
        if active_policy.accepts(signals)
    }
    if not candidates:
        return _partial_overlap(reference, by_order)
    if len(candidates) > 1:
        return MatchResult(
            tier=MatchTier.AMBIGUOUS,
            reference=reference,
            candidate_order_ids=tuple(candidates),
        )

    ((order_id, signals),) = candidates.items()
    return MatchResult(
        tier=MatchTier.FUZZY,
        reference=reference,
        orders=tuple(order for order in orders if order.order_id == order_id),
        signals=signals,
    )


def _partial_overlap(reference: str, by_order: dict[str, frozenset[Signal]]) -> MatchResult:
    best = max((len(signals) for signals in by_order.values()), default=0)
    tied = tuple(order_id for order_id, signals in by_order.items() if len(signals) == best)
    if best == 0 or len(tied) < 2:
        return MatchResult(tier=MatchTier.NONE, reference=reference)
    return MatchResult(tier=MatchTier.AMBIGUOUS, reference=reference, candidate_order_ids=tied)
