"""Reconciliation of carrier shipping manifests with existing orders.

Flow:
1) read manifest rows
2) resolve each row by reference, then by scored identity signals
3) apply shipping fields to resolved orders through the single update path
"""

from __future__ import annotations

from .contracts import ManifestRow, MatchResult, MatchTier, Signal
from .engine import reconcile_shipping_manifest
from .manifest import parse_manifest
from .resolve import resolve_row
from .scoring import MatchPolicy, matched_signals, phone_suffix

__all__ = [
    "ManifestRow",
    "MatchPolicy",
    "MatchResult",
    "MatchTier",
    "Signal",
    "matched_signals",
    "parse_manifest",
    "phone_suffix",
    "reconcile_shipping_manifest",
    "resolve_row",
]
