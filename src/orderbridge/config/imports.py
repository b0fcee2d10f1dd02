"""Defaults for file imports and shipping-manifest reconciliation."""

from __future__ import annotations

from dataclasses import dataclass

from orderbridge.domain.model import Platform

from .env import optional_env_int, optional_env_var
from .errors import InvalidConfigurationError

DEFAULT_SHIPPER_TAG = "LogoiX"
DEFAULT_HEADER_SCAN_LIMIT = 5
DEFAULT_NOISE_THRESHOLD = 3

FALLBACK_VAR = "ORDERBRIDGE_UNKNOWN_FORMAT_FALLBACK"


@dataclass(frozen=True, slots=True)
class ImportConfig:
    shipper_tag: str = DEFAULT_SHIPPER_TAG
    # ``None`` rejects files whose header matches no known export layout.
    unknown_format_fallback: Platform | None = Platform.AMAZON
    header_scan_limit: int = DEFAULT_HEADER_SCAN_LIMIT
    noise_threshold: int = DEFAULT_NOISE_THRESHOLD


def _parse_fallback(value: str) -> Platform | None:
    folded = value.casefold()
    if folded == "none":
        return None
    by_name = {platform.value.casefold(): platform for platform in Platform}
    if folded not in by_name:
        choices = ", ".join(sorted([*(p.value for p in Platform), "none"]))
        raise InvalidConfigurationError(FALLBACK_VAR, value, f"one of {choices}")
    return by_name[folded]


def get_import_config() -> ImportConfig:
    return ImportConfig(
        shipper_tag=optional_env_var("ORDERBRIDGE_SHIPPER_TAG", DEFAULT_SHIPPER_TAG),
        unknown_format_fallback=_parse_fallback(
            optional_env_var(FALLBACK_VAR, Platform.AMAZON.value)
        ),
        header_scan_limit=optional_env_int(
            "ORDERBRIDGE_HEADER_SCAN_LIMIT", DEFAULT_HEADER_SCAN_LIMIT, minimum=1
        ),
        noise_threshold=optional_env_int(
            "ORDERBRIDGE_NOISE_THRESHOLD", DEFAULT_NOISE_THRESHOLD, minimum=1
        ),
    )
