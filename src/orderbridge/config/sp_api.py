"""Amazon Selling Partner API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_float, optional_env_int, optional_env_var, require_env_vars
from .errors import MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

SP_API_EU_ENDPOINT = "https://sellingpartnerapi-eu.amazon.com"
LWA_TOKEN_ENDPOINT = "https://api.amazon.com/auth/o2/token"  # noqa: S105
MARKETPLACE_DE = "A1PA6795UKMFR9"

CLIENT_ID_VAR = "AMAZON_SP_CLIENT_ID"
CLIENT_SECRET_VAR = "AMAZON_SP_CLIENT_SECRET"  # noqa: S105
REFRESH_TOKEN_VAR = "AMAZON_SP_REFRESH_TOKEN"  # noqa: S105


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="sp-api",
        timeout_seconds=30.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
    )


@dataclass(frozen=True, slots=True)
class SellingPartnerConfig:
    """Credentials and pacing for the remote order API."""

    client_id: str
    client_secret: str
    refresh_token: str
    marketplace_id: str = MARKETPLACE_DE
    endpoint: str = SP_API_EU_ENDPOINT
    token_endpoint: str = LWA_TOKEN_ENDPOINT
    page_size: int = 50
    page_delay_seconds: float = 2.0
    item_delay_seconds: float = 0.5
    backoff_base_seconds: float = 2.0
    max_attempts: int = 3
    token_safety_margin_seconds: float = 60.0
    user_agent: str = "orderbridge (Language=Python)"
    resilience: ResilienceConfig = field(default_factory=_default_resilience)

    def require_credentials(self) -> None:
        missing = [
            name
            for name, value in (
                (CLIENT_ID_VAR, self.client_id),
                (CLIENT_SECRET_VAR, self.client_secret),
                (REFRESH_TOKEN_VAR, self.refresh_token),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise MissingConfigurationError(missing)


def get_selling_partner_config(
    *, resilience: ResilienceConfig | None = None
) -> SellingPartnerConfig:
    values = require_env_vars((CLIENT_ID_VAR, CLIENT_SECRET_VAR, REFRESH_TOKEN_VAR))
    return SellingPartnerConfig(
        client_id=values[CLIENT_ID_VAR],
        client_secret=values[CLIENT_SECRET_VAR],
        refresh_token=values[REFRESH_TOKEN_VAR],
        marketplace_id=optional_env_var("AMAZON_SP_MARKETPLACE_ID", MARKETPLACE_DE),
        endpoint=optional_env_var("AMAZON_SP_ENDPOINT", SP_API_EU_ENDPOINT).rstrip("/"),
        page_size=optional_env_int("AMAZON_SP_PAGE_SIZE", 50, minimum=1),
        page_delay_seconds=optional_env_float("AMAZON_SP_PAGE_DELAY_SECONDS", 2.0),
        item_delay_seconds=optional_env_float("AMAZON_SP_ITEM_DELAY_SECONDS", 0.5),
        resilience=resilience or _default_resilience(),
    )
