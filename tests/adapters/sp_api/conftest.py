"""Shared fixtures for Selling Partner API adapter tests."""

from __future__ import annotations

import pytest

from orderbridge.config.sp_api import SellingPartnerConfig
from tests.helpers.sp_api import ENDPOINT, TOKEN_ENDPOINT, FakeSellingPartnerApi, RecordingSleep


@pytest.fixture
def sp_config() -> SellingPartnerConfig:
    return SellingPartnerConfig(
        client_id="client",
        client_secret="secret",  # noqa: S106
        refresh_token="refresh",  # noqa: S106
        endpoint=ENDPOINT,
        token_endpoint=TOKEN_ENDPOINT,
    )


@pytest.fixture
def fake_api() -> FakeSellingPartnerApi:
    return FakeSellingPartnerApi()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
