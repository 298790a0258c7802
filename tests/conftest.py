"""Shared fixtures."""

import pytest

from src.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        anymail_api_key="anymail-key",
        bright_data_token="bright-token",
        scrapingdog_api_key="dog-key",
        poll_interval=0,
        max_poll_attempts=5,
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(poll_interval=0)
