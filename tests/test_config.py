"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from src.config import DEFAULT_ANTHROPIC_MODEL, Settings


class TestSettingsFromEnv:
    def test_reads_credentials(self):
        settings = Settings.from_env(
            {
                "ANY_MAIL_API_KEY": "mail",
                "BRIGHT_DATA_BEARER_TOKEN": "bright",
                "SCRAPINGDOG_API_KEY": "dog",
                "ANTHROPIC_API_KEY": "claude",
            }
        )
        assert settings.anymail_api_key == "mail"
        assert settings.bright_data_token == "bright"
        assert settings.scrapingdog_api_key == "dog"
        assert settings.anthropic_api_key == "claude"

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.anymail_api_key is None
        assert settings.poll_interval == 10.0
        assert settings.max_poll_attempts == 30
        assert settings.max_job_pages == 50
        assert settings.anthropic_model == DEFAULT_ANTHROPIC_MODEL

    def test_empty_values_are_unset(self):
        settings = Settings.from_env({"ANY_MAIL_API_KEY": "", "COLLECTION_MAX_POLLS": ""})
        assert settings.anymail_api_key is None
        assert settings.max_poll_attempts == 30

    def test_tuning_overrides(self):
        settings = Settings.from_env(
            {
                "COLLECTION_POLL_INTERVAL": "2.5",
                "COLLECTION_MAX_POLLS": "12",
                "PROVIDER_TIMEOUT": "5",
                "SCRAPINGDOG_MAX_PAGES": "3",
            }
        )
        assert settings.poll_interval == 2.5
        assert settings.max_poll_attempts == 12
        assert settings.request_timeout == 5.0
        assert settings.max_job_pages == 3

    def test_invalid_budget_rejected(self):
        with pytest.raises(ValidationError):
            Settings.from_env({"COLLECTION_MAX_POLLS": "0"})

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.poll_interval = 1
