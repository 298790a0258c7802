"""Process-wide configuration, read once at startup."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


class Settings(BaseModel):
    """Provider credentials and workflow tuning.

    Credentials are optional: a tool whose provider is not configured fails
    when it is called, the others keep working.
    """

    model_config = ConfigDict(frozen=True)

    anymail_api_key: Optional[str] = None
    bright_data_token: Optional[str] = None
    scrapingdog_api_key: Optional[str] = None

    poll_interval: float = Field(default=10.0, ge=0, description="Seconds between progress polls")
    max_poll_attempts: int = Field(default=30, ge=1, description="Progress polls before giving up")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    max_job_pages: int = Field(default=50, ge=1, description="Upper bound on paginated job pages")

    anthropic_api_key: Optional[str] = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the environment (``.env`` is loaded first)."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        values: dict = {
            "anymail_api_key": environ.get("ANY_MAIL_API_KEY") or None,
            "bright_data_token": environ.get("BRIGHT_DATA_BEARER_TOKEN") or None,
            "scrapingdog_api_key": environ.get("SCRAPINGDOG_API_KEY") or None,
            "anthropic_api_key": environ.get("ANTHROPIC_API_KEY") or None,
        }
        optional = {
            "poll_interval": "COLLECTION_POLL_INTERVAL",
            "max_poll_attempts": "COLLECTION_MAX_POLLS",
            "request_timeout": "PROVIDER_TIMEOUT",
            "max_job_pages": "SCRAPINGDOG_MAX_PAGES",
            "anthropic_model": "ANTHROPIC_MODEL",
        }
        for field, var in optional.items():
            if environ.get(var):
                values[field] = environ[var]
        return cls(**values)
