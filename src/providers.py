"""HTTP access to the third-party data providers.

A :class:`ProviderClient` issues exactly one request per :meth:`~ProviderClient.call`
and turns the provider's status codes into either a :class:`ProviderResult` or
one of the errors from :mod:`src.errors`.  Clients hold no connection state:
every call opens its own ``httpx.AsyncClient``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import httpx

from src.config import Settings
from src.errors import (
    InsufficientCreditsError,
    InvalidRequestError,
    MissingCredentialError,
    ProviderError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

SCRAPINGDOG_BASE_URL = "https://api.scrapingdog.com"
BRIGHT_DATA_BASE_URL = "https://api.brightdata.com/datasets/v3"
ANYMAIL_BASE_URL = "https://api.anymailfinder.com/v5.0"

NOT_FOUND_STATUSES = frozenset({404, 451})
INVALID_REQUEST_STATUSES = frozenset({400, 401})
INSUFFICIENT_CREDITS_STATUS = 402

_BODY_PREVIEW = 500


class AuthStyle(str, Enum):
    BEARER = "bearer"
    QUERY = "query"


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of a provider call that did not fail."""

    status_code: int
    data: Any = None
    found: bool = True


@dataclass(frozen=True)
class ProviderClient:
    """Stateless request wrapper for a single provider."""

    name: str
    base_url: str
    credential: Optional[str]
    credential_label: str
    auth_style: AuthStyle = AuthStyle.BEARER
    query_param: str = "api_key"
    timeout: float = 30.0
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    def require_credential(self) -> str:
        if not self.credential:
            raise MissingCredentialError(f"Missing {self.credential_label}")
        return self.credential

    def _auth(self, params: Optional[dict], headers: Optional[dict]) -> tuple[dict, dict]:
        credential = self.require_credential()
        params = dict(params or {})
        headers = dict(headers or {})
        if self.auth_style is AuthStyle.BEARER:
            headers["Authorization"] = f"Bearer {credential}"
        else:
            params[self.query_param] = credential
        return params, headers

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json_body: Any = None,
        headers: Optional[dict] = None,
    ) -> ProviderResult:
        """Issue one request and interpret the provider's answer.

        Raises :class:`MissingCredentialError` before touching the network when
        the provider is not configured.
        """
        params, headers = self._auth(params, headers)
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s %s", self.name, method, url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            logger.error("%s request failed: %s", self.name, exc)
            raise ProviderError(f"{self.name} request failed: {exc}") from exc

        logger.debug("%s responded with %d", self.name, resp.status_code)
        return self._interpret(resp)

    async def get(self, path: str, **kwargs: Any) -> ProviderResult:
        return await self.call("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> ProviderResult:
        return await self.call("POST", path, **kwargs)

    # ----- response handling -----

    def _interpret(self, resp: httpx.Response) -> ProviderResult:
        status = resp.status_code

        if resp.is_success:
            return ProviderResult(status_code=status, data=self._parse_body(resp))

        if status in NOT_FOUND_STATUSES:
            logger.info("%s has no data (%d): %s", self.name, status, _error_detail(resp))
            return ProviderResult(status_code=status, data=_safe_json(resp), found=False)

        if status in INVALID_REQUEST_STATUSES:
            raise InvalidRequestError(
                f"Invalid request: {_error_detail(resp) or 'Authentication error'}"
            )

        if status == INSUFFICIENT_CREDITS_STATUS:
            raise InsufficientCreditsError(
                "Insufficient credits: "
                f"{_error_detail(resp) or 'Account has insufficient credits'}"
            )

        body = resp.text[:_BODY_PREVIEW]
        raise ProviderError(
            f"{self.name} returned unexpected status {status}: {body}",
            status_code=status,
            body=resp.text,
        )

    def _parse_body(self, resp: httpx.Response) -> Any:
        if not resp.content.strip():
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self.name} returned a malformed response: {resp.text[:_BODY_PREVIEW]}",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc


def _safe_json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_detail(resp: httpx.Response) -> Optional[str]:
    """Human-readable error text from a provider JSON body, if any."""
    data = _safe_json(resp)
    if not isinstance(data, dict):
        return None
    for key in ("error_explained", "message", "error"):
        if data.get(key):
            return str(data[key])
    return None


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def scrapingdog_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ProviderClient:
    return ProviderClient(
        name="ScrapingDog",
        base_url=SCRAPINGDOG_BASE_URL,
        credential=settings.scrapingdog_api_key,
        credential_label="ScrapingDog API key",
        auth_style=AuthStyle.QUERY,
        query_param="api_key",
        timeout=settings.request_timeout,
        transport=transport,
    )


def bright_data_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ProviderClient:
    return ProviderClient(
        name="Bright Data",
        base_url=BRIGHT_DATA_BASE_URL,
        credential=settings.bright_data_token,
        credential_label="Bright Data Bearer Token",
        timeout=settings.request_timeout,
        transport=transport,
    )


def anymail_client(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ProviderClient:
    return ProviderClient(
        name="AnymailFinder",
        base_url=ANYMAIL_BASE_URL,
        credential=settings.anymail_api_key,
        credential_label="AnymailFinder API key",
        timeout=settings.request_timeout,
        transport=transport,
    )


@dataclass(frozen=True)
class Providers:
    """The three provider clients, built once from :class:`Settings`."""

    scrapingdog: ProviderClient
    bright_data: ProviderClient
    anymail: ProviderClient

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "Providers":
        return cls(
            scrapingdog=scrapingdog_client(settings, transport),
            bright_data=bright_data_client(settings, transport),
            anymail=anymail_client(settings, transport),
        )
