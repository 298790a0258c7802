"""Error taxonomy shared by the providers, the collection workflow and the
tool dispatcher.

Every error carries the MCP error code it is reported with, so the dispatcher
can normalise anything raised below it into a single ``McpError``.
"""

from __future__ import annotations

from typing import Any, Optional

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND


class ToolError(Exception):
    """Base class for failures reported back to the MCP client."""

    code: int = INTERNAL_ERROR


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------


class InvalidParamsError(ToolError):
    """Missing or malformed caller input."""

    code = INVALID_PARAMS


class InvalidRequestError(InvalidParamsError):
    """The provider rejected the request (HTTP 400 / 401)."""


class NotFoundError(ToolError):
    """The provider has no data for the requested entity."""

    code = INVALID_PARAMS


class MethodNotFoundError(ToolError):
    code = METHOD_NOT_FOUND


# ---------------------------------------------------------------------------
# Internal errors
# ---------------------------------------------------------------------------


class MissingCredentialError(ToolError):
    """A provider API key / token is not configured."""


class InsufficientCreditsError(ToolError):
    """The provider account is out of credits (HTTP 402)."""


class ProviderError(ToolError):
    """Unexpected provider response or transport failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CollectionError(ToolError):
    """An asynchronous dataset collection could not complete."""

    def __init__(self, message: str, snapshot_id: Optional[str] = None):
        super().__init__(message)
        self.snapshot_id = snapshot_id


class CollectionFailedError(CollectionError):
    """The provider reported ``error`` for the collection."""

    def __init__(self, message: str, snapshot_id: str, progress: Any = None):
        super().__init__(message, snapshot_id)
        self.progress = progress


class CollectionTimeoutError(CollectionError):
    """The poll budget ran out before the collection became ready."""

    def __init__(self, message: str, snapshot_id: str, attempts: int):
        super().__init__(message, snapshot_id)
        self.attempts = attempts
