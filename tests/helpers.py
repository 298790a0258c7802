"""HTTP helpers for exercising provider clients without a network."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx


class ScriptedTransport(httpx.MockTransport):
    """Mock transport that records every request it serves."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def count(self, fragment: str) -> int:
        return sum(1 for request in self.requests if fragment in request.url.path)


def json_response(status: int, body: Any) -> httpx.Response:
    return httpx.Response(
        status,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )
