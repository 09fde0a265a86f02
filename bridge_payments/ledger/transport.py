"""
HTTP transport protocol for the collaborator clients.

Defines the seam where a concrete HTTP implementation plugs in. The
Horizon, federation and compliance clients depend on this protocol, not
on httpx directly, so tests can swap in a fake transport without
touching client logic.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests, returns canned responses)

Unlike a raise-for-status transport, this one returns every HTTP
response, whatever its status. Status handling is protocol-specific
(404 means "account not found" to Horizon, any non-200 is a failure to
the compliance server), so it belongs in the clients.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of an HTTP exchange."""

    status_code: int
    content: bytes = b""

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: If the body is not valid UTF-8 JSON.
        """
        try:
            return json.loads(self.content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValueError(f"response body is not JSON: {exc}") from exc

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@runtime_checkable
class HttpTransport(Protocol):
    """Async transport for GET and form POST requests."""

    async def get(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> TransportResponse:
        """Send a GET request.

        Raises:
            Exception: On transport-level failures (connection refused,
                timeout, TLS error, etc.).
        """
        ...

    async def post_form(
        self, url: str, data: Mapping[str, str]
    ) -> TransportResponse:
        """Send an application/x-www-form-urlencoded POST.

        Raises:
            Exception: On transport-level failures.
        """
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._timeout = timeout

    async def get(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> TransportResponse:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                url,
                params=dict(params) if params else None,
                headers={"Accept": "application/json"},
            )
            return TransportResponse(response.status_code, response.content)

    async def post_form(
        self, url: str, data: Mapping[str, str]
    ) -> TransportResponse:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                url,
                data=dict(data),
                headers={"Accept": "application/json"},
            )
            return TransportResponse(response.status_code, response.content)
