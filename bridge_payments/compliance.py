"""
Compliance relay: hands out-of-band payments to a compliance server.

When a request carries an extra memo and a compliance server is
configured, the bridge does not build the transaction itself. It posts
the normalized payment fields to ``<compliance_url>/send`` and receives
a pre-built transaction back:

    POST /send  (form)
        source, sender, destination, amount, asset_code, asset_issuer,
        extra_memo
    200 -> {"transaction_xdr": "<base64 XDR transaction>"}

Any other status, or a body that does not match COMPLIANCE_SEND_SCHEMA,
is a ComplianceError. Transport errors propagate. No retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import jsonschema  # type: ignore[import-untyped]

from bridge_payments.ledger.transport import HttpTransport, HttpxTransport
from bridge_payments.schema import (
    COMPLIANCE_SEND_SCHEMA,
    describe_error,
    validate,
)


class ComplianceError(Exception):
    """The compliance server refused or returned something unusable."""


@dataclass(frozen=True)
class ComplianceSendRequest:
    """Fields forwarded to the compliance server."""

    source: str
    sender: str
    destination: str
    amount: str
    asset_code: str
    asset_issuer: str
    extra_memo: str

    def to_form(self) -> dict[str, str]:
        return {
            "source": self.source,
            "sender": self.sender,
            "destination": self.destination,
            "amount": self.amount,
            "asset_code": self.asset_code,
            "asset_issuer": self.asset_issuer,
            "extra_memo": self.extra_memo,
        }


@runtime_checkable
class ComplianceRelay(Protocol):
    async def send(self, request: ComplianceSendRequest) -> str:
        """Relay a payment and return the base64 XDR transaction to sign.

        Raises:
            Exception: On any failure.
        """
        ...


class HttpComplianceRelay:
    """ComplianceRelay over HTTP.

    Args:
        url: Compliance server base URL.
        transport: Injectable HTTP transport. Defaults to HttpxTransport.
    """

    def __init__(self, url: str, transport: HttpTransport | None = None) -> None:
        self._url = url.rstrip("/")
        self._transport = transport or HttpxTransport()

    @property
    def url(self) -> str:
        return self._url

    async def send(self, request: ComplianceSendRequest) -> str:
        response = await self._transport.post_form(
            f"{self._url}/send", request.to_form()
        )
        if response.status_code != 200:
            raise ComplianceError(
                f"compliance server returned status {response.status_code}: "
                f"{response.text[:200]}"
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ComplianceError(str(exc)) from exc
        try:
            validate(body, COMPLIANCE_SEND_SCHEMA)
        except jsonschema.ValidationError as exc:
            raise ComplianceError(
                f"unexpected compliance response at {describe_error(exc)}"
            ) from exc
        return body["transaction_xdr"]
