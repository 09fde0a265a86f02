"""
Horizon REST client: real network implementation of LedgerQuery.

Translates Horizon account and transaction-submission responses into
AccountState and plain result dicts. Uses an injectable HttpTransport so
the HTTP layer can be swapped for test fakes without changing parsing
logic.

No retry loops. No secrets. No ledger logic beyond response parsing.

Response handling:
    - GET  /accounts/{id}: 200 -> AccountState from "sequence"
      (decimal string); 404 -> AccountNotFoundError; anything else ->
      LedgerQueryError.
    - POST /transactions (form: tx=<envelope XDR>): 200 and 400 both carry a
      JSON result object (400 is a ledger-level rejection, still a
      result) and are returned verbatim; anything else -> LedgerQueryError.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import jsonschema  # type: ignore[import-untyped]

from bridge_payments.ledger.client import (
    AccountNotFoundError,
    AccountState,
    LedgerQueryError,
)
from bridge_payments.ledger.transport import (
    HttpTransport,
    HttpxTransport,
    TransportResponse,
)
from bridge_payments.schema import (
    HORIZON_ACCOUNT_SCHEMA,
    HORIZON_SUBMIT_SCHEMA,
    describe_error,
    validate,
)

_RESULT_STATUSES = frozenset({200, 400})


class HorizonClient:
    """Horizon client implementing the LedgerQuery protocol.

    Args:
        url: Horizon base URL (e.g. "https://horizon-testnet.stellar.org").
        transport: Injectable HTTP transport. Defaults to HttpxTransport.
    """

    def __init__(self, url: str, transport: HttpTransport | None = None) -> None:
        self._url = url.rstrip("/")
        self._transport = transport or HttpxTransport()

    @property
    def url(self) -> str:
        return self._url

    # -----------------------------------------------------------------
    # LedgerQuery protocol methods
    # -----------------------------------------------------------------

    async def load_account(self, account_id: str) -> AccountState:
        """Fetch an account snapshot.

        Transport exceptions propagate to the caller.
        """
        response = await self._transport.get(
            f"{self._url}/accounts/{quote(account_id, safe='')}"
        )
        if response.status_code == 404:
            raise AccountNotFoundError(account_id)
        if response.status_code != 200:
            raise LedgerQueryError(
                f"unexpected status {response.status_code} loading account"
            )
        return _parse_account_response(account_id, response)

    async def submit(self, envelope_xdr: str) -> dict[str, Any]:
        """Submit a signed envelope and return Horizon's result as-is.

        Transport exceptions propagate to the caller.
        """
        response = await self._transport.post_form(
            f"{self._url}/transactions", {"tx": envelope_xdr}
        )
        if response.status_code not in _RESULT_STATUSES:
            raise LedgerQueryError(
                f"unexpected status {response.status_code} submitting transaction"
            )
        return _parse_json_object(response, HORIZON_SUBMIT_SCHEMA)


# =====================================================================
# Response parsing (pure functions, no I/O)
# =====================================================================


def _parse_json_object(
    response: TransportResponse, schema: dict[str, Any]
) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise LedgerQueryError(str(exc)) from exc
    try:
        validate(body, schema)
    except jsonschema.ValidationError as exc:
        raise LedgerQueryError(f"unexpected response at {describe_error(exc)}") from exc
    return body


def _parse_account_response(
    account_id: str, response: TransportResponse
) -> AccountState:
    body = _parse_json_object(response, HORIZON_ACCOUNT_SCHEMA)
    sequence = body["sequence"]
    if not sequence.isascii() or not sequence.isdigit():
        raise LedgerQueryError(f"cannot parse sequence number: {sequence!r}")
    return AccountState(account_id=account_id, sequence=int(sequence))
