"""
Federation lookup: concrete NamingResolver.

Resolution rules:
    - An identifier that already is a valid account id resolves to
      itself with no network call.
    - A "name*domain" address is looked up on the configured federation
      server: GET <federation_url>?q=<address>&type=name. A 200 JSON body
      supplies "account_id" and, optionally, "memo_type" and "memo".
    - Everything else fails with ResolutionError.

Discovering the federation server of an arbitrary domain is not done
here; the server URL is configuration.
"""

from __future__ import annotations

from typing import Any

import jsonschema  # type: ignore[import-untyped]
from stellar_sdk import StrKey

from bridge_payments.destination import ResolutionError, ResolvedDestination
from bridge_payments.ledger.transport import HttpTransport, HttpxTransport
from bridge_payments.schema import (
    FEDERATION_RECORD_SCHEMA,
    describe_error,
    validate,
)

ADDRESS_SEPARATOR = "*"


class FederationResolver:
    """NamingResolver backed by a single federation server.

    Args:
        federation_url: Federation endpoint. None disables lookups, so
            only raw account ids resolve.
        transport: Injectable HTTP transport. Defaults to HttpxTransport.
    """

    def __init__(
        self,
        federation_url: str | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._url = federation_url
        self._transport = transport or HttpxTransport()

    async def resolve(self, identifier: str) -> ResolvedDestination:
        if StrKey.is_valid_ed25519_public_key(identifier):
            return ResolvedDestination(account_id=identifier)

        name, sep, domain = identifier.partition(ADDRESS_SEPARATOR)
        if not sep or not name or not domain:
            raise ResolutionError(f"not an account id or federation address: {identifier!r}")
        if self._url is None:
            raise ResolutionError("no federation server configured")

        response = await self._transport.get(
            self._url, {"q": identifier, "type": "name"}
        )
        if response.status_code != 200:
            raise ResolutionError(
                f"federation server returned status {response.status_code}"
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ResolutionError(str(exc)) from exc
        return _parse_federation_record(body)


def _parse_federation_record(body: Any) -> ResolvedDestination:
    try:
        validate(body, FEDERATION_RECORD_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise ResolutionError(
            f"unexpected federation response at {describe_error(exc)}"
        ) from exc

    account_id = body["account_id"]
    memo_type = body.get("memo_type")
    if memo_type is None or memo_type == "":
        return ResolvedDestination(account_id=account_id)

    memo = body.get("memo")
    return ResolvedDestination(
        account_id=account_id,
        memo_type=memo_type,
        memo="" if memo is None else str(memo),
    )
