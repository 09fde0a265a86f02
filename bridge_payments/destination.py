"""
Destination resolution.

Turns the raw destination identifier from the request into a ledger
account id plus an optional memo the destination requires. The lookup
itself belongs to a NamingResolver collaborator (federation.py); this
module only checks what comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from stellar_sdk import StrKey

from bridge_payments.errors import PaymentError, PaymentErrorCode

logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """The naming collaborator could not resolve an identifier."""


@dataclass(frozen=True)
class ResolvedDestination:
    """Where a payment goes, and the memo the destination mandates, if any."""

    account_id: str
    memo_type: str | None = None
    memo: str | None = None

    @property
    def mandates_memo(self) -> bool:
        return self.memo_type is not None


@runtime_checkable
class NamingResolver(Protocol):
    async def resolve(self, identifier: str) -> ResolvedDestination:
        """Resolve an identifier.

        Raises:
            Exception: If the identifier cannot be resolved.
        """
        ...


async def resolve_destination(
    identifier: str, resolver: NamingResolver
) -> ResolvedDestination:
    """Resolve the destination and validate the resulting account id.

    Raises:
        PaymentError: UNRESOLVABLE_DESTINATION if the lookup fails,
            INVALID_RESOLVED_ACCOUNT if it returns a malformed account id.
    """
    try:
        resolved = await resolver.resolve(identifier)
    except Exception as exc:
        logger.info(
            "Cannot resolve address",
            extra={"destination": identifier, "error": str(exc)},
        )
        raise PaymentError(PaymentErrorCode.UNRESOLVABLE_DESTINATION, str(exc)) from exc

    if not StrKey.is_valid_ed25519_public_key(resolved.account_id):
        logger.info(
            "Invalid account id in destination",
            extra={"destination": identifier, "account_id": resolved.account_id},
        )
        raise PaymentError(PaymentErrorCode.INVALID_RESOLVED_ACCOUNT)
    return resolved
