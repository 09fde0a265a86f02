"""
Ledger query protocol: the network boundary.

Defines the interface the payment pipeline depends on, not a concrete
implementation. This keeps the pipeline testable and keeps HTTP calls
out of business logic.

Concrete implementations:
    - HorizonClient (horizon.py)
    - FakeLedger (tests)

The protocol has exactly two methods:
    - load_account(account_id) -> AccountState
    - submit(envelope_xdr) -> submission result (JSON dict, verbatim)

"Account does not exist" is an expected outcome and gets its own
exception, AccountNotFoundError, so callers can tell it apart from
transport or server failures (LedgerQueryError, or anything else).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class LedgerQueryError(Exception):
    """The ledger API could not answer (bad status, malformed body)."""


class AccountNotFoundError(LedgerQueryError):
    """The requested account does not exist on the ledger."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"account not found: {account_id}")
        self.account_id = account_id


@dataclass(frozen=True)
class AccountState:
    """Read-only snapshot of an account, fetched once per request.

    Attributes:
        account_id: The account's id ("G...").
        sequence: Current sequence number as known to the network.
            The next transaction from this account must use sequence + 1.
    """

    account_id: str
    sequence: int

    @property
    def next_sequence(self) -> int:
        return self.sequence + 1


@runtime_checkable
class LedgerQuery(Protocol):
    """Interface for ledger reads and transaction submission."""

    async def load_account(self, account_id: str) -> AccountState:
        """Fetch the current state of an account.

        Raises:
            AccountNotFoundError: If the account does not exist.
            Exception: On any other failure.
        """
        ...

    async def submit(self, envelope_xdr: str) -> dict[str, Any]:
        """Submit a signed envelope (base64 XDR).

        Returns:
            The ledger's submission result, unmodified.
        """
        ...
