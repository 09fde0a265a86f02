"""
Transaction signer protocol: the secrets boundary.

The pipeline hands an unsigned TransactionEnvelope to a signer and gets
back a SignResult holding the signed envelope as base64 XDR. Secret
seeds stay inside the signer; only the signer's account id (key_id)
leaves it.

Concrete implementations:
    - KeypairSigner (stellar_sdk Keypair)
    - FakeSigner (tests)

A signer is created per request from the source keypair through a
SignerFactory, so no signing key outlives the request that supplied it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from stellar_sdk import Keypair, TransactionEnvelope


@dataclass(frozen=True)
class SignResult:
    """Result of signing a transaction.

    Attributes:
        envelope_xdr: Signed envelope, base64 XDR, ready for
            LedgerQuery.submit().
        tx_hash: Transaction hash (64 hex chars).
        key_id: Account id of the signing key. Safe to log.
    """

    envelope_xdr: str
    tx_hash: str
    key_id: str


@runtime_checkable
class TransactionSigner(Protocol):
    """Interface for transaction signing."""

    @property
    def key_id(self) -> str:
        """Public identifier of the signing key (safe for logging)."""
        ...

    def sign(self, envelope: TransactionEnvelope) -> SignResult:
        """Sign the envelope and encode it for submission.

        Raises:
            Exception: If signing or encoding fails.
        """
        ...


SignerFactory = Callable[[Keypair], TransactionSigner]


class KeypairSigner:
    """Signs envelopes with an in-memory Ed25519 keypair."""

    def __init__(self, keypair: Keypair) -> None:
        if not keypair.can_sign():
            raise ValueError("KeypairSigner requires a keypair with a secret seed")
        self._keypair = keypair

    @property
    def key_id(self) -> str:
        return self._keypair.public_key

    def sign(self, envelope: TransactionEnvelope) -> SignResult:
        envelope.sign(self._keypair)
        return SignResult(
            envelope_xdr=envelope.to_xdr(),
            tx_hash=envelope.hash_hex(),
            key_id=self.key_id,
        )
