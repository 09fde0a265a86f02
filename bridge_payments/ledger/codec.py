"""
Decoding of transactions built elsewhere.

A compliance server hands back a pre-built transaction as base64 XDR of
the ledger's Transaction structure (not an envelope). decode_transaction
turns it into an unsigned TransactionEnvelope bound to our network, so
it can go through the same signer as a directly assembled one.

Any failure along the way (bad base64, truncated or trailing bytes,
unknown union arms) is reported as EnvelopeDecodeError.
"""

from __future__ import annotations

from stellar_sdk import Transaction, TransactionEnvelope
from stellar_sdk import xdr as ledger_xdr


class EnvelopeDecodeError(ValueError):
    """A base64 XDR transaction could not be decoded."""


def decode_transaction(text: str, network_passphrase: str) -> TransactionEnvelope:
    """Decode a base64 XDR transaction into an unsigned envelope.

    Raises:
        EnvelopeDecodeError: If the text is not a valid XDR transaction.
    """
    try:
        xdr_object = ledger_xdr.Transaction.from_xdr(text)
        transaction = Transaction.from_xdr_object(xdr_object)
    except Exception as exc:
        raise EnvelopeDecodeError(f"transaction xdr: {exc}") from exc
    return TransactionEnvelope(
        transaction=transaction, network_passphrase=network_passphrase
    )
