"""
Ledger layer for the payment bridge.

Keys, XDR encoding, hashing and signature bases come from stellar-sdk.
This package adds the request-side model, the builder rules and the
injectable seams around them.

Public API:

    Pure layer (no I/O):
        - Model: assets, memos, operations.
        - Builder: ``build_transaction`` (raises ``TransactionBuildError``).
        - Codec: ``decode_transaction`` for XDR transactions built
          elsewhere.

    Protocols (for dependency injection):
        - ``LedgerQuery``: network boundary (load account, submit).
        - ``TransactionSigner``: secrets boundary (sign envelope).
        - ``HttpTransport``: HTTP seam for concrete clients.

    Concrete implementations:
        - ``HorizonClient``: LedgerQuery over the Horizon REST API.
        - ``KeypairSigner``: Ed25519 signer over a stellar_sdk Keypair.
        - ``HttpxTransport``: default httpx-based transport.
"""

from bridge_payments.ledger.asset import NATIVE, Asset, CreditAsset, NativeAsset
from bridge_payments.ledger.client import (
    AccountNotFoundError,
    AccountState,
    LedgerQuery,
    LedgerQueryError,
)
from bridge_payments.ledger.codec import EnvelopeDecodeError, decode_transaction
from bridge_payments.ledger.horizon import HorizonClient
from bridge_payments.ledger.memo import (
    NO_MEMO,
    HashMemo,
    IdMemo,
    Memo,
    NoMemo,
    TextMemo,
)
from bridge_payments.ledger.operations import CreateAccount, Operation, Payment
from bridge_payments.ledger.signer import (
    KeypairSigner,
    SignerFactory,
    SignResult,
    TransactionSigner,
)
from bridge_payments.ledger.transport import (
    HttpTransport,
    HttpxTransport,
    TransportResponse,
)
from bridge_payments.ledger.tx import (
    BuildErrorCode,
    TransactionBuildError,
    build_transaction,
)

__all__ = [
    "AccountNotFoundError",
    "AccountState",
    "Asset",
    "BuildErrorCode",
    "CreateAccount",
    "CreditAsset",
    "EnvelopeDecodeError",
    "HashMemo",
    "HorizonClient",
    "HttpTransport",
    "HttpxTransport",
    "IdMemo",
    "KeypairSigner",
    "LedgerQuery",
    "LedgerQueryError",
    "Memo",
    "NATIVE",
    "NO_MEMO",
    "NativeAsset",
    "NoMemo",
    "Operation",
    "Payment",
    "SignResult",
    "SignerFactory",
    "TextMemo",
    "TransactionBuildError",
    "TransactionSigner",
    "TransportResponse",
    "build_transaction",
    "decode_transaction",
]
