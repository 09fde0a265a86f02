"""
Transaction builder.

Builds an unsigned, single-operation transaction envelope from an
account snapshot, an operation, and a memo. This is the "transaction
recipe": pure, deterministic, no secrets, no network calls. Signing is
the signer's job (signer.py).

The ledger's own encoding (XDR), transaction hash and signature base
come from stellar-sdk's TransactionBuilder. This module decides what
goes into the transaction and rejects bad parts first, with a
structured code, so the classifier (bridge_payments.errors) rarely has
to look at SDK exceptions.

The builder enforces:
    - exactly one operation
    - sequence == snapshot sequence + 1 (never recomputed)
    - memo attached only when it is not NoMemo
    - fee == base_fee * number of operations
    - asset codes of 1-12 ASCII alphanumerics
    - amounts as positive decimals with at most 7 fractional digits
    - time bounds always present; max_time == 0 means open-ended

Validation patterns are matched against the whole string, so a value
with a trailing newline is rejected like any other stray character.
"""

from __future__ import annotations

import re
from enum import StrEnum

from stellar_sdk import (
    Account,
    StrKey,
    TimeBounds,
    TransactionBuilder,
    TransactionEnvelope,
)

from bridge_payments.ledger.asset import CreditAsset
from bridge_payments.ledger.client import AccountState
from bridge_payments.ledger.memo import (
    MAX_TEXT_MEMO_BYTES,
    HashMemo,
    IdMemo,
    Memo,
    TextMemo,
)
from bridge_payments.ledger.operations import CreateAccount, Operation

DEFAULT_BASE_FEE = 100

MAX_INT64 = 2**63 - 1
AMOUNT_PRECISION = 7
_STROOPS_PER_UNIT = 10**AMOUNT_PRECISION

_AMOUNT_RE = re.compile(r"([0-9]+)(?:\.([0-9]{1,7}))?")
_ASSET_CODE_RE = re.compile(r"[A-Za-z0-9]{1,12}")

OPEN_TIME_BOUNDS = TimeBounds(min_time=0, max_time=0)


# =========================================================================
# Build errors
# =========================================================================


class BuildErrorCode(StrEnum):
    """Why a transaction could not be built."""

    ASSET_CODE_INVALID = "ASSET_CODE_INVALID"
    AMOUNT_INVALID = "AMOUNT_INVALID"
    MEMO_TOO_LONG = "MEMO_TOO_LONG"
    ACCOUNT_INVALID = "ACCOUNT_INVALID"
    SEQUENCE_INVALID = "SEQUENCE_INVALID"
    NETWORK_MISSING = "NETWORK_MISSING"


class TransactionBuildError(ValueError):
    """A transaction could not be built from the given parts."""

    def __init__(self, code: BuildErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


# =========================================================================
# Validation helpers
# =========================================================================


def validate_asset_code(code: str) -> None:
    if _ASSET_CODE_RE.fullmatch(code) is None:
        raise TransactionBuildError(
            BuildErrorCode.ASSET_CODE_INVALID, "Asset code length is invalid"
        )


def amount_to_stroops(amount: str) -> int:
    """Parse a decimal amount string into integer stroops (1e-7 units).

    Raises:
        TransactionBuildError: AMOUNT_INVALID if the string is not a plain
            positive decimal, has more than 7 fractional digits, or
            exceeds the int64 range.
    """
    match = _AMOUNT_RE.fullmatch(amount)
    if match is None:
        raise TransactionBuildError(
            BuildErrorCode.AMOUNT_INVALID, f"cannot parse amount: {amount!r}"
        )
    whole, frac = match.group(1), match.group(2) or ""
    stroops = int(whole) * _STROOPS_PER_UNIT + int(frac.ljust(AMOUNT_PRECISION, "0"))
    if stroops <= 0 or stroops > MAX_INT64:
        raise TransactionBuildError(
            BuildErrorCode.AMOUNT_INVALID,
            f"cannot parse amount: {amount!r} is out of range",
        )
    return stroops


def _validate_account(value: str, field: str) -> None:
    if not StrKey.is_valid_ed25519_public_key(value):
        raise TransactionBuildError(
            BuildErrorCode.ACCOUNT_INVALID, f"{field} is not a valid account id"
        )


def _validate_operation(op: Operation) -> None:
    _validate_account(op.destination, "destination")
    if isinstance(op.asset, CreditAsset):
        validate_asset_code(op.asset.code)
        _validate_account(op.asset.issuer, "asset issuer")
    amount_to_stroops(op.amount)


def _validate_memo(memo: Memo) -> None:
    if isinstance(memo, TextMemo) and len(memo.value) > MAX_TEXT_MEMO_BYTES:
        raise TransactionBuildError(
            BuildErrorCode.MEMO_TOO_LONG,
            f"text memo exceeds {MAX_TEXT_MEMO_BYTES} bytes "
            f"(got {len(memo.value)})",
        )


# =========================================================================
# Builder
# =========================================================================


def _append_operation(builder: TransactionBuilder, op: Operation) -> None:
    if isinstance(op, CreateAccount):
        builder.append_create_account_op(
            destination=op.destination, starting_balance=op.amount
        )
    else:
        builder.append_payment_op(
            destination=op.destination, asset=op.asset.to_ledger(), amount=op.amount
        )


def _attach_memo(builder: TransactionBuilder, memo: Memo) -> None:
    if isinstance(memo, IdMemo):
        builder.add_id_memo(memo.value)
    elif isinstance(memo, TextMemo):
        builder.add_text_memo(memo.value)
    elif isinstance(memo, HashMemo):
        builder.add_hash_memo(memo.value)


def build_transaction(
    source_account: str,
    account: AccountState,
    operation: Operation,
    memo: Memo,
    network_passphrase: str,
    *,
    base_fee: int = DEFAULT_BASE_FEE,
    time_bounds: TimeBounds | None = None,
) -> TransactionEnvelope:
    """Build an unsigned single-operation transaction envelope.

    Args:
        source_account: Account id paying the fee and sending the funds.
        account: Snapshot of the source account. The transaction uses
            its sequence + 1.
        operation: The single operation to include.
        memo: Memo to attach. NoMemo attaches nothing.
        network_passphrase: Network the signature will be bound to.
        base_fee: Fee per operation, in stroops.
        time_bounds: Validity window. None leaves it open-ended.

    Returns:
        Unsigned stellar_sdk TransactionEnvelope.

    Raises:
        TransactionBuildError: If any part fails validation.
        stellar_sdk.exceptions.SdkError: If the SDK rejects a part this
            module does not check itself.
    """
    if not network_passphrase:
        raise TransactionBuildError(
            BuildErrorCode.NETWORK_MISSING, "network passphrase must be non-empty"
        )
    _validate_account(source_account, "source account")
    if account.account_id != source_account:
        raise TransactionBuildError(
            BuildErrorCode.ACCOUNT_INVALID,
            "account snapshot does not belong to the source account",
        )
    if account.sequence < 0 or account.next_sequence > MAX_INT64:
        raise TransactionBuildError(
            BuildErrorCode.SEQUENCE_INVALID,
            f"sequence out of range: {account.next_sequence}",
        )

    _validate_operation(operation)
    _validate_memo(memo)

    bounds = time_bounds or OPEN_TIME_BOUNDS
    builder = TransactionBuilder(
        source_account=Account(source_account, account.sequence),
        network_passphrase=network_passphrase,
        base_fee=base_fee,
    ).add_time_bounds(bounds.min_time, bounds.max_time)
    _append_operation(builder, operation)
    _attach_memo(builder, memo)
    return builder.build()
