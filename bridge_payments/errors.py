"""
Payment error taxonomy and classifier.

Every pipeline failure ends as a PaymentError carrying one code from a
closed set. Collaborator failures are translated at their call site; no
raw transport or encoding error reaches the caller.

Wire codes (PaymentErrorCode values) are what clients see in the error
envelope::

    {"error": {"code": "invalid_memo", "message": "memo is invalid"}}

classify_build_error() is the single place that maps transaction
construction failures to caller-facing codes. Builder errors carry a
structured BuildErrorCode and map directly. stellar_sdk exceptions map by
type where the SDK has a dedicated one. Anything else falls back to
message matching, which keeps compatibility with construction errors
that only describe themselves in text.
"""

from __future__ import annotations

from decimal import InvalidOperation
from enum import StrEnum

from stellar_sdk.exceptions import AssetCodeInvalidError, MemoInvalidException

from bridge_payments.ledger.tx import BuildErrorCode, TransactionBuildError


class PaymentErrorCode(StrEnum):
    """Closed set of caller-facing payment errors."""

    INVALID_SOURCE = "invalid_source"
    UNRESOLVABLE_DESTINATION = "cannot_resolve_destination"
    INVALID_RESOLVED_ACCOUNT = "invalid_destination"
    MISSING_ASSET_PARAMETER = "asset_missing_param"
    INVALID_ISSUER = "invalid_issuer"
    MISSING_MEMO_PARAMETER = "memo_missing_param"
    CONFLICTING_MEMO = "cannot_use_memo"
    INVALID_MEMO = "invalid_memo"
    UNSUPPORTED_MEMO_TYPE = "unsupported_memo_type"
    MALFORMED_ASSET_CODE = "malformed_asset_code"
    INVALID_AMOUNT = "invalid_amount"
    SOURCE_ACCOUNT_NOT_FOUND = "source_not_exist"
    SERVER_ERROR = "server_error"
    CANCELED = "canceled"


_MESSAGES: dict[PaymentErrorCode, str] = {
    PaymentErrorCode.INVALID_SOURCE: "source parameter is invalid",
    PaymentErrorCode.UNRESOLVABLE_DESTINATION: "cannot resolve destination",
    PaymentErrorCode.INVALID_RESOLVED_ACCOUNT: "destination resolved to an invalid account id",
    PaymentErrorCode.MISSING_ASSET_PARAMETER: "asset_code and asset_issuer must be given together",
    PaymentErrorCode.INVALID_ISSUER: "asset_issuer parameter is invalid",
    PaymentErrorCode.MISSING_MEMO_PARAMETER: "memo_type and memo must be given together",
    PaymentErrorCode.CONFLICTING_MEMO: "destination requires its own memo; memo cannot be set",
    PaymentErrorCode.INVALID_MEMO: "memo is invalid",
    PaymentErrorCode.UNSUPPORTED_MEMO_TYPE: "memo_type is not supported",
    PaymentErrorCode.MALFORMED_ASSET_CODE: "asset_code is malformed",
    PaymentErrorCode.INVALID_AMOUNT: "amount is invalid",
    PaymentErrorCode.SOURCE_ACCOUNT_NOT_FOUND: "source account does not exist",
    PaymentErrorCode.SERVER_ERROR: "internal server error",
    PaymentErrorCode.CANCELED: "request was canceled before completion",
}

_HTTP_STATUS: dict[PaymentErrorCode, int] = {
    PaymentErrorCode.SERVER_ERROR: 500,
    PaymentErrorCode.CANCELED: 504,
}


class PaymentError(Exception):
    """A terminal, caller-facing payment failure."""

    def __init__(self, code: PaymentErrorCode, detail: str | None = None) -> None:
        super().__init__(detail or _MESSAGES[code])
        self.code = code
        self.detail = detail

    @property
    def message(self) -> str:
        return _MESSAGES[self.code]

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.code, 400)

    def to_response(self) -> dict[str, object]:
        """Error envelope for the HTTP response. Never includes detail."""
        return {"error": {"code": self.code.value, "message": self.message}}


# =========================================================================
# Build error -> PaymentErrorCode
# =========================================================================

_BUILD_CODE_MAP: dict[BuildErrorCode, PaymentErrorCode] = {
    BuildErrorCode.ASSET_CODE_INVALID: PaymentErrorCode.MALFORMED_ASSET_CODE,
    BuildErrorCode.AMOUNT_INVALID: PaymentErrorCode.INVALID_AMOUNT,
    BuildErrorCode.MEMO_TOO_LONG: PaymentErrorCode.INVALID_MEMO,
}

ASSET_CODE_LENGTH_MESSAGE = "Asset code length is invalid"
AMOUNT_PARSE_FRAGMENT = "cannot parse amount"

# stellar_sdk reports bad amounts as plain ValueErrors naming the argument.
_SDK_AMOUNT_ARGUMENTS = ('argument "amount"', 'argument "starting_balance"')


def classify_build_error(exc: Exception) -> PaymentErrorCode:
    """Map a transaction construction failure to a PaymentErrorCode.

    Args:
        exc: The exception raised while building the transaction, either
            a TransactionBuildError or one raised by stellar_sdk.

    Returns:
        MALFORMED_ASSET_CODE, INVALID_AMOUNT, INVALID_MEMO, or
        SERVER_ERROR for anything not recognized.
    """
    if isinstance(exc, TransactionBuildError):
        return _BUILD_CODE_MAP.get(exc.code, PaymentErrorCode.SERVER_ERROR)
    if isinstance(exc, AssetCodeInvalidError):
        return PaymentErrorCode.MALFORMED_ASSET_CODE
    if isinstance(exc, MemoInvalidException):
        return PaymentErrorCode.INVALID_MEMO
    if isinstance(exc, InvalidOperation):
        return PaymentErrorCode.INVALID_AMOUNT

    message = str(exc)
    if message == ASSET_CODE_LENGTH_MESSAGE:
        return PaymentErrorCode.MALFORMED_ASSET_CODE
    if AMOUNT_PARSE_FRAGMENT in message:
        return PaymentErrorCode.INVALID_AMOUNT
    if isinstance(exc, ValueError) and any(
        argument in message for argument in _SDK_AMOUNT_ARGUMENTS
    ):
        return PaymentErrorCode.INVALID_AMOUNT
    return PaymentErrorCode.SERVER_ERROR
