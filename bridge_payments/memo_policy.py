"""
Memo policy: reconcile the client's memo with the destination's.

Rules, in order:
    1. memo_type and memo are given together or not at all
       (MissingMemoParameter).
    2. If the destination mandates a memo, the client may not send one
       (ConflictingMemo). The mandated memo is used instead.
    3. The chosen (type, value) is parsed:
         ""     -> NoMemo
         "id"   -> IdMemo, unsigned 64-bit decimal       (InvalidMemo)
         "text" -> TextMemo, value as UTF-8 bytes
         "hash" -> HashMemo, 64 hex chars = 32 bytes      (InvalidMemo)
         other  -> UnsupportedMemoType
"""

from __future__ import annotations

import logging
import re

from bridge_payments.destination import ResolvedDestination
from bridge_payments.errors import PaymentError, PaymentErrorCode
from bridge_payments.ledger.memo import (
    HASH_MEMO_BYTES,
    MAX_MEMO_ID,
    NO_MEMO,
    HashMemo,
    IdMemo,
    Memo,
    TextMemo,
)

logger = logging.getLogger(__name__)

_UINT_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def parse_memo(memo_type: str, value: str) -> Memo:
    """Parse a (type, value) pair into a memo.

    Raises:
        PaymentError: INVALID_MEMO or UNSUPPORTED_MEMO_TYPE.
    """
    if memo_type == "":
        return NO_MEMO
    if memo_type == "id":
        if not _UINT_RE.fullmatch(value) or int(value) > MAX_MEMO_ID:
            logger.info("Cannot convert memo_id value to uint64", extra={"memo": value})
            raise PaymentError(PaymentErrorCode.INVALID_MEMO)
        return IdMemo(int(value))
    if memo_type == "text":
        return TextMemo(value.encode("utf-8"))
    if memo_type == "hash":
        if not _HEX_RE.fullmatch(value) or len(value) != HASH_MEMO_BYTES * 2:
            logger.info("Cannot decode hash memo value", extra={"memo": value})
            raise PaymentError(PaymentErrorCode.INVALID_MEMO)
        return HashMemo(bytes.fromhex(value))

    logger.info("Not supported memo type", extra={"memo_type": memo_type})
    raise PaymentError(PaymentErrorCode.UNSUPPORTED_MEMO_TYPE)


def apply_memo_policy(
    memo_type: str,
    memo: str,
    destination: ResolvedDestination,
) -> Memo:
    """Decide the memo attached to the transaction.

    Args:
        memo_type: Client-supplied memo type ("" if absent).
        memo: Client-supplied memo value ("" if absent).
        destination: Resolved destination, possibly mandating a memo.

    Raises:
        PaymentError: MISSING_MEMO_PARAMETER, CONFLICTING_MEMO,
            INVALID_MEMO or UNSUPPORTED_MEMO_TYPE.
    """
    if bool(memo_type) != bool(memo):
        logger.info("Missing one of memo params")
        raise PaymentError(PaymentErrorCode.MISSING_MEMO_PARAMETER)

    if destination.mandates_memo:
        if memo_type:
            logger.info("Memo given in request but destination mandates its own memo")
            raise PaymentError(PaymentErrorCode.CONFLICTING_MEMO)
        memo_type = destination.memo_type or ""
        memo = destination.memo or ""

    return parse_memo(memo_type, memo)
