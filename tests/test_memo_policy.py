"""
Tests for memo parsing and the memo policy.

Test plan:
- parse_memo: "" -> NoMemo; id accepts the full uint64 range and rejects
  overflow, signs, non-digits and surrounding whitespace (a trailing
  newline included); text is UTF-8 bytes; hash needs exactly 64 hex
  characters and nothing else; anything else is UNSUPPORTED_MEMO_TYPE
- apply_memo_policy: type and value travel together, a destination
  mandated memo forbids a client memo and replaces it, no memo at all
  yields NoMemo
"""

import pytest
from stellar_sdk import Keypair

from bridge_payments.destination import ResolvedDestination
from bridge_payments.errors import PaymentError, PaymentErrorCode
from bridge_payments.ledger.memo import NO_MEMO, HashMemo, IdMemo, TextMemo
from bridge_payments.memo_policy import apply_memo_policy, parse_memo

ACCOUNT = Keypair.random().public_key
PLAIN = ResolvedDestination(account_id=ACCOUNT)
MANDATES_ID = ResolvedDestination(account_id=ACCOUNT, memo_type="id", memo="7")
HASH_HEX = "ab" * 32


def _code(memo_type: str, memo: str, destination: ResolvedDestination = PLAIN) -> str:
    with pytest.raises(PaymentError) as exc_info:
        apply_memo_policy(memo_type, memo, destination)
    return exc_info.value.code


# ---------------------------------------------------------------------------
# parse_memo
# ---------------------------------------------------------------------------


class TestParseMemo:
    def test_empty_is_no_memo(self) -> None:
        assert parse_memo("", "") is NO_MEMO

    def test_id(self) -> None:
        assert parse_memo("id", "42") == IdMemo(42)

    def test_id_max(self) -> None:
        assert parse_memo("id", "18446744073709551615") == IdMemo(2**64 - 1)

    @pytest.mark.parametrize("value", ["18446744073709551616", "-1", "+1", "abc", "1.5", ""])
    def test_id_invalid(self, value: str) -> None:
        with pytest.raises(PaymentError) as exc_info:
            parse_memo("id", value)
        assert exc_info.value.code == PaymentErrorCode.INVALID_MEMO

    def test_text_is_utf8(self) -> None:
        assert parse_memo("text", "café") == TextMemo("café".encode("utf-8"))

    def test_hash(self) -> None:
        memo = parse_memo("hash", HASH_HEX)
        assert memo == HashMemo(bytes.fromhex(HASH_HEX))
        assert len(memo.value) == 32

    def test_hash_uppercase_hex(self) -> None:
        assert parse_memo("hash", HASH_HEX.upper()) == HashMemo(bytes.fromhex(HASH_HEX))

    @pytest.mark.parametrize("value", ["ab" * 31, "ab" * 33, "zz" * 32, "ab" * 31 + "a"])
    def test_hash_invalid(self, value: str) -> None:
        with pytest.raises(PaymentError) as exc_info:
            parse_memo("hash", value)
        assert exc_info.value.code == PaymentErrorCode.INVALID_MEMO

    @pytest.mark.parametrize("value", ["42\n", "\n42", " 42", "42 "])
    def test_id_surrounding_whitespace(self, value: str) -> None:
        with pytest.raises(PaymentError) as exc_info:
            parse_memo("id", value)
        assert exc_info.value.code == PaymentErrorCode.INVALID_MEMO

    @pytest.mark.parametrize("value", [HASH_HEX + "\n", HASH_HEX[:-1] + "\n", "ab" * 31 + "a "])
    def test_hash_trailing_whitespace(self, value: str) -> None:
        with pytest.raises(PaymentError) as exc_info:
            parse_memo("hash", value)
        assert exc_info.value.code == PaymentErrorCode.INVALID_MEMO

    @pytest.mark.parametrize("memo_type", ["return", "ID", "memo"])
    def test_unsupported_type(self, memo_type: str) -> None:
        with pytest.raises(PaymentError) as exc_info:
            parse_memo(memo_type, "1")
        assert exc_info.value.code == PaymentErrorCode.UNSUPPORTED_MEMO_TYPE


# ---------------------------------------------------------------------------
# apply_memo_policy
# ---------------------------------------------------------------------------


class TestMemoPolicy:
    def test_no_memo(self) -> None:
        assert apply_memo_policy("", "", PLAIN) is NO_MEMO

    def test_client_memo(self) -> None:
        assert apply_memo_policy("id", "42", PLAIN) == IdMemo(42)

    def test_type_without_value(self) -> None:
        assert _code("id", "") == PaymentErrorCode.MISSING_MEMO_PARAMETER

    def test_value_without_type(self) -> None:
        assert _code("", "42") == PaymentErrorCode.MISSING_MEMO_PARAMETER

    def test_mandated_memo_used(self) -> None:
        assert apply_memo_policy("", "", MANDATES_ID) == IdMemo(7)

    def test_client_memo_conflicts_with_mandated(self) -> None:
        assert _code("id", "42", MANDATES_ID) == PaymentErrorCode.CONFLICTING_MEMO

    def test_missing_parameter_checked_before_conflict(self) -> None:
        assert _code("id", "", MANDATES_ID) == PaymentErrorCode.MISSING_MEMO_PARAMETER

    def test_mandated_text_memo(self) -> None:
        destination = ResolvedDestination(account_id=ACCOUNT, memo_type="text", memo="ref-1")
        assert apply_memo_policy("", "", destination) == TextMemo(b"ref-1")

    def test_mandated_memo_is_validated(self) -> None:
        destination = ResolvedDestination(account_id=ACCOUNT, memo_type="id", memo="x")
        assert _code("", "", destination) == PaymentErrorCode.INVALID_MEMO

    def test_mandated_unsupported_type(self) -> None:
        destination = ResolvedDestination(account_id=ACCOUNT, memo_type="return", memo="1")
        assert _code("", "", destination) == PaymentErrorCode.UNSUPPORTED_MEMO_TYPE
