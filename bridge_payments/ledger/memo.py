"""
Transaction memos.

A memo is an optional value attached to a transaction. Four variants:

    - NoMemo:   nothing attached.
    - IdMemo:   unsigned 64-bit integer.
    - TextMemo: opaque bytes, at most 28 on the ledger.
    - HashMemo: exactly 32 bytes.

These are request-side values. The transaction builder turns them into
ledger memos, so the 28-byte text limit is enforced there and an
oversize memo is reported as a classified build error.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_MEMO_ID = 2**64 - 1
MAX_TEXT_MEMO_BYTES = 28
HASH_MEMO_BYTES = 32


@dataclass(frozen=True)
class NoMemo:
    pass


@dataclass(frozen=True)
class IdMemo:
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_MEMO_ID:
            raise ValueError(f"memo id out of uint64 range: {self.value}")


@dataclass(frozen=True)
class TextMemo:
    value: bytes


@dataclass(frozen=True)
class HashMemo:
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != HASH_MEMO_BYTES:
            raise ValueError(
                f"hash memo must be {HASH_MEMO_BYTES} bytes, got {len(self.value)}"
            )


Memo = NoMemo | IdMemo | TextMemo | HashMemo

NO_MEMO = NoMemo()
