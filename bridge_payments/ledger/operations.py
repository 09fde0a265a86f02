"""
Ledger operations.

A payment transaction carries exactly one of:

    - CreateAccount: funds a destination that does not exist yet.
      Always moves the native asset; ``amount`` is the starting balance.
    - Payment: moves ``amount`` of ``asset`` to an existing destination.

Amounts are kept as the decimal strings the client sent. They are
validated when the transaction is built.
"""

from __future__ import annotations

from dataclasses import dataclass

from bridge_payments.ledger.asset import NATIVE, Asset, NativeAsset


@dataclass(frozen=True)
class CreateAccount:
    destination: str
    amount: str

    @property
    def asset(self) -> NativeAsset:
        return NATIVE


@dataclass(frozen=True)
class Payment:
    destination: str
    amount: str
    asset: Asset


Operation = CreateAccount | Payment
