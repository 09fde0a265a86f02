"""
Ledger assets.

An asset is either the network's native asset or a credit asset
identified by (code, issuer).

Code validity is checked at transaction build time (see tx.py), not
here, so a malformed code surfaces as a classified build error.
"""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import Asset as LedgerAsset


@dataclass(frozen=True)
class NativeAsset:
    """The network's native asset."""

    def to_ledger(self) -> LedgerAsset:
        return LedgerAsset.native()


@dataclass(frozen=True)
class CreditAsset:
    """A custom asset issued by ``issuer`` under ``code``."""

    code: str
    issuer: str

    def to_ledger(self) -> LedgerAsset:
        return LedgerAsset(self.code, self.issuer)


Asset = NativeAsset | CreditAsset

NATIVE = NativeAsset()
