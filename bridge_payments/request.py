"""Inbound payment request, as submitted in the HTTP form."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping

FORM_FIELDS = (
    "source",
    "destination",
    "amount",
    "asset_code",
    "asset_issuer",
    "memo_type",
    "memo",
    "extra_memo",
    "sender",
)


@dataclass(frozen=True)
class PaymentRequest:
    """An untrusted payment request.

    Values are kept verbatim; absent fields are "". Validation belongs
    to the pipeline, which checks fields in a fixed order so the first
    failing stage determines the error.

    Attributes:
        source: Secret seed of the paying account. Never log this.
        destination: Destination identifier before resolution: an
            account id or a "name*domain" address.
    """

    source: str = ""
    destination: str = ""
    amount: str = ""
    asset_code: str = ""
    asset_issuer: str = ""
    memo_type: str = ""
    memo: str = ""
    extra_memo: str = ""
    sender: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, str | None]) -> PaymentRequest:
        return cls(**{name: form.get(name) or "" for name in FORM_FIELDS})

    def __repr__(self) -> str:
        shown = ", ".join(
            f"{f.name}={getattr(self, f.name)!r}"
            for f in fields(self)
            if f.name != "source"
        )
        return f"PaymentRequest({shown})"
