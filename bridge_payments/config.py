"""
Bridge configuration: environment-driven settings via pydantic-settings.

Every field can be set with a ``BRIDGE_``-prefixed environment variable
(``BRIDGE_HORIZON_URL``, ``BRIDGE_COMPLIANCE_URL``, ...) or a ``.env``
file. get_settings() is cached, so the process sees one instance.

Settings never hold source seeds. The paying account's secret arrives
with each request and is dropped when the request ends.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TESTNET_PASSPHRASE = "Test SDF Network ; September 2015"


class Settings(BaseSettings):
    """Bridge settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BRIDGE_", env_file=".env", case_sensitive=False
    )

    # Ledger
    network_passphrase: str = TESTNET_PASSPHRASE
    horizon_url: str = "https://horizon-testnet.stellar.org"
    base_fee: int = 100
    transaction_timeout_seconds: int = 0

    # Collaborators; None disables federation lookups / the compliance relay
    federation_url: str | None = None
    compliance_url: str | None = None

    # Timeouts
    http_timeout_seconds: float = 30.0
    request_deadline_seconds: float | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("federation_url", "compliance_url", mode="before")
    @classmethod
    def blank_url_is_unset(cls, v: str | None) -> str | None:
        """An empty env var disables the collaborator instead of pointing at ""."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("base_fee")
    @classmethod
    def base_fee_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("base_fee must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
