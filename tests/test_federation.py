"""
Tests for FederationResolver.

Test plan:
- Account ids resolve to themselves with no HTTP call
- "name*domain" queries the federation server with q=<address>&type=name
- Response memo fields become a mandated memo; numeric memos are
  stringified; an empty memo_type means no mandated memo
- Failures: no server configured, malformed identifier, non-200 status,
  non-JSON body, missing account_id or a mistyped field -> ResolutionError
- End to end over httpx with pytest-httpx
"""

import json
from typing import Any, Mapping

import pytest
from pytest_httpx import HTTPXMock
from stellar_sdk import Keypair

from bridge_payments.destination import NamingResolver, ResolutionError
from bridge_payments.federation import FederationResolver
from bridge_payments.ledger.transport import TransportResponse

FEDERATION_URL = "https://example.org/federation"
ACCOUNT = Keypair.random().public_key


class FakeTransport:
    def __init__(self, status_code: int = 200, body: Any = None, raw: bytes | None = None) -> None:
        content = raw if raw is not None else json.dumps(body).encode("utf-8")
        self._response = TransportResponse(status_code, content)
        self.gets: list[tuple[str, Mapping[str, str] | None]] = []

    async def get(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> TransportResponse:
        self.gets.append((url, params))
        return self._response

    async def post_form(self, url: str, data: Mapping[str, str]) -> TransportResponse:
        raise AssertionError("federation lookups never POST")


class TestFederationResolver:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(FederationResolver(), NamingResolver)

    @pytest.mark.asyncio
    async def test_account_id_passthrough(self) -> None:
        transport = FakeTransport(body={})
        resolved = await FederationResolver(FEDERATION_URL, transport).resolve(ACCOUNT)
        assert resolved.account_id == ACCOUNT
        assert not resolved.mandates_memo
        assert transport.gets == []

    @pytest.mark.asyncio
    async def test_lookup(self) -> None:
        transport = FakeTransport(body={"stellar_address": "bob*example.org", "account_id": ACCOUNT})
        resolved = await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")
        assert resolved.account_id == ACCOUNT
        assert not resolved.mandates_memo
        assert transport.gets == [
            (FEDERATION_URL, {"q": "bob*example.org", "type": "name"})
        ]

    @pytest.mark.asyncio
    async def test_mandated_memo(self) -> None:
        transport = FakeTransport(body={"account_id": ACCOUNT, "memo_type": "id", "memo": 42})
        resolved = await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")
        assert resolved.memo_type == "id"
        assert resolved.memo == "42"
        assert resolved.mandates_memo

    @pytest.mark.asyncio
    async def test_empty_memo_type_is_no_memo(self) -> None:
        transport = FakeTransport(body={"account_id": ACCOUNT, "memo_type": "", "memo": ""})
        resolved = await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")
        assert not resolved.mandates_memo

    @pytest.mark.asyncio
    async def test_no_server_configured(self) -> None:
        with pytest.raises(ResolutionError, match="no federation server"):
            await FederationResolver(None, FakeTransport(body={})).resolve("bob*example.org")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identifier", ["bob", "*example.org", "bob*", ""])
    async def test_malformed_identifier(self, identifier: str) -> None:
        transport = FakeTransport(body={})
        with pytest.raises(ResolutionError):
            await FederationResolver(FEDERATION_URL, transport).resolve(identifier)
        assert transport.gets == []

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        transport = FakeTransport(404, body={"detail": "not found"})
        with pytest.raises(ResolutionError, match="404"):
            await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")

    @pytest.mark.asyncio
    async def test_non_json(self) -> None:
        transport = FakeTransport(raw=b"<html>")
        with pytest.raises(ResolutionError):
            await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")

    @pytest.mark.asyncio
    async def test_missing_account_id(self) -> None:
        transport = FakeTransport(body={"memo_type": "id", "memo": "1"})
        with pytest.raises(ResolutionError, match="account_id"):
            await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("body", "field"),
        [
            ({"account_id": 7}, "account_id"),
            ({"account_id": ACCOUNT, "memo_type": 1}, "memo_type"),
            ({"account_id": ACCOUNT, "memo_type": "id", "memo": [1]}, "memo"),
        ],
    )
    async def test_wrong_field_type(self, body: dict[str, Any], field: str) -> None:
        transport = FakeTransport(body=body)
        with pytest.raises(ResolutionError, match=rf"\$\.{field}:"):
            await FederationResolver(FEDERATION_URL, transport).resolve("bob*example.org")


class TestFederationOverHttp:
    @pytest.mark.asyncio
    async def test_lookup(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"account_id": ACCOUNT, "memo_type": "text", "memo": "inv-7"})

        resolved = await FederationResolver(FEDERATION_URL).resolve("bob*example.org")

        assert resolved.account_id == ACCOUNT
        assert resolved.memo_type == "text"
        assert resolved.memo == "inv-7"
        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["q"] == "bob*example.org"
        assert request.url.params["type"] == "name"
