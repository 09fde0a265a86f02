"""
Tests for the collaborator response schemas.

Test plan:
- Each schema accepts a well-formed body and extra fields
- Required fields and field types are enforced
- describe_error names the offending location as a JSON path
"""

from typing import Any

import jsonschema
import pytest

from bridge_payments.schema import (
    COMPLIANCE_SEND_SCHEMA,
    FEDERATION_RECORD_SCHEMA,
    HORIZON_ACCOUNT_SCHEMA,
    HORIZON_SUBMIT_SCHEMA,
    describe_error,
    validate,
)


def _error(instance: Any, schema: dict[str, Any]) -> jsonschema.ValidationError:
    with pytest.raises(jsonschema.ValidationError) as exc_info:
        validate(instance, schema)
    return exc_info.value


class TestAccepts:
    def test_horizon_account(self) -> None:
        validate({"id": "G...", "sequence": "123", "balances": []}, HORIZON_ACCOUNT_SCHEMA)

    def test_horizon_submit(self) -> None:
        validate({"status": 400, "extras": {}}, HORIZON_SUBMIT_SCHEMA)

    @pytest.mark.parametrize("memo", ["inv-7", 42, None])
    def test_federation_record(self, memo: Any) -> None:
        body = {"account_id": "G...", "memo_type": "id", "memo": memo}
        validate(body, FEDERATION_RECORD_SCHEMA)

    def test_federation_record_without_memo(self) -> None:
        validate({"account_id": "G...", "stellar_address": "bob*example.org"}, FEDERATION_RECORD_SCHEMA)

    def test_compliance_send(self) -> None:
        validate({"transaction_xdr": "AAAA", "status": "ok"}, COMPLIANCE_SEND_SCHEMA)


class TestRejects:
    @pytest.mark.parametrize("body", [{}, {"sequence": ""}, {"sequence": 5}, []])
    def test_horizon_account(self, body: Any) -> None:
        _error(body, HORIZON_ACCOUNT_SCHEMA)

    def test_horizon_submit_non_object(self) -> None:
        _error(["ok"], HORIZON_SUBMIT_SCHEMA)

    @pytest.mark.parametrize(
        "body",
        [
            {"memo": "1"},
            {"account_id": ""},
            {"account_id": "G...", "memo": 1.5},
            {"account_id": "G...", "memo_type": ["id"]},
        ],
    )
    def test_federation_record(self, body: Any) -> None:
        _error(body, FEDERATION_RECORD_SCHEMA)

    @pytest.mark.parametrize("body", [{}, {"transaction_xdr": ""}, "AAAA"])
    def test_compliance_send(self, body: Any) -> None:
        _error(body, COMPLIANCE_SEND_SCHEMA)


class TestDescribeError:
    def test_names_field(self) -> None:
        exc = _error({"sequence": 5}, HORIZON_ACCOUNT_SCHEMA)
        assert describe_error(exc).startswith("$.sequence: ")

    def test_root_for_missing_field(self) -> None:
        exc = _error({}, COMPLIANCE_SEND_SCHEMA)
        summary = describe_error(exc)
        assert summary.startswith("$: ")
        assert "transaction_xdr" in summary
