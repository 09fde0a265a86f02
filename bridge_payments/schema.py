"""
JSON Schemas for collaborator responses.

Horizon, the federation server and the compliance server all answer in
JSON. Each client checks the parsed body against one of the schemas
below before reading fields from it, and turns a ValidationError into
its own error type.
"""

from __future__ import annotations

from typing import Any, Dict

import jsonschema  # type: ignore[import-untyped]

HORIZON_ACCOUNT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["sequence"],
    "properties": {
        "sequence": {"type": "string", "minLength": 1},
    },
}

HORIZON_SUBMIT_SCHEMA: Dict[str, Any] = {
    "type": "object",
}

FEDERATION_RECORD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["account_id"],
    "properties": {
        "account_id": {"type": "string", "minLength": 1},
        "memo_type": {"type": ["string", "null"]},
        # Some servers send id memos as JSON numbers.
        "memo": {"type": ["string", "integer", "null"]},
    },
}

COMPLIANCE_SEND_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["transaction_xdr"],
    "properties": {
        "transaction_xdr": {"type": "string", "minLength": 1},
    },
}


def validate(instance: Any, schema: Dict[str, Any]) -> None:
    jsonschema.validate(instance=instance, schema=schema)


def describe_error(exc: jsonschema.ValidationError) -> str:
    """One-line summary naming the offending location, e.g. ``$.sequence: ...``."""
    return f"{exc.json_path}: {exc.message}"
