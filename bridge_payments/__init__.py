"""
bridge-payments: payment orchestration for a ledger bridge.

Every payment request is:
- validated in a fixed stage order
- either relayed through a compliance server or assembled directly
- signed with the request's source key
- submitted once, with no retry

Every run ends in a PaymentOutcome: the submission result, or exactly
one PaymentError code.

The HTTP surface lives in ``bridge_payments.api``.
"""

__version__ = "0.1.0"

from bridge_payments.asset_selector import parse_asset_specifier, select_operation
from bridge_payments.compliance import (
    ComplianceError,
    ComplianceRelay,
    ComplianceSendRequest,
    HttpComplianceRelay,
)
from bridge_payments.destination import (
    NamingResolver,
    ResolutionError,
    ResolvedDestination,
    resolve_destination,
)
from bridge_payments.errors import PaymentError, PaymentErrorCode, classify_build_error
from bridge_payments.federation import FederationResolver
from bridge_payments.memo_policy import apply_memo_policy, parse_memo
from bridge_payments.request import PaymentRequest
from bridge_payments.router import (
    PaymentCollaborators,
    PaymentOutcome,
    PaymentState,
    SubmissionRouter,
)

__all__ = [
    "ComplianceError",
    "ComplianceRelay",
    "ComplianceSendRequest",
    "FederationResolver",
    "HttpComplianceRelay",
    "NamingResolver",
    "PaymentCollaborators",
    "PaymentError",
    "PaymentErrorCode",
    "PaymentOutcome",
    "PaymentRequest",
    "PaymentState",
    "ResolutionError",
    "ResolvedDestination",
    "SubmissionRouter",
    "__version__",
    "apply_memo_policy",
    "classify_build_error",
    "parse_asset_specifier",
    "parse_memo",
    "resolve_destination",
    "select_operation",
]
