"""
Submission router: the payment pipeline.

Drives one PaymentRequest through a small state machine::

    START -> COMPLIANCE_RELAY  -> SIGNED -> SUBMITTED -> DONE
          -> DIRECT_ASSEMBLY  /

FAILED is reachable from every non-terminal state and absorbs.

    - START: parse the source secret (InvalidSource). This precedes
      everything, so a bad source always wins over other errors.
    - Path choice: an extra memo plus a configured compliance relay
      selects COMPLIANCE_RELAY; anything else selects DIRECT_ASSEMBLY.
    - COMPLIANCE_RELAY: forward the normalized fields, decode the
      returned transaction. Any failure is ServerError. No retry.
    - DIRECT_ASSEMBLY: resolve destination -> select asset/operation ->
      memo policy -> load source snapshot -> build. Each stage raises
      on the first problem; nothing later runs.
    - SIGNED: sign with the source keypair. Failure is ServerError.
    - SUBMITTED: submit the envelope. Failure is ServerError; success
      returns the ledger's result verbatim.

submit() never raises for pipeline failures. Like every attempt in
this codebase it produces a record: a PaymentOutcome with the state
trail, and either the result or the PaymentError.

All per-request data lives in locals of one submit() call; the router
itself holds only immutable configuration and collaborators, so one
instance serves any number of concurrent requests.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable

from stellar_sdk import Keypair, TimeBounds, TransactionEnvelope
from stellar_sdk.exceptions import Ed25519SecretSeedInvalidError

from bridge_payments.asset_selector import parse_asset_specifier, select_operation
from bridge_payments.compliance import ComplianceRelay, ComplianceSendRequest
from bridge_payments.destination import NamingResolver, resolve_destination
from bridge_payments.errors import PaymentError, PaymentErrorCode, classify_build_error
from bridge_payments.ledger.client import AccountNotFoundError, AccountState, LedgerQuery
from bridge_payments.ledger.codec import EnvelopeDecodeError, decode_transaction
from bridge_payments.ledger.signer import KeypairSigner, SignerFactory, SignResult
from bridge_payments.ledger.tx import DEFAULT_BASE_FEE, build_transaction
from bridge_payments.memo_policy import apply_memo_policy
from bridge_payments.request import PaymentRequest

logger = logging.getLogger(__name__)


class PaymentState(StrEnum):
    START = "START"
    COMPLIANCE_RELAY = "COMPLIANCE_RELAY"
    DIRECT_ASSEMBLY = "DIRECT_ASSEMBLY"
    SIGNED = "SIGNED"
    SUBMITTED = "SUBMITTED"
    DONE = "DONE"
    FAILED = "FAILED"


_PATH_STATES = (PaymentState.COMPLIANCE_RELAY, PaymentState.DIRECT_ASSEMBLY)


# =========================================================================
# Collaborators and outcome
# =========================================================================


@dataclass(frozen=True)
class PaymentCollaborators:
    """External services the pipeline talks to.

    Attributes:
        resolver: Destination lookup.
        ledger: Account loads and transaction submission.
        compliance: Compliance relay. None disables the relay path.
        signer_factory: Builds a per-request signer from the source keypair.
    """

    resolver: NamingResolver
    ledger: LedgerQuery
    compliance: ComplianceRelay | None = None
    signer_factory: SignerFactory = KeypairSigner


@dataclass(frozen=True)
class PaymentOutcome:
    """Record of one pipeline run.

    Attributes:
        state: DONE or FAILED.
        trail: Every state entered, in order, ending with ``state``.
        result: Ledger submission result (DONE only).
        error: The terminal error (FAILED only).
        tx_hash: Hash of the signed transaction, once signing succeeded.
    """

    state: PaymentState
    trail: tuple[PaymentState, ...]
    result: dict[str, Any] | None = None
    error: PaymentError | None = None
    tx_hash: str | None = None

    @property
    def ok(self) -> bool:
        return self.state == PaymentState.DONE

    @property
    def path(self) -> PaymentState | None:
        """COMPLIANCE_RELAY or DIRECT_ASSEMBLY, if the run got that far."""
        for state in self.trail:
            if state in _PATH_STATES:
                return state
        return None


# =========================================================================
# Router
# =========================================================================


class SubmissionRouter:
    """Routes payment requests to the compliance relay or direct assembly.

    Args:
        collaborators: Injected external services.
        network_passphrase: Network every signature is bound to.
        base_fee: Fee per operation for directly assembled transactions.
        transaction_timeout: Seconds a directly assembled transaction
            stays valid. 0 leaves it open-ended.
        clock: UNIX-time source for time bounds. Inject for tests.
    """

    def __init__(
        self,
        collaborators: PaymentCollaborators,
        *,
        network_passphrase: str,
        base_fee: int = DEFAULT_BASE_FEE,
        transaction_timeout: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._collaborators = collaborators
        self._network_passphrase = network_passphrase
        self._base_fee = base_fee
        self._transaction_timeout = transaction_timeout
        self._clock = clock

    @property
    def collaborators(self) -> PaymentCollaborators:
        return self._collaborators

    async def submit(
        self,
        request: PaymentRequest,
        *,
        deadline: float | None = None,
    ) -> PaymentOutcome:
        """Run the pipeline for one request.

        Args:
            request: The payment request.
            deadline: Seconds the whole run may take. On expiry the
                in-flight call is cancelled and the outcome is
                FAILED(canceled). None means no deadline.

        Returns:
            PaymentOutcome. Never raises for pipeline failures.

        Raises:
            asyncio.CancelledError: If the calling task is cancelled.
                The run is logged as FAILED(canceled) first, then the
                cancellation propagates so the caller can complete it.
        """
        trail: list[PaymentState] = [PaymentState.START]
        try:
            async with asyncio.timeout(deadline):
                signed = await self._run(request, trail)
                trail.append(PaymentState.SUBMITTED)
                result = await self._submit(signed)
        except PaymentError as exc:
            return self._failed(trail, exc)
        except TimeoutError:
            return self._failed(trail, PaymentError(PaymentErrorCode.CANCELED))
        except asyncio.CancelledError:
            self._failed(trail, PaymentError(PaymentErrorCode.CANCELED))
            raise

        trail.append(PaymentState.DONE)
        logger.info(
            "Payment submitted",
            extra={"tx_hash": signed.tx_hash, "state": PaymentState.DONE.value},
        )
        return PaymentOutcome(
            state=PaymentState.DONE,
            trail=tuple(trail),
            result=result,
            tx_hash=signed.tx_hash,
        )

    # -----------------------------------------------------------------
    # Pipeline stages
    # -----------------------------------------------------------------

    async def _run(
        self, request: PaymentRequest, trail: list[PaymentState]
    ) -> SignResult:
        keypair = _parse_source(request.source)

        if request.extra_memo and self._collaborators.compliance is not None:
            trail.append(PaymentState.COMPLIANCE_RELAY)
            envelope = await self._relay(
                request, keypair, self._collaborators.compliance
            )
        else:
            trail.append(PaymentState.DIRECT_ASSEMBLY)
            envelope = await self._assemble(request, keypair)

        trail.append(PaymentState.SIGNED)
        return self._sign(envelope, keypair)

    async def _relay(
        self,
        request: PaymentRequest,
        keypair: Keypair,
        compliance: ComplianceRelay,
    ) -> TransactionEnvelope:
        send_request = ComplianceSendRequest(
            source=keypair.public_key,
            sender=request.sender,
            destination=request.destination,
            amount=request.amount,
            asset_code=request.asset_code,
            asset_issuer=request.asset_issuer,
            extra_memo=request.extra_memo,
        )
        try:
            tx_xdr = await compliance.send(send_request)
        except Exception as exc:
            logger.error(
                "Error sending request to compliance server",
                extra={"error": str(exc)},
            )
            raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc

        try:
            return decode_transaction(tx_xdr, self._network_passphrase)
        except EnvelopeDecodeError as exc:
            logger.error(
                "Error decoding transaction returned by compliance server",
                extra={"error": str(exc)},
            )
            raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc

    async def _assemble(
        self, request: PaymentRequest, keypair: Keypair
    ) -> TransactionEnvelope:
        ledger = self._collaborators.ledger

        destination = await resolve_destination(
            request.destination, self._collaborators.resolver
        )
        asset = parse_asset_specifier(request.asset_code, request.asset_issuer)
        operation = await select_operation(asset, destination, request.amount, ledger)
        memo = apply_memo_policy(request.memo_type, request.memo, destination)
        account = await _load_source_account(keypair.public_key, ledger)

        try:
            return build_transaction(
                keypair.public_key,
                account,
                operation,
                memo,
                self._network_passphrase,
                base_fee=self._base_fee,
                time_bounds=self._time_bounds(),
            )
        except Exception as exc:
            code = classify_build_error(exc)
            logger.info(
                "Transaction builder error",
                extra={"error_code": code.value, "error": str(exc)},
            )
            raise PaymentError(code, str(exc)) from exc

    def _sign(self, envelope: TransactionEnvelope, keypair: Keypair) -> SignResult:
        try:
            return self._collaborators.signer_factory(keypair).sign(envelope)
        except Exception as exc:
            logger.error(
                "Cannot sign transaction envelope", extra={"error": str(exc)}
            )
            raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc

    async def _submit(self, signed: SignResult) -> dict[str, Any]:
        try:
            return await self._collaborators.ledger.submit(signed.envelope_xdr)
        except Exception as exc:
            logger.error(
                "Error submitting transaction",
                extra={"tx_hash": signed.tx_hash, "error": str(exc)},
            )
            raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc

    # -----------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------

    def _time_bounds(self) -> TimeBounds | None:
        if self._transaction_timeout <= 0:
            return None
        return TimeBounds(
            min_time=0, max_time=int(self._clock()) + self._transaction_timeout
        )

    def _failed(
        self, trail: list[PaymentState], error: PaymentError
    ) -> PaymentOutcome:
        logger.warning(
            "Payment failed",
            extra={"error_code": error.code.value, "state": trail[-1].value},
        )
        trail.append(PaymentState.FAILED)
        return PaymentOutcome(
            state=PaymentState.FAILED, trail=tuple(trail), error=error
        )


def _parse_source(source: str) -> Keypair:
    try:
        return Keypair.from_secret(source)
    except Ed25519SecretSeedInvalidError as exc:
        logger.info("Invalid source parameter")
        raise PaymentError(PaymentErrorCode.INVALID_SOURCE) from exc


async def _load_source_account(account_id: str, ledger: LedgerQuery) -> AccountState:
    try:
        return await ledger.load_account(account_id)
    except AccountNotFoundError as exc:
        logger.info("Source account does not exist", extra={"account_id": account_id})
        raise PaymentError(PaymentErrorCode.SOURCE_ACCOUNT_NOT_FOUND) from exc
    except Exception as exc:
        logger.error(
            "Cannot load source account",
            extra={"account_id": account_id, "error": str(exc)},
        )
        raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc
