"""
HTTP surface: FastAPI application for the bridge.

Routes:
    POST /payment  form fields source, destination, amount, asset_code,
                   asset_issuer, memo_type, memo, extra_memo, sender.
                   200 with the ledger's submission result, or the error
                   code's HTTP status with {"error": {"code", "message"}}.
    GET  /health   {"status": "healthy"}

create_app() takes settings and, optionally, a ready collaborator set.
Without one it wires HorizonClient, FederationResolver and (when
compliance_url is set) HttpComplianceRelay from settings.

Two error handler layers: PaymentError (domain) and Exception
(catch-all). Neither leaks internal detail.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, Request, status
from fastapi.responses import JSONResponse

from bridge_payments.compliance import HttpComplianceRelay
from bridge_payments.config import Settings, get_settings
from bridge_payments.errors import PaymentError, PaymentErrorCode
from bridge_payments.federation import FederationResolver
from bridge_payments.ledger.horizon import HorizonClient
from bridge_payments.ledger.transport import HttpxTransport
from bridge_payments.observability import setup_logging
from bridge_payments.request import PaymentRequest
from bridge_payments.router import PaymentCollaborators, SubmissionRouter

logger = logging.getLogger(__name__)


def build_collaborators(settings: Settings) -> PaymentCollaborators:
    """Wire the HTTP-backed collaborators described by ``settings``."""
    transport = HttpxTransport(timeout=settings.http_timeout_seconds)
    compliance = None
    if settings.compliance_url is not None:
        compliance = HttpComplianceRelay(settings.compliance_url, transport)
    return PaymentCollaborators(
        resolver=FederationResolver(settings.federation_url, transport),
        ledger=HorizonClient(settings.horizon_url, transport),
        compliance=compliance,
    )


def create_app(
    settings: Settings | None = None,
    collaborators: PaymentCollaborators | None = None,
) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()
    router = SubmissionRouter(
        collaborators or build_collaborators(settings),
        network_passphrase=settings.network_passphrase,
        base_fee=settings.base_fee,
        transaction_timeout=settings.transaction_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Bridge started", extra={"horizon_url": settings.horizon_url})
        yield
        logger.info("Bridge shutting down")

    app = FastAPI(title="bridge-payments", lifespan=lifespan)
    app.state.settings = settings
    app.state.router = router

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.post("/payment")
    async def payment(
        source: str = Form(""),
        destination: str = Form(""),
        amount: str = Form(""),
        asset_code: str = Form(""),
        asset_issuer: str = Form(""),
        memo_type: str = Form(""),
        memo: str = Form(""),
        extra_memo: str = Form(""),
        sender: str = Form(""),
    ) -> JSONResponse:
        request = PaymentRequest(
            source=source,
            destination=destination,
            amount=amount,
            asset_code=asset_code,
            asset_issuer=asset_issuer,
            memo_type=memo_type,
            memo=memo,
            extra_memo=extra_memo,
            sender=sender,
        )
        outcome = await router.submit(
            request, deadline=settings.request_deadline_seconds
        )
        if outcome.error is not None:
            raise outcome.error
        return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.result)

    _register_error_handlers(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PaymentError)
    async def payment_error_handler(request: Request, exc: PaymentError):
        logger.info(
            exc.message,
            extra={"error_code": exc.code.value, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all. Never leaks internal details."""
        logger.error(
            "Unhandled exception",
            extra={"path": request.url.path, "error": str(exc)},
            exc_info=True,
        )
        error = PaymentError(PaymentErrorCode.SERVER_ERROR)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.to_response(),
        )
