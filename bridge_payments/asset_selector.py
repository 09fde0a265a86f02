"""
Asset selection: which asset moves, and which operation moves it.

    asset_code  asset_issuer   result
    ----------  ------------   -----------------------------------------
    set         set            Payment of CreditAsset(code, issuer)
    empty       empty          Payment of the native asset if the
                               destination exists, else CreateAccount
    one of them set            MissingAssetParameter

The destination lookup distinguishes "not found" from every other
failure: only AccountNotFoundError selects CreateAccount. A transient
ledger error fails the request with ServerError instead of silently
turning the payment into an account creation.
"""

from __future__ import annotations

import logging

from stellar_sdk import StrKey

from bridge_payments.destination import ResolvedDestination
from bridge_payments.errors import PaymentError, PaymentErrorCode
from bridge_payments.ledger.asset import NATIVE, Asset, CreditAsset
from bridge_payments.ledger.client import AccountNotFoundError, LedgerQuery
from bridge_payments.ledger.operations import CreateAccount, Operation, Payment

logger = logging.getLogger(__name__)


def parse_asset_specifier(asset_code: str, asset_issuer: str) -> Asset:
    """Turn the request's asset fields into an asset.

    Raises:
        PaymentError: MISSING_ASSET_PARAMETER if only one field is set,
            INVALID_ISSUER if the issuer is not a valid account id.
    """
    if asset_code and asset_issuer:
        if not StrKey.is_valid_ed25519_public_key(asset_issuer):
            logger.info(
                "Invalid asset_issuer parameter",
                extra={"asset_issuer": asset_issuer},
            )
            raise PaymentError(PaymentErrorCode.INVALID_ISSUER)
        return CreditAsset(code=asset_code, issuer=asset_issuer)
    if not asset_code and not asset_issuer:
        return NATIVE
    logger.info("Missing asset param")
    raise PaymentError(PaymentErrorCode.MISSING_ASSET_PARAMETER)


async def select_operation(
    asset: Asset,
    destination: ResolvedDestination,
    amount: str,
    ledger: LedgerQuery,
) -> Operation:
    """Pick the operation for a payment of ``amount`` of ``asset``.

    Credit payments never touch the ledger here. Native payments look up
    the destination account first.

    Raises:
        PaymentError: SERVER_ERROR if the lookup fails for any reason
            other than the account not existing.
    """
    if isinstance(asset, CreditAsset):
        return Payment(destination=destination.account_id, amount=amount, asset=asset)

    try:
        await ledger.load_account(destination.account_id)
    except AccountNotFoundError:
        logger.info(
            "Destination account does not exist, creating it",
            extra={"account_id": destination.account_id},
        )
        return CreateAccount(destination=destination.account_id, amount=amount)
    except Exception as exc:
        logger.error(
            "Error loading destination account",
            extra={"account_id": destination.account_id, "error": str(exc)},
        )
        raise PaymentError(PaymentErrorCode.SERVER_ERROR, str(exc)) from exc

    return Payment(destination=destination.account_id, amount=amount, asset=NATIVE)
