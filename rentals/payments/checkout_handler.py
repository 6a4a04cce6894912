"""
Endpoints for rent checkout sessions and connected-account links.
"""

from typing import Dict
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import stripe

from payments.models import AccountLinkRequest, CheckoutSessionRequest
from payments.payment_client import StripePaymentClient, get_stripe_client

router = APIRouter(tags=["stripe"])


def _error(e: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(e)})


@router.post("/create-checkout-session")
def create_checkout_session(
    request: CheckoutSessionRequest,
    client: StripePaymentClient = Depends(get_stripe_client),
):
    """Create a Checkout Session for a tenant's rent payment."""
    try:
        return client.create_checkout_session(request)
    except (stripe.StripeError, ValueError) as e:
        return _error(e)


@router.post("/link-account")
def link_account(
    request: AccountLinkRequest,
    client: StripePaymentClient = Depends(get_stripe_client),
) -> Dict[str, str]:
    """Onboarding link for a property owner's connected account."""
    try:
        return {"url": client.create_account_link(request.account_id, "account_onboarding")}
    except stripe.StripeError as e:
        return _error(e)


@router.post("/bank-login-link")
def bank_login_link(
    request: AccountLinkRequest,
    client: StripePaymentClient = Depends(get_stripe_client),
) -> Dict[str, str]:
    """Link for a connected account to manage bank details and payouts."""
    try:
        return {"url": client.create_account_link(request.account_id, "account_update")}
    except stripe.StripeError as e:
        return _error(e)
