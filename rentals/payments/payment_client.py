"""
Stripe client for rent checkout sessions and connected-account links.
"""

from typing import Optional, Dict, Any, List
import stripe

from core.config import settings
from payments.models import CheckoutSessionRequest
from monitoring.logger import get_logger

logger = get_logger(__name__)

CURRENCY = "usd"
PAYMENT_METHOD_TYPES = ["card", "us_bank_account"]

# (request field, line item name)
RENT_LINE_ITEMS = [
    ("rent_amount", "Monthly Rent"),
    ("additional_charges", "Additional Charges"),
    ("initial_late_fee", "Initial late fee"),
    ("daily_late_fee", "Daily late fee"),
]


class StripePaymentClient:
    """Client for creating rent checkout sessions and account links via Stripe."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_version: Optional[str] = None,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ):
        """
        Initialize Stripe payment client.

        Args:
            api_key: Stripe secret key (defaults to STRIPE_SECRET_KEY)
            api_version: Stripe API version (defaults to STRIPE_API_VERSION)
            success_url: URL to redirect after successful payment
            cancel_url: URL to redirect after cancelled payment
        """
        self.api_key = api_key or settings.stripe_secret_key
        self.api_version = api_version or settings.stripe_api_version
        self.success_url = success_url or settings.stripe_payment_success_url
        self.cancel_url = cancel_url or settings.stripe_payment_failure_url

        if not self.api_key:
            raise ValueError(
                "Stripe API key not configured. Set STRIPE_SECRET_KEY environment variable."
            )

        stripe.api_key = self.api_key
        if self.api_version:
            stripe.api_version = self.api_version
        logger.info("Stripe payment client initialized")

    @staticmethod
    def build_line_items(request: CheckoutSessionRequest) -> List[Dict[str, Any]]:
        """One USD line item per non-zero rent component."""
        line_items = []
        for field, name in RENT_LINE_ITEMS:
            amount = getattr(request, field)
            if not amount:
                continue
            line_items.append({
                "price_data": {
                    "currency": CURRENCY,
                    "product_data": {"name": name},
                    "unit_amount": amount,
                },
                "quantity": 1,
            })
        return line_items

    @staticmethod
    def build_metadata(request: CheckoutSessionRequest) -> Dict[str, str]:
        """Application context copied onto the session and read back by the webhook."""
        metadata = {
            "tenantId": request.tenant_id,
            "propertyId": request.property_id,
            "propertyOwnerId": request.property_owner_id,
            "rentMonth": request.rent_month,
            "rentAmount": request.rent_amount,
            "additionalCharges": request.additional_charges,
            "initialLateFee": request.initial_late_fee,
            "dailyLateFee": request.daily_late_fee,
            "customer_email": request.tenant_email,
        }
        return {key: str(value) for key, value in metadata.items() if value is not None}

    def create_checkout_session(self, request: CheckoutSessionRequest) -> Dict[str, str]:
        """
        Create a rent Checkout Session on behalf of the property owner.

        Args:
            request: Rent amounts, tenant and property identifiers

        Returns:
            Dictionary with the session ``id`` and ``url``

        Raises:
            StripeError: If session creation fails
        """
        line_items = self.build_line_items(request)
        if not line_items:
            raise ValueError("Checkout requires at least one non-zero amount")

        try:
            session = stripe.checkout.Session.create(
                payment_method_types=PAYMENT_METHOD_TYPES,
                line_items=line_items,
                mode="payment",
                customer_email=request.tenant_email,
                metadata=self.build_metadata(request),
                success_url=self.success_url + "&session_id={CHECKOUT_SESSION_ID}",
                cancel_url=self.cancel_url,
                stripe_account=request.stripe_owner_account_id,
            )
        except stripe.StripeError as e:
            logger.error(
                "Stripe Checkout Error",
                extra={
                    "tenant_id": request.tenant_id,
                    "property_id": request.property_id,
                    "error_message": str(e),
                },
            )
            raise

        logger.info(
            "Checkout session created",
            extra={"session_id": session.id, "tenant_id": request.tenant_id},
        )
        return {"id": session.id, "url": session.url}

    def create_account_link(self, account_id: str, link_type: str = "account_onboarding") -> str:
        """
        Create a connected-account link.

        Args:
            account_id: Connected account ID (``acct_...``)
            link_type: ``account_onboarding`` or ``account_update``

        Returns:
            Account link URL
        """
        try:
            account_link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=settings.stripe_refresh_url,
                return_url=settings.stripe_return_url,
                type=link_type,
            )
        except stripe.StripeError as e:
            logger.error(f"Failed to create account link: {e}", extra={"account_id": account_id})
            raise

        logger.info("Account link created", extra={"account_id": account_id, "type": link_type})
        return account_link.url


_stripe_client: Optional[StripePaymentClient] = None


def get_stripe_client() -> StripePaymentClient:
    """Get or create Stripe payment client."""
    global _stripe_client
    if _stripe_client is None:
        _stripe_client = StripePaymentClient()
    return _stripe_client
