"""
Data models for Stripe payment events and stored payment records.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PAYMENT_METHOD = "stripe"


class EventFamily(str, Enum):
    """Stripe object families that carry payment state."""
    PAYMENT_INTENT = "payment_intent"
    CHECKOUT_SESSION = "checkout_session"
    CHARGE = "charge"


class PaymentEventType(str, Enum):
    """Stripe event types that update payment records.

    Anything not listed here is skipped by the classifier.
    """
    PAYMENT_INTENT_CREATED = "payment_intent.created"
    PAYMENT_INTENT_PROCESSING = "payment_intent.processing"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"
    CHECKOUT_SESSION_ASYNC_PAYMENT_FAILED = "checkout.session.async_payment_failed"

    CHARGE_FAILED = "charge.failed"
    CHARGE_PENDING = "charge.pending"
    CHARGE_SUCCEEDED = "charge.succeeded"
    CHARGE_UPDATED = "charge.updated"

    @property
    def family(self) -> EventFamily:
        if self.value.startswith("payment_intent."):
            return EventFamily.PAYMENT_INTENT
        if self.value.startswith("checkout.session."):
            return EventFamily.CHECKOUT_SESSION
        return EventFamily.CHARGE

    @classmethod
    def parse(cls, event_type: Optional[str]) -> Optional["PaymentEventType"]:
        """Return the member for ``event_type``, or None if it is not handled."""
        try:
            return cls(event_type)
        except ValueError:
            return None


class VerifiedEvent(BaseModel):
    """A Stripe event whose signature has been checked."""

    id: Optional[str] = Field(None, description="Stripe event ID")
    type: str = Field(..., description="Stripe event type")
    data_object: Dict[str, Any] = Field(default_factory=dict, description="event.data.object")


class ClassifiedEvent(BaseModel):
    """An event reduced to the payload shape the recorder understands."""

    event_type: PaymentEventType
    payload: Dict[str, Any]


class StorageCollection(str, Enum):
    """Firestore collections holding payment records."""
    RENTS = "rents"
    RENTAL_PAYMENTS = "rentalPayments"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NormalizedPaymentRecord(BaseModel):
    """Canonical payment record written to Firestore.

    Field names are camelCase on the wire and in storage, matching the
    documents the web application reads.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    payment_intent_id: str = Field(..., min_length=1, description="Stripe payment intent ID")
    amount: Optional[int] = Field(None, description="Amount in cents")
    status: Optional[str] = None
    method: str = PAYMENT_METHOD
    stripe_event_type: Optional[str] = None
    created_on: str = Field(default_factory=utc_now_iso)
    updated_on: str = Field(default_factory=utc_now_iso)

    # Charge details
    payment_method: Optional[str] = None
    payment_method_details: Optional[Dict[str, Any]] = None
    receipt_url: Optional[str] = None

    # Application metadata from the checkout session
    tenant_id: Optional[str] = None
    tenant_email: Optional[str] = None
    property_id: Optional[str] = None
    property_owner_id: Optional[str] = None
    rent_month: Optional[str] = None
    rent_amount: Optional[int] = None
    additional_charges: Optional[int] = None
    initial_late_fee: Optional[int] = None
    daily_late_fee: Optional[int] = None
    payment_method_type: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def has_metadata(self) -> bool:
        """Records created by a tenant checkout carry ``createdBy``."""
        return bool(self.created_by)

    @property
    def collection(self) -> StorageCollection:
        if self.has_metadata:
            return StorageCollection.RENTS
        return StorageCollection.RENTAL_PAYMENTS

    def to_document(self) -> Dict[str, Any]:
        """Fields to merge into the stored document; unset values are left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Fields only written when the document is first created
WRITE_ONCE_FIELDS = ("createdOn", "createdBy")


class RecordResult(BaseModel):
    """Outcome of recording one payment event."""

    success: bool
    document_id: Optional[str] = None
    collection: Optional[StorageCollection] = None
    error: Optional[str] = None


class CheckoutSessionRequest(BaseModel):
    """Body of a tenant rent checkout request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rent_amount: int = Field(0, ge=0, description="Rent in cents")
    additional_charges: int = Field(0, ge=0, description="Additional charges in cents")
    initial_late_fee: int = Field(0, ge=0, description="Initial late fee in cents")
    daily_late_fee: int = Field(0, ge=0, description="Accrued daily late fee in cents")
    stripe_owner_account_id: str = Field(..., description="Owner's connected account ID")
    property_id: str
    property_owner_id: str
    tenant_id: str
    rent_month: str
    tenant_email: str


class AccountLinkRequest(BaseModel):
    """Body of an account link request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account_id: str = Field(..., min_length=1, description="Connected account ID")
