"""
Turn classified Stripe events into stored payment records.
"""

from typing import Optional, Dict, Any

from pydantic import ValidationError

from payments.classifier import classify
from payments.exceptions import PersistenceError
from payments.models import NormalizedPaymentRecord, RecordResult, StorageCollection
from payments.update_service import PaymentUpdateService
from monitoring.alerts import get_alert_manager
from monitoring.logger import get_logger
from monitoring.metrics import Metrics, get_metrics_collector

logger = get_logger(__name__)


def _first_key(options: Optional[Dict[str, Any]]) -> Optional[str]:
    if not options:
        return None
    return next(iter(options))


def build_record(event_type: str, payload: Dict[str, Any]) -> NormalizedPaymentRecord:
    """
    Build the stored record for a classified payload.

    Checkout sessions started by the tenant app carry ``metadata``; their
    record is keyed by the session's ``payment_intent`` and attributed to the
    tenant. Everything else is a bare status update keyed by ``id``.

    Raises:
        ValueError: If the payload has no usable document key
        ValidationError: If payload values do not fit the record fields
    """
    metadata = payload.get("metadata") or {}

    if metadata:
        key = payload.get("payment_intent")
        if not key:
            raise ValueError("checkout payload has metadata but no payment_intent")

        tenant_id = metadata.get("tenantId")
        tenant_email = metadata.get("customer_email")
        author = tenant_id or tenant_email  # only the tenant can pay

        return NormalizedPaymentRecord(
            payment_intent_id=key,
            amount=payload.get("amount_total"),
            status=payload.get("status"),
            stripe_event_type=event_type,
            tenant_id=tenant_id,
            tenant_email=tenant_email,
            property_id=metadata.get("propertyId"),
            property_owner_id=metadata.get("propertyOwnerId"),
            rent_month=metadata.get("rentMonth"),
            rent_amount=metadata.get("rentAmount"),
            additional_charges=metadata.get("additionalCharges"),
            initial_late_fee=metadata.get("initialLateFee"),
            daily_late_fee=metadata.get("dailyLateFee"),
            payment_method_type=_first_key(payload.get("payment_method_options")),
            created_by=author,
            updated_by=author,
        )

    key = payload.get("id")
    if not key:
        raise ValueError("payload has no id to key the payment record")

    return NormalizedPaymentRecord(
        payment_intent_id=key,
        amount=payload.get("amount"),
        status=payload.get("status"),
        stripe_event_type=event_type,
        payment_method=payload.get("paymentMethod"),
        payment_method_details=payload.get("paymentMethodDetails"),
        receipt_url=payload.get("receiptUrl"),
    )


class PaymentRecorder:
    """Records payment events; never raises to the webhook caller."""

    def __init__(self, update_service: PaymentUpdateService):
        self.update_service = update_service

    async def handle_event(self, event_type: Optional[str], obj: Optional[Dict[str, Any]]) -> Optional[RecordResult]:
        """
        Classify a verified Stripe event and record it.

        Returns:
            The record result, or None if the event type is skipped
        """
        classified = classify(event_type, obj)
        if classified is None:
            return None
        return await self.record(classified.event_type.value, classified.payload)

    async def record(self, event_type: str, payload: Dict[str, Any]) -> RecordResult:
        """
        Merge a classified payload into storage.

        Args:
            event_type: Stripe event type
            payload: Classified payload

        Returns:
            RecordResult describing the write
        """
        if not event_type or not isinstance(payload, dict) or not payload:
            logger.error("unable to update data. missing required fields.", extra={"event_type": event_type})
            return RecordResult(success=False, error="missing required fields")

        try:
            record = build_record(event_type, payload)
        except (ValueError, ValidationError) as e:
            logger.error(
                "Unable to build payment record",
                extra={"event_type": event_type, "error": str(e)},
            )
            return RecordResult(success=False, error=str(e))

        collection: StorageCollection = record.collection
        try:
            document_id = await self.update_service.apply(record)
        except PersistenceError as e:
            logger.error(
                "updateDb error",
                extra={
                    "event_type": event_type,
                    "document_id": record.payment_intent_id,
                    "collection": collection.value,
                    "error": str(e),
                },
                exc_info=True,
            )
            get_metrics_collector().increment_counter(Metrics.PAYMENT_WRITE_FAILURES)
            get_alert_manager().alert_persistence_failure(record.payment_intent_id, collection.value, str(e))
            return RecordResult(
                success=False,
                document_id=record.payment_intent_id,
                collection=collection,
                error=str(e),
            )

        return RecordResult(success=True, document_id=document_id, collection=collection)
