"""
Reduce Stripe event payloads to the shapes the payment recorder stores.

Payment intents are keyed by their own ``id``; charges point at the payment
intent they belong to through ``payment_intent``, so that field becomes the
record ``id``. Checkout sessions carry the application metadata and are
passed through untouched.
"""

from typing import Optional, Dict, Any

from payments.models import ClassifiedEvent, EventFamily, PaymentEventType
from monitoring.logger import get_logger
from monitoring.metrics import Metrics, get_metrics_collector

logger = get_logger(__name__)


def _payment_intent_payload(event_type: PaymentEventType, obj: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": obj.get("id"),
        "amount": obj.get("amount"),
        "status": obj.get("status"),
    }


def _checkout_session_payload(event_type: PaymentEventType, obj: Dict[str, Any]) -> Dict[str, Any]:
    return obj


def _charge_payload(event_type: PaymentEventType, obj: Dict[str, Any]) -> Dict[str, Any]:
    payload = {
        "id": obj.get("payment_intent"),
        "amount": obj.get("amount"),
        "status": obj.get("status"),
        "paymentMethod": obj.get("payment_method"),
        "paymentMethodDetails": obj.get("payment_method_details"),
    }
    if event_type == PaymentEventType.CHARGE_SUCCEEDED:
        payload["receiptUrl"] = obj.get("receipt_url")
    return payload


_PAYLOAD_BUILDERS = {
    EventFamily.PAYMENT_INTENT: _payment_intent_payload,
    EventFamily.CHECKOUT_SESSION: _checkout_session_payload,
    EventFamily.CHARGE: _charge_payload,
}


def classify(event_type: Optional[str], obj: Optional[Dict[str, Any]]) -> Optional[ClassifiedEvent]:
    """
    Classify a Stripe event.

    Args:
        event_type: Stripe event type, e.g. ``charge.succeeded``
        obj: The event's ``data.object``

    Returns:
        The normalized event, or None when the event type is not handled
    """
    member = PaymentEventType.parse(event_type)
    if member is None:
        logger.info(f"No matching case for event type: {event_type}")
        get_metrics_collector().increment_counter(Metrics.EVENTS_SKIPPED)
        return None

    payload = _PAYLOAD_BUILDERS[member.family](member, obj or {})

    logger.info(
        "Classified stripe event",
        extra={"event_type": member.value, "family": member.family.value},
    )
    return ClassifiedEvent(event_type=member, payload=payload)
