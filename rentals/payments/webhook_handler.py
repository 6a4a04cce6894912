"""
Webhook handler for Stripe payment events.
"""

import json
from typing import Optional, Dict, Any
from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.responses import PlainTextResponse
import stripe

from core.config import settings
from payments.dependencies import get_payment_recorder
from payments.exceptions import WebhookSignatureError
from payments.models import VerifiedEvent
from payments.recorder import PaymentRecorder
from monitoring.logger import get_logger
from monitoring.metrics import Metrics, get_metrics_collector

logger = get_logger(__name__)

router = APIRouter(tags=["stripe"])


def verify_event(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
) -> VerifiedEvent:
    """
    Verify a Stripe webhook body and decode it.

    Verification is delegated to ``stripe.Webhook.construct_event``.

    Args:
        raw_body: Request body exactly as received
        signature_header: Value of the ``Stripe-Signature`` header
        secret: Webhook signing secret (``whsec_...``)
        tolerance: Maximum age of the signature timestamp in seconds

    Returns:
        The verified event

    Raises:
        WebhookSignatureError: If the event cannot be authenticated or decoded
    """
    if not secret:
        raise WebhookSignatureError("webhook signing secret is not configured")
    if not signature_header:
        raise WebhookSignatureError("missing Stripe-Signature header")

    try:
        stripe.Webhook.construct_event(raw_body, signature_header, secret, tolerance=tolerance)
    except stripe.SignatureVerificationError as e:
        raise WebhookSignatureError(str(e)) from e
    except ValueError as e:
        raise WebhookSignatureError(f"Invalid payload: {e}") from e

    # The body is authentic; decode it as plain JSON
    try:
        payload: Dict[str, Any] = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise WebhookSignatureError(f"Invalid payload: {e}") from e

    if not isinstance(payload, dict) or not payload.get("type"):
        raise WebhookSignatureError("Invalid payload: missing event type")

    return VerifiedEvent(
        id=payload.get("id"),
        type=payload["type"],
        data_object=(payload.get("data") or {}).get("object") or {},
    )


@router.post("/webhook")
async def handle_payment_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    recorder: PaymentRecorder = Depends(get_payment_recorder),
):
    """
    Handle Stripe payment webhook events.

    The event is acknowledged with 200 as soon as it is verified; recording
    happens in a background task after the response is sent, so write
    failures are logged rather than returned to Stripe.
    """
    raw_body = await request.body()
    metrics = get_metrics_collector()

    try:
        event = verify_event(
            raw_body,
            stripe_signature,
            settings.stripe_webhook_secret,
            tolerance=settings.stripe_signature_tolerance,
        )
    except WebhookSignatureError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        metrics.increment_counter(Metrics.WEBHOOKS_REJECTED)
        return PlainTextResponse(f"Webhook Error: {e}", status_code=400)

    metrics.increment_counter(Metrics.WEBHOOKS_RECEIVED)
    logger.info(
        "Stripe webhook received",
        extra={"event_type": event.type, "event_id": event.id},
    )

    background_tasks.add_task(recorder.handle_event, event.type, event.data_object)

    return {"received": True}
