"""
Tenant notifications for recorded rent payments.
"""

from payments.exceptions import NotificationError
from payments.models import NormalizedPaymentRecord
from notifications.email_client import EmailClient
from notifications.templates import PAYMENT_NOTIFICATION_SUBJECT, format_payment_notification
from monitoring.alerts import get_alert_manager
from monitoring.logger import get_logger
from monitoring.metrics import Metrics, get_metrics_collector

logger = get_logger(__name__)


class Notifier:
    """Emails tenants about payments made through the rent checkout."""

    def __init__(self, email_client: EmailClient):
        self.email_client = email_client

    async def maybe_notify(self, record: NormalizedPaymentRecord) -> bool:
        """
        Send a payment notification if the record came from a tenant checkout.

        Failures are logged and swallowed; the payment write has already
        happened and must not be undone by a mail problem.

        Returns:
            True if an email was accepted by the email function
        """
        if not record.has_metadata:
            return False

        if not record.tenant_email:
            logger.warning(
                "Payment record has no tenant email, skipping notification",
                extra={"payment_intent_id": record.payment_intent_id},
            )
            return False

        text = format_payment_notification(
            rent_month=record.rent_month,
            rent_amount=record.rent_amount,
            additional_charges=record.additional_charges,
            initial_late_fee=record.initial_late_fee,
            daily_late_fee=record.daily_late_fee,
            status=record.status,
        )

        metrics = get_metrics_collector()
        try:
            await self.email_client.send_email(
                to=record.tenant_email,
                subject=PAYMENT_NOTIFICATION_SUBJECT,
                text=text,
            )
        except NotificationError as e:
            logger.error(
                "unable to send email notification from stripe webhook handler.",
                extra={"payment_intent_id": record.payment_intent_id, "error": str(e)},
            )
            metrics.increment_counter(Metrics.EMAILS_FAILED)
            get_alert_manager().alert_notification_failure(record.tenant_email, str(e))
            return False

        metrics.increment_counter(Metrics.EMAILS_SENT)
        return True
