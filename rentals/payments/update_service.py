"""
Apply a normalized payment record: merge it into storage, then notify.
"""

import time

from fastapi.concurrency import run_in_threadpool

from payments.models import NormalizedPaymentRecord
from notifications.notifier import Notifier
from monitoring.logger import get_logger
from monitoring.metrics import Metrics, get_metrics_collector

logger = get_logger(__name__)


class PaymentUpdateService:
    """Writes payment records at their idempotency key.

    Used in-process by the webhook recorder and by the internal
    ``/update-payment`` endpoint.
    """

    def __init__(self, store, notifier: Notifier):
        self.store = store
        self.notifier = notifier

    async def apply(self, record: NormalizedPaymentRecord) -> str:
        """
        Merge the record into its collection and notify the tenant if needed.

        Args:
            record: Normalized payment record

        Returns:
            The document ID written

        Raises:
            PersistenceError: If the store write fails (nothing is sent)
        """
        collection = record.collection
        metrics = get_metrics_collector()
        started = time.monotonic()

        document_id = await run_in_threadpool(
            self.store.merge,
            collection.value,
            record.payment_intent_id,
            record.to_document(),
        )

        metrics.time_since(Metrics.PAYMENT_WRITE, started, {"collection": collection.value})
        metrics.increment_counter(Metrics.PAYMENTS_RECORDED, labels={"collection": collection.value})
        logger.info(
            "Payment record updated",
            extra={
                "collection": collection.value,
                "document_id": document_id,
                "stripe_event_type": record.stripe_event_type,
                "status": record.status,
            },
        )

        await self.notifier.maybe_notify(record)
        return document_id
