"""
Stripe payment event handling: classification, recording and checkout.
"""

from payments.classifier import classify
from payments.models import NormalizedPaymentRecord, PaymentEventType, RecordResult

__all__ = [
    "NormalizedPaymentRecord",
    "PaymentEventType",
    "RecordResult",
    "classify",
]
