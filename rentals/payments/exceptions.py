"""Exceptions raised while handling payment events."""

from typing import Optional


class PaymentsError(Exception):
    """Base class for payment processing errors."""


class WebhookSignatureError(PaymentsError):
    """Inbound webhook failed Stripe signature verification."""


class PersistenceError(PaymentsError):
    """A payment record could not be written to the store."""


class NotificationError(PaymentsError):
    """The email collaborator did not accept a notification."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthorizationError(PaymentsError):
    """An internal endpoint was called without the shared admin key."""
