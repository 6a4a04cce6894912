"""
Alert configuration and notification system.
"""

from typing import Optional, Dict, Any
from enum import Enum

from core.config import settings
from monitoring.logger import get_logger

logger = get_logger(__name__)

# Sentry is an optional extra
try:
    import sentry_sdk
    SENTRY_AVAILABLE = True
except ImportError:
    SENTRY_AVAILABLE = False


class AlertLevel(str, Enum):
    """Alert severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AlertManager:
    """Manages alerts raised by payment processing."""

    def __init__(self, sentry_dsn: Optional[str] = None):
        self.sentry_enabled = False

        sentry_dsn = sentry_dsn or settings.sentry_dsn
        if SENTRY_AVAILABLE and sentry_dsn:
            sentry_sdk.init(
                dsn=sentry_dsn,
                environment=settings.environment,
                traces_sample_rate=0.1,
            )
            self.sentry_enabled = True
            logger.info("Sentry error tracking initialized")

    def send_alert(
        self,
        level: AlertLevel,
        title: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Send an alert notification.

        Args:
            level: Alert severity level
            title: Alert title
            message: Alert message
            context: Additional context data
        """
        log_method = getattr(logger, level.value, logger.info)
        log_method(
            f"ALERT: {title}",
            extra={
                "alert_level": level.value,
                "message": message,
                **(context or {}),
            }
        )

        if self.sentry_enabled and level in [AlertLevel.ERROR, AlertLevel.CRITICAL]:
            with sentry_sdk.push_scope() as scope:
                scope.set_level(level.value)
                scope.set_context("alert", {
                    "title": title,
                    "message": message,
                    **(context or {}),
                })
                sentry_sdk.capture_message(f"{title}: {message}")

    def alert_persistence_failure(self, document_id: Optional[str], collection: Optional[str], error: str) -> None:
        """Alert on a payment record that could not be written."""
        self.send_alert(
            level=AlertLevel.ERROR,
            title="Payment Record Write Failed",
            message=f"Failed to write payment {document_id} to {collection}",
            context={"document_id": document_id, "collection": collection, "error": error},
        )

    def alert_notification_failure(self, recipient: Optional[str], error: str) -> None:
        """Alert on a payment notification email that was not delivered."""
        self.send_alert(
            level=AlertLevel.WARNING,
            title="Payment Notification Failed",
            message=f"Failed to send payment notification to {recipient}",
            context={"recipient": recipient, "error": error},
        )


# Global alert manager instance
_alert_manager: Optional[AlertManager] = None


def get_alert_manager() -> AlertManager:
    """
    Get or create the global alert manager instance.

    Returns:
        Global AlertManager instance
    """
    global _alert_manager
    if _alert_manager is None:
        _alert_manager = AlertManager()
    return _alert_manager
