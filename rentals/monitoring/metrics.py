"""
In-process metrics for webhook and payment processing.
"""

import time
from typing import Dict, Any, Optional
from collections import defaultdict
from datetime import datetime, timezone
from monitoring.logger import get_logger

logger = get_logger(__name__)

HISTOGRAM_WINDOW = 1000


class MetricsCollector:
    """Collects counters and timing histograms for the current process."""

    def __init__(self):
        self.counters: Dict[str, int] = defaultdict(int)
        self.histograms: Dict[str, list] = defaultdict(list)

        logger.info("Metrics collector initialized")

    def increment_counter(self, name: str, value: int = 1, labels: Optional[Dict[str, str]] = None) -> None:
        """
        Increment a counter metric.

        Args:
            name: Metric name
            value: Amount to increment by
            labels: Optional metric labels
        """
        key = self._make_key(name, labels)
        self.counters[key] += value

    def get_counter(self, name: str, labels: Optional[Dict[str, str]] = None) -> int:
        return self.counters.get(self._make_key(name, labels), 0)

    def record_histogram(self, name: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Record a value, keeping only the most recent window."""
        key = self._make_key(name, labels)
        self.histograms[key].append(value)

        if len(self.histograms[key]) > HISTOGRAM_WINDOW:
            self.histograms[key] = self.histograms[key][-HISTOGRAM_WINDOW:]

    def time_since(self, name: str, started: float, labels: Optional[Dict[str, str]] = None) -> float:
        """
        Record the duration since a ``time.monotonic()`` reading.

        Returns:
            Duration in seconds
        """
        duration = time.monotonic() - started
        self.record_histogram(f"{name}_duration", duration, labels)
        return duration

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get all metrics as a dictionary.

        Returns:
            Dictionary of counters and histogram statistics
        """
        metrics = {
            "counters": dict(self.counters),
            "histograms": {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        for name, values in self.histograms.items():
            if values:
                metrics["histograms"][name] = {
                    "count": len(values),
                    "sum": sum(values),
                    "min": min(values),
                    "max": max(values),
                    "avg": sum(values) / len(values),
                }

        return metrics

    def reset(self) -> None:
        """Reset all metrics."""
        self.counters.clear()
        self.histograms.clear()
        logger.info("Metrics reset")

    @staticmethod
    def _make_key(name: str, labels: Optional[Dict[str, str]]) -> str:
        """Create a metric key from name and labels."""
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"


# Global metrics collector instance
_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """
    Get or create the global metrics collector instance.

    Returns:
        Global MetricsCollector instance
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


class Metrics:
    """Metric name constants."""

    # Webhook ingress
    WEBHOOKS_RECEIVED = "webhooks_received"
    WEBHOOKS_REJECTED = "webhooks_rejected"
    EVENTS_SKIPPED = "events_skipped"

    # Persistence
    PAYMENTS_RECORDED = "payments_recorded"
    PAYMENT_WRITE_FAILURES = "payment_write_failures"
    PAYMENT_WRITE = "payment_write"

    # Notifications
    EMAILS_SENT = "emails_sent"
    EMAILS_FAILED = "emails_failed"
