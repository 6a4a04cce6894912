"""
Monitoring and observability module for the payments service.
"""

from monitoring.logger import get_logger, setup_logging
from monitoring.metrics import Metrics, MetricsCollector, get_metrics_collector
from monitoring.alerts import AlertManager, get_alert_manager

__all__ = [
    "get_logger",
    "setup_logging",
    "Metrics",
    "MetricsCollector",
    "get_metrics_collector",
    "AlertManager",
    "get_alert_manager",
]
