"""
Health check endpoints for the payments service.
"""

import psutil
from typing import Dict, Any
from fastapi import APIRouter
from datetime import datetime, timezone

from core.config import settings
from monitoring.metrics import get_metrics_collector
from monitoring.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

SERVICE_VERSION = "1.0.0"

# Settings that must be present before webhooks can be processed
REQUIRED_SETTINGS = [
    "stripe_secret_key",
    "stripe_webhook_secret",
    "site_url",
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status, system usage and processing metrics
    """
    try:
        memory = psutil.virtual_memory()
        cpu_percent = psutil.cpu_percent(interval=None)

        health_data = {
            "status": "healthy",
            "timestamp": _now(),
            "version": SERVICE_VERSION,
            "environment": settings.environment,
            "system": {
                "cpu_percent": cpu_percent,
                "memory_percent": memory.percent,
            },
            "metrics": get_metrics_collector().get_metrics(),
        }

        if cpu_percent > 90 or memory.percent > 90:
            health_data["status"] = "degraded"

        return health_data

    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": _now(),
        }


@router.get("/ready")
async def readiness_check() -> Dict[str, Any]:
    """
    Readiness check endpoint.

    Returns:
        Readiness status
    """
    missing = [name.upper() for name in REQUIRED_SETTINGS if not getattr(settings, name, None)]

    if missing:
        return {
            "ready": False,
            "message": f"Missing required environment variables: {', '.join(missing)}",
            "timestamp": _now(),
        }

    return {
        "ready": True,
        "message": "Service is ready to accept requests",
        "timestamp": _now(),
    }


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness check endpoint."""
    return {
        "alive": "true",
        "timestamp": _now(),
    }
