"""
FastAPI dependencies wiring storage and notifications into the handlers.
"""

import secrets
from typing import Optional

from fastapi import Depends, Query

from core.config import settings
from payments.exceptions import AuthorizationError
from payments.recorder import PaymentRecorder
from payments.update_service import PaymentUpdateService
from notifications.email_client import EmailClient, get_email_client
from notifications.notifier import Notifier
from storage.firestore_client import get_payment_store
from monitoring.logger import get_logger

logger = get_logger(__name__)


def get_notifier(email_client: EmailClient = Depends(get_email_client)) -> Notifier:
    return Notifier(email_client)


def get_update_service(
    store=Depends(get_payment_store),
    notifier: Notifier = Depends(get_notifier),
) -> PaymentUpdateService:
    return PaymentUpdateService(store, notifier)


def get_payment_recorder(
    update_service: PaymentUpdateService = Depends(get_update_service),
) -> PaymentRecorder:
    return PaymentRecorder(update_service)


def require_admin_key(key: Optional[str] = Query(None)) -> None:
    """
    Check the shared admin key passed as ``?key=``.

    Development mode skips the check. An unset admin key rejects every call.
    """
    if settings.dev_env:
        return

    expected = settings.admin_key
    if not expected or not key or not secrets.compare_digest(key.encode(), expected.encode()):
        logger.error("problem fetching required token")
        raise AuthorizationError("Unauthorized")
