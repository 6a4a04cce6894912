"""
Internal endpoint for writing a normalized payment record.
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends, HTTPException

from payments.dependencies import get_update_service, require_admin_key
from payments.exceptions import PersistenceError
from payments.models import NormalizedPaymentRecord
from payments.update_service import PaymentUpdateService
from monitoring.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


@router.post("/update-payment", dependencies=[Depends(require_admin_key)])
async def update_payment(
    record: NormalizedPaymentRecord,
    update_service: PaymentUpdateService = Depends(get_update_service),
) -> Dict[str, Any]:
    """
    Merge a payment record into storage.

    Records with ``createdBy`` go to ``rents``, others to ``rentalPayments``,
    keyed by ``paymentIntentId``. A failed notification email does not
    change the response.
    """
    try:
        document_id = await update_service.apply(record)
    except PersistenceError as e:
        logger.error(
            "error updating the database with rent details from webhook handler.",
            extra={"payment_intent_id": record.payment_intent_id, "error": str(e)},
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Internal server error")

    return {"success": True, "id": document_id}
