"""
Document storage for payment records.
"""

from storage.firestore_client import (
    FirestorePaymentStore,
    get_firestore_client,
    get_payment_store,
)

__all__ = ["FirestorePaymentStore", "get_firestore_client", "get_payment_store"]
