"""
Firestore access for payment records.

The Firebase app is initialised once per process, the first time a record
is written, from either a local service-account file (development) or
credentials injected through the environment.
"""

import json
import threading
from typing import Optional, Dict, Any, Iterable

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud import firestore as gcloud_firestore

from core.config import Settings, settings
from payments.exceptions import PersistenceError
from payments.models import WRITE_ONCE_FIELDS
from monitoring.logger import get_logger

logger = get_logger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

_firestore_client = None
_init_lock = threading.Lock()


def load_credentials(config: Settings) -> credentials.Certificate:
    """
    Build Firebase credentials from settings.

    Development reads the service-account file at ``firebase_credentials_path``.
    Otherwise a full service-account JSON document is preferred, then the
    individual project id / client email / private key variables.

    Raises:
        PersistenceError: If no usable credentials are configured
    """
    if config.dev_env:
        logger.info("Running in DEV_ENV", extra={"path": config.firebase_credentials_path})
        return credentials.Certificate(config.firebase_credentials_path)

    if config.firebase_service_account:
        try:
            return credentials.Certificate(json.loads(config.firebase_service_account))
        except json.JSONDecodeError as e:
            raise PersistenceError(f"FIREBASE_SERVICE_ACCOUNT is not valid JSON: {e}") from e

    if all([
        config.firebase_admin_project_id,
        config.firebase_admin_client_email,
        config.firebase_admin_private_key,
    ]):
        # Keys pasted into env vars arrive with literal "\n" sequences
        private_key = config.firebase_admin_private_key.replace("\\\\n", "\n").replace("\\n", "\n")
        return credentials.Certificate({
            "type": "service_account",
            "project_id": config.firebase_admin_project_id,
            "client_email": config.firebase_admin_client_email,
            "private_key": private_key,
            "token_uri": GOOGLE_TOKEN_URI,
        })

    raise PersistenceError(
        "Firestore credentials not configured. Set FIREBASE_SERVICE_ACCOUNT or "
        "FIREBASE_ADMIN_PROJECT_ID, FIREBASE_ADMIN_CLIENT_EMAIL and "
        "FIREBASE_ADMIN_PRIVATE_KEY, or DEV_ENV with a local account file."
    )


def get_firestore_client(config: Optional[Settings] = None):
    """
    Get or create the process-wide Firestore client.

    Returns:
        google.cloud.firestore.Client
    """
    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client

    with _init_lock:
        if _firestore_client is None:
            try:
                app = firebase_admin.get_app()
            except ValueError:
                app = firebase_admin.initialize_app(load_credentials(config or settings))
                logger.info("Firebase app initialized")
            _firestore_client = firestore.client(app)

    return _firestore_client


def reset_firestore_client() -> None:
    """Forget the cached client (the Firebase app itself stays registered)."""
    global _firestore_client
    with _init_lock:
        _firestore_client = None


@gcloud_firestore.transactional
def _merge_in_transaction(transaction, doc_ref, data: Dict[str, Any], write_once: Iterable[str]) -> bool:
    snapshot = doc_ref.get(transaction=transaction)
    if snapshot.exists:
        data = {key: value for key, value in data.items() if key not in write_once}
    transaction.set(doc_ref, data, merge=True)
    return not snapshot.exists


class FirestorePaymentStore:
    """Merge-writes payment documents into Firestore collections."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_firestore_client()
        return self._client

    def merge(
        self,
        collection: str,
        document_id: str,
        data: Dict[str, Any],
        write_once: Iterable[str] = WRITE_ONCE_FIELDS,
    ) -> str:
        """
        Create or update a document, keeping fields not present in ``data``.

        Fields named in ``write_once`` are only written when the document
        does not exist yet.

        Args:
            collection: Collection name
            document_id: Document key
            data: Fields to merge

        Returns:
            The document ID written

        Raises:
            PersistenceError: If the write fails
        """
        try:
            doc_ref = self.client.collection(collection).document(document_id)
            created = _merge_in_transaction(
                self.client.transaction(), doc_ref, data, tuple(write_once)
            )
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write {collection}/{document_id}: {e}") from e

        logger.info(
            "Payment document merged",
            extra={"collection": collection, "document_id": doc_ref.id, "created": created},
        )
        return doc_ref.id

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        snapshot = self.client.collection(collection).document(document_id).get()
        return snapshot.to_dict() if snapshot.exists else None


_payment_store: Optional[FirestorePaymentStore] = None


def get_payment_store() -> FirestorePaymentStore:
    """Get or create the payment store (credentials load on first write)."""
    global _payment_store
    if _payment_store is None:
        _payment_store = FirestorePaymentStore()
    return _payment_store
