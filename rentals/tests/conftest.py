"""
Pytest configuration and fixtures.
"""

import hashlib
import hmac
import json
import os
import time
from copy import deepcopy
from typing import Any, Dict, List, Optional

import httpx
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Load test environment variables
load_dotenv(".env.local")

from core.config import settings  # noqa: E402
from payments.models import WRITE_ONCE_FIELDS  # noqa: E402

WEBHOOK_SECRET = "whsec_test_secret"
ADMIN_KEY = "admin-test-key"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "DEBUG"

    yield


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Known secrets and production-mode auth for every test."""
    monkeypatch.setattr(settings, "stripe_webhook_secret", WEBHOOK_SECRET)
    monkeypatch.setattr(settings, "admin_key", ADMIN_KEY)
    monkeypatch.setattr(settings, "dev_env", False)
    monkeypatch.setattr(settings, "site_url", "http://site.test")
    return settings


@pytest.fixture(autouse=True)
def reset_metrics():
    from monitoring.metrics import get_metrics_collector

    get_metrics_collector().reset()
    yield


class InMemoryPaymentStore:
    """Dict-backed store with the same merge semantics as Firestore ``set(merge=True)``."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    def merge(self, collection, document_id, data, write_once=WRITE_ONCE_FIELDS):
        self.calls.append((collection, document_id, deepcopy(data)))
        if self.fail_with is not None:
            raise self.fail_with

        documents = self.collections.setdefault(collection, {})
        existing = documents.get(document_id)
        if existing is None:
            documents[document_id] = deepcopy(data)
        else:
            existing.update({k: deepcopy(v) for k, v in data.items() if k not in write_once})
        return document_id

    def get(self, collection, document_id):
        return self.collections.get(collection, {}).get(document_id)


class RecordingEmailTransport:
    """Captures email function requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append({"url": str(request.url), "json": json.loads(request.content)})
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})


@pytest.fixture
def store():
    return InMemoryPaymentStore()


@pytest.fixture
def email_transport():
    return RecordingEmailTransport()


@pytest.fixture
def email_client(email_transport):
    from notifications.email_client import EmailClient

    return EmailClient(
        send_url="http://site.test/send-email",
        transport=httpx.MockTransport(email_transport),
    )


@pytest.fixture
def update_service(store, email_client):
    from notifications.notifier import Notifier
    from payments.update_service import PaymentUpdateService

    return PaymentUpdateService(store, Notifier(email_client))


@pytest.fixture
def recorder(update_service):
    from payments.recorder import PaymentRecorder

    return PaymentRecorder(update_service)


@pytest.fixture
def client(store, email_client):
    """API client with storage and email swapped for in-memory doubles."""
    from api.main import app
    from notifications.email_client import get_email_client
    from storage.firestore_client import get_payment_store

    app.dependency_overrides[get_payment_store] = lambda: store
    app.dependency_overrides[get_email_client] = lambda: email_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a ``Stripe-Signature`` header (``t=...,v1=...``, HMAC-SHA256)."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def make_event(event_type: str, obj: Dict[str, Any], event_id: str = "evt_test_1") -> bytes:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    }).encode("utf-8")


@pytest.fixture
def checkout_session():
    """A completed rent checkout session as Stripe sends it."""
    return {
        "id": "cs_test_a1",
        "object": "checkout.session",
        "payment_intent": "pi_rent_001",
        "status": "complete",
        "amount_total": 165000,
        "payment_method_options": {"card": {"request_three_d_secure": "automatic"}},
        "metadata": {
            "tenantId": "tenant_42",
            "propertyId": "prop_7",
            "propertyOwnerId": "owner_3",
            "rentMonth": "October",
            "rentAmount": "150000",
            "additionalCharges": "10000",
            "initialLateFee": "5000",
            "dailyLateFee": "0",
            "customer_email": "a@b.com",
        },
    }


@pytest.fixture
def charge():
    return {
        "id": "ch_test_9",
        "object": "charge",
        "payment_intent": "pi_rent_001",
        "amount": 165000,
        "status": "succeeded",
        "payment_method": "pm_card_visa",
        "payment_method_details": {"type": "card", "card": {"brand": "visa", "last4": "4242"}},
        "receipt_url": "https://pay.stripe.com/receipts/rcpt_1",
    }


@pytest.fixture
def payment_intent():
    return {
        "id": "pi_rent_001",
        "object": "payment_intent",
        "amount": 165000,
        "status": "succeeded",
    }
