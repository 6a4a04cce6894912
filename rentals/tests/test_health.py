"""
Tests for health check endpoints.
"""


def test_liveness(client):
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json()["alive"] == "true"


def test_health_reports_metrics(client):
    response = client.get("/health")

    body = response.json()
    assert response.status_code == 200
    assert body["status"] in ("healthy", "degraded")
    assert "counters" in body["metrics"]


def test_ready_when_configured(client, monkeypatch, test_settings):
    monkeypatch.setattr(test_settings, "stripe_secret_key", "sk_test_123")

    assert client.get("/health/ready").json()["ready"] is True


def test_not_ready_without_stripe_key(client, monkeypatch, test_settings):
    monkeypatch.setattr(test_settings, "stripe_secret_key", None)

    body = client.get("/health/ready").json()

    assert body["ready"] is False
    assert "STRIPE_SECRET_KEY" in body["message"]
