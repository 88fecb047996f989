"""Shared fixtures: signed Stripe payloads, settings and a fake notifier."""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_webhook_handler
from app.config import Settings
from app.main import app
from app.services.notifications import EmailNotifier
from app.webhook_handler import WebhookHandler

WEBHOOK_SECRET = "whsec_test_secret"


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Compute a Stripe-Signature header the way Stripe does."""
    ts = timestamp or int(time.time())
    signed_payload = f"{ts}.".encode() + payload
    sig = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def make_event(event_type: str, obj: dict, created: int = 1760000000) -> bytes:
    return json.dumps(
        {
            "id": "evt_test_123",
            "object": "event",
            "type": event_type,
            "created": created,
            "data": {"object": obj},
        }
    ).encode()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
        mailgun_api_key="key-test",
        mailgun_domain="sixhourlayover.com",
    )


@pytest.fixture
def checkout_session() -> dict:
    return {
        "id": "cs_test_abc",
        "object": "checkout.session",
        "amount_total": 4550,
        "currency": "usd",
        "customer_email": "jane@example.com",
        "payment_status": "paid",
        "payment_intent": "pi_test_789",
        "created": 1760000000,
        "metadata": {
            "bookingId": "bk_42",
            "firstName": "Jane",
            "lastName": "Doe",
            "phone": "+1 555 0100",
            "tourOption": "Full City Tour",
            "preferredLanguage": "Spanish",
        },
    }


@pytest.fixture
def notifier() -> MagicMock:
    fake = MagicMock(spec=EmailNotifier)
    fake.configured = True
    fake.notify = AsyncMock(return_value=True)
    return fake


@pytest.fixture
def handler(settings, notifier) -> WebhookHandler:
    return WebhookHandler(settings, notifier)


@pytest.fixture
def client(handler):
    app.dependency_overrides[get_webhook_handler] = lambda: handler
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def post_event(client: TestClient, payload: bytes, signature: str | None = "sign"):
    headers = {"Content-Type": "application/json"}
    if signature == "sign":
        signature = sign(payload)
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post("/stripe-webhook", content=payload, headers=headers)
