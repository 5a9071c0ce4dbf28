import json
import logging
import os
import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import stripe
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "STRIPE_SECRET_KEY": "sk_test_env",
        "STRIPE_WEBHOOK_SECRET": "whsec_env",
    }
)

from checkout_relay.core.config import Settings
from checkout_relay.dependencies import get_notifier
from checkout_relay.main import create_app

logger = logging.getLogger(__name__)

WEBHOOK_SECRET = "whsec_test"
EMAIL_API_URL = "https://email.test/emails"
TEMPLATE_STORE_URL = "https://config.test/ecfg_123"
OPERATOR_EMAIL = "ops@shop.test"


def stripe_header(body: bytes, secret: str = WEBHOOK_SECRET, ts: int | None = None) -> str:
    ts = int(time.time()) if ts is None else ts
    sig = stripe.WebhookSignature._compute_signature(f"{ts}.{body.decode()}", secret)
    return f"t={ts},v1={sig}"


def make_event(
    event_type: str = "checkout.session.completed",
    email: str = "buyer@example.com",
    metadata: dict | None = None,
    event_id: str = "evt_123",
) -> bytes:
    payload = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": "cs_test_1",
                "object": "checkout.session",
                "customer_email": email,
                "metadata": metadata if metadata is not None else {"productName": "Ebook"},
            }
        },
    }
    return json.dumps(payload).encode()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
        email_api_key="re_test",
        email_api_url=EMAIL_API_URL,
        email_from="Shop <shop@shop.test>",
        operator_email=OPERATOR_EMAIL,
        template_store_url=TEMPLATE_STORE_URL,
        template_store_token="ecfg_token",
        _env_file=None,
    )


@pytest.fixture
def stripe_client():
    client = MagicMock()
    client.checkout.sessions.create_async = AsyncMock(
        return_value=SimpleNamespace(
            id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1"
        )
    )
    return client


@pytest.fixture
def app(settings, stripe_client):
    return create_app(settings, stripe_client=stripe_client, http_client=httpx.AsyncClient())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class FakeNotifier:
    """Records dispatches instead of sending mail."""

    def __init__(self):
        self.sessions = []

    async def dispatch(self, session):
        self.sessions.append(session)
        return []


@pytest.fixture
def fake_notifier(app):
    notifier = FakeNotifier()
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield notifier
    app.dependency_overrides.pop(get_notifier)
