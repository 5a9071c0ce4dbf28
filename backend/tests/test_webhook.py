import json

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import EMAIL_API_URL, OPERATOR_EMAIL, make_event, stripe_header


def _post(client: TestClient, body: bytes, header: str | None):
    headers = {"Content-Type": "application/json"}
    if header is not None:
        headers["stripe-signature"] = header
    return client.post("/webhook", content=body, headers=headers)


def test_garbled_body_rejected(client: TestClient, fake_notifier):
    response = _post(client, b"\x00not json at all", "t=123,v1=deadbeef")

    assert response.status_code == 400
    assert response.text.startswith("Webhook Error:")
    assert fake_notifier.sessions == []


def test_missing_signature_rejected(client: TestClient, fake_notifier):
    response = _post(client, make_event(), None)

    assert response.status_code == 400
    assert response.text == "Webhook Error: Missing stripe-signature header"
    assert fake_notifier.sessions == []


def test_invalid_signature_rejected(client: TestClient, fake_notifier):
    body = make_event()
    response = _post(client, body, stripe_header(body, secret="whsec_wrong"))

    assert response.status_code == 400
    assert response.text.startswith("Webhook Error:")
    assert fake_notifier.sessions == []


def test_completed_event_dispatches(client: TestClient, fake_notifier):
    body = make_event(metadata={"productName": "Ebook", "notificationTemplateId": "t1"})
    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    assert len(fake_notifier.sessions) == 1
    session = fake_notifier.sessions[0]
    assert session.email == "buyer@example.com"
    assert session.metadata == {"productName": "Ebook", "notificationTemplateId": "t1"}


@pytest.mark.parametrize(
    "event_type",
    ["payment_intent.succeeded", "checkout.session.expired", "charge.refunded"],
)
def test_other_events_ignored(client: TestClient, fake_notifier, event_type):
    body = make_event(event_type=event_type)
    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    assert fake_notifier.sessions == []


def test_redelivery_dispatches_again(client: TestClient, fake_notifier):
    # No deduplication: each verified delivery notifies
    body = make_event()
    header = stripe_header(body)

    assert _post(client, body, header).status_code == 200
    assert _post(client, body, header).status_code == 200

    assert len(fake_notifier.sessions) == 2


def test_both_notifications_sent(client: TestClient, respx_mock):
    route = respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(200, json={"id": "email_1"})
    )
    body = make_event(metadata={"productName": "Ebook"})

    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert route.call_count == 2
    recipients = sorted(
        json.loads(call.request.content)["to"][0] for call in route.calls
    )
    assert recipients == ["buyer@example.com", OPERATOR_EMAIL]


def test_empty_customer_email_still_alerts_operator(client: TestClient, respx_mock, caplog):
    route = respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(200, json={"id": "email_1"})
    )
    body = make_event(email="")

    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    assert route.call_count == 1
    sent = json.loads(route.calls.last.request.content)
    assert sent["to"] == [OPERATOR_EMAIL]
    assert "InvalidRecipientError" in caplog.text


def test_provider_failure_does_not_fail_webhook(client: TestClient, respx_mock):
    route = respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(500, json={"message": "internal"})
    )
    body = make_event()

    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    # each branch attempted exactly once, no retry
    assert route.call_count == 2


def _signed_completed(session_object: dict) -> bytes:
    return json.dumps(
        {
            "id": "evt_null",
            "type": "checkout.session.completed",
            "data": {"object": session_object},
        }
    ).encode()


def test_null_metadata_still_acknowledged(client: TestClient, respx_mock):
    route = respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(200, json={"id": "email_1"})
    )
    body = _signed_completed(
        {
            "id": "cs_test_1",
            "customer_email": "buyer@example.com",
            "customer_details": None,
            "metadata": None,
        }
    )

    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    assert route.call_count == 2


def test_unreadable_session_alerts_operator_only(client: TestClient, respx_mock, caplog):
    route = respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(200, json={"id": "email_1"})
    )
    body = _signed_completed(
        {"customer_email": ["not", "a", "string"], "metadata": {"productName": 5}}
    )

    response = _post(client, body, stripe_header(body))

    assert response.status_code == 200
    assert response.text == "ok"
    assert route.call_count == 1
    assert json.loads(route.calls.last.request.content)["to"] == [OPERATOR_EMAIL]
    assert "InvalidRecipientError" in caplog.text


def test_failed_branch_logged_once(client: TestClient, respx_mock, caplog):
    respx_mock.post(EMAIL_API_URL).mock(
        return_value=httpx.Response(200, json={"id": "email_1"})
    )
    body = make_event(email="")

    _post(client, body, stripe_header(body))

    errors = [
        r for r in caplog.records
        if r.levelname == "ERROR" and "InvalidRecipientError" in r.getMessage()
    ]
    assert len(errors) == 1
