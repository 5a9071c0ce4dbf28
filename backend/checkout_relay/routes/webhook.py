"""Stripe webhook intake.

The body is read as raw bytes: signature verification must see exactly what
Stripe signed, so this route never declares a parsed body model.
"""

import enum
import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST

from checkout_relay.core.config import Settings
from checkout_relay.dependencies import get_notifier, get_settings
from checkout_relay.errors import SignatureVerificationError
from checkout_relay.services import stripe_verify
from checkout_relay.services.notifier import Notifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


class WebhookOutcome(str, enum.Enum):
    REJECTED = "rejected"
    IGNORED = "ignored"
    ACKNOWLEDGED = "acknowledged"


@router.post("/webhook", response_class=PlainTextResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="stripe-signature"),
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
):
    raw = await request.body()

    try:
        event = stripe_verify.verify(
            raw_body=raw,
            header=stripe_signature,
            secret=settings.stripe_webhook_secret,
            tolerance=settings.webhook_tolerance,
        )
    except SignatureVerificationError as e:
        logger.warning(f"Webhook {WebhookOutcome.REJECTED.value}: {e}")
        return PlainTextResponse(
            f"Webhook Error: {e}", status_code=HTTP_400_BAD_REQUEST
        )

    if not event.is_checkout_completed:
        logger.info(f"Webhook {WebhookOutcome.IGNORED.value}: {event.type} ({event.id})")
        return PlainTextResponse("ok", status_code=HTTP_200_OK)

    session = event.session()
    results = await notifier.dispatch(session)
    sent = sum(1 for r in results if r.ok)

    logger.info(
        f"Webhook {WebhookOutcome.ACKNOWLEDGED.value}: {event.type} ({event.id}), "
        f"{sent}/{len(results)} notifications sent"
    )
    return PlainTextResponse("ok", status_code=HTTP_200_OK)
