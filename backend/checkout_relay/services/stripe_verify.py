import logging

import stripe
from pydantic import ValidationError

from checkout_relay.errors import SignatureVerificationError
from checkout_relay.schemas.webhook import WebhookEvent

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 300


def verify(
    raw_body: bytes,
    header: str | None,
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
) -> WebhookEvent:
    """
    Check the Stripe-Signature header against the unmodified body and parse it.

    Raise SignatureVerificationError if the event cannot be trusted.
    """
    if not header:
        raise SignatureVerificationError("Missing stripe-signature header")
    if not secret:
        logger.warning("Webhook received but no signing secret is configured")
        raise SignatureVerificationError("Webhook signing secret not configured")

    try:
        payload = raw_body.decode("utf-8")
    except UnicodeDecodeError:
        raise SignatureVerificationError("Body is not valid UTF-8")

    try:
        stripe.WebhookSignature.verify_header(payload, header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise SignatureVerificationError(e.user_message or str(e)) from e

    try:
        return WebhookEvent.model_validate_json(raw_body)
    except ValidationError as e:
        raise SignatureVerificationError(f"Invalid payload: {e.error_count()} error(s)") from e
