"""Stripe Checkout Session creation."""

import logging

import stripe
from stripe import StripeClient

from checkout_relay.core.config import Settings
from checkout_relay.errors import UpstreamError
from checkout_relay.schemas.checkout import CheckoutRequest, CheckoutSession

logger = logging.getLogger(__name__)


def build_stripe_http_client(settings: Settings) -> stripe.HTTPXClient:
    return stripe.HTTPXClient(timeout=settings.http_timeout)


def build_stripe_client(
    settings: Settings, http_client: stripe.HTTPXClient
) -> StripeClient:
    return StripeClient(settings.stripe_secret_key, http_client=http_client)


class CheckoutService:
    """Creates hosted, card-only, single-payment checkout sessions.

    One attempt per call; failures are reported to the caller unchanged.
    """

    def __init__(self, client: StripeClient) -> None:
        self._client = client

    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        metadata = request.session_metadata()
        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [{"price": request.price, "quantity": 1}],
            "success_url": request.success_url,
            "cancel_url": request.cancel_url,
            "metadata": metadata,
        }

        logger.info(f"Creating checkout session for price {request.price}")
        try:
            session = await self._client.checkout.sessions.create_async(params=params)
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.error(
                f"Stripe checkout session creation failed: {message} "
                f"(code: {getattr(e, 'code', None)})"
            )
            raise UpstreamError(message, status_code=e.http_status) from e

        logger.info(f"Checkout session created: {session.id}")
        return CheckoutSession(
            id=session.id,
            url=getattr(session, "url", None),
            metadata=metadata,
        )
