import logging
import sys
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from stripe import StripeClient

from checkout_relay.core.config import Settings, load_settings
from checkout_relay.errors import ConfigurationError
from checkout_relay.exceptions import register_exception_handlers
from checkout_relay.middleware.body_size import BodySizeLimitMiddleware
from checkout_relay.routes.checkout import router as checkout_router
from checkout_relay.routes.health import router as health_router
from checkout_relay.routes.webhook import router as webhook_router
from checkout_relay.services.checkout import (
    CheckoutService,
    build_stripe_client,
    build_stripe_http_client,
)
from checkout_relay.services.email import EmailClient
from checkout_relay.services.notifier import Notifier
from checkout_relay.services.templates import TemplateStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    stripe_client: StripeClient | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the application. Raises ConfigurationError if settings are unusable."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(level=settings.log_level.upper())

    http = http_client or httpx.AsyncClient(timeout=settings.http_timeout)

    # Only a transport built here is owned by the app
    stripe_http = None
    if stripe_client is None:
        stripe_http = build_stripe_http_client(settings)
        stripe_client = build_stripe_client(settings, stripe_http)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Checkout relay started")
        yield
        await http.aclose()
        if stripe_http is not None:
            await stripe_http.close_async()
        logger.info("Checkout relay stopped")

    app = FastAPI(
        title="Checkout Relay",
        description="Stripe checkout sessions and payment notifications",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.checkout = CheckoutService(stripe_client)
    app.state.notifier = Notifier(
        settings,
        email=EmailClient(settings, http),
        templates=TemplateStore(settings, http),
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(checkout_router)
    app.include_router(webhook_router)

    return app


def run_server() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run_server()
