from fastapi import Request

from checkout_relay.core.config import Settings
from checkout_relay.services.checkout import CheckoutService
from checkout_relay.services.notifier import Notifier


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
