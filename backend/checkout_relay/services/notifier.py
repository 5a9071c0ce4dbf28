"""Purchaser confirmation and operator sale alert for completed checkouts.

Each branch returns a NotificationResult instead of raising, so a failing
provider never changes the webhook response.
"""

import asyncio
import html
import logging
import re

from checkout_relay.core.config import Settings
from checkout_relay.errors import (
    InvalidRecipientError,
    NotificationError,
    RelayError,
)
from checkout_relay.schemas.notification import (
    Branch,
    NotificationJob,
    NotificationResult,
)
from checkout_relay.schemas.webhook import SessionObject
from checkout_relay.services.email import EmailClient
from checkout_relay.services.templates import TemplateStore

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DEFAULT_PRODUCT = "your purchase"


def check_recipient(address: str | None) -> str:
    address = (address or "").strip()
    if not address:
        raise InvalidRecipientError("Recipient address is empty")
    if not EMAIL_RE.match(address):
        raise InvalidRecipientError(f"Recipient address {address!r} is malformed")
    return address


class Notifier:
    def __init__(
        self,
        settings: Settings,
        email: EmailClient,
        templates: TemplateStore,
    ) -> None:
        self._email = email
        self._templates = templates
        self._operator = settings.operator_email

    async def dispatch(self, session: SessionObject) -> list[NotificationResult]:
        """Send both notifications for one completed session, concurrently."""
        results = await asyncio.gather(
            self.notify_purchaser(session),
            self.notify_operator(session),
        )
        return list(results)

    async def notify_purchaser(self, session: SessionObject) -> NotificationResult:
        recipient = session.email
        try:
            recipient = check_recipient(recipient)
            job = await self._purchaser_job(recipient, session)
            message_id = await self._email.send(job)
        except RelayError as e:
            return self._failed(Branch.PURCHASER, recipient, e)
        except Exception as e:
            logger.exception("Unexpected error in purchaser notification")
            return self._failed(Branch.PURCHASER, recipient, NotificationError(str(e)))
        return self._sent(Branch.PURCHASER, recipient, message_id)

    async def notify_operator(self, session: SessionObject) -> NotificationResult:
        recipient = self._operator
        try:
            recipient = check_recipient(recipient)
            product = html.escape(session.product_name or "unknown product")
            customer = html.escape(session.email or "unknown")
            job = NotificationJob(
                recipient=recipient,
                subject=f"New sale: {session.product_name or 'unknown product'}",
                html=(
                    "<h1>A sale just happened</h1>"
                    f"<p>Product: <strong>{product}</strong></p>"
                    f"<p>Customer: {customer}</p>"
                ),
            )
            message_id = await self._email.send(job)
        except RelayError as e:
            return self._failed(Branch.OPERATOR, recipient, e)
        except Exception as e:
            logger.exception("Unexpected error in operator notification")
            return self._failed(Branch.OPERATOR, recipient, NotificationError(str(e)))
        return self._sent(Branch.OPERATOR, recipient, message_id)

    async def _purchaser_job(
        self, recipient: str, session: SessionObject
    ) -> NotificationJob:
        product = session.product_name or DEFAULT_PRODUCT
        subject = f"Thanks for {product}"

        if session.template_id and self._templates.enabled:
            template = await self._templates.get(session.template_id)
            return NotificationJob(
                recipient=recipient,
                subject=template.subject or subject,
                html=template.html,
            )

        if session.template_id:
            logger.warning(
                f"Session {session.id} names template {session.template_id} "
                "but no template store is configured, using default content"
            )
        return NotificationJob(
            recipient=recipient,
            subject=subject,
            html=(
                "<h1>Payment received</h1>"
                f"<p>Thank you for buying {html.escape(product)}.</p>"
            ),
        )

    @staticmethod
    def _sent(branch, recipient, message_id) -> NotificationResult:
        logger.info(f"Sent {branch.value} notification to {recipient} ({message_id})")
        return NotificationResult.sent(branch, recipient, message_id)

    @staticmethod
    def _failed(branch, recipient, error) -> NotificationResult:
        logger.error(
            f"{branch.value.capitalize()} notification to {recipient!r} failed: "
            f"{type(error).__name__}: {error}"
        )
        return NotificationResult.failed(branch, recipient or "", error)
