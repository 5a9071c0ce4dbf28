import logging

import httpx

from checkout_relay.core.config import Settings
from checkout_relay.errors import UpstreamError
from checkout_relay.schemas.notification import NotificationJob

logger = logging.getLogger(__name__)


class EmailClient:
    """Thin client for a Resend-compatible transactional email API."""

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._http = http
        self._url = settings.email_api_url
        self._api_key = settings.email_api_key
        self._sender = settings.email_from

    async def send(self, job: NotificationJob) -> str | None:
        """Send one email and return the provider's message id."""
        if not self._api_key:
            raise UpstreamError("EMAIL_API_KEY is not configured")

        try:
            r = await self._http.post(
                self._url,
                json={
                    "from": self._sender,
                    "to": [job.recipient],
                    "subject": job.subject,
                    "html": job.html,
                },
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Email provider unreachable: {exc}") from exc

        if not r.is_success:
            raise UpstreamError(
                f"Email provider returned {r.status_code}: {r.text}",
                status_code=r.status_code,
            )

        try:
            return r.json().get("id")
        except ValueError:
            logger.warning("Email provider returned a non-JSON success body")
            return None
