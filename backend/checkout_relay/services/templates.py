import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from checkout_relay.core.config import Settings
from checkout_relay.errors import TemplateNotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class EmailTemplate(BaseModel):
    subject: str | None = None
    html: str


class TemplateStore:
    """
    Read-only view of an Edge Config style key/value store.

    A stored item is either an HTML string or an object with ``html`` and an
    optional ``subject``.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient) -> None:
        self._http = http
        self._base_url = (settings.template_store_url or "").rstrip("/")
        self._token = settings.template_store_token

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    async def get(self, key: str) -> EmailTemplate:
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            url = f"{self._base_url}/item/{quote(key, safe='')}"
            r = await self._http.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Template store unreachable: {exc}") from exc

        if r.status_code == 404:
            raise TemplateNotFoundError(f"Template {key!r} not found")
        if not r.is_success:
            raise UpstreamError(
                f"Template store returned {r.status_code}", status_code=r.status_code
            )

        try:
            value: Any = r.json()
        except ValueError as exc:
            raise UpstreamError(f"Template {key!r} is not valid JSON") from exc

        if isinstance(value, str):
            return EmailTemplate(html=value)
        if isinstance(value, dict) and isinstance(value.get("html"), str):
            return EmailTemplate.model_validate(value)
        raise TemplateNotFoundError(f"Template {key!r} has no html content")
