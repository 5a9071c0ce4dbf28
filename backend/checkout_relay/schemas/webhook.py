import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class CustomerDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None


class SessionObject(BaseModel):
    """The checkout session embedded in a webhook event."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    customer_email: str | None = None
    customer_details: CustomerDetails | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    # Stripe sends null for unset metadata
    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_or_empty(cls, v: Any) -> Any:
        return v or {}

    @field_validator("customer_details", mode="before")
    @classmethod
    def _details_or_none(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @property
    def email(self) -> str:
        if self.customer_email:
            return self.customer_email
        if self.customer_details and self.customer_details.email:
            return self.customer_details.email
        return ""

    @property
    def product_name(self) -> str | None:
        return self.metadata.get("productName")

    @property
    def template_id(self) -> str | None:
        return self.metadata.get("notificationTemplateId")


class EventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object: dict[str, Any] = Field(default_factory=dict)

    @field_validator("object", mode="before")
    @classmethod
    def _object_or_empty(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Provider event ID")
    type: str = Field(..., description="Event type / name")
    data: EventData = Field(default_factory=EventData)

    @field_validator("data", mode="before")
    @classmethod
    def _data_or_empty(cls, v: Any) -> Any:
        return v if v is not None else {}

    @property
    def is_checkout_completed(self) -> bool:
        return self.type == CHECKOUT_COMPLETED

    def session(self) -> SessionObject:
        """The embedded session, or an empty one if it does not parse."""
        try:
            return SessionObject.model_validate(self.data.object)
        except ValidationError as e:
            logger.warning(
                f"Event {self.id}: unreadable session object "
                f"({e.error_count()} error(s)), continuing with an empty session"
            )
            return SessionObject()
