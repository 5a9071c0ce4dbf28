from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price: str = Field(..., min_length=1, description="Stripe price ID")
    success_url: str = Field(..., min_length=1)
    cancel_url: str = Field(..., min_length=1)
    product_name: str | None = Field(None, alias="productName")
    notification_template_id: str | None = Field(
        None, alias="notificationTemplateId"
    )
    metadata: dict[str, str] = Field(default_factory=dict)

    def session_metadata(self) -> dict[str, str]:
        """Metadata echoed back by Stripe on the completed-session webhook."""
        meta = dict(self.metadata)
        if self.product_name is not None:
            meta["productName"] = self.product_name
        if self.notification_template_id is not None:
            meta["notificationTemplateId"] = self.notification_template_id
        return meta


class CheckoutSession(BaseModel):
    id: str
    url: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class CheckoutResponse(BaseModel):
    id: str


class ErrorResponse(BaseModel):
    message: str
