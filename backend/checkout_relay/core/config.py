from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from checkout_relay.errors import ConfigurationError


class Settings(BaseSettings):
    stripe_secret_key: str
    stripe_webhook_secret: str = ""
    webhook_tolerance: int = 300

    email_api_key: str = ""
    email_api_url: str = "https://api.resend.com/emails"
    email_from: str = "Payments <onboarding@resend.dev>"
    operator_email: str = ""

    # Edge Config style key/value store holding notification templates
    template_store_url: str | None = None
    template_store_token: str | None = None

    allowed_origins: str = "*"
    max_body_bytes: int = 1024 * 1024
    http_timeout: float = 10.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def template_store_enabled(self) -> bool:
        return bool(self.template_store_url)


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, raising ConfigurationError if unusable."""
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        raise ConfigurationError(f"Invalid or missing settings: {missing}") from e

    if not settings.stripe_secret_key.strip():
        raise ConfigurationError("STRIPE_SECRET_KEY is not set")
    return settings
