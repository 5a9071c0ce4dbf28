class RelayError(Exception):
    pass


class ConfigurationError(RelayError):
    """Required configuration is missing or invalid. Fatal at startup."""


class UpstreamError(RelayError):
    """A call to Stripe, the email provider or the template store failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SignatureVerificationError(RelayError):
    """The webhook body could not be authenticated."""


class NotificationError(RelayError):
    pass


class InvalidRecipientError(NotificationError):
    pass


class TemplateNotFoundError(NotificationError):
    pass
