import enum

from pydantic import BaseModel, ConfigDict

from checkout_relay.errors import RelayError


class Branch(str, enum.Enum):
    PURCHASER = "purchaser"
    OPERATOR = "operator"


class NotificationJob(BaseModel):
    recipient: str
    subject: str
    html: str


class NotificationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    branch: Branch
    recipient: str
    ok: bool
    message_id: str | None = None
    error: RelayError | None = None

    @classmethod
    def sent(cls, branch: Branch, recipient: str, message_id: str | None):
        return cls(branch=branch, recipient=recipient, ok=True, message_id=message_id)

    @classmethod
    def failed(cls, branch: Branch, recipient: str, error: RelayError):
        return cls(branch=branch, recipient=recipient, ok=False, error=error)
