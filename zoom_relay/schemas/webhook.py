from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ZoomEventType(str, Enum):
    URL_VALIDATION = "endpoint.url_validation"


class ZoomWebhookEvent(BaseModel):
    """Fields of a Zoom event body the relay looks at."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    event: str
    payload: dict[str, Any] = Field(default_factory=dict)


class IncomingRequest(BaseModel):
    """A request as received; ``raw_body`` is the exact wire payload."""

    model_config = ConfigDict(frozen=True)

    source_address: str | None
    signature: str | None = None
    timestamp: str | None = None
    raw_body: bytes
    event: ZoomWebhookEvent | None = None

    @property
    def event_type(self) -> str | None:
        return self.event.event if self.event else None


class ChallengeResponse(BaseModel):
    plainToken: str
    encryptedToken: str


class RelayOutcome(BaseModel):
    """Status, content type and body written back to the caller."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    content_type: str
    body: bytes
