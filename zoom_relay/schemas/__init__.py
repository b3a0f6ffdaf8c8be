"""Pydantic schemas for the webhook relay."""

from .webhook import (
    ChallengeResponse,
    IncomingRequest,
    RelayOutcome,
    ZoomEventType,
    ZoomWebhookEvent,
)

__all__ = [
    "ChallengeResponse",
    "IncomingRequest",
    "RelayOutcome",
    "ZoomEventType",
    "ZoomWebhookEvent",
]
