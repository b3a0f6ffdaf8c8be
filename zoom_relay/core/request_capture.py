"""Capture of inbound requests before any parsing."""

import logging
from typing import Optional

from fastapi import Request
from pydantic import ValidationError

from zoom_relay.schemas.webhook import IncomingRequest, ZoomWebhookEvent

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-zm-signature"
TIMESTAMP_HEADER = "x-zm-request-timestamp"


def parse_event(raw_body: bytes) -> Optional[ZoomWebhookEvent]:
    """Parse the event envelope; None if the body is not a Zoom event."""
    try:
        return ZoomWebhookEvent.model_validate_json(raw_body)
    except ValidationError:
        logger.debug("Request body is not a Zoom event envelope")
        return None


def source_address(request: Request, trust_forwarded_for: bool = False) -> Optional[str]:
    """Peer address, or the left-most X-Forwarded-For entry when trusted."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
    return request.client.host if request.client else None


async def capture_incoming(
    request: Request, trust_forwarded_for: bool = False
) -> IncomingRequest:
    """Read the raw body once and build an immutable IncomingRequest."""
    raw_body = await request.body()
    return IncomingRequest(
        source_address=source_address(request, trust_forwarded_for),
        signature=request.headers.get(SIGNATURE_HEADER),
        timestamp=request.headers.get(TIMESTAMP_HEADER),
        raw_body=raw_body,
        event=parse_event(raw_body),
    )
