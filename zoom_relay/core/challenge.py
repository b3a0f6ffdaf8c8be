"""Zoom endpoint URL validation (challenge-response)."""

import hashlib
import hmac
from typing import Optional

from zoom_relay.core.exceptions import InvalidEventError
from zoom_relay.schemas.webhook import (
    ChallengeResponse,
    ZoomEventType,
    ZoomWebhookEvent,
)

CHALLENGE_EVENT = ZoomEventType.URL_VALIDATION.value


class ChallengeResponder:
    """Answers ``endpoint.url_validation`` events with a hashed token."""

    def __init__(self, webhook_secret: str):
        self.webhook_secret = webhook_secret

    @staticmethod
    def is_challenge(event: Optional[ZoomWebhookEvent]) -> bool:
        return event is not None and event.event == CHALLENGE_EVENT

    @staticmethod
    def plain_token(event: ZoomWebhookEvent) -> str:
        """
        Extract ``payload.plainToken``.

        Raises:
            InvalidEventError: if the token is missing or not a string
        """
        token = event.payload.get("plainToken")
        if not isinstance(token, str) or not token:
            raise InvalidEventError()
        return token

    def hash_token(self, plain_token: str) -> str:
        """Hex HMAC-SHA256 of the plain token keyed by the secret."""
        return hmac.new(
            self.webhook_secret.encode(),
            plain_token.encode(),
            hashlib.sha256,
        ).hexdigest()

    def respond(self, event: ZoomWebhookEvent) -> ChallengeResponse:
        plain_token = self.plain_token(event)
        return ChallengeResponse(
            plainToken=plain_token,
            encryptedToken=self.hash_token(plain_token),
        )
