"""Webhook security and validation utilities."""

import hashlib
import hmac
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"

# Returned for a missing or unparseable timestamp; always older than any window.
INVALID_TIMESTAMP = -1


def parse_timestamp(value: Optional[str]) -> int:
    """Parse an ``x-zm-request-timestamp`` value into epoch seconds."""
    if value is None:
        return INVALID_TIMESTAMP
    value = value.strip()
    # Plain ASCII digits only; int() would also take signs and underscores
    if not (value.isascii() and value.isdigit()):
        return INVALID_TIMESTAMP
    return int(value)


class TimestampValidator:
    """Checks request timestamps against a replay window."""

    def __init__(
        self,
        tolerance_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize timestamp validator.

        Args:
            tolerance_seconds: Maximum accepted age of a request
            clock: Source of the current time in epoch seconds
        """
        self.tolerance_seconds = tolerance_seconds
        self.clock = clock

    def is_fresh(self, value: Optional[str]) -> bool:
        """
        Accept iff ``now - tolerance <= declared <= now``.

        There is no allowance for timestamps in the future.
        """
        declared = parse_timestamp(value)
        if declared == INVALID_TIMESTAMP:
            return False
        now = int(self.clock())
        return now - self.tolerance_seconds <= declared <= now


class ZoomSignatureValidator:
    """Validator for Zoom ``x-zm-signature`` headers."""

    def __init__(self, webhook_secret: str):
        self.webhook_secret = webhook_secret

    def compute_signature(self, timestamp: str, raw_body: bytes) -> str:
        """
        Compute the signature Zoom sends for a body.

        The message is ``v0:{timestamp}:{raw body}`` over the exact bytes
        received; re-encoding the JSON would change the digest.
        """
        message = b":".join(
            [SIGNATURE_VERSION.encode(), timestamp.encode(), raw_body]
        )
        digest = hmac.new(
            self.webhook_secret.encode(),
            message,
            hashlib.sha256,
        ).hexdigest()
        return f"{SIGNATURE_VERSION}={digest}"

    def validate_signature(
        self,
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str],
    ) -> bool:
        """
        Validate a webhook signature.

        Args:
            raw_body: Raw request body bytes
            signature: ``x-zm-signature`` header value
            timestamp: ``x-zm-request-timestamp`` header value

        Returns:
            True if the signature matches, False otherwise
        """
        if not signature:
            logger.warning("Missing webhook signature header")
            return False
        if timestamp is None:
            logger.warning("Missing webhook timestamp header")
            return False

        expected = self.compute_signature(timestamp, raw_body)

        # Use constant-time comparison to prevent timing attacks
        is_valid = hmac.compare_digest(expected.encode(), signature.encode())

        if not is_valid:
            logger.warning("Invalid webhook signature")

        return is_valid
