"""Admission pipeline and relay for Zoom webhook events."""

import hmac
import logging
from typing import NoReturn

from fastapi import BackgroundTasks

from zoom_relay.adapters.downstream import DownstreamClient, DownstreamError
from zoom_relay.core.allowlist import AddressAllowlist
from zoom_relay.core.challenge import ChallengeResponder
from zoom_relay.core.exceptions import AdmissionDenied, UpstreamFailure
from zoom_relay.core.gate import ForwardingGate
from zoom_relay.core.webhook_security import TimestampValidator, ZoomSignatureValidator
from zoom_relay.schemas.webhook import IncomingRequest, RelayOutcome

logger = logging.getLogger(__name__)

IP_NOT_ALLOWED = "IP not allowed"
INVALID_TIMESTAMP = "invalid timestamp"
INVALID_SIGNATURE = "invalid signature"
BLOCKED = "blocked due to suspicious destination"

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


class WebhookRelayService:
    """Admits Zoom webhook requests and relays them downstream."""

    def __init__(
        self,
        allowlist: AddressAllowlist,
        timestamp_validator: TimestampValidator,
        signature_validator: ZoomSignatureValidator,
        challenge_responder: ChallengeResponder,
        gate: ForwardingGate,
        downstream: DownstreamClient,
    ):
        self.allowlist = allowlist
        self.timestamp_validator = timestamp_validator
        self.signature_validator = signature_validator
        self.challenge_responder = challenge_responder
        self.gate = gate
        self.downstream = downstream

    async def handle(
        self,
        incoming: IncomingRequest,
        background_tasks: BackgroundTasks,
    ) -> RelayOutcome:
        """
        Run one request through the pipeline.

        Checks run in order and stop at the first failure: source address,
        timestamp, then either the challenge answer or signature, gate and
        forward. For a challenge the downstream token check is queued on
        ``background_tasks`` and runs after the response is sent.

        Raises:
            AdmissionDenied: a check failed (403)
            InvalidEventError: challenge without a plain token (400)
            UpstreamFailure: downstream failed or answered non-2xx (502)
        """
        if not self.allowlist.is_allowed(incoming.source_address):
            self._deny(incoming, IP_NOT_ALLOWED)

        if not self.timestamp_validator.is_fresh(incoming.timestamp):
            self._deny(incoming, INVALID_TIMESTAMP)

        if self.challenge_responder.is_challenge(incoming.event):
            challenge = self.challenge_responder.respond(incoming.event)
            logger.info(f"Answered URL validation from {incoming.source_address}")
            background_tasks.add_task(
                self.verify_downstream_challenge, challenge.plainToken
            )
            return RelayOutcome(
                status_code=200,
                content_type="application/json",
                body=challenge.model_dump_json().encode(),
            )

        if not self.signature_validator.validate_signature(
            incoming.raw_body, incoming.signature, incoming.timestamp
        ):
            self._deny(incoming, INVALID_SIGNATURE)

        if not self.gate.is_open:
            self._deny(incoming, BLOCKED)

        return await self.forward(incoming)

    async def forward(self, incoming: IncomingRequest) -> RelayOutcome:
        """Forward the raw body once and map the downstream answer."""
        logger.info(
            f"Forwarding event {incoming.event_type or '<unknown>'} "
            f"from {incoming.source_address}"
        )
        try:
            response = await self.downstream.forward(
                incoming.raw_body, incoming.signature, incoming.timestamp
            )
        except DownstreamError as e:
            logger.error(
                f"Downstream unreachable for event {incoming.event_type}: {e}"
            )
            raise UpstreamFailure(details={"error": str(e)}) from e

        if not response.is_success:
            logger.error(
                f"Downstream answered HTTP {response.status_code} "
                f"for event {incoming.event_type}"
            )
            raise UpstreamFailure(details={"status_code": response.status_code})

        return RelayOutcome(
            status_code=response.status_code,
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
            body=response.content,
        )

    async def verify_downstream_challenge(self, plain_token: str) -> bool:
        """
        Check that the downstream derives the same challenge token.

        A mismatch, an unusable answer or a transport failure closes the
        gate; a match opens it.
        """
        expected = self.challenge_responder.hash_token(plain_token)
        try:
            reported = await self.downstream.request_challenge(plain_token)
        except DownstreamError as e:
            logger.error(f"Challenge check failed, blocking forwarding: {e}")
            reported = None

        matched = reported is not None and hmac.compare_digest(
            expected.encode(), reported.encode()
        )
        if matched:
            logger.info("Downstream challenge token matches")
        else:
            logger.warning("Downstream challenge token does not match")
        self.gate.record_challenge_result(matched)
        return matched

    @staticmethod
    def _deny(incoming: IncomingRequest, reason: str) -> NoReturn:
        logger.warning(
            f"Denied request from {incoming.source_address}: {reason}",
            extra={"client_ip": incoming.source_address, "reason": reason},
        )
        raise AdmissionDenied(reason)
