"""Adapter for the downstream endpoint receiving relayed events."""

import logging
from typing import Any

import httpx

from zoom_relay.core.challenge import CHALLENGE_EVENT

logger = logging.getLogger(__name__)

SIGNATURE_PARAM = "signature"
TIMESTAMP_PARAM = "timestamp"


class DownstreamError(Exception):
    """Base exception for downstream errors."""

    pass


class DownstreamConnectionError(DownstreamError):
    """Transport failure talking to the downstream endpoint."""

    pass


class DownstreamClient:
    """HTTP client for the configured downstream URL."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize downstream client.

        Args:
            url: Downstream endpoint (e.g. an Apps Script /exec URL)
            timeout: Request timeout in seconds
            follow_redirects: Follow 3xx answers to the final resource
            transport: Optional transport override
        """
        self.url = url
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            transport=transport,
        )

    async def __aenter__(self) -> "DownstreamClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        return self._client

    async def forward(
        self,
        raw_body: bytes,
        signature: str | None,
        timestamp: str | None,
    ) -> httpx.Response:
        """
        POST the raw event body downstream.

        The original signature and timestamp travel as query parameters so
        the downstream can audit or re-verify them.

        Raises:
            DownstreamConnectionError: on timeout or transport failure
        """
        params = {
            SIGNATURE_PARAM: signature or "",
            TIMESTAMP_PARAM: timestamp or "",
        }
        try:
            return await self.client.post(
                self.url,
                content=raw_body,
                params=params,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            logger.error(f"Forward to downstream failed: {e!r}")
            raise DownstreamConnectionError(
                f"Failed to reach downstream: {type(e).__name__}"
            ) from e

    async def request_challenge(self, plain_token: str) -> str | None:
        """
        Ask the downstream to hash a challenge token.

        Returns:
            The downstream's ``encryptedToken``, or None if the answer is
            unusable

        Raises:
            DownstreamConnectionError: on timeout or transport failure
        """
        body = {"event": CHALLENGE_EVENT, "payload": {"plainToken": plain_token}}
        try:
            response = await self.client.post(self.url, json=body)
        except httpx.RequestError as e:
            logger.error(f"Challenge request to downstream failed: {e!r}")
            raise DownstreamConnectionError(
                f"Failed to reach downstream: {type(e).__name__}"
            ) from e

        if not response.is_success:
            logger.warning(f"Challenge request returned HTTP {response.status_code}")
            return None
        try:
            data = response.json()
        except ValueError:
            logger.warning("Challenge request returned a non-JSON body")
            return None

        token = data.get("encryptedToken") if isinstance(data, dict) else None
        return token if isinstance(token, str) else None
