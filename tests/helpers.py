"""Shared test constants and helpers."""

import hashlib
import hmac
import json

import httpx

TEST_SECRET = "s3cr3t"
TEST_DOWNSTREAM_URL = "https://downstream.example.com/exec"
TEST_ALLOWED_RANGES = "3.235.82.0/23,170.114.0.0/16,2001:db8::/32"
ZOOM_IP = "170.114.10.20"
OUTSIDE_IP = "203.0.113.9"
FIXED_NOW = 1_700_000_000


def zoom_signature(timestamp: str, raw_body: bytes, secret: str = TEST_SECRET) -> str:
    message = b"v0:" + timestamp.encode() + b":" + raw_body
    return "v0=" + hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def challenge_hash(plain_token: str, secret: str = TEST_SECRET) -> str:
    return hmac.new(secret.encode(), plain_token.encode(), hashlib.sha256).hexdigest()


class FakeDownstream:
    """httpx.MockTransport handler standing in for the downstream endpoint."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content = b"OK"
        self.content_type = "text/plain"
        self.challenge_secret = TEST_SECRET
        self.fail_with: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        try:
            data = json.loads(request.content)
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("event") == "endpoint.url_validation":
            token = data["payload"]["plainToken"]
            return httpx.Response(
                200,
                json={
                    "plainToken": token,
                    "encryptedToken": challenge_hash(token, self.challenge_secret),
                },
            )

        return httpx.Response(
            self.status_code,
            content=self.content,
            headers={"content-type": self.content_type},
        )

    @property
    def forwarded(self) -> list[httpx.Request]:
        """Requests that were event forwards rather than challenge requests."""
        return [r for r in self.requests if b"endpoint.url_validation" not in r.content]
