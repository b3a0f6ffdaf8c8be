"""Tests for the URL validation responder."""
import pytest

from zoom_relay.core.challenge import CHALLENGE_EVENT, ChallengeResponder
from zoom_relay.core.exceptions import InvalidEventError
from zoom_relay.schemas.webhook import ZoomWebhookEvent

from helpers import challenge_hash


@pytest.fixture
def responder():
    return ChallengeResponder("s3cr3t")


def test_challenge_event_name():
    assert CHALLENGE_EVENT == "endpoint.url_validation"


def test_is_challenge(responder):
    assert responder.is_challenge(ZoomWebhookEvent(event="endpoint.url_validation"))
    assert not responder.is_challenge(ZoomWebhookEvent(event="meeting.started"))
    assert not responder.is_challenge(None)


def test_hash_token_known_value(responder):
    assert responder.hash_token("abc123") == challenge_hash("abc123", "s3cr3t")


def test_respond(responder):
    event = ZoomWebhookEvent(
        event="endpoint.url_validation",
        payload={"plainToken": "abc123"},
    )

    response = responder.respond(event)

    assert response.plainToken == "abc123"
    assert response.encryptedToken == challenge_hash("abc123", "s3cr3t")
    assert response.model_dump() == {
        "plainToken": "abc123",
        "encryptedToken": challenge_hash("abc123", "s3cr3t"),
    }


@pytest.mark.parametrize("payload", [{}, {"plainToken": ""}, {"plainToken": 42}])
def test_respond_without_token(responder, payload):
    event = ZoomWebhookEvent(event="endpoint.url_validation", payload=payload)

    with pytest.raises(InvalidEventError) as exc_info:
        responder.respond(event)

    assert exc_info.value.status_code == 400
