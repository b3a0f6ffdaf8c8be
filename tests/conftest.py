import time

import httpx
import pytest

from zoom_relay.adapters.downstream import DownstreamClient
from zoom_relay.config.relay import RelaySettings
from zoom_relay.core.allowlist import AddressAllowlist
from zoom_relay.core.challenge import ChallengeResponder
from zoom_relay.core.gate import ForwardingGate
from zoom_relay.core.webhook_security import TimestampValidator, ZoomSignatureValidator
from zoom_relay.services.relay_service import WebhookRelayService

from helpers import (
    FIXED_NOW,
    TEST_ALLOWED_RANGES,
    TEST_DOWNSTREAM_URL,
    TEST_SECRET,
    FakeDownstream,
)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture
def relay_settings() -> RelaySettings:
    return RelaySettings(
        ENVIRONMENT="test",
        ZOOM_SECRET=TEST_SECRET,
        POST_URL=TEST_DOWNSTREAM_URL,
        ALLOWED_IP_RANGES=TEST_ALLOWED_RANGES,
        TIMESTAMP_TOLERANCE_SECONDS=300,
        _env_file=None,
    )


@pytest.fixture
def fake_downstream() -> FakeDownstream:
    return FakeDownstream()


@pytest.fixture
async def downstream_client(fake_downstream):
    async with DownstreamClient(
        TEST_DOWNSTREAM_URL,
        timeout=5.0,
        transport=httpx.MockTransport(fake_downstream),
    ) as client:
        yield client


@pytest.fixture
def gate() -> ForwardingGate:
    return ForwardingGate()


@pytest.fixture
def relay_service(downstream_client, gate) -> WebhookRelayService:
    """Pipeline with a fixed clock at FIXED_NOW."""
    return WebhookRelayService(
        allowlist=AddressAllowlist.from_config(TEST_ALLOWED_RANGES),
        timestamp_validator=TimestampValidator(300, clock=lambda: FIXED_NOW),
        signature_validator=ZoomSignatureValidator(TEST_SECRET),
        challenge_responder=ChallengeResponder(TEST_SECRET),
        gate=gate,
        downstream=downstream_client,
    )


@pytest.fixture
def now_timestamp() -> str:
    return str(int(time.time()))
