"""Webhook endpoint receiving Zoom events."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from zoom_relay.config.relay import RelaySettings
from zoom_relay.core.request_capture import capture_incoming
from zoom_relay.services.relay_service import WebhookRelayService

router = APIRouter(tags=["webhooks"])


def get_relay_service(request: Request) -> WebhookRelayService:
    """Get the relay service built at startup."""
    return request.app.state.relay_service


def get_relay_settings(request: Request) -> RelaySettings:
    return request.app.state.settings


@router.post("/zoom-webhook-proxy")
async def zoom_webhook_proxy(
    request: Request,
    background_tasks: BackgroundTasks,
    relay_service: WebhookRelayService = Depends(get_relay_service),  # noqa: B008
    settings: RelaySettings = Depends(get_relay_settings),  # noqa: B008
) -> Response:
    """
    Receive a Zoom webhook event.

    URL validation events are answered here; every other event is
    verified and relayed to POST_URL, and the downstream answer is
    returned as-is.
    """
    incoming = await capture_incoming(request, settings.TRUST_FORWARDED_FOR)
    outcome = await relay_service.handle(incoming, background_tasks)
    # Explicit header: media_type would get a charset appended for text/*
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        headers={"content-type": outcome.content_type},
    )
