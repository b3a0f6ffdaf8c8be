"""FastAPI application for the Zoom webhook relay."""
import logging
import time
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from zoom_relay.adapters.downstream import DownstreamClient
from zoom_relay.api.v1.router import api_router
from zoom_relay.config.relay import RelaySettings, get_settings
from zoom_relay.core.challenge import ChallengeResponder
from zoom_relay.core.exceptions import ConfigurationError, RelayException
from zoom_relay.core.gate import ForwardingGate
from zoom_relay.core.logging import setup_logging
from zoom_relay.core.webhook_security import TimestampValidator, ZoomSignatureValidator
from zoom_relay.services.relay_service import WebhookRelayService

logger = logging.getLogger(__name__)


def build_relay_service(
    settings: RelaySettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> WebhookRelayService:
    """Wire the pipeline from settings."""
    return WebhookRelayService(
        allowlist=settings.allowlist,
        timestamp_validator=TimestampValidator(settings.TIMESTAMP_TOLERANCE_SECONDS),
        signature_validator=ZoomSignatureValidator(settings.ZOOM_SECRET),
        challenge_responder=ChallengeResponder(settings.ZOOM_SECRET),
        gate=ForwardingGate(),
        downstream=DownstreamClient(
            settings.POST_URL,
            timeout=settings.FORWARD_TIMEOUT_SECONDS,
            follow_redirects=settings.FORWARD_FOLLOW_REDIRECTS,
            transport=transport,
        ),
    )


def create_app(
    settings: RelaySettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create the relay application.

    Args:
        settings: Explicit settings; loaded from the environment (and
                  logging configured) when omitted
        transport: Optional httpx transport for the downstream client
    """
    if settings is None:
        settings = get_settings()
        setup_logging(settings)

    relay_service = build_relay_service(settings, transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info("Starting Zoom webhook relay...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Allowed ranges: {len(relay_service.allowlist)}")
        logger.info(f"Timestamp tolerance: {settings.TIMESTAMP_TOLERANCE_SECONDS}s")

        yield

        logger.info("Shutting down Zoom webhook relay...")
        await relay_service.downstream.aclose()

    app = FastAPI(
        title="Zoom Webhook Relay",
        description="Verifies Zoom webhooks and relays them downstream",
        version=settings.VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.relay_service = relay_service

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log all requests."""
        start_time = time.time()

        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
            },
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} in {process_time:.3f}s",
            extra={
                "status_code": response.status_code,
                "process_time": process_time,
            },
        )

        return response

    @app.exception_handler(RelayException)
    async def relay_exception_handler(request: Request, exc: RelayException):
        """Write relay errors back as short plain-text reasons."""
        if exc.status_code >= 500:
            logger.error(f"Relay error: {exc.error_code} {exc.message}")
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
                "details": {}
                if settings.ENVIRONMENT == "production"
                else {"exception": str(exc)},
            },
        )

    app.include_router(api_router)

    return app


def run() -> None:
    """Console entrypoint: load settings and serve with uvicorn."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        raise SystemExit(f"Configuration error: {e.message}") from e

    setup_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
