"""Main API router."""

from fastapi import APIRouter

from zoom_relay.api.v1.health import router as health_router
from zoom_relay.api.v1.webhooks import router as webhooks_router

api_router = APIRouter()

api_router.include_router(webhooks_router)
api_router.include_router(
    health_router,
    tags=["health"],
)
