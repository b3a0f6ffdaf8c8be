"""Health check endpoints."""
from typing import Any

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Basic service information without external dependencies."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Readiness check.

    Not ready while forwarding is blocked by a failed challenge round-trip.
    """
    is_open = request.app.state.relay_service.gate.is_open
    response_data = {
        "status": "ready" if is_open else "not_ready",
        "service": request.app.state.settings.SERVICE_NAME,
        "forwarding": "open" if is_open else "blocked",
    }
    if not is_open:
        raise HTTPException(status_code=503, detail=response_data)
    return response_data
