"""Health Probes — liveness endpoints for local runs and container orchestration.

Invariants:
    - GET /ping always answers plain-text "pong"
    - GET /api/health always returns 200 if the process is up
"""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


@router.get("/api/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "ok", "service": "invitegate-api"}
