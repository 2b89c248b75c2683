# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import os
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import StorageRootDep

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class LivenessResponse(BaseModel):
    """Minimal liveness response, kept compatible with container probes."""
    ok: bool


class HealthResponse(BaseModel):
    """Health check response with a storage check."""
    status: str
    storage: str
    timestamp: str
    environment: str
    version: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/healthz", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Docker for restart decisions.
    """
    return LivenessResponse(ok=True)


@router.get("/api/health", response_model=HealthResponse)
async def health_check(root: StorageRootDep):
    """
    Health check endpoint.

    Reports whether the storage root exists and is writable.
    """
    if not root.is_dir():
        storage = "unhealthy: storage root missing"
    elif not os.access(root, os.W_OK):
        storage = "unhealthy: storage root not writable"
    else:
        storage = "healthy"

    return HealthResponse(
        status="healthy" if storage == "healthy" else "degraded",
        storage=storage,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )
