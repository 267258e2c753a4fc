"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the data directory is not writable or
      the card file is unreadable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
"""

import logging
import os

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from zora_agent.api.dependencies import get_container
from zora_agent.core.errors import StorageError
from zora_agent.services.container import AppContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(container: AppContainer = Depends(get_container)):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "zora-agent",
        "version": "1.0.0",
        "environment": container.settings.environment,
        "refreshJobRunning": container.refresh_job.is_running,
    }


@router.get("/ready")
async def readiness_check(container: AppContainer = Depends(get_container)):
    """Readiness probe — data directory and card file."""
    data_dir = container.settings.data_dir
    if not data_dir.is_dir() or not os.access(data_dir, os.W_OK):
        return _not_ready("data_dir_unavailable")
    try:
        card_count = len(container.cards.all())
    except StorageError:
        return _not_ready("card_store_unreadable")
    return {"status": "ready", "checks": {"storage": "healthy", "cards": card_count}}


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
