"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /health/ always returns 200 if the process is up
    - Reports how many generation graphs are registered (import-time graph
      validation already passed if this responds at all)

Design Decisions:
    - No readiness probe: the service holds no external connections
"""

import logging
from fastapi import APIRouter, status

from gencore.services.graphs_registry import list_graphs

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "gencore-api",
        "version": "1.0.0",
        "graphs": len(list_graphs()),
    }
