"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the schema document is compiled (readiness)
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "jsonapi-schema",
        "version": "0.1.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: the document must be compiled."""
    if getattr(request.app.state, "schema_document", None) is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "schema_not_compiled",
            },
        )
    return {
        "status": "ready",
        "checks": {"schema": "compiled"},
        "content_hash": request.app.state.content_hash,
    }
