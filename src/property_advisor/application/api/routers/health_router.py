"""
Health check API router.

Endpoints:
- GET /health/           - Behavior store and catalog reachability
- GET /health/liveness   - Process liveness check
"""

import time
import logging
from typing import Dict, Any
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository_factory(request: Request):
    """Dependency to get repository factory from app state"""
    return request.app.state.repository_factory


@router.get("/")
async def health_check(
    repository_factory = Depends(get_repository_factory)
):
    """
    Basic health check endpoint.

    Returns 200 while the behavior store is reachable. The catalog is
    reported but does not fail the check.
    """
    start_time = time.time()
    try:
        health_status = await repository_factory.health_check()
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        health_status = {"overall": False, "error": str(e)}

    body: Dict[str, Any] = {
        "status": "healthy" if health_status.get("overall") else "unhealthy",
        "components": health_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "response_time_ms": (time.time() - start_time) * 1000
    }
    return JSONResponse(status_code=200 if health_status.get("overall") else 503, content=body)


@router.get("/liveness")
async def liveness_check() -> Dict[str, Any]:
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}
