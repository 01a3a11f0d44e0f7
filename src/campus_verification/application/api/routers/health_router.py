"""
Health check API router.

Endpoints:
- GET /health/           - Component health (database, Redis, object storage)
- GET /health/readiness  - Kubernetes readiness probe
- GET /health/liveness   - Kubernetes liveness probe
"""

import time
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..dependencies import get_repository_factory

logger = logging.getLogger(__name__)

router = APIRouter()

_started_at = time.time()


@router.get("/")
async def health_check(
    request: Request,
    repository_factory = Depends(get_repository_factory)
) -> Dict[str, Any]:
    """Report the health of every backing component."""
    start_time = time.time()
    try:
        health_status = await repository_factory.health_check()
        response_time_ms = (time.time() - start_time) * 1000

        content = {
            "status": "healthy" if health_status.get("overall") else "unhealthy",
            "timestamp": time.time(),
            "response_time_ms": round(response_time_ms, 2),
            "components": {
                "database": health_status.get("database", False),
                "redis": health_status.get("redis"),
                "storage": health_status.get("storage", False),
                "repositories": health_status.get("repositories", False)
            }
        }
        if not health_status.get("overall"):
            return JSONResponse(content=content, status_code=503)
        return content

    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            content={"status": "unhealthy", "error": str(e), "timestamp": time.time()},
            status_code=503
        )


@router.get("/readiness")
async def readiness_check(
    request: Request,
    repository_factory = Depends(get_repository_factory)
) -> Dict[str, Any]:
    """
    Kubernetes readiness probe endpoint.

    Ready when the repository factory is initialized and the database and
    cache respond.
    """
    try:
        if not repository_factory.is_initialized():
            return JSONResponse(
                content={
                    "status": "not_ready",
                    "reason": "Repository factory not initialized",
                    "timestamp": time.time()
                },
                status_code=503
            )

        health_status = await repository_factory.health_check()

        if health_status.get("overall"):
            return {
                "status": "ready",
                "timestamp": time.time(),
                "components_ready": True
            }
        return JSONResponse(
            content={
                "status": "not_ready",
                "reason": "Component health check failed",
                "details": health_status,
                "timestamp": time.time()
            },
            status_code=503
        )

    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            content={"status": "not_ready", "reason": str(e), "timestamp": time.time()},
            status_code=503
        )


@router.get("/liveness")
async def liveness_check() -> Dict[str, Any]:
    """Kubernetes liveness probe endpoint."""
    return {
        "status": "alive",
        "timestamp": time.time(),
        "uptime_seconds": round(time.time() - _started_at, 2)
    }
