"""Health check endpoint."""

import asyncio
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request):
    """Health check endpoint with credential store status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    mongo_client = getattr(request.app.state, "mongo_client", None)
    if mongo_client is None:
        health_status["services"]["mongodb"] = {
            "status": "unhealthy",
            "message": "Connection failed or not configured"
        }
    else:
        try:
            await asyncio.to_thread(mongo_client.admin.command, 'ping')
            health_status["services"]["mongodb"] = {
                "status": "healthy",
                "message": "Connection successful"
            }
        except PyMongoError as e:
            logger.warning("MongoDB health check failed", extra={"error": str(e)[:200]})
            health_status["services"]["mongodb"] = {
                "status": "unhealthy",
                "message": "Connection error"
            }

    overall_healthy = health_status["services"]["mongodb"]["status"] == "healthy"
    if not overall_healthy:
        health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
