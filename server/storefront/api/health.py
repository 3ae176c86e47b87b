"""Health check endpoints for monitoring service and dependency status."""
from typing import Any

from fastapi import APIRouter
from sqlalchemy import text

from storefront.core.db import engine

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint.
    
    Returns:
        Simple status response for load balancers
    """
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """Health check including database connectivity.
    
    Returns:
        Detailed health status for each component
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "components": {},
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
        }

    return health_status
