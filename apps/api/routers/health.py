"""
Health check endpoints.
"""

import os
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Reports whether the database answers and the uploads directory is writable.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "database": "unknown",
        "uploads": "unknown",
    }

    try:
        from database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["database"] = "up"
    except Exception as e:
        health_status["database"] = f"down: {str(e)}"
        health_status["status"] = "degraded"

    upload_dir = Path(settings.UPLOAD_DIR)
    if upload_dir.is_dir() and os.access(upload_dir, os.W_OK):
        health_status["uploads"] = "writable"
    else:
        health_status["uploads"] = "unavailable"
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/ready")
async def readiness_check():
    """Kubernetes-style readiness probe."""
    missing = []
    if not settings.DATABASE_URL:
        missing.append("DATABASE_URL")
    if not settings.UPLOAD_DIR:
        missing.append("UPLOAD_DIR")

    if missing:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "missing": missing},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}
