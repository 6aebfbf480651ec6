"""
Friendly - FastAPI application
Main entry point: JSON API, page surface, uploaded images and health checks.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings, validate_security_settings
from database import async_session_maker, engine, Base
from logging_config import configure_logging
import models  # noqa: F401
from routers import (
    health,
    auth,
    posts,
    comments,
    likes,
    users,
    pages,
)
from services.seed import seed_demo_data
from services.uploads import UploadsStaticFiles

logger = logging.getLogger("friendly")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    configure_logging()
    logger.info("Starting Friendly API...")
    validate_security_settings()
    if settings.AUTO_CREATE_DB_SCHEMA:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema verified.")
        except Exception as e:
            logger.warning("Database bootstrap skipped: %s", e)
    if settings.SEED_DEMO_DATA:
        try:
            async with async_session_maker() as session:
                inserted = await seed_demo_data(session)
            if any(inserted.values()):
                logger.info("Seeded demo data: %s", inserted)
        except Exception as exc:
            logger.warning("Demo data seeding skipped: %s", exc)
    yield
    # Shutdown
    logger.info("Shutting down API...")


app = FastAPI(
    title="Friendly API",
    description="Share image posts, comment on them and like them",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON API bodies are client errors (400), not 422."""
    if request.url.path.startswith("/api/"):
        logger.warning("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": "Invalid request data"})
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(posts.router, prefix="/api/PostAPI", tags=["Posts"])
app.include_router(comments.router, prefix="/api/CommentAPI", tags=["Comments"])
app.include_router(likes.router, prefix="/api/LikeAPI", tags=["Likes"])
app.include_router(users.router, prefix="/api/UserAPI", tags=["Users"])
app.include_router(pages.router, tags=["Pages"], include_in_schema=False)

# Uploaded post images
app.mount(settings.UPLOAD_URL_PREFIX, UploadsStaticFiles(), name="uploads")
