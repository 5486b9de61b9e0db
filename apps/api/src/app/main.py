"""
MahaDigital School API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.redis import close_redis, init_redis

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Refusing to start in production with the default SECRET_KEY
    - Redis connection (optional; rate limits fall back to memory)
    - Database connection
    """
    # Startup
    logger.info(f"Starting MahaDigital School API in {settings.python_env} mode...")

    if settings.is_production and settings.uses_insecure_secret_key:
        logger.error("[FAIL] SECRET_KEY is not set; refusing to start in production")
        raise RuntimeError("SECRET_KEY must be set in production")

    # Initialize Redis
    try:
        await init_redis()
        logger.info("[OK] Redis connected")
    except Exception as e:
        logger.warning(f"[FAIL] Redis connection failed, using in-memory rate limits: {e}")

    # Initialize Database
    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down MahaDigital School API...")

    await close_redis()
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title="MahaDigital School API",
    description="School registration, student records and leaving certificate workflow",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to MahaDigital School API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}
