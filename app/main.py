"""
Auth API - FastAPI Application

Main entry point for the application.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import router as api_router
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.errors import ApiError
from app.middleware.auth import AuthGateMiddleware
from app.middleware.body_limit import BodySizeLimitMiddleware


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting Auth API...")
    if not settings.JWT_SECRET:
        logger.warning("JWT_SECRET is not set; login and protected routes will return 503")
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()
    yield
    logger.info("Shutting down Auth API...")
    await close_db()


app = FastAPI(
    title="Auth API",
    description="User registration, login and bearer token protected routes.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Require a valid bearer token on protected paths
app.add_middleware(AuthGateMiddleware, protected_paths=settings.protected_paths_list)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)

# Outermost, so oversized bodies are refused before anything reads them
app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.MAX_BODY_SIZE)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


# Serve uploaded images (create the directory if it does not exist)
os.makedirs("images", exist_ok=True)
app.mount("/images", StaticFiles(directory="images"), name="images")

app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Health status and environment info.
    """
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
    }
