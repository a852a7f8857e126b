# src/forum_desk/main.py
"""Main entry point for the Forum Desk application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from forum_desk.api.v1 import (
    parameters_router,
    posts_router,
    replies_router,
    requests_router,
    threads_router,
)
from forum_desk.core.logging_config import configure_logging
from forum_desk.core.settings import settings
from forum_desk.db.session import create_tables

logger = logging.getLogger(__name__)

APP_DESCRIPTION = "Discussion forum with private feedback, support requests and grading parameters"

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description=APP_DESCRIPTION,
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(threads_router, prefix="/api/v1")
app.include_router(requests_router, prefix="/api/v1")
app.include_router(parameters_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings)
    create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": APP_DESCRIPTION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("forum_desk.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
