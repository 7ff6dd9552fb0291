"""Heartline API: FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.insights.config_loader import get_insights_config
from src.routers import health, insights

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("heartline")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Heartline API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    # Fail fast on a broken insights config rather than on the first request
    get_insights_config()
    yield
    logger.info("Heartline API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Heartline API",
        description=(
            "Derived dating insights: cycle-phase warnings, post-intimacy alerts, "
            "candidate buckets, a unified notification feed and pattern statistics."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    app.include_router(insights.router, prefix="/api/v1")

    return app


app = create_app()
