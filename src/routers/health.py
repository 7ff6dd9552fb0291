"""Health check endpoint, public."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.dependencies import AppSettings
from src.insights.config_loader import get_insights_config

router = APIRouter(tags=["system"])
logger = logging.getLogger("heartline.health")


@router.get("/health")
def health_check(settings: AppSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Also reports whether the insights config loaded.
    """
    config_version = None
    try:
        config_version = get_insights_config().version
    except (OSError, ValueError) as exc:
        logger.warning("Health check config probe failed: %s", exc)

    return {
        "status": "healthy" if config_version else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "insights_config": config_version or "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
