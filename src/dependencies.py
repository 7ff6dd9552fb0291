"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import logging
import threading
from typing import Annotated

from fastapi import Depends

from src.config import Settings, get_settings
from src.insights.cache import InsightsCache
from src.insights.config_loader import get_insights_config
from src.insights.engine import InsightsEngine

logger = logging.getLogger("heartline.dependencies")

_engine: InsightsEngine | None = None
_engine_lock = threading.Lock()


def get_insights_engine() -> InsightsEngine:
    """Process-wide engine with a bounded result cache.

    Rebuilt, with an empty cache, whenever ``reload_insights_config()`` has
    swapped in a new config since the engine was built.
    """
    global _engine
    config = get_insights_config()
    with _engine_lock:
        if _engine is None or _engine.config is not config:
            if _engine is not None:
                logger.info(
                    "Insights config changed (%s → %s); rebuilding engine",
                    _engine.config.version, config.version,
                )
            settings = get_settings()
            _engine = InsightsEngine(
                config,
                cache=InsightsCache(max_entries=settings.insights_cache_size),
                feed_limit=settings.notification_feed_limit,
            )
        return _engine


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Engine = Annotated[InsightsEngine, Depends(get_insights_engine)]
