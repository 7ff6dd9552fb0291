"""Derived-insight endpoints.

Stateless: each request carries the user's already-loaded collections and an
optional ``now``; nothing is read from or written to storage here.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from src.dependencies import Engine
from src.models.base import utc_now
from src.models.insights import (
    CandidateBuckets,
    CyclePhaseResult,
    HormonalAlert,
    InsightsRequest,
    InsightsSnapshot,
    Notification,
    PatternStats,
)

router = APIRouter(prefix="/insights", tags=["insights"])


@router.post("", response_model=InsightsSnapshot)
def compute_insights(engine: Engine, body: InsightsRequest) -> Any:
    return engine.compute(
        body.candidates,
        body.interactions,
        cycle_config=body.cycle_config,
        advice_records=body.advice_records,
        no_contact_progress=body.no_contact_progress,
        now=body.now,
    )


@router.post("/cycle-phase", response_model=CyclePhaseResult | None)
def cycle_phase(engine: Engine, body: InsightsRequest) -> Any:
    return engine.cycle_phase(body.cycle_config, body.now or utc_now())


@router.post("/hormonal-alerts", response_model=list[HormonalAlert])
def hormonal_alerts(engine: Engine, body: InsightsRequest) -> Any:
    return engine.hormonal_alerts(body.interactions, body.candidates, body.now or utc_now())


@router.post("/categories", response_model=CandidateBuckets)
def categories(engine: Engine, body: InsightsRequest) -> Any:
    return engine.categories(body.candidates)


@router.post("/notifications", response_model=list[Notification])
def notifications(engine: Engine, body: InsightsRequest) -> Any:
    return engine.notifications(
        body.candidates, body.interactions, body.cycle_config, body.now or utc_now()
    )


@router.post("/patterns", response_model=PatternStats)
def patterns(engine: Engine, body: InsightsRequest) -> Any:
    return engine.patterns(
        body.candidates,
        body.interactions,
        body.advice_records,
        body.no_contact_progress,
    )
