"""Derived-insights engine facade.

Runs every insight component over one user's already-loaded records and
returns a single ``InsightsSnapshot``.  ``now`` is captured once per call
and threaded through every time-based component so a single run is
internally consistent even if the wall clock moves on mid-run.

Pipeline::

    CyclePhaseEstimator ─┐
    HormonalWindowTracker ┼─► NotificationAggregator
    (candidate scans) ───┘
    CandidateCategorizer        (independent)
    PatternStatisticsEngine     (independent)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from src.insights.cache import InsightsCache
from src.insights.categorizer import CandidateCategorizer
from src.insights.config_loader import InsightsConfig, get_insights_config
from src.insights.cycle_phase import CyclePhaseEstimator
from src.insights.hormonal_window import HormonalWindowTracker
from src.insights.notifications import NotificationAggregator, SortKey
from src.insights.pattern_stats import PatternStatisticsEngine
from src.models.base import utc_now
from src.models.dating import (
    AdviceRecord,
    Candidate,
    CycleConfig,
    Interaction,
    NoContactProgress,
)
from src.models.insights import (
    CandidateBuckets,
    CyclePhaseResult,
    HormonalAlert,
    InsightsSnapshot,
    Notification,
    PatternStats,
)

logger = logging.getLogger("heartline.insights.engine")


class InsightsEngine:
    """Compute all derived insights for one user.

    Usage::

        engine = InsightsEngine()
        snapshot = engine.compute(candidates, interactions, cycle_config, advice)
        for notification in snapshot.notifications:
            print(notification.title)

    Args:
        config:      Insights config (defaults to the global singleton).
        cache:       Optional result cache; pass None to always recompute.
        feed_limit:  Keep at most this many notifications (after sorting);
                     None keeps the whole feed.
    """

    def __init__(
        self,
        config: InsightsConfig | None = None,
        cache: InsightsCache | None = None,
        feed_limit: int | None = None,
    ) -> None:
        self._config = config or get_insights_config()
        self._cache = cache
        self._feed_limit = feed_limit
        self.cycle_estimator = CyclePhaseEstimator(self._config)
        self.hormonal_tracker = HormonalWindowTracker(self._config)
        self.categorizer = CandidateCategorizer(self._config)
        self.notifier = NotificationAggregator(self._config)
        self.pattern_engine = PatternStatisticsEngine(self._config)

    @property
    def config(self) -> InsightsConfig:
        return self._config

    def _memo(self, component: str, inputs: tuple, compute):
        if self._cache is None:
            return compute()
        return self._cache.get_or_compute(component, inputs, compute)

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def cycle_phase(
        self, cycle_config: CycleConfig | None, now: datetime
    ) -> CyclePhaseResult | None:
        return self._memo(
            "cycle_phase",
            (cycle_config, now),
            lambda: self.cycle_estimator.estimate_for(cycle_config, now),
        )

    def hormonal_alerts(
        self,
        interactions: Sequence[Interaction],
        candidates: Sequence[Candidate],
        now: datetime,
    ) -> list[HormonalAlert]:
        return self._memo(
            "hormonal_alerts",
            (interactions, candidates, now),
            lambda: self.hormonal_tracker.track(interactions, candidates, now),
        )

    def categories(self, candidates: Sequence[Candidate]) -> CandidateBuckets:
        return self._memo(
            "categories",
            (candidates,),
            lambda: self.categorizer.categorize(candidates),
        )

    def notifications(
        self,
        candidates: Sequence[Candidate],
        interactions: Sequence[Interaction],
        cycle_config: CycleConfig | None,
        now: datetime,
        sort_key: SortKey | None = None,
    ) -> list[Notification]:
        cycle = self.cycle_phase(cycle_config, now)
        alerts = self.hormonal_alerts(interactions, candidates, now)
        feed = self._memo(
            "notifications",
            (candidates, cycle, alerts, now),
            lambda: self.notifier.aggregate(candidates, now, cycle, alerts),
        )
        if sort_key is not None:
            feed.sort(key=sort_key)
        if self._feed_limit is not None:
            del feed[self._feed_limit :]
        return feed

    def patterns(
        self,
        candidates: Sequence[Candidate],
        interactions: Sequence[Interaction],
        advice_records: Sequence[AdviceRecord] = (),
        no_contact_progress: Sequence[NoContactProgress] = (),
    ) -> PatternStats:
        return self._memo(
            "patterns",
            (candidates, interactions, advice_records, no_contact_progress),
            lambda: self.pattern_engine.compute(
                candidates, interactions, advice_records, no_contact_progress
            ),
        )

    # ------------------------------------------------------------------
    # Full snapshot
    # ------------------------------------------------------------------

    def compute(
        self,
        candidates: Sequence[Candidate],
        interactions: Sequence[Interaction],
        cycle_config: CycleConfig | None = None,
        advice_records: Sequence[AdviceRecord] = (),
        no_contact_progress: Sequence[NoContactProgress] = (),
        now: datetime | None = None,
        sort_key: SortKey | None = None,
    ) -> InsightsSnapshot:
        """Run every component against the same ``now``.

        Args:
            candidates:          All candidates for the user.
            interactions:        All interactions for the user.
            cycle_config:        Cycle tracking settings, if any.
            advice_records:      Advice history for acceptance stats.
            no_contact_progress: Daily no-contact rows for pattern stats.
            now:                 Reference instant; defaults to the current UTC time.
            sort_key:            Optional ordering for the notification feed.

        Returns:
            InsightsSnapshot with every component's output.
        """
        now = now or utc_now()
        candidates = list(candidates)
        interactions = list(interactions)
        advice_records = list(advice_records)
        no_contact_progress = list(no_contact_progress)

        snapshot = InsightsSnapshot(
            computed_at=now,
            cycle_phase=self.cycle_phase(cycle_config, now),
            hormonal_alerts=self.hormonal_alerts(interactions, candidates, now),
            categories=self.categories(candidates),
            notifications=self.notifications(
                candidates, interactions, cycle_config, now, sort_key
            ),
            patterns=self.patterns(
                candidates, interactions, advice_records, no_contact_progress
            ),
        )
        logger.debug(
            "Computed insights: %d candidate(s), %d interaction(s), %d notification(s)",
            len(candidates), len(interactions), len(snapshot.notifications),
        )
        return snapshot
