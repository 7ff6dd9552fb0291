"""Post-intimacy "oxytocin window" alerts.

For a few days after an intimate interaction judgment about that person may
be clouded.  This module finds every candidate with an intimate interaction
inside the window and reports how many days ago the most recent one was.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from src.insights.clock import days_between
from src.insights.config_loader import InsightsConfig, get_insights_config
from src.models.dating import Candidate, Interaction, InteractionType
from src.models.insights import HormonalAlert

logger = logging.getLogger("heartline.insights.hormonal_window")


class HormonalWindowTracker:
    """Find candidates with an intimate interaction in the last N days.

    Usage::

        tracker = HormonalWindowTracker()
        for alert in tracker.track(interactions, candidates, now):
            print(alert.candidate.nickname, alert.days_since)
    """

    def __init__(self, config: InsightsConfig | None = None) -> None:
        self._config = config or get_insights_config()

    @property
    def window_days(self) -> int:
        return self._config.hormonal_window.window_days

    def track(
        self,
        interactions: Iterable[Interaction],
        candidates: Iterable[Candidate],
        now: date | datetime,
        window_days: int | None = None,
    ) -> list[HormonalAlert]:
        """Return one alert per candidate, for their most recent qualifying interaction.

        Args:
            interactions: All interactions for the user, in any order.
            candidates:   All candidates for the user.
            now:          Reference instant for this computation.
            window_days:  Override for the configured window.

        Returns:
            Alerts in the order each candidate first qualified.  Interactions
            dated in the future, undated, or pointing at an unknown
            candidate are skipped.
        """
        window = self.window_days if window_days is None else window_days
        by_id = {c.id: c for c in candidates}

        # candidate_id → (days_since, interaction)
        latest: dict[str, tuple[int, Interaction]] = {}
        orphaned = 0

        for interaction in interactions:
            if interaction.interaction_type is not InteractionType.intimate:
                continue
            if interaction.interaction_date is None:
                continue

            days_since = days_between(interaction.interaction_date, now)
            if not (0 <= days_since <= window):
                continue
            if interaction.candidate_id not in by_id:
                orphaned += 1
                continue

            current = latest.get(interaction.candidate_id)
            if current is None or days_since < current[0]:
                latest[interaction.candidate_id] = (days_since, interaction)

        if orphaned:
            logger.warning(
                "Skipped %d intimate interaction(s) with no matching candidate", orphaned
            )

        alerts = [
            HormonalAlert(
                candidate=by_id[candidate_id],
                days_since=days_since,
                interaction_id=interaction.id,
                interaction_date=interaction.interaction_date,
            )
            for candidate_id, (days_since, interaction) in latest.items()
        ]
        logger.debug("Hormonal window (%d days): %d alert(s)", window, len(alerts))
        return alerts
