"""Unified notification feed.

Merges every alert source into one flat, typed list.  Each rule contributes
on its own; nothing is deduplicated across rules, so a candidate can show up
in several notifications at once.  Emission order:

    1. cycle       - current cycle phase warning (named phases only)
    2. oxytocin    - recent intimacy, one per candidate
    3. no-contact  - running no-contact counter
    4. advice      - pending advice, previewed
    5. warning     - several red flags
    6. success     - high compatibility (active candidates)
    7. info        - no updates for a while (active candidates)

The feed has no built-in priority.  Callers who want one pass ``sort_key``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Sequence

from src.insights.clock import days_between
from src.insights.config_loader import InsightsConfig, NotificationSettings, get_insights_config
from src.models.dating import Candidate
from src.models.insights import (
    CyclePhase,
    CyclePhaseResult,
    HormonalAlert,
    Notification,
    NotificationType,
)

logger = logging.getLogger("heartline.insights.notifications")

SortKey = Callable[[Notification], Any]


def preview(text: str, limit: int) -> str:
    """Truncate ``text`` to ``limit`` characters, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _format_score(score: float) -> str:
    return f"{score:g}"


def _days_ago(days: int) -> str:
    return "Today" if days == 0 else f"{days}d ago"


class NotificationAggregator:
    """Build the notification feed from candidates and upstream insights."""

    def __init__(self, config: InsightsConfig | None = None) -> None:
        self._config = config or get_insights_config()

    @property
    def _settings(self) -> NotificationSettings:
        return self._config.notifications

    def aggregate(
        self,
        candidates: Sequence[Candidate],
        now: date | datetime,
        cycle_phase: CyclePhaseResult | None = None,
        hormonal_alerts: Iterable[HormonalAlert] = (),
        sort_key: SortKey | None = None,
    ) -> list[Notification]:
        """Return the full feed.

        Args:
            candidates:      All candidates for the user.
            now:             Reference instant for this computation.
            cycle_phase:     Output of CyclePhaseEstimator, if any.
            hormonal_alerts: Output of HormonalWindowTracker.
            sort_key:        Optional key to order the feed.  Python's sort is
                             stable, so equal keys keep emission order.

        Returns:
            Flat list of notifications.
        """
        feed: list[Notification] = []
        feed.extend(self._cycle(cycle_phase))
        feed.extend(self._oxytocin(hormonal_alerts))
        feed.extend(self._no_contact(candidates))
        feed.extend(self._advice(candidates))
        feed.extend(self._red_flags(candidates))
        feed.extend(self._high_compatibility(candidates))
        feed.extend(self._stale(candidates, now))

        if sort_key is not None:
            feed.sort(key=sort_key)

        logger.debug("Built notification feed with %d item(s)", len(feed))
        return feed

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _cycle(self, cycle_phase: CyclePhaseResult | None) -> list[Notification]:
        if cycle_phase is None or cycle_phase.phase is CyclePhase.none:
            return []
        return [
            Notification(
                id="cycle",
                type=NotificationType.cycle,
                title=cycle_phase.phase_name or cycle_phase.phase.value,
                message=cycle_phase.warning_text or "",
                time=f"Day {cycle_phase.cycle_day}",
            )
        ]

    def _oxytocin(self, alerts: Iterable[HormonalAlert]) -> list[Notification]:
        return [
            Notification(
                id=f"oxy-{alert.interaction_id}",
                type=NotificationType.oxytocin,
                title="Oxytocin active",
                message=(
                    f"{alert.candidate.nickname}: intimacy {_days_ago(alert.days_since).lower()}, "
                    "hormones affect judgment for 48-72hrs"
                ),
                candidate_id=alert.candidate.id,
                time=_days_ago(alert.days_since),
            )
            for alert in alerts
        ]

    def _no_contact(self, candidates: Sequence[Candidate]) -> list[Notification]:
        return [
            Notification(
                id=f"nc-{c.id}",
                type=NotificationType.no_contact,
                title=f"Day {c.no_contact_day or 0} No Contact",
                message=f"{c.nickname}: stay strong, you're doing great!",
                candidate_id=c.id,
            )
            for c in candidates
            if c.no_contact_active
        ]

    def _advice(self, candidates: Sequence[Candidate]) -> list[Notification]:
        limit = self._settings.advice_preview_chars
        feed = []
        for c in candidates:
            advice = c.pending_advice
            if advice is None:
                continue
            feed.append(
                Notification(
                    id=f"advice-{c.id}",
                    type=NotificationType.advice,
                    title=f"Advice for {c.nickname}",
                    message=preview(advice, limit),
                    candidate_id=c.id,
                )
            )
        return feed

    def _red_flags(self, candidates: Sequence[Candidate]) -> list[Notification]:
        minimum = self._settings.red_flag_warning_min
        return [
            Notification(
                id=f"flags-{c.id}",
                type=NotificationType.warning,
                title=f"{len(c.red_flags)} red flags",
                message=f"{c.nickname}: review concerns before proceeding",
                candidate_id=c.id,
            )
            for c in candidates
            if len(c.red_flags) >= minimum
        ]

    def _high_compatibility(self, candidates: Sequence[Candidate]) -> list[Notification]:
        minimum = self._settings.high_compatibility_min
        return [
            Notification(
                id=f"match-{c.id}",
                type=NotificationType.success,
                title=f"{_format_score(c.compatibility_score)}% compatible",
                message=f"{c.nickname}: high potential match!",
                candidate_id=c.id,
            )
            for c in candidates
            if c.is_active
            and c.compatibility_score is not None
            and c.compatibility_score >= minimum
        ]

    def _stale(self, candidates: Sequence[Candidate], now: date | datetime) -> list[Notification]:
        threshold = self._settings.staleness_days
        feed = []
        for c in candidates:
            if not c.is_active or c.updated_at is None:
                continue
            days_since = days_between(c.updated_at, now)
            if days_since <= threshold:
                continue
            feed.append(
                Notification(
                    id=f"stale-{c.id}",
                    type=NotificationType.info,
                    title=f"No updates in {days_since} days",
                    message=f"{c.nickname}: time to check in?",
                    candidate_id=c.id,
                )
            )
        return feed
