"""All-time dating pattern statistics.

Aggregates every candidate, interaction, advice record and no-contact
progress row for a user into frequency tables and rates.  Nothing is
filtered by recency.

Frequency tables are sorted by count, descending.  Ties keep first-seen
order (Python's sort is stable), and every rate guards its denominator so
an empty history yields zeros rather than errors.
"""

from __future__ import annotations

import logging
import math
import statistics
from collections import Counter
from enum import Enum
from typing import Hashable, Iterable, Sequence

from src.insights.config_loader import InsightsConfig, PatternSettings, get_insights_config
from src.models.dating import (
    AdviceRecord,
    AdviceResponse,
    Candidate,
    CandidateStatus,
    INACTIVE_STATUSES,
    Interaction,
    NoContactProgress,
)
from src.models.insights import (
    DateTypeSuccess,
    FlagCount,
    InitiatorCount,
    InteractionTypeCount,
    MeetingSourceCount,
    NoContactMetrics,
    NoContactTrendPoint,
    PatternStats,
    RelationshipOutcomes,
    StatusCount,
)

logger = logging.getLogger("heartline.insights.pattern_stats")


def ranked_counts(values: Iterable[Hashable], limit: int | None = None) -> list[tuple[Hashable, int]]:
    """Count occurrences, most frequent first, ties in first-seen order.

    Args:
        values: Values to count (compared by exact equality).
        limit:  Keep only the top ``limit`` entries; None keeps all.

    Returns:
        List of (value, count) pairs.
    """
    counts = Counter(values)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked if limit is None else ranked[:limit]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves up for non-negative values (2.5 → 3, 3.25 → 3.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: int, whole: int) -> int:
    """Rounded ``part / whole`` as a 0–100 integer; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return int(round_half_up(100 * part / whole))


def _mean_int(values: Iterable[float]) -> int:
    values = list(values)
    return int(round_half_up(statistics.mean(values))) if values else 0


def _value(item: Hashable) -> str:
    return item.value if isinstance(item, Enum) else str(item)


class PatternStatisticsEngine:
    """Compute ``PatternStats`` from a user's full history.

    Usage::

        engine = PatternStatisticsEngine()
        stats = engine.compute(candidates, interactions, advice_records)
        print(stats.advice_acceptance_rate, stats.common_red_flags)
    """

    def __init__(self, config: InsightsConfig | None = None) -> None:
        self._config = config or get_insights_config()

    @property
    def _settings(self) -> PatternSettings:
        return self._config.patterns

    def compute(
        self,
        candidates: Sequence[Candidate],
        interactions: Sequence[Interaction],
        advice_records: Sequence[AdviceRecord] = (),
        no_contact_progress: Sequence[NoContactProgress] = (),
    ) -> PatternStats:
        """Aggregate the full history into a PatternStats view-model."""
        s = self._settings

        active = [c for c in candidates if c.is_active]
        archived = [c for c in candidates if c.status is CandidateStatus.archived]
        no_contact = [c for c in candidates if c.status is CandidateStatus.no_contact]

        scores = [c.compatibility_score for c in candidates if c.compatibility_score is not None]
        feelings = [i.overall_feeling for i in interactions if i.overall_feeling is not None]

        accepted = [a for a in advice_records if a.response is AdviceResponse.accepted]
        declined = [a for a in advice_records if a.response is AdviceResponse.declined]
        responded = [a for a in advice_records if a.response is not None]

        stats = PatternStats(
            total_candidates=len(candidates),
            active_candidates=len(active),
            archived_candidates=len(archived),
            no_contact_candidates=len(no_contact),
            avg_compatibility_score=_mean_int(scores),
            total_interactions=len(interactions),
            status_distribution=self.status_distribution(candidates),
            common_red_flags=self.flag_frequency(c.red_flags for c in candidates),
            common_green_flags=self.flag_frequency(c.green_flags for c in candidates),
            interaction_types=[
                InteractionTypeCount(type=_value(t), count=n)
                for t, n in ranked_counts(
                    (i.interaction_type for i in interactions), s.top_interaction_types
                )
            ],
            initiator_stats=self.initiator_stats(interactions),
            avg_overall_feeling=statistics.mean(feelings) if feelings else 0.0,
            date_type_success=self.date_type_success(interactions),
            meeting_sources=[
                MeetingSourceCount(source=str(source), count=n)
                for source, n in ranked_counts(
                    (c.meeting_source for c in candidates), s.top_meeting_sources
                )
            ],
            advice_acceptance_rate=percentage(len(accepted), len(responded)),
            total_advice_given=len(advice_records),
            accepted_advice=len(accepted),
            declined_advice=len(declined),
            pending_advice=len(advice_records) - len(responded),
            relationship_outcomes=self.relationship_outcomes(candidates, accepted, declined),
            no_contact_metrics=self.no_contact_metrics(candidates, no_contact_progress),
            no_contact_trend=self.no_contact_trend(no_contact_progress),
        )
        logger.debug(
            "Pattern stats over %d candidate(s), %d interaction(s), %d advice record(s)",
            len(candidates), len(interactions), len(advice_records),
        )
        return stats

    # ------------------------------------------------------------------
    # Frequency tables
    # ------------------------------------------------------------------

    def status_distribution(self, candidates: Iterable[Candidate]) -> list[StatusCount]:
        return [
            StatusCount(status=_value(status), count=n)
            for status, n in ranked_counts(c.status for c in candidates)
        ]

    def flag_frequency(self, flag_lists: Iterable[list[str]]) -> list[FlagCount]:
        """Top flags across all candidates, counted by exact string match."""
        flags = (flag for flag_list in flag_lists for flag in flag_list)
        return [
            FlagCount(flag=str(flag), count=n)
            for flag, n in ranked_counts(flags, self._settings.top_flags)
        ]

    def initiator_stats(self, interactions: Iterable[Interaction]) -> list[InitiatorCount]:
        ranked = ranked_counts(
            i.who_initiated for i in interactions if i.who_initiated is not None
        )
        total = sum(n for _, n in ranked)
        return [
            InitiatorCount(initiator=_value(who), count=n, percentage=percentage(n, total))
            for who, n in ranked
        ]

    def date_type_success(self, interactions: Iterable[Interaction]) -> list[DateTypeSuccess]:
        """Mean feeling per interaction type, best first."""
        feelings: dict[str, list[int]] = {}
        for i in interactions:
            if i.overall_feeling is None:
                continue
            feelings.setdefault(_value(i.interaction_type), []).append(i.overall_feeling)

        rows = [
            DateTypeSuccess(
                type=kind,
                avg_feeling=round_half_up(statistics.mean(values), 1),
                count=len(values),
            )
            for kind, values in feelings.items()
        ]
        rows.sort(key=lambda row: row.avg_feeling, reverse=True)
        return rows[: self._settings.top_date_types]

    # ------------------------------------------------------------------
    # Outcomes and no-contact
    # ------------------------------------------------------------------

    def relationship_outcomes(
        self,
        candidates: Sequence[Candidate],
        accepted: Sequence[AdviceRecord],
        declined: Sequence[AdviceRecord],
    ) -> RelationshipOutcomes:
        """Compare advice responses with whether the relationship is still going."""
        accepted_ids = {a.candidate_id for a in accepted if a.candidate_id}
        declined_ids = {a.candidate_id for a in declined if a.candidate_id}

        still_going = [c for c in candidates if c.status not in INACTIVE_STATUSES]
        ended = [c for c in candidates if c.status in INACTIVE_STATUSES]

        return RelationshipOutcomes(
            active=len(still_going),
            ended=len(ended),
            active_with_accepted_advice=sum(1 for c in still_going if c.id in accepted_ids),
            ended_with_declined_advice=sum(
                1 for c in ended if c.id in declined_ids and c.id not in accepted_ids
            ),
        )

    def no_contact_metrics(
        self,
        candidates: Sequence[Candidate],
        progress: Sequence[NoContactProgress],
    ) -> NoContactMetrics:
        goal = self._settings.no_contact_goal_days

        # Furthest day reached per candidate
        furthest: dict[str, int] = {}
        for row in progress:
            if row.day_number > furthest.get(row.candidate_id, -1):
                furthest[row.candidate_id] = row.day_number

        return NoContactMetrics(
            total_started=sum(1 for c in candidates if c.no_contact_start_date is not None),
            currently_active=sum(1 for c in candidates if c.no_contact_active),
            completed_journeys=sum(
                1 for c in candidates if c.no_contact_day and c.no_contact_day >= goal
            ),
            total_hoover_attempts=sum(1 for row in progress if row.hoover_attempt),
            times_broke_nc=sum(1 for row in progress if row.broke_nc),
            avg_days_completed=_mean_int(furthest.values()),
        )

    def no_contact_trend(self, progress: Sequence[NoContactProgress]) -> list[NoContactTrendPoint]:
        """For each day up to the goal, how many rows reached it and how many hoovers hit it."""
        goal = self._settings.no_contact_goal_days
        return [
            NoContactTrendPoint(
                day=day,
                reached=sum(1 for row in progress if row.day_number >= day),
                hoover=sum(1 for row in progress if row.day_number == day and row.hoover_attempt),
            )
            for day in range(1, goal + 1)
        ]
