"""Pydantic view-models produced by the insights engine.

Every model here is JSON-serializable via ``model_dump(mode="json")`` so the
service layer can hand results to any client without further shaping.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import Field, computed_field

from src.models.base import HeartlineBase
from src.models.dating import (
    AdviceRecord,
    Candidate,
    CycleConfig,
    Interaction,
    NoContactProgress,
)


# ---------- Enums ----------

class CyclePhase(str, Enum):
    none = "none"
    menstrual = "menstrual"
    ovulation = "ovulation"
    luteal = "luteal"


class NotificationType(str, Enum):
    cycle = "cycle"
    oxytocin = "oxytocin"
    no_contact = "no-contact"
    advice = "advice"
    warning = "warning"
    success = "success"
    info = "info"


# ---------- Cycle phase ----------

class CyclePhaseResult(HeartlineBase):
    phase: CyclePhase
    phase_name: str | None = None
    warning_text: str | None = None
    day_in_cycle: int
    cycle_day: int  # 1-indexed, for display
    cycle_length: int
    ovulation_day: int
    days_until_next_period: int


# ---------- Hormonal window ----------

class HormonalAlert(HeartlineBase):
    candidate: Candidate
    days_since: int
    interaction_id: str
    interaction_date: date


# ---------- Categorization ----------

class CandidateBuckets(HeartlineBase):
    good: list[str] = Field(default_factory=list)
    bad: list[str] = Field(default_factory=list)
    neutral: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overlap(self) -> list[str]:
        """Ids present in both ``good`` and ``bad``."""
        bad = set(self.bad)
        return [cid for cid in self.good if cid in bad]


# ---------- Notifications ----------

class Notification(HeartlineBase):
    id: str
    type: NotificationType
    title: str
    message: str
    candidate_id: str | None = None
    time: str | None = None


# ---------- Pattern statistics ----------

class StatusCount(HeartlineBase):
    status: str
    count: int


class FlagCount(HeartlineBase):
    flag: str
    count: int


class InteractionTypeCount(HeartlineBase):
    type: str
    count: int


class InitiatorCount(HeartlineBase):
    initiator: str
    count: int
    percentage: int


class MeetingSourceCount(HeartlineBase):
    source: str
    count: int


class DateTypeSuccess(HeartlineBase):
    type: str
    avg_feeling: float
    count: int


class RelationshipOutcomes(HeartlineBase):
    active: int = 0
    ended: int = 0
    active_with_accepted_advice: int = 0
    ended_with_declined_advice: int = 0


class NoContactMetrics(HeartlineBase):
    total_started: int = 0
    currently_active: int = 0
    completed_journeys: int = 0
    total_hoover_attempts: int = 0
    times_broke_nc: int = 0
    avg_days_completed: int = 0


class NoContactTrendPoint(HeartlineBase):
    day: int
    reached: int
    hoover: int


class PatternStats(HeartlineBase):
    total_candidates: int = 0
    active_candidates: int = 0
    archived_candidates: int = 0
    no_contact_candidates: int = 0
    avg_compatibility_score: int = 0
    total_interactions: int = 0
    status_distribution: list[StatusCount] = Field(default_factory=list)
    common_red_flags: list[FlagCount] = Field(default_factory=list)
    common_green_flags: list[FlagCount] = Field(default_factory=list)
    interaction_types: list[InteractionTypeCount] = Field(default_factory=list)
    initiator_stats: list[InitiatorCount] = Field(default_factory=list)
    avg_overall_feeling: float = 0.0
    date_type_success: list[DateTypeSuccess] = Field(default_factory=list)
    meeting_sources: list[MeetingSourceCount] = Field(default_factory=list)
    advice_acceptance_rate: int = 0
    total_advice_given: int = 0
    accepted_advice: int = 0
    declined_advice: int = 0
    pending_advice: int = 0
    relationship_outcomes: RelationshipOutcomes = Field(default_factory=RelationshipOutcomes)
    no_contact_metrics: NoContactMetrics = Field(default_factory=NoContactMetrics)
    no_contact_trend: list[NoContactTrendPoint] = Field(default_factory=list)


# ---------- Snapshot / request envelopes ----------

class InsightsSnapshot(HeartlineBase):
    """Everything the engine derives for one user at one instant."""

    computed_at: datetime
    cycle_phase: CyclePhaseResult | None = None
    hormonal_alerts: list[HormonalAlert] = Field(default_factory=list)
    categories: CandidateBuckets = Field(default_factory=CandidateBuckets)
    notifications: list[Notification] = Field(default_factory=list)
    patterns: PatternStats = Field(default_factory=PatternStats)


class InsightsRequest(HeartlineBase):
    """Already-loaded collections for one user, as posted to the API."""

    candidates: list[Candidate] = Field(default_factory=list)
    interactions: list[Interaction] = Field(default_factory=list)
    cycle_config: CycleConfig | None = None
    advice_records: list[AdviceRecord] = Field(default_factory=list)
    no_contact_progress: list[NoContactProgress] = Field(default_factory=list)
    now: datetime | None = None
