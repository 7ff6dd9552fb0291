"""Pydantic models for the records the insights engine reads: candidates,
interactions, cycle settings, advice history and no-contact progress."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from src.models.base import HeartlineBase

# Cycle length bounds accepted from user settings (days).  Keep in step with
# cycle.min_cycle_length / max_cycle_length in insights_config.yaml
MIN_CYCLE_LENGTH = 21
MAX_CYCLE_LENGTH = 40
DEFAULT_CYCLE_LENGTH = 28


# ---------- Enums ----------

class CandidateStatus(str, Enum):
    just_matched = "just_matched"
    texting = "texting"
    planning_date = "planning_date"
    dating = "dating"
    dating_casually = "dating_casually"
    getting_serious = "getting_serious"
    no_contact = "no_contact"
    archived = "archived"
    serious_relationship = "serious_relationship"


# Statuses that take a candidate out of active engagement
INACTIVE_STATUSES = frozenset({CandidateStatus.archived, CandidateStatus.no_contact})


class InteractionType(str, Enum):
    coffee = "coffee"
    dinner = "dinner"
    drinks = "drinks"
    movie = "movie"
    facetime = "facetime"
    texting = "texting"
    activity = "activity"
    home_hangout = "home_hangout"
    group_hang = "group_hang"
    trip = "trip"
    event = "event"
    intimate = "intimate"
    phone_call = "phone_call"


class Initiator(str, Enum):
    me = "me"
    them = "them"
    mutual = "mutual"


class AdviceResponse(str, Enum):
    accepted = "accepted"
    declined = "declined"


# ---------- Candidates ----------

class Candidate(HeartlineBase):
    # Flags and advice are free text compared verbatim, so keep whitespace
    model_config = ConfigDict(str_strip_whitespace=False)

    id: str
    nickname: str = ""
    status: CandidateStatus = CandidateStatus.just_matched
    compatibility_score: float | None = Field(default=None, ge=0, le=100)
    overall_chemistry: float | None = Field(default=None, ge=1, le=5)
    red_flags: list[str] = Field(default_factory=list)
    green_flags: list[str] = Field(default_factory=list)
    no_contact_active: bool = False
    no_contact_day: int | None = None
    no_contact_start_date: date | None = None
    met_app: str | None = None
    met_via: str | None = None
    updated_at: datetime | None = None
    score_breakdown: dict[str, Any] | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return CandidateStatus.just_matched if value is None else value

    @field_validator("red_flags", "green_flags", mode="before")
    @classmethod
    def _flags_as_list(cls, value: Any) -> Any:
        # Flags arrive as free-form JSON; anything but a list counts as none
        if not isinstance(value, list):
            return []
        return [str(v) for v in value if v is not None]

    @field_validator("no_contact_active", mode="before")
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES

    @property
    def pending_advice(self) -> str | None:
        """Advice text from the latest score breakdown, if any."""
        if not self.score_breakdown:
            return None
        advice = self.score_breakdown.get("advice")
        if isinstance(advice, str) and advice:
            return advice
        return None

    @property
    def meeting_source(self) -> str:
        return self.met_app or self.met_via or "Unknown"


# ---------- Interactions ----------

class Interaction(HeartlineBase):
    id: str
    candidate_id: str
    interaction_type: InteractionType
    interaction_date: date | None = None
    overall_feeling: int | None = Field(default=None, ge=1, le=5)
    who_initiated: Initiator | None = None


# ---------- Cycle tracking ----------

class CycleConfig(HeartlineBase):
    track_cycle: bool = False
    last_period_date: date | None = None
    cycle_length: int = Field(
        default=DEFAULT_CYCLE_LENGTH, ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH
    )

    @field_validator("cycle_length", mode="before")
    @classmethod
    def _default_cycle_length(cls, value: Any) -> Any:
        return DEFAULT_CYCLE_LENGTH if not value else value


# ---------- Advice history ----------

class AdviceRecord(HeartlineBase):
    id: str
    candidate_id: str | None = None
    advice_text: str = ""
    advice_type: str | None = None
    response: AdviceResponse | None = None
    created_at: datetime | None = None
    responded_at: datetime | None = None


# ---------- No-contact progress ----------

class NoContactProgress(HeartlineBase):
    id: str
    candidate_id: str
    day_number: int = Field(ge=0)
    hoover_attempt: bool | None = None
    broke_nc: bool | None = None
    message_sent: bool | None = None
