"""Shared fixtures and record builders for insights engine tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest

from src.insights.config_loader import InsightsConfig, load_insights_config
from src.models.dating import (
    AdviceRecord,
    Candidate,
    CycleConfig,
    Interaction,
    NoContactProgress,
)

# Canonical reference instant for every time-based test
TEST_NOW = datetime(2026, 2, 23, 12, 0, 0, tzinfo=timezone.utc)
TEST_TODAY = TEST_NOW.date()


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------


def make_candidate(cid: str, **overrides: Any) -> Candidate:
    fields: dict[str, Any] = {
        "id": cid,
        "nickname": cid.title(),
        "status": "dating",
        "updated_at": TEST_NOW - timedelta(days=1),
    }
    fields.update(overrides)
    return Candidate(**fields)


def make_interaction(
    iid: str,
    candidate_id: str,
    interaction_type: str = "coffee",
    days_ago: int | None = 0,
    **overrides: Any,
) -> Interaction:
    fields: dict[str, Any] = {
        "id": iid,
        "candidate_id": candidate_id,
        "interaction_type": interaction_type,
        "interaction_date": None if days_ago is None else TEST_TODAY - timedelta(days=days_ago),
    }
    fields.update(overrides)
    return Interaction(**fields)


def make_advice(aid: str, response: str | None, candidate_id: str | None = None) -> AdviceRecord:
    return AdviceRecord(
        id=aid,
        candidate_id=candidate_id,
        advice_text="Slow things down",
        response=response,
    )


def make_progress(
    pid: str, candidate_id: str, day_number: int, hoover: bool = False, broke: bool = False
) -> NoContactProgress:
    return NoContactProgress(
        id=pid,
        candidate_id=candidate_id,
        day_number=day_number,
        hoover_attempt=hoover,
        broke_nc=broke,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def insights_config() -> InsightsConfig:
    """Load the real insights config for tests."""
    return load_insights_config()


# ---------------------------------------------------------------------------
# Data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Cycle tracking on, period started 14 days before TEST_NOW."""
    return CycleConfig(
        track_cycle=True,
        last_period_date=TEST_TODAY - timedelta(days=14),
        cycle_length=28,
    )


@pytest.fixture
def candidates() -> list[Candidate]:
    """A realistic mix of active and inactive candidates."""
    return [
        make_candidate(
            "alex",
            compatibility_score=85,
            overall_chemistry=4,
            green_flags=["kind", "curious"],
            met_app="Hinge",
        ),
        make_candidate(
            "blake",
            compatibility_score=75,
            red_flags=["dishonesty", "ghosting", "rude"],
            met_app="Bumble",
            score_breakdown={"advice": "Ask Blake directly about the cancelled plans last weekend before agreeing to another date."},
        ),
        make_candidate(
            "casey",
            status="texting",
            compatibility_score=60,
            overall_chemistry=3,
            met_via="friends",
            updated_at=TEST_NOW - timedelta(days=10),
        ),
        make_candidate(
            "drew",
            status="no_contact",
            compatibility_score=40,
            red_flags=["ghosting", "love bombing"],
            no_contact_active=True,
            no_contact_day=12,
            no_contact_start_date=date(2026, 2, 11),
            met_app="Hinge",
            updated_at=TEST_NOW - timedelta(days=20),
        ),
        make_candidate(
            "emery",
            status="archived",
            compatibility_score=90,
            red_flags=["rude"],
            updated_at=TEST_NOW - timedelta(days=60),
        ),
    ]


@pytest.fixture
def interactions() -> list[Interaction]:
    return [
        make_interaction("i1", "alex", "dinner", days_ago=20, overall_feeling=5, who_initiated="them"),
        make_interaction("i2", "alex", "intimate", days_ago=2, overall_feeling=4, who_initiated="mutual"),
        make_interaction("i3", "alex", "intimate", days_ago=1, overall_feeling=5, who_initiated="me"),
        make_interaction("i4", "blake", "coffee", days_ago=5, overall_feeling=3, who_initiated="me"),
        make_interaction("i5", "blake", "coffee", days_ago=9, overall_feeling=2, who_initiated="me"),
        make_interaction("i6", "casey", "phone_call", days_ago=12, who_initiated=None),
        make_interaction("i7", "drew", "intimate", days_ago=30, overall_feeling=2, who_initiated="them"),
    ]
