"""Tests for all-time pattern statistics."""

from __future__ import annotations

import pytest

from src.insights.config_loader import InsightsConfig
from src.insights.pattern_stats import (
    PatternStatisticsEngine,
    percentage,
    ranked_counts,
    round_half_up,
)
from src.insights.tests.conftest import (
    make_advice,
    make_candidate,
    make_interaction,
    make_progress,
)
from src.models.dating import Candidate, Interaction


class TestHelpers:
    def test_ranked_counts_ties_keep_first_seen_order(self) -> None:
        assert ranked_counts(["b", "a", "c", "a", "c"]) == [("a", 2), ("c", 2), ("b", 1)]

    def test_ranked_counts_limit(self) -> None:
        assert ranked_counts("aabbbc", limit=2) == [("b", 3), ("a", 2)]

    def test_percentage_zero_denominator(self) -> None:
        assert percentage(0, 0) == 0
        assert percentage(3, 0) == 0

    def test_percentage_rounds_half_up(self) -> None:
        assert percentage(1, 8) == 13  # 12.5
        assert percentage(1, 3) == 33

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(3.25, 1) == 3.3


class TestPatternStatistics:
    def test_fixture_totals(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert stats.total_candidates == 5
        assert stats.active_candidates == 3
        assert stats.archived_candidates == 1
        assert stats.no_contact_candidates == 1
        assert stats.avg_compatibility_score == 70
        assert stats.total_interactions == 7

    def test_status_distribution_sums_to_candidates(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert sum(row.count for row in stats.status_distribution) == len(candidates)
        assert stats.status_distribution[0].status == "dating"
        assert stats.status_distribution[0].count == 2

    def test_flag_frequency(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert [(f.flag, f.count) for f in stats.common_red_flags] == [
            ("ghosting", 2),
            ("rude", 2),
            ("dishonesty", 1),
            ("love bombing", 1),
        ]
        assert [(f.flag, f.count) for f in stats.common_green_flags] == [
            ("kind", 1),
            ("curious", 1),
        ]

    def test_flag_frequency_top_five_exact_match(self, insights_config: InsightsConfig) -> None:
        flags = ["late", "Late", "rude", "cold", "vague", "flaky"]
        stats = PatternStatisticsEngine(insights_config).compute(
            [make_candidate("a", red_flags=flags), make_candidate("b", red_flags=["rude", "late"])],
            [],
        )
        # Casing differences count as separate flags
        assert [(f.flag, f.count) for f in stats.common_red_flags] == [
            ("late", 2),
            ("rude", 2),
            ("Late", 1),
            ("cold", 1),
            ("vague", 1),
        ]

    def test_interaction_types(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert [(t.type, t.count) for t in stats.interaction_types] == [
            ("intimate", 3),
            ("coffee", 2),
            ("dinner", 1),
            ("phone_call", 1),
        ]

    def test_interaction_types_top_six(self, insights_config: InsightsConfig) -> None:
        kinds = ["coffee", "dinner", "drinks", "movie", "facetime", "texting", "activity"]
        interactions = [make_interaction(f"i{n}", "a", kind) for n, kind in enumerate(kinds)]
        stats = PatternStatisticsEngine(insights_config).compute([], interactions)
        assert len(stats.interaction_types) == 6

    def test_initiator_stats(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert [(i.initiator, i.count, i.percentage) for i in stats.initiator_stats] == [
            ("me", 3, 50),
            ("them", 2, 33),
            ("mutual", 1, 17),
        ]

    def test_average_feeling_skips_nulls(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert stats.avg_overall_feeling == pytest.approx(3.5)

    def test_date_type_success(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert [(d.type, d.avg_feeling, d.count) for d in stats.date_type_success] == [
            ("dinner", 5.0, 1),
            ("intimate", 3.7, 3),
            ("coffee", 2.5, 2),
        ]

    def test_meeting_sources_fall_back(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(candidates, interactions)
        assert [(m.source, m.count) for m in stats.meeting_sources] == [
            ("Hinge", 2),
            ("Bumble", 1),
            ("friends", 1),
            ("Unknown", 1),
        ]

    def test_no_advice_records(self, insights_config: InsightsConfig) -> None:
        stats = PatternStatisticsEngine(insights_config).compute([], [], [])
        assert stats.advice_acceptance_rate == 0
        assert stats.total_advice_given == 0

    def test_only_pending_advice(self, insights_config: InsightsConfig) -> None:
        advice = [make_advice("a1", None), make_advice("a2", None)]
        stats = PatternStatisticsEngine(insights_config).compute([], [], advice)
        assert stats.advice_acceptance_rate == 0
        assert stats.pending_advice == 2

    def test_acceptance_rate_over_responses_only(self, insights_config: InsightsConfig) -> None:
        advice = [
            make_advice("a1", "accepted"),
            make_advice("a2", "accepted"),
            make_advice("a3", "declined"),
            make_advice("a4", None),
        ]
        stats = PatternStatisticsEngine(insights_config).compute([], [], advice)
        assert stats.advice_acceptance_rate == 67
        assert stats.accepted_advice == 2
        assert stats.declined_advice == 1
        assert stats.pending_advice == 1
        assert stats.total_advice_given == 4

    def test_relationship_outcomes(self, insights_config: InsightsConfig) -> None:
        candidates = [
            make_candidate("a"),
            make_candidate("b", status="archived"),
            make_candidate("c", status="no_contact"),
            make_candidate("d", status="serious_relationship"),
        ]
        advice = [
            make_advice("x1", "accepted", "a"),
            make_advice("x2", "declined", "b"),
            make_advice("x3", "declined", "c"),
            make_advice("x4", "accepted", "c"),
        ]
        outcomes = PatternStatisticsEngine(insights_config).compute(
            candidates, [], advice
        ).relationship_outcomes
        assert outcomes.active == 2
        assert outcomes.ended == 2
        assert outcomes.active_with_accepted_advice == 1
        # c also had accepted advice, so only b counts
        assert outcomes.ended_with_declined_advice == 1

    def test_no_contact_metrics(
        self,
        insights_config: InsightsConfig,
        candidates: list[Candidate],
        interactions: list[Interaction],
    ) -> None:
        progress = [
            make_progress("p1", "drew", 1),
            make_progress("p2", "drew", 2, hoover=True),
            make_progress("p3", "drew", 12),
            make_progress("p4", "emery", 30, broke=True),
        ]
        stats = PatternStatisticsEngine(insights_config).compute(
            candidates, interactions, [], progress
        )
        metrics = stats.no_contact_metrics
        assert metrics.total_started == 1
        assert metrics.currently_active == 1
        assert metrics.completed_journeys == 0
        assert metrics.total_hoover_attempts == 1
        assert metrics.times_broke_nc == 1
        assert metrics.avg_days_completed == 21  # (12 + 30) / 2

        trend = {point.day: point for point in stats.no_contact_trend}
        assert len(trend) == 30
        assert trend[1].reached == 4
        assert trend[2].reached == 3
        assert trend[2].hoover == 1
        assert trend[13].reached == 1
        assert trend[30].reached == 1

    def test_empty_history_is_neutral(self, insights_config: InsightsConfig) -> None:
        stats = PatternStatisticsEngine(insights_config).compute([], [])
        assert stats.total_candidates == 0
        assert stats.status_distribution == []
        assert stats.common_red_flags == []
        assert stats.initiator_stats == []
        assert stats.avg_overall_feeling == 0
        assert stats.avg_compatibility_score == 0
        assert stats.date_type_success == []
        assert stats.no_contact_metrics.avg_days_completed == 0
        assert all(point.reached == 0 for point in stats.no_contact_trend)

    def test_flag_whitespace_variants_are_distinct(self, insights_config: InsightsConfig) -> None:
        stats = PatternStatisticsEngine(insights_config).compute(
            [make_candidate("a", red_flags=["rude "]), make_candidate("b", red_flags=["rude"])],
            [],
        )
        assert [(f.flag, f.count) for f in stats.common_red_flags] == [("rude ", 1), ("rude", 1)]
