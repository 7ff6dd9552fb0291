"""Bucket active candidates into good / bad / neutral.

``good`` and ``bad`` are two independent predicates, so one candidate can
land in both (a high score with three red flags, say).  ``neutral`` holds
the active candidates that matched neither.  Archived and no-contact
candidates are left out of every bucket.
"""

from __future__ import annotations

import logging
from typing import Iterable

from src.insights.config_loader import CategorizationSettings, InsightsConfig, get_insights_config
from src.models.dating import Candidate
from src.models.insights import CandidateBuckets

logger = logging.getLogger("heartline.insights.categorizer")


class CandidateCategorizer:
    """Score/chemistry/flag heuristics over active candidates."""

    def __init__(self, config: InsightsConfig | None = None) -> None:
        self._config = config or get_insights_config()

    @property
    def _settings(self) -> CategorizationSettings:
        return self._config.categorization

    def is_good(self, candidate: Candidate) -> bool:
        # A missing score or chemistry rating never counts in the candidate's favour
        s = self._settings
        score = candidate.compatibility_score
        chemistry = candidate.overall_chemistry
        return (score is not None and score >= s.good_score_min) or (
            chemistry is not None and chemistry >= s.good_chemistry_min
        )

    def is_bad(self, candidate: Candidate) -> bool:
        s = self._settings
        score = candidate.compatibility_score
        return (score is not None and score < s.bad_score_below) or (
            len(candidate.red_flags) >= s.bad_red_flags_min
        )

    def categorize(self, candidates: Iterable[Candidate]) -> CandidateBuckets:
        """Split active candidates into buckets, preserving input order."""
        active = [c for c in candidates if c.is_active]

        good = [c.id for c in active if self.is_good(c)]
        bad = [c.id for c in active if self.is_bad(c)]
        matched = set(good) | set(bad)
        neutral = [c.id for c in active if c.id not in matched]

        buckets = CandidateBuckets(good=good, bad=bad, neutral=neutral)
        logger.debug(
            "Categorized %d active candidate(s): good=%d bad=%d neutral=%d overlap=%d",
            len(active), len(good), len(bad), len(neutral), len(buckets.overlap),
        )
        return buckets
