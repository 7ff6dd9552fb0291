"""Cycle-phase estimation from a self-reported last period date.

A calendar heuristic, not a medical algorithm:

    day_in_cycle  = days since last period, wrapped into [0, cycle_length)
    ovulation_day = round(cycle_length / 2) - 2

Phases are checked in a fixed order (first match wins):

    1. day_in_cycle <= 5                                  → menstrual
    2. ovulation_day - 2 <= day_in_cycle <= ovulation_day + 2 → ovulation
    3. ovulation_day + 2 < day_in_cycle < cycle_length - 5    → luteal
    4. anything else                                      → none (silent)

The follicular stretch between menstruation and ovulation, and the last few
days before the next period, deliberately report no phase.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Callable

from src.insights.clock import days_between
from src.insights.config_loader import CycleSettings, InsightsConfig, get_insights_config
from src.models.dating import CycleConfig
from src.models.insights import CyclePhase, CyclePhaseResult

logger = logging.getLogger("heartline.insights.cycle_phase")

PHASE_NAMES: dict[CyclePhase, str] = {
    CyclePhase.menstrual: "Menstrual Phase",
    CyclePhase.ovulation: "Ovulation Window",
    CyclePhase.luteal: "Luteal Phase",
}

PHASE_WARNINGS: dict[CyclePhase, str] = {
    CyclePhase.menstrual: "Menstrual phase: energy may be lower.",
    CyclePhase.ovulation: (
        "Ovulation: hormones peak and attraction may be heightened. Decide carefully."
    ),
    CyclePhase.luteal: "Luteal phase: PMS territory, emotions may be more intense.",
}


def estimate_ovulation_day(cycle_length: int) -> int:
    """Estimated 0-indexed ovulation day for a cycle of ``cycle_length`` days.

    Halves round up (a 21-day cycle gives 9, not 8).
    """
    return math.floor(cycle_length / 2 + 0.5) - 2


class CyclePhaseEstimator:
    """Map a last-period date and cycle length to a phase and warning.

    Usage::

        estimator = CyclePhaseEstimator()
        result = estimator.estimate_for(cycle_config, now)
        if result and result.phase is not CyclePhase.none:
            print(result.warning_text)

    Args:
        config:           Insights config (defaults to the global singleton).
        ovulation_day_fn: Formula for the ovulation day; swap to revise the
                          heuristic without touching callers.
    """

    def __init__(
        self,
        config: InsightsConfig | None = None,
        ovulation_day_fn: Callable[[int], int] = estimate_ovulation_day,
    ) -> None:
        self._config = config or get_insights_config()
        self._ovulation_day_fn = ovulation_day_fn

    @property
    def _settings(self) -> CycleSettings:
        return self._config.cycle

    def estimate_for(
        self, cycle_config: CycleConfig | None, now: date | datetime
    ) -> CyclePhaseResult | None:
        """Estimate the phase for a user's cycle settings.

        Returns None (no estimate) unless tracking is on and a last period
        date is known.
        """
        if cycle_config is None or not cycle_config.track_cycle:
            return None
        if cycle_config.last_period_date is None:
            return None
        return self.estimate(cycle_config.last_period_date, cycle_config.cycle_length, now)

    def estimate(
        self,
        last_period_date: date,
        cycle_length: int | None,
        now: date | datetime,
    ) -> CyclePhaseResult:
        """Estimate the phase for ``now``.

        Args:
            last_period_date: First day of the most recent period.  May be in
                              the future; the day is still wrapped into range.
            cycle_length:     Cycle length in days.  None falls back to the
                              configured default; out-of-range values are
                              clamped to the configured bounds.
            now:              Reference instant for this computation.

        Returns:
            CyclePhaseResult (phase may be ``CyclePhase.none``).
        """
        length = self._normalize_length(cycle_length)

        # Python's % is a floored modulo, so a future date still lands in range
        day_in_cycle = days_between(last_period_date, now) % length
        ovulation_day = self._ovulation_day_fn(length)
        phase = self.classify_day(day_in_cycle, length, ovulation_day)

        return CyclePhaseResult(
            phase=phase,
            phase_name=PHASE_NAMES.get(phase),
            warning_text=PHASE_WARNINGS.get(phase),
            day_in_cycle=day_in_cycle,
            cycle_day=day_in_cycle + 1,
            cycle_length=length,
            ovulation_day=ovulation_day,
            days_until_next_period=length - day_in_cycle,
        )

    def classify_day(
        self, day_in_cycle: int, cycle_length: int, ovulation_day: int | None = None
    ) -> CyclePhase:
        """Classify a 0-indexed cycle day, first match wins."""
        s = self._settings
        if ovulation_day is None:
            ovulation_day = self._ovulation_day_fn(cycle_length)

        if day_in_cycle <= s.menstrual_days:
            return CyclePhase.menstrual
        if ovulation_day - s.ovulation_half_width <= day_in_cycle <= ovulation_day + s.ovulation_half_width:
            return CyclePhase.ovulation
        if ovulation_day + s.ovulation_half_width < day_in_cycle < cycle_length - s.pms_buffer_days:
            return CyclePhase.luteal
        return CyclePhase.none

    def _normalize_length(self, cycle_length: int | None) -> int:
        s = self._settings
        if not cycle_length:
            return s.default_cycle_length
        clamped = s.clamp(cycle_length)
        if clamped != cycle_length:
            logger.warning(
                "Cycle length %d outside [%d, %d]; using %d",
                cycle_length, s.min_cycle_length, s.max_cycle_length, clamped,
            )
        return clamped
