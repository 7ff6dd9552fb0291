"""Heartline derived-insights engine.

Pure, read-only transformations from a user's candidates, interactions,
cycle settings and advice history to dashboard view-models.

Core modules:
    cycle_phase     - Cycle-phase estimate and warning
    hormonal_window - Post-intimacy alert window
    categorizer     - Good / bad / neutral candidate buckets
    notifications   - Unified notification feed
    pattern_stats   - All-time dating pattern statistics
    engine          - Facade running every component against one ``now``
    cache           - Content-hash memoization of component results
    config_loader   - Load/validate/hot-reload insights_config.yaml
"""

from src.insights.categorizer import CandidateCategorizer
from src.insights.config_loader import InsightsConfig, get_insights_config
from src.insights.cycle_phase import CyclePhaseEstimator, estimate_ovulation_day
from src.insights.engine import InsightsEngine
from src.insights.hormonal_window import HormonalWindowTracker
from src.insights.notifications import NotificationAggregator
from src.insights.pattern_stats import PatternStatisticsEngine

__all__ = [
    "CandidateCategorizer",
    "CyclePhaseEstimator",
    "HormonalWindowTracker",
    "InsightsConfig",
    "InsightsEngine",
    "NotificationAggregator",
    "PatternStatisticsEngine",
    "estimate_ovulation_day",
    "get_insights_config",
]
