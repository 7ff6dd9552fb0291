"""Load, validate, and hot-reload the Heartline insights configuration.

The config lives in ``insights_config.yaml`` alongside this module.  At
startup it is loaded once and cached.  Call ``reload_insights_config()`` to
re-read from disk after an update without restarting.

Usage::

    from src.insights.config_loader import get_insights_config

    config = get_insights_config()
    config.notifications.staleness_days      # 7
    config.hormonal_window.window_days       # 3
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("heartline.insights.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "insights_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleSettings:
    """Cycle-phase estimation settings."""

    default_cycle_length: int = 28
    min_cycle_length: int = 21
    max_cycle_length: int = 40
    menstrual_days: int = 5
    ovulation_half_width: int = 2
    pms_buffer_days: int = 5

    def clamp(self, cycle_length: int) -> int:
        return min(max(cycle_length, self.min_cycle_length), self.max_cycle_length)


@dataclass
class HormonalWindowSettings:
    """Post-intimacy alert window."""

    window_days: int = 3


@dataclass
class CategorizationSettings:
    """Thresholds for the good / bad / neutral candidate buckets."""

    good_score_min: float = 70.0
    good_chemistry_min: float = 4.0
    bad_score_below: float = 50.0
    bad_red_flags_min: int = 3


@dataclass
class NotificationSettings:
    """Thresholds for the notification feed rules."""

    staleness_days: int = 7
    red_flag_warning_min: int = 2
    high_compatibility_min: float = 80.0
    advice_preview_chars: int = 60


@dataclass
class PatternSettings:
    """Top-N limits and goals for pattern statistics."""

    top_flags: int = 5
    top_interaction_types: int = 6
    top_date_types: int = 5
    top_meeting_sources: int = 5
    no_contact_goal_days: int = 30


@dataclass
class InsightsConfig:
    """Complete, validated insights configuration.

    This is the single in-memory representation of insights_config.yaml.
    Every engine component reads its thresholds from this object.

    Attributes:
        version:         Config schema version string.
        cycle:           Cycle-phase estimation settings.
        hormonal_window: Post-intimacy alert window.
        categorization:  Candidate bucket thresholds.
        notifications:   Notification rule thresholds.
        patterns:        Pattern statistics limits.
    """

    version: str = "1.0"
    cycle: CycleSettings = field(default_factory=CycleSettings)
    hormonal_window: HormonalWindowSettings = field(default_factory=HormonalWindowSettings)
    categorization: CategorizationSettings = field(default_factory=CategorizationSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    patterns: PatternSettings = field(default_factory=PatternSettings)
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when insights_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Insights config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> InsightsConfig:
    """Validate the raw YAML dict and construct an InsightsConfig.

    Missing keys fall back to the dataclass defaults; every present key must
    be a non-negative number.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated InsightsConfig instance.

    Raises:
        ConfigValidationError: If any value is invalid.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _number(section: str, values: dict, key: str, default: Any, cast: type) -> Any:
        if key not in values:
            return default
        try:
            number = cast(values[key])
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be a number, got {values[key]!r}")
            return default
        if number < 0:
            errors.append(f"{section}.{key} = {number} must not be negative")
        return number

    def _build(section: str, cls: type) -> Any:
        values = _section(section)
        defaults = cls()
        kwargs = {}
        for name, default in vars(defaults).items():
            kwargs[name] = _number(section, values, name, default, type(default))
        unknown = set(values) - set(kwargs)
        for key in sorted(unknown):
            logger.warning("Ignoring unknown insights config key %s.%s", section, key)
        return cls(**kwargs)

    version = str(raw.get("version", "1.0"))
    cycle = _build("cycle", CycleSettings)
    hormonal_window = _build("hormonal_window", HormonalWindowSettings)
    categorization = _build("categorization", CategorizationSettings)
    notifications = _build("notifications", NotificationSettings)
    patterns = _build("patterns", PatternSettings)

    # ── Cross-field checks ──
    if cycle.min_cycle_length < 1:
        errors.append("cycle.min_cycle_length must be at least 1")
    if cycle.min_cycle_length > cycle.max_cycle_length:
        errors.append(
            f"cycle.min_cycle_length ({cycle.min_cycle_length}) exceeds "
            f"cycle.max_cycle_length ({cycle.max_cycle_length})"
        )
    elif not (cycle.min_cycle_length <= cycle.default_cycle_length <= cycle.max_cycle_length):
        errors.append(
            f"cycle.default_cycle_length ({cycle.default_cycle_length}) is outside "
            f"[{cycle.min_cycle_length}, {cycle.max_cycle_length}]"
        )

    if errors:
        raise ConfigValidationError(
            f"insights_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return InsightsConfig(
        version=version,
        cycle=cycle,
        hormonal_window=hormonal_window,
        categorization=categorization,
        notifications=notifications,
        patterns=patterns,
        _raw=raw,
    )


def load_insights_config(path: Path | None = None) -> InsightsConfig:
    """Load and validate the insights config from disk.

    Args:
        path: Override path to YAML. Uses the bundled insights_config.yaml by default.

    Returns:
        Validated InsightsConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded insights config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: InsightsConfig | None = None
_config_lock = threading.Lock()


def get_insights_config() -> InsightsConfig:
    """Return the global InsightsConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_insights_config()`` to refresh after YAML changes.

    Returns:
        The current InsightsConfig instance.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_insights_config(_settings_config_path())
    return _config


def reload_insights_config(path: Path | None = None) -> InsightsConfig:
    """Reload the insights config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Args:
        path: Override path to YAML. Defaults to the configured or bundled file.

    Returns:
        The newly loaded InsightsConfig.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_insights_config(path or _settings_config_path())  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded insights config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config


def _settings_config_path() -> Path | None:
    from src.config import get_settings

    override = get_settings().insights_config_path
    return Path(override) if override else None
