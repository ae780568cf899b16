"""
Engine Configuration

Immutable, injectable tuning for the three analytics engines. Every engine
receives its configuration at construction; there is no module-level mutable
state, so several engines with different tuning can coexist in one process
(e.g. when A/B testing scoring weights).

Usage:
    from exam_analytics.config import DEFAULT_READINESS_CONFIG, validate_config

    config = DEFAULT_READINESS_CONFIG.model_copy(
        update={"minimum_sessions": 8}
    )
    validate_config(config)  # raises ConfigurationError on bad tuning
    engine = ReadinessEngine(config=config)

Validation:
    The engines never validate tuning themselves. Hosts call
    ``validate_config`` at startup (``build_engine_configs`` does so for
    YAML-supplied tuning).
"""

from typing import Any, Optional, TypeVar, Union

from pydantic import Field

from exam_analytics.enums.analytics import RecommendationPriority
from exam_analytics.enums.exam import Level
from exam_analytics.errors import ConfigurationError
from exam_analytics.models.base import ConfigModel

ConfigT = TypeVar("ConfigT", bound=ConfigModel)


# ===========================================
# Readiness Scoring
# ===========================================


class FactorWeights(ConfigModel):
    """Weights of the six readiness factors (normalized by their sum)."""

    overall_score: float = 0.35
    consistency: float = 0.20
    improvement: float = 0.15
    session_frequency: float = 0.10
    weakness_recovery: float = 0.10
    time_management: float = 0.10


class ReadinessThresholds(ConfigModel):
    """Minimum final score for each readiness level; below ``fair`` is poor."""

    excellent: float = 0.85
    good: float = 0.70
    fair: float = 0.55


class ReadinessConfig(ConfigModel):
    """Tuning for readiness scoring."""

    weights: FactorWeights = Field(default_factory=FactorWeights)
    thresholds: ReadinessThresholds = Field(default_factory=ReadinessThresholds)
    minimum_sessions: int = 5
    recency_window_days: float = 14.0
    optimal_session_gap_days: float = 2.5
    max_gap_deviation_days: float = 7.0
    improvement_slope_range: float = Field(
        10.0, description="Assumed +/- score points per session"
    )
    time_variation_ceiling: float = Field(
        0.5, description="Duration CV at which time management scores 0"
    )
    default_learning_velocity: float = Field(
        0.05, description="Readiness points per study hour"
    )
    exam_conservatism: float = 0.85
    target_readiness: tuple[tuple[Level, float], ...] = (
        (Level.C2, 0.95),
        (Level.C1, 0.90),
        (Level.B2, 0.85),
        (Level.B1, 0.75),
        (Level.A2, 0.65),
        (Level.A1, 0.55),
    )
    default_target_readiness: float = 0.55

    def target_for(self, level: Optional[Level]) -> float:
        """Target readiness for an exam level, or the default when unknown."""
        for candidate, target in self.target_readiness:
            if candidate == level:
                return target
        return self.default_target_readiness


# ===========================================
# Weakness Detection
# ===========================================


class ScoreThresholds(ConfigModel):
    """Score (0-100) below which a weakness reaches each severity."""

    critical: float = 40.0
    moderate: float = 60.0
    slight: float = 75.0


class WeaknessConfig(ConfigModel):
    """Tuning for weakness detection."""

    min_sessions_for_analysis: int = 3
    score_thresholds: ScoreThresholds = Field(default_factory=ScoreThresholds)
    consistency_threshold: float = Field(
        0.3, description="Duration CV above which timing is inconsistent"
    )
    critical_time_variation: float = 0.5
    low_consistency: float = 0.6
    critical_consistency: float = 0.3
    stagnation_window: int = 10
    stagnation_slope: float = Field(
        -1.0, description="Slope (points per session) below which progress stagnates"
    )
    min_questions_per_pattern: int = 5
    min_error_occurrences: int = 3
    heuristic_low_score: float = 60.0
    recency_window_days: float = 30.0
    volume_target_sessions: int = 20
    min_plan_weeks: int = 4
    max_plan_weeks: int = 12


# ===========================================
# Recommendation Synthesis
# ===========================================


class PriorityWeights(ConfigModel):
    """Ranking weight per recommendation priority."""

    critical: float = 1.0
    high: float = 0.8
    medium: float = 0.6
    low: float = 0.4

    def weight(self, priority: RecommendationPriority) -> float:
        return getattr(self, priority.value)


class TimeHorizon(ConfigModel):
    """Bucket boundaries in days."""

    immediate: int = 7
    short_term: int = 28


class RecommendationConfig(ConfigModel):
    """Tuning for recommendation synthesis."""

    max_recommendations: int = 15
    priority_weights: PriorityWeights = Field(default_factory=PriorityWeights)
    time_horizon: TimeHorizon = Field(default_factory=TimeHorizon)
    confidence_threshold: float = 0.6
    inactivity_days: float = 7.0
    time_variation_threshold: float = 0.3
    component_focus_score: float = 70.0
    resource_score: float = 75.0
    max_moderate_plans: int = 3
    algorithm_version: str = "2.1.0"


DEFAULT_READINESS_CONFIG = ReadinessConfig()
DEFAULT_WEAKNESS_CONFIG = WeaknessConfig()
DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()

EngineConfig = Union[ReadinessConfig, WeaknessConfig, RecommendationConfig]


# ===========================================
# Updates
# ===========================================


def merge_config(config: ConfigT, overrides: dict[str, Any]) -> ConfigT:
    """
    Build a new configuration from an existing one plus overrides.

    Nested groups accept either a model instance (replaces the group) or a
    plain dict (merged into the current group). Unknown keys are rejected
    by pydantic.

    Args:
        config: Current configuration.
        overrides: Field values to change.

    Returns:
        New validated configuration of the same type.
    """
    data = config.model_dump()
    for key, value in overrides.items():
        current = getattr(config, key, None)
        if isinstance(value, dict) and isinstance(current, ConfigModel):
            data[key] = {**current.model_dump(), **value}
        elif isinstance(value, ConfigModel):
            data[key] = value.model_dump()
        else:
            data[key] = value
    return type(config).model_validate(data)


# ===========================================
# Validation Hook
# ===========================================


def _check_weights(name: str, weights: dict[str, float], problems: list[str]) -> None:
    negative = [key for key, value in weights.items() if value < 0]
    if negative:
        problems.append(f"{name} must be non-negative: {', '.join(negative)}")
    elif sum(weights.values()) <= 0:
        problems.append(f"{name} must not all be zero")


def _readiness_problems(config: ReadinessConfig) -> list[str]:
    problems: list[str] = []
    _check_weights("weights", config.weights.model_dump(), problems)

    t = config.thresholds
    if not 1.0 >= t.excellent > t.good > t.fair >= 0.0:
        problems.append("thresholds must satisfy 1 >= excellent > good > fair >= 0")
    if config.minimum_sessions <= 0:
        problems.append("minimum_sessions must be positive")
    for field in (
        "recency_window_days",
        "max_gap_deviation_days",
        "improvement_slope_range",
        "time_variation_ceiling",
        "default_learning_velocity",
    ):
        if getattr(config, field) <= 0:
            problems.append(f"{field} must be positive")
    if not 0.0 < config.exam_conservatism <= 1.0:
        problems.append("exam_conservatism must be in (0, 1]")
    return problems


def _weakness_problems(config: WeaknessConfig) -> list[str]:
    problems: list[str] = []
    t = config.score_thresholds
    if not 0.0 <= t.critical < t.moderate < t.slight <= 100.0:
        problems.append(
            "score_thresholds must satisfy 0 <= critical < moderate < slight <= 100"
        )
    if config.critical_time_variation < config.consistency_threshold:
        problems.append("critical_time_variation must be >= consistency_threshold")
    if config.critical_consistency > config.low_consistency:
        problems.append("critical_consistency must be <= low_consistency")
    for field in (
        "min_sessions_for_analysis",
        "min_questions_per_pattern",
        "min_error_occurrences",
        "stagnation_window",
        "volume_target_sessions",
        "recency_window_days",
        "consistency_threshold",
    ):
        if getattr(config, field) <= 0:
            problems.append(f"{field} must be positive")
    if not 0 < config.min_plan_weeks <= config.max_plan_weeks:
        problems.append("plan weeks must satisfy 0 < min_plan_weeks <= max_plan_weeks")
    return problems


def _recommendation_problems(config: RecommendationConfig) -> list[str]:
    problems: list[str] = []
    _check_weights("priority_weights", config.priority_weights.model_dump(), problems)

    h = config.time_horizon
    if not 0 < h.immediate <= h.short_term:
        problems.append(
            "time_horizon must satisfy 0 < immediate <= short_term"
        )
    if config.max_recommendations <= 0:
        problems.append("max_recommendations must be positive")
    if not 0.0 <= config.confidence_threshold <= 1.0:
        problems.append("confidence_threshold must be in [0, 1]")
    if config.inactivity_days <= 0:
        problems.append("inactivity_days must be positive")
    if config.max_moderate_plans < 0:
        problems.append("max_moderate_plans must be non-negative")
    return problems


def validate_config(config: EngineConfig) -> EngineConfig:
    """
    Check an engine configuration for tuning mistakes.

    Catches negative or all-zero weights, unordered thresholds and
    non-positive horizons or limits. Not called by the engines themselves.

    Args:
        config: Readiness, weakness or recommendation configuration.

    Returns:
        The same configuration, for chaining.

    Raises:
        ConfigurationError: With every problem found listed in ``details``.
    """
    if isinstance(config, ReadinessConfig):
        problems = _readiness_problems(config)
    elif isinstance(config, WeaknessConfig):
        problems = _weakness_problems(config)
    elif isinstance(config, RecommendationConfig):
        problems = _recommendation_problems(config)
    else:
        raise ConfigurationError(
            f"Unsupported configuration type: {type(config).__name__}"
        )

    if problems:
        raise ConfigurationError(
            f"Invalid {type(config).__name__}: {'; '.join(problems)}",
            details={"config": type(config).__name__, "problems": problems},
        )
    return config
