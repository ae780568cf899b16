"""Configuration package."""

from exam_analytics.config.engine import (
    DEFAULT_READINESS_CONFIG,
    DEFAULT_RECOMMENDATION_CONFIG,
    DEFAULT_WEAKNESS_CONFIG,
    FactorWeights,
    PriorityWeights,
    ReadinessConfig,
    ReadinessThresholds,
    RecommendationConfig,
    ScoreThresholds,
    TimeHorizon,
    WeaknessConfig,
    merge_config,
    validate_config,
)
from exam_analytics.config.settings import (
    Settings,
    build_engine_configs,
    get_settings,
    load_yaml_config,
)

__all__ = [
    # Engine configuration
    "DEFAULT_READINESS_CONFIG",
    "DEFAULT_RECOMMENDATION_CONFIG",
    "DEFAULT_WEAKNESS_CONFIG",
    "FactorWeights",
    "PriorityWeights",
    "ReadinessConfig",
    "ReadinessThresholds",
    "RecommendationConfig",
    "ScoreThresholds",
    "TimeHorizon",
    "WeaknessConfig",
    "merge_config",
    "validate_config",
    # Host settings
    "Settings",
    "build_engine_configs",
    "get_settings",
    "load_yaml_config",
]
