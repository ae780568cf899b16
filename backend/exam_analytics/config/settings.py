"""
Host Configuration

Settings for the application that embeds the analytics engine. The engines
never read environment variables or files; the host loads settings and an
optional YAML tuning file here and passes explicit configuration objects to
the engines.

Usage:
    from exam_analytics.config import get_settings, load_yaml_config

    settings = get_settings()
    configs = build_engine_configs(load_yaml_config(settings.CONFIG_PATH))

Environment Variables:
    ANALYTICS_LOG_LEVEL - Logging level for host scripts (default: INFO)
    ANALYTICS_ALGORITHM_VERSION - Version stamped on recommendations (default: 2.1.0)
    ANALYTICS_CONFIG_PATH - Optional YAML tuning file (default: unset)

YAML layout:
    readiness:
      minimum_sessions: 5
      weights: {overall_score: 0.35, consistency: 0.20}
    weakness:
      score_thresholds: {critical: 40, moderate: 60, slight: 75}
    recommendations:
      max_recommendations: 15
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings

from exam_analytics.config.engine import (
    DEFAULT_READINESS_CONFIG,
    DEFAULT_RECOMMENDATION_CONFIG,
    DEFAULT_WEAKNESS_CONFIG,
    ReadinessConfig,
    RecommendationConfig,
    WeaknessConfig,
    merge_config,
    validate_config,
)
from exam_analytics.errors import ConfigurationError

logger = logging.getLogger(__name__)

YAML_SECTIONS = ("readiness", "weakness", "recommendations")


class Settings(BaseSettings):
    """Host settings loaded from environment variables."""

    LOG_LEVEL: str = "INFO"
    ALGORITHM_VERSION: str = "2.1.0"
    CONFIG_PATH: Optional[str] = None

    class Config:
        env_prefix = "ANALYTICS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_yaml_config(path: Optional[Union[str, Path]]) -> dict[str, Any]:
    """
    Load engine tuning from a YAML file.

    Args:
        path: YAML file path. None or a missing file yields an empty dict.

    Returns:
        Parsed mapping (possibly empty).

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Analytics config file not found: {config_path}")
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {config_path}: {e}", details={"path": str(config_path)}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Analytics config must be a mapping, got {type(data).__name__}",
            details={"path": str(config_path)},
        )
    return data


def build_engine_configs(
    yaml_dict: Optional[dict[str, Any]] = None,
) -> tuple[ReadinessConfig, WeaknessConfig, RecommendationConfig]:
    """
    Turn a YAML tuning mapping into validated engine configurations.

    Missing sections fall back to the documented defaults.

    Args:
        yaml_dict: Mapping with optional readiness/weakness/recommendations
            sections.

    Returns:
        (readiness, weakness, recommendation) configurations.

    Raises:
        ConfigurationError: On unknown sections, unknown fields, wrong types
            or tuning rejected by validate_config.
    """
    yaml_dict = yaml_dict or {}
    unknown = sorted(set(yaml_dict) - set(YAML_SECTIONS))
    if unknown:
        raise ConfigurationError(
            f"Unknown analytics config sections: {', '.join(unknown)}",
            details={"sections": unknown},
        )

    defaults = (
        DEFAULT_READINESS_CONFIG,
        DEFAULT_WEAKNESS_CONFIG,
        DEFAULT_RECOMMENDATION_CONFIG,
    )
    configs = []
    for section, default in zip(YAML_SECTIONS, defaults):
        overrides = yaml_dict.get(section) or {}
        try:
            config = merge_config(default, overrides)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid '{section}' analytics config: {e}",
                details={"section": section},
            ) from e
        configs.append(validate_config(config))

    readiness, weakness, recommendations = configs
    logger.debug(f"Built engine configs from sections: {sorted(yaml_dict)}")
    return readiness, weakness, recommendations
