"""
Unit tests for the analytics pipeline.

Tests cover:
- Concurrent and sequential runs producing the same report
- Engine injection
- create_pipeline wiring from settings and YAML tuning
"""

from pathlib import Path
from unittest.mock import patch

import pytest

import exam_analytics.services.pipeline as pipeline_module
from exam_analytics.config import ReadinessConfig, Settings
from exam_analytics.enums import Level, ReadinessLevel
from exam_analytics.errors import ConfigurationError, MissingAnalyticsError
from exam_analytics.services import (
    AnalyticsPipeline,
    AnalyticsReport,
    ReadinessEngine,
    create_pipeline,
)
from tests.conftest import NOW, make_progress


def _write_yaml(tmp_path: Path, content: str) -> str:
    path = tmp_path / "analytics.yaml"
    path.write_text(content)
    return str(path)


# ============================================================================
# Running
# ============================================================================


class TestAnalyticsPipeline:
    """Tests for the pipeline orchestrator."""

    @pytest.mark.asyncio
    async def test_run_matches_run_sync(self, struggling_learner):
        progress, sessions = struggling_learner
        pipeline = AnalyticsPipeline()

        concurrent = await pipeline.run(progress, sessions, Level.B2, now=NOW)
        sequential = pipeline.run_sync(progress, sessions, Level.B2, now=NOW)

        assert isinstance(concurrent, AnalyticsReport)
        assert concurrent.model_dump() == sequential.model_dump()

    @pytest.mark.asyncio
    async def test_report_contents(self, struggling_learner):
        progress, sessions = struggling_learner
        report = await AnalyticsPipeline().run(progress, sessions, now=NOW)

        assert report.user_id == "user-1"
        assert report.generated_at == NOW
        assert report.readiness.level == ReadinessLevel.POOR
        assert report.weaknesses.critical_weaknesses
        assert report.recommendations.study_plan.duration == 12
        assert report.recommendations.metadata.generated_at == NOW

    def test_report_serializes_to_json(self, excellent_learner):
        report = AnalyticsPipeline().run_sync(*excellent_learner, now=NOW)
        data = report.model_dump(mode="json")

        assert data["readiness"]["level"] == "excellent"
        assert data["generated_at"].startswith("2024-06-01T12:00:00")

    @pytest.mark.asyncio
    async def test_missing_analytics_fails_fast(self):
        with pytest.raises(MissingAnalyticsError):
            await AnalyticsPipeline().run(make_progress(with_analytics=False), [], now=NOW)

    def test_injected_engine_is_used(self, excellent_learner):
        strict = ReadinessEngine(
            ReadinessConfig(thresholds={"excellent": 0.99, "good": 0.98, "fair": 0.97})
        )
        report = AnalyticsPipeline(readiness_engine=strict).run_sync(
            *excellent_learner, now=NOW
        )

        assert report.readiness.level == ReadinessLevel.POOR
        assert report.recommendations.summary.primary_goal == "Build foundation"


# ============================================================================
# Factory
# ============================================================================


class TestCreatePipeline:
    """Tests for create_pipeline."""

    def test_defaults_without_config_file(self):
        pipeline = create_pipeline(Settings(CONFIG_PATH=None))

        assert pipeline.readiness_engine.get_config() == ReadinessConfig()
        assert pipeline.recommendation_engine.get_config().algorithm_version == "2.1.0"

    def test_yaml_tuning_applied(self, tmp_path):
        path = _write_yaml(
            tmp_path,
            "readiness:\n"
            "  minimum_sessions: 8\n"
            "weakness:\n"
            "  score_thresholds: {critical: 30}\n"
            "recommendations:\n"
            "  max_recommendations: 5\n",
        )
        pipeline = create_pipeline(Settings(CONFIG_PATH=path))

        assert pipeline.readiness_engine.get_config().minimum_sessions == 8
        thresholds = pipeline.weakness_engine.get_config().score_thresholds
        assert (thresholds.critical, thresholds.moderate) == (30.0, 60.0)
        assert pipeline.recommendation_engine.get_config().max_recommendations == 5

    def test_settings_version_applied(self):
        pipeline = create_pipeline(Settings(ALGORITHM_VERSION="2.2.0-beta"))
        assert pipeline.recommendation_engine.get_config().algorithm_version == "2.2.0-beta"

    def test_yaml_version_wins_over_settings(self, tmp_path):
        path = _write_yaml(tmp_path, "recommendations:\n  algorithm_version: '9.9'\n")
        pipeline = create_pipeline(Settings(CONFIG_PATH=path, ALGORITHM_VERSION="2.2.0"))
        assert pipeline.recommendation_engine.get_config().algorithm_version == "9.9"

    def test_invalid_tuning_rejected(self, tmp_path):
        path = _write_yaml(tmp_path, "recommendations:\n  max_recommendations: 0\n")
        with pytest.raises(ConfigurationError):
            create_pipeline(Settings(CONFIG_PATH=path))

    def test_uses_cached_settings_by_default(self):
        with patch.object(
            pipeline_module, "get_settings", return_value=Settings(ALGORITHM_VERSION="from-env")
        ) as mock_settings:
            pipeline = create_pipeline()

        mock_settings.assert_called_once()
        assert pipeline.recommendation_engine.get_config().algorithm_version == "from-env"

    def test_yaml_loaded_from_settings_path(self):
        tuning = {"weakness": {"min_sessions_for_analysis": 6}}
        with patch.object(pipeline_module, "load_yaml_config", return_value=tuning) as mock_load:
            pipeline = create_pipeline(Settings(CONFIG_PATH="/etc/analytics.yaml"))

        mock_load.assert_called_once_with("/etc/analytics.yaml")
        assert pipeline.weakness_engine.get_config().min_sessions_for_analysis == 6
