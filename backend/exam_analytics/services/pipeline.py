"""
Analytics Pipeline Orchestrator

Runs the three engines for one learner and bundles their outputs.

Pipeline stages:
1. Readiness Scoring and Weakness Detection - independent, run concurrently
2. Recommendation Synthesis - depends on both outputs

The engines are synchronous and CPU-bound; the async entry point runs the
first stage in worker threads so a host event loop stays responsive.
A deadline, if needed, is imposed by the caller around the whole call.

Usage:
    from exam_analytics.services.pipeline import create_pipeline

    pipeline = create_pipeline()
    report = await pipeline.run(progress, sessions, target_level=Level.B2)
    print(report.readiness.level, len(report.weaknesses.critical_weaknesses))

    # Without an event loop
    report = pipeline.run_sync(progress, sessions)
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from exam_analytics.config.engine import merge_config
from exam_analytics.config.settings import (
    Settings,
    build_engine_configs,
    get_settings,
    load_yaml_config,
)
from exam_analytics.enums.exam import Level
from exam_analytics.models.base import ResultModel, as_utc
from exam_analytics.models.exam import ExamSession, UserPreferences, UserProgress
from exam_analytics.models.readiness import ReadinessAssessment
from exam_analytics.models.recommendations import StudyRecommendations
from exam_analytics.models.weakness import WeaknessAnalysis
from exam_analytics.services.readiness import ReadinessEngine, require_analytics
from exam_analytics.services.recommendation_engine import StudyRecommendationEngine
from exam_analytics.services.weakness_detection import WeaknessDetectionEngine

logger = logging.getLogger(__name__)


class AnalyticsReport(ResultModel):
    """Outputs of one full analytics run."""

    user_id: str
    generated_at: datetime
    readiness: ReadinessAssessment
    weaknesses: WeaknessAnalysis
    recommendations: StudyRecommendations


class AnalyticsPipeline:
    """
    Wires readiness, weakness and recommendation engines together.

    The engines are injected so hosts can run several pipelines with
    different tuning side by side.
    """

    def __init__(
        self,
        readiness_engine: Optional[ReadinessEngine] = None,
        weakness_engine: Optional[WeaknessDetectionEngine] = None,
        recommendation_engine: Optional[StudyRecommendationEngine] = None,
    ):
        self.readiness_engine = readiness_engine or ReadinessEngine()
        self.weakness_engine = weakness_engine or WeaknessDetectionEngine()
        self.recommendation_engine = recommendation_engine or StudyRecommendationEngine()

    async def run(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        target_level: Optional[Level] = None,
        preferences: Optional[UserPreferences] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        """
        Run the full pipeline, scoring and detection concurrently.

        Args:
            progress: Learner progress with a populated analytics aggregate.
            sessions: Session history.
            target_level: Optional level calibrating the study-hours estimate.
            preferences: Optional user preferences for synthesis.
            now: Reference time shared by every stage.

        Returns:
            AnalyticsReport with all three outputs.

        Raises:
            MissingAnalyticsError: If ``progress.analytics`` is None.
        """
        require_analytics(progress)
        now = as_utc(now) if now else datetime.now(timezone.utc)
        start_time = time.time()

        readiness, weaknesses = await asyncio.gather(
            asyncio.to_thread(
                self.readiness_engine.calculate_readiness,
                progress,
                sessions,
                target_level,
                now=now,
            ),
            asyncio.to_thread(
                self.weakness_engine.analyze_weaknesses,
                progress,
                sessions,
                now=now,
            ),
        )
        report = self._synthesize(progress, sessions, readiness, weaknesses, preferences, now)

        logger.info(
            f"Analytics pipeline completed for user {progress.user_id} "
            f"in {time.time() - start_time:.3f}s"
        )
        return report

    def run_sync(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        target_level: Optional[Level] = None,
        preferences: Optional[UserPreferences] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        """Sequential equivalent of ``run``."""
        require_analytics(progress)
        now = as_utc(now) if now else datetime.now(timezone.utc)

        readiness = self.readiness_engine.calculate_readiness(
            progress, sessions, target_level, now=now
        )
        weaknesses = self.weakness_engine.analyze_weaknesses(progress, sessions, now=now)
        return self._synthesize(progress, sessions, readiness, weaknesses, preferences, now)

    def _synthesize(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        readiness: ReadinessAssessment,
        weaknesses: WeaknessAnalysis,
        preferences: Optional[UserPreferences],
        now: datetime,
    ) -> AnalyticsReport:
        recommendations = self.recommendation_engine.generate_recommendations(
            progress, sessions, weaknesses, readiness, preferences, now=now
        )
        return AnalyticsReport(
            user_id=progress.user_id,
            generated_at=now,
            readiness=readiness,
            weaknesses=weaknesses,
            recommendations=recommendations,
        )


def create_pipeline(settings: Optional[Settings] = None) -> AnalyticsPipeline:
    """
    Build a pipeline from host settings and the optional YAML tuning file.

    ``Settings.ALGORITHM_VERSION`` overrides the recommendation config's
    version unless the YAML file sets one explicitly.

    Raises:
        ConfigurationError: If the YAML tuning is invalid.
    """
    settings = settings or get_settings()
    yaml_dict = load_yaml_config(settings.CONFIG_PATH)
    readiness_config, weakness_config, recommendation_config = build_engine_configs(yaml_dict)

    if "algorithm_version" not in (yaml_dict.get("recommendations") or {}):
        recommendation_config = merge_config(
            recommendation_config, {"algorithm_version": settings.ALGORITHM_VERSION}
        )

    return AnalyticsPipeline(
        readiness_engine=ReadinessEngine(readiness_config),
        weakness_engine=WeaknessDetectionEngine(weakness_config),
        recommendation_engine=StudyRecommendationEngine(recommendation_config),
    )
