"""
Study Recommendation Engine

Synthesizes readiness and weakness outputs into a personalized
recommendation bundle.

Pipeline:
1. Run every registered rule against a RecommendationContext
2. Filter by confidence threshold and user preferences
3. Rank by priority weight, then relevance; truncate to max_recommendations
4. Partition into immediate / short-term / long-term buckets
5. Build the study plan, adaptive schedule, curated resources,
   motivational insights and progress prediction
6. Summarize

Usage:
    from exam_analytics.services.recommendation_engine import StudyRecommendationEngine

    engine = StudyRecommendationEngine()
    bundle = engine.generate_recommendations(
        progress, sessions, weakness_analysis, readiness, preferences
    )

    # Extend the rule set on one instance
    engine.register_rule(exam_strategy_rule)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from exam_analytics.config.engine import (
    DEFAULT_RECOMMENDATION_CONFIG,
    RecommendationConfig,
    merge_config,
)
from exam_analytics.enums.analytics import (
    ReadinessLevel,
    RecommendationDifficulty,
    RecommendationPriority,
    RecommendationType,
)
from exam_analytics.models.base import as_utc
from exam_analytics.models.exam import ExamSession, UserPreferences, UserProgress
from exam_analytics.models.readiness import ReadinessAssessment
from exam_analytics.models.recommendations import (
    PersonalizedStudyPlan,
    RecommendationSummary,
    RecommendationsMetadata,
    StudyRecommendation,
    StudyRecommendations,
)
from exam_analytics.models.weakness import WeaknessAnalysis
from exam_analytics.services.progress_prediction import predict_progress
from exam_analytics.services.readiness import require_analytics
from exam_analytics.services.recommendation_rules import (
    DEFAULT_RULES,
    RecommendationContext,
    RecommendationRule,
)
from exam_analytics.services.resource_curation import curate_resources
from exam_analytics.services.statistics import completed_sessions, mean
from exam_analytics.services.study_plan import (
    build_adaptive_schedule,
    build_study_plan,
    motivational_insights,
)

logger = logging.getLogger(__name__)

PRIORITY_TAGS = {priority.value for priority in RecommendationPriority}

PRIMARY_GOALS = {
    ReadinessLevel.POOR: "Build foundation",
    ReadinessLevel.FAIR: "Improve consistency",
    ReadinessLevel.GOOD: "Achieve mastery",
    ReadinessLevel.EXCELLENT: "Maintain excellence",
}

MAX_FOCUS_AREAS = 5
REFRESH_INTERVAL_DAYS = 7


class StudyRecommendationEngine:
    """
    Rule-driven recommendation synthesizer bound to one configuration.
    """

    def __init__(
        self,
        config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
        rules: Sequence[RecommendationRule] = DEFAULT_RULES,
    ):
        self._config = config
        self._rules: list[RecommendationRule] = list(rules)

    def get_config(self) -> RecommendationConfig:
        return self._config

    def update_config(self, **overrides) -> RecommendationConfig:
        """Replace this instance's configuration with an updated copy."""
        self._config = merge_config(self._config, overrides)
        return self._config

    @property
    def rules(self) -> tuple[RecommendationRule, ...]:
        return tuple(self._rules)

    def register_rule(self, rule: RecommendationRule) -> None:
        """Append a rule to this instance; it runs after the existing ones."""
        self._rules.append(rule)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate_recommendations(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        weakness_analysis: WeaknessAnalysis,
        readiness: ReadinessAssessment,
        preferences: Optional[UserPreferences] = None,
        *,
        now: Optional[datetime] = None,
    ) -> StudyRecommendations:
        """
        Generate the full recommendation bundle.

        Args:
            progress: Learner progress with a populated analytics aggregate.
            sessions: Session history (any order; incomplete ones ignored).
            weakness_analysis: Output of weakness detection.
            readiness: Output of readiness scoring.
            preferences: Optional scheduling and filtering preferences.
            now: Reference time (defaults to current UTC time).

        Returns:
            StudyRecommendations bundle.

        Raises:
            MissingAnalyticsError: If ``progress.analytics`` is None.
        """
        analytics = require_analytics(progress)
        now = as_utc(now) if now else datetime.now(timezone.utc)
        completed = completed_sessions(sessions)

        context = RecommendationContext(
            progress=progress,
            analytics=analytics,
            sessions=tuple(completed),
            weakness_analysis=weakness_analysis,
            readiness=readiness,
            preferences=preferences,
            config=self._config,
            now=now,
        )

        candidates = self._run_rules(context)
        ranked = self._filter_and_rank(candidates, preferences)
        immediate, short_term, long_term = self._partition(ranked, now)
        logger.debug(
            f"Recommendations for {progress.user_id}: {len(candidates)} candidates, "
            f"{len(ranked)} kept"
        )

        study_plan = build_study_plan(progress, analytics, weakness_analysis, readiness)

        bundle = StudyRecommendations(
            summary=self._summary(immediate, short_term, long_term, study_plan, readiness),
            immediate=immediate,
            short_term=short_term,
            long_term=long_term,
            study_plan=study_plan,
            adaptive_schedule=build_adaptive_schedule(preferences),
            resources=curate_resources(ranked, analytics.component_analysis.keys()),
            motivational_insights=motivational_insights(progress, completed, readiness),
            progress=predict_progress(analytics, study_plan),
            metadata=RecommendationsMetadata(
                generated_at=now,
                based_on_sessions=len(sessions),
                data_quality=readiness.confidence,
                algorithm_version=self._config.algorithm_version,
                personalization_level=0.9 if preferences is not None else 0.6,
                refresh_recommended=now + timedelta(days=REFRESH_INTERVAL_DAYS),
            ),
        )

        logger.info(
            f"Generated {bundle.summary.total_recommendations} recommendations for user "
            f"{progress.user_id} (immediate={len(immediate)}, short_term={len(short_term)}, "
            f"long_term={len(long_term)}, plan={study_plan.duration}w)"
        )
        return bundle

    # ------------------------------------------------------------------
    # Candidate selection
    # ------------------------------------------------------------------

    def _run_rules(self, context: RecommendationContext) -> list[StudyRecommendation]:
        candidates: list[StudyRecommendation] = []
        for rule in self._rules:
            produced = rule(context)
            logger.debug(f"Rule {getattr(rule, '__name__', rule)} produced {len(produced)}")
            candidates.extend(produced)
        return candidates

    def _filter_and_rank(
        self,
        recommendations: list[StudyRecommendation],
        preferences: Optional[UserPreferences],
    ) -> list[StudyRecommendation]:
        """
        Drop low-confidence and preference-violating items, rank, deduplicate.

        Ranking is by priority weight, then relevance score, both
        descending; ties keep rule order. Items sharing a type and title
        collapse to the highest-ranked one.
        """
        kept = [
            rec
            for rec in recommendations
            if rec.confidence >= self._config.confidence_threshold
        ]
        if preferences is not None:
            kept = [rec for rec in kept if self._matches_preferences(rec, preferences)]

        weights = self._config.priority_weights
        ranked = sorted(
            kept,
            key=lambda rec: (
                -weights.weight(rec.priority),
                -rec.metadata.relevance_score,
            ),
        )
        unique: dict[tuple[RecommendationType, str], StudyRecommendation] = {}
        for rec in ranked:
            unique.setdefault((rec.type, rec.title), rec)

        deduplicated = list(unique.values())
        if len(deduplicated) < len(ranked):
            logger.debug(f"Dropped {len(ranked) - len(deduplicated)} duplicate recommendations")
        return deduplicated[: self._config.max_recommendations]

    @staticmethod
    def _matches_preferences(
        recommendation: StudyRecommendation, preferences: UserPreferences
    ) -> bool:
        estimate = recommendation.time_estimate
        if (
            preferences.max_weekly_hours is not None
            and estimate.frequency == "weekly"
            and estimate.optimal > preferences.max_weekly_hours
        ):
            return False
        if (
            preferences.difficulty_preference == RecommendationDifficulty.BEGINNER
            and recommendation.difficulty == RecommendationDifficulty.ADVANCED
        ):
            return False
        return True

    def _partition(
        self, recommendations: list[StudyRecommendation], now: datetime
    ) -> tuple[
        list[StudyRecommendation], list[StudyRecommendation], list[StudyRecommendation]
    ]:
        """Split into immediate, short-term and long-term; every item lands in one bucket."""
        horizon = self._config.time_horizon
        immediate, short_term, long_term = [], [], []

        for rec in recommendations:
            days_valid = (rec.valid_until - now).total_seconds() / 86400
            if rec.priority == RecommendationPriority.CRITICAL or days_valid <= horizon.immediate:
                immediate.append(rec)
            elif rec.priority == RecommendationPriority.HIGH and days_valid <= horizon.short_term:
                short_term.append(rec)
            else:
                long_term.append(rec)

        return immediate, short_term, long_term

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _summary(
        self,
        immediate: list[StudyRecommendation],
        short_term: list[StudyRecommendation],
        long_term: list[StudyRecommendation],
        study_plan: PersonalizedStudyPlan,
        readiness: ReadinessAssessment,
    ) -> RecommendationSummary:
        weekly_hours = mean(
            mean(goal.practice_hours for goal in phase.weekly_goals)
            for phase in study_plan.phases
        )

        focus_areas: list[str] = []
        for rec in [*immediate, *short_term]:
            for tag in rec.tags:
                if tag not in PRIORITY_TAGS and tag not in focus_areas:
                    focus_areas.append(tag)

        return RecommendationSummary(
            total_recommendations=len(immediate) + len(short_term) + len(long_term),
            critical_actions=sum(
                1 for rec in immediate if rec.priority == RecommendationPriority.CRITICAL
            ),
            estimated_weekly_hours=round(weekly_hours),
            focus_areas=focus_areas[:MAX_FOCUS_AREAS],
            primary_goal=PRIMARY_GOALS[readiness.level],
            confidence_level=readiness.confidence,
            time_to_goal=f"{study_plan.duration} weeks",
        )
