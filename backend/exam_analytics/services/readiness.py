"""
Readiness Scoring Engine

Turns a learner's progress aggregate and completed-session history into a
calibrated exam-readiness assessment.

Readiness Calculation:
- Six factors, each normalized to [0, 1]: overall score, consistency,
  improvement trend, session frequency, weakness recovery, time management
- Weighted average of the factors (weights normalized by their sum)
- Data-quality discount: final = raw * (0.5 + 0.5 * sample_size_score),
  so sparse histories never report full readiness
- Level thresholds applied to the discounted score

Usage:
    from exam_analytics.services.readiness import ReadinessEngine

    engine = ReadinessEngine()
    assessment = engine.calculate_readiness(progress, sessions, Level.B2)

    # Tune one instance without affecting others
    engine.update_config(minimum_sessions=8)

Empty session histories still produce an assessment (neutral factors, low
confidence). Only a missing analytics aggregate raises.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from exam_analytics.config.engine import (
    DEFAULT_READINESS_CONFIG,
    ReadinessConfig,
    merge_config,
)
from exam_analytics.enums.analytics import (
    ReadinessLevel,
    ReadinessRecommendationType,
    RecommendationPriority,
)
from exam_analytics.enums.exam import ALL_COMPONENTS, Component, ComponentTrend, Level
from exam_analytics.errors import MissingAnalyticsError
from exam_analytics.models.base import as_utc
from exam_analytics.models.exam import (
    ComponentAnalysis,
    ExamSession,
    ProgressAnalytics,
    UserProgress,
)
from exam_analytics.models.readiness import (
    DataQualityMetrics,
    Milestone,
    ReadinessAssessment,
    ReadinessFactors,
    ReadinessRecommendation,
)
from exam_analytics.services.statistics import (
    clamp,
    coefficient_of_variation,
    component_score_history,
    completed_sessions,
    days_between,
    distinct_components,
    linear_regression_slope,
    mean,
    session_durations,
    session_intervals,
    session_scores,
)

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {
    RecommendationPriority.CRITICAL: 4,
    RecommendationPriority.HIGH: 3,
    RecommendationPriority.MEDIUM: 2,
    RecommendationPriority.LOW: 1,
}

TREND_ADJUSTMENT = {
    ComponentTrend.IMPROVING: 0.1,
    ComponentTrend.STABLE: 0.0,
    ComponentTrend.DECLINING: -0.1,
}


def require_analytics(progress: UserProgress) -> ProgressAnalytics:
    """
    Return the progress analytics aggregate or fail fast.

    Raises:
        MissingAnalyticsError: If ``progress.analytics`` is None.
    """
    if progress.analytics is None:
        raise MissingAnalyticsError(
            f"Progress record for user {progress.user_id} has no analytics aggregate",
            details={"user_id": progress.user_id, "course_id": progress.course_id},
        )
    return progress.analytics


class ReadinessEngine:
    """
    Stateless readiness scorer bound to one immutable configuration.
    """

    def __init__(self, config: ReadinessConfig = DEFAULT_READINESS_CONFIG):
        self._config = config

    def get_config(self) -> ReadinessConfig:
        return self._config

    def update_config(self, **overrides) -> ReadinessConfig:
        """Replace this instance's configuration with an updated copy."""
        self._config = merge_config(self._config, overrides)
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def calculate_readiness(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        target_level: Optional[Level] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ReadinessAssessment:
        """
        Calculate a readiness assessment.

        Args:
            progress: Learner progress with a populated analytics aggregate.
            sessions: Session history (any order; incomplete ones ignored).
            target_level: Optional level calibrating the study-hours estimate.
            now: Reference time (defaults to current UTC time).

        Returns:
            ReadinessAssessment value object.

        Raises:
            MissingAnalyticsError: If ``progress.analytics`` is None.
        """
        analytics = require_analytics(progress)
        now = as_utc(now) if now else datetime.now(timezone.utc)
        completed = completed_sessions(sessions)

        if not completed:
            logger.warning(
                f"No completed sessions for user {progress.user_id}; "
                "readiness uses neutral factors"
            )

        data_quality = self._assess_data_quality(progress, completed, now)
        factors = ReadinessFactors(
            overall_score=self._overall_score_factor(analytics),
            consistency=clamp(analytics.consistency_score),
            improvement=self._improvement_factor(completed),
            session_frequency=self._session_frequency_factor(completed),
            weakness_recovery=self._weakness_recovery_factor(analytics, completed),
            time_management=self._time_management_factor(completed),
        )
        logger.debug(f"Readiness factors for {progress.user_id}: {factors.model_dump()}")

        component_readiness = self._component_readiness(analytics.component_analysis)
        raw_score = self._weighted_score(factors)
        adjusted = raw_score * (0.5 + 0.5 * data_quality.consistency_score)
        level = self._determine_level(adjusted)

        estimated_exam_score = self._estimate_exam_score(raw_score, data_quality)
        study_hours = self._recommended_study_hours(raw_score, target_level, analytics)

        assessment = ReadinessAssessment(
            overall_score=round(clamp(adjusted), 2),
            confidence=data_quality.consistency_score,
            level=level,
            factors=factors,
            component_readiness=component_readiness,
            recommendations=self._recommendations(factors, component_readiness, level),
            estimated_exam_score=round(estimated_exam_score),
            study_hours_recommended=round(study_hours),
            next_milestones=self._milestones(raw_score),
            data_quality=data_quality,
            assessed_at=now,
        )

        logger.info(
            f"Readiness for user {progress.user_id}: {assessment.level.value} "
            f"(score={assessment.overall_score}, confidence={assessment.confidence:.2f}, "
            f"sessions={data_quality.session_count})"
        )
        return assessment

    # ------------------------------------------------------------------
    # Data quality
    # ------------------------------------------------------------------

    def _assess_data_quality(
        self,
        progress: UserProgress,
        sessions: list[ExamSession],
        now: datetime,
    ) -> DataQualityMetrics:
        session_count = len(sessions)
        time_span = (
            days_between(sessions[0].started_at, sessions[-1].started_at)
            if session_count > 1
            else 0.0
        )
        days_inactive = max(0.0, days_between(progress.last_activity, now))

        return DataQualityMetrics(
            session_count=session_count,
            time_span_days=max(0.0, time_span),
            component_coverage=len(distinct_components(sessions)) / len(ALL_COMPONENTS),
            consistency_score=min(1.0, session_count / self._config.minimum_sessions),
            recent_activity_score=clamp(
                1 - days_inactive / self._config.recency_window_days
            ),
        )

    # ------------------------------------------------------------------
    # Factors
    # ------------------------------------------------------------------

    def _overall_score_factor(self, analytics: ProgressAnalytics) -> float:
        return clamp(analytics.average_score / 100)

    def _improvement_factor(self, sessions: list[ExamSession]) -> float:
        """Regression slope over session index remapped from +/- range to [0, 1]."""
        scores = session_scores(sessions)
        if len(scores) < 3:
            return 0.5

        slope_range = self._config.improvement_slope_range
        slope = linear_regression_slope(scores)
        return clamp((slope + slope_range) / (2 * slope_range))

    def _session_frequency_factor(self, sessions: list[ExamSession]) -> float:
        if len(sessions) < 2:
            return 0.0

        average_gap = mean(session_intervals(sessions))
        deviation = abs(average_gap - self._config.optimal_session_gap_days)
        return clamp(1 - deviation / self._config.max_gap_deviation_days)

    def _weakness_recovery_factor(
        self,
        analytics: ProgressAnalytics,
        sessions: list[ExamSession],
    ) -> float:
        """
        Recovery of weak components over their last three sessions.

        Each qualifying component (>= 3 scored sessions) is scored as
        ``strength + weakness * recovery``, where weakness = 1 - average/100
        and recovery remaps the first-to-third score delta of its last three
        sessions over the +/- slope range. Strong components therefore score
        high without needing room to recover.

        This departs from crediting only positive deltas scaled by the
        weakness share (``max(0, delta / 100) * weakness``). Under that form
        a consistent high scorer lands near 0 on this factor and cannot
        reach the excellent level, so the strength share is credited in full.
        """
        history = component_score_history(sessions)
        slope_range = self._config.improvement_slope_range

        scores = []
        for component, analysis in analytics.component_analysis.items():
            component_scores = history.get(component, [])
            if len(component_scores) < 3:
                continue

            last_three = component_scores[-3:]
            delta = last_three[2] - last_three[0]
            weakness = clamp(1 - analysis.average_score / 100)
            recovery = clamp(0.5 + delta / (2 * slope_range))
            scores.append((1 - weakness) + weakness * recovery)

        return mean(scores) if scores else 0.5

    def _time_management_factor(self, sessions: list[ExamSession]) -> float:
        if not sessions:
            return 0.5

        cv = coefficient_of_variation(session_durations(sessions))
        return clamp(1 - cv / self._config.time_variation_ceiling)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _component_readiness(
        self,
        component_analysis: dict[Component, ComponentAnalysis],
    ) -> dict[Component, float]:
        return {
            component: clamp(
                analysis.average_score / 100
                + TREND_ADJUSTMENT[analysis.improvement_trend]
                + min(0.1, analysis.sessions_completed / 20)
            )
            for component, analysis in component_analysis.items()
        }

    def _weighted_score(self, factors: ReadinessFactors) -> float:
        weights = self._config.weights.model_dump()
        values = factors.model_dump()
        total_weight = sum(weights.values())
        if total_weight <= 0:
            return 0.0
        return sum(values[name] * weight for name, weight in weights.items()) / total_weight

    def _determine_level(self, score: float) -> ReadinessLevel:
        thresholds = self._config.thresholds
        if score >= thresholds.excellent:
            return ReadinessLevel.EXCELLENT
        if score >= thresholds.good:
            return ReadinessLevel.GOOD
        if score >= thresholds.fair:
            return ReadinessLevel.FAIR
        return ReadinessLevel.POOR

    def _estimate_exam_score(
        self, raw_score: float, data_quality: DataQualityMetrics
    ) -> float:
        """Readiness x 100, discounted for data quality and exam difficulty."""
        confidence_multiplier = 0.8 + 0.2 * data_quality.consistency_score
        estimate = raw_score * 100 * confidence_multiplier * self._config.exam_conservatism
        return clamp(estimate, 0.0, 100.0)

    def _recommended_study_hours(
        self,
        raw_score: float,
        target_level: Optional[Level],
        analytics: ProgressAnalytics,
    ) -> float:
        target = self._config.target_for(target_level)
        gap = max(0.0, target - raw_score)
        velocity = analytics.learning_velocity or self._config.default_learning_velocity
        return gap / velocity

    # ------------------------------------------------------------------
    # Advice
    # ------------------------------------------------------------------

    def _recommendations(
        self,
        factors: ReadinessFactors,
        component_readiness: dict[Component, float],
        level: ReadinessLevel,
    ) -> list[ReadinessRecommendation]:
        recommendations = []

        for component, readiness in component_readiness.items():
            if readiness < 0.6:
                name = component.value
                recommendations.append(
                    ReadinessRecommendation(
                        type=ReadinessRecommendationType.COMPONENT_FOCUS,
                        priority=RecommendationPriority.HIGH,
                        title=f"Improve {name.capitalize()} Skills",
                        description=(
                            f"Your {name} performance is below target. "
                            "Focus additional practice here."
                        ),
                        action_items=[
                            f"Complete 2-3 {name} practice sessions this week",
                            f"Review your mistakes in previous {name} exercises",
                            f"Study specific {name} strategies and techniques",
                        ],
                        estimated_impact=0.15,
                    )
                )

        if factors.session_frequency < 0.5:
            recommendations.append(
                ReadinessRecommendation(
                    type=ReadinessRecommendationType.PRACTICE_FREQUENCY,
                    priority=RecommendationPriority.MEDIUM,
                    title="Increase Practice Frequency",
                    description=(
                        "Regular practice sessions will improve retention and performance."
                    ),
                    action_items=[
                        "Aim for 3-4 practice sessions per week",
                        "Set up a consistent study schedule",
                        "Use shorter, more frequent sessions rather than long cramming",
                    ],
                    estimated_impact=0.10,
                )
            )

        if factors.consistency < 0.6:
            recommendations.append(
                ReadinessRecommendation(
                    type=ReadinessRecommendationType.WEAKNESS_RECOVERY,
                    priority=RecommendationPriority.HIGH,
                    title="Address Performance Inconsistency",
                    description=(
                        "Your scores vary significantly. "
                        "Focus on building consistent performance."
                    ),
                    action_items=[
                        "Review and practice your weakest topics regularly",
                        "Take practice tests under exam conditions",
                        "Develop pre-exam routines to reduce anxiety",
                    ],
                    estimated_impact=0.12,
                )
            )

        if level in (ReadinessLevel.POOR, ReadinessLevel.FAIR):
            recommendations.append(
                ReadinessRecommendation(
                    type=ReadinessRecommendationType.STUDY_TIME,
                    priority=RecommendationPriority.HIGH,
                    title="Increase Study Time",
                    description=(
                        "Additional focused study time is needed to reach exam readiness."
                    ),
                    action_items=[
                        "Dedicate at least 1 hour per day to targeted practice",
                        "Use spaced repetition for vocabulary and grammar",
                        "Join study groups or find a study partner",
                    ],
                    estimated_impact=0.20,
                )
            )

        # Stable sort keeps generation order within a priority
        return sorted(recommendations, key=lambda r: -PRIORITY_ORDER[r.priority])

    def _milestones(self, raw_score: float) -> list[Milestone]:
        milestones = []

        if raw_score < 0.7:
            milestones.append(
                Milestone(
                    title="Build Foundation",
                    description="Establish consistent performance across all components",
                    target_score=70,
                    estimated_weeks=4,
                    actions=[
                        "Complete daily practice sessions",
                        "Focus on weakest components",
                        "Take weekly assessment tests",
                    ],
                )
            )

        if raw_score < 0.85:
            milestones.append(
                Milestone(
                    title="Achieve Proficiency",
                    description="Reach consistent high performance across all skills",
                    target_score=80,
                    estimated_weeks=8,
                    actions=[
                        "Take full-length practice exams weekly",
                        "Work with native speakers or tutors",
                        "Focus on time management strategies",
                    ],
                )
            )

        milestones.append(
            Milestone(
                title="Exam Ready",
                description="Full exam readiness with confidence",
                target_score=90,
                estimated_weeks=12,
                actions=[
                    "Take mock exams under real conditions",
                    "Fine-tune weak areas with targeted practice",
                    "Develop pre-exam routines",
                ],
            )
        )
        return milestones
