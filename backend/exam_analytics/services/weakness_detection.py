"""
Weakness Detection Engine

Runs six independent detectors over a learner's progress aggregate and
session history, then ranks and aggregates their findings.

Detectors:
- Component: component average below the critical/moderate/slight thresholds
- Question type: graded responses grouped by question format
- Time management: high coefficient of variation in session durations
- Consistency: low analytics consistency score
- Improvement stagnation: negative regression slope over recent sessions
- Error pattern: recurring error categories on incorrect responses, with a
  heuristic fallback when responses carry no error labels

Aggregation:
- Severity buckets (every weakness in exactly one bucket)
- Patterns: components with more than one weakness
- Ranking by impact.priority_score x urgency(severity)
- Draft improvement plan from the ranked actions

Usage:
    from exam_analytics.services.weakness_detection import WeaknessDetectionEngine

    engine = WeaknessDetectionEngine()
    analysis = engine.analyze_weaknesses(progress, sessions)

Detectors that need a minimum sample contribute nothing when the sample is
too small; they never raise.
"""

import logging
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Optional, Sequence

from exam_analytics.config.engine import (
    DEFAULT_WEAKNESS_CONFIG,
    WeaknessConfig,
    merge_config,
)
from exam_analytics.enums.analytics import (
    AssessmentType,
    RecommendationPriority,
    WeaknessSeverity,
    WeaknessTrend,
    WeaknessType,
)
from exam_analytics.enums.exam import (
    ALL_COMPONENTS,
    Component,
    ComponentTrend,
    QuestionType,
)
from exam_analytics.models.base import as_utc
from exam_analytics.models.exam import (
    ComponentAnalysis,
    ExamSession,
    ProgressAnalytics,
    UserProgress,
)
from exam_analytics.models.weakness import (
    AnalysisDataQuality,
    ImprovementPlan,
    ImprovementWeeklyGoal,
    PlanMilestone,
    PrioritizedAction,
    WeaknessAnalysis,
    WeaknessDetail,
    WeaknessEvidence,
    WeaknessImpact,
    WeaknessPattern,
    WeaknessRecommendation,
)
from exam_analytics.services.readiness import require_analytics
from exam_analytics.services.statistics import (
    clamp,
    coefficient_of_variation,
    component_score_history,
    completed_sessions,
    days_between,
    distinct_components,
    linear_regression_slope,
    mean,
    most_practised_component,
    responses_frame,
    session_durations,
    session_scores,
)

logger = logging.getLogger(__name__)

URGENCY = {
    WeaknessSeverity.CRITICAL: 1.0,
    WeaknessSeverity.MODERATE: 0.7,
    WeaknessSeverity.SLIGHT: 0.4,
}

SEVERITY_WEIGHT = {
    WeaknessSeverity.CRITICAL: 1.0,
    WeaknessSeverity.MODERATE: 0.6,
    WeaknessSeverity.SLIGHT: 0.3,
}

COMPONENT_TREND = {
    ComponentTrend.IMPROVING: WeaknessTrend.IMPROVING,
    ComponentTrend.STABLE: WeaknessTrend.STABLE,
    ComponentTrend.DECLINING: WeaknessTrend.WORSENING,
}

# Used when no contributing session identifies the component
QUESTION_TYPE_COMPONENT = {
    QuestionType.READING_COMPREHENSION: Component.READING,
    QuestionType.ESSAY: Component.WRITING,
    QuestionType.SHORT_ANSWER: Component.WRITING,
    QuestionType.LISTENING_COMPREHENSION: Component.LISTENING,
    QuestionType.SPEAKING_RESPONSE: Component.SPEAKING,
}

HEURISTIC_ERROR_PATTERNS = (
    "grammar_errors",
    "vocabulary_confusion",
    "reading_comprehension_errors",
    "time_pressure_mistakes",
)

PLAN_RISK_FACTORS = ["Study consistency", "Time management", "Motivation maintenance"]


def _humanize(label: str) -> str:
    return label.replace("_", " ")


def _dominant_component(components) -> Optional[Component]:
    """Most frequent component, ties broken by canonical order."""
    counts = Counter(components)
    if not counts:
        return None
    return max(ALL_COMPONENTS, key=lambda c: (counts[c], -ALL_COMPONENTS.index(c)))


class WeaknessDetectionEngine:
    """
    Stateless weakness detector bound to one immutable configuration.
    """

    def __init__(self, config: WeaknessConfig = DEFAULT_WEAKNESS_CONFIG):
        self._config = config

    def get_config(self) -> WeaknessConfig:
        return self._config

    def update_config(self, **overrides) -> WeaknessConfig:
        """Replace this instance's configuration with an updated copy."""
        self._config = merge_config(self._config, overrides)
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze_weaknesses(
        self,
        progress: UserProgress,
        sessions: Sequence[ExamSession],
        *,
        now: Optional[datetime] = None,
    ) -> WeaknessAnalysis:
        """
        Detect, rank and aggregate weaknesses.

        Args:
            progress: Learner progress with a populated analytics aggregate.
            sessions: Session history (any order; incomplete ones ignored).
            now: Reference time (defaults to current UTC time).

        Returns:
            WeaknessAnalysis value object.

        Raises:
            MissingAnalyticsError: If ``progress.analytics`` is None.
        """
        analytics = require_analytics(progress)
        now = as_utc(now) if now else datetime.now(timezone.utc)
        completed = completed_sessions(sessions)

        data_quality = self._assess_data_quality(progress, completed, now)

        weaknesses = [
            *self._detect_component_weaknesses(analytics, completed, now),
            *self._detect_question_type_weaknesses(completed, now),
            *self._detect_time_management_weaknesses(completed, now),
            *self._detect_consistency_weaknesses(analytics, completed, now),
            *self._detect_improvement_stagnation(completed, now),
            *self._detect_error_patterns(completed, now),
        ]

        by_severity = {severity: [] for severity in WeaknessSeverity}
        for weakness in weaknesses:
            by_severity[weakness.severity].append(weakness)

        prioritized = self._prioritize_actions(weaknesses)

        analysis = WeaknessAnalysis(
            overall_weakness_score=self._overall_weakness_score(weaknesses),
            critical_weaknesses=by_severity[WeaknessSeverity.CRITICAL],
            moderate_weaknesses=by_severity[WeaknessSeverity.MODERATE],
            slight_weaknesses=by_severity[WeaknessSeverity.SLIGHT],
            patterns=self._identify_patterns(weaknesses),
            prioritized_actions=prioritized,
            improvement_plan=self._improvement_plan(prioritized, analytics),
            confidence=self._analysis_confidence(data_quality, weaknesses),
            analysis_date=now,
            data_quality=data_quality,
        )

        logger.info(
            f"Weakness analysis for user {progress.user_id}: "
            f"{len(analysis.critical_weaknesses)} critical, "
            f"{len(analysis.moderate_weaknesses)} moderate, "
            f"{len(analysis.slight_weaknesses)} slight "
            f"(confidence={analysis.confidence:.2f})"
        )
        return analysis

    # ------------------------------------------------------------------
    # Data quality
    # ------------------------------------------------------------------

    def _assess_data_quality(
        self,
        progress: UserProgress,
        sessions: list[ExamSession],
        now: datetime,
    ) -> AnalysisDataQuality:
        count = len(sessions)
        time_span = (
            days_between(sessions[0].started_at, sessions[-1].started_at)
            if count > 1
            else 0.0
        )
        days_inactive = max(0.0, days_between(progress.last_activity, now))

        return AnalysisDataQuality(
            session_coverage=min(1.0, count / self._config.min_sessions_for_analysis),
            component_coverage=len(distinct_components(sessions)) / len(ALL_COMPONENTS),
            time_span_days=max(0.0, time_span),
            recency_score=clamp(1 - days_inactive / self._config.recency_window_days),
            volume_score=min(1.0, count / self._config.volume_target_sessions),
        )

    def _severity(self, score: float) -> Optional[WeaknessSeverity]:
        thresholds = self._config.score_thresholds
        if score < thresholds.critical:
            return WeaknessSeverity.CRITICAL
        if score < thresholds.moderate:
            return WeaknessSeverity.MODERATE
        if score < thresholds.slight:
            return WeaknessSeverity.SLIGHT
        return None

    # ------------------------------------------------------------------
    # Detectors
    # ------------------------------------------------------------------

    def _detect_component_weaknesses(
        self,
        analytics: ProgressAnalytics,
        sessions: list[ExamSession],
        now: datetime,
    ) -> list[WeaknessDetail]:
        history = component_score_history(sessions)
        responses = responses_frame(sessions)
        weaknesses = []

        for component, analysis in analytics.component_analysis.items():
            score = analysis.average_score
            severity = self._severity(score)
            if severity is None:
                continue

            scores = history.get(component, [])
            multiplier = clamp((100 - score) / 100)
            time_investment = {
                WeaknessSeverity.CRITICAL: 15,
                WeaknessSeverity.MODERATE: 10,
                WeaknessSeverity.SLIGHT: 5,
            }[severity]
            expected_improvement = {
                WeaknessSeverity.CRITICAL: 20,
                WeaknessSeverity.MODERATE: 15,
                WeaknessSeverity.SLIGHT: 10,
            }[severity]

            weaknesses.append(
                WeaknessDetail(
                    id=f"component_{component.value}",
                    type=WeaknessType.COMPONENT_SKILL,
                    severity=severity,
                    component=component,
                    specific_area=self._weakest_skill(component, analysis),
                    description=(
                        f"{component.value.capitalize()} performance is below target level"
                    ),
                    evidence=WeaknessEvidence(
                        average_score=score,
                        score_variation=coefficient_of_variation(scores),
                        session_count=analysis.sessions_completed,
                        question_count=int(
                            (responses["component"] == component).sum()
                        ),
                        recent_performance=scores[-5:],
                        time_spent_average_seconds=(
                            analysis.time_spent_minutes * 60 / analysis.sessions_completed
                            if analysis.sessions_completed
                            else 0.0
                        ),
                        improvement_rate=self._component_improvement_rate(
                            analysis, scores
                        ),
                    ),
                    impact=WeaknessImpact(
                        overall_score_impact=multiplier * 0.25,
                        exam_readiness_impact=multiplier * 0.3,
                        learning_velocity_impact=multiplier * 0.2,
                        confidence_impact=multiplier * 0.25,
                        priority_score=multiplier * 0.8,
                    ),
                    recommendations=[
                        WeaknessRecommendation(
                            action=f"Intensive {component.value} practice sessions",
                            priority=(
                                RecommendationPriority.HIGH
                                if severity == WeaknessSeverity.CRITICAL
                                else RecommendationPriority.MEDIUM
                            ),
                            estimated_time_investment_hours=time_investment,
                            expected_improvement=expected_improvement,
                        )
                    ],
                    confidence=min(
                        1.0,
                        analysis.sessions_completed / self._config.min_sessions_for_analysis,
                    ),
                    detected_at=now,
                    trend=COMPONENT_TREND[analysis.improvement_trend],
                )
            )

        return weaknesses

    def _weakest_skill(self, component: Component, analysis: ComponentAnalysis) -> str:
        if not analysis.skill_breakdown:
            return component.value
        # First minimum wins on ties
        return min(analysis.skill_breakdown.items(), key=lambda item: item[1])[0]

    def _component_improvement_rate(
        self, analysis: ComponentAnalysis, scores: list[float]
    ) -> float:
        if len(scores) >= 2:
            return linear_regression_slope(scores)
        return {
            ComponentTrend.IMPROVING: 5.0,
            ComponentTrend.STABLE: 0.0,
            ComponentTrend.DECLINING: -5.0,
        }[analysis.improvement_trend]

    def _detect_question_type_weaknesses(
        self, sessions: list[ExamSession], now: datetime
    ) -> list[WeaknessDetail]:
        frame = responses_frame(sessions).dropna(subset=["question_type"])
        if frame.empty:
            return []

        weaknesses = []
        for question_type, group in frame.groupby("question_type", sort=False):
            question_type = QuestionType(question_type)
            scores = [float(score) for score in group["score"]]
            if len(scores) < self._config.min_questions_per_pattern:
                continue

            average = mean(scores)
            severity = self._severity(average)
            if severity is None:
                continue

            component = _dominant_component(group["component"]) or QUESTION_TYPE_COMPONENT.get(
                question_type, Component.READING
            )
            label = _humanize(question_type.value)

            weaknesses.append(
                WeaknessDetail(
                    id=f"question_type_{question_type.value}",
                    type=WeaknessType.QUESTION_TYPE,
                    severity=severity,
                    component=component,
                    specific_area=question_type.value,
                    description=f"Difficulty with {label} questions",
                    evidence=WeaknessEvidence(
                        average_score=average,
                        score_variation=coefficient_of_variation(scores),
                        session_count=int(group["session_id"].nunique()),
                        question_count=len(scores),
                        recent_performance=scores[-5:],
                        time_spent_average_seconds=mean(group["time_spent_seconds"]),
                        improvement_rate=linear_regression_slope(scores),
                    ),
                    impact=WeaknessImpact(
                        overall_score_impact=0.2,
                        exam_readiness_impact=0.15,
                        learning_velocity_impact=0.1,
                        confidence_impact=0.1,
                        priority_score={
                            WeaknessSeverity.CRITICAL: 0.8,
                            WeaknessSeverity.MODERATE: 0.6,
                            WeaknessSeverity.SLIGHT: 0.4,
                        }[severity],
                    ),
                    recommendations=[
                        WeaknessRecommendation(
                            action=f"Practice {label} questions",
                            priority=(
                                RecommendationPriority.HIGH
                                if severity == WeaknessSeverity.CRITICAL
                                else RecommendationPriority.MEDIUM
                            ),
                            estimated_time_investment_hours=8,
                            expected_improvement=12,
                        )
                    ],
                    confidence=min(1.0, len(scores) / 10),
                    detected_at=now,
                )
            )

        return weaknesses

    def _detect_time_management_weaknesses(
        self, sessions: list[ExamSession], now: datetime
    ) -> list[WeaknessDetail]:
        if len(sessions) < self._config.min_sessions_for_analysis:
            return []

        durations = session_durations(sessions)
        cv = coefficient_of_variation(durations)
        if cv <= self._config.consistency_threshold:
            return []

        severity = (
            WeaknessSeverity.CRITICAL
            if cv > self._config.critical_time_variation
            else WeaknessSeverity.MODERATE
        )
        return [
            WeaknessDetail(
                id="time_management",
                type=WeaknessType.TIME_MANAGEMENT,
                severity=severity,
                component=most_practised_component(sessions) or Component.READING,
                specific_area="time_consistency",
                description="Inconsistent time management across sessions",
                evidence=WeaknessEvidence(
                    score_variation=cv,
                    session_count=len(sessions),
                    recent_performance=durations[-5:],
                    error_patterns=["time_inconsistency"],
                    time_spent_average_seconds=mean(durations) * 60,
                ),
                impact=WeaknessImpact(
                    overall_score_impact=0.15,
                    exam_readiness_impact=0.3,
                    learning_velocity_impact=0.2,
                    confidence_impact=0.25,
                    priority_score=0.7,
                ),
                recommendations=[
                    WeaknessRecommendation(
                        action="Practice with timed sessions",
                        priority=RecommendationPriority.HIGH,
                        estimated_time_investment_hours=5,
                        expected_improvement=10,
                    )
                ],
                confidence=min(1.0, len(sessions) / 10),
                detected_at=now,
            )
        ]

    def _detect_consistency_weaknesses(
        self,
        analytics: ProgressAnalytics,
        sessions: list[ExamSession],
        now: datetime,
    ) -> list[WeaknessDetail]:
        consistency = analytics.consistency_score
        if consistency >= self._config.low_consistency:
            return []

        severity = (
            WeaknessSeverity.CRITICAL
            if consistency < self._config.critical_consistency
            else WeaknessSeverity.MODERATE
        )
        return [
            WeaknessDetail(
                id="consistency",
                type=WeaknessType.CONSISTENCY,
                severity=severity,
                component=self._weakest_component(analytics, sessions),
                specific_area="performance_consistency",
                description="Inconsistent performance across sessions",
                evidence=WeaknessEvidence(
                    average_score=analytics.average_score,
                    score_variation=1 - consistency,
                    session_count=analytics.total_sessions,
                    recent_performance=session_scores(sessions)[-5:],
                    error_patterns=["performance_variation"],
                    improvement_rate=analytics.improvement_rate,
                ),
                impact=WeaknessImpact(
                    overall_score_impact=0.2,
                    exam_readiness_impact=0.4,
                    learning_velocity_impact=0.15,
                    confidence_impact=0.3,
                    priority_score=0.75,
                ),
                recommendations=[
                    WeaknessRecommendation(
                        action="Focus on building consistent study habits",
                        priority=RecommendationPriority.HIGH,
                        estimated_time_investment_hours=10,
                        expected_improvement=15,
                    )
                ],
                confidence=min(1.0, analytics.total_sessions / 10),
                detected_at=now,
            )
        ]

    def _weakest_component(
        self, analytics: ProgressAnalytics, sessions: list[ExamSession]
    ) -> Component:
        if analytics.component_analysis:
            return min(
                analytics.component_analysis.items(),
                key=lambda item: (item[1].average_score, ALL_COMPONENTS.index(item[0])),
            )[0]
        return most_practised_component(sessions) or Component.READING

    def _detect_improvement_stagnation(
        self, sessions: list[ExamSession], now: datetime
    ) -> list[WeaknessDetail]:
        if len(sessions) < self._config.min_sessions_for_analysis:
            return []

        window = sessions[-self._config.stagnation_window:]
        scores = session_scores(window)
        if len(scores) < self._config.min_sessions_for_analysis:
            return []

        slope = linear_regression_slope(scores)
        if slope >= self._config.stagnation_slope:
            return []

        return [
            WeaknessDetail(
                id="improvement_stagnation",
                type=WeaknessType.IMPROVEMENT_STAGNATION,
                severity=WeaknessSeverity.MODERATE,
                component=most_practised_component(window) or Component.READING,
                specific_area="learning_progress",
                description="Learning progress has stagnated or declined",
                evidence=WeaknessEvidence(
                    average_score=mean(scores),
                    score_variation=coefficient_of_variation(scores),
                    session_count=len(sessions),
                    recent_performance=scores,
                    error_patterns=["progress_stagnation"],
                    improvement_rate=slope,
                ),
                impact=WeaknessImpact(
                    overall_score_impact=0.1,
                    exam_readiness_impact=0.3,
                    learning_velocity_impact=0.4,
                    confidence_impact=0.25,
                    priority_score=0.6,
                ),
                recommendations=[
                    WeaknessRecommendation(
                        action="Review and adjust study methods",
                        priority=RecommendationPriority.MEDIUM,
                        estimated_time_investment_hours=8,
                        expected_improvement=12,
                    )
                ],
                confidence=0.8,
                detected_at=now,
                trend=WeaknessTrend.WORSENING,
            )
        ]

    def _detect_error_patterns(
        self, sessions: list[ExamSession], now: datetime
    ) -> list[WeaknessDetail]:
        frame = responses_frame(sessions)
        labelled = frame.dropna(subset=["error_category"])
        if labelled.empty:
            return self._detect_error_patterns_heuristic(sessions, now)

        incorrect = labelled[labelled["score"] < 100]
        weaknesses = []
        for category, group in incorrect.groupby("error_category", sort=False):
            occurrences = len(group)
            if occurrences < self._config.min_error_occurrences:
                continue
            scores = [float(score) for score in group["score"]]
            weaknesses.append(
                self._error_pattern_weakness(
                    category=str(category),
                    component=_dominant_component(group["component"]) or Component.READING,
                    evidence=WeaknessEvidence(
                        average_score=mean(scores),
                        score_variation=coefficient_of_variation(scores),
                        session_count=int(group["session_id"].nunique()),
                        question_count=occurrences,
                        recent_performance=scores[-5:],
                        error_patterns=[str(category)],
                        time_spent_average_seconds=mean(group["time_spent_seconds"]),
                    ),
                    confidence=min(1.0, occurrences / 10),
                    now=now,
                )
            )
        return weaknesses

    def _detect_error_patterns_heuristic(
        self, sessions: list[ExamSession], now: datetime
    ) -> list[WeaknessDetail]:
        """
        Coarse fallback for sessions without response-level error labels.

        Flags the fixed pattern categories once enough low-scoring sessions
        exist. Findings are marked heuristic and carry reduced confidence.
        """
        low_scoring = [
            s
            for s in sessions
            if s.score is not None and s.score < self._config.heuristic_low_score
        ]
        if len(low_scoring) < self._config.min_error_occurrences:
            return []

        logger.warning(
            f"No response-level error labels; inferring error patterns from "
            f"{len(low_scoring)} low-scoring sessions"
        )
        scores = session_scores(low_scoring)
        component = most_practised_component(low_scoring) or Component.READING
        return [
            self._error_pattern_weakness(
                category=pattern,
                component=component,
                evidence=WeaknessEvidence(
                    average_score=mean(scores),
                    score_variation=coefficient_of_variation(scores),
                    session_count=len(low_scoring),
                    recent_performance=scores[-3:],
                    error_patterns=[pattern],
                    heuristic=True,
                ),
                confidence=0.6,
                now=now,
            )
            for pattern in HEURISTIC_ERROR_PATTERNS
        ]

    def _error_pattern_weakness(
        self,
        category: str,
        component: Component,
        evidence: WeaknessEvidence,
        confidence: float,
        now: datetime,
    ) -> WeaknessDetail:
        label = _humanize(category)
        return WeaknessDetail(
            id=f"error_pattern_{category}",
            type=WeaknessType.ERROR_PATTERN,
            severity=WeaknessSeverity.MODERATE,
            component=component,
            specific_area=category,
            description=f"Recurring {label} detected",
            evidence=evidence,
            impact=WeaknessImpact(
                overall_score_impact=0.15,
                exam_readiness_impact=0.2,
                learning_velocity_impact=0.1,
                confidence_impact=0.15,
                priority_score=0.5,
            ),
            recommendations=[
                WeaknessRecommendation(
                    action=f"Focus on {label} exercises",
                    priority=RecommendationPriority.MEDIUM,
                    estimated_time_investment_hours=6,
                    expected_improvement=8,
                )
            ],
            confidence=confidence,
            detected_at=now,
        )

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def _identify_patterns(self, weaknesses: list[WeaknessDetail]) -> list[WeaknessPattern]:
        groups: dict[Component, list[WeaknessDetail]] = {}
        for weakness in weaknesses:
            groups.setdefault(weakness.component, []).append(weakness)

        patterns = []
        for component, group in groups.items():
            if len(group) <= 1:
                continue
            critical = any(w.severity == WeaknessSeverity.CRITICAL for w in group)
            patterns.append(
                WeaknessPattern(
                    pattern=f"Multiple {component.value} difficulties",
                    occurrences=len(group),
                    components=[component],
                    severity=(
                        WeaknessSeverity.CRITICAL if critical else WeaknessSeverity.MODERATE
                    ),
                    description=f"Multiple weaknesses detected in {component.value} skills",
                    recommendations=[
                        f"Focus intensive study on {component.value} component"
                    ],
                )
            )
        return patterns

    def _prioritize_actions(
        self, weaknesses: list[WeaknessDetail]
    ) -> list[PrioritizedAction]:
        ranked = sorted(
            weaknesses,
            key=lambda w: -(w.impact.priority_score * URGENCY[w.severity]),
        )
        return [
            PrioritizedAction(
                rank=rank,
                weakness=weakness,
                estimated_impact=weakness.impact.priority_score,
                urgency=URGENCY[weakness.severity],
                effort=(
                    weakness.recommendations[0].estimated_time_investment_hours
                    if weakness.recommendations
                    else 5
                ),
                action_plan=[rec.action for rec in weakness.recommendations],
            )
            for rank, weakness in enumerate(ranked, start=1)
        ]

    def _improvement_plan(
        self,
        actions: list[PrioritizedAction],
        analytics: ProgressAnalytics,
    ) -> ImprovementPlan:
        total_weeks = min(
            self._config.max_plan_weeks,
            max(self._config.min_plan_weeks, 2 * len(actions)),
        )

        weekly_goals = []
        for week in range(1, total_weeks + 1):
            weekly_actions = actions[(week - 1) * 2 : week * 2]
            weekly_goals.append(
                ImprovementWeeklyGoal(
                    week=week,
                    focus_areas=[a.weakness.specific_area for a in weekly_actions],
                    study_hours=sum(a.effort for a in weekly_actions),
                    practice_types=[a.weakness.type for a in weekly_actions],
                    target_improvement=5,
                    success_metrics=["Complete daily practice", "Achieve target score"],
                )
            )

        base = analytics.average_score
        milestones = [
            PlanMilestone(
                week=math.ceil(total_weeks / 3),
                title="Foundation Building",
                target_score=min(100.0, base + 10),
                assessment_type=AssessmentType.PRACTICE_TEST,
                success_criteria=["Consistent performance", "Reduced critical weaknesses"],
            ),
            PlanMilestone(
                week=math.ceil(total_weeks * 2 / 3),
                title="Skill Development",
                target_score=min(100.0, base + 20),
                assessment_type=AssessmentType.MOCK_EXAM,
                success_criteria=["Improved component scores", "Better time management"],
            ),
            PlanMilestone(
                week=total_weeks,
                title="Exam Readiness",
                target_score=min(100.0, base + 30),
                assessment_type=AssessmentType.FULL_MOCK,
                success_criteria=["Consistent high performance", "All weaknesses addressed"],
            ),
        ]

        return ImprovementPlan(
            weekly_goals=weekly_goals,
            milestones=milestones,
            total_estimated_weeks=total_weeks,
            expected_score_improvement=30,
            risk_factors=list(PLAN_RISK_FACTORS),
        )

    def _overall_weakness_score(self, weaknesses: list[WeaknessDetail]) -> float:
        if not weaknesses:
            return 0.0
        return min(1.0, mean(SEVERITY_WEIGHT[w.severity] for w in weaknesses))

    def _analysis_confidence(
        self,
        data_quality: AnalysisDataQuality,
        weaknesses: list[WeaknessDetail],
    ) -> float:
        data_confidence = mean(
            [
                data_quality.session_coverage,
                data_quality.component_coverage,
                data_quality.recency_score,
                data_quality.volume_score,
            ]
        )
        weakness_confidence = (
            mean(w.confidence for w in weaknesses) if weaknesses else 1.0
        )
        return (data_confidence + weakness_confidence) / 2
