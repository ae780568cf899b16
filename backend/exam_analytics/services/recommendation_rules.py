"""
Recommendation Rules

A small rule engine: each rule is a pure function from a
RecommendationContext to a list of candidate StudyRecommendations. The
synthesis engine runs every registered rule and merges the results, so rules
can be added or removed without touching the orchestrator.

Default rules (in evaluation order):
1. weakness_rule - critical weaknesses and the top moderate ones
2. readiness_rule - foundation plan for poor/fair readiness plus a
   pass-through of the readiness engine's own advice
3. component_rule - components averaging below the focus score
4. time_management_rule - inconsistent session durations
5. practice_frequency_rule - inactivity beyond the configured days
6. motivation_rule - declining recent scores or poor readiness
7. resource_rule - components averaging below the resource score

Usage:
    from exam_analytics.services.recommendation_rules import DEFAULT_RULES

    def exam_strategy_rule(context: RecommendationContext) -> list[StudyRecommendation]:
        ...

    engine = StudyRecommendationEngine(rules=(*DEFAULT_RULES, exam_strategy_rule))
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from exam_analytics.config.engine import RecommendationConfig
from exam_analytics.enums.analytics import (
    ReadinessLevel,
    ReadinessRecommendationType,
    RecommendationDifficulty,
    RecommendationPriority,
    RecommendationType,
    WeaknessType,
)
from exam_analytics.enums.exam import ALL_COMPONENTS, Component
from exam_analytics.models.exam import (
    ExamSession,
    ProgressAnalytics,
    UserPreferences,
    UserProgress,
)
from exam_analytics.models.readiness import ReadinessAssessment
from exam_analytics.models.recommendations import (
    ExpectedOutcome,
    RecommendationAction,
    RecommendationProvenance,
    StudyRecommendation,
    StudyResource,
    TimeEstimate,
)
from exam_analytics.models.weakness import WeaknessAnalysis, WeaknessDetail
from exam_analytics.services.resource_curation import (
    component_resources,
    foundation_resources,
    weakness_resources,
)
from exam_analytics.services.statistics import (
    coefficient_of_variation,
    days_between,
    session_durations,
    session_scores,
)

READINESS_TYPE_MAP = {
    ReadinessRecommendationType.COMPONENT_FOCUS: RecommendationType.SKILL_FOCUS,
    ReadinessRecommendationType.STUDY_TIME: RecommendationType.STUDY_PLAN,
    ReadinessRecommendationType.PRACTICE_FREQUENCY: RecommendationType.PRACTICE_SESSION,
    ReadinessRecommendationType.WEAKNESS_RECOVERY: RecommendationType.SKILL_FOCUS,
}


@dataclass(frozen=True)
class RecommendationContext:
    """
    Everything a rule may read.

    Attributes:
        progress: Learner progress snapshot
        analytics: The progress analytics aggregate (guaranteed present)
        sessions: Completed sessions in chronological order
        weakness_analysis: Output of weakness detection
        readiness: Output of readiness scoring
        preferences: Optional user preferences
        config: Synthesis configuration
        now: Reference time for validity windows
    """

    progress: UserProgress
    analytics: ProgressAnalytics
    sessions: tuple[ExamSession, ...]
    weakness_analysis: WeaknessAnalysis
    readiness: ReadinessAssessment
    preferences: Optional[UserPreferences]
    config: RecommendationConfig
    now: datetime

    @property
    def days_since_last_activity(self) -> float:
        return days_between(self.progress.last_activity, self.now)


RecommendationRule = Callable[[RecommendationContext], list[StudyRecommendation]]


def _action(
    action: str,
    description: str,
    minutes: int,
    frequency: str,
    order: int,
    success_criteria: list[str],
    is_optional: bool = False,
) -> RecommendationAction:
    return RecommendationAction(
        action=action,
        description=description,
        time_required_minutes=minutes,
        frequency=frequency,
        order=order,
        is_optional=is_optional,
        success_criteria=success_criteria,
    )


def build_recommendation(
    context: RecommendationContext,
    *,
    id: str,
    type: RecommendationType,
    priority: RecommendationPriority,
    title: str,
    description: str,
    rationale: str,
    action_items: list[RecommendationAction],
    time_estimate: TimeEstimate,
    expected_outcomes: list[ExpectedOutcome],
    target_components: list[Component],
    difficulty: RecommendationDifficulty,
    confidence: float,
    tags: list[str],
    valid_days: int,
    based_on: list[str],
    personalization_factors: list[str],
    adaptability: float,
    relevance: float,
    evidence_strength: float,
    resources: Optional[list[StudyResource]] = None,
) -> StudyRecommendation:
    """
    Assemble a recommendation stamped with the context's time and version.
    """
    return StudyRecommendation(
        id=id,
        type=type,
        priority=priority,
        title=title,
        description=description,
        rationale=rationale,
        action_items=action_items,
        resources=resources or [],
        time_estimate=time_estimate,
        expected_outcomes=expected_outcomes,
        target_components=target_components,
        difficulty=difficulty,
        confidence=confidence,
        tags=tags,
        created_at=context.now,
        valid_until=context.now + timedelta(days=valid_days),
        metadata=RecommendationProvenance(
            based_on=based_on,
            algorithm_version=context.config.algorithm_version,
            personalization_factors=personalization_factors,
            adaptability_score=adaptability,
            relevance_score=relevance,
            evidence_strength=evidence_strength,
        ),
    )


# ===========================================
# Rules
# ===========================================


def _weakness_label(weakness: WeaknessDetail) -> str:
    """Title label: the component for skill weaknesses, else the specific area."""
    if weakness.type == WeaknessType.COMPONENT_SKILL:
        return weakness.component.value.capitalize()
    return weakness.specific_area.replace("_", " ").title()


def _critical_weakness(
    context: RecommendationContext, weakness: WeaknessDetail
) -> StudyRecommendation:
    component = weakness.component.value
    return build_recommendation(
        context,
        id=f"weakness_critical_{weakness.id}",
        type=RecommendationType.SKILL_FOCUS,
        priority=RecommendationPriority.CRITICAL,
        title=f"Address Critical {_weakness_label(weakness)} Weakness",
        description=f"Immediate focus needed on {weakness.specific_area}",
        rationale=f"Critical weakness identified: {weakness.description}",
        action_items=[
            _action(
                "Complete diagnostic assessment",
                f"Take detailed {component} assessment to identify specific gaps",
                30,
                "once",
                1,
                ["Complete assessment", "Identify specific problem areas"],
            ),
            _action(
                "Daily targeted practice",
                f"30-minute daily sessions focused on {weakness.specific_area}",
                30,
                "daily",
                2,
                ["Complete daily sessions", "Show measurable improvement"],
            ),
        ],
        resources=weakness_resources(weakness),
        time_estimate=TimeEstimate(
            minimum=8, maximum=15, optimal=12, frequency="weekly", duration="2-4 weeks"
        ),
        expected_outcomes=[
            ExpectedOutcome(
                metric=f"{component}_score",
                improvement=15,
                timeframe="2 weeks",
                confidence=0.8,
                description=f"Expected 15-point improvement in {component}",
            )
        ],
        target_components=[weakness.component],
        difficulty=RecommendationDifficulty.INTERMEDIATE,
        confidence=weakness.confidence,
        tags=["weakness", "critical", component, weakness.specific_area],
        valid_days=14,
        based_on=["weakness_analysis", "performance_data"],
        personalization_factors=[weakness.type.value, component],
        adaptability=0.8,
        relevance=0.95,
        evidence_strength=weakness.confidence,
    )


def _moderate_weakness(
    context: RecommendationContext, weakness: WeaknessDetail
) -> StudyRecommendation:
    component = weakness.component.value
    return build_recommendation(
        context,
        id=f"weakness_moderate_{weakness.id}",
        type=RecommendationType.STUDY_PLAN,
        priority=RecommendationPriority.HIGH,
        title=(
            f"Improve {_weakness_label(weakness)} Performance"
            if weakness.type == WeaknessType.COMPONENT_SKILL
            else f"Structured Plan for {_weakness_label(weakness)}"
        ),
        description=f"Structured plan to address {weakness.specific_area} difficulties",
        rationale=f"Moderate weakness affecting overall performance: {weakness.description}",
        action_items=[
            _action(
                "Weekly practice sessions",
                f"3 focused sessions per week on {weakness.specific_area}",
                45,
                "weekly",
                1,
                ["Complete weekly sessions", "Track performance metrics"],
            ),
            _action(
                "Progress assessment",
                "Weekly mini-assessments to track improvement",
                20,
                "weekly",
                2,
                ["Show consistent improvement", "Meet weekly targets"],
            ),
        ],
        resources=weakness_resources(weakness),
        time_estimate=TimeEstimate(
            minimum=5, maximum=8, optimal=6, frequency="weekly", duration="3-6 weeks"
        ),
        expected_outcomes=[
            ExpectedOutcome(
                metric=f"{component}_score",
                improvement=10,
                timeframe="4 weeks",
                confidence=0.7,
                description=f"Expected 10-point improvement in {component}",
            )
        ],
        target_components=[weakness.component],
        difficulty=RecommendationDifficulty.INTERMEDIATE,
        confidence=weakness.confidence,
        tags=["weakness", "moderate", component],
        valid_days=21,
        based_on=["weakness_analysis"],
        personalization_factors=[weakness.type.value],
        adaptability=0.7,
        relevance=0.8,
        evidence_strength=weakness.confidence,
    )


def weakness_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Immediate items for critical weaknesses, structured plans for the top moderate ones."""
    analysis = context.weakness_analysis
    moderate = analysis.moderate_weaknesses[: context.config.max_moderate_plans]
    return [
        *(_critical_weakness(context, w) for w in analysis.critical_weaknesses),
        *(_moderate_weakness(context, w) for w in moderate),
    ]


def readiness_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Foundation plan for poor/fair readiness, plus the readiness engine's advice."""
    readiness = context.readiness
    recommendations = []

    if readiness.level in (ReadinessLevel.POOR, ReadinessLevel.FAIR):
        recommendations.append(
            build_recommendation(
                context,
                id="readiness_foundation",
                type=RecommendationType.STUDY_PLAN,
                priority=RecommendationPriority.CRITICAL,
                title="Build Exam Foundation",
                description="Comprehensive foundation building to improve exam readiness",
                rationale=(
                    f"Current readiness level ({readiness.level.value}) "
                    "requires intensive preparation"
                ),
                action_items=[
                    _action(
                        "Diagnostic assessment",
                        "Complete comprehensive diagnostic to identify all gaps",
                        60,
                        "once",
                        1,
                        ["Identify all weakness areas", "Create baseline metrics"],
                    ),
                    _action(
                        "Foundation study plan",
                        "Follow structured 8-week foundation building program",
                        10 * 60,
                        "weekly",
                        2,
                        ["Complete weekly milestones", "Show consistent improvement"],
                    ),
                ],
                resources=foundation_resources(),
                time_estimate=TimeEstimate(
                    minimum=60, maximum=80, optimal=70, frequency="total", duration="8-10 weeks"
                ),
                expected_outcomes=[
                    ExpectedOutcome(
                        metric="readiness_score",
                        improvement=30,
                        timeframe="8 weeks",
                        confidence=0.8,
                        description="Expected to reach 'good' readiness level",
                    )
                ],
                target_components=list(ALL_COMPONENTS),
                difficulty=RecommendationDifficulty.BEGINNER,
                confidence=0.9,
                tags=["readiness", "foundation", "comprehensive"],
                valid_days=7,
                based_on=["readiness_assessment"],
                personalization_factors=["readiness_level", "overall_score"],
                adaptability=0.6,
                relevance=0.95,
                evidence_strength=readiness.confidence,
            )
        )

    for index, advice in enumerate(readiness.recommendations):
        impact = round(advice.estimated_impact * 100)
        recommendations.append(
            build_recommendation(
                context,
                id=f"readiness_rec_{index}_{advice.type.value}",
                type=READINESS_TYPE_MAP[advice.type],
                priority=advice.priority,
                title=advice.title,
                description=advice.description,
                rationale="Based on comprehensive readiness analysis",
                action_items=[
                    _action(
                        item,
                        item,
                        30,
                        "daily",
                        order,
                        ["Complete action", "Track progress"],
                    )
                    for order, item in enumerate(advice.action_items, start=1)
                ],
                time_estimate=TimeEstimate(
                    minimum=3, maximum=8, optimal=5, frequency="weekly", duration="2-4 weeks"
                ),
                expected_outcomes=[
                    ExpectedOutcome(
                        metric="overall_improvement",
                        improvement=advice.estimated_impact * 100,
                        timeframe="3 weeks",
                        confidence=0.7,
                        description=f"Expected {impact}-point improvement",
                    )
                ],
                target_components=list(ALL_COMPONENTS),
                difficulty=RecommendationDifficulty.INTERMEDIATE,
                confidence=0.8,
                tags=["readiness", advice.type.value],
                valid_days=14,
                based_on=["readiness_assessment"],
                personalization_factors=[advice.type.value],
                adaptability=0.7,
                relevance=0.8,
                evidence_strength=0.8,
            )
        )

    return recommendations


def component_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Focused improvement for components averaging below the focus score."""
    recommendations = []
    for component, analysis in context.analytics.component_analysis.items():
        if analysis.average_score >= context.config.component_focus_score:
            continue
        name = component.value
        recommendations.append(
            build_recommendation(
                context,
                id=f"component_{name}",
                type=RecommendationType.SKILL_FOCUS,
                priority=RecommendationPriority.MEDIUM,
                title=f"Strengthen {name.capitalize()} Skills",
                description=f"Focused improvement plan for {name} component",
                rationale=f"Component score ({analysis.average_score:.1f}) below target",
                action_items=[
                    _action(
                        "Daily practice",
                        f"30-minute daily {name} practice sessions",
                        30,
                        "daily",
                        1,
                        ["Complete daily sessions", "Improve weekly scores"],
                    )
                ],
                time_estimate=TimeEstimate(
                    minimum=3.5, maximum=7, optimal=5, frequency="weekly", duration="4-6 weeks"
                ),
                expected_outcomes=[
                    ExpectedOutcome(
                        metric=f"{name}_score",
                        improvement=15,
                        timeframe="4 weeks",
                        confidence=0.75,
                        description=f"Expected 15-point improvement in {name}",
                    )
                ],
                target_components=[component],
                difficulty=RecommendationDifficulty.INTERMEDIATE,
                confidence=0.8,
                tags=[name, "component_improvement"],
                valid_days=21,
                based_on=["component_analysis"],
                personalization_factors=[name],
                adaptability=0.7,
                relevance=0.8,
                evidence_strength=0.8,
            )
        )
    return recommendations


def time_management_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Timing advice when session durations vary too much."""
    if len(context.sessions) < 3:
        return []
    cv = coefficient_of_variation(session_durations(context.sessions))
    if cv <= context.config.time_variation_threshold:
        return []

    return [
        build_recommendation(
            context,
            id="time_management",
            type=RecommendationType.TIME_MANAGEMENT,
            priority=RecommendationPriority.MEDIUM,
            title="Improve Time Management",
            description="Develop consistent timing and pacing strategies",
            rationale="Inconsistent session timing affects performance reliability",
            action_items=[
                _action(
                    "Timed practice sessions",
                    "Practice with strict time limits to build consistency",
                    45,
                    "daily",
                    1,
                    ["Complete sessions within time limit", "Improve time consistency"],
                )
            ],
            time_estimate=TimeEstimate(
                minimum=5, maximum=10, optimal=7, frequency="weekly", duration="3-4 weeks"
            ),
            expected_outcomes=[
                ExpectedOutcome(
                    metric="time_consistency",
                    improvement=20,
                    timeframe="3 weeks",
                    confidence=0.7,
                    description="Expected improvement in time management consistency",
                )
            ],
            target_components=list(ALL_COMPONENTS),
            difficulty=RecommendationDifficulty.INTERMEDIATE,
            confidence=0.8,
            tags=["time_management", "consistency"],
            valid_days=14,
            based_on=["session_analysis"],
            personalization_factors=["time_patterns"],
            adaptability=0.6,
            relevance=0.7,
            evidence_strength=0.8,
        )
    ]


def practice_frequency_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Nudge back into practice after a period of inactivity."""
    days_inactive = context.days_since_last_activity
    if days_inactive <= context.config.inactivity_days:
        return []

    return [
        build_recommendation(
            context,
            id="practice_frequency",
            type=RecommendationType.PRACTICE_SESSION,
            priority=RecommendationPriority.HIGH,
            title="Increase Practice Frequency",
            description="Regular practice is essential for maintaining and improving performance",
            rationale=(
                f"{round(days_inactive)} days since last activity - consistency is key"
            ),
            action_items=[
                _action(
                    "Resume regular practice",
                    "Start with 30-minute sessions every other day",
                    30,
                    "daily",
                    1,
                    ["Complete 4 sessions this week", "Establish routine"],
                )
            ],
            time_estimate=TimeEstimate(
                minimum=2, maximum=4, optimal=3, frequency="weekly", duration="ongoing"
            ),
            expected_outcomes=[
                ExpectedOutcome(
                    metric="consistency_score",
                    improvement=25,
                    timeframe="2 weeks",
                    confidence=0.8,
                    description="Expected improvement in study consistency",
                )
            ],
            target_components=list(ALL_COMPONENTS),
            difficulty=RecommendationDifficulty.BEGINNER,
            confidence=0.9,
            tags=["frequency", "consistency", "routine"],
            valid_days=7,
            based_on=["activity_patterns"],
            personalization_factors=["last_activity"],
            adaptability=0.8,
            relevance=0.9,
            evidence_strength=0.9,
        )
    ]


def _recent_scores_declining(sessions: tuple[ExamSession, ...]) -> bool:
    recent = session_scores(sessions)[-5:]
    return len(recent) >= 3 and recent[-1] < recent[0]


def motivation_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Motivational support on declining scores or poor readiness."""
    if not (
        _recent_scores_declining(context.sessions)
        or context.readiness.level == ReadinessLevel.POOR
    ):
        return []

    return [
        build_recommendation(
            context,
            id="motivation",
            type=RecommendationType.MOTIVATION,
            priority=RecommendationPriority.MEDIUM,
            title="Build Learning Momentum",
            description="Strategies to maintain motivation and engagement",
            rationale="Recent performance patterns suggest need for motivational support",
            action_items=[
                _action(
                    "Set small achievable goals",
                    "Break larger goals into manageable weekly targets",
                    15,
                    "weekly",
                    1,
                    ["Set weekly goals", "Achieve at least 80% of goals"],
                )
            ],
            time_estimate=TimeEstimate(
                minimum=1, maximum=2, optimal=1, frequency="weekly", duration="ongoing"
            ),
            expected_outcomes=[
                ExpectedOutcome(
                    metric="engagement_score",
                    improvement=15,
                    timeframe="2 weeks",
                    confidence=0.6,
                    description="Expected improvement in study engagement",
                )
            ],
            target_components=list(ALL_COMPONENTS),
            difficulty=RecommendationDifficulty.BEGINNER,
            confidence=0.7,
            tags=["motivation", "engagement", "goals"],
            valid_days=28,
            based_on=["performance_trends"],
            personalization_factors=["motivation_level"],
            adaptability=0.5,
            relevance=0.6,
            evidence_strength=0.6,
        )
    ]


def resource_rule(context: RecommendationContext) -> list[StudyRecommendation]:
    """Curated resources for each component averaging below the resource score."""
    recommendations = []
    for component, analysis in context.analytics.component_analysis.items():
        if analysis.average_score >= context.config.resource_score:
            continue
        name = component.value
        recommendations.append(
            build_recommendation(
                context,
                id=f"resource_{name}",
                type=RecommendationType.RESOURCE,
                priority=RecommendationPriority.LOW,
                title=f"{name.capitalize()} Study Resources",
                description=f"Curated resources to improve {name} performance",
                rationale=f"Additional resources needed for {name} improvement",
                action_items=[
                    _action(
                        "Use recommended resources",
                        f"Utilize curated {name} learning materials",
                        60,
                        "weekly",
                        1,
                        ["Complete resource activities", "Apply learned techniques"],
                        is_optional=True,
                    )
                ],
                resources=component_resources(component),
                time_estimate=TimeEstimate(
                    minimum=3, maximum=6, optimal=4, frequency="weekly", duration="ongoing"
                ),
                expected_outcomes=[
                    ExpectedOutcome(
                        metric=f"{name}_resources_utilized",
                        improvement=10,
                        timeframe="4 weeks",
                        confidence=0.5,
                        description="Expected benefit from additional resources",
                    )
                ],
                target_components=[component],
                difficulty=RecommendationDifficulty.ADAPTIVE,
                confidence=0.6,
                tags=["resources", name],
                valid_days=60,
                based_on=["component_analysis"],
                personalization_factors=[name],
                adaptability=0.4,
                relevance=0.6,
                evidence_strength=0.5,
            )
        )
    return recommendations


DEFAULT_RULES: tuple[RecommendationRule, ...] = (
    weakness_rule,
    readiness_rule,
    component_rule,
    time_management_rule,
    practice_frequency_rule,
    motivation_rule,
    resource_rule,
)
