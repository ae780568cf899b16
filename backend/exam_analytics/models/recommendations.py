"""
Study Recommendation Models (Pydantic)

Result shapes produced by recommendation synthesis:
- StudyRecommendation and its nested action/resource/estimate records
- The phased PersonalizedStudyPlan
- Adaptive schedule, curated resources and motivational insights
- The week-by-week progress prediction
- The top-level StudyRecommendations bundle

Recommendations are ephemeral and re-derived on every call. ``valid_until``
communicates staleness to the caller; it is not a persistence contract.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from exam_analytics.enums.analytics import (
    ActivityType,
    AssessmentType,
    InsightType,
    RecommendationDifficulty,
    RecommendationPriority,
    RecommendationType,
    ResourceCost,
    ResourceType,
)
from exam_analytics.enums.exam import Component
from exam_analytics.models.base import ResultModel


# ===========================================
# Single Recommendation
# ===========================================


class RecommendationAction(ResultModel):
    """One ordered step of a recommendation."""

    action: str
    description: str
    time_required_minutes: int
    frequency: str = Field(..., description="once, daily or weekly")
    order: int = Field(..., ge=1)
    is_optional: bool = False
    success_criteria: list[str] = Field(default_factory=list)


class StudyResource(ResultModel):
    """A curated study resource."""

    type: ResourceType
    title: str
    description: str
    url: Optional[str] = None
    estimated_time_minutes: int
    difficulty: RecommendationDifficulty
    component: Component
    skills: list[str] = Field(default_factory=list)
    is_interactive: bool = True
    cost: ResourceCost = ResourceCost.FREE
    rating: Optional[float] = Field(None, ge=1.0, le=5.0)
    provider: Optional[str] = None


class TimeEstimate(ResultModel):
    """
    Time investment in hours.

    ``frequency`` tells how to read the figures: "weekly" estimates are
    hours per week, "total" estimates cover the whole recommendation.
    """

    minimum: float
    maximum: float
    optimal: float
    frequency: str
    duration: str


class ExpectedOutcome(ResultModel):
    """A metric the recommendation is expected to move."""

    metric: str
    improvement: float
    timeframe: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    description: str


class RecommendationProvenance(ResultModel):
    """What a recommendation was derived from and how much to trust it."""

    based_on: list[str] = Field(default_factory=list)
    algorithm_version: str
    personalization_factors: list[str] = Field(default_factory=list)
    adaptability_score: float = Field(..., ge=0.0, le=1.0)
    relevance_score: float = Field(..., ge=0.0, le=1.0)
    evidence_strength: float = Field(..., ge=0.0, le=1.0)


class StudyRecommendation(ResultModel):
    """A unit of actionable advice."""

    id: str
    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    rationale: str
    action_items: list[RecommendationAction] = Field(default_factory=list)
    resources: list[StudyResource] = Field(default_factory=list)
    time_estimate: TimeEstimate
    expected_outcomes: list[ExpectedOutcome] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    target_components: list[Component] = Field(default_factory=list)
    difficulty: RecommendationDifficulty
    confidence: float = Field(..., ge=0.0, le=1.0)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    valid_until: datetime
    metadata: RecommendationProvenance


# ===========================================
# Study Plan
# ===========================================


class PhaseWeeklyGoal(ResultModel):
    """Targets for one absolute plan week."""

    week: int = Field(..., ge=1)
    description: str
    target_scores: dict[Component, float]
    practice_hours: float
    activities: list[str] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)


class ActivitySlot(ResultModel):
    """A timed block inside a study day."""

    time: str = Field(..., description="Start time, HH:MM")
    duration_minutes: int
    activity: str
    component: Component
    type: ActivityType
    difficulty: RecommendationDifficulty
    resources: list[str] = Field(default_factory=list)


class DailyActivity(ResultModel):
    """The activity template for one weekday."""

    day: str
    activities: list[ActivitySlot] = Field(default_factory=list)
    total_time_minutes: int
    primary_focus: Component


class PhaseAssessment(ResultModel):
    """An assessment scheduled inside a phase (week is an absolute plan week)."""

    week: int = Field(..., ge=1)
    type: AssessmentType
    components: list[Component]
    duration_minutes: int
    passing_score: float
    purpose: str


class StudyPhase(ResultModel):
    """A contiguous multi-week segment of the plan."""

    phase: int = Field(..., ge=1)
    name: str
    description: str
    duration: int = Field(..., ge=1, description="Weeks")
    start_week: int = Field(..., ge=1)
    focus_components: list[Component] = Field(default_factory=list)
    weekly_goals: list[PhaseWeeklyGoal] = Field(default_factory=list)
    daily_schedule: list[DailyActivity] = Field(default_factory=list)
    assessments: list[PhaseAssessment] = Field(default_factory=list)


class StudyMilestone(ResultModel):
    """Top-level plan checkpoint."""

    week: int = Field(..., ge=1)
    title: str
    description: str
    target_metrics: dict[str, float] = Field(default_factory=dict)
    assessment_type: AssessmentType
    success_criteria: list[str] = Field(default_factory=list)
    rewards: list[str] = Field(default_factory=list)


class AdaptationRule(ResultModel):
    """Condition under which the plan should be adjusted."""

    condition: str
    action: str
    priority: int
    description: str


class PlanMetric(ResultModel):
    """A measurable success criterion for the whole plan."""

    name: str
    current_value: float
    target_value: float
    unit: str
    importance: float = Field(..., ge=0.0, le=1.0)


class PersonalizedStudyPlan(ResultModel):
    """
    Multi-week phased plan.

    Phase durations sum to ``duration`` and every milestone week lies in
    ``[1, duration]``.
    """

    id: str
    name: str
    description: str
    duration: int = Field(..., ge=1, description="Weeks")
    phases: list[StudyPhase] = Field(default_factory=list)
    milestones: list[StudyMilestone] = Field(default_factory=list)
    adaptation_rules: list[AdaptationRule] = Field(default_factory=list)
    success_metrics: list[PlanMetric] = Field(default_factory=list)


# ===========================================
# Schedule, Resources, Insights
# ===========================================


class ScheduleAdaptation(ResultModel):
    trigger: str
    adjustment: str
    description: str


class AdaptiveSchedule(ResultModel):
    """Session cadence derived from preferences with fallbacks."""

    preferred_times: list[str]
    session_length_minutes: int
    frequency_per_week: int
    flexibility: float = Field(..., ge=0.0, le=1.0)
    adaptations: list[ScheduleAdaptation] = Field(default_factory=list)


class CuratedResources(ResultModel):
    """Resources tiered by importance and broken down by component."""

    essential: list[StudyResource] = Field(default_factory=list)
    supplementary: list[StudyResource] = Field(default_factory=list)
    advanced: list[StudyResource] = Field(default_factory=list)
    category_breakdown: dict[Component, list[StudyResource]] = Field(
        default_factory=dict
    )


class MotivationalInsight(ResultModel):
    type: InsightType
    title: str
    message: str
    evidence: list[str] = Field(default_factory=list)
    action_suggestion: Optional[str] = None


# ===========================================
# Prediction
# ===========================================


class TrajectoryPoint(ResultModel):
    week: int = Field(..., ge=1)
    predicted_score: float = Field(..., ge=0.0, le=100.0)
    readiness_level: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)


class ConfidenceInterval(ResultModel):
    week: int = Field(..., ge=1)
    lower: float
    upper: float = Field(..., le=100.0)
    confidence: float = Field(..., ge=0.0, le=1.0)


class InfluenceFactor(ResultModel):
    factor: str
    impact: float = Field(..., ge=-1.0, le=1.0)
    description: str
    controllable: bool


class RiskFactor(ResultModel):
    risk: str
    probability: float = Field(..., ge=0.0, le=1.0)
    impact: float = Field(..., ge=0.0, le=1.0)
    mitigation: list[str] = Field(default_factory=list)


class ProgressPrediction(ResultModel):
    """Current-pace and plan-optimized score trajectories."""

    current_trajectory: list[TrajectoryPoint] = Field(default_factory=list)
    optimized_trajectory: list[TrajectoryPoint] = Field(default_factory=list)
    confidence_intervals: list[ConfidenceInterval] = Field(default_factory=list)
    key_factors: list[InfluenceFactor] = Field(default_factory=list)
    risk_assessment: list[RiskFactor] = Field(default_factory=list)


# ===========================================
# Bundle
# ===========================================


class RecommendationSummary(ResultModel):
    total_recommendations: int
    critical_actions: int
    estimated_weekly_hours: int
    focus_areas: list[str] = Field(default_factory=list)
    primary_goal: str
    confidence_level: float = Field(..., ge=0.0, le=1.0)
    time_to_goal: str


class RecommendationsMetadata(ResultModel):
    generated_at: datetime
    based_on_sessions: int
    data_quality: float = Field(..., ge=0.0, le=1.0)
    algorithm_version: str
    personalization_level: float = Field(..., ge=0.0, le=1.0)
    refresh_recommended: datetime


class StudyRecommendations(ResultModel):
    """
    Complete synthesis output.

    ``immediate``, ``short_term`` and ``long_term`` partition the filtered
    recommendation set: each recommendation appears in exactly one bucket.
    """

    summary: RecommendationSummary
    immediate: list[StudyRecommendation] = Field(default_factory=list)
    short_term: list[StudyRecommendation] = Field(default_factory=list)
    long_term: list[StudyRecommendation] = Field(default_factory=list)
    study_plan: PersonalizedStudyPlan
    adaptive_schedule: AdaptiveSchedule
    resources: CuratedResources
    motivational_insights: list[MotivationalInsight] = Field(default_factory=list)
    progress: ProgressPrediction
    metadata: RecommendationsMetadata

    @property
    def all_recommendations(self) -> list[StudyRecommendation]:
        """Every recommendation, immediate first."""
        return [*self.immediate, *self.short_term, *self.long_term]
