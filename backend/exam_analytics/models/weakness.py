"""
Weakness Analysis Models (Pydantic)

Result shapes produced by weakness detection:
- Individual weaknesses with evidence, impact and recommendations
- Cross-cutting patterns and the prioritized action list
- The draft improvement plan
- The top-level WeaknessAnalysis

Weaknesses are derived facts: always regenerated from current session
data, with no lifecycle beyond the analysis call that produced them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from exam_analytics.enums.analytics import (
    AssessmentType,
    RecommendationDifficulty,
    RecommendationPriority,
    ResourceType,
    WeaknessSeverity,
    WeaknessTrend,
    WeaknessType,
)
from exam_analytics.enums.exam import Component
from exam_analytics.models.base import ResultModel


# ===========================================
# Weakness Detail
# ===========================================


class WeaknessEvidence(ResultModel):
    """
    Data supporting a detected weakness.

    ``heuristic`` marks evidence inferred from aggregate session scores
    rather than from response-level classifications.
    """

    average_score: float = 0.0
    score_variation: float = Field(0.0, description="Coefficient of variation")
    session_count: int = 0
    question_count: int = 0
    recent_performance: list[float] = Field(default_factory=list)
    error_patterns: list[str] = Field(default_factory=list)
    time_spent_average_seconds: float = 0.0
    improvement_rate: float = Field(0.0, description="Score points per session")
    heuristic: bool = False


class WeaknessImpact(ResultModel):
    """Multi-dimensional impact of a weakness."""

    overall_score_impact: float = Field(..., ge=0.0, le=1.0)
    exam_readiness_impact: float = Field(..., ge=0.0, le=1.0)
    learning_velocity_impact: float = Field(..., ge=0.0, le=1.0)
    confidence_impact: float = Field(..., ge=0.0, le=1.0)
    priority_score: float = Field(..., ge=0.0, le=1.0, description="Higher = more urgent")


class RecommendedResource(ResultModel):
    """A resource attached to a weakness recommendation."""

    type: ResourceType
    title: str
    description: str
    url: Optional[str] = None
    estimated_time_minutes: int
    difficulty: RecommendationDifficulty


class WeaknessRecommendation(ResultModel):
    """Short, weakness-specific advice."""

    action: str
    priority: RecommendationPriority
    estimated_time_investment_hours: float
    expected_improvement: float = Field(..., description="Score points")
    resources: list[RecommendedResource] = Field(default_factory=list)


class WeaknessDetail(ResultModel):
    """One identified weakness."""

    id: str
    type: WeaknessType
    severity: WeaknessSeverity
    component: Component
    specific_area: str
    description: str
    evidence: WeaknessEvidence
    impact: WeaknessImpact
    recommendations: list[WeaknessRecommendation] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    detected_at: datetime
    trend: WeaknessTrend = WeaknessTrend.STABLE


# ===========================================
# Aggregation
# ===========================================


class WeaknessPattern(ResultModel):
    """A component affected by more than one distinct weakness."""

    pattern: str
    occurrences: int
    components: list[Component]
    severity: WeaknessSeverity
    description: str
    recommendations: list[str] = Field(default_factory=list)


class PrioritizedAction(ResultModel):
    """A weakness ranked by impact x urgency."""

    rank: int = Field(..., ge=1)
    weakness: WeaknessDetail
    estimated_impact: float
    urgency: float
    effort: float = Field(..., description="Estimated hours")
    action_plan: list[str] = Field(default_factory=list)


# ===========================================
# Improvement Plan
# ===========================================


class ImprovementWeeklyGoal(ResultModel):
    """Focus for one week of the draft improvement plan."""

    week: int = Field(..., ge=1)
    focus_areas: list[str] = Field(default_factory=list)
    study_hours: float = 0.0
    practice_types: list[WeaknessType] = Field(default_factory=list)
    target_improvement: float = 5.0
    success_metrics: list[str] = Field(default_factory=list)


class PlanMilestone(ResultModel):
    """Checkpoint in the draft improvement plan."""

    week: int = Field(..., ge=1)
    title: str
    target_score: float
    assessment_type: AssessmentType
    success_criteria: list[str] = Field(default_factory=list)


class ImprovementPlan(ResultModel):
    """Draft multi-week plan derived from the prioritized actions."""

    weekly_goals: list[ImprovementWeeklyGoal] = Field(default_factory=list)
    milestones: list[PlanMilestone] = Field(default_factory=list)
    total_estimated_weeks: int
    expected_score_improvement: float
    risk_factors: list[str] = Field(default_factory=list)


class AnalysisDataQuality(ResultModel):
    """Data-quality sub-scores feeding the analysis confidence."""

    session_coverage: float = Field(..., ge=0.0, le=1.0)
    component_coverage: float = Field(..., ge=0.0, le=1.0)
    time_span_days: float = Field(..., ge=0.0)
    recency_score: float = Field(..., ge=0.0, le=1.0)
    volume_score: float = Field(..., ge=0.0, le=1.0)


class WeaknessAnalysis(ResultModel):
    """
    Complete weakness analysis.

    Every detected weakness appears in exactly one severity list.
    """

    overall_weakness_score: float = Field(..., ge=0.0, le=1.0)
    critical_weaknesses: list[WeaknessDetail] = Field(default_factory=list)
    moderate_weaknesses: list[WeaknessDetail] = Field(default_factory=list)
    slight_weaknesses: list[WeaknessDetail] = Field(default_factory=list)
    patterns: list[WeaknessPattern] = Field(default_factory=list)
    prioritized_actions: list[PrioritizedAction] = Field(default_factory=list)
    improvement_plan: ImprovementPlan
    confidence: float = Field(..., ge=0.0, le=1.0)
    analysis_date: datetime
    data_quality: AnalysisDataQuality

    @property
    def all_weaknesses(self) -> list[WeaknessDetail]:
        """All weaknesses, critical first."""
        return [
            *self.critical_weaknesses,
            *self.moderate_weaknesses,
            *self.slight_weaknesses,
        ]
