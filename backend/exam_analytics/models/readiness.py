"""
Readiness Assessment Models (Pydantic)

Result shapes produced by readiness scoring:
- The six contributing factor scores
- Readiness-level recommendations and milestones
- Data-quality metrics used to discount sparse histories
- The top-level ReadinessAssessment
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from exam_analytics.enums.analytics import (
    ReadinessLevel,
    ReadinessRecommendationType,
    RecommendationPriority,
)
from exam_analytics.enums.exam import Component
from exam_analytics.models.base import ResultModel


class ReadinessFactors(ResultModel):
    """
    The six independent readiness factors, each normalized to [0, 1].
    """

    overall_score: float = Field(..., ge=0.0, le=1.0)
    consistency: float = Field(..., ge=0.0, le=1.0)
    improvement: float = Field(..., ge=0.0, le=1.0)
    session_frequency: float = Field(..., ge=0.0, le=1.0)
    weakness_recovery: float = Field(..., ge=0.0, le=1.0)
    time_management: float = Field(..., ge=0.0, le=1.0)


class ReadinessRecommendation(ResultModel):
    """Advice emitted directly by readiness scoring."""

    type: ReadinessRecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    action_items: list[str] = Field(default_factory=list)
    estimated_impact: float = Field(
        ..., ge=0.0, le=1.0, description="Expected readiness improvement"
    )


class Milestone(ResultModel):
    """A readiness milestone gated by current readiness."""

    title: str
    description: str
    target_score: float
    estimated_weeks: int
    actions: list[str] = Field(default_factory=list)


class DataQualityMetrics(ResultModel):
    """
    How much the available session history can be trusted.

    ``consistency_score`` is the sample-size proxy
    ``min(1, session_count / minimum_sessions)`` that discounts the final
    readiness score.
    """

    session_count: int = Field(..., ge=0)
    time_span_days: float = Field(..., ge=0.0)
    component_coverage: float = Field(..., ge=0.0, le=1.0)
    consistency_score: float = Field(..., ge=0.0, le=1.0)
    recent_activity_score: float = Field(..., ge=0.0, le=1.0)


class ReadinessAssessment(ResultModel):
    """
    Calibrated exam-readiness assessment.

    Transient: recomputed on demand and never persisted by the engine.
    """

    overall_score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    level: ReadinessLevel
    factors: ReadinessFactors
    component_readiness: dict[Component, float] = Field(default_factory=dict)
    recommendations: list[ReadinessRecommendation] = Field(default_factory=list)
    estimated_exam_score: float = Field(..., ge=0.0, le=100.0)
    study_hours_recommended: int = Field(..., ge=0)
    next_milestones: list[Milestone] = Field(default_factory=list)
    data_quality: DataQualityMetrics
    assessed_at: datetime
