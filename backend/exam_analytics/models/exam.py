"""
Exam Session and Progress Input Models (Pydantic)

Snapshots supplied to the analytics engine by the progress/session
repository:
- Exam sessions and their individual question responses
- The aggregate progress record for one learner in one course
- Optional user scheduling preferences

ARCHITECTURE NOTE:
    The engine only reads these objects. Ownership and mutation belong to
    the persistence and progress-tracking collaborators.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from exam_analytics.enums.analytics import RecommendationDifficulty
from exam_analytics.enums.exam import (
    Component,
    ComponentTrend,
    QuestionType,
    SessionType,
)
from exam_analytics.models.base import InputModel, as_utc


# ===========================================
# Exam Sessions
# ===========================================


class ExamResponse(InputModel):
    """
    A single answered question inside an exam session.

    Correctness is expressed either as partial credit (0-1) or as a boolean.
    The optional error category is a label supplied by the grading
    collaborator (e.g. "grammar_errors") and drives error-pattern detection.
    """

    question_id: str
    question_type: Optional[QuestionType] = None
    is_correct: Optional[bool] = None
    partial_credit: Optional[float] = Field(None, ge=0.0, le=1.0)
    time_spent_seconds: float = Field(0.0, ge=0.0)
    attempts: int = Field(1, ge=0)
    error_category: Optional[str] = None

    @property
    def score(self) -> Optional[float]:
        """Response score on a 0-100 scale, or None when ungraded."""
        if self.partial_credit is not None:
            return self.partial_credit * 100
        if self.is_correct is not None:
            return 100.0 if self.is_correct else 0.0
        return None


class ExamSession(InputModel):
    """
    One practice or exam attempt.

    Immutable once completed. ``is_completed`` defaults to whether a
    completion timestamp is present.
    """

    id: str
    user_id: str
    component: Component
    session_type: SessionType = SessionType.PRACTICE
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: float = Field(0.0, ge=0.0)
    score: Optional[float] = Field(None, ge=0.0, le=100.0)
    is_completed: Optional[bool] = None
    responses: list[ExamResponse] = Field(default_factory=list)

    @field_validator("started_at", "completed_at")
    @classmethod
    def _normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @model_validator(mode="after")
    def _default_completion(self) -> ExamSession:
        if self.is_completed is None:
            self.is_completed = self.completed_at is not None
        return self

    @property
    def duration_minutes(self) -> float:
        """Session duration in minutes."""
        return self.duration_seconds / 60


# ===========================================
# Progress Aggregates
# ===========================================


class ComponentAnalysis(InputModel):
    """
    Per-skill aggregate derived upstream from sessions.

    The skill breakdown maps sub-skill names (e.g. "grammar",
    "vocabulary") to average scores on a 0-100 scale.
    """

    sessions_completed: int = Field(0, ge=0)
    average_score: float = Field(0.0, ge=0.0)
    best_score: float = Field(0.0, ge=0.0)
    time_spent_minutes: float = Field(0.0, ge=0.0)
    improvement_trend: ComponentTrend = ComponentTrend.STABLE
    skill_breakdown: dict[str, float] = Field(default_factory=dict)
    recommended_focus: list[str] = Field(default_factory=list)


class ProgressAnalytics(InputModel):
    """
    Aggregate analytics for one learner in one course.

    Scores are on a 0-100 scale; consistency is 0-1; learning velocity is
    readiness gained per hour of study.
    """

    total_sessions: int = Field(0, ge=0)
    total_time_spent_minutes: float = Field(0.0, ge=0.0)
    average_score: float = Field(0.0, ge=0.0)
    best_score: float = Field(0.0, ge=0.0)
    consistency_score: float = Field(0.0, ge=0.0, le=1.0)
    improvement_rate: float = 0.0
    learning_velocity: float = Field(0.0, ge=0.0)
    component_analysis: dict[Component, ComponentAnalysis] = Field(
        default_factory=dict
    )
    predicted_exam_score: Optional[float] = None


class UserProgress(InputModel):
    """
    A learner's aggregate state for one course.

    ``analytics`` is optional at the model level so that a record without
    aggregates can be represented; every engine rejects it with
    MissingAnalyticsError.
    """

    id: Optional[str] = None
    user_id: str
    course_id: Optional[str] = None
    enrollment_date: Optional[datetime] = None
    last_activity: datetime
    overall_progress: float = Field(0.0, ge=0.0, le=1.0)
    target_exam_date: Optional[datetime] = None
    analytics: Optional[ProgressAnalytics] = None

    @field_validator("enrollment_date", "last_activity", "target_exam_date")
    @classmethod
    def _normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# ===========================================
# Preferences
# ===========================================


class UserPreferences(InputModel):
    """
    Optional scheduling preferences used to personalize recommendations.

    Any field left unset falls back to the engine's documented default.
    """

    preferred_times: Optional[list[str]] = Field(
        None, description="Preferred session start times, e.g. ['07:30', '19:00']"
    )
    session_length_minutes: Optional[int] = Field(None, gt=0)
    frequency_per_week: Optional[int] = Field(None, gt=0)
    max_weekly_hours: Optional[float] = Field(None, gt=0)
    flexibility: Optional[float] = Field(None, ge=0.0, le=1.0)
    difficulty_preference: Optional[RecommendationDifficulty] = None
    component_preferences: dict[Component, float] = Field(default_factory=dict)
