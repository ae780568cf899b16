"""
Shared Test Fixtures and Configuration

This module provides factories and fixtures for learner snapshots used
across the unit tests. Every snapshot is anchored to a fixed reference time
so that engine outputs are reproducible.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Sequence

import pytest

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from exam_analytics.enums import ALL_COMPONENTS, Component, ComponentTrend
from exam_analytics.models import (
    ComponentAnalysis,
    ExamResponse,
    ExamSession,
    ProgressAnalytics,
    UserProgress,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Factories
# ============================================================================


def make_session(
    index: int = 0,
    *,
    component: Component = Component.READING,
    score: Optional[float] = 75.0,
    started_at: Optional[datetime] = None,
    duration_minutes: float = 45.0,
    completed: bool = True,
    responses: Optional[list[ExamResponse]] = None,
) -> ExamSession:
    """Build one completed exam session."""
    started_at = started_at or NOW - timedelta(days=30 - index)
    return ExamSession(
        id=f"session-{index}",
        user_id="user-1",
        component=component,
        started_at=started_at,
        completed_at=started_at + timedelta(minutes=duration_minutes) if completed else None,
        duration_seconds=duration_minutes * 60,
        score=score,
        responses=responses or [],
    )


def make_sessions(
    scores: Sequence[Optional[float]],
    *,
    span_days: float = 30.0,
    components: Sequence[Component] = ALL_COMPONENTS,
    durations: Optional[Sequence[float]] = None,
    end: datetime = NOW,
) -> list[ExamSession]:
    """
    Build a chronological history, evenly spread over ``span_days`` and
    ending at ``end``, rotating through ``components``.
    """
    count = len(scores)
    step = span_days / (count - 1) if count > 1 else 0.0
    start = end - timedelta(days=span_days if count > 1 else 0)
    return [
        make_session(
            i,
            component=components[i % len(components)],
            score=score,
            started_at=start + timedelta(days=step * i),
            duration_minutes=durations[i] if durations else 45.0,
        )
        for i, score in enumerate(scores)
    ]


def make_component_analysis(
    average_score: float = 75.0,
    *,
    sessions_completed: int = 5,
    trend: ComponentTrend = ComponentTrend.STABLE,
    skill_breakdown: Optional[dict[str, float]] = None,
) -> ComponentAnalysis:
    return ComponentAnalysis(
        sessions_completed=sessions_completed,
        average_score=average_score,
        best_score=min(100.0, average_score + 10),
        time_spent_minutes=45.0 * sessions_completed,
        improvement_trend=trend,
        skill_breakdown=skill_breakdown or {},
    )


def make_analytics(
    average_score: float = 75.0,
    *,
    consistency_score: float = 0.8,
    improvement_rate: float = 2.0,
    learning_velocity: float = 0.05,
    total_sessions: int = 20,
    component_scores: Optional[dict[Component, float]] = None,
    trend: ComponentTrend = ComponentTrend.STABLE,
) -> ProgressAnalytics:
    if component_scores is None:
        component_scores = {component: average_score for component in ALL_COMPONENTS}
    return ProgressAnalytics(
        total_sessions=total_sessions,
        total_time_spent_minutes=45.0 * total_sessions,
        average_score=average_score,
        best_score=min(100.0, average_score + 10),
        consistency_score=consistency_score,
        improvement_rate=improvement_rate,
        learning_velocity=learning_velocity,
        component_analysis={
            component: make_component_analysis(score, trend=trend)
            for component, score in component_scores.items()
        },
    )


def make_progress(
    analytics: Optional[ProgressAnalytics] = None,
    *,
    last_activity: datetime = NOW - timedelta(days=1),
    overall_progress: float = 0.5,
    with_analytics: bool = True,
) -> UserProgress:
    return UserProgress(
        id="progress-1",
        user_id="user-1",
        course_id="course-1",
        enrollment_date=NOW - timedelta(days=60),
        last_activity=last_activity,
        overall_progress=overall_progress,
        analytics=(analytics or make_analytics()) if with_analytics else None,
    )


# ============================================================================
# Scenario Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def excellent_learner() -> tuple[UserProgress, list[ExamSession]]:
    """
    Strong, steadily improving learner.

    20 sessions evenly spread over 30 days with scores rising from 80 to 99,
    constant session length and high consistency.
    """
    sessions = make_sessions([80.0 + i for i in range(20)], span_days=30)
    analytics = make_analytics(
        90.0,
        consistency_score=0.9,
        improvement_rate=1.0,
        trend=ComponentTrend.IMPROVING,
    )
    return make_progress(analytics, last_activity=NOW, overall_progress=0.8), sessions


@pytest.fixture
def cold_start_learner() -> tuple[UserProgress, list[ExamSession]]:
    """Enrolled learner with no sessions and an empty aggregate."""
    analytics = ProgressAnalytics(average_score=0.0, consistency_score=0.0)
    return make_progress(analytics, last_activity=NOW, overall_progress=0.0), []


@pytest.fixture
def stagnating_learner() -> tuple[UserProgress, list[ExamSession]]:
    """Last 10 session scores fall by 2 points each."""
    sessions = make_sessions([80.0 - 2 * i for i in range(10)], span_days=20)
    analytics = make_analytics(71.0, consistency_score=0.7, improvement_rate=-2.0)
    return make_progress(analytics), sessions


@pytest.fixture
def struggling_learner() -> tuple[UserProgress, list[ExamSession]]:
    """
    Weak writing, erratic session lengths and low consistency.
    """
    scores = [45.0, 30.0, 55.0, 35.0, 50.0, 32.0, 48.0, 38.0]
    durations = [10.0, 90.0, 20.0, 80.0, 15.0, 70.0, 30.0, 60.0]
    sessions = make_sessions(
        scores,
        span_days=21,
        components=(Component.READING, Component.WRITING),
        durations=durations,
    )
    analytics = make_analytics(
        42.0,
        consistency_score=0.25,
        improvement_rate=-1.0,
        learning_velocity=0.02,
        total_sessions=8,
        component_scores={
            Component.READING: 49.5,
            Component.WRITING: 33.75,
            Component.LISTENING: 65.0,
            Component.SPEAKING: 80.0,
        },
        trend=ComponentTrend.DECLINING,
    )
    return make_progress(analytics, last_activity=NOW - timedelta(days=2)), sessions
