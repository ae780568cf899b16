"""
Shared Statistics Helpers

Stateless numeric helpers reused by all three engines:
- Means, clamping, linear-regression slope and coefficient of variation
- Completed-session filtering and chronological ordering
- pandas frames for per-component and per-response aggregation

All helpers are total: empty or too-short inputs return a neutral 0.0 (or
an empty frame) instead of raising, so callers can apply their own
insufficient-data policy.

Usage:
    from exam_analytics.services.statistics import (
        coefficient_of_variation,
        linear_regression_slope,
    )

    slope = linear_regression_slope([60, 62, 65, 70])  # 3.3 points/session
    cv = coefficient_of_variation([30, 45, 60])        # 0.27
"""

import math
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional, Sequence

import pandas as pd

from exam_analytics.enums.exam import ALL_COMPONENTS, Component
from exam_analytics.models.exam import ExamSession

SECONDS_PER_DAY = 24 * 60 * 60

SESSION_COLUMNS = [
    "session_id",
    "component",
    "started_at",
    "duration_minutes",
    "score",
]

RESPONSE_COLUMNS = [
    "session_id",
    "component",
    "question_type",
    "score",
    "time_spent_seconds",
    "error_category",
]


# ===========================================
# Scalar Helpers
# ===========================================


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty input."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def linear_regression_slope(values: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of values over their index.

    Args:
        values: Ordered observations (e.g. session scores).

    Returns:
        Change per step; 0.0 for fewer than two values.
    """
    n = len(values)
    if n < 2:
        return 0.0

    x_mean = (n - 1) / 2
    y_mean = mean(values)
    numerator = sum((i - x_mean) * (y - y_mean) for i, y in enumerate(values))
    denominator = sum((i - x_mean) ** 2 for i in range(n))
    return numerator / denominator if denominator else 0.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    """
    Population standard deviation divided by the mean.

    Returns:
        CV, or 0.0 for fewer than two values or a zero mean.
    """
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    if avg == 0:
        return 0.0
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / avg


def days_between(start: datetime, end: datetime) -> float:
    """Signed number of days from start to end."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


# ===========================================
# Session Helpers
# ===========================================


def completed_sessions(sessions: Iterable[ExamSession]) -> list[ExamSession]:
    """Completed sessions in chronological order (stable for equal starts)."""
    return sorted(
        (s for s in sessions if s.is_completed),
        key=lambda s: s.started_at,
    )


def session_scores(sessions: Iterable[ExamSession]) -> list[float]:
    """Scores of the sessions that carry one, in input order."""
    return [s.score for s in sessions if s.score is not None]


def session_durations(sessions: Iterable[ExamSession]) -> list[float]:
    """Session durations in minutes, in input order."""
    return [s.duration_minutes for s in sessions]


def session_intervals(sessions: Sequence[ExamSession]) -> list[float]:
    """Days between consecutive session starts."""
    return [
        days_between(previous.started_at, current.started_at)
        for previous, current in zip(sessions, sessions[1:])
    ]


def distinct_components(sessions: Iterable[ExamSession]) -> set[Component]:
    return {s.component for s in sessions}


def most_practised_component(
    sessions: Iterable[ExamSession],
) -> Optional[Component]:
    """
    Component with the most sessions.

    Ties are broken by the canonical component order, so the result does
    not depend on input ordering.
    """
    counts = Counter(s.component for s in sessions)
    if not counts:
        return None
    return max(ALL_COMPONENTS, key=lambda c: (counts[c], -ALL_COMPONENTS.index(c)))


# ===========================================
# DataFrames
# ===========================================


def sessions_frame(sessions: Iterable[ExamSession]) -> pd.DataFrame:
    """
    Flatten sessions into a DataFrame, one row per session.

    Returns:
        DataFrame with columns: session_id, component, started_at,
        duration_minutes, score (NaN when unscored).
    """
    rows = [
        {
            "session_id": s.id,
            "component": s.component,
            "started_at": s.started_at,
            "duration_minutes": s.duration_minutes,
            "score": s.score,
        }
        for s in sessions
    ]
    if not rows:
        return pd.DataFrame(columns=SESSION_COLUMNS)
    return pd.DataFrame(rows, columns=SESSION_COLUMNS)


def component_score_history(sessions: Sequence[ExamSession]) -> dict[Component, list[float]]:
    """
    Chronological scores per component, unscored sessions dropped.

    Args:
        sessions: Sessions in chronological order.

    Returns:
        Mapping from component to its ordered scores (components with no
        scored session are omitted).
    """
    frame = sessions_frame(sessions).dropna(subset=["score"])
    if frame.empty:
        return {}
    return {
        component: [float(score) for score in group["score"]]
        for component, group in frame.groupby("component", sort=False)
    }


def responses_frame(sessions: Iterable[ExamSession]) -> pd.DataFrame:
    """
    Flatten graded responses into a DataFrame, one row per response.

    Responses without a correctness signal are dropped.

    Returns:
        DataFrame with columns: session_id, component, question_type,
        score (0-100), time_spent_seconds, error_category.
    """
    rows = [
        {
            "session_id": s.id,
            "component": s.component,
            "question_type": r.question_type,
            "score": r.score,
            "time_spent_seconds": r.time_spent_seconds,
            "error_category": r.error_category,
        }
        for s in sessions
        for r in s.responses
        if r.score is not None
    ]
    if not rows:
        return pd.DataFrame(columns=RESPONSE_COLUMNS)
    return pd.DataFrame(rows, columns=RESPONSE_COLUMNS)
