"""
Progress Prediction

Projects the learner's average score week by week across the study plan:

- current trajectory: the analytics improvement rate (points per week,
  2.0 when unknown or zero), confidence max(0.3, 0.9 - 0.05 * week)
- optimized trajectory: 1.5x that rate, confidence max(0.5, 0.95 - 0.03 * week)
- 95% intervals of +/-15% around the optimized trajectory

Predicted scores are clamped to [0, 100]; a negative improvement rate can
only drive a trajectory down to zero.
"""

from typing import Sequence

from exam_analytics.models.exam import ProgressAnalytics
from exam_analytics.models.recommendations import (
    ConfidenceInterval,
    InfluenceFactor,
    PersonalizedStudyPlan,
    ProgressPrediction,
    RiskFactor,
    TrajectoryPoint,
)
from exam_analytics.services.statistics import clamp

DEFAULT_IMPROVEMENT_RATE = 2.0
OPTIMIZED_RATE_MULTIPLIER = 1.5
INTERVAL_BAND = 0.15
CONSISTENCY_RISK_THRESHOLD = 0.6


def _trajectory(
    current: float,
    rate: float,
    weeks: int,
    start_confidence: float,
    decay: float,
    floor: float,
) -> list[TrajectoryPoint]:
    points = []
    for week in range(1, weeks + 1):
        predicted = clamp(current + rate * week, 0.0, 100.0)
        points.append(
            TrajectoryPoint(
                week=week,
                predicted_score=predicted,
                readiness_level=predicted / 100,
                confidence=max(floor, start_confidence - decay * week),
            )
        )
    return points


def _confidence_intervals(trajectory: Sequence[TrajectoryPoint]) -> list[ConfidenceInterval]:
    return [
        ConfidenceInterval(
            week=point.week,
            lower=point.predicted_score * (1 - INTERVAL_BAND),
            upper=min(100.0, point.predicted_score * (1 + INTERVAL_BAND)),
            confidence=0.95,
        )
        for point in trajectory
    ]


def _influence_factors() -> list[InfluenceFactor]:
    return [
        InfluenceFactor(
            factor="Study Consistency",
            impact=0.4,
            description="Regular study habits have the highest impact on success",
            controllable=True,
        ),
        InfluenceFactor(
            factor="Time Management",
            impact=0.3,
            description="Effective time management significantly affects performance",
            controllable=True,
        ),
    ]


def _risks(analytics: ProgressAnalytics) -> list[RiskFactor]:
    if analytics.consistency_score >= CONSISTENCY_RISK_THRESHOLD:
        return []
    return [
        RiskFactor(
            risk="Performance Inconsistency",
            probability=0.7,
            impact=0.6,
            mitigation=[
                "Establish regular study routine",
                "Focus on time management",
                "Practice under exam conditions",
            ],
        )
    ]


def predict_progress(
    analytics: ProgressAnalytics,
    plan: PersonalizedStudyPlan,
) -> ProgressPrediction:
    """
    Predict score trajectories over the plan duration.

    Args:
        analytics: Supplies the current average and improvement rate.
        plan: The plan whose duration bounds the projection.

    Returns:
        ProgressPrediction with one point per plan week in each trajectory.
    """
    rate = analytics.improvement_rate or DEFAULT_IMPROVEMENT_RATE
    current = analytics.average_score

    optimized = _trajectory(
        current, rate * OPTIMIZED_RATE_MULTIPLIER, plan.duration, 0.95, 0.03, 0.5
    )
    return ProgressPrediction(
        current_trajectory=_trajectory(current, rate, plan.duration, 0.9, 0.05, 0.3),
        optimized_trajectory=optimized,
        confidence_intervals=_confidence_intervals(optimized),
        key_factors=_influence_factors(),
        risk_assessment=_risks(analytics),
    )
