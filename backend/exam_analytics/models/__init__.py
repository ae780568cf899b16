"""
Pydantic models for the analytics engine.

Models are organized by domain:
- base.py: Shared base classes (InputModel, ResultModel, ConfigModel)
- exam.py: Session, response, progress and preference inputs
- readiness.py: ReadinessAssessment and its parts
- weakness.py: WeaknessAnalysis and its parts
- recommendations.py: StudyRecommendations, plans, schedules, predictions

Usage:
    from exam_analytics.models import ExamSession, UserProgress
    from exam_analytics.models.weakness import WeaknessDetail
"""

from exam_analytics.models.base import ConfigModel, InputModel, ResultModel, as_utc
from exam_analytics.models.exam import (
    ComponentAnalysis,
    ExamResponse,
    ExamSession,
    ProgressAnalytics,
    UserPreferences,
    UserProgress,
)
from exam_analytics.models.readiness import (
    DataQualityMetrics,
    Milestone,
    ReadinessAssessment,
    ReadinessFactors,
    ReadinessRecommendation,
)
from exam_analytics.models.weakness import (
    AnalysisDataQuality,
    ImprovementPlan,
    ImprovementWeeklyGoal,
    PlanMilestone,
    PrioritizedAction,
    RecommendedResource,
    WeaknessAnalysis,
    WeaknessDetail,
    WeaknessEvidence,
    WeaknessImpact,
    WeaknessPattern,
    WeaknessRecommendation,
)
from exam_analytics.models.recommendations import (
    ActivitySlot,
    AdaptationRule,
    AdaptiveSchedule,
    ConfidenceInterval,
    CuratedResources,
    DailyActivity,
    ExpectedOutcome,
    InfluenceFactor,
    MotivationalInsight,
    PersonalizedStudyPlan,
    PhaseAssessment,
    PhaseWeeklyGoal,
    PlanMetric,
    ProgressPrediction,
    RecommendationAction,
    RecommendationProvenance,
    RecommendationsMetadata,
    RecommendationSummary,
    RiskFactor,
    ScheduleAdaptation,
    StudyMilestone,
    StudyPhase,
    StudyRecommendation,
    StudyRecommendations,
    StudyResource,
    TimeEstimate,
    TrajectoryPoint,
)

__all__ = [
    # Base
    "ConfigModel",
    "InputModel",
    "ResultModel",
    "as_utc",
    # Inputs
    "ComponentAnalysis",
    "ExamResponse",
    "ExamSession",
    "ProgressAnalytics",
    "UserPreferences",
    "UserProgress",
    # Readiness
    "DataQualityMetrics",
    "Milestone",
    "ReadinessAssessment",
    "ReadinessFactors",
    "ReadinessRecommendation",
    # Weakness
    "AnalysisDataQuality",
    "ImprovementPlan",
    "ImprovementWeeklyGoal",
    "PlanMilestone",
    "PrioritizedAction",
    "RecommendedResource",
    "WeaknessAnalysis",
    "WeaknessDetail",
    "WeaknessEvidence",
    "WeaknessImpact",
    "WeaknessPattern",
    "WeaknessRecommendation",
    # Recommendations
    "ActivitySlot",
    "AdaptationRule",
    "AdaptiveSchedule",
    "ConfidenceInterval",
    "CuratedResources",
    "DailyActivity",
    "ExpectedOutcome",
    "InfluenceFactor",
    "MotivationalInsight",
    "PersonalizedStudyPlan",
    "PhaseAssessment",
    "PhaseWeeklyGoal",
    "PlanMetric",
    "ProgressPrediction",
    "RecommendationAction",
    "RecommendationProvenance",
    "RecommendationsMetadata",
    "RecommendationSummary",
    "RiskFactor",
    "ScheduleAdaptation",
    "StudyMilestone",
    "StudyPhase",
    "StudyRecommendation",
    "StudyRecommendations",
    "StudyResource",
    "TimeEstimate",
    "TrajectoryPoint",
]
