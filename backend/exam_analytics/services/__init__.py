"""
Analytics Services

Modules:
- statistics: Shared numeric helpers and pandas frames
- readiness: Readiness scoring engine
- weakness_detection: Weakness detection engine
- recommendation_rules: Recommendation rule registry
- resource_curation: Resource builders and tiering
- study_plan: Phased study plan, adaptive schedule, insights
- progress_prediction: Week-by-week score trajectories
- recommendation_engine: Recommendation synthesis engine
- pipeline: Orchestrates the three engines

Usage:
    from exam_analytics.services import (
        ReadinessEngine,
        WeaknessDetectionEngine,
        StudyRecommendationEngine,
        create_pipeline,
    )
"""

from exam_analytics.services.pipeline import (
    AnalyticsPipeline,
    AnalyticsReport,
    create_pipeline,
)
from exam_analytics.services.readiness import ReadinessEngine, require_analytics
from exam_analytics.services.recommendation_engine import StudyRecommendationEngine
from exam_analytics.services.recommendation_rules import (
    DEFAULT_RULES,
    RecommendationContext,
    RecommendationRule,
)
from exam_analytics.services.weakness_detection import WeaknessDetectionEngine

__all__ = [
    # Engines
    "ReadinessEngine",
    "WeaknessDetectionEngine",
    "StudyRecommendationEngine",
    "require_analytics",
    # Rules
    "DEFAULT_RULES",
    "RecommendationContext",
    "RecommendationRule",
    # Pipeline
    "AnalyticsPipeline",
    "AnalyticsReport",
    "create_pipeline",
]
