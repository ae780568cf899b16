"""
Centralized enum definitions for the analytics engine.

All enums are organized by domain:
- exam.py: Components, levels, session and question types (inputs)
- analytics.py: Readiness levels, weakness and recommendation labels (outputs)

Usage:
    from exam_analytics.enums import Component, ReadinessLevel

    # Or import from specific module
    from exam_analytics.enums.analytics import WeaknessSeverity
"""

from exam_analytics.enums.exam import (
    ALL_COMPONENTS,
    Component,
    ComponentTrend,
    Level,
    QuestionType,
    SessionType,
)
from exam_analytics.enums.analytics import (
    ActivityType,
    AssessmentType,
    InsightType,
    ReadinessLevel,
    ReadinessRecommendationType,
    RecommendationDifficulty,
    RecommendationPriority,
    RecommendationType,
    ResourceCost,
    ResourceType,
    WeaknessSeverity,
    WeaknessTrend,
    WeaknessType,
)

__all__ = [
    # Exam enums
    "ALL_COMPONENTS",
    "Component",
    "ComponentTrend",
    "Level",
    "QuestionType",
    "SessionType",
    # Analytics enums
    "ActivityType",
    "AssessmentType",
    "InsightType",
    "ReadinessLevel",
    "ReadinessRecommendationType",
    "RecommendationDifficulty",
    "RecommendationPriority",
    "RecommendationType",
    "ResourceCost",
    "ResourceType",
    "WeaknessSeverity",
    "WeaknessTrend",
    "WeaknessType",
]
