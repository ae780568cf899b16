"""
Analytics Result Enums

Labels produced by the readiness, weakness-detection and recommendation
engines. All values are plain strings so results serialize directly.
"""

from enum import Enum


class ReadinessLevel(str, Enum):
    """
    Discrete exam-readiness level.

    Mapped from the final readiness score via configurable thresholds
    (defaults: >= 0.85 excellent, >= 0.70 good, >= 0.55 fair, else poor).
    """

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ReadinessRecommendationType(str, Enum):
    """Kinds of advice emitted by readiness scoring."""

    COMPONENT_FOCUS = "component_focus"
    STUDY_TIME = "study_time"
    PRACTICE_FREQUENCY = "practice_frequency"
    WEAKNESS_RECOVERY = "weakness_recovery"


class WeaknessType(str, Enum):
    """What kind of deficiency a weakness describes."""

    COMPONENT_SKILL = "component_skill"  # Overall component below target
    QUESTION_TYPE = "question_type"  # Specific question format
    TOPIC_AREA = "topic_area"  # Subject matter
    TIME_MANAGEMENT = "time_management"  # Session duration inconsistency
    CONSISTENCY = "consistency"  # Score instability
    IMPROVEMENT_STAGNATION = "improvement_stagnation"  # Flat or declining progress
    ERROR_PATTERN = "error_pattern"  # Recurring mistake category


class WeaknessSeverity(str, Enum):
    """Severity bucket of a detected weakness."""

    CRITICAL = "critical"
    MODERATE = "moderate"
    SLIGHT = "slight"


class WeaknessTrend(str, Enum):
    """Direction a weakness is moving in."""

    WORSENING = "worsening"
    STABLE = "stable"
    IMPROVING = "improving"


class RecommendationType(str, Enum):
    """Kinds of study recommendation."""

    STUDY_PLAN = "study_plan"
    PRACTICE_SESSION = "practice_session"
    SKILL_FOCUS = "skill_focus"
    RESOURCE = "resource"
    TIME_MANAGEMENT = "time_management"
    MOTIVATION = "motivation"
    EXAM_STRATEGY = "exam_strategy"
    REVIEW_SESSION = "review_session"


class RecommendationPriority(str, Enum):
    """
    Priority of a recommendation.

    Readiness and weakness advice only use high/medium/low; synthesis
    adds critical for items that need immediate action.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationDifficulty(str, Enum):
    """Difficulty tier of a recommendation, activity or resource."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ADAPTIVE = "adaptive"


class ResourceType(str, Enum):
    """Kind of study resource."""

    EXERCISE = "exercise"
    TUTORIAL = "tutorial"
    REFERENCE = "reference"
    ASSESSMENT = "assessment"
    TOOL = "tool"
    VIDEO = "video"
    ARTICLE = "article"
    PRACTICE = "practice"


class ActivityType(str, Enum):
    """Type of a slot in the daily activity template."""

    PRACTICE = "practice"
    REVIEW = "review"
    ASSESSMENT = "assessment"
    BREAK = "break"


class AssessmentType(str, Enum):
    """Assessment kinds used in plans and milestones."""

    DIAGNOSTIC = "diagnostic"
    PROGRESS = "progress"
    PROGRESS_TEST = "progress_test"
    PRACTICE_TEST = "practice_test"
    MOCK_EXAM = "mock_exam"
    FULL_MOCK = "full_mock"


class InsightType(str, Enum):
    """Framing of a motivational insight."""

    ACHIEVEMENT = "achievement"
    PROGRESS = "progress"
    ENCOURAGEMENT = "encouragement"
    CHALLENGE = "challenge"


class ResourceCost(str, Enum):
    """Whether a resource is freely available."""

    FREE = "free"
    PREMIUM = "premium"
