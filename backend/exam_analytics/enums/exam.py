"""
Exam Domain Enums

Defines the labels used by the exam-session and progress inputs that the
analytics engine consumes: skill components, CEFR levels, session types,
question types and per-component trend labels.
"""

from enum import Enum


class Component(str, Enum):
    """
    The four skill areas assessed by an exam.

    Every practice session targets exactly one component, and the
    progress aggregate breaks performance down per component.
    """

    READING = "reading"
    WRITING = "writing"
    LISTENING = "listening"
    SPEAKING = "speaking"


ALL_COMPONENTS: tuple[Component, ...] = (
    Component.READING,
    Component.WRITING,
    Component.LISTENING,
    Component.SPEAKING,
)


class Level(str, Enum):
    """
    CEFR-like target levels.

    Only used to calibrate the recommended-study-hours estimate.
    """

    A1 = "a1"
    A2 = "a2"
    B1 = "b1"
    B2 = "b2"
    C1 = "c1"
    C2 = "c2"


class SessionType(str, Enum):
    """Kind of exam attempt."""

    PRACTICE = "practice"
    MOCK_EXAM = "mock_exam"
    DIAGNOSTIC = "diagnostic"


class QuestionType(str, Enum):
    """
    Question formats that can appear in an exam session.

    Used by response-level analysis to group performance by format.
    """

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    MATCHING = "matching"
    GAP_FILL = "gap_fill"
    DRAG_DROP = "drag_drop"
    ESSAY = "essay"
    SHORT_ANSWER = "short_answer"
    SPEAKING_RESPONSE = "speaking_response"
    LISTENING_COMPREHENSION = "listening_comprehension"
    READING_COMPREHENSION = "reading_comprehension"


class ComponentTrend(str, Enum):
    """
    Trend label attached upstream to a per-component aggregate.

    Computed by the progress-tracking collaborator, consumed read-only.
    """

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"
