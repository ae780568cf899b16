"""
Study Plan Synthesis

Builds the phased PersonalizedStudyPlan, the adaptive schedule and the
motivational insights that accompany a recommendation set.

Plan Structure:
- Duration from readiness level: poor 12, fair 8, good 6, excellent 4 weeks
- Up to three phases (Foundation, Development, Mastery) splitting the
  duration as evenly as possible; phase durations always sum to the plan
  duration
- Foundation focuses on critical-weakness components, Development on
  moderate-weakness components, Mastery on every component
- Weekly goals carry absolute plan week numbers and rising target scores
- Each phase has a mid-phase progress check and an end-of-phase mock exam
- Three plan milestones at thirds of the duration

Usage:
    plan = build_study_plan(progress, analytics, weakness_analysis, readiness)
    schedule = build_adaptive_schedule(preferences)
"""

import math
from typing import Optional, Sequence

from exam_analytics.enums.analytics import (
    ActivityType,
    AssessmentType,
    InsightType,
    ReadinessLevel,
    RecommendationDifficulty,
)
from exam_analytics.enums.exam import ALL_COMPONENTS, Component
from exam_analytics.models.exam import (
    ExamSession,
    ProgressAnalytics,
    UserPreferences,
    UserProgress,
)
from exam_analytics.models.readiness import ReadinessAssessment
from exam_analytics.models.recommendations import (
    ActivitySlot,
    AdaptationRule,
    AdaptiveSchedule,
    DailyActivity,
    MotivationalInsight,
    PersonalizedStudyPlan,
    PhaseAssessment,
    PhaseWeeklyGoal,
    PlanMetric,
    ScheduleAdaptation,
    StudyMilestone,
    StudyPhase,
)
from exam_analytics.models.weakness import WeaknessAnalysis
from exam_analytics.services.statistics import session_scores

PLAN_WEEKS = {
    ReadinessLevel.POOR: 12,
    ReadinessLevel.FAIR: 8,
    ReadinessLevel.GOOD: 6,
    ReadinessLevel.EXCELLENT: 4,
}

PHASE_NAMES = ("Foundation", "Development", "Mastery")
PHASE_THEMES = (
    "address critical weaknesses",
    "strengthen moderate weaknesses",
    "consolidate all components",
)
MAX_PHASES = len(PHASE_NAMES)
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DEFAULT_PREFERRED_TIMES = ("09:00", "14:00", "19:00")
DEFAULT_SESSION_LENGTH_MINUTES = 45
DEFAULT_FREQUENCY_PER_WEEK = 4
DEFAULT_FLEXIBILITY = 0.7


# ===========================================
# Personalized Study Plan
# ===========================================


def plan_duration_weeks(level: ReadinessLevel) -> int:
    return PLAN_WEEKS[level]


def split_phases(duration: int) -> list[int]:
    """
    Split a plan duration into phase lengths.

    Uses min(3, ceil(duration / 4)) phases; earlier phases absorb the
    remainder, so the lengths always sum to ``duration``.
    """
    count = min(MAX_PHASES, math.ceil(duration / 4))
    base, remainder = divmod(duration, count)
    return [base + (1 if index < remainder else 0) for index in range(count)]


def phase_focus_components(phase_index: int, weakness_analysis: WeaknessAnalysis) -> list[Component]:
    """Components a phase concentrates on (deduplicated, in detection order)."""
    if phase_index == 0:
        weaknesses = weakness_analysis.critical_weaknesses
    elif phase_index == 1:
        weaknesses = weakness_analysis.moderate_weaknesses
    else:
        return list(ALL_COMPONENTS)
    return list(dict.fromkeys(w.component for w in weaknesses))


def _weekly_goals(phase_index: int, start_week: int, weeks: int) -> list[PhaseWeeklyGoal]:
    goals = []
    for offset in range(weeks):
        target = min(100.0, 70.0 + 10 * phase_index + 2 * (offset + 1))
        week = start_week + offset
        goals.append(
            PhaseWeeklyGoal(
                week=week,
                description=f"Week {week} goals for phase {phase_index + 1}",
                target_scores={component: target for component in ALL_COMPONENTS},
                practice_hours=8 + 2 * phase_index,
                activities=["Daily practice", "Weekly assessment", "Review sessions"],
                success_criteria=["Meet target scores", "Complete all activities"],
            )
        )
    return goals


def _daily_schedule(focus: Sequence[Component]) -> list[DailyActivity]:
    """Weekday template rotating through the focus components."""
    rotation = list(focus) or list(ALL_COMPONENTS)
    schedule = []
    for index, day in enumerate(WEEKDAYS):
        primary = rotation[index % len(rotation)]
        secondary = rotation[(index + 1) % len(rotation)]
        schedule.append(
            DailyActivity(
                day=day,
                activities=[
                    ActivitySlot(
                        time="09:00",
                        duration_minutes=30,
                        activity=f"{primary.value.capitalize()} Practice",
                        component=primary,
                        type=ActivityType.PRACTICE,
                        difficulty=RecommendationDifficulty.INTERMEDIATE,
                        resources=[f"{primary.value}_exercises"],
                    ),
                    ActivitySlot(
                        time="14:00",
                        duration_minutes=30,
                        activity=f"{secondary.value.capitalize()} Review",
                        component=secondary,
                        type=ActivityType.REVIEW,
                        difficulty=RecommendationDifficulty.INTERMEDIATE,
                        resources=[f"{secondary.value}_exercises"],
                    ),
                ],
                total_time_minutes=60,
                primary_focus=primary,
            )
        )
    return schedule


def _phase_assessments(start_week: int, weeks: int) -> list[PhaseAssessment]:
    """Mid-phase check and end-of-phase mock exam, in absolute plan weeks."""
    offset = start_week - 1
    return [
        PhaseAssessment(
            week=offset + math.ceil(weeks / 2),
            type=AssessmentType.PROGRESS,
            components=list(ALL_COMPONENTS),
            duration_minutes=60,
            passing_score=70,
            purpose="Mid-phase progress check",
        ),
        PhaseAssessment(
            week=offset + weeks,
            type=AssessmentType.MOCK_EXAM,
            components=list(ALL_COMPONENTS),
            duration_minutes=120,
            passing_score=75,
            purpose="Phase completion assessment",
        ),
    ]


def _milestones(duration: int, readiness: ReadinessAssessment) -> list[StudyMilestone]:
    milestones = []
    for i in range(1, 4):
        target = min(100.0, readiness.estimated_exam_score + 10 * i)
        milestones.append(
            StudyMilestone(
                week=math.ceil(duration * i / 3),
                title=f"Milestone {i}",
                description=f"Achieve {target:.0f}% proficiency",
                target_metrics={"overall_score": target, "consistency": round(0.7 + 0.1 * i, 2)},
                assessment_type=AssessmentType.MOCK_EXAM if i == 3 else AssessmentType.PROGRESS_TEST,
                success_criteria=[
                    f"Score {target:.0f}% or higher",
                    "Demonstrate improved consistency",
                ],
                rewards=["Progress certificate", "Unlock next phase"],
            )
        )
    return milestones


def _adaptation_rules() -> list[AdaptationRule]:
    return [
        AdaptationRule(
            condition="score_decline_3_sessions",
            action="increase_practice_frequency",
            priority=1,
            description="Increase practice frequency if scores decline for 3 consecutive sessions",
        ),
        AdaptationRule(
            condition="consistency_below_60%",
            action="focus_time_management",
            priority=2,
            description="Add time management exercises if consistency drops below 60%",
        ),
    ]


def _success_metrics(analytics: ProgressAnalytics) -> list[PlanMetric]:
    return [
        PlanMetric(
            name="Overall Score",
            current_value=analytics.average_score,
            target_value=analytics.average_score + 25,
            unit="points",
            importance=1.0,
        ),
        PlanMetric(
            name="Consistency Score",
            current_value=analytics.consistency_score * 100,
            target_value=85,
            unit="percentage",
            importance=0.8,
        ),
    ]


def build_study_plan(
    progress: UserProgress,
    analytics: ProgressAnalytics,
    weakness_analysis: WeaknessAnalysis,
    readiness: ReadinessAssessment,
) -> PersonalizedStudyPlan:
    """
    Build the phased study plan.

    Args:
        progress: Learner progress (identifies the plan).
        analytics: Progress analytics aggregate (success metrics).
        weakness_analysis: Supplies the phase focus components.
        readiness: Supplies the plan duration and milestone baseline.

    Returns:
        PersonalizedStudyPlan whose phase durations sum to its duration.
    """
    duration = plan_duration_weeks(readiness.level)
    lengths = split_phases(duration)

    phases = []
    start_week = 1
    for index, weeks in enumerate(lengths):
        focus = phase_focus_components(index, weakness_analysis)
        phases.append(
            StudyPhase(
                phase=index + 1,
                name=PHASE_NAMES[index],
                description=f"Phase {index + 1} of {len(lengths)}: {PHASE_THEMES[index]}",
                duration=weeks,
                start_week=start_week,
                focus_components=focus,
                weekly_goals=_weekly_goals(index, start_week, weeks),
                daily_schedule=_daily_schedule(focus),
                assessments=_phase_assessments(start_week, weeks),
            )
        )
        start_week += weeks

    return PersonalizedStudyPlan(
        id=f"plan_{progress.user_id}_{readiness.level.value}_{duration}w",
        name="Personalized Study Plan",
        description="Study plan based on your performance analysis",
        duration=duration,
        phases=phases,
        milestones=_milestones(duration, readiness),
        adaptation_rules=_adaptation_rules(),
        success_metrics=_success_metrics(analytics),
    )


# ===========================================
# Adaptive Schedule
# ===========================================


def build_adaptive_schedule(preferences: Optional[UserPreferences] = None) -> AdaptiveSchedule:
    """
    Session cadence from preferences; unset fields use the defaults
    (09:00/14:00/19:00, 45 minutes, 4 per week, flexibility 0.7).
    """
    prefs = preferences or UserPreferences()

    def pick(value, default):
        return default if value is None else value

    return AdaptiveSchedule(
        preferred_times=list(pick(prefs.preferred_times, DEFAULT_PREFERRED_TIMES)),
        session_length_minutes=pick(prefs.session_length_minutes, DEFAULT_SESSION_LENGTH_MINUTES),
        frequency_per_week=pick(prefs.frequency_per_week, DEFAULT_FREQUENCY_PER_WEEK),
        flexibility=pick(prefs.flexibility, DEFAULT_FLEXIBILITY),
        adaptations=[
            ScheduleAdaptation(
                trigger="low_performance",
                adjustment="increase_frequency",
                description="Increase session frequency when performance drops",
            ),
            ScheduleAdaptation(
                trigger="high_consistency",
                adjustment="increase_difficulty",
                description="Increase difficulty when showing consistent progress",
            ),
        ],
    )


# ===========================================
# Motivational Insights
# ===========================================


def motivational_insights(
    progress: UserProgress,
    sessions: Sequence[ExamSession],
    readiness: ReadinessAssessment,
) -> list[MotivationalInsight]:
    """Achievement framing above 30% progress; upward-trend framing on >5 point gains."""
    insights = []

    if progress.overall_progress > 0.3:
        insights.append(
            MotivationalInsight(
                type=InsightType.ACHIEVEMENT,
                title="Great Progress!",
                message=(
                    f"You've completed {round(progress.overall_progress * 100)}% "
                    "of your learning journey."
                ),
                evidence=[
                    f"{len(sessions)} practice sessions completed",
                    f"Current readiness: {readiness.level.value}",
                ],
                action_suggestion="Keep up the consistent effort!",
            )
        )

    recent = session_scores(sessions)[-5:]
    if len(recent) >= 3:
        improvement = recent[-1] - recent[0]
        if improvement > 5:
            insights.append(
                MotivationalInsight(
                    type=InsightType.PROGRESS,
                    title="Upward Trend!",
                    message=f"Your scores have improved by {improvement:.1f} points recently.",
                    evidence=[f"Recent improvement: +{improvement:.1f} points"],
                    action_suggestion="Maintain your current approach to keep the momentum.",
                )
            )

    return insights
