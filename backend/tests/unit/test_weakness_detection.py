"""
Unit tests for WeaknessDetectionEngine.

Tests the weakness detectors and aggregation including:
- Component, question-type, time-management, consistency, stagnation
  and error-pattern detectors
- Severity partitioning and prioritization
- Improvement plan and confidence
- Scenarios (excellent, stagnating, struggling learners)
"""

from datetime import timedelta

import pytest

from exam_analytics.config import WeaknessConfig
from exam_analytics.enums import (
    Component,
    ComponentTrend,
    QuestionType,
    WeaknessSeverity,
    WeaknessTrend,
    WeaknessType,
)
from exam_analytics.errors import MissingAnalyticsError
from exam_analytics.models import ExamResponse, ProgressAnalytics
from exam_analytics.services.weakness_detection import WeaknessDetectionEngine
from tests.conftest import (
    NOW,
    make_analytics,
    make_component_analysis,
    make_progress,
    make_session,
    make_sessions,
)


@pytest.fixture
def engine():
    return WeaknessDetectionEngine()


def _by_type(analysis, weakness_type):
    return [w for w in analysis.all_weaknesses if w.type == weakness_type]


def _responses(question_type, correct_flags, error_category=None):
    return [
        ExamResponse(
            question_id=f"{question_type.value}-{i}",
            question_type=question_type,
            is_correct=correct,
            time_spent_seconds=30.0,
            error_category=None if correct else error_category,
        )
        for i, correct in enumerate(correct_flags)
    ]


# ============================================================================
# Component Detector
# ============================================================================


class TestComponentWeaknesses:
    """Tests for the per-component detector."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (39.9, WeaknessSeverity.CRITICAL),
            (40.0, WeaknessSeverity.MODERATE),
            (59.9, WeaknessSeverity.MODERATE),
            (60.0, WeaknessSeverity.SLIGHT),
            (74.9, WeaknessSeverity.SLIGHT),
            (75.0, None),
        ],
        ids=["critical", "moderate_edge", "moderate", "slight_edge", "slight", "none"],
    )
    def test_severity_thresholds(self, engine, score, expected):
        analytics = make_analytics(80.0, component_scores={Component.WRITING: score})
        analysis = engine.analyze_weaknesses(make_progress(analytics), [], now=NOW)

        found = _by_type(analysis, WeaknessType.COMPONENT_SKILL)
        if expected is None:
            assert found == []
        else:
            assert [w.severity for w in found] == [expected]
            assert found[0].id == "component_writing"

    def test_unpractised_component_flagged_without_confidence(self, engine):
        analytics = ProgressAnalytics(
            average_score=0.0,
            consistency_score=0.9,
            component_analysis={
                Component.SPEAKING: make_component_analysis(0.0, sessions_completed=0)
            },
        )
        analysis = engine.analyze_weaknesses(make_progress(analytics), [], now=NOW)
        found = _by_type(analysis, WeaknessType.COMPONENT_SKILL)

        assert [w.id for w in found] == ["component_speaking"]
        assert found[0].severity == WeaknessSeverity.CRITICAL
        assert found[0].confidence == 0.0
        assert found[0].evidence.time_spent_average_seconds == 0.0
        assert found[0] in analysis.critical_weaknesses

    def test_evidence_from_session_history(self, engine):
        analytics = ProgressAnalytics(
            average_score=50.0,
            consistency_score=0.9,
            component_analysis={
                Component.READING: make_component_analysis(
                    50.0,
                    sessions_completed=3,
                    trend=ComponentTrend.DECLINING,
                    skill_breakdown={"grammar": 55.0, "vocabulary": 40.0},
                )
            },
        )
        sessions = make_sessions([60.0, 50.0, 40.0], components=(Component.READING,))

        analysis = engine.analyze_weaknesses(make_progress(analytics), sessions, now=NOW)
        weakness = _by_type(analysis, WeaknessType.COMPONENT_SKILL)[0]

        assert weakness.specific_area == "vocabulary"
        assert weakness.trend == WeaknessTrend.WORSENING
        assert weakness.evidence.recent_performance == [60.0, 50.0, 40.0]
        assert weakness.evidence.improvement_rate == pytest.approx(-10.0)
        assert weakness.impact.priority_score == pytest.approx(0.4)
        assert weakness.confidence == 1.0

    def test_improvement_rate_falls_back_to_trend(self, engine):
        analytics = make_analytics(
            50.0,
            component_scores={Component.LISTENING: 50.0},
            trend=ComponentTrend.IMPROVING,
        )
        analysis = engine.analyze_weaknesses(make_progress(analytics), [], now=NOW)
        weakness = _by_type(analysis, WeaknessType.COMPONENT_SKILL)[0]
        assert weakness.evidence.improvement_rate == 5.0


# ============================================================================
# Response-level Detectors
# ============================================================================


class TestQuestionTypeWeaknesses:
    """Tests for response-level question-type analysis."""

    def test_weak_question_type_detected(self, engine):
        sessions = [
            make_session(
                i,
                component=Component.LISTENING,
                responses=_responses(QuestionType.GAP_FILL, [False, False, True]),
            )
            for i in range(3)
        ]
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)

        found = _by_type(analysis, WeaknessType.QUESTION_TYPE)
        assert len(found) == 1
        weakness = found[0]
        assert weakness.id == "question_type_gap_fill"
        assert weakness.severity == WeaknessSeverity.CRITICAL  # 33.3%
        assert weakness.component == Component.LISTENING
        assert weakness.evidence.question_count == 9
        assert weakness.evidence.session_count == 3
        assert weakness.confidence == pytest.approx(0.9)

    def test_small_samples_ignored(self, engine):
        sessions = [
            make_session(0, responses=_responses(QuestionType.ESSAY, [False] * 4)),
        ]
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.QUESTION_TYPE) == []

    def test_strong_question_type_not_flagged(self, engine):
        sessions = [
            make_session(0, responses=_responses(QuestionType.MATCHING, [True] * 6)),
        ]
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.QUESTION_TYPE) == []


class TestErrorPatterns:
    """Tests for labelled and heuristic error-pattern detection."""

    def test_labelled_categories(self, engine):
        responses = [
            *_responses(QuestionType.ESSAY, [False] * 4, error_category="spelling"),
            *_responses(QuestionType.SHORT_ANSWER, [False] * 2, error_category="tense"),
        ]
        sessions = [make_session(0, component=Component.WRITING, responses=responses)]

        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)
        found = _by_type(analysis, WeaknessType.ERROR_PATTERN)

        assert [w.id for w in found] == ["error_pattern_spelling"]
        assert found[0].component == Component.WRITING
        assert found[0].evidence.heuristic is False
        assert found[0].confidence == pytest.approx(0.4)

    def test_heuristic_fallback(self, engine, caplog):
        sessions = make_sessions([50.0, 55.0, 45.0, 80.0])
        with caplog.at_level("WARNING"):
            analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)

        found = _by_type(analysis, WeaknessType.ERROR_PATTERN)
        assert {w.specific_area for w in found} == {
            "grammar_errors",
            "vocabulary_confusion",
            "reading_comprehension_errors",
            "time_pressure_mistakes",
        }
        assert all(w.evidence.heuristic for w in found)
        assert all(w.confidence == 0.6 for w in found)
        assert all(w.severity == WeaknessSeverity.MODERATE for w in found)
        assert "inferring error patterns" in caplog.text

    def test_heuristic_needs_three_low_sessions(self, engine):
        sessions = make_sessions([50.0, 55.0, 80.0])
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.ERROR_PATTERN) == []


# ============================================================================
# Session-level Detectors
# ============================================================================


class TestSessionDetectors:
    """Tests for time-management, consistency and stagnation detectors."""

    def test_time_management_critical(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        weakness = _by_type(analysis, WeaknessType.TIME_MANAGEMENT)[0]
        assert weakness.severity == WeaknessSeverity.CRITICAL
        assert weakness.evidence.score_variation > 0.5

    def test_time_management_moderate(self, engine):
        sessions = make_sessions([70.0] * 4, durations=[30.0, 60.0, 30.0, 60.0])
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)

        # CV = 15 / 45
        weakness = _by_type(analysis, WeaknessType.TIME_MANAGEMENT)[0]
        assert weakness.severity == WeaknessSeverity.MODERATE

    def test_time_management_needs_min_sessions(self, engine):
        sessions = make_sessions([70.0] * 2, durations=[5.0, 120.0])
        analysis = engine.analyze_weaknesses(make_progress(), sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.TIME_MANAGEMENT) == []

    @pytest.mark.parametrize(
        "consistency,expected",
        [
            (0.2, WeaknessSeverity.CRITICAL),
            (0.45, WeaknessSeverity.MODERATE),
            (0.6, None),
        ],
        ids=["critical", "moderate", "consistent"],
    )
    def test_consistency(self, engine, consistency, expected):
        analytics = make_analytics(
            80.0,
            consistency_score=consistency,
            component_scores={Component.READING: 80.0, Component.SPEAKING: 78.0},
        )
        analysis = engine.analyze_weaknesses(make_progress(analytics), [], now=NOW)

        found = _by_type(analysis, WeaknessType.CONSISTENCY)
        if expected is None:
            assert found == []
        else:
            assert found[0].severity == expected
            assert found[0].component == Component.SPEAKING

    def test_stagnation_not_flagged_when_improving(self, engine, excellent_learner):
        progress, sessions = excellent_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.IMPROVEMENT_STAGNATION) == []


# ============================================================================
# Aggregation
# ============================================================================


class TestAggregation:
    """Tests for partitioning, patterns, ranking and the improvement plan."""

    def test_severity_partition_is_exhaustive(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        buckets = {
            WeaknessSeverity.CRITICAL: analysis.critical_weaknesses,
            WeaknessSeverity.MODERATE: analysis.moderate_weaknesses,
            WeaknessSeverity.SLIGHT: analysis.slight_weaknesses,
        }
        ids = [w.id for bucket in buckets.values() for w in bucket]

        assert len(ids) == len(set(ids)) == len(analysis.prioritized_actions)
        for severity, bucket in buckets.items():
            assert all(w.severity == severity for w in bucket)

    def test_struggling_learner_findings(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        assert {w.id for w in analysis.critical_weaknesses} == {
            "component_writing",
            "time_management",
            "consistency",
        }
        assert {w.id for w in analysis.slight_weaknesses} == {"component_listening"}
        assert analysis.critical_weaknesses[0].id == "component_writing"

    def test_prioritized_actions_ranked(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        actions = analysis.prioritized_actions
        assert [a.rank for a in actions] == list(range(1, len(actions) + 1))
        scores = [a.estimated_impact * a.urgency for a in actions]
        assert scores == sorted(scores, reverse=True)

    def test_patterns_group_by_component(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        writing = [p for p in analysis.patterns if p.components == [Component.WRITING]]
        assert writing and writing[0].severity == WeaknessSeverity.CRITICAL
        assert all(p.occurrences > 1 for p in analysis.patterns)

    def test_improvement_plan_bounds(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)
        plan = analysis.improvement_plan

        assert 4 <= plan.total_estimated_weeks <= 12
        assert len(plan.weekly_goals) == plan.total_estimated_weeks
        assert [m.week for m in plan.milestones][-1] == plan.total_estimated_weeks
        assert all(m.target_score <= 100 for m in plan.milestones)

    def test_no_weaknesses(self, engine, excellent_learner):
        progress, sessions = excellent_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        assert analysis.all_weaknesses == []
        assert analysis.overall_weakness_score == 0.0
        assert analysis.improvement_plan.total_estimated_weeks == 4
        assert 0.0 <= analysis.confidence <= 1.0


# ============================================================================
# Scenarios and Properties
# ============================================================================


class TestScenarios:
    """End-to-end weakness scenarios and properties."""

    def test_excellent_learner_has_no_critical_weaknesses(self, engine, excellent_learner):
        progress, sessions = excellent_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)
        assert analysis.critical_weaknesses == []

    def test_stagnating_learner(self, engine, stagnating_learner):
        progress, sessions = stagnating_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        found = _by_type(analysis, WeaknessType.IMPROVEMENT_STAGNATION)
        assert len(found) == 1
        assert found[0].trend == WeaknessTrend.WORSENING
        assert found[0].evidence.improvement_rate == pytest.approx(-2.0)

    def test_cold_start_does_not_raise(self, engine, cold_start_learner):
        progress, sessions = cold_start_learner
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)

        assert analysis.data_quality.session_coverage == 0.0
        assert analysis.data_quality.volume_score == 0.0

    def test_deterministic(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        first = engine.analyze_weaknesses(progress, sessions, now=NOW)
        second = engine.analyze_weaknesses(progress, list(reversed(sessions)), now=NOW)
        assert first.model_dump() == second.model_dump()

    def test_stale_history_lowers_recency(self, engine, struggling_learner):
        progress, sessions = struggling_learner
        later = NOW + timedelta(days=45)
        analysis = engine.analyze_weaknesses(progress, sessions, now=later)
        assert analysis.data_quality.recency_score == 0.0

    def test_missing_analytics_raises(self, engine):
        with pytest.raises(MissingAnalyticsError):
            engine.analyze_weaknesses(make_progress(with_analytics=False), [], now=NOW)

    def test_custom_thresholds(self, struggling_learner):
        progress, sessions = struggling_learner
        engine = WeaknessDetectionEngine(WeaknessConfig(min_error_occurrences=20))
        analysis = engine.analyze_weaknesses(progress, sessions, now=NOW)
        assert _by_type(analysis, WeaknessType.ERROR_PATTERN) == []
