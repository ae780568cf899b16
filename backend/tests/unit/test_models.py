"""
Unit tests for the engine's Pydantic models.

Tests cover:
- Response scoring and session completion defaults
- Timestamp normalization to UTC
- Input tolerance of extra fields
- Immutability of results
- Error taxonomy
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from exam_analytics.enums import Component
from exam_analytics.errors import (
    AnalyticsError,
    ConfigurationError,
    MissingAnalyticsError,
)
from exam_analytics.models import (
    ExamResponse,
    ExamSession,
    ReadinessFactors,
    UserPreferences,
    UserProgress,
    as_utc,
)
from tests.conftest import NOW


class TestExamResponse:
    """Tests for response scoring."""

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({"partial_credit": 0.25}, 25.0),
            ({"partial_credit": 0.5, "is_correct": True}, 50.0),
            ({"is_correct": True}, 100.0),
            ({"is_correct": False}, 0.0),
            ({}, None),
        ],
        ids=["partial", "partial_wins", "correct", "incorrect", "ungraded"],
    )
    def test_score(self, kwargs, expected):
        assert ExamResponse(question_id="q1", **kwargs).score == expected

    def test_partial_credit_bounds(self):
        with pytest.raises(ValidationError):
            ExamResponse(question_id="q1", partial_credit=1.5)


class TestExamSession:
    """Tests for session defaults and normalization."""

    def _session(self, **overrides):
        data = {
            "id": "s1",
            "user_id": "user-1",
            "component": "reading",
            "started_at": NOW,
        }
        data.update(overrides)
        return ExamSession(**data)

    def test_completion_defaults_from_timestamp(self):
        assert self._session(completed_at=NOW + timedelta(minutes=30)).is_completed is True
        assert self._session().is_completed is False

    def test_explicit_completion_wins(self):
        assert self._session(is_completed=True).is_completed is True

    def test_naive_timestamps_become_utc(self):
        session = self._session(started_at=datetime(2024, 6, 1, 12, 0))
        assert session.started_at == NOW
        assert session.started_at.tzinfo is not None

    def test_extra_columns_ignored(self):
        session = self._session(created_by="importer", component=Component.WRITING)
        assert not hasattr(session, "created_by")
        assert session.component == Component.WRITING

    def test_score_range(self):
        with pytest.raises(ValidationError):
            self._session(score=120)

    def test_duration_minutes(self):
        assert self._session(duration_seconds=2700).duration_minutes == 45.0


class TestProgressAndPreferences:
    """Tests for progress and preference inputs."""

    def test_progress_without_analytics_is_representable(self):
        progress = UserProgress(user_id="user-1", last_activity=NOW)
        assert progress.analytics is None

    def test_offset_timestamps_converted(self):
        cet = timezone(timedelta(hours=2))
        progress = UserProgress(
            user_id="user-1", last_activity=datetime(2024, 6, 1, 14, 0, tzinfo=cet)
        )
        assert progress.last_activity == NOW
        assert progress.last_activity.utcoffset() == timedelta(0)

    def test_preferences_all_optional(self):
        preferences = UserPreferences()
        assert preferences.preferred_times is None
        assert preferences.component_preferences == {}

    def test_as_utc_none(self):
        assert as_utc(None) is None


class TestResults:
    """Tests for result value objects."""

    def _factors(self, **overrides):
        values = dict(
            overall_score=0.5,
            consistency=0.5,
            improvement=0.5,
            session_frequency=0.5,
            weakness_recovery=0.5,
            time_management=0.5,
        )
        values.update(overrides)
        return ReadinessFactors(**values)

    def test_frozen(self):
        factors = self._factors()
        with pytest.raises(ValidationError):
            factors.consistency = 0.9

    def test_extra_forbidden(self):
        with pytest.raises(ValidationError):
            self._factors(motivation=0.5)

    def test_range_enforced(self):
        with pytest.raises(ValidationError):
            self._factors(improvement=1.2)


class TestErrors:
    """Tests for the error taxonomy."""

    def test_missing_analytics(self):
        error = MissingAnalyticsError("no aggregate", details={"user_id": "user-1"})

        assert isinstance(error, AnalyticsError)
        assert error.status_code == 422
        assert error.error_code == "missing_analytics"
        assert error.details == {"user_id": "user-1"}
        assert str(error) == "no aggregate"

    def test_configuration_error(self):
        error = ConfigurationError("bad tuning")
        assert error.status_code == 500
        assert error.error_code == "configuration_error"
        assert error.details is None

    def test_overrides(self):
        error = AnalyticsError("custom", status_code=409, error_code="conflict")
        assert (error.status_code, error.error_code) == (409, "conflict")
