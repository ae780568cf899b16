"""
Analytics Engine Exceptions

The engine is pure computation, so its error taxonomy is narrow:

- MissingAnalyticsError: required input absent (fail fast)
- ConfigurationError: tuning rejected by validate_config / build_engine_configs

Insufficient data is never an error: the affected calculation degrades to a
neutral value with a correspondingly lower confidence.

Usage:
    from exam_analytics.errors import AnalyticsError, MissingAnalyticsError

    try:
        assessment = engine.calculate_readiness(progress, sessions)
    except MissingAnalyticsError as e:
        logger.error(f"{e.error_code}: {e.message}")

Each exception carries a suggested ``status_code`` so that a calling HTTP
layer can translate it without a lookup table of its own.
"""

from typing import Optional


class AnalyticsError(Exception):
    """
    Base exception for analytics engine errors.

    Provides consistent error handling with:
    - Suggested HTTP status code for the caller
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise AnalyticsError("Unexpected engine state", details={"step": "ranking"})
    """

    status_code: int = 500
    error_code: str = "analytics_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class MissingAnalyticsError(AnalyticsError):
    """
    Required progress analytics are missing.

    Raised when ``UserProgress.analytics`` is None. The caller is expected to
    have loaded a progress record with its aggregates before invoking an
    engine.
    """

    status_code = 422
    error_code = "missing_analytics"


class ConfigurationError(AnalyticsError):
    """
    Engine configuration is invalid.

    Raised by the explicit validation hook and the YAML config builder,
    never by the engines themselves.
    """

    status_code = 500
    error_code = "configuration_error"
