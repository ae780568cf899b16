"""
Base Models for Engine Inputs, Results and Configuration

This module provides the pydantic base classes shared by every value object
the analytics engine reads or produces.

MOTIVATION:
    The engine is a pure function over snapshots handed over by the
    persistence layer, and its results are handed straight to an HTTP layer
    for JSON encoding. Inputs therefore tolerate extra columns, while results
    and configuration are immutable and reject unknown fields.

Usage:
    # Snapshot read from the progress repository
    class ExamSession(InputModel):
        id: str
        score: Optional[float] = None

    # Value object produced by an engine
    class Milestone(ResultModel):
        title: str
        target_score: float

Architecture:
    Repository row → InputModel (extra="ignore") → Engine
    Engine → ResultModel (frozen, extra="forbid") → caller (model_dump)
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive datetimes are assumed to already be in UTC, which is how the
    persistence layer stores session timestamps.

    Args:
        value: Datetime to normalize (may be None).

    Returns:
        Timezone-aware UTC datetime, or None.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InputModel(BaseModel):
    """
    Base model for snapshots consumed by the engine.

    Features:
        - extra="ignore": Repository rows may carry more columns
        - validate_default=True: Validates default values
        - from_attributes=True: Allows ORM/object conversion

    Example:
        >>> ExamSession.model_validate(db_row)
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class ResultModel(BaseModel):
    """
    Base model for engine results.

    Results are value objects: computed fresh per call, never mutated
    afterwards, and directly serializable with ``model_dump(mode="json")``.

    Features:
        - frozen=True: Results cannot be mutated after construction
        - extra="forbid": Unknown fields are a programming error
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class ConfigModel(BaseModel):
    """
    Base model for engine configuration.

    Immutable so that a configuration instance can be shared between
    engines without any of them observing changes made by another.
    Updating a configuration means building a new instance.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )
