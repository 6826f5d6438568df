"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceErrorKind(StrEnum):
    """Why a single source attempt did not produce usable records."""

    TRANSPORT = "transport"
    RATE_LIMITED = "rate_limited"
    PARSE_FAILURE = "parse_failure"
    EMPTY = "empty"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


class OutcomeStatus(StrEnum):
    """Per-product result of one collection run."""

    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"
    FAILED_NO_DATA = "failed_no_data"
    FAILED = "failed"
    SKIPPED = "skipped"


class ChangeAction(StrEnum):
    """What reconciliation does with one product or cycle."""

    INSERT = "insert"
    UPDATE = "update"
    UNCHANGED = "unchanged"
