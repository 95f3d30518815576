# waitmap/services/report_validation.py
"""
Validate a raw report submission before it reaches the store.

Failures come back as a typed ``ValidationResult.error`` so the caller
(endpoint, script or test) can show a message per kind.
"""
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from waitmap.models.report_models import CapacityLevel, NormalizedReport

MAX_WAIT_MINUTES = 720
MAX_COMMENT_LENGTH = 280

# 0-720 never needs more than three digits
_WAIT_RE = re.compile(r"[0-9]{1,3}")
CAPACITY_VALUES = {str(c.value): c for c in CapacityLevel}


class ValidationErrorKind(str, Enum):
    MISSING_DATA = "MissingData"
    INVALID_WAIT_RANGE = "InvalidWaitRange"
    INVALID_CAPACITY = "InvalidCapacity"
    COMMENT_TOO_LONG = "CommentTooLong"


class ReportValidationError(BaseModel):
    kind: ValidationErrorKind
    message: str


class ValidationResult(BaseModel):
    report: Optional[NormalizedReport] = None
    error: Optional[ReportValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(kind: ValidationErrorKind, message: str) -> ValidationResult:
    return ValidationResult(error=ReportValidationError(kind=kind, message=message))


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_report(
    raw_wait: Optional[str],
    raw_capacity: Optional[str],
    raw_comment: Optional[str],
    hospital_id: Optional[int] = None,
) -> ValidationResult:
    wait = _clean(raw_wait)
    capacity = _clean(raw_capacity)
    comment = _clean(raw_comment)

    if wait is None and capacity is None:
        return _fail(ValidationErrorKind.MISSING_DATA, "Please provide either wait time or capacity information.")

    wait_minutes = None
    if wait is not None:
        if not _WAIT_RE.fullmatch(wait) or int(wait) > MAX_WAIT_MINUTES:
            return _fail(
                ValidationErrorKind.INVALID_WAIT_RANGE,
                f"Please enter a valid wait time between 0 and {MAX_WAIT_MINUTES} minutes.",
            )
        wait_minutes = int(wait)

    capacity_enum = None
    if capacity is not None:
        if capacity not in CAPACITY_VALUES:
            return _fail(ValidationErrorKind.INVALID_CAPACITY, "Capacity must be 0 (full), 1 (limited) or 2 (plenty).")
        capacity_enum = CAPACITY_VALUES[capacity]

    if comment is not None and len(comment) > MAX_COMMENT_LENGTH:
        return _fail(
            ValidationErrorKind.COMMENT_TOO_LONG,
            f"Comment is too long ({MAX_COMMENT_LENGTH} characters maximum).",
        )

    return ValidationResult(
        report=NormalizedReport(
            hospital_id=hospital_id,
            wait_minutes=wait_minutes,
            capacity_enum=capacity_enum,
            comment=comment,
        )
    )
