"""Validation result types shared by the setback, edge-label and shape checks.

Validators never raise for bad input. They return a ValidationResult that
carries either the normalized value or the list of errors found, so the
HTTP layer can turn the errors into a 400 response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ValidationCode(str, Enum):
    MISSING_FIELD = "MISSING_FIELD"
    NEGATIVE = "NEGATIVE"
    INVALID_FORMAT = "INVALID_FORMAT"
    LEGACY_FLAT_FORMAT = "LEGACY_FLAT_FORMAT"
    EDGE_INDEX_OUT_OF_RANGE = "EDGE_INDEX_OUT_OF_RANGE"
    MISSING_COORDINATES = "MISSING_COORDINATES"


@dataclass
class ValidationError:
    code: ValidationCode
    message: str
    field: str | None = None
    index: int | None = None  # position in the input sequence, when relevant

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "field": self.field,
            "index": self.index,
        }


@dataclass
class ValidationResult(Generic[T]):
    value: T | None = None
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def codes(self) -> list[ValidationCode]:
        return [e.code for e in self.errors]

    @classmethod
    def success(cls, value: T) -> ValidationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult[T]:
        return cls(value=None, errors=list(errors))


# ── Helpers ─────────────────────────────────────────────────────────────

def is_number(value: object) -> bool:
    """True for ints and floats; bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
