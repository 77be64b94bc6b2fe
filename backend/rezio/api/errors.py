"""Map core ValidationResult failures onto HTTP 400 responses."""

from __future__ import annotations

from fastapi import HTTPException

from rezio.core.validation import ValidationResult


def unwrap(result: ValidationResult):
    """Return the validated value or raise a 400 listing every error."""
    if not result.ok:
        raise HTTPException(400, detail=[e.to_dict() for e in result.errors])
    return result.value
