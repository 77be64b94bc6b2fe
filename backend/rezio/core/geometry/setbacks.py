"""Setback record and edge-label validation.

Both validators are all-or-nothing: a result either carries the fully
normalized value or only errors, never a partially accepted record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from rezio.core.validation import (
    ValidationCode,
    ValidationError,
    ValidationResult,
    is_number,
)

SETBACK_SIDES = ("front", "rear", "left", "right")

# canonical field -> accepted input keys, first match wins
_SETBACK_KEYS: dict[str, tuple[str, ...]] = {
    "front": ("front",),
    "rear": ("rear",),
    "side_left": ("sideLeft", "side_left", "left"),
    "side_right": ("sideRight", "side_right", "right"),
}


@dataclass(frozen=True)
class Setbacks:
    """Required distances (feet) from each side of the parcel."""

    front: float
    rear: float
    side_left: float
    side_right: float

    def for_side(self, side: str) -> float:
        """Distance for an edge label (front/rear/left/right)."""
        return {
            "front": self.front,
            "rear": self.rear,
            "left": self.side_left,
            "right": self.side_right,
        }[side]

    @property
    def minimum(self) -> float:
        return min(self.front, self.rear, self.side_left, self.side_right)

    def to_dict(self) -> dict:
        return {
            "front": self.front,
            "rear": self.rear,
            "sideLeft": self.side_left,
            "sideRight": self.side_right,
        }


@dataclass(frozen=True)
class EdgeLabel:
    edge_index: int
    label: str  # front | rear | left | right

    def to_dict(self) -> dict:
        return {"edgeIndex": self.edge_index, "label": self.label}


# ── Setbacks ────────────────────────────────────────────────────────────

def validate_setbacks(raw: Any) -> ValidationResult[Setbacks]:
    """Validate a four-sided setback record.

    Every side must be present as a finite number (MISSING_FIELD) and
    must not be negative (NEGATIVE).
    """
    if not isinstance(raw, dict):
        return ValidationResult.failure(ValidationError(
            ValidationCode.INVALID_FORMAT,
            f"Setbacks must be an object, got {type(raw).__name__}",
        ))

    values: dict[str, float] = {}
    errors: list[ValidationError] = []

    for name, keys in _SETBACK_KEYS.items():
        value = next((raw[k] for k in keys if raw.get(k) is not None), None)
        if not is_number(value) or not math.isfinite(value):
            errors.append(ValidationError(
                ValidationCode.MISSING_FIELD,
                f"Setback '{name}' is required and must be a finite number (accepted keys: {', '.join(keys)})",
                field=name,
            ))
            continue
        if value < 0:
            errors.append(ValidationError(
                ValidationCode.NEGATIVE,
                f"Setback '{name}' cannot be negative, got {value}",
                field=name,
            ))
            continue
        values[name] = float(value)

    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success(Setbacks(**values))


# ── Edge labels ─────────────────────────────────────────────────────────

def validate_edge_labels(raw: Any, ring_length: int) -> ValidationResult[list[EdgeLabel]]:
    """Validate an ordered edge-label list against a boundary ring.

    ``None`` means no labels were supplied and is accepted as an empty
    list. Every bad element is reported; if any is bad, nothing is kept.
    """
    if raw is None:
        return ValidationResult.success([])

    if isinstance(raw, (str, bytes, dict)) or not isinstance(raw, (list, tuple)):
        return ValidationResult.failure(ValidationError(
            ValidationCode.INVALID_FORMAT,
            "Edge labels must be a list of {edgeIndex, label} objects",
        ))

    labels: list[EdgeLabel] = []
    errors: list[ValidationError] = []

    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            errors.append(ValidationError(
                ValidationCode.INVALID_FORMAT,
                f"Edge label {i} must be an object",
                index=i,
            ))
            continue

        edge_index = item.get("edgeIndex", item.get("edge_index"))
        if (
            not isinstance(edge_index, int)
            or isinstance(edge_index, bool)
            or not 0 <= edge_index < ring_length
        ):
            errors.append(ValidationError(
                ValidationCode.EDGE_INDEX_OUT_OF_RANGE,
                f"Edge label {i} has edgeIndex {edge_index!r}; expected an integer in [0, {ring_length})",
                field="edgeIndex",
                index=i,
            ))
            continue

        label = item.get("label", item.get("side"))
        normalized = label.strip().lower() if isinstance(label, str) else ""
        if normalized not in SETBACK_SIDES:
            errors.append(ValidationError(
                ValidationCode.INVALID_FORMAT,
                f"Edge label {i} has label {label!r}; expected one of {', '.join(SETBACK_SIDES)}",
                field="label",
                index=i,
            ))
            continue

        labels.append(EdgeLabel(edge_index=edge_index, label=normalized))

    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success(labels)
