"""Drawn-shape coordinate normalization, measurement and auditing.

Canonical coordinates are always a non-empty list of [lon, lat] pairs; a
circle stores a single pair, its center. Older clients saved circles as a
bare [lon, lat] pair. Those records are corrupted and are rejected rather
than wrapped, so a bad stored shape can never be passed off as valid.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from shapely.geometry import LineString, Polygon

from rezio.core.geometry.parcel import ring_origin, to_local_feet
from rezio.core.validation import (
    ValidationCode,
    ValidationError,
    ValidationResult,
    is_number,
)

logger = logging.getLogger(__name__)

SHAPE_TYPES = {"point", "polygon", "circle", "rectangle", "line", "polyline"}


def normalize_coordinates(raw: Any, shape_type: str) -> ValidationResult[list]:
    """Check a coordinate payload against the canonical nested format.

    Decision order:
        1. None                       -> MISSING_COORDINATES
        2. str                        -> INVALID_FORMAT (deserialize first)
        3. not a list, or empty       -> INVALID_FORMAT
        4. raw[0] is [number, number] -> valid, returned unchanged
        5. [number, number]           -> LEGACY_FLAT_FORMAT
        6. anything else              -> INVALID_FORMAT
    """
    if raw is None:
        return _fail(ValidationCode.MISSING_COORDINATES, f"{shape_type} has no coordinates")

    if isinstance(raw, (str, bytes)):
        return _fail(
            ValidationCode.INVALID_FORMAT,
            f"{shape_type} coordinates are a serialized string; send a JSON array",
        )

    if not isinstance(raw, (list, tuple)) or len(raw) == 0:
        return _fail(
            ValidationCode.INVALID_FORMAT,
            f"{shape_type} coordinates must be a non-empty array of [lon, lat] pairs",
        )

    if _is_pair(raw[0]):
        return ValidationResult.success(raw)

    if len(raw) == 2 and is_number(raw[0]) and is_number(raw[1]):
        return _fail(
            ValidationCode.LEGACY_FLAT_FORMAT,
            f"{shape_type} coordinates use the legacy flat [lon, lat] format; expected [[lon, lat]]",
        )

    return _fail(
        ValidationCode.INVALID_FORMAT,
        f"{shape_type} coordinates must be an array of [lon, lat] pairs",
    )


# ── Measurement ─────────────────────────────────────────────────────────

@dataclass
class ShapeMeasurement:
    area_sq_ft: float | None
    perimeter_ft: float | None

    def to_dict(self) -> dict:
        return {
            "area": None if self.area_sq_ft is None else round(self.area_sq_ft, 2),
            "perimeter": None if self.perimeter_ft is None else round(self.perimeter_ft, 2),
        }


def measure_shape(
    coordinates: list,
    shape_type: str,
    radius_ft: float | None = None,
) -> ShapeMeasurement:
    """Derive area (sq ft) and perimeter (ft) for normalized coordinates."""
    kind = shape_type.lower()

    if kind == "circle":
        if radius_ft is None:
            return ShapeMeasurement(None, None)
        return ShapeMeasurement(math.pi * radius_ft ** 2, 2 * math.pi * radius_ft)

    if not all(_is_pair(p) for p in coordinates):
        return ShapeMeasurement(None, None)
    ring = [(float(p[0]), float(p[1])) for p in coordinates]
    if kind == "point" or len(ring) < 2:
        return ShapeMeasurement(0.0, 0.0)

    pts = to_local_feet(ring, ring_origin(ring))
    if kind in ("line", "polyline") or len(pts) < 3:
        return ShapeMeasurement(0.0, LineString(pts).length)

    poly = Polygon(pts)
    return ShapeMeasurement(poly.area, poly.exterior.length)


# ── Audit ───────────────────────────────────────────────────────────────

@dataclass
class CorruptedShape:
    shape_id: Any
    coordinates: Any
    errors: list[ValidationError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.shape_id,
            "coordinates": self.coordinates,
            "errors": [e.to_dict() for e in self.errors],
        }


def find_corrupted_shapes(
    shapes: Iterable[dict],
    shape_type: str | None = "circle",
) -> list[CorruptedShape]:
    """Return stored shapes whose coordinates fail normalization.

    ``shape_type`` limits the scan to one type; ``None`` scans everything.
    Records are dicts with ``id``, ``shapeType`` (or ``shape_type``) and
    ``coordinates``.
    """
    corrupted: list[CorruptedShape] = []
    scanned = 0
    for shape in shapes:
        kind = shape.get("shapeType", shape.get("shape_type"))
        if shape_type is not None and kind != shape_type:
            continue
        scanned += 1
        result = normalize_coordinates(shape.get("coordinates"), kind or "shape")
        if not result.ok:
            corrupted.append(CorruptedShape(shape.get("id"), shape.get("coordinates"), result.errors))

    if corrupted:
        logger.warning("Found %d corrupted %s shapes out of %d", len(corrupted), shape_type or "drawn", scanned)
    return corrupted


# ── Helpers ─────────────────────────────────────────────────────────────

def _is_pair(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and is_number(value[0])
        and is_number(value[1])
    )


def _fail(code: ValidationCode, message: str) -> ValidationResult[list]:
    return ValidationResult.failure(ValidationError(code, message, field="coordinates"))
