"""Parcel boundary ring normalization.

County GIS and Regrid return boundaries in several shapes: a JSON string,
a bare ring, or a GeoJSON polygon ring nested one level deeper, usually
closed with a repeated first point. Everything downstream (edge indices,
edge labels, setback envelopes) works on one form: an open ring of
(lon, lat) tuples, one entry per edge start.
"""

from __future__ import annotations

import json
import math
from typing import Any

from shapely.geometry import Polygon
from shapely.validation import explain_validity

from rezio.core.validation import (
    ValidationCode,
    ValidationError,
    ValidationResult,
    is_number,
)

Point = tuple[float, float]


def normalize_boundary_ring(raw: Any) -> ValidationResult[list[Point]]:
    """Return the open boundary ring, or INVALID_FORMAT errors.

    Rejects rings shapely reports as invalid (self-intersections such as
    a bowtie), so envelope construction only ever sees simple polygons.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            return _invalid(f"Boundary is not valid JSON: {exc}")

    if isinstance(raw, dict) and raw.get("type") == "Polygon":
        raw = raw.get("coordinates")

    if not isinstance(raw, (list, tuple)) or not raw:
        return _invalid("Boundary must be a non-empty list of [lon, lat] points")

    # GeoJSON polygon: [[ [lon, lat], ... ]] -> outer ring
    if isinstance(raw[0], (list, tuple)) and raw[0] and isinstance(raw[0][0], (list, tuple)):
        raw = raw[0]

    ring: list[Point] = []
    for i, pt in enumerate(raw):
        if (
            not isinstance(pt, (list, tuple))
            or len(pt) < 2
            or not all(is_number(v) and math.isfinite(v) for v in pt[:2])
        ):
            return _invalid(f"Boundary point {i} is not a finite [lon, lat] pair: {pt!r}", index=i)
        ring.append((float(pt[0]), float(pt[1])))

    ring = _deduplicate_consecutive(ring)
    if len(ring) > 3 and _points_equal(ring[0], ring[-1]):
        ring = ring[:-1]

    if len(ring) < 3:
        return _invalid(f"Need at least 3 distinct boundary points, got {len(ring)}")

    if _all_collinear(ring):
        return _invalid("All boundary points are collinear; the parcel would have zero area")

    # Not repaired with make_valid(): a repaired ring no longer matches the
    # caller's edge indices.
    poly = Polygon(ring)
    if not poly.is_valid:
        return _invalid(f"Boundary is not a simple polygon: {explain_validity(poly)}")

    return ValidationResult.success(ring)


def close_ring(ring: list[Point]) -> list[Point]:
    """Append the first point if the ring is open."""
    if ring and not _points_equal(ring[0], ring[-1]):
        return ring + [ring[0]]
    return list(ring)


# ── Helpers ─────────────────────────────────────────────────────────────

def _invalid(message: str, index: int | None = None) -> ValidationResult[list[Point]]:
    return ValidationResult.failure(ValidationError(
        ValidationCode.INVALID_FORMAT, message, field="boundary", index=index,
    ))


def _points_equal(a: Point, b: Point, eps: float = 1e-12) -> bool:
    return abs(a[0] - b[0]) < eps and abs(a[1] - b[1]) < eps


def _deduplicate_consecutive(coords: list[Point]) -> list[Point]:
    if not coords:
        return []
    result = [coords[0]]
    for c in coords[1:]:
        if not _points_equal(c, result[-1]):
            result.append(c)
    return result


def _all_collinear(points: list[Point]) -> bool:
    """Check if all points lie on a single line using cross product."""
    if len(points) < 3:
        return True
    x0, y0 = points[0]
    x1, y1 = points[1]
    for x2, y2 in points[2:]:
        cross = (x1 - x0) * (y2 - y0) - (y1 - y0) * (x2 - x0)
        if abs(cross) > 1e-18:
            return False
    return True
