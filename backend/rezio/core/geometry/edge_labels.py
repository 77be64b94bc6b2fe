"""Automatic front/rear/left/right labelling of parcel boundary edges.

Two strategies:

1. STREET POINT: the geocoded address pin sits on the street, so the
   edge nearest to it is the front. Every other edge is classified by
   the angle between its direction from the parcel centroid and the
   front's direction: more than 135 degrees away is the rear, the rest
   are left or right sides.
2. COMPASS: with no pin, fall back to the Phoenix street grid: the
   north-facing edge is the front, south the rear, east right, west left.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from shapely.geometry import LineString, Point as ShapelyPoint, Polygon

from rezio.config import settings
from rezio.core.geometry.boundary import Point
from rezio.core.geometry.parcel import ring_origin, to_local_feet
from rezio.core.geometry.setbacks import EdgeLabel
from rezio.utils.units import lonlat_to_local_ft

logger = logging.getLogger(__name__)

METHOD_STREET = "street-detection"
METHOD_COMPASS = "compass-fallback"


@dataclass
class AutoLabelResult:
    labels: list[EdgeLabel]
    method: str
    front_edge: int | None = None
    street_facing: list[int] = field(default_factory=list)  # candidate fronts on corner lots

    def to_dict(self) -> dict:
        return {
            "edge_labels": [label.to_dict() for label in self.labels],
            "method": self.method,
            "front_edge": self.front_edge,
            "street_facing": self.street_facing,
        }


def auto_label_edges(
    ring: list[Point],
    street_point: Point | None = None,
    proximity_ft: float | None = None,
) -> AutoLabelResult:
    """Label every edge of an open lon/lat ring.

    Edge i runs from ring[i] to ring[(i + 1) % len(ring)].
    """
    origin = ring_origin(ring)
    pts = to_local_feet(ring, origin)
    centroid = Polygon(pts).centroid
    center = (centroid.x, centroid.y)

    edges = [LineString([pts[i], pts[(i + 1) % len(pts)]]) for i in range(len(pts))]
    bearings = [_bearing(center, _midpoint(edge)) for edge in edges]

    if street_point is None:
        logger.info("No street point available, labelling %d edges by compass", len(edges))
        labels = [EdgeLabel(i, _compass_side(b)) for i, b in enumerate(bearings)]
        front = next((l.edge_index for l in labels if l.label == "front"), None)
        return AutoLabelResult(labels=labels, method=METHOD_COMPASS, front_edge=front)

    street = ShapelyPoint(lonlat_to_local_ft(street_point[0], street_point[1], origin))
    distances = [edge.distance(street) for edge in edges]
    front = min(range(len(edges)), key=lambda i: distances[i])
    front_bearing = bearings[front]

    labels: list[EdgeLabel] = []
    for i, b in enumerate(bearings):
        if i == front:
            side = "front"
        elif _angle_between(b, front_bearing) > 135:
            side = "rear"
        else:
            side = "right" if math.sin(math.radians(b - front_bearing)) > 0 else "left"
        labels.append(EdgeLabel(i, side))

    limit = settings.street_proximity_ft if proximity_ft is None else proximity_ft
    street_facing = [i for i, d in enumerate(distances) if d < limit]
    logger.debug("Front edge %d (bearing %.1f), street-facing edges %s", front, front_bearing, street_facing)

    return AutoLabelResult(
        labels=labels,
        method=METHOD_STREET,
        front_edge=front,
        street_facing=street_facing,
    )


# ── Helpers ─────────────────────────────────────────────────────────────

def _midpoint(edge: LineString) -> Point:
    (x0, y0), (x1, y1) = edge.coords
    return (x0 + x1) / 2, (y0 + y1) / 2


def _bearing(a: Point, b: Point) -> float:
    """Compass bearing from a to b in [0, 360): 0 = north, 90 = east."""
    return math.degrees(math.atan2(b[0] - a[0], b[1] - a[1])) % 360.0


def _angle_between(a: float, b: float) -> float:
    diff = (a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def _compass_side(bearing: float) -> str:
    if bearing >= 315 or bearing < 45:
        return "front"
    if 135 <= bearing < 225:
        return "rear"
    if 45 <= bearing < 135:
        return "right"
    return "left"
