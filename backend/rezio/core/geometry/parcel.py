"""Parcel geometry and the buildable envelope left after setbacks."""

from __future__ import annotations

from dataclasses import dataclass, field

from shapely.geometry import LineString, MultiPolygon, Polygon
from shapely.ops import unary_union

from rezio.core.geometry.boundary import Point
from rezio.core.geometry.setbacks import EdgeLabel, Setbacks
from rezio.utils.units import area_ft2_to_acres, local_ft_to_lonlat, lonlat_to_local_ft


def ring_origin(ring: list[Point]) -> Point:
    """Vertex average of a lon/lat ring, used as the local projection origin."""
    n = len(ring)
    return sum(p[0] for p in ring) / n, sum(p[1] for p in ring) / n


def to_local_feet(ring: list[Point], origin: Point | None = None) -> list[Point]:
    origin = origin or ring_origin(ring)
    return [lonlat_to_local_ft(lon, lat, origin) for lon, lat in ring]


@dataclass
class ParcelGeometry:
    """Parcel boundary (local feet) with setbacks and the buildable envelope."""

    ring: list[Point]  # open lon/lat ring, as stored
    origin: Point
    boundary: Polygon  # local feet
    envelope: Polygon | None
    setbacks: Setbacks | None = None
    edge_labels: list[EdgeLabel] = field(default_factory=list)

    @property
    def area_sq_ft(self) -> float:
        return self.boundary.area

    @property
    def envelope_sq_ft(self) -> float:
        return self.envelope.area if self.envelope is not None else 0.0

    def edge_lengths_ft(self) -> list[float]:
        pts = list(self.boundary.exterior.coords)[:-1]
        return [
            LineString([pts[i], pts[(i + 1) % len(pts)]]).length
            for i in range(len(pts))
        ]

    def to_dict(self) -> dict:
        """Serialise to a plain dict for the API response (lon/lat coordinates)."""
        def _lonlat(poly: Polygon | None) -> list[list[float]] | None:
            if poly is None or poly.is_empty:
                return None
            return [list(local_ft_to_lonlat(x, y, self.origin)) for x, y in poly.exterior.coords]

        return {
            "boundary": [list(p) for p in self.ring],
            "envelope": _lonlat(self.envelope),
            "area_sq_ft": round(self.area_sq_ft, 1),
            "area_acres": round(area_ft2_to_acres(self.area_sq_ft), 4),
            "envelope_sq_ft": round(self.envelope_sq_ft, 1),
            "edge_lengths_ft": [round(d, 2) for d in self.edge_lengths_ft()],
            "setbacks": self.setbacks.to_dict() if self.setbacks else None,
            "edge_labels": [label.to_dict() for label in self.edge_labels],
        }


def build_parcel_geometry(
    ring: list[Point],
    setbacks: Setbacks | None = None,
    edge_labels: list[EdgeLabel] | None = None,
    local: bool = False,
) -> ParcelGeometry:
    """Construct a ParcelGeometry from an open ring and validated setbacks.

    With edge labels each labelled edge is pushed inward by its own
    setback; without them the whole boundary is buffered inward by the
    smallest setback (mitre joins keep square corners on square lots).
    Set ``local`` when the ring is already in planar feet.
    """
    edge_labels = edge_labels or []
    if local:
        origin: Point = (0.0, 0.0)
        pts = list(ring)
    else:
        origin = ring_origin(ring)
        pts = to_local_feet(ring, origin)
    boundary = Polygon(pts)

    envelope: Polygon | None = None
    if setbacks is not None:
        if edge_labels:
            envelope = _labelled_envelope(boundary, pts, setbacks, edge_labels)
        else:
            envelope = _uniform_envelope(boundary, setbacks.minimum)

    return ParcelGeometry(
        ring=list(ring),
        origin=origin,
        boundary=boundary,
        envelope=envelope,
        setbacks=setbacks,
        edge_labels=edge_labels,
    )


def _uniform_envelope(boundary: Polygon, distance: float) -> Polygon | None:
    if distance <= 0:
        return boundary
    return _largest(boundary.buffer(-distance, join_style="mitre"))


def _labelled_envelope(
    boundary: Polygon,
    pts: list[Point],
    setbacks: Setbacks,
    edge_labels: list[EdgeLabel],
) -> Polygon | None:
    bands = []
    for label in edge_labels:
        distance = setbacks.for_side(label.label)
        if distance <= 0:
            continue
        a = pts[label.edge_index]
        b = pts[(label.edge_index + 1) % len(pts)]
        bands.append(LineString([a, b]).buffer(distance, cap_style="flat"))
    if not bands:
        return boundary
    return _largest(boundary.difference(unary_union(bands)))


def _largest(geom) -> Polygon | None:
    if geom.is_empty:
        return None
    if isinstance(geom, MultiPolygon):
        return max(geom.geoms, key=lambda p: p.area)
    if isinstance(geom, Polygon):
        return geom
    polys = [g for g in getattr(geom, "geoms", []) if isinstance(g, Polygon)]
    return max(polys, key=lambda p: p.area) if polys else None
