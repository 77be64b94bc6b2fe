"""Tests for boundary rings, buildable envelopes and automatic edge labels."""

import math

import pytest

from rezio.core.geometry.boundary import close_ring, normalize_boundary_ring
from rezio.core.geometry.edge_labels import METHOD_COMPASS, METHOD_STREET, auto_label_edges
from rezio.core.geometry.parcel import build_parcel_geometry
from rezio.core.geometry.setbacks import EdgeLabel, Setbacks
from rezio.core.validation import ValidationCode
from rezio.utils.units import FT_PER_DEGREE

# 0.001 x 0.001 degree lot in Phoenix; edges: 0 south, 1 east, 2 north, 3 west
PHX_RING = [(-112.0, 33.5), (-111.999, 33.5), (-111.999, 33.501), (-112.0, 33.501)]

# 50 ft x 100 ft lot in local feet; edge 0 runs along y = 0
LOCAL_LOT = [(0.0, 0.0), (50.0, 0.0), (50.0, 100.0), (0.0, 100.0)]
LOCAL_LABELS = [
    EdgeLabel(0, "front"),
    EdgeLabel(1, "right"),
    EdgeLabel(2, "rear"),
    EdgeLabel(3, "left"),
]


class TestNormalizeBoundaryRing:
    def test_open_ring_unchanged(self):
        result = normalize_boundary_ring([list(p) for p in PHX_RING])
        assert result.ok
        assert result.value == PHX_RING

    def test_closing_point_dropped(self):
        result = normalize_boundary_ring(close_ring(PHX_RING))
        assert result.value == PHX_RING

    def test_geojson_nesting_unwrapped(self):
        result = normalize_boundary_ring([[list(p) for p in close_ring(PHX_RING)]])
        assert result.value == PHX_RING

    def test_geojson_polygon_object(self):
        result = normalize_boundary_ring({
            "type": "Polygon",
            "coordinates": [[list(p) for p in close_ring(PHX_RING)]],
        })
        assert len(result.value) == 4

    def test_json_string(self):
        result = normalize_boundary_ring("[[0, 0], [10, 0], [10, 10]]")
        assert result.value == [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0)]

    def test_too_few_points(self):
        result = normalize_boundary_ring([[0, 0], [10, 0], [0, 0]])
        assert result.codes == [ValidationCode.INVALID_FORMAT]

    def test_collinear(self):
        result = normalize_boundary_ring([[0, 0], [10, 0], [20, 0], [30, 0]])
        assert result.codes == [ValidationCode.INVALID_FORMAT]

    def test_non_finite_point(self):
        result = normalize_boundary_ring([[0, 0], [float("nan"), 0], [10, 10]])
        assert result.errors[0].index == 1

    def test_empty(self):
        assert not normalize_boundary_ring([]).ok
        assert not normalize_boundary_ring(None).ok

    def test_self_intersecting_bowtie(self):
        bowtie = [[-112.0, 33.5], [-111.999, 33.501], [-111.999, 33.5], [-112.0, 33.501]]
        result = normalize_boundary_ring(bowtie)
        assert result.codes == [ValidationCode.INVALID_FORMAT]
        assert "Self-intersection" in result.errors[0].message

    def test_clockwise_ring_is_valid(self):
        result = normalize_boundary_ring([list(p) for p in reversed(PHX_RING)])
        assert result.ok


class TestBuildableEnvelope:
    def test_labelled_rectangle(self):
        setbacks = Setbacks(front=20, rear=15, side_left=5, side_right=7)
        parcel = build_parcel_geometry(LOCAL_LOT, setbacks, LOCAL_LABELS, local=True)
        assert parcel.area_sq_ft == pytest.approx(5000)
        assert parcel.envelope_sq_ft == pytest.approx((50 - 5 - 7) * (100 - 20 - 15))
        minx, miny, maxx, maxy = parcel.envelope.bounds
        assert (minx, miny, maxx, maxy) == pytest.approx((5, 20, 43, 85))

    def test_uniform_buffer_without_labels(self):
        setbacks = Setbacks(front=20, rear=15, side_left=5, side_right=7)
        parcel = build_parcel_geometry(LOCAL_LOT, setbacks, local=True)
        assert parcel.envelope_sq_ft == pytest.approx(40 * 90)

    def test_zero_setbacks_keep_whole_lot(self):
        setbacks = Setbacks(front=0, rear=0, side_left=0, side_right=0)
        parcel = build_parcel_geometry(LOCAL_LOT, setbacks, LOCAL_LABELS, local=True)
        assert parcel.envelope_sq_ft == pytest.approx(5000)

    def test_setbacks_consume_lot(self):
        setbacks = Setbacks(front=60, rear=60, side_left=30, side_right=30)
        parcel = build_parcel_geometry(LOCAL_LOT, setbacks, LOCAL_LABELS, local=True)
        assert parcel.envelope is None
        assert parcel.envelope_sq_ft == 0.0

    def test_no_setbacks_no_envelope(self):
        parcel = build_parcel_geometry(LOCAL_LOT, local=True)
        assert parcel.envelope is None

    def test_lonlat_ring_area(self):
        parcel = build_parcel_geometry(PHX_RING)
        width = 0.001 * FT_PER_DEGREE * math.cos(math.radians(33.5005))
        depth = 0.001 * FT_PER_DEGREE
        assert parcel.area_sq_ft == pytest.approx(width * depth, rel=1e-6)

    def test_to_dict(self):
        setbacks = Setbacks(front=20, rear=20, side_left=10, side_right=10)
        data = build_parcel_geometry(PHX_RING, setbacks).to_dict()
        assert data["boundary"][0] == [-112.0, 33.5]
        assert data["envelope"][0] == data["envelope"][-1]  # closed ring
        assert data["envelope_sq_ft"] < data["area_sq_ft"]
        assert len(data["edge_lengths_ft"]) == 4
        assert data["setbacks"]["sideLeft"] == 10


class TestAutoLabelEdges:
    def test_compass_fallback(self):
        result = auto_label_edges(PHX_RING)
        assert result.method == METHOD_COMPASS
        assert [l.label for l in result.labels] == ["rear", "right", "front", "left"]
        assert result.front_edge == 2

    def test_street_point_marks_nearest_edge_front(self):
        street = (-111.9995, 33.4995)  # south of the lot
        result = auto_label_edges(PHX_RING, street)
        assert result.method == METHOD_STREET
        assert result.front_edge == 0
        assert [l.label for l in result.labels] == ["front", "left", "rear", "right"]

    def test_street_facing_edges(self):
        street = (-111.9995, 33.4995)  # ~182 ft south of edge 0
        assert auto_label_edges(PHX_RING, street, proximity_ft=200).street_facing == [0]
        assert auto_label_edges(PHX_RING, street, proximity_ft=50).street_facing == []

    def test_labels_cover_every_edge(self):
        result = auto_label_edges(PHX_RING, (-111.9985, 33.5005))  # east of the lot
        assert [l.edge_index for l in result.labels] == [0, 1, 2, 3]
        assert result.labels[1].label == "front"
        assert result.labels[3].label == "rear"
