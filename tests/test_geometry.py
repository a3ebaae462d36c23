"""Test geometric operations for signature strokes.

Tests for sigpad.utils.geometry:
    - Point coercion, distance, midpoint
    - Perpendicular offsets (direction, half-width, coincident points)
    - Quadratic Bézier evaluation at t=0, 0.5, 1
    - Adaptive flattening: endpoints preserved, tolerance refines
    - Bounding box and outset

Degenerate cases:
    - Straight spine (control on chord) → 2-vertex polyline
    - Coincident offset origin/direction → ValueError
    - Empty point sequence bbox → ValueError

Run:
    pytest tests/test_geometry.py -v
"""

import math

import numpy as np
import pytest

from sigpad.utils import geometry
from sigpad.utils.geometry import Point


# ============================================================================
# POINTS
# ============================================================================

def test_as_point_coerces_pairs():
    p = geometry.as_point((3, 4))
    assert isinstance(p, Point)
    assert p == Point(3.0, 4.0)
    assert isinstance(p.x, float)

    same = Point(1.0, 2.0)
    assert geometry.as_point(same) is same


def test_distance_and_midpoint():
    a = Point(0.0, 0.0)
    b = Point(3.0, 4.0)
    assert geometry.distance(a, b) == pytest.approx(5.0)
    assert geometry.distance(b, a) == pytest.approx(5.0)
    assert geometry.distance(a, a) == 0.0
    assert geometry.midpoint(a, b) == Point(1.5, 2.0)


# ============================================================================
# OFFSETS
# ============================================================================

def test_offset_points_perpendicular_half_width():
    p0 = Point(0.0, 0.0)
    p1 = Point(10.0, 0.0)
    left, right = geometry.offset_points(p0, p1, 4.0)

    # +90° rotation of (1, 0) is (0, 1)
    assert left.x == pytest.approx(0.0)
    assert left.y == pytest.approx(2.0)
    assert right.x == pytest.approx(0.0)
    assert right.y == pytest.approx(-2.0)


def test_offset_points_arbitrary_direction():
    p0 = Point(5.0, 5.0)
    p1 = Point(8.0, 9.0)  # direction (3, 4)/5
    left, right = geometry.offset_points(p0, p1, 2.0)

    # Each offset at distance width/2, symmetric about p0
    assert geometry.distance(p0, left) == pytest.approx(1.0)
    assert geometry.distance(p0, right) == pytest.approx(1.0)
    assert geometry.midpoint(left, right).x == pytest.approx(p0.x)
    assert geometry.midpoint(left, right).y == pytest.approx(p0.y)

    # Perpendicular to direction
    dx, dy = left.x - p0.x, left.y - p0.y
    assert dx * 3.0 + dy * 4.0 == pytest.approx(0.0, abs=1e-12)


def test_offset_points_zero_width_collapses():
    left, right = geometry.offset_points(Point(1.0, 1.0), Point(2.0, 1.0), 0.0)
    assert left == pytest.approx(Point(1.0, 1.0))
    assert right == pytest.approx(Point(1.0, 1.0))


def test_offset_points_coincident_raises():
    with pytest.raises(ValueError, match="coincident"):
        geometry.offset_points(Point(1.0, 1.0), Point(1.0, 1.0), 2.0)


# ============================================================================
# QUADRATIC BÉZIER
# ============================================================================

def test_quad_bezier_eval():
    p0 = np.array([0.0, 0.0])
    p1 = np.array([1.0, 2.0])
    p2 = np.array([2.0, 0.0])

    pts = geometry.quad_bezier_eval(p0, p1, p2, np.array([0.0, 0.5, 1.0]))
    assert pts.shape == (3, 2)
    assert np.allclose(pts[0], p0)
    assert np.allclose(pts[1], [1.0, 1.0])
    assert np.allclose(pts[2], p2)


def test_quad_bezier_polyline_straight():
    poly = geometry.quad_bezier_polyline(
        np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([2.0, 0.0])
    )
    assert poly.shape == (2, 2)
    assert np.allclose(poly[0], [0.0, 0.0])
    assert np.allclose(poly[-1], [2.0, 0.0])


def test_quad_bezier_polyline_curved_endpoints_and_order():
    p0 = np.array([0.0, 0.0])
    p1 = np.array([50.0, 100.0])
    p2 = np.array([100.0, 0.0])
    poly = geometry.quad_bezier_polyline(p0, p1, p2, max_err=0.25)

    assert len(poly) > 2
    assert np.allclose(poly[0], p0)
    assert np.allclose(poly[-1], p2)
    # x(t) = 100t is monotone, so vertices must advance in x
    assert np.all(np.diff(poly[:, 0]) > 0)


def test_quad_bezier_polyline_vertices_on_curve():
    p0 = np.array([0.0, 0.0])
    p1 = np.array([50.0, 100.0])
    p2 = np.array([100.0, 0.0])
    poly = geometry.quad_bezier_polyline(p0, p1, p2, max_err=0.25)

    # For this curve t = x / 100
    t = poly[:, 0] / 100.0
    on_curve = geometry.quad_bezier_eval(p0, p1, p2, t)
    assert np.allclose(on_curve, poly, atol=1e-9)


def test_quad_bezier_polyline_tolerance_refines():
    p0 = np.array([0.0, 0.0])
    p1 = np.array([50.0, 100.0])
    p2 = np.array([100.0, 0.0])
    coarse = geometry.quad_bezier_polyline(p0, p1, p2, max_err=2.0)
    fine = geometry.quad_bezier_polyline(p0, p1, p2, max_err=0.05)
    assert len(fine) > len(coarse)


def test_quad_bezier_polyline_depth_cap():
    poly = geometry.quad_bezier_polyline(
        np.array([0.0, 0.0]), np.array([50.0, 1000.0]), np.array([100.0, 0.0]),
        max_err=1e-9, max_depth=3
    )
    assert len(poly) == 2 ** 3 + 1


# ============================================================================
# BOUNDING BOXES
# ============================================================================

def test_points_bbox():
    pts = [Point(10.0, 40.0), Point(-2.0, 5.0), Point(7.0, 12.0)]
    assert geometry.points_bbox(pts) == (-2.0, 5.0, 10.0, 40.0)


def test_points_bbox_single_point():
    assert geometry.points_bbox([Point(3.0, 4.0)]) == (3.0, 4.0, 3.0, 4.0)


def test_points_bbox_empty_raises():
    with pytest.raises(ValueError):
        geometry.points_bbox([])


def test_scale_and_outset_bbox():
    bbox = (10.0, 10.0, 10.0, 40.0)
    scaled = geometry.scale_bbox(bbox, 2.0)
    assert scaled == (20.0, 20.0, 20.0, 80.0)
    assert geometry.outset_bbox(scaled, 4.0) == (16.0, 16.0, 24.0, 84.0)
    assert math.isclose(geometry.outset_bbox(bbox, 0.0)[2], 10.0)
