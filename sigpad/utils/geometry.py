"""Geometric operations for signature strokes.

Provides:
    - Point type and basic vector helpers (distance, midpoint)
    - Perpendicular offset pairs used to widen a spine into a ribbon
    - Quadratic Bézier evaluation and adaptive flattening
    - Bounding boxes over recorded points (ink bounds)

Used by:
    - Input tracker: sample distance, segment end anchors (midpoints)
    - Rasterizer: ribbon outline construction and polygon flattening
    - View: ink bounds for cropped export

Coordinates are logical view units unless explicitly noted as device pixels.
Conversions to device pixels happen at rasterizer boundaries (multiply by
the view scale).

Adaptive flattening uses recursive subdivision with a configurable max_err
tolerance (default: 0.25 device px).
"""

import math
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np


class Point(NamedTuple):
    """2D coordinate (x, y). Immutable once recorded."""
    x: float
    y: float


BBox = Tuple[float, float, float, float]


def as_point(p: Sequence[float]) -> Point:
    """Coerce any (x, y) pair into a Point of floats."""
    if isinstance(p, Point):
        return p
    x, y = p
    return Point(float(x), float(y))


def distance(p0: Point, p1: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p1.x - p0.x, p1.y - p0.y)


def midpoint(p0: Point, p1: Point) -> Point:
    """Arithmetic mean of two points."""
    return Point((p0.x + p1.x) / 2.0, (p0.y + p1.y) / 2.0)


def offset_points(p0: Point, p1: Point, width: float) -> Tuple[Point, Point]:
    """Offset p0 perpendicular to the p0→p1 direction by width/2 on each side.

    Parameters
    ----------
    p0 : Point
        Origin of the offset
    p1 : Point
        Point giving the direction p0→p1
    width : float
        Full ribbon width at p0

    Returns
    -------
    Tuple[Point, Point]
        (p0 + n·width/2, p0 - n·width/2) where n is the unit direction
        rotated by +90°

    Raises
    ------
    ValueError
        If p0 == p1 (direction undefined)

    Notes
    -----
    Rotation by +90°: (u0, u1) → (-u1, u0).
    """
    v0 = p1.x - p0.x
    v1 = p1.y - p0.y
    divisor = math.hypot(v0, v1)
    if divisor == 0.0:
        raise ValueError(f"Cannot offset from coincident points {p0} and {p1}")

    u0 = v0 / divisor
    u1 = v1 / divisor

    # rotate
    ru0 = -u1
    ru1 = u0

    half = width / 2.0
    du0 = half * ru0
    du1 = half * ru1

    return (
        Point(p0.x + du0, p0.y + du1),
        Point(p0.x - du0, p0.y - du1),
    )


def quad_bezier_eval(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    t: np.ndarray
) -> np.ndarray:
    """Evaluate quadratic Bézier curve at parameter t.

    Parameters
    ----------
    p0, p1, p2 : np.ndarray
        Start, control and end points, shape (2,)
    t : np.ndarray
        Parameter values in [0, 1], shape (N,)

    Returns
    -------
    np.ndarray
        Points on curve, shape (N, 2)

    Notes
    -----
    B(t) = (1-t)²·p0 + 2(1-t)t·p1 + t²·p2
    """
    t = np.atleast_1d(np.asarray(t, dtype=np.float64))[:, np.newaxis]
    one_minus_t = 1.0 - t

    b0 = one_minus_t ** 2
    b1 = 2.0 * one_minus_t * t
    b2 = t ** 2

    return b0 * np.asarray(p0) + b1 * np.asarray(p1) + b2 * np.asarray(p2)


def quad_bezier_polyline(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    max_err: float = 0.25,
    max_depth: int = 10
) -> np.ndarray:
    """Flatten quadratic Bézier to polyline via adaptive subdivision.

    Parameters
    ----------
    p0, p1, p2 : np.ndarray
        Start, control and end points, shape (2,)
    max_err : float
        Maximum allowed deviation of the control point from the chord,
        in the same units as the points, default 0.25
    max_depth : int
        Maximum recursion depth, default 10

    Returns
    -------
    np.ndarray
        Polyline vertices, shape (N, 2), N ≥ 2, first vertex p0, last p2
    """
    p0 = np.asarray(p0, dtype=np.float64)
    p1 = np.asarray(p1, dtype=np.float64)
    p2 = np.asarray(p2, dtype=np.float64)

    def subdivide(q0, q1, q2, depth) -> List[np.ndarray]:
        if depth >= max_depth:
            return [q0, q2]

        # Distance from control point to chord q0-q2
        chord = q2 - q0
        chord_len = math.hypot(chord[0], chord[1])
        v = q1 - q0
        if chord_len < 1e-12:
            dist = math.hypot(v[0], v[1])
        else:
            dist = abs(v[0] * chord[1] - v[1] * chord[0]) / chord_len

        if dist <= max_err:
            return [q0, q2]

        # De Casteljau at t=0.5
        q01 = (q0 + q1) / 2.0
        q12 = (q1 + q2) / 2.0
        q012 = (q01 + q12) / 2.0

        left = subdivide(q0, q01, q012, depth + 1)
        right = subdivide(q012, q12, q2, depth + 1)
        return left[:-1] + right

    return np.stack(subdivide(p0, p1, p2, 0), axis=0)


def points_bbox(points: Iterable[Point]) -> BBox:
    """Axis-aligned bounding box of a point sequence.

    Returns
    -------
    BBox
        (xmin, ymin, xmax, ymax)

    Raises
    ------
    ValueError
        If no points are given
    """
    arr = np.asarray([tuple(p) for p in points], dtype=np.float64)
    if arr.size == 0:
        raise ValueError("Bounding box of an empty point sequence is undefined")

    xmin, ymin = arr.min(axis=0)
    xmax, ymax = arr.max(axis=0)
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def scale_bbox(bbox: BBox, factor: float) -> BBox:
    xmin, ymin, xmax, ymax = bbox
    return (xmin * factor, ymin * factor, xmax * factor, ymax * factor)


def outset_bbox(bbox: BBox, margin: float) -> BBox:
    """Grow bbox by margin on every side."""
    xmin, ymin, xmax, ymax = bbox
    return (xmin - margin, ymin - margin, xmax + margin, ymax + margin)
