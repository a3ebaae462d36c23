"""Gesture state tracking for a single continuous signature stroke.

The tracker turns ordered pointer events into drawing requests:

    begin(p)  → reset stroke state at p and record p
    move(p)   → width estimate → quad segment (prev_end, prev, mid(p, prev))
    end(p)    → record p
    cancel(p) → same as end (everything drawn so far stays)
    tap(p)    → record p and request a dot

Samples closer than MIN_SAMPLE_DISTANCE to the previous sample are recorded
for bounds but do not advance the stroke.

Events must be delivered in arrival order; reordering corrupts the width
smoothing state and spine continuity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from sigpad.ink_renderer.width_estimator import WidthEstimator
from sigpad.utils import geometry
from sigpad.utils.geometry import Point

logger = logging.getLogger(__name__)

MIN_SAMPLE_DISTANCE = 1.0


class StrokeSink(Protocol):
    """Drawing surface the tracker hands geometry to."""

    @property
    def stroke_width(self) -> float: ...

    def draw_segment(
        self,
        start: Point,
        control: Point,
        end: Point,
        start_width: float,
        end_width: float
    ) -> None: ...

    def draw_dot(self, point: Point) -> None: ...

    def reset_raster(self) -> None: ...


@dataclass
class StrokeState:
    """Per-gesture stroke state plus the recorded point history."""

    previous_point: Point = Point(0.0, 0.0)
    previous_end_point: Point = Point(0.0, 0.0)
    previous_width: float = 0.0
    points: List[Point] = field(default_factory=list)

    def reset_stroke(self, at: Point) -> None:
        self.previous_point = at
        self.previous_end_point = at
        self.previous_width = 0.0


class InputTracker:
    """Maintains stroke state across a drag gesture and drives the sink.

    Parameters
    ----------
    sink : StrokeSink
        Receives segments, dots and raster resets
    width_estimator : WidthEstimator, optional
        Defaults to WidthEstimator()
    on_signed_changed : callable, optional
        Called with the new boolean whenever the point list flips between
        empty and non-empty
    """

    def __init__(
        self,
        sink: StrokeSink,
        width_estimator: Optional[WidthEstimator] = None,
        on_signed_changed: Optional[Callable[[bool], None]] = None
    ):
        self.sink = sink
        self.width_estimator = width_estimator or WidthEstimator()
        self.on_signed_changed = on_signed_changed
        self.state = StrokeState()
        self._is_signed = False

    @property
    def is_signed(self) -> bool:
        return self._is_signed

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(self.state.points)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_gesture_begin(self, point: Sequence[float]) -> None:
        p = geometry.as_point(point)
        self.state.reset_stroke(p)
        self._append_point(p)
        logger.debug(f"Gesture began at {p}")

    def on_gesture_move(self, point: Sequence[float]) -> bool:
        """Advance the stroke to point.

        Returns
        -------
        bool
            True if a segment was emitted, False if the sample was below
            MIN_SAMPLE_DISTANCE (recorded only)
        """
        p = geometry.as_point(point)
        state = self.state

        d = geometry.distance(state.previous_point, p)
        if d < MIN_SAMPLE_DISTANCE:
            self._append_point(p)
            return False

        width = self.width_estimator.estimate(d, state.previous_width, self.sink.stroke_width)
        mid = geometry.midpoint(p, state.previous_point)

        self.sink.draw_segment(
            state.previous_end_point, state.previous_point, mid,
            state.previous_width, width
        )

        state.previous_point = p
        state.previous_end_point = mid
        state.previous_width = width
        self._append_point(p)
        return True

    def on_gesture_end(self, point: Sequence[float]) -> None:
        self._append_point(geometry.as_point(point))

    def on_gesture_cancel(self, point: Sequence[float]) -> None:
        # Already-composited ink is kept; a cancelled gesture ends normally.
        self.on_gesture_end(point)

    def on_tap(self, point: Sequence[float]) -> None:
        p = geometry.as_point(point)
        self._append_point(p)
        self.sink.draw_dot(p)

    def clear(self) -> None:
        """Empty the point history and the raster together; reset stroke state."""
        self.sink.reset_raster()
        self._set_points([])
        self.state.reset_stroke(Point(0.0, 0.0))

    # ------------------------------------------------------------------
    # Point list mutation (single notification site)
    # ------------------------------------------------------------------

    def _append_point(self, p: Point) -> None:
        self.state.points.append(p)
        self._sync_signed()

    def _set_points(self, points: List[Point]) -> None:
        self.state.points = points
        self._sync_signed()

    def _sync_signed(self) -> None:
        new_value = bool(self.state.points)
        if new_value == self._is_signed:
            return
        self._is_signed = new_value
        logger.debug(f"Signed state changed: {new_value}")
        if self.on_signed_changed is not None:
            self.on_signed_changed(new_value)
