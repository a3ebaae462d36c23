"""Top-level signature view: the object a host UI talks to.

Wires the pipeline per pointer event:

    InputTracker → WidthEstimator → CPUInkRasterizer → redraw request

and owns the pieces that outlive a single gesture:
    - Ink style (width ceiling, dot size, color, alpha)
    - The persistent raster buffer (through the rasterizer)
    - The signed-state observer registration (weak, at most one)
    - The redraw signal for the presentation layer

Host contract:
    view = SignatureView(300, 200, scale=2.0)
    view.delegate = observer            # observer.did_update(view, is_signed)
    view.begin((10, 10)); view.move((10, 40)); view.end((10, 40))
    image = view.export_cropped_image() # PIL RGBA image or None

Everything runs synchronously on the caller's thread; events must arrive
in order.
"""

from __future__ import annotations

import logging
import weakref
from typing import Callable, Optional, Protocol, Sequence, Tuple

from PIL import Image

from sigpad.ink_renderer.cpu_rasterizer import CPUInkRasterizer
from sigpad.ink_renderer.width_estimator import WidthEstimator
from sigpad.utils import color as color_utils, geometry
from sigpad.utils.geometry import BBox, Point
from sigpad.utils.validators import RenderConfig, SignaturePadV1, StyleConfig

from .input_tracker import InputTracker

logger = logging.getLogger(__name__)


class SignatureViewDelegate(Protocol):
    def did_update(self, view: "SignatureView", is_signed: bool) -> None: ...


class SignatureView:
    """Real-time signature capture surface.

    Parameters
    ----------
    width, height : float
        View size in logical units
    scale : float
        Device pixels per logical unit, default 2.0
    style : StyleConfig, optional
        Initial ink style (defaults: width 2, dot 4, black, alpha 1)
    render : RenderConfig, optional
        Rasterization tolerances
    redraw_callback : callable, optional
        Invoked (no arguments) whenever new ink was composited or the view
        was cleared; repeated calls before a repaint are harmless
    """

    def __init__(
        self,
        width: float,
        height: float,
        scale: float = 2.0,
        *,
        style: Optional[StyleConfig] = None,
        render: Optional[RenderConfig] = None,
        redraw_callback: Optional[Callable[[], None]] = None
    ):
        style = style or StyleConfig()
        render = render or RenderConfig()

        self.rasterizer = CPUInkRasterizer(
            width, height, scale,
            max_err_px=render.max_err_px,
            hairline_width=render.hairline_width
        )
        self.tracker = InputTracker(
            self,
            width_estimator=WidthEstimator(),
            on_signed_changed=self._notify_delegate
        )

        self._stroke_width = style.stroke_width
        self._dot_size = style.dot_size
        self._stroke_color = style.stroke_color
        self._stroke_alpha = style.stroke_alpha

        self._delegate_ref: Optional[weakref.ReferenceType] = None
        self.redraw_callback = redraw_callback
        self.needs_display = False

        logger.info(
            f"SignatureView initialized: view={width}×{height}, scale={scale}, "
            f"stroke_width={self._stroke_width}, dot_size={self._dot_size}"
        )

    @classmethod
    def from_config(
        cls,
        cfg: SignaturePadV1,
        redraw_callback: Optional[Callable[[], None]] = None
    ) -> "SignatureView":
        return cls(
            cfg.canvas.width, cfg.canvas.height, cfg.canvas.scale,
            style=cfg.style,
            render=cfg.render,
            redraw_callback=redraw_callback
        )

    # ------------------------------------------------------------------
    # Style (applies from the next draw)
    # ------------------------------------------------------------------

    @property
    def scale(self) -> float:
        return self.rasterizer.scale

    @property
    def stroke_width(self) -> float:
        return self._stroke_width

    @stroke_width.setter
    def stroke_width(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"stroke_width must be positive, got {value}")
        self._stroke_width = float(value)
        state = self.tracker.state
        state.previous_width = min(state.previous_width, self._stroke_width)

    @property
    def dot_size(self) -> float:
        return self._dot_size

    @dot_size.setter
    def dot_size(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"dot_size must be positive, got {value}")
        self._dot_size = float(value)

    @property
    def stroke_color(self) -> color_utils.RGBA:
        return self._stroke_color

    @stroke_color.setter
    def stroke_color(self, value: color_utils.ColorLike) -> None:
        self._stroke_color = color_utils.parse_color(value)

    @property
    def stroke_alpha(self) -> float:
        return self._stroke_alpha

    @stroke_alpha.setter
    def stroke_alpha(self, value: float) -> None:
        # Out-of-range values are ignored; the previous alpha stays.
        if not 0.0 <= value <= 1.0:
            logger.debug(f"stroke_alpha {value} outside [0, 1] ignored, keeping {self._stroke_alpha}")
            return
        self._stroke_alpha = float(value)

    # ------------------------------------------------------------------
    # Observer
    # ------------------------------------------------------------------

    @property
    def delegate(self) -> Optional[SignatureViewDelegate]:
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    @delegate.setter
    def delegate(self, observer: Optional[SignatureViewDelegate]) -> None:
        self._delegate_ref = weakref.ref(observer) if observer is not None else None

    def _notify_delegate(self, is_signed: bool) -> None:
        delegate = self.delegate
        if delegate is not None:
            delegate.did_update(self, is_signed)

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def begin(self, point: Sequence[float]) -> None:
        self.tracker.on_gesture_begin(point)

    def move(self, point: Sequence[float]) -> bool:
        return self.tracker.on_gesture_move(point)

    def end(self, point: Sequence[float]) -> None:
        self.tracker.on_gesture_end(point)

    def cancel(self, point: Sequence[float]) -> None:
        self.tracker.on_gesture_cancel(point)

    def tap(self, point: Sequence[float]) -> None:
        self.tracker.on_tap(point)

    def clear(self) -> None:
        """Blank the raster and forget all points, together."""
        self.tracker.clear()
        logger.info("Signature cleared")

    # ------------------------------------------------------------------
    # Drawing surface used by the tracker
    # ------------------------------------------------------------------

    def draw_segment(
        self,
        start: Point,
        control: Point,
        end: Point,
        start_width: float,
        end_width: float
    ) -> None:
        # A draw attempt always materializes the buffer, even for a
        # degenerate segment.
        self.rasterizer.ensure_buffer()
        rgba = color_utils.with_alpha(self._stroke_color, self._stroke_alpha)
        self.rasterizer.draw_quad_curve(start, control, end, start_width, end_width, rgba)
        self.set_needs_display()

    def draw_dot(self, point: Point) -> None:
        self.rasterizer.ensure_buffer()
        rgba = color_utils.with_alpha(self._stroke_color, self._stroke_alpha)
        self.rasterizer.draw_dot(point, self._dot_size, rgba)
        self.set_needs_display()

    def reset_raster(self) -> None:
        self.rasterizer.reset()
        self.set_needs_display()

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def set_needs_display(self) -> None:
        self.needs_display = True
        if self.redraw_callback is not None:
            self.redraw_callback()

    def display(self) -> Image.Image:
        """Hand the current raster to the presentation layer."""
        self.needs_display = False
        return self.current_raster_buffer()

    # ------------------------------------------------------------------
    # Queries & export
    # ------------------------------------------------------------------

    @property
    def is_signed(self) -> bool:
        return self.tracker.is_signed

    @property
    def points(self) -> Tuple[Point, ...]:
        return self.tracker.points

    def current_raster_buffer(self) -> Image.Image:
        return self.rasterizer.to_image()

    def compute_ink_bounds(self) -> BBox:
        """Ink bounds in device px: points bbox × scale, outset by stroke width × scale.

        Returns the full buffer bounds when no points are recorded.
        """
        points = self.tracker.state.points
        if not points:
            return self.rasterizer.bounds_px

        bbox_px = geometry.scale_bbox(geometry.points_bbox(points), self.scale)
        return geometry.outset_bbox(bbox_px, self._stroke_width * self.scale)

    def export_cropped_image(self) -> Optional[Image.Image]:
        """Raster cropped to the ink bounds, or None if nothing was drawn."""
        image = self.rasterizer.crop(self.compute_ink_bounds())
        if image is None:
            logger.debug("Nothing to export")
        return image
