"""CPU rasterizer for variable-width signature ink.

Deterministic, pure-CPU compositing of tapered quadratic ribbons and round
dots onto one persistent RGBA buffer using OpenCV antialiased polygon fills.

Architecture:
    - Spine: quadratic Bézier (start, control, end) in logical units
    - Ribbon outline: perpendicular offsets at start/control/end, joined by
      two quadratic curves and two straight edges
    - Quadratic curves → polyline with adaptive flattening (error in px)
    - Rasterize outline into a local 8-bit coverage mask (cv2.fillPoly +
      hairline cv2.polylines, LINE_AA, sub-pixel shift) inside an ROI
    - Source-over compositing into a premultiplied float32 buffer

Invariants:
    - Geometry in logical units; conversion to device px (× scale) happens
      here only
    - Buffer is premultiplied RGBA float32 [0,1], shape (H_px, W_px, 4)
    - Buffer is allocated lazily and only ever accumulates; it is released
      by reset() and never partially erased
    - Only new geometry is composited; history is never replayed

Usage:
    from sigpad.ink_renderer.cpu_rasterizer import CPUInkRasterizer

    raster = CPUInkRasterizer(300, 200, scale=2.0)
    raster.draw_quad_curve(start, control, end, 2.0, 2.0, rgba)
    image = raster.to_image()
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from sigpad.utils import geometry
from sigpad.utils.geometry import BBox, Point

logger = logging.getLogger(__name__)

# Fractional bits for OpenCV sub-pixel coordinates
_SHIFT = 4
_ONE = 1 << _SHIFT

# Device px place pixel i over [i, i + 1); OpenCV samples pixel i at i.
_PIXEL_CENTER = 0.5


class CPUInkRasterizer:
    """Composites ink primitives into a persistent device-scaled buffer.

    Attributes
    ----------
    width, height : float
        View size in logical units
    scale : float
        Device pixels per logical unit
    canvas_w_px, canvas_h_px : int
        Buffer size in device pixels
    max_err_px : float
        Curve flattening tolerance in device pixels
    hairline_width : float
        Width of the outline stroke in logical units
    buffer : np.ndarray or None
        Premultiplied RGBA float32 (H, W, 4); None until the first draw
    """

    def __init__(
        self,
        width: float,
        height: float,
        scale: float = 2.0,
        *,
        max_err_px: float = 0.25,
        hairline_width: float = 1.0
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"View size must be positive, got {width}×{height}")
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        if max_err_px <= 0:
            raise ValueError(f"max_err_px must be positive, got {max_err_px}")

        self.width = float(width)
        self.height = float(height)
        self.scale = float(scale)
        self.max_err_px = float(max_err_px)
        self.hairline_width = float(hairline_width)

        self.canvas_w_px = int(round(self.width * self.scale))
        self.canvas_h_px = int(round(self.height * self.scale))

        self.buffer: Optional[np.ndarray] = None

        logger.debug(
            f"CPUInkRasterizer initialized: view={self.width}×{self.height}, "
            f"scale={self.scale}, buffer={self.canvas_w_px}×{self.canvas_h_px} px"
        )

    # ------------------------------------------------------------------
    # Buffer lifecycle
    # ------------------------------------------------------------------

    @property
    def has_pixels(self) -> bool:
        return self.buffer is not None

    @property
    def bounds_px(self) -> BBox:
        """Full buffer bounds (xmin, ymin, xmax, ymax) in device px."""
        return (0.0, 0.0, float(self.canvas_w_px), float(self.canvas_h_px))

    def ensure_buffer(self) -> np.ndarray:
        """Allocate the blank buffer on first use and return it."""
        if self.buffer is None:
            self.buffer = np.zeros((self.canvas_h_px, self.canvas_w_px, 4), dtype=np.float32)
        return self.buffer

    def reset(self) -> None:
        """Release the buffer; the next draw starts from a blank surface."""
        self.buffer = None

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def build_outline(
        self,
        start: Point,
        control: Point,
        end: Point,
        start_width: float,
        end_width: float
    ) -> np.ndarray:
        """Closed ribbon outline around a quadratic spine.

        Parameters
        ----------
        start, control, end : Point
            Spine anchors in logical units (start != control)
        start_width, end_width : float
            Ribbon width at the start and end anchors

        Returns
        -------
        np.ndarray
            Outline vertices in device px, shape (N, 2), float64

        Notes
        -----
        Path: start.p0 → quad(ctrl=control.p1) → end.p1 → line → end.p0
        → quad(ctrl=control.p0) → start.p1 → close. The control anchor uses
        the mean of start and end widths.
        """
        control_width = (start_width + end_width) / 2.0

        start_offsets = geometry.offset_points(start, control, start_width)
        control_offsets = geometry.offset_points(control, start, control_width)
        end_offsets = geometry.offset_points(end, control, end_width)

        s = self.scale

        def px(p: Point) -> np.ndarray:
            return np.array([p.x * s, p.y * s], dtype=np.float64)

        forward = geometry.quad_bezier_polyline(
            px(start_offsets[0]), px(control_offsets[1]), px(end_offsets[1]),
            max_err=self.max_err_px
        )
        backward = geometry.quad_bezier_polyline(
            px(end_offsets[0]), px(control_offsets[0]), px(start_offsets[1]),
            max_err=self.max_err_px
        )
        # line end.p1 → end.p0 and start.p1 → start.p0 are the implicit joins
        return np.concatenate([forward, backward], axis=0)

    def draw_quad_curve(
        self,
        start: Point,
        control: Point,
        end: Point,
        start_width: float,
        end_width: float,
        color: np.ndarray
    ) -> bool:
        """Fill and hairline-stroke a tapered ribbon into the buffer.

        Parameters
        ----------
        start, control, end : Point
            Spine anchors in logical units
        start_width, end_width : float
            Ribbon widths in logical units
        color : np.ndarray
            Straight (non-premultiplied) RGBA float32 in [0, 1], shape (4,)

        Returns
        -------
        bool
            True if geometry was composited, False if the segment was
            degenerate or entirely off-canvas
        """
        if start == control:
            logger.debug(f"Degenerate segment skipped: start == control == {start}")
            return False

        outline_px = self.build_outline(start, control, end, start_width, end_width)

        hair_px = max(1, int(round(self.hairline_width * self.scale)))
        roi = self._roi_for(outline_px, margin=hair_px + 2)
        if roi is None:
            return False
        x0, y0, x1, y1 = roi

        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        pts = self._to_fixed(outline_px, x0, y0)
        cv2.fillPoly(mask, [pts], 255, lineType=cv2.LINE_AA, shift=_SHIFT)
        cv2.polylines(mask, [pts], True, 255, thickness=hair_px, lineType=cv2.LINE_AA, shift=_SHIFT)

        self._composite(mask, x0, y0, color)
        return True

    def draw_dot(self, point: Point, dot_size: float, color: np.ndarray) -> bool:
        """Composite a round dot of diameter dot_size centred on point."""
        radius_px = 0.5 * dot_size * self.scale
        center_px = np.array([[point.x * self.scale, point.y * self.scale]], dtype=np.float64)

        roi = self._roi_for(
            np.concatenate([center_px - radius_px, center_px + radius_px], axis=0),
            margin=2
        )
        if roi is None:
            return False
        x0, y0, x1, y1 = roi

        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        cx, cy = self._to_fixed(center_px, x0, y0)[0, 0]
        radius_fixed = max(1, int(round(radius_px * _ONE)))
        cv2.circle(mask, (int(cx), int(cy)), radius_fixed, 255, thickness=-1, lineType=cv2.LINE_AA, shift=_SHIFT)

        self._composite(mask, x0, y0, color)
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_image(self) -> Image.Image:
        """Full-size straight-alpha RGBA image (transparent if nothing drawn)."""
        if self.buffer is None:
            return Image.new('RGBA', (self.canvas_w_px, self.canvas_h_px), (0, 0, 0, 0))
        return Image.fromarray(_unpremultiply_to_uint8(self.buffer))

    def crop(self, bbox_px: BBox) -> Optional[Image.Image]:
        """Crop the buffer to bbox_px (device px), aligned outward.

        Returns
        -------
        PIL.Image.Image or None
            None if the buffer has no pixel data or the crop is empty after
            intersecting with the buffer bounds
        """
        if self.buffer is None:
            return None

        xmin, ymin, xmax, ymax = bbox_px
        x0 = max(0, int(math.floor(xmin)))
        y0 = max(0, int(math.floor(ymin)))
        x1 = min(self.canvas_w_px, int(math.ceil(xmax)))
        y1 = min(self.canvas_h_px, int(math.ceil(ymax)))
        if x1 <= x0 or y1 <= y0:
            return None

        return Image.fromarray(_unpremultiply_to_uint8(self.buffer[y0:y1, x0:x1]))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _roi_for(self, pts_px: np.ndarray, margin: int) -> Optional[Tuple[int, int, int, int]]:
        """Integer ROI (x0, y0, x1, y1) covering pts_px, clipped to the buffer."""
        x0 = max(0, int(math.floor(pts_px[:, 0].min())) - margin)
        y0 = max(0, int(math.floor(pts_px[:, 1].min())) - margin)
        x1 = min(self.canvas_w_px, int(math.ceil(pts_px[:, 0].max())) + margin + 1)
        y1 = min(self.canvas_h_px, int(math.ceil(pts_px[:, 1].max())) + margin + 1)
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    @staticmethod
    def _to_fixed(pts_px: np.ndarray, x0: int, y0: int) -> np.ndarray:
        """ROI-local fixed-point int32 coordinates, shape (N, 1, 2)."""
        local = (pts_px - _PIXEL_CENTER - np.array([x0, y0], dtype=np.float64)) * _ONE
        return np.round(local).astype(np.int32).reshape(-1, 1, 2)

    def _composite(self, mask: np.ndarray, x0: int, y0: int, color: np.ndarray) -> None:
        """Source-over composite color × coverage into the buffer ROI."""
        buffer = self.ensure_buffer()
        h, w = mask.shape

        coverage = mask.astype(np.float32) / 255.0
        src_alpha = (coverage * np.float32(color[3]))[:, :, np.newaxis]  # (h, w, 1)

        src = np.empty((h, w, 4), dtype=np.float32)
        src[:, :, :3] = np.asarray(color[:3], dtype=np.float32) * src_alpha
        src[:, :, 3:] = src_alpha

        roi = buffer[y0:y0 + h, x0:x0 + w, :]
        roi *= (1.0 - src_alpha)
        roi += src
        np.clip(roi, 0.0, 1.0, out=roi)


def _unpremultiply_to_uint8(premul: np.ndarray) -> np.ndarray:
    """Premultiplied float RGBA → straight uint8 RGBA."""
    alpha = premul[:, :, 3:4]
    rgb = np.divide(
        premul[:, :, :3], alpha,
        out=np.zeros_like(premul[:, :, :3]),
        where=alpha > 0
    )
    out = np.concatenate([np.clip(rgb, 0.0, 1.0), alpha], axis=2)
    return np.ascontiguousarray(np.round(out * 255.0).astype(np.uint8))
