"""Ink rendering: speed-driven width estimation and CPU rasterization.

Modules:
    - width_estimator: inter-sample distance → smoothed segment width
    - cpu_rasterizer: tapered quadratic ribbons and dots composited onto a
      persistent premultiplied RGBA buffer (OpenCV antialiased fills)

Invariants:
    - Inputs in logical units; the rasterizer owns the × scale conversion
    - Compositing is additive source-over; nothing is erased except by reset

Used by:
    - signature_view: per-event drawing
    - scripts/preview_signature.py: offline replay
"""

from .cpu_rasterizer import CPUInkRasterizer
from .width_estimator import DELTA, STROKE_SCALE, WidthEstimator

__all__ = ['CPUInkRasterizer', 'WidthEstimator', 'STROKE_SCALE', 'DELTA']
