"""sigpad: real-time variable-width signature ink rendering.

Turns a live stream of pointer samples into smoothly tapered quadratic
ink segments, composites them onto one persistent raster buffer and
exports a tight crop around the inked region.

Architecture layers (strict one-way dependency):
    scripts/ → sigpad/signature_view/ → sigpad/ink_renderer/ → sigpad/utils/

Key invariants:
    - Geometry in logical view units; device pixels = logical × scale
    - Raster buffer only ever accumulates; it is cleared together with the
      recorded point list, never independently
    - Width is simulated from sample distance (speed), never from pressure
    - YAML-only configs, validated with pydantic
"""

__version__ = "1.0.0"
