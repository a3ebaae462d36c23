"""YAML schema validation and config loading.

Provides centralized validation for configuration files using pydantic:
    - Signature pad schema (signature_pad.v1.yaml): canvas size/scale, ink
      style, rendering tolerances
    - Gesture schema (gestures.v1.yaml): recorded pointer event streams for
      replay and previews

All modules load configs through these validators for fail-fast error
detection with actionable messages (offending keys, expected ranges).

Units:
    - Geometry: logical view units; `scale` converts to device pixels
    - Color: RGBA ints [0, 255] (hex strings accepted on input)
    - Alpha: [0.0, 1.0]

Usage:
    from sigpad.utils import validators

    cfg = validators.load_signature_pad_config("configs/signature_pad.v1.yaml")
    gestures = validators.load_gesture_file("gestures.yaml")
"""

from pathlib import Path
from typing import List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .color import BLACK, parse_color


# ============================================================================
# SIGNATURE PAD SCHEMA V1
# ============================================================================

class CanvasConfig(BaseModel):
    """View size in logical units and device pixel density."""
    width: float = Field(..., gt=0.0, description="View width (logical units)")
    height: float = Field(..., gt=0.0, description="View height (logical units)")
    scale: float = Field(2.0, gt=0.0, description="Device pixels per logical unit")


class StyleConfig(BaseModel):
    """Ink style. Read at every draw, so changes apply to the next segment."""
    stroke_width: float = Field(2.0, gt=0.0, description="Stroke width ceiling (logical units)")
    dot_size: float = Field(4.0, gt=0.0, description="Tap dot diameter (logical units)")
    stroke_color: Tuple[int, int, int, int] = Field(BLACK, description="RGBA [0, 255]")
    stroke_alpha: float = Field(1.0, ge=0.0, le=1.0, description="Ink opacity")

    @field_validator('stroke_color', mode='before')
    @classmethod
    def validate_color(cls, v):
        return parse_color(v)


class RenderConfig(BaseModel):
    """Rasterization tolerances."""
    max_err_px: float = Field(0.25, gt=0.0, description="Curve flattening tolerance (device px)")
    hairline_width: float = Field(1.0, gt=0.0, description="Outline stroke width (logical units)")


class SignaturePadV1(BaseModel):
    """Signature pad configuration (signature_pad.v1.yaml schema)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("signature_pad.v1", alias="schema")
    canvas: CanvasConfig
    style: StyleConfig = Field(default_factory=StyleConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "signature_pad.v1":
            raise ValueError(f"Expected schema 'signature_pad.v1', got '{v}'")
        return v


# ============================================================================
# GESTURE SCHEMA V1
# ============================================================================

class GestureEventV1(BaseModel):
    """Single pointer event in view-local logical units."""
    type: Literal["begin", "move", "end", "cancel", "tap"]
    x: float
    y: float


class GestureFileV1(BaseModel):
    """Ordered event stream (gestures.v1.yaml)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("gestures.v1", alias="schema")
    events: List[GestureEventV1] = Field(..., description="Events in arrival order")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "gestures.v1":
            raise ValueError(f"Expected schema 'gestures.v1', got '{v}'")
        return v


# ============================================================================
# LOADERS
# ============================================================================

def load_signature_pad_config(path: Union[str, Path]) -> SignaturePadV1:
    """Load and validate a signature pad config from YAML.

    Parameters
    ----------
    path : str or Path
        Path to signature_pad.v1.yaml

    Returns
    -------
    SignaturePadV1
        Validated config model

    Raises
    ------
    FileNotFoundError
        If file does not exist
    pydantic.ValidationError
        If config is invalid
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Signature pad config not found: {path}")

    cfg = fs.load_yaml(path) or {}
    return SignaturePadV1(**cfg)


def load_gesture_file(path: Union[str, Path]) -> GestureFileV1:
    """Load and validate a recorded gesture stream from YAML.

    Raises
    ------
    FileNotFoundError
        If file does not exist
    pydantic.ValidationError
        If an event is malformed
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Gesture file not found: {path}")

    data = fs.load_yaml(path) or {}
    return GestureFileV1(**data)
