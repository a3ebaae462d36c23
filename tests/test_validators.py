"""Test configuration schemas and loaders.

Tests for sigpad.utils.validators:
    - signature_pad.v1: defaults, ranges, color normalization, schema tag
    - gestures.v1: event types, ordering preserved
    - Loaders: missing file, empty file, shipped configs

Run:
    pytest tests/test_validators.py -v
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from sigpad.utils import validators

CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


def write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding='utf-8')
    return path


# ============================================================================
# SIGNATURE PAD SCHEMA
# ============================================================================

def test_style_defaults():
    style = validators.StyleConfig()
    assert style.stroke_width == 2.0
    assert style.dot_size == 4.0
    assert style.stroke_color == (0, 0, 0, 255)
    assert style.stroke_alpha == 1.0


@pytest.mark.parametrize("color, expected", [
    ("#000", (0, 0, 0, 255)),
    ("#1a2b3c", (26, 43, 60, 255)),
    ("1a2b3c80", (26, 43, 60, 128)),
    ([10, 20, 30], (10, 20, 30, 255)),
    ([10, 20, 30, 40], (10, 20, 30, 40)),
])
def test_style_color_normalized(color, expected):
    assert validators.StyleConfig(stroke_color=color).stroke_color == expected


@pytest.mark.parametrize("kwargs", [
    dict(stroke_alpha=1.1),
    dict(stroke_alpha=-0.1),
    dict(stroke_width=0.0),
    dict(dot_size=-1.0),
    dict(stroke_color="#12"),
    dict(stroke_color=[0, 0, 300]),
])
def test_style_rejects_invalid(kwargs):
    with pytest.raises(ValidationError):
        validators.StyleConfig(**kwargs)


def test_canvas_requires_positive_size():
    with pytest.raises(ValidationError):
        validators.CanvasConfig(width=0, height=10)
    assert validators.CanvasConfig(width=10, height=10).scale == 2.0


def test_pad_schema_tag():
    cfg = validators.SignaturePadV1(schema="signature_pad.v1", canvas={"width": 10, "height": 10})
    assert cfg.schema_version == "signature_pad.v1"
    assert cfg.render.max_err_px == 0.25

    with pytest.raises(ValidationError, match="signature_pad.v1"):
        validators.SignaturePadV1(schema="signature_pad.v0", canvas={"width": 10, "height": 10})


def test_load_signature_pad_config(tmp_path):
    path = write_yaml(tmp_path / "pad.yaml", {
        "schema": "signature_pad.v1",
        "canvas": {"width": 320, "height": 120, "scale": 3},
        "style": {"stroke_width": 2.5, "stroke_color": "#112233", "stroke_alpha": 0.7},
    })
    cfg = validators.load_signature_pad_config(path)
    assert cfg.canvas.width == 320.0
    assert cfg.canvas.scale == 3.0
    assert cfg.style.stroke_width == 2.5
    assert cfg.style.stroke_color == (17, 34, 51, 255)
    assert cfg.style.dot_size == 4.0


def test_load_signature_pad_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        validators.load_signature_pad_config(tmp_path / "nope.yaml")


def test_load_signature_pad_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding='utf-8')
    with pytest.raises(ValidationError):
        validators.load_signature_pad_config(path)


def test_shipped_pad_config_loads():
    cfg = validators.load_signature_pad_config(CONFIG_DIR / "signature_pad.v1.yaml")
    assert (cfg.canvas.width, cfg.canvas.height, cfg.canvas.scale) == (300.0, 200.0, 2.0)


# ============================================================================
# GESTURE SCHEMA
# ============================================================================

def test_gesture_file_preserves_order(tmp_path):
    events = [
        {"type": "begin", "x": 1, "y": 2},
        {"type": "move", "x": 3, "y": 4},
        {"type": "cancel", "x": 3, "y": 4},
        {"type": "tap", "x": 9, "y": 9},
    ]
    path = write_yaml(tmp_path / "g.yaml", {"schema": "gestures.v1", "events": events})
    gestures = validators.load_gesture_file(path)
    assert [e.type for e in gestures.events] == ["begin", "move", "cancel", "tap"]
    assert (gestures.events[1].x, gestures.events[1].y) == (3.0, 4.0)


def test_gesture_event_type_checked():
    with pytest.raises(ValidationError):
        validators.GestureEventV1(type="drag", x=0, y=0)


def test_gesture_schema_tag():
    with pytest.raises(ValidationError, match="gestures.v1"):
        validators.GestureFileV1(schema="strokes.v1", events=[])


def test_load_gesture_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        validators.load_gesture_file(tmp_path / "missing.yaml")


def test_shipped_demo_gestures_load():
    gestures = validators.load_gesture_file(CONFIG_DIR / "demo_gestures.v1.yaml")
    assert gestures.events[0].type == "begin"
    assert any(e.type == "tap" for e in gestures.events)
