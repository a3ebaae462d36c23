"""Test atomic filesystem operations.

Tests for sigpad.utils.fs:
    - ensure_dir creates parents
    - atomic_write_bytes leaves no tmp file behind
    - atomic_save_image accepts PIL images and numpy arrays (uint8 / float)
    - load_yaml: missing file, malformed YAML

Run:
    pytest tests/test_fs.py -v
"""

import numpy as np
import pytest
import yaml
from PIL import Image

from sigpad.utils import fs


def test_ensure_dir(tmp_path):
    target = tmp_path / "a" / "b" / "c"
    out = fs.ensure_dir(target)
    assert out == target
    assert target.is_dir()
    fs.ensure_dir(target)


def test_atomic_write_bytes(tmp_path):
    path = tmp_path / "sub" / "data.bin"
    fs.atomic_write_bytes(path, b"ink")
    assert path.read_bytes() == b"ink"
    assert not list(path.parent.glob("*.tmp"))


def test_atomic_save_pil_image(tmp_path):
    img = Image.new('RGBA', (7, 5), (10, 20, 30, 40))
    path = tmp_path / "sig.png"
    fs.atomic_save_image(img, path)

    with Image.open(path) as loaded:
        assert loaded.size == (7, 5)
        assert loaded.mode == 'RGBA'
        assert loaded.getpixel((0, 0)) == (10, 20, 30, 40)
    assert not list(tmp_path.glob("*.tmp*"))


def test_atomic_save_numpy_float(tmp_path):
    arr = np.zeros((4, 6, 4), dtype=np.float32)
    arr[..., 3] = 1.0
    arr[1, 2] = [1.0, 0.0, 0.0, 1.0]
    path = tmp_path / "f.png"
    fs.atomic_save_image(arr, path)

    with Image.open(path) as loaded:
        assert loaded.size == (6, 4)
        assert loaded.getpixel((2, 1)) == (255, 0, 0, 255)


def test_atomic_save_numpy_gray(tmp_path):
    arr = np.full((3, 3, 1), 200, dtype=np.uint8)
    path = tmp_path / "g.png"
    fs.atomic_save_image(arr, path)
    with Image.open(path) as loaded:
        assert loaded.mode == 'L'
        assert loaded.getpixel((1, 1)) == 200


def test_atomic_save_bad_format_cleans_up(tmp_path):
    path = tmp_path / "sig.unknownext"
    with pytest.raises(RuntimeError, match="atomically"):
        fs.atomic_save_image(Image.new('RGBA', (2, 2)), path)
    assert not list(tmp_path.iterdir())


def test_load_yaml(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("a: 1\nb: [1, 2]\n", encoding='utf-8')
    assert fs.load_yaml(path) == {"a": 1, "b": [1, 2]}


def test_load_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        fs.load_yaml(tmp_path / "missing.yaml")


def test_load_yaml_malformed(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("a: [1, 2\n", encoding='utf-8')
    with pytest.raises(yaml.YAMLError):
        fs.load_yaml(path)
