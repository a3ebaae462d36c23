"""Stroke color parsing and conversion.

Colors travel through configuration as either:
    - Hex strings: "#RGB", "#RRGGBB", "#RRGGBBAA" (leading '#' optional)
    - Sequences of 3 or 4 integers in [0, 255]

Internally a color is an RGBA tuple of ints in [0, 255]. The rasterizer
works on float32 RGBA in [0, 1]; conversion happens at the compositing
boundary via with_alpha().

Alpha handling mirrors a "with alpha component" override: the configured
stroke alpha replaces the color's own alpha channel, it does not multiply it.
"""

from typing import Sequence, Tuple, Union

import numpy as np

RGBA = Tuple[int, int, int, int]
ColorLike = Union[str, Sequence[int]]

BLACK: RGBA = (0, 0, 0, 255)


def _hex_to_rgba(hexstr: str) -> RGBA:
    s = hexstr.strip().lstrip('#')
    if len(s) == 3:
        s = ''.join(ch * 2 for ch in s)
    if len(s) == 6:
        s += 'ff'
    if len(s) != 8:
        raise ValueError(f"Invalid hex color: {hexstr!r}")
    try:
        return tuple(int(s[i:i + 2], 16) for i in range(0, 8, 2))  # type: ignore[return-value]
    except ValueError as e:
        raise ValueError(f"Invalid hex color: {hexstr!r}") from e


def parse_color(value: ColorLike) -> RGBA:
    """Normalize a hex string or 3/4-int sequence into an RGBA tuple.

    Parameters
    ----------
    value : str or sequence of int
        "#000", "#1a2b3c", "#1a2b3cff", (r, g, b) or (r, g, b, a)

    Returns
    -------
    RGBA
        (r, g, b, a) ints in [0, 255]

    Raises
    ------
    ValueError
        On malformed strings, wrong arity or out-of-range components
    """
    if isinstance(value, str):
        return _hex_to_rgba(value)

    comps = [int(c) for c in value]
    if len(comps) == 3:
        comps.append(255)
    if len(comps) != 4:
        raise ValueError(f"Color must have 3 or 4 components, got {len(comps)}")
    for c in comps:
        if not 0 <= c <= 255:
            raise ValueError(f"Color component {c} outside [0, 255]")
    return tuple(comps)  # type: ignore[return-value]


def to_hex(color: RGBA) -> str:
    return '#' + ''.join(f"{c:02x}" for c in color)


def with_alpha(color: RGBA, alpha: float) -> np.ndarray:
    """Unit-range RGBA with the alpha channel replaced.

    Returns
    -------
    np.ndarray
        float32 (4,) in [0, 1]
    """
    rgba = np.asarray(color, dtype=np.float32) / 255.0
    rgba[3] = np.float32(alpha)
    return rgba
