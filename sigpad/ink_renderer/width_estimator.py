"""Velocity-driven stroke width estimation.

Width is simulated from pointer speed only (no pressure hardware): the
distance between consecutive samples stands in for velocity, and the new
width is an exponential blend of an inverse-distance sample with the
previous segment's width, bounded by the configured stroke width.

    min_value = min(stroke_width, (1/d)·STROKE_SCALE·DELTA + previous_width·(1-DELTA))
    new_width = max(stroke_width, min_value)

Constants:
    STROKE_SCALE = 50   empirical scale tied to typical touch sample density
    DELTA = 0.5         blend factor (50% new sample, 50% history)
"""


# Empirical fudge factor; changing it alters visual output non-obviously.
STROKE_SCALE = 50.0
DELTA = 0.5


class WidthEstimator:
    """Converts inter-sample distance into a smoothed segment width.

    Attributes
    ----------
    stroke_scale : float
        Inverse-distance gain, default STROKE_SCALE
    delta : float
        Weight of the new sample in the blend, default DELTA
    """

    def __init__(self, stroke_scale: float = STROKE_SCALE, delta: float = DELTA):
        if not 0.0 <= delta <= 1.0:
            raise ValueError(f"delta must be in [0, 1], got {delta}")
        self.stroke_scale = stroke_scale
        self.delta = delta

    def estimate(self, d: float, previous_width: float, stroke_width: float) -> float:
        """Width for a segment spanning distance d.

        Parameters
        ----------
        d : float
            Distance between previous and current sample (logical units, > 0)
        previous_width : float
            Width of the previous segment
        stroke_width : float
            Configured stroke width ceiling

        Returns
        -------
        float
            New segment width

        Raises
        ------
        ValueError
            If d <= 0 (callers short-circuit sub-threshold samples)
        """
        if d <= 0.0:
            raise ValueError(f"Sample distance must be positive, got {d}")

        sample = 1.0 / d * self.stroke_scale * self.delta + previous_width * (1.0 - self.delta)
        min_value = min(stroke_width, sample)
        return max(stroke_width, min_value)
