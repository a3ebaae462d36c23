"""Signature capture surface: gesture tracking and the host-facing view."""

from .input_tracker import MIN_SAMPLE_DISTANCE, InputTracker, StrokeState
from .view import SignatureView, SignatureViewDelegate

__all__ = [
    'InputTracker',
    'MIN_SAMPLE_DISTANCE',
    'SignatureView',
    'SignatureViewDelegate',
    'StrokeState',
]
