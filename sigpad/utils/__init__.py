"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Geometry: points, offsets, quadratic Bézier flattening, bboxes (geometry)
    - Stroke color parsing (color)
    - Config validation (validators)
    - Atomic I/O and YAML loading (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (ink_renderer, signature_view).

Convenience imports:
    from sigpad.utils import fs, geometry, validators
    from sigpad.utils.logging_config import setup_logging, get_logger
"""

from . import color
from . import fs
from . import geometry
from . import logging_config
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
