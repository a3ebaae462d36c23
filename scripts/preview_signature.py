#!/usr/bin/env python3
"""Signature replay preview tool for visual validation.

CLI tool that replays a recorded pointer event stream through a
SignatureView and writes the resulting rasters.

Usage:
    # Replay the shipped demo gesture with the default pad config
    python scripts/preview_signature.py

    # Custom pad config and style overrides
    python scripts/preview_signature.py \
        --gesture_file gestures.yaml \
        --config configs/signature_pad.v1.yaml \
        --stroke_width 3 --color "#1a237e" --alpha 0.9 \
        --output_dir outputs/preview

Outputs:
    - signature_full.png: full-size RGBA raster
    - signature_cropped.png: raster cropped to the ink bounds (if anything
      was drawn)
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from sigpad.signature_view import SignatureView
from sigpad.utils import fs, logging_config, validators

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay recorded pointer events into a signature raster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--gesture_file',
        type=str,
        default='configs/demo_gestures.v1.yaml',
        help='Path to gestures.v1 YAML file, default: configs/demo_gestures.v1.yaml'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='configs/signature_pad.v1.yaml',
        help='Path to signature_pad.v1 YAML, default: configs/signature_pad.v1.yaml'
    )

    # Style overrides
    parser.add_argument('--stroke_width', type=float, help='Stroke width ceiling (logical units)')
    parser.add_argument('--dot_size', type=float, help='Tap dot diameter (logical units)')
    parser.add_argument('--color', type=str, help='Stroke color, hex (e.g. "#000000")')
    parser.add_argument('--alpha', type=float, help='Stroke alpha [0,1]')

    # Output settings
    parser.add_argument(
        '--output_dir',
        type=str,
        default='outputs/preview_signature',
        help='Output directory, default: outputs/preview_signature'
    )
    parser.add_argument(
        '--prefix',
        type=str,
        default='signature',
        help='Output filename prefix, default: signature'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def replay(view: SignatureView, gestures: validators.GestureFileV1) -> int:
    """Feed events to the view in order; return the number of segments drawn."""
    handlers = {
        'begin': view.begin,
        'move': view.move,
        'end': view.end,
        'cancel': view.cancel,
        'tap': view.tap,
    }
    segments = 0
    for event in gestures.events:
        result = handlers[event.type]((event.x, event.y))
        if event.type == 'move' and result:
            segments += 1
    return segments


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = "DEBUG" if args.verbose else "INFO"
    logging_config.setup_logging(log_level=log_level, context={"app": "preview"})
    logging_config.install_excepthook()

    cfg = validators.load_signature_pad_config(Path(args.config))
    gestures = validators.load_gesture_file(Path(args.gesture_file))

    view = SignatureView.from_config(cfg)
    if args.stroke_width is not None:
        view.stroke_width = args.stroke_width
    if args.dot_size is not None:
        view.dot_size = args.dot_size
    if args.color is not None:
        view.stroke_color = args.color
    if args.alpha is not None:
        view.stroke_alpha = args.alpha
        if view.stroke_alpha != args.alpha:
            logger.warning(f"Alpha {args.alpha} outside [0,1], keeping {view.stroke_alpha}")

    output_dir = fs.ensure_dir(args.output_dir)
    logger.info(f"Output directory: {output_dir}")
    logger.info(f"Replaying {len(gestures.events)} event(s) from {args.gesture_file}")

    start_time = time.time()
    segments = replay(view, gestures)
    logger.info(f"Replay completed in {time.time() - start_time:.3f}s ({segments} segment(s))")

    full_path = output_dir / f"{args.prefix}_full.png"
    fs.atomic_save_image(view.current_raster_buffer(), full_path)
    logger.info(f"Saved: {full_path}")

    cropped = view.export_cropped_image()
    if cropped is None:
        logger.warning("Nothing signed; cropped image not written")
        return 1

    cropped_path = output_dir / f"{args.prefix}_cropped.png"
    fs.atomic_save_image(cropped, cropped_path)
    logger.info(f"Saved: {cropped_path} ({cropped.width}×{cropped.height} px)")
    return 0


if __name__ == '__main__':
    sys.exit(main())
