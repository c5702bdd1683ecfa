"""Command line interface for the watermark engine"""

import argparse
import sys
from pathlib import Path

from .canvas import CanvasContext
from .compositor import compose_watermark, compute_bounds, watermark_dimensions
from .errors import WatermarkError
from .io import decode_bitmap, load_image, save_image
from .logger import log, setup_logger
from .models import PRESET_POSITIONS, Dimensions
from .position import resolve_preset_position
from .settings_loader import load_watermark_settings


class CLI:
    """Command Line Interface for watermark compositing"""

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="manga-watermark",
            description="Apply text or image watermarks to manga pages",
        )
        self.parser.add_argument('--log-level', default=None, help='Logging level (default from settings)')
        self.subparsers = self.parser.add_subparsers(dest='command', help='Available commands')

        self._setup_parsers()

    def _setup_parsers(self):
        """Setup argument parsers for each command"""

        # apply
        apply_parser = self.subparsers.add_parser(
            'apply',
            help='Composite a watermark onto an image'
        )
        apply_parser.add_argument('image', help='Path to the input image')
        apply_parser.add_argument('--settings', required=True, help='Watermark settings file (YAML or JSON)')
        apply_parser.add_argument('--output', required=True, help='Path of the PNG to write')

        # bounds
        bounds_parser = self.subparsers.add_parser(
            'bounds',
            help='Print the watermark hit-test rectangle for an image'
        )
        bounds_parser.add_argument('image', help='Path to the input image')
        bounds_parser.add_argument('--settings', required=True, help='Watermark settings file (YAML or JSON)')

        # positions
        positions_parser = self.subparsers.add_parser(
            'positions',
            help='Print the placement of every preset position'
        )
        positions_parser.add_argument('canvas_width', type=float)
        positions_parser.add_argument('canvas_height', type=float)
        positions_parser.add_argument('watermark_width', type=float)
        positions_parser.add_argument('watermark_height', type=float)

    def run(self, argv=None) -> int:
        """Run the CLI"""
        args = self.parser.parse_args(argv)
        setup_logger(level=args.log_level)

        if not args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        command_method = getattr(self, f'cmd_{args.command}', None)
        if command_method is None:
            print(f"Unknown command: {args.command}")
            return 1

        try:
            command_method(args)
        except (WatermarkError, OSError) as e:
            log.error(str(e))
            return 1
        return 0

    def cmd_apply(self, args):
        """Composite a watermark and save the result"""
        settings = load_watermark_settings(args.settings)
        image = load_image(args.image)
        result = compose_watermark(image, settings)
        output = save_image(result, Path(args.output))
        print(f"Watermarked: {args.image} -> {output}")

    def cmd_bounds(self, args):
        """Print the resolved watermark rectangle"""
        settings = load_watermark_settings(args.settings)
        image = load_image(args.image)
        ctx = CanvasContext(image)

        watermark_image = None
        if settings.config.type == "image" and settings.config.image_data:
            watermark_image = decode_bitmap(settings.config.image_data)

        size = watermark_dimensions(ctx, settings, watermark_image)
        if size is None:
            print("No watermark bitmap configured")
            return
        bounds = compute_bounds(settings, ctx.size, size)
        print(f"x={bounds.x:g} y={bounds.y:g} width={bounds.width:g} height={bounds.height:g}")

    def cmd_positions(self, args):
        """Print every preset placement"""
        canvas = Dimensions(args.canvas_width, args.canvas_height)
        watermark = Dimensions(args.watermark_width, args.watermark_height)
        for preset in PRESET_POSITIONS:
            point = resolve_preset_position(preset, canvas, watermark)
            print(f"{preset.value:<14} x={point.x:g} y={point.y:g}")


def main():
    """Main entry point"""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
