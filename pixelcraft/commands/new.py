"""Write a blank pattern document.

Creates an all-empty grid with the default palette. Size defaults to
PIXELCRAFT_GRID_WIDTH x PIXELCRAFT_GRID_HEIGHT (20x20 if unset).

Example:
    pixelcraft new pattern.json --width 32 --height 24
"""

import sys

from pixelcraft.core.codec import write_document
from pixelcraft.core.types import Command
from pixelcraft.engine import PatternEngine

command = Command(name='new', help='Write a blank pattern document.')


@command.arguments
def arguments(parser) -> None:
    parser.add_argument('out', help='Output JSON path')
    parser.add_argument('-W', '--width', type=int, default=None, help='Grid width (1-100)')
    parser.add_argument('-H', '--height', type=int, default=None, help='Grid height (1-100)')


@command.run
def run(args) -> None:
    settings = args.settings
    engine = PatternEngine(
        width=args.width if args.width is not None else settings.grid_width,
        height=args.height if args.height is not None else settings.grid_height,
    )
    path = write_document(engine.state(), args.out)
    size = engine.grid_size
    print(f'pixelcraft: wrote {path} ({size.width}×{size.height})', file=sys.stderr)
