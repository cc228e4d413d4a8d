"""Render a pattern document to PNG.

Each cell becomes a solid square of --cell-size pixels (default
PIXELCRAFT_CELL_SIZE, 20). Empty cells are white. --grid overlays 1px
#dddddd grid lines.

If OUT is an existing directory the file is named
pixel_craft_<date>.png (or pixel_craft_<date>_with_grid.png).

Example:
    pixelcraft render pattern.json pattern.png
    pixelcraft render pattern.json ./exports --grid
"""

import argparse
import sys
from pathlib import Path

from pixelcraft.core.types import Command
from pixelcraft.engine import PatternEngine

command = Command(name='render', help='Render a pattern document to PNG.')


def _cell_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'expected an integer, got {value!r}') from None
    if size < 1:
        raise argparse.ArgumentTypeError(f'must be at least 1, got {size}')
    return size


@command.arguments
def arguments(parser) -> None:
    parser.add_argument('doc', help='Pattern JSON document')
    parser.add_argument('out', help='Output PNG path or directory')
    parser.add_argument('-g', '--grid', action='store_true', help='Draw grid lines')
    parser.add_argument('-c', '--cell-size', type=_cell_size, default=None, help='Pixels per cell (1 or more)')


@command.run
def run(args) -> None:
    cell_size = args.cell_size if args.cell_size is not None else args.settings.cell_size
    engine = PatternEngine(cell_size=cell_size)
    engine.open_document(args.doc)

    out = Path(args.out)
    if out.is_dir():
        path = engine.export_png(out, show_grid_lines=args.grid)
    else:
        engine.render(show_grid_lines=args.grid).save(out)
        path = out
    print(f'pixelcraft: wrote {path}', file=sys.stderr)
