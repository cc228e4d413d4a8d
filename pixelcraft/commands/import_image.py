"""Convert a photo into a pattern document.

Centre-crops the image to the grid's aspect ratio, averages it down to one
pixel per cell and snaps every pixel to the nearest palette colour in
CIE Lab space. Identical inputs always produce an identical grid.

The grid size and palette come from --doc when given (its grid is
replaced), otherwise from the defaults. --width/--height resize first.
--extract N adds the image's N dominant colours (k-means) to the palette
before mapping.

Example:
    pixelcraft import-image photo.jpg pattern.json --width 40 --height 30
    pixelcraft import-image photo.jpg pattern.json --doc palette.json
    pixelcraft import-image photo.jpg pattern.json --extract 6
"""

import sys

from pixelcraft.core.codec import load_image, write_document
from pixelcraft.core.types import Command
from pixelcraft.engine import PatternEngine

command = Command(name='import-image', help='Convert a photo into a pattern document.')


@command.arguments
def arguments(parser) -> None:
    parser.add_argument('image', help='Any image Pillow can decode')
    parser.add_argument('out', help='Output JSON path')
    parser.add_argument('-d', '--doc', help='Document supplying grid size and palette')
    parser.add_argument('-W', '--width', type=int, default=None, help='Grid width (1-100)')
    parser.add_argument('-H', '--height', type=int, default=None, help='Grid height (1-100)')
    parser.add_argument('-x', '--extract', type=int, default=None, metavar='N', help='Add N dominant image colours')


@command.run
def run(args) -> None:
    settings = args.settings
    engine = PatternEngine(width=settings.grid_width, height=settings.grid_height)
    if args.doc:
        engine.open_document(args.doc)
    if args.width is not None or args.height is not None:
        size = engine.grid_size
        engine.resize(
            args.width if args.width is not None else size.width,
            args.height if args.height is not None else size.height,
        )

    image = load_image(args.image)
    if args.extract:
        added = engine.seed_palette_from_image(image, args.extract)
        print(f'pixelcraft: added {len(added)} colour(s) to the palette', file=sys.stderr)

    engine.import_image(image)
    path = write_document(engine.state(), args.out)
    size = engine.grid_size
    print(f'pixelcraft: wrote {path} ({size.width}×{size.height}, {len(engine.palette)} colours)', file=sys.stderr)
