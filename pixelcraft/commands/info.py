"""Summarise a pattern document: size, palette and colour census.

The census counts cells per colour (empty cells included) and flags
painted colours that are not in the palette.

Example:
    pixelcraft info pattern.json
    pixelcraft info pattern.json --json
"""

from pixelcraft.core.codec import read_document
from pixelcraft.core.report import format_json, format_text
from pixelcraft.core.types import Command

command = Command(name='info', help='Summarise a pattern document (size, palette, census).')


@command.arguments
def arguments(parser) -> None:
    parser.add_argument('doc', help='Pattern JSON document')
    parser.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')


@command.run
def run(args) -> None:
    state = read_document(args.doc)
    if args.json:
        print(format_json(state, source=args.doc))
    else:
        print(format_text(state, source=args.doc))
