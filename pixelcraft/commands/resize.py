"""Resize a pattern document.

Keeps the overlapping top-left block of cells; new cells are empty.

Example:
    pixelcraft resize pattern.json bigger.json --width 48 --height 48
"""

import sys

from pixelcraft.core.codec import write_document
from pixelcraft.core.types import Command
from pixelcraft.engine import PatternEngine

command = Command(name='resize', help='Resize a pattern document, keeping the top-left block.')


@command.arguments
def arguments(parser) -> None:
    parser.add_argument('doc', help='Pattern JSON document')
    parser.add_argument('out', help='Output JSON path')
    parser.add_argument('-W', '--width', type=int, required=True, help='New width (1-100)')
    parser.add_argument('-H', '--height', type=int, required=True, help='New height (1-100)')


@command.run
def run(args) -> None:
    engine = PatternEngine()
    engine.open_document(args.doc)
    engine.resize(args.width, args.height)
    path = write_document(engine.state(), args.out)
    print(f'pixelcraft: wrote {path} ({args.width}×{args.height})', file=sys.stderr)
