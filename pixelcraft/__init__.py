"""pixelcraft — pattern state engine for a grid-based pixel editor.

Example:
    from pixelcraft import PatternEngine

    engine = PatternEngine(width=16, height=16)
    engine.begin_stroke()
    engine.paint(0, 0)
    engine.paint(0, 1)
    engine.end_stroke()      # one history entry for the whole drag
    engine.undo()

For debug logging, enable with:

    import logging
    logging.basicConfig(level=logging.DEBUG)
"""

import logging

# Silent unless the host application configures logging
logging.getLogger('pixelcraft').addHandler(logging.NullHandler())

from pixelcraft.core.errors import (  # noqa: E402
    ImageDecodeError,
    InvalidColour,
    InvalidDimension,
    InvalidPalette,
    MalformedDocument,
    PixelcraftError,
)
from pixelcraft.core.types import GridSize, PatternState, StrokeState, TextPlacement, Tool  # noqa: E402
from pixelcraft.engine import PatternEngine  # noqa: E402

__all__ = [
    'GridSize',
    'ImageDecodeError',
    'InvalidColour',
    'InvalidDimension',
    'InvalidPalette',
    'MalformedDocument',
    'PatternEngine',
    'PatternState',
    'PixelcraftError',
    'StrokeState',
    'TextPlacement',
    'Tool',
]
