"""Rasterize staged text into grid cells.

Text is drawn with Pillow's built-in font at 8px per scale step, one font
pixel per cell. Pixels with more than half coverage become cells in the
text colour. Cells falling outside the grid are clipped.
"""

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from pixelcraft.core.types import Grid, TextPlacement

PIXELS_PER_SCALE = 8
MIN_SCALE = 1
MAX_SCALE = 3
ALIGNMENTS = ('left', 'center', 'right')


def clamp_scale(scale: int) -> int:
    return max(MIN_SCALE, min(MAX_SCALE, int(scale)))


def text_mask(content: str, scale: int = 1) -> np.ndarray:
    """Boolean (rows, cols) mask of inked pixels, cropped to the ink."""
    if not content:
        return np.zeros((0, 0), dtype=bool)
    font = ImageFont.load_default(size=PIXELS_PER_SCALE * clamp_scale(scale))
    _left, _top, right, bottom = font.getbbox(content)
    canvas = Image.new('L', (max(1, int(right)), max(1, int(bottom))), 0)
    ImageDraw.Draw(canvas).text((0, 0), content, fill=255, font=font)

    ink = canvas.point(lambda v: 255 if v > 128 else 0).getbbox()
    if ink is None:
        return np.zeros((0, 0), dtype=bool)
    return np.asarray(canvas.crop(ink)) > 128


def stamp_text(grid: Grid, placement: TextPlacement) -> Grid:
    """Return a copy of grid with the placement's text painted in."""
    new_grid = [list(row) for row in grid]
    mask = text_mask(placement.content, placement.scale)
    if mask.size == 0:
        return new_grid

    height, width = len(new_grid), len(new_grid[0])
    text_w = mask.shape[1]
    if placement.alignment == 'center':
        start_col = placement.col - text_w // 2
    elif placement.alignment == 'right':
        start_col = placement.col - text_w + 1
    else:
        start_col = placement.col

    for y, x in zip(*np.nonzero(mask)):
        row = placement.row + int(y)
        col = start_col + int(x)
        if 0 <= row < height and 0 <= col < width:
            new_grid[row][col] = placement.colour
    return new_grid
