"""Conversion between pattern state and external representations.

Document (JSON):
    {"grid": [["#rrggbb" | "", ...], ...],
     "gridSize": {"width": W, "height": H},
     "palette": ["#rrggbb", ...],
     "version": "1.0.0",
     "createdAt": "2026-01-01T00:00:00+00:00"}

Raster (PNG): one solid square of cell_size px per cell, white where cells
are empty, optional 1px grid lines drawn over the fills.

Image import: centre-crop a photo to the grid's aspect ratio, box-average
the crop down to one pixel per cell, and snap every pixel to the nearest
palette colour in Lab space. The same image, size and palette always give
the same grid.
"""

import datetime as dt
import io
import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from pixelcraft.core.errors import (
    ImageDecodeError,
    InvalidColour,
    InvalidPalette,
    MalformedDocument,
)
from pixelcraft.core.grid import check_dimension, normalize_cell
from pixelcraft.core.palette import hex_to_rgb, normalize_colour, quantize_pixels, rgb_to_hex
from pixelcraft.core.types import Grid, GridSize, PatternState

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = '1.0.0'
REQUIRED_FIELDS = ('grid', 'gridSize', 'palette')

DEFAULT_CELL_SIZE = 20
BACKGROUND = '#ffffff'
GRID_LINE = '#dddddd'

FILENAME_PREFIX = 'pixel_craft'


# --- Document ---


def to_document(state: PatternState, timestamp: bool = True, now: dt.datetime | None = None) -> dict[str, Any]:
    """Serialize state. Pass timestamp=False for the storage-slot form."""
    doc: dict[str, Any] = {
        'grid': [list(row) for row in state.grid],
        'gridSize': state.grid_size.as_dict(),
        'palette': list(state.palette),
        'version': DOCUMENT_VERSION,
    }
    if timestamp:
        doc['createdAt'] = (now or dt.datetime.now(dt.timezone.utc)).isoformat()
    return doc


def from_document(doc: Any) -> PatternState:
    """Validate a document and return the state it describes.

    Raises MalformedDocument for missing or inconsistent content and
    InvalidDimension for sizes outside [1, 100]. Nothing is applied here;
    the caller adopts the returned state.
    """
    if not isinstance(doc, dict):
        raise MalformedDocument(f'Document must be an object, got {type(doc).__name__}')
    missing = [f for f in REQUIRED_FIELDS if f not in doc or doc[f] is None]
    if missing:
        raise MalformedDocument(f'Document is missing required field(s): {", ".join(missing)}')

    size = doc['gridSize']
    if not isinstance(size, dict) or 'width' not in size or 'height' not in size:
        raise MalformedDocument('gridSize must be an object with width and height')
    grid_size = GridSize(check_dimension(size['width'], 'width'), check_dimension(size['height'], 'height'))

    grid = _read_grid(doc['grid'], grid_size)
    palette = _read_palette(doc['palette'])
    return PatternState(grid=grid, grid_size=grid_size, palette=palette)


def _read_grid(rows: Any, grid_size: GridSize) -> Grid:
    if not isinstance(rows, list):
        raise MalformedDocument('grid must be a list of rows')
    if len(rows) != grid_size.height:
        raise MalformedDocument(f'grid has {len(rows)} rows but gridSize.height is {grid_size.height}')
    grid = []
    for r, row in enumerate(rows):
        if not isinstance(row, list):
            raise MalformedDocument(f'grid row {r} is not a list')
        if len(row) != grid_size.width:
            raise MalformedDocument(f'grid row {r} has {len(row)} cells but gridSize.width is {grid_size.width}')
        try:
            grid.append([normalize_cell(cell) for cell in row])
        except InvalidColour as e:
            raise MalformedDocument(f'grid row {r}: {e}') from e
    return grid


def _read_palette(entries: Any) -> list[str]:
    if not isinstance(entries, list) or not entries:
        raise MalformedDocument('palette must be a non-empty list of colours')
    try:
        colours = [normalize_colour(c) for c in entries]
    except InvalidColour as e:
        raise MalformedDocument(f'palette: {e}') from e
    return list(dict.fromkeys(colours))


def dumps_document(state: PatternState, timestamp: bool = True) -> str:
    return json.dumps(to_document(state, timestamp=timestamp), indent=2)


def loads_document(text: str | bytes) -> PatternState:
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedDocument(f'Document is not valid JSON: {e}') from e
    return from_document(doc)


def write_document(state: PatternState, path: str | Path, timestamp: bool = True) -> Path:
    path = Path(path)
    path.write_text(dumps_document(state, timestamp=timestamp), encoding='utf-8')
    logger.debug('wrote document %s', path)
    return path


def read_document(path: str | Path) -> PatternState:
    return loads_document(Path(path).read_text(encoding='utf-8'))


def export_filename(kind: str, show_grid_lines: bool = False, day: dt.date | None = None) -> str:
    """Date-stamped export name, e.g. pixel_craft_2026-10-19_with_grid.png."""
    if kind not in ('json', 'png'):
        raise ValueError(f'Unknown export kind: {kind}')
    stamp = (day or dt.date.today()).isoformat()
    suffix = '_with_grid' if kind == 'png' and show_grid_lines else ''
    return f'{FILENAME_PREFIX}_{stamp}{suffix}.{kind}'


# --- Raster ---


def to_raster(state: PatternState, show_grid_lines: bool = False, cell_size: int = DEFAULT_CELL_SIZE) -> Image.Image:
    """Render the grid as a flat RGB image."""
    if cell_size < 1:
        raise ValueError(f'cell_size must be positive, got {cell_size}')
    width, height = state.grid_size.width, state.grid_size.height
    arr = np.empty((height * cell_size, width * cell_size, 3), dtype=np.uint8)
    arr[:] = hex_to_rgb(BACKGROUND)

    rgb_cache: dict[str, tuple[int, int, int]] = {}
    for r, row in enumerate(state.grid):
        y = r * cell_size
        for c, colour in enumerate(row):
            if not colour:
                continue
            if colour not in rgb_cache:
                rgb_cache[colour] = hex_to_rgb(colour)
            x = c * cell_size
            arr[y : y + cell_size, x : x + cell_size] = rgb_cache[colour]

    # Lines go on last so fills never cover them. The far edge is clamped inside the image.
    if show_grid_lines:
        line = hex_to_rgb(GRID_LINE)
        h_px, w_px = arr.shape[:2]
        for c in range(width + 1):
            arr[:, min(c * cell_size, w_px - 1)] = line
        for r in range(height + 1):
            arr[min(r * cell_size, h_px - 1), :] = line

    return Image.fromarray(arr)


# --- Image import ---


def load_image(source: str | Path | bytes) -> Image.Image:
    """Open and fully decode an image from a path or raw bytes."""
    try:
        fp = io.BytesIO(source) if isinstance(source, bytes) else source
        image = Image.open(fp)
        image.load()
        return image
    except Exception as e:
        raise ImageDecodeError(f'Failed to load image: {e}') from e


def flatten_image(image: Image.Image) -> Image.Image:
    """RGB copy with any transparency composited onto the raster background."""
    has_alpha = image.mode in ('RGBA', 'LA', 'PA') or (image.mode == 'P' and 'transparency' in image.info)
    if not has_alpha:
        return image.convert('RGB')
    rgba = image.convert('RGBA')
    background = Image.new('RGBA', rgba.size, hex_to_rgb(BACKGROUND) + (255,))
    return Image.alpha_composite(background, rgba).convert('RGB')


def crop_box(image_size: tuple[int, int], grid_size: GridSize) -> tuple[float, float, float, float]:
    """Centred crop box matching the grid's aspect ratio."""
    img_w, img_h = image_size
    image_ratio = img_w / img_h
    grid_ratio = grid_size.width / grid_size.height
    if image_ratio > grid_ratio:
        # Wider than the grid: trim left and right equally
        crop_w = img_h * grid_ratio
        left = (img_w - crop_w) / 2
        return (left, 0.0, left + crop_w, float(img_h))
    crop_h = img_w / grid_ratio
    top = (img_h - crop_h) / 2
    return (0.0, top, float(img_w), top + crop_h)


def from_image(image: Image.Image, grid_size: GridSize, palette: list[str]) -> Grid:
    """Convert a picture into a grid of palette colours."""
    if not palette:
        raise InvalidPalette('Image import needs at least one palette colour')
    width = check_dimension(grid_size.width, 'width')
    height = check_dimension(grid_size.height, 'height')
    colours = [normalize_colour(c) for c in palette]

    rgb = flatten_image(image)
    box = crop_box(rgb.size, grid_size)
    # BOX averages exactly each cell's footprint; wider kernels would read past the crop
    sampled = rgb.resize((width, height), Image.Resampling.BOX, box=box)

    indices = quantize_pixels(np.asarray(sampled).reshape(-1, 3), colours)
    cells = [colours[int(i)] for i in indices]
    logger.debug('imported %dx%d image into %dx%d grid', rgb.width, rgb.height, width, height)
    return [cells[r * width : (r + 1) * width] for r in range(height)]


def extract_palette(image: Image.Image, n_colours: int = 8, n_samples: int = 5000) -> list[str]:
    """Dominant colours of an image via k-means, most common first.

    Samples up to n_samples pixels with a fixed seed, so results are stable
    for a given image.
    """
    if n_colours < 1:
        raise InvalidPalette(f'Need at least one colour, got {n_colours}')
    from sklearn.cluster import KMeans

    pixels = np.asarray(flatten_image(image)).reshape(-1, 3)
    if len(pixels) > n_samples:
        indices = np.random.default_rng(42).choice(len(pixels), n_samples, replace=False)
        pixels = pixels[indices]

    distinct = len(np.unique(pixels, axis=0))
    km = KMeans(n_clusters=min(n_colours, distinct), n_init=3, random_state=42)
    km.fit(pixels.astype(np.float64))
    centres = np.clip(np.rint(km.cluster_centers_), 0, 255).astype(int)
    counts = np.bincount(km.labels_, minlength=len(centres))

    order = np.argsort(-counts, kind='stable')
    colours = [rgb_to_hex(*centres[i]) for i in order]
    return list(dict.fromkeys(colours))
