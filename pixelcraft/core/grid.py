"""GridStore: the live grid, the palette, the current colour and tool.

GridStore never records history. Mutations report whether anything changed
and the engine decides when to commit a snapshot.
"""

import logging

from pixelcraft.core.errors import InvalidDimension, InvalidPalette
from pixelcraft.core.palette import normalize_colour
from pixelcraft.core.types import (
    DEFAULT_COLOUR,
    DEFAULT_GRID_SIZE,
    DEFAULT_PALETTE,
    EMPTY,
    MAX_GRID_SIZE,
    MIN_GRID_SIZE,
    Grid,
    GridSize,
    Snapshot,
    Tool,
)

logger = logging.getLogger(__name__)


def check_dimension(value: object, name: str = 'dimension') -> int:
    """Return value if it is an int in [1, 100]. Raises InvalidDimension."""
    # bool is an int subclass; True is not a width
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimension(f'Grid {name} must be an integer, got {value!r}')
    if not MIN_GRID_SIZE <= value <= MAX_GRID_SIZE:
        raise InvalidDimension(f'Grid {name} must be in [{MIN_GRID_SIZE}, {MAX_GRID_SIZE}], got {value}')
    return value


def empty_grid(width: int, height: int) -> Grid:
    return [[EMPTY] * width for _ in range(height)]


def normalize_cell(value: str) -> str:
    return EMPTY if value == EMPTY else normalize_colour(value)


def normalize_grid(rows) -> Grid:
    """Validate a grid's shape and cells, returning a fresh canonical copy."""
    rows = list(rows)
    check_dimension(len(rows), 'height')
    first = list(rows[0])
    width = check_dimension(len(first), 'width')
    grid = []
    for r, row in enumerate(rows):
        row = list(row)
        if len(row) != width:
            raise InvalidDimension(f'Row {r} has {len(row)} cells, expected {width}')
        grid.append([normalize_cell(c) for c in row])
    return grid


class GridStore:
    """Owns the grid buffer and palette."""

    def __init__(
        self,
        width: int = DEFAULT_GRID_SIZE,
        height: int = DEFAULT_GRID_SIZE,
        palette: list[str] | None = None,
        current_colour: str = DEFAULT_COLOUR,
    ):
        check_dimension(width, 'width')
        check_dimension(height, 'height')
        self._grid: Grid = empty_grid(width, height)
        colours = DEFAULT_PALETTE if palette is None else palette
        self._palette: list[str] = _unique([normalize_colour(c) for c in colours])
        if not self._palette:
            raise InvalidPalette('Palette must contain at least one colour')
        self.current_colour = normalize_colour(current_colour)
        self.tool = Tool.BRUSH

    @property
    def grid(self) -> Grid:
        """The live grid. Treat as read-only; mutate through the store."""
        return self._grid

    @property
    def width(self) -> int:
        return len(self._grid[0])

    @property
    def height(self) -> int:
        return len(self._grid)

    @property
    def grid_size(self) -> GridSize:
        return GridSize(self.width, self.height)

    @property
    def palette(self) -> list[str]:
        return list(self._palette)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cell(self, row: int, col: int) -> str | None:
        if not self.in_bounds(row, col):
            return None
        return self._grid[row][col]

    # --- Wholesale replacement ---

    def resize(self, width: int, height: int) -> None:
        """Resize, keeping the overlapping top-left block."""
        check_dimension(width, 'width')
        check_dimension(height, 'height')
        new_grid = empty_grid(width, height)
        for row in range(min(height, self.height)):
            for col in range(min(width, self.width)):
                new_grid[row][col] = self._grid[row][col]
        self._grid = new_grid
        logger.debug('resized grid to %dx%d', width, height)

    def replace_grid(self, grid) -> None:
        """Replace the whole grid. The grid size follows the new grid."""
        self._grid = normalize_grid(grid)

    def clear(self) -> None:
        self._grid = empty_grid(self.width, self.height)

    def snapshot(self) -> Snapshot:
        return tuple(tuple(row) for row in self._grid)

    def restore(self, snapshot: Snapshot) -> None:
        self._grid = [list(row) for row in snapshot]

    # --- Cell access ---

    def set_cell(self, row: int, col: int, colour: str) -> bool:
        """Set one cell. Out-of-bounds is a silent no-op. Returns True if the cell changed."""
        if not self.in_bounds(row, col):
            return False
        value = normalize_cell(colour)
        if self._grid[row][col] == value:
            return False
        self._grid[row][col] = value
        return True

    def pick_colour(self, row: int, col: int) -> str | None:
        """Eyedropper: adopt a non-empty cell's colour and switch back to the brush."""
        value = self.cell(row, col)
        if not value:
            return None
        self.current_colour = value
        self.tool = Tool.BRUSH
        return value

    # --- Palette ---

    def set_current_colour(self, colour: str) -> None:
        self.current_colour = normalize_colour(colour)

    def set_palette(self, palette: list[str]) -> None:
        colours = _unique([normalize_colour(c) for c in palette])
        if not colours:
            raise InvalidPalette('Palette must contain at least one colour')
        self._palette = colours

    def add_palette_colour(self, colour: str) -> bool:
        value = normalize_colour(colour)
        if value in self._palette:
            return False
        self._palette.append(value)
        return True

    def remove_palette_colour(self, colour: str) -> bool:
        """Remove a colour. The last remaining colour is never removed."""
        value = normalize_colour(colour)
        if len(self._palette) <= 1 or value not in self._palette:
            return False
        self._palette.remove(value)
        if self.current_colour == value:
            self.current_colour = self._palette[0]
        return True


def _unique(colours: list[str]) -> list[str]:
    return list(dict.fromkeys(colours))
