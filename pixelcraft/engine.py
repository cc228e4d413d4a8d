"""PatternEngine: the command/query surface over grid, history and codec.

One engine instance per open pattern. Callers (a UI dispatcher, the CLI,
tests) drive it synchronously, one call at a time.

History rules:
  - resize, replace_grid, clear, image import and text confirm commit once.
  - set_cell/paint outside a stroke commit once per changed cell.
  - begin_stroke() ... end_stroke() commits once, and only if the grid changed.
  - document and storage imports reset history to the imported grid.
  - any wholesale operation first closes an open stroke.
"""

import logging
from pathlib import Path

from PIL import Image

from pixelcraft.core import codec
from pixelcraft.core.env import Settings, load_settings
from pixelcraft.core.grid import GridStore, check_dimension, normalize_grid
from pixelcraft.core.history import HistoryManager
from pixelcraft.core.storage import LocalStore
from pixelcraft.core.text import ALIGNMENTS, clamp_scale, stamp_text
from pixelcraft.core.types import (
    DEFAULT_GRID_SIZE,
    Grid,
    GridSize,
    PatternState,
    Snapshot,
    StrokeState,
    TextPlacement,
    Tool,
)

logger = logging.getLogger(__name__)


class PatternEngine:
    def __init__(
        self,
        width: int = DEFAULT_GRID_SIZE,
        height: int = DEFAULT_GRID_SIZE,
        palette: list[str] | None = None,
        local_store: LocalStore | None = None,
        cell_size: int = codec.DEFAULT_CELL_SIZE,
        history_limit: int | None = None,
    ):
        self.store = GridStore(width, height, palette)
        self.history = HistoryManager(self.store.snapshot(), limit=history_limit)
        self.local_store = local_store
        self.cell_size = cell_size
        self.text: TextPlacement | None = None
        self._stroke_state = StrokeState.IDLE
        self._stroke_baseline: Snapshot | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> 'PatternEngine':
        settings = settings or load_settings()
        return cls(
            width=settings.grid_width,
            height=settings.grid_height,
            local_store=LocalStore(settings.store_dir),
            cell_size=settings.cell_size,
        )

    # --- Queries ---

    @property
    def grid(self) -> Grid:
        """A copy of the live grid."""
        return [list(row) for row in self.store.grid]

    @property
    def grid_size(self) -> GridSize:
        return self.store.grid_size

    @property
    def palette(self) -> list[str]:
        return self.store.palette

    @property
    def current_colour(self) -> str:
        return self.store.current_colour

    @property
    def tool(self) -> Tool:
        return self.store.tool

    @property
    def stroke_state(self) -> StrokeState:
        return self._stroke_state

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def cell(self, row: int, col: int) -> str | None:
        return self.store.cell(row, col)

    def state(self) -> PatternState:
        return PatternState(grid=self.grid, grid_size=self.grid_size, palette=self.palette)

    # --- Internal ---

    def _commit(self) -> None:
        self.history.commit(self.store.snapshot())

    def _close_stroke(self, reason: str) -> None:
        if self._stroke_state is StrokeState.STROKING:
            logger.debug('closing open stroke before %s', reason)
            self.end_stroke()

    def _adopt(self, state: PatternState) -> None:
        """Apply an imported state and restart history from it."""
        self.store.replace_grid(state.grid)
        self.store.set_palette(state.palette)
        self.history.reset(self.store.snapshot())

    # --- Wholesale operations ---

    def resize(self, width: int, height: int) -> None:
        check_dimension(width, 'width')
        check_dimension(height, 'height')
        self._close_stroke('resize')
        self.store.resize(width, height)
        self._commit()

    def replace_grid(self, grid: Grid) -> None:
        new_grid = normalize_grid(grid)
        self._close_stroke('replace')
        self.store.replace_grid(new_grid)
        self._commit()

    def clear(self) -> None:
        self._close_stroke('clear')
        self.store.clear()
        self._commit()

    # --- Cell operations ---

    def set_cell(self, row: int, col: int, colour: str) -> bool:
        """Set a cell. Commits immediately unless a stroke is open."""
        changed = self.store.set_cell(row, col, colour)
        if changed and self._stroke_state is StrokeState.IDLE:
            self._commit()
        return changed

    def paint(self, row: int, col: int) -> bool:
        return self.set_cell(row, col, self.store.current_colour)

    def erase(self, row: int, col: int) -> bool:
        return self.set_cell(row, col, '')

    def pick_colour(self, row: int, col: int) -> str | None:
        return self.store.pick_colour(row, col)

    def apply_tool(self, row: int, col: int) -> None:
        """Dispatch a pointer hit to the active tool."""
        tool = self.store.tool
        if tool is Tool.BRUSH:
            self.paint(row, col)
        elif tool is Tool.EYEDROPPER:
            self.pick_colour(row, col)
        elif tool is Tool.TEXT and self.text is not None:
            self.update_text(row=row, col=col)

    # --- Strokes ---

    def begin_stroke(self) -> None:
        """Start a paint drag. A second call while stroking is ignored."""
        if self._stroke_state is StrokeState.STROKING:
            return
        self._stroke_baseline = self.store.snapshot()
        self._stroke_state = StrokeState.STROKING

    def end_stroke(self) -> bool:
        """Finish a paint drag. Returns True if the stroke was committed."""
        if self._stroke_state is StrokeState.IDLE:
            return False
        self._stroke_state = StrokeState.IDLE
        snapshot = self.store.snapshot()
        changed = snapshot != self._stroke_baseline
        self._stroke_baseline = None
        if changed:
            self.history.commit(snapshot)
        return changed

    # --- History ---

    def undo(self) -> bool:
        self._close_stroke('undo')
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self.store.restore(snapshot)
        return True

    def redo(self) -> bool:
        self._close_stroke('redo')
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self.store.restore(snapshot)
        return True

    # --- Palette and tools ---

    def set_current_colour(self, colour: str) -> None:
        self.store.set_current_colour(colour)

    def add_palette_colour(self, colour: str) -> bool:
        return self.store.add_palette_colour(colour)

    def remove_palette_colour(self, colour: str) -> bool:
        return self.store.remove_palette_colour(colour)

    def set_tool(self, tool: Tool | str) -> None:
        tool = Tool(tool)
        if tool is Tool.TEXT:
            self.begin_text()
            return
        self.text = None
        self.store.tool = tool

    # --- Text placement ---

    def begin_text(self, row: int = 0, col: int = 0) -> TextPlacement:
        self.text = TextPlacement(row=row, col=col, colour=self.store.current_colour)
        self.store.tool = Tool.TEXT
        return self.text

    def update_text(
        self,
        content: str | None = None,
        row: int | None = None,
        col: int | None = None,
        scale: int | None = None,
        alignment: str | None = None,
    ) -> TextPlacement | None:
        """Edit the staged text. Nothing is painted until confirm_text()."""
        if self.text is None:
            return None
        if alignment is not None and alignment not in ALIGNMENTS:
            raise ValueError(f'Unknown alignment {alignment!r}, expected one of {", ".join(ALIGNMENTS)}')
        if content is not None:
            self.text.content = content
        if row is not None:
            self.text.row = int(row)
        if col is not None:
            self.text.col = int(col)
        if scale is not None:
            self.text.scale = clamp_scale(scale)
        if alignment is not None:
            self.text.alignment = alignment
        return self.text

    def confirm_text(self) -> bool:
        """Paint the staged text as one grid replace and one history entry.

        Content that paints nothing (empty, blank, or entirely off the grid)
        confirms nothing and leaves the placement staged.
        """
        if self.text is None or not self.text.content:
            return False
        stamped = stamp_text(self.store.grid, self.text)
        if stamped == self.store.grid:
            return False
        self._close_stroke('text')
        self.store.replace_grid(stamped)
        self._commit()
        self.text = None
        self.store.tool = Tool.BRUSH
        return True

    def cancel_text(self) -> None:
        self.text = None
        self.store.tool = Tool.BRUSH

    # --- Import / export ---

    def export_document(self, timestamp: bool = True) -> dict:
        return codec.to_document(self.state(), timestamp=timestamp)

    def import_document(self, doc: dict) -> None:
        """Replace the pattern with a document's content. History restarts."""
        state = codec.from_document(doc)
        self._close_stroke('import')
        self._adopt(state)
        logger.debug('imported document %dx%d', state.grid_size.width, state.grid_size.height)

    def open_document(self, path: str | Path) -> None:
        state = codec.read_document(path)
        self._close_stroke('import')
        self._adopt(state)

    def save_document(self, directory: str | Path) -> Path:
        """Write a date-stamped JSON export into directory."""
        path = Path(directory) / codec.export_filename('json')
        return codec.write_document(self.state(), path)

    def import_image(self, image: Image.Image) -> None:
        """Map a picture onto the current grid size and palette."""
        grid = codec.from_image(image, self.grid_size, self.palette)
        self._close_stroke('import')
        self.store.replace_grid(grid)
        self._commit()

    def seed_palette_from_image(self, image: Image.Image, n_colours: int = 8) -> list[str]:
        """Add an image's dominant colours to the palette. Returns the colours added."""
        added = []
        for colour in codec.extract_palette(image, n_colours):
            if self.store.add_palette_colour(colour):
                added.append(colour)
        return added

    def render(self, show_grid_lines: bool = False, cell_size: int | None = None) -> Image.Image:
        return codec.to_raster(self.state(), show_grid_lines, cell_size or self.cell_size)

    def export_png(self, directory: str | Path, show_grid_lines: bool = False) -> Path:
        path = Path(directory) / codec.export_filename('png', show_grid_lines)
        self.render(show_grid_lines).save(path)
        return path

    # --- Storage slot ---

    def save_to_store(self) -> tuple[bool, str | None]:
        if self.local_store is None:
            return False, 'no storage configured'
        return self.local_store.save(self.state())

    def load_from_store(self) -> bool:
        """Best effort. A missing or broken slot leaves the engine untouched."""
        if self.local_store is None:
            return False
        state = self.local_store.load()
        if state is None:
            return False
        self._close_stroke('import')
        self._adopt(state)
        return True
