"""Shared types for pixelcraft: GridSize, PatternState, TextPlacement, Command."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

EMPTY = ''  # empty-cell marker, never a valid colour

MIN_GRID_SIZE = 1
MAX_GRID_SIZE = 100

DEFAULT_GRID_SIZE = 20
DEFAULT_PALETTE = ('#000000', '#ffffff', '#ff0000', '#3b82f6', '#10b981', '#f59e0b', '#8b5cf6')
DEFAULT_COLOUR = '#000000'

Grid = list[list[str]]
Snapshot = tuple[tuple[str, ...], ...]


class Tool(enum.Enum):
    """Active editing tool."""

    BRUSH = 'brush'
    EYEDROPPER = 'eyedropper'
    PAN = 'pan'
    TEXT = 'text'


class StrokeState(enum.Enum):
    """Paint-drag session state. One history commit per IDLE -> STROKING -> IDLE cycle."""

    IDLE = 'idle'
    STROKING = 'stroking'


@dataclass(frozen=True)
class GridSize:
    width: int
    height: int

    def as_dict(self) -> dict[str, int]:
        return {'width': self.width, 'height': self.height}


@dataclass
class PatternState:
    """The (grid, size, palette) bundle exchanged with the codec and the storage slot."""

    grid: Grid
    grid_size: GridSize
    palette: list[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))


@dataclass
class TextPlacement:
    """Staged, uncommitted text. Nothing touches the grid until it is confirmed."""

    content: str = ''
    row: int = 0  # top edge, in cells
    col: int = 0  # anchor column, in cells
    scale: int = 1  # 1..3, each step is 8px of font height
    alignment: str = 'left'  # left | center | right
    colour: str = DEFAULT_COLOUR


class Command:
    """A self-registering CLI subcommand.

    Usage in a command module:

        command = Command(name='render', help='Render a document to PNG')

        @command.arguments
        def arguments(parser):
            parser.add_argument('doc')

        @command.run
        def run(args):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None
        self._args_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def arguments(self, fn: Callable) -> Callable:
        """Decorator to register the argparse configuration function."""
        self._args_fn = fn
        return fn

    def configure(self, parser: Any) -> None:
        if self._args_fn is not None:
            self._args_fn(parser)

    def execute(self, args: Any) -> int:
        """Execute the command's run function. Returns the exit code."""
        if self._run_fn is None:
            raise RuntimeError(f'Command {self.name} has no run function')
        result = self._run_fn(args)
        return 0 if result is None else int(result)
