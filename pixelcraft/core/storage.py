"""Local persistent storage: a single named slot holding the latest project.

The slot is a JSON document without a createdAt timestamp. Loading is best
effort: a missing or broken slot yields None and the caller keeps its
defaults. Saving reports failure instead of raising, so a full disk never
costs the live grid.
"""

import logging
from pathlib import Path

from pixelcraft.core.codec import dumps_document, loads_document
from pixelcraft.core.errors import PixelcraftError
from pixelcraft.core.types import PatternState

logger = logging.getLogger(__name__)

SLOT_NAME = 'pixelcraft_project'


class LocalStore:
    """Handles loading and saving the project slot."""

    def __init__(self, directory: str | Path, slot: str = SLOT_NAME):
        self.directory = Path(directory)
        self.slot = slot

    @property
    def path(self) -> Path:
        return self.directory / f'{self.slot}.json'

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> PatternState | None:
        if not self.path.is_file():
            return None
        try:
            state = loads_document(self.path.read_bytes())
        except (OSError, PixelcraftError) as e:
            logger.warning('Could not load %s: %s', self.path, e)
            return None
        logger.debug('loaded %s', self.path)
        return state

    def save(self, state: PatternState) -> tuple[bool, str | None]:
        """Write the slot. Returns (success, error message)."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write-then-rename so a failed write leaves the previous slot intact
            tmp = self.path.with_suffix('.json.tmp')
            tmp.write_text(dumps_document(state, timestamp=False), encoding='utf-8')
            tmp.replace(self.path)
        except OSError as e:
            logger.warning('Could not save %s: %s', self.path, e)
            return False, str(e)
        return True, None

    def delete(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
