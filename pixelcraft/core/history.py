"""Linear undo/redo over immutable grid snapshots.

Snapshots live in a list with a cursor. Committing from the middle of the
list drops everything after the cursor: history is a line, not a tree.
"""

import logging

from pixelcraft.core.types import Snapshot

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, initial: Snapshot | None = None, limit: int | None = None):
        """
        Args:
            initial: first snapshot; history is empty until reset() otherwise
            limit: maximum snapshots kept (None = unbounded). Oldest go first.
        """
        if limit is not None and limit < 1:
            raise ValueError(f'History limit must be at least 1, got {limit}')
        self.limit = limit
        self._snapshots: list[Snapshot] = []
        self._cursor = -1
        if initial is not None:
            self.reset(initial)

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Snapshot | None:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def reset(self, snapshot: Snapshot) -> None:
        """Discard all history; the snapshot becomes the only entry."""
        self._snapshots = [snapshot]
        self._cursor = 0

    def commit(self, snapshot: Snapshot) -> None:
        del self._snapshots[self._cursor + 1 :]
        self._snapshots.append(snapshot)
        if self.limit is not None and len(self._snapshots) > self.limit:
            del self._snapshots[: len(self._snapshots) - self.limit]
        self._cursor = len(self._snapshots) - 1
        logger.debug('history commit %d/%d', self._cursor + 1, len(self._snapshots))

    def undo(self) -> Snapshot | None:
        """Step back. Returns the snapshot to adopt, or None if at the start."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> Snapshot | None:
        """Step forward. Returns the snapshot to adopt, or None if at the tail."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor]
