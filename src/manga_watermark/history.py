"""Bounded undo/redo history of full surface snapshots."""

from typing import List, Tuple

import numpy as np

from .surface import RasterSurface

MAX_HISTORY_SIZE = 50


class MaskHistory:
    """Linear snapshot list with a cursor, bound to one surface.

    Committing after an undo drops the abandoned redo branch. When the list
    grows past ``max_size`` the oldest snapshot is evicted and the cursor
    shifts with it.
    """

    def __init__(self, surface: RasterSurface, max_size: int = MAX_HISTORY_SIZE):
        self._surface = surface
        self.max_size = max_size
        self._snapshots: List[np.ndarray] = []
        self._index = -1

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    def info(self) -> Tuple[int, int]:
        return self._index, len(self._snapshots)

    def commit(self) -> None:
        del self._snapshots[self._index + 1:]
        self._snapshots.append(self._surface.snapshot())
        self._index = len(self._snapshots) - 1

        if len(self._snapshots) > self.max_size:
            self._snapshots.pop(0)
            self._index -= 1

    def undo(self) -> bool:
        if self._index <= 0:
            return False
        self._index -= 1
        self._surface.restore(self._snapshots[self._index])
        return True

    def redo(self) -> bool:
        if self._index >= len(self._snapshots) - 1:
            return False
        self._index += 1
        self._surface.restore(self._snapshots[self._index])
        return True

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def discard(self) -> None:
        self._snapshots.clear()
        self._index = -1
