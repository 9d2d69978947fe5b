"""Linear undo/redo history of full floor-list snapshots."""

from __future__ import annotations

from collections import deque

from floorplan_studio.models.rooms import Floor

# Saved (undo, redo) stack contents, oldest first.
HistoryToken = tuple[list[list[Floor]], list[list[Floor]]]


def snapshot(floors: list[Floor]) -> list[Floor]:
    """Deep copy of a floor list."""
    return [floor.model_copy(deep=True) for floor in floors]


class History:
    """Undo and redo stacks.

    Pushing a new state clears the redo stack: a fresh edit after an undo
    discards the undone branch. With ``limit`` set, the oldest undo entries
    are dropped once the stack is full.
    """

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit
        self._undo: deque[list[Floor]] = deque(maxlen=limit)
        self._redo: deque[list[Floor]] = deque(maxlen=limit)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def push(self, floors: list[Floor]) -> None:
        """Record the state before a mutation."""
        self._undo.append(snapshot(floors))
        self._redo.clear()

    def undo(self, current: list[Floor]) -> list[Floor] | None:
        """Pop the last saved state, parking ``current`` on the redo stack."""
        if not self._undo:
            return None
        previous = self._undo.pop()
        self._redo.append(snapshot(current))
        return previous

    def redo(self, current: list[Floor]) -> list[Floor] | None:
        """Re-apply the last undone state, parking ``current`` on the undo stack."""
        if not self._redo:
            return None
        following = self._redo.pop()
        self._undo.append(snapshot(current))
        return following

    def begin(self, floors: list[Floor]) -> HistoryToken:
        """Push ``floors`` and return a token that ``rollback`` accepts.

        Used by gestures that may still be cancelled: the token keeps the redo
        stack and any entry the bounded undo stack would push out.
        """
        token = (list(self._undo), list(self._redo))
        self.push(floors)
        return token

    def rollback(self, token: HistoryToken) -> None:
        """Put both stacks back exactly as they were before ``begin``."""
        undo, redo = token
        self._undo = deque(undo, maxlen=self.limit)
        self._redo = deque(redo, maxlen=self.limit)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
