"""Linear undo/redo history of board snapshots.

Each entry is the board serialized to a JSON string, so recorded entries are
independent of the live board. Writing a new checkpoint after an undo drops
everything that could have been redone.
"""

from __future__ import annotations

import json
import logging

from .models import BoardState

logger = logging.getLogger(__name__)


class HistoryStore:
    """Snapshot log with a cursor marking the currently displayed entry."""

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        """Index of the current entry, -1 while the log is empty."""
        return self._cursor

    def checkpoint(self, state: BoardState) -> None:
        """Record ``state`` as the newest entry, discarding any redo branch."""
        dropped = len(self._entries) - (self._cursor + 1)
        del self._entries[self._cursor + 1 :]
        self._entries.append(json.dumps(state.to_dict()))
        self._cursor = len(self._entries) - 1
        if dropped:
            logger.debug(
                "Discarded redo branch",
                extra={"extra_context": {"dropped": dropped, "entries": len(self._entries)}},
            )

    def reset(self, state: BoardState) -> None:
        """Forget all history and record ``state`` as the only baseline."""
        self._entries.clear()
        self._cursor = -1
        self.checkpoint(state)

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return 0 <= self._cursor < len(self._entries) - 1

    def undo(self) -> BoardState | None:
        """Step back one entry and return its board, or None at the start."""
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._restore(self._cursor)

    def redo(self) -> BoardState | None:
        """Step forward one entry and return its board, or None at the end."""
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._restore(self._cursor)

    def current(self) -> BoardState | None:
        if self._cursor < 0:
            return None
        return self._restore(self._cursor)

    def _restore(self, index: int) -> BoardState:
        return BoardState.from_dict(json.loads(self._entries[index]))
