"""Single-user task board engine with undo/redo, filtering and JSON export/import."""

from .engine import BoardEngine
from .exceptions import (
    BoardError,
    BoardImportError,
    InvalidTaskError,
    PersistenceError,
    TaskNotFoundError,
    UnknownColumnError,
)
from .filters import ColumnView, Placeholder, ViewFilter, build_column_views, matches
from .history import HistoryStore
from .models import BoardState, BoardStatistics, Column, Priority, Task
from .persistence import BoardPersister

__all__ = [
    "BoardEngine",
    "BoardError",
    "BoardImportError",
    "BoardPersister",
    "BoardState",
    "BoardStatistics",
    "Column",
    "ColumnView",
    "HistoryStore",
    "InvalidTaskError",
    "PersistenceError",
    "Placeholder",
    "Priority",
    "Task",
    "TaskNotFoundError",
    "UnknownColumnError",
    "ViewFilter",
    "build_column_views",
    "matches",
]
