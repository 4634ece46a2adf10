"""Board engine: the command and query surface over a single board.

Every successful mutation runs the same sequence: change the live board,
persist it, then record a history checkpoint. Failed commands raise before
touching anything. The engine owns the live board exclusively; callers only
ever receive copies.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime

from .exceptions import InvalidTaskError, PersistenceError, TaskNotFoundError, UnknownColumnError
from .filters import ColumnView, ViewFilter, build_column_views, matches
from .history import HistoryStore
from .models import (
    BoardState,
    BoardStatistics,
    Priority,
    Task,
    parse_due_date,
    parse_priority,
)
from .persistence import BoardPersister
from .transfer import build_export, dumps_export, parse_import

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _validate_fields(
    title: str,
    description: str | None,
    priority: Priority | str | None,
    due_date: date | str | None,
) -> tuple[str, str, Priority, date | None]:
    """Normalize editable task fields, raising InvalidTaskError on bad input."""
    if not isinstance(title, str) or not title.strip():
        raise InvalidTaskError("title must not be empty")
    try:
        return (
            title.strip(),
            description or "",
            parse_priority(priority),
            parse_due_date(due_date),
        )
    except ValueError as err:
        raise InvalidTaskError(str(err)) from err


class BoardEngine:
    """Owns one board, its undo/redo history and its persistence adapter."""

    def __init__(
        self,
        state: BoardState | None = None,
        persister: BoardPersister | None = None,
        clock: Clock = datetime.now,
        is_dark: bool = True,
    ):
        """Initialize the engine and record the history baseline.

        Args:
            state: Starting board (the default four-column board if None)
            persister: Store to write after each mutation, or None for in-memory use
            clock: Source of "now" for ids, timestamps, filters and statistics
            is_dark: Initial theme preference
        """
        self._state = state if state is not None else BoardState.default()
        self._persister = persister
        self._clock = clock
        self._history = HistoryStore()
        self.is_dark = is_dark
        self.persist_warning: str | None = None
        self._history.checkpoint(self._state)

    @classmethod
    def open(cls, persister: BoardPersister, clock: Clock = datetime.now) -> BoardEngine:
        """Load the stored board (or create the default one) and the theme flag."""
        state = persister.load()
        created = state is None or not state.columns
        if created:
            state = BoardState.default()
        engine = cls(state, persister=persister, clock=clock, is_dark=persister.load_theme())
        if created:
            logger.info("Created default board")
            engine._persist()
        return engine

    # -------------------- queries --------------------

    @property
    def state(self) -> BoardState:
        """A deep copy of the live board."""
        return self._state.copy()

    def tasks_in(self, column_id: str) -> list[Task]:
        return copy.deepcopy(self._state.tasks_in(column_id))

    def column_title(self, column_id: str) -> str:
        return self._state.column_title(column_id)

    def now(self) -> datetime:
        return self._clock()

    def statistics(self) -> BoardStatistics:
        return self._state.statistics(self._clock())

    def matches(
        self, task: Task, search_text: str = "", view_filter: ViewFilter | str = ViewFilter.ALL
    ) -> bool:
        return matches(task, search_text, view_filter, self._clock())

    def column_views(
        self, search_text: str = "", view_filter: ViewFilter | str = ViewFilter.ALL
    ) -> list[ColumnView]:
        """Filtered per-column projection for a renderer."""
        return build_column_views(self._state.copy(), search_text, view_filter, self._clock())

    # -------------------- commands --------------------

    def add_task(
        self,
        column_id: str,
        title: str,
        description: str = "",
        priority: Priority | str | None = Priority.LOW,
        due_date: date | str | None = None,
    ) -> Task:
        """Create a task at the end of a column.

        Raises:
            UnknownColumnError: If the column is not on the board
            InvalidTaskError: If the title is blank or a field cannot be parsed
        """
        if not self._state.has_column(column_id):
            raise UnknownColumnError(column_id)
        title, description, priority, due = _validate_fields(title, description, priority, due_date)

        task = Task(
            id=self._new_task_id(),
            title=title,
            description=description,
            priority=priority,
            due_date=due,
            created_at=self._clock(),
        )
        self._state.tasks.setdefault(column_id, []).append(task)
        self._commit("Task created", task_id=task.id, column_id=column_id)
        return dataclasses.replace(task)

    def update_task(
        self,
        task_id: str,
        column_id: str,
        title: str,
        description: str,
        priority: Priority | str | None,
        due_date: date | str | None,
    ) -> Task:
        """Edit a task's title, description, priority and due date in place.

        Raises:
            UnknownColumnError: If the column is not on the board
            TaskNotFoundError: If the task is not in that column
            InvalidTaskError: If the title is blank or a field cannot be parsed
        """
        task = self._locate(task_id, column_id)
        title, description, priority, due = _validate_fields(title, description, priority, due_date)

        task.title = title
        task.description = description
        task.priority = priority
        task.due_date = due
        self._commit("Task updated", task_id=task_id, column_id=column_id)
        return dataclasses.replace(task)

    def delete_task(self, task_id: str, column_id: str) -> Task:
        """Remove a task from a column.

        Raises:
            UnknownColumnError: If the column is not on the board
            TaskNotFoundError: If the task is not in that column
        """
        task = self._locate(task_id, column_id)
        self._state.tasks[column_id].remove(task)
        self._commit("Task deleted", task_id=task_id, column_id=column_id)
        return task

    def move_task(self, task_id: str, source_column_id: str, target_column_id: str) -> bool:
        """Move a task to the end of the target column.

        The task is looked up in the source column only. If it is no longer
        there the move is skipped and False is returned. Dropping a task onto
        its own column moves it to the end of that column.

        Raises:
            UnknownColumnError: If the target column is not on the board
        """
        if not self._state.has_column(target_column_id):
            raise UnknownColumnError(target_column_id)

        source = self._state.tasks.get(source_column_id, [])
        index = next((i for i, t in enumerate(source) if t.id == task_id), None)
        if index is None:
            logger.debug(
                "Move skipped, task not in source column",
                extra={"extra_context": {"task_id": task_id, "source": source_column_id}},
            )
            return False

        task = source.pop(index)
        self._state.tasks.setdefault(target_column_id, []).append(task)
        self._commit(
            "Task moved", task_id=task_id, source=source_column_id, target=target_column_id
        )
        return True

    # -------------------- history --------------------

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False if there is none."""
        return self._install(self._history.undo(), "Undo")

    def redo(self) -> bool:
        """Re-apply the next snapshot. Returns False if there is none."""
        return self._install(self._history.redo(), "Redo")

    # -------------------- export / import --------------------

    def export_board(self) -> dict:
        return build_export(self._state, self._clock())

    def export_json(self) -> str:
        return dumps_export(self._state, self._clock())

    def import_board(self, text: str | bytes) -> BoardState:
        """Replace the board with an imported one and restart history.

        Raises:
            BoardImportError: If the payload is invalid; nothing changes
        """
        state = parse_import(text)
        self._state = state
        self._persist()
        self._history.reset(self._state)
        logger.info(
            "Board imported",
            extra={
                "extra_context": {
                    "columns": len(state.columns),
                    "tasks": len(state.all_tasks()),
                }
            },
        )
        return self._state.copy()

    # -------------------- theme --------------------

    def set_theme(self, is_dark: bool) -> None:
        """Store the theme preference; independent of board history."""
        self.is_dark = bool(is_dark)
        if self._persister is None:
            return
        try:
            self._persister.save_theme(self.is_dark)
        except PersistenceError as err:
            logger.warning(f"Theme preference not saved: {err}")
            self.persist_warning = str(err)
        else:
            self.persist_warning = None

    # -------------------- internals --------------------

    def _new_task_id(self) -> str:
        while True:
            task_id = f"task_{uuid.uuid4().hex[:12]}"
            if self._state.find_task(task_id) is None:
                return task_id

    def _locate(self, task_id: str, column_id: str) -> Task:
        if not self._state.has_column(column_id):
            raise UnknownColumnError(column_id)
        for task in self._state.tasks.get(column_id, []):
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id, column_id)

    def _install(self, snapshot: BoardState | None, action: str) -> bool:
        if snapshot is None:
            logger.debug(f"{action} skipped, no history entry")
            return False
        self._state = snapshot
        self._persist()
        logger.info(action, extra={"extra_context": {"cursor": self._history.cursor}})
        return True

    def _commit(self, event: str, **context) -> None:
        self._persist()
        self._history.checkpoint(self._state)
        logger.info(event, extra={"extra_context": context})

    def _persist(self) -> None:
        """Write the board; a failed write is recorded, never raised."""
        if self._persister is None:
            return
        try:
            self._persister.save(self._state)
        except PersistenceError as err:
            logger.warning(f"Board not saved, keeping in-memory changes: {err}")
            self.persist_warning = str(err)
        else:
            self.persist_warning = None
