"""Board data models.

A board is an ordered list of columns plus, for every column, the ordered list
of tasks it owns. Tasks carry no column reference: membership is positional.

Serialized dictionaries use the camelCase keys of the board file format
(``dueDate``, ``createdAt``) so that snapshots, saved boards and exports all
share one shape.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from .exceptions import UnknownColumnError

DONE_COLUMN_ID = "done"
IN_PROGRESS_COLUMN_ID = "inprogress"
MISSING_COLUMN_TITLE = "Column"


class Priority(Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def parse_priority(value: Priority | str | None) -> Priority:
    """Coerce a priority value; None means the default (low).

    Raises:
        ValueError: If the value is not a known priority
    """
    if value is None or value == "":
        return Priority.LOW
    if isinstance(value, Priority):
        return value
    try:
        return Priority(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"unknown priority '{value}'") from None


def parse_due_date(value: date | str | None) -> date | None:
    """Coerce a due date; empty string and None both mean "no due date".

    Strings may be a plain ISO date or a full ISO timestamp, in which case only
    the calendar date is kept.

    Raises:
        ValueError: If the string is not an ISO date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"due date must be a string, got {type(value).__name__}")
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"invalid due date '{value}'") from None


def is_due_before(due: date, now: datetime) -> bool:
    """Return True if the start of the due day is strictly before ``now``."""
    return datetime.combine(due, time.min, tzinfo=now.tzinfo) < now


@dataclass
class Column:
    """A board column."""

    id: str
    title: str

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict) -> Column:
        if not isinstance(data, dict):
            raise TypeError("column entry must be an object")
        column_id = data["id"]
        title = data.get("title", "")
        if not isinstance(column_id, str) or not column_id:
            raise ValueError("column id must be a non-empty string")
        if not isinstance(title, str):
            raise ValueError(f"column {column_id} title must be a string")
        return cls(id=column_id, title=title)


@dataclass
class Task:
    """A single task card.

    Fields:
        id: Board-wide unique identifier, never changes once assigned.
        title: Non-empty single-line title.
        description: Free text, may be empty.
        priority: low/medium/high.
        due_date: Calendar date or None when the task has no due date.
        created_at: Creation timestamp, never changes.
    """

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.LOW
    due_date: date | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        """Build a Task from its serialized form.

        Raises:
            KeyError: If ``id`` or ``title`` is missing
            TypeError: If the entry is not an object
            ValueError: If any field has an invalid value
        """
        if not isinstance(data, dict):
            raise TypeError("task entry must be an object")
        task_id = data["id"]
        title = data["title"]
        if not isinstance(task_id, str) or not task_id:
            raise ValueError("task id must be a non-empty string")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"task {task_id} must have a non-empty title")
        description = data.get("description") or ""
        if not isinstance(description, str):
            raise ValueError(f"task {task_id} description must be a string")

        created_raw = data.get("createdAt")
        if created_raw:
            try:
                created_at = datetime.fromisoformat(str(created_raw))
            except ValueError:
                raise ValueError(f"task {task_id} has invalid createdAt '{created_raw}'") from None
        else:
            created_at = datetime.now()

        return cls(
            id=task_id,
            title=title,
            description=description,
            priority=parse_priority(data.get("priority")),
            due_date=parse_due_date(data.get("dueDate")),
            created_at=created_at,
        )


DEFAULT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("todo", "To Do"),
    (IN_PROGRESS_COLUMN_ID, "In Progress"),
    ("review", "Review"),
    (DONE_COLUMN_ID, "Done"),
)


@dataclass(frozen=True)
class BoardStatistics:
    """Aggregate counts over every task on the board."""

    total_tasks: int
    completed_tasks: int
    in_progress: int
    high_priority: int
    overdue_tasks: int

    @property
    def completion_rate(self) -> int:
        """Completed share as a whole percentage, rounded half up."""
        if self.total_tasks == 0:
            return 0
        return math.floor(self.completed_tasks * 100 / self.total_tasks + 0.5)

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "inProgress": self.in_progress,
            "highPriority": self.high_priority,
            "overdueTasks": self.overdue_tasks,
            "completionRate": self.completion_rate,
        }

    def summary(self) -> str:
        return (
            f"{self.completed_tasks}/{self.total_tasks} tasks completed "
            f"• {self.overdue_tasks} overdue"
        )


@dataclass
class BoardState:
    """Columns and the tasks each column owns."""

    columns: list[Column] = field(default_factory=list)
    tasks: dict[str, list[Task]] = field(default_factory=dict)

    @classmethod
    def default(cls) -> BoardState:
        """Create the four-column starting board with no tasks."""
        columns = [Column(id=column_id, title=title) for column_id, title in DEFAULT_COLUMNS]
        return cls(columns=columns, tasks={column.id: [] for column in columns})

    def __repr__(self) -> str:
        counts = ", ".join(f"{c.id}={len(self.tasks.get(c.id, []))}" for c in self.columns)
        return f"BoardState({counts})"

    # -------------------- queries --------------------

    def has_column(self, column_id: str) -> bool:
        return any(column.id == column_id for column in self.columns)

    def tasks_in(self, column_id: str) -> list[Task]:
        """Return the ordered tasks of a column.

        Raises:
            UnknownColumnError: If the column is not on the board
        """
        if not self.has_column(column_id):
            raise UnknownColumnError(column_id)
        return list(self.tasks.get(column_id, []))

    def column_title(self, column_id: str) -> str:
        """Return the column title, or a placeholder if the column is gone."""
        for column in self.columns:
            if column.id == column_id:
                return column.title
        return MISSING_COLUMN_TITLE

    def find_task(self, task_id: str) -> tuple[str, Task] | None:
        """Locate a task anywhere on the board, returning (column_id, task)."""
        for column_id, tasks in self.tasks.items():
            for task in tasks:
                if task.id == task_id:
                    return column_id, task
        return None

    def all_tasks(self) -> list[Task]:
        """All tasks in column order."""
        return [task for column in self.columns for task in self.tasks.get(column.id, [])]

    def statistics(self, now: datetime | None = None) -> BoardStatistics:
        """Compute board statistics.

        Completed and in-progress counts are keyed on the ``done`` and
        ``inprogress`` column ids; boards using other ids report zero for both.
        Overdue tasks exclude those already in ``done``.
        """
        now = now or datetime.now()
        total = completed = in_progress = high = overdue = 0

        for column_id, tasks in self.tasks.items():
            for task in tasks:
                total += 1
                if column_id == DONE_COLUMN_ID:
                    completed += 1
                elif column_id == IN_PROGRESS_COLUMN_ID:
                    in_progress += 1
                if task.priority is Priority.HIGH:
                    high += 1
                if (
                    task.due_date
                    and column_id != DONE_COLUMN_ID
                    and is_due_before(task.due_date, now)
                ):
                    overdue += 1

        return BoardStatistics(
            total_tasks=total,
            completed_tasks=completed,
            in_progress=in_progress,
            high_priority=high,
            overdue_tasks=overdue,
        )

    def copy(self) -> BoardState:
        """Deep copy; the result shares no mutable state with this board."""
        return copy.deepcopy(self)

    # -------------------- serialization --------------------

    def to_dict(self) -> dict:
        return {
            "columns": [column.to_dict() for column in self.columns],
            "tasks": {
                column.id: [task.to_dict() for task in self.tasks.get(column.id, [])]
                for column in self.columns
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> BoardState:
        """Build and validate a board from its serialized form.

        A column without a task list gets an empty one. Task lists keyed by an
        unknown column, duplicate column ids and duplicate task ids are errors.

        Raises:
            KeyError: If a required key is missing
            TypeError: If a section has the wrong shape
            ValueError: If the board violates an invariant
        """
        if not isinstance(data, dict):
            raise TypeError("board must be an object")
        columns_raw = data["columns"]
        tasks_raw = data["tasks"]
        if not isinstance(columns_raw, list):
            raise TypeError("'columns' must be a list")
        if not isinstance(tasks_raw, dict):
            raise TypeError("'tasks' must be an object keyed by column id")

        columns = [Column.from_dict(entry) for entry in columns_raw]
        column_ids = [column.id for column in columns]
        duplicates = sorted({cid for cid in column_ids if column_ids.count(cid) > 1})
        if duplicates:
            raise ValueError(f"duplicate column ids: {', '.join(duplicates)}")

        orphans = sorted(set(tasks_raw) - set(column_ids))
        if orphans:
            raise ValueError(f"task lists for unknown columns: {', '.join(orphans)}")

        tasks: dict[str, list[Task]] = {}
        seen: set[str] = set()
        for column_id in column_ids:
            entries = tasks_raw.get(column_id) or []
            if not isinstance(entries, list):
                raise TypeError(f"tasks for column {column_id} must be a list")
            column_tasks = []
            for entry in entries:
                task = Task.from_dict(entry)
                if task.id in seen:
                    raise ValueError(f"duplicate task id: {task.id}")
                seen.add(task.id)
                column_tasks.append(task)
            tasks[column_id] = column_tasks

        return cls(columns=columns, tasks=tasks)
