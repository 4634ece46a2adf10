"""Task filtering: free-text search combined with a named view filter.

Filtering never mutates the board. ``build_column_views`` produces the
displayed subset per column, distinguishing an empty column from a column
whose tasks were all filtered out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .models import BoardState, Column, Priority, Task, is_due_before


class ViewFilter(Enum):
    """Named views selectable alongside the search box."""

    ALL = "all"
    TODAY = "today"
    OVERDUE = "overdue"
    HIGH_PRIORITY = "high-priority"


class Placeholder(Enum):
    """Why a column shows no task cards."""

    EMPTY = "empty"
    NO_MATCHES = "no-matches"


@dataclass(frozen=True)
class ColumnView:
    """Filtered projection of one column for rendering."""

    column: Column
    tasks: tuple[Task, ...]
    total: int

    @property
    def placeholder(self) -> Placeholder | None:
        if self.total == 0:
            return Placeholder.EMPTY
        if not self.tasks:
            return Placeholder.NO_MATCHES
        return None


def parse_view_filter(value: ViewFilter | str | None) -> ViewFilter:
    """Coerce a view filter name; None means ``all``.

    Raises:
        ValueError: If the name is not a known view
    """
    if value is None:
        return ViewFilter.ALL
    if isinstance(value, ViewFilter):
        return value
    try:
        return ViewFilter(value)
    except ValueError:
        known = ", ".join(v.value for v in ViewFilter)
        raise ValueError(f"Unknown view '{value}' (expected one of: {known})") from None


def matches(
    task: Task,
    search_text: str = "",
    view_filter: ViewFilter | str = ViewFilter.ALL,
    now: datetime | None = None,
) -> bool:
    """Return True if the task should be displayed.

    A non-empty search must match title or description (case-insensitive)
    before the view filter is consulted. The ``overdue`` view ignores column
    membership, unlike the overdue statistic.
    """
    if search_text:
        needle = search_text.lower()
        if needle not in task.title.lower() and needle not in task.description.lower():
            return False

    view = parse_view_filter(view_filter)
    if view is ViewFilter.ALL:
        return True
    if view is ViewFilter.HIGH_PRIORITY:
        return task.priority is Priority.HIGH

    if task.due_date is None:
        return False
    now = now or datetime.now()
    if view is ViewFilter.TODAY:
        return task.due_date == now.date()
    return is_due_before(task.due_date, now)


def build_column_views(
    state: BoardState,
    search_text: str = "",
    view_filter: ViewFilter | str = ViewFilter.ALL,
    now: datetime | None = None,
) -> list[ColumnView]:
    """Project every column through ``matches`` in board order."""
    view = parse_view_filter(view_filter)
    now = now or datetime.now()
    views = []
    for column in state.columns:
        raw = state.tasks.get(column.id, [])
        visible = tuple(task for task in raw if matches(task, search_text, view, now))
        views.append(ColumnView(column=column, tasks=visible, total=len(raw)))
    return views
