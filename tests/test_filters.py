"""Unit tests for the task filter predicate and column projection."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from task_board.filters import (
    ColumnView,
    Placeholder,
    ViewFilter,
    build_column_views,
    matches,
    parse_view_filter,
)
from task_board.models import BoardState, Column, Priority, Task

NOW = datetime(2024, 3, 15, 12, 0, 0)


def make_task(task_id: str = "t1", **fields) -> Task:
    fields.setdefault("title", "Write report")
    fields.setdefault("created_at", datetime(2024, 3, 1))
    return Task(id=task_id, **fields)


class TestParseViewFilter:
    def test_names(self):
        assert parse_view_filter("high-priority") is ViewFilter.HIGH_PRIORITY
        assert parse_view_filter(None) is ViewFilter.ALL
        assert parse_view_filter(ViewFilter.TODAY) is ViewFilter.TODAY

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown view 'later'"):
            parse_view_filter("later")


class TestSearch:
    """Free-text search over title and description."""

    def test_empty_search_passes(self):
        assert matches(make_task(), "", ViewFilter.ALL, NOW)

    def test_title_match_is_case_insensitive(self):
        assert matches(make_task(title="Write REPORT"), "report", ViewFilter.ALL, NOW)

    def test_description_match(self):
        assert matches(make_task(description="quarterly numbers"), "Quarterly", "all", NOW)

    def test_no_match_excludes_regardless_of_view(self):
        task = make_task(priority=Priority.HIGH)
        assert not matches(task, "groceries", ViewFilter.HIGH_PRIORITY, NOW)

    def test_search_and_view_combine(self):
        task = make_task(priority=Priority.LOW)
        assert not matches(task, "report", ViewFilter.HIGH_PRIORITY, NOW)


class TestViews:
    """Named view filters."""

    def test_today(self):
        assert matches(make_task(due_date=date(2024, 3, 15)), "", ViewFilter.TODAY, NOW)
        assert not matches(make_task(due_date=date(2024, 3, 16)), "", ViewFilter.TODAY, NOW)
        assert not matches(make_task(), "", ViewFilter.TODAY, NOW)

    def test_overdue(self):
        assert matches(make_task(due_date=date(2024, 3, 10)), "", ViewFilter.OVERDUE, NOW)
        assert not matches(make_task(due_date=date(2024, 3, 20)), "", ViewFilter.OVERDUE, NOW)
        assert not matches(make_task(), "", ViewFilter.OVERDUE, NOW)

    def test_high_priority(self):
        assert matches(make_task(priority=Priority.HIGH), "", "high-priority", NOW)
        assert not matches(make_task(priority=Priority.MEDIUM), "", "high-priority", NOW)

    def test_overdue_view_ignores_done_column(self):
        """A finished task past its due date still shows in the overdue view."""
        state = BoardState.default()
        state.tasks["done"] = [make_task(due_date=date(2024, 3, 1))]

        views = build_column_views(state, "", ViewFilter.OVERDUE, NOW)

        done = next(v for v in views if v.column.id == "done")
        assert len(done.tasks) == 1
        assert state.statistics(NOW).overdue_tasks == 0


class TestPurity:
    def test_repeated_calls_agree_and_do_not_mutate(self):
        task = make_task(description="Numbers", priority=Priority.HIGH, due_date=date(2024, 3, 1))
        before = task.to_dict()

        first = matches(task, "numb", ViewFilter.OVERDUE, NOW)
        second = matches(task, "numb", ViewFilter.OVERDUE, NOW)

        assert first is second is True
        assert task.to_dict() == before


class TestColumnViews:
    """Projection of the board through the filter."""

    def test_placeholders(self):
        state = BoardState(
            columns=[Column("a", "A"), Column("b", "B"), Column("c", "C")],
            tasks={
                "a": [],
                "b": [make_task("t1", title="Alpha")],
                "c": [make_task("t2", title="Beta")],
            },
        )

        views = build_column_views(state, "beta", ViewFilter.ALL, NOW)

        assert [v.placeholder for v in views] == [
            Placeholder.EMPTY,
            Placeholder.NO_MATCHES,
            None,
        ]
        assert [t.id for t in views[2].tasks] == ["t2"]
        assert views[1].total == 1

    def test_preserves_column_and_task_order(self):
        state = BoardState.default()
        state.tasks["todo"] = [make_task("x"), make_task("y"), make_task("z")]

        views = build_column_views(state, now=NOW)

        assert [v.column.id for v in views] == ["todo", "inprogress", "review", "done"]
        assert [t.id for t in views[0].tasks] == ["x", "y", "z"]

    def test_column_view_placeholder_property(self):
        view = ColumnView(column=Column("a", "A"), tasks=(), total=0)
        assert view.placeholder is Placeholder.EMPTY
