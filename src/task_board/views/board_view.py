"""Board renderers for the terminal.

This module turns filtered column views and board statistics into Rich
renderables. It only reads the projections it is given.
"""

from __future__ import annotations

from datetime import date, datetime

from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape
from rich.text import Text

from ..filters import ColumnView, Placeholder, ViewFilter
from ..models import BoardStatistics, Task, is_due_before
from ..theme import DARK, Palette

PLACEHOLDER_TEXT = {
    Placeholder.EMPTY: "No tasks",
    Placeholder.NO_MATCHES: "No matching tasks",
}


def format_due_date(due: date) -> str:
    """Short month/day label, e.g. 'Jan 5'."""
    return f"{due:%b} {due.day}"


def _render_task(task: Task, palette: Palette, now: datetime, show_description: bool) -> Text:
    """Build the card text for one task."""
    card = Text()
    card.append(f"● {task.priority.value}", style=palette.priority[task.priority])
    card.append("  ")
    card.append(task.title, style=palette.title)
    if task.due_date:
        overdue = is_due_before(task.due_date, now)
        card.append(
            f"  📅 {format_due_date(task.due_date)}",
            style=palette.overdue if overdue else palette.due,
        )
    if show_description and task.description:
        card.append("\n")
        card.append(task.description, style=palette.description)
    card.append("\n")
    card.append(task.id, style="dim")
    return card


def render_column(
    view: ColumnView,
    palette: Palette = DARK,
    now: datetime | None = None,
    show_descriptions: bool = True,
) -> Panel:
    """Build a Rich Panel for one column.

    Args:
        view: Filtered column projection
        palette: Theme styles
        now: Reference time for overdue highlighting
        show_descriptions: Include task descriptions under titles

    Returns:
        Rich Panel with one row per visible task, or a placeholder row
    """
    now = now or datetime.now()
    table = Table.grid(padding=(0, 0), expand=True)
    table.add_column()

    placeholder = view.placeholder
    if placeholder is not None:
        table.add_row(Text(PLACEHOLDER_TEXT[placeholder], style=palette.placeholder))
    else:
        for task in view.tasks:
            table.add_row(_render_task(task, palette, now, show_descriptions))
            table.add_row("")

    count = f"{len(view.tasks)}/{view.total}" if len(view.tasks) != view.total else str(view.total)
    return Panel(
        table,
        title=f"[{palette.header}]{escape(view.column.title)}[/] [dim]({count})[/dim]",
        subtitle=f"[dim]{view.column.id}[/dim]",
        border_style=palette.border,
        padding=(0, 1),
    )


def render_board(
    views: list[ColumnView],
    palette: Palette = DARK,
    now: datetime | None = None,
    show_descriptions: bool = True,
) -> Columns:
    """Lay out every column side by side in board order."""
    now = now or datetime.now()
    panels = [render_column(view, palette, now, show_descriptions) for view in views]
    return Columns(panels, equal=True, expand=True)


def render_statistics_panel(stats: BoardStatistics, palette: Palette = DARK) -> Panel:
    """Build a Rich Panel listing board statistics."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style=palette.header, justify="right")
    table.add_column()

    table.add_row("Total Tasks:", str(stats.total_tasks))
    table.add_row("Completed:", str(stats.completed_tasks))
    table.add_row("In Progress:", str(stats.in_progress))
    table.add_row("Overdue:", str(stats.overdue_tasks))
    table.add_row("High Priority:", str(stats.high_priority))
    table.add_row("Completion Rate:", f"{stats.completion_rate}%")

    border_style = "green" if stats.total_tasks and stats.completion_rate == 100 else palette.border
    return Panel(table, title="[bold]Board Statistics[/bold]", border_style=border_style, padding=(1, 2))


def render_status_line(
    stats: BoardStatistics,
    search_text: str = "",
    view_filter: ViewFilter = ViewFilter.ALL,
    can_undo: bool = False,
    can_redo: bool = False,
) -> Text:
    """One-line summary shown under the board."""
    line = Text(stats.summary(), style="bold")
    if search_text:
        line.append(f"  search: '{search_text}'", style="yellow")
    if view_filter is not ViewFilter.ALL:
        line.append(f"  view: {view_filter.value}", style="yellow")
    line.append("  undo", style="green" if can_undo else "dim strike")
    line.append("  redo", style="green" if can_redo else "dim strike")
    return line


def render_screen(
    views: list[ColumnView],
    stats: BoardStatistics,
    palette: Palette = DARK,
    now: datetime | None = None,
    search_text: str = "",
    view_filter: ViewFilter = ViewFilter.ALL,
    can_undo: bool = False,
    can_redo: bool = False,
    show_descriptions: bool = True,
) -> Group:
    """Board plus status line, as drawn by the shell after every command."""
    return Group(
        render_board(views, palette, now, show_descriptions),
        render_status_line(stats, search_text, view_filter, can_undo, can_redo),
    )
