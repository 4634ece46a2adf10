"""Rich renderers for the board."""

from .board_view import (
    render_board,
    render_column,
    render_screen,
    render_statistics_panel,
    render_status_line,
)

__all__ = [
    "render_board",
    "render_column",
    "render_screen",
    "render_statistics_panel",
    "render_status_line",
]
