"""CLI entry point for the task board.

This module handles command-line argument parsing, logging setup, the
one-shot board commands and the interactive shell.
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.handlers
import shlex
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import Config, load_config
from .engine import BoardEngine
from .exceptions import BoardError, ConfigError, TaskNotFoundError
from .filters import ViewFilter, parse_view_filter
from .models import Priority
from .persistence import BoardPersister
from .theme import get_palette
from .transfer import export_filename
from .views.board_view import render_screen, render_statistics_panel

logger = logging.getLogger(__name__)

PROMPT = "[bold cyan]board>[/bold cyan] "
PRIORITY_CHOICES = [p.value for p in Priority]
VIEW_CHOICES = [v.value for v in ViewFilter]


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "context": {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_context"):
            log_data["context"].update(record.extra_context)

        return json.dumps(log_data, default=str)


def _setup_logging(log_file: Path, debug: bool) -> None:
    """Setup structured JSON logging to a rotating file.

    Args:
        log_file: Path to log file
        debug: Enable debug level logging
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(JSONFormatter())
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(file_handler)

    logger.info(
        "Logging initialized",
        extra={"extra_context": {"log_file": str(log_file), "debug": debug}},
    )


@dataclass
class Session:
    """Display settings that live for one CLI invocation or shell session."""

    config: Config
    search_text: str = ""
    view_filter: ViewFilter = ViewFilter.ALL


# -------------------- argument parsing --------------------


def _add_board_commands(subparsers) -> None:
    """Register the commands available both one-shot and in the shell."""
    show = subparsers.add_parser("show", help="Render the board")
    show.add_argument("--search", "-s", default=None, help="Only tasks containing TEXT")
    show.add_argument("--view", "-v", choices=VIEW_CHOICES, default=None, help="View filter")

    add = subparsers.add_parser("add", help="Create a task")
    add.add_argument("column", help="Column id (e.g. todo)")
    add.add_argument("title", help="Task title")
    add.add_argument("--description", "-d", default="", help="Task description")
    add.add_argument("--priority", "-p", choices=PRIORITY_CHOICES, default="low")
    add.add_argument("--due", default=None, help="Due date (YYYY-MM-DD)")

    edit = subparsers.add_parser("edit", help="Edit a task; omitted fields are kept")
    edit.add_argument("task_id")
    edit.add_argument("column", help="Column currently holding the task")
    edit.add_argument("--title", "-t", default=None)
    edit.add_argument("--description", "-d", default=None)
    edit.add_argument("--priority", "-p", choices=PRIORITY_CHOICES, default=None)
    edit.add_argument("--due", default=None, help="Due date (YYYY-MM-DD); empty clears it")

    delete = subparsers.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id")
    delete.add_argument("column")

    move = subparsers.add_parser("move", help="Move a task to the end of a column")
    move.add_argument("task_id")
    move.add_argument("source")
    move.add_argument("target")

    subparsers.add_parser("stats", help="Show board statistics")

    export = subparsers.add_parser("export", help="Export the board to a JSON file")
    export.add_argument("path", nargs="?", type=Path, default=None)

    import_ = subparsers.add_parser("import", help="Replace the board from a JSON export")
    import_.add_argument("path", type=Path)

    theme = subparsers.add_parser("theme", help="Switch color theme")
    theme.add_argument("mode", choices=["dark", "light"])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-board",
        description="Terminal task board with undo/redo, filters and JSON export/import",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.json (default: ~/.config/task-board/config.json)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")
    _add_board_commands(subparsers)
    subparsers.add_parser("shell", help="Interactive shell with undo/redo (default)")
    return parser


def _build_shell_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="", add_help=False)
    subparsers = parser.add_subparsers(dest="command")
    _add_board_commands(subparsers)
    subparsers.add_parser("undo", help="Undo the last change")
    subparsers.add_parser("redo", help="Redo the last undone change")
    search = subparsers.add_parser("search", help="Set search text (no TEXT clears it)")
    search.add_argument("text", nargs="*")
    view = subparsers.add_parser("view", help="Set view filter")
    view.add_argument("name", choices=VIEW_CHOICES)
    subparsers.add_parser("help", help="List shell commands")
    subparsers.add_parser("quit", help="Leave the shell")
    subparsers.add_parser("exit", help="Leave the shell")
    return parser


# -------------------- commands --------------------


def _draw(engine: BoardEngine, session: Session, console: Console) -> None:
    console.print(
        render_screen(
            engine.column_views(session.search_text, session.view_filter),
            engine.statistics(),
            palette=get_palette(engine.is_dark),
            now=engine.now(),
            search_text=session.search_text,
            view_filter=session.view_filter,
            can_undo=engine.can_undo(),
            can_redo=engine.can_redo(),
            show_descriptions=session.config.show_descriptions,
        )
    )


def _cmd_show(engine: BoardEngine, args, session: Session, console: Console) -> None:
    if args.search is not None:
        session.search_text = args.search
    if args.view is not None:
        session.view_filter = parse_view_filter(args.view)
    _draw(engine, session, console)


def _cmd_add(engine: BoardEngine, args, session: Session, console: Console) -> None:
    task = engine.add_task(args.column, args.title, args.description, args.priority, args.due)
    console.print(f'[green]✓ Task "{escape(task.title)}" created ({task.id})[/green]')


def _cmd_edit(engine: BoardEngine, args, session: Session, console: Console) -> None:
    current = next((t for t in engine.tasks_in(args.column) if t.id == args.task_id), None)
    if current is None:
        raise TaskNotFoundError(args.task_id, args.column)
    task = engine.update_task(
        args.task_id,
        args.column,
        args.title if args.title is not None else current.title,
        args.description if args.description is not None else current.description,
        args.priority or current.priority,
        args.due if args.due is not None else current.due_date,
    )
    console.print(f'[green]✓ Task "{escape(task.title)}" updated[/green]')


def _cmd_delete(engine: BoardEngine, args, session: Session, console: Console) -> None:
    task = engine.delete_task(args.task_id, args.column)
    console.print(f'[green]✓ Task "{escape(task.title)}" deleted[/green]')


def _cmd_move(engine: BoardEngine, args, session: Session, console: Console) -> None:
    if engine.move_task(args.task_id, args.source, args.target):
        console.print(f"[green]✓ Moved to {escape(engine.column_title(args.target))}[/green]")
    else:
        console.print(
            f"[yellow]Task {escape(args.task_id)} is not in {escape(args.source)}; "
            "nothing moved[/yellow]"
        )


def _cmd_stats(engine: BoardEngine, args, session: Session, console: Console) -> None:
    console.print(render_statistics_panel(engine.statistics(), get_palette(engine.is_dark)))


def _cmd_export(engine: BoardEngine, args, session: Session, console: Console) -> None:
    path = args.path or session.config.export_dir / export_filename()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(engine.export_json(), encoding="utf-8")
    except OSError as err:
        raise BoardError(f"Cannot write export {path}: {err}") from err
    logger.info("Board exported", extra={"extra_context": {"path": str(path)}})
    console.print(f"[green]✓ Board exported to {escape(str(path))}[/green]")


def _cmd_import(engine: BoardEngine, args, session: Session, console: Console) -> None:
    try:
        text = args.path.read_bytes()
    except OSError as err:
        raise BoardError(f"Cannot read {args.path}: {err}") from err
    state = engine.import_board(text)
    console.print(
        f"[green]✓ Board imported: {len(state.columns)} columns, "
        f"{len(state.all_tasks())} tasks[/green]"
    )


def _cmd_theme(engine: BoardEngine, args, session: Session, console: Console) -> None:
    engine.set_theme(args.mode == "dark")
    console.print(f"[green]✓ Theme set to {args.mode}[/green]")


def _cmd_undo(engine: BoardEngine, args, session: Session, console: Console) -> None:
    console.print("↶ Undo" if engine.undo() else "[dim]Nothing to undo[/dim]")


def _cmd_redo(engine: BoardEngine, args, session: Session, console: Console) -> None:
    console.print("↷ Redo" if engine.redo() else "[dim]Nothing to redo[/dim]")


def _cmd_search(engine: BoardEngine, args, session: Session, console: Console) -> None:
    session.search_text = " ".join(args.text)


def _cmd_view(engine: BoardEngine, args, session: Session, console: Console) -> None:
    session.view_filter = parse_view_filter(args.name)


Handler = Callable[[BoardEngine, argparse.Namespace, Session, Console], None]

COMMANDS: dict[str, Handler] = {
    "show": _cmd_show,
    "add": _cmd_add,
    "edit": _cmd_edit,
    "delete": _cmd_delete,
    "move": _cmd_move,
    "stats": _cmd_stats,
    "export": _cmd_export,
    "import": _cmd_import,
    "theme": _cmd_theme,
    "undo": _cmd_undo,
    "redo": _cmd_redo,
    "search": _cmd_search,
    "view": _cmd_view,
}

# Commands after which the shell redraws the board
REDRAW_AFTER = {"add", "edit", "delete", "move", "import", "theme", "undo", "redo", "search", "view"}


def _report_persist_warning(engine: BoardEngine, console: Console) -> None:
    if engine.persist_warning:
        console.print(f"[yellow]⚠ Changes kept in memory only: {escape(engine.persist_warning)}[/yellow]")


def run_shell(
    engine: BoardEngine,
    session: Session,
    console: Console,
    read_line: Callable[[str], str] | None = None,
) -> int:
    """Read-eval loop over board commands; one engine and history per session.

    Args:
        engine: Board engine kept alive for the whole session
        session: Search/view state shared by the commands
        console: Rich Console for output
        read_line: Prompt reader (defaults to console.input)

    Returns:
        Exit code (always 0)
    """
    read_line = read_line or console.input
    parser = _build_shell_parser()
    _draw(engine, session, console)

    while True:
        try:
            line = read_line(PROMPT)
        except EOFError:
            console.print()
            return 0

        try:
            argv = shlex.split(line)
        except ValueError as err:
            console.print(f"[red]{err}[/red]")
            continue
        if not argv:
            continue

        try:
            args = parser.parse_args(argv)
        except SystemExit:
            console.print("[dim]Type 'help' for the list of commands[/dim]")
            continue

        if args.command in ("quit", "exit"):
            return 0
        if args.command == "help":
            console.print(escape(parser.format_help()))
            continue

        try:
            COMMANDS[args.command](engine, args, session, console)
        except BoardError as err:
            logger.warning(f"Command failed: {err}", extra={"extra_context": {"command": line}})
            console.print(f"[red]Error: {escape(str(err))}[/red]")
            continue

        _report_persist_warning(engine, console)
        if args.command in REDRAW_AFTER:
            _draw(engine, session, console)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the task board CLI.

    Returns:
        Exit code (0=success, 1=error, 130=interrupted)
    """
    args = _build_parser().parse_args(argv)
    console = Console()

    try:
        config = load_config(args.config)
    except ConfigError as err:
        console.print(f"[red]Error loading config: {escape(str(err))}[/red]")
        return 1

    _setup_logging(config.log_file, args.debug)
    session = Session(config=config, view_filter=config.default_view)

    try:
        engine = BoardEngine.open(BoardPersister(config.data_dir))
        if args.command in (None, "shell"):
            return run_shell(engine, session, console)

        COMMANDS[args.command](engine, args, session, console)
        _report_persist_warning(engine, console)
        return 0

    except BoardError as err:
        logger.warning(f"Command failed: {err}", extra={"extra_context": {"command": args.command}})
        console.print(f"[red]Error: {escape(str(err))}[/red]")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user (KeyboardInterrupt)")
        return 130

    except Exception as err:
        logger.error(
            "Unhandled exception",
            extra={"extra_context": {"error": str(err)}},
            exc_info=True,
        )
        console.print(f"[red]Fatal error: {escape(str(err))}[/red]")
        console.print(f"[dim]Check logs at: {config.log_file}[/dim]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
