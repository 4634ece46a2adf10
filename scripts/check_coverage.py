#!/usr/bin/env python3
"""
Enforce minimum line coverage for the board core.

Usage:
    pytest --cov=task_board
    python scripts/check_coverage.py [--data-file .coverage]

Exit codes:
    0 - Every module meets its threshold
    1 - At least one module is below its threshold or was not measured
    2 - Coverage data missing or unreadable
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import coverage
from coverage.exceptions import CoverageException
from rich.console import Console
from rich.table import Table

# Minimum line coverage (percent) for modules holding board semantics
MODULE_THRESHOLDS: dict[str, float] = {
    "task_board/engine.py": 90.0,
    "task_board/history.py": 95.0,
    "task_board/filters.py": 95.0,
    "task_board/models.py": 90.0,
    "task_board/transfer.py": 90.0,
}


def measured_percentages(data_file: Path) -> dict[str, float]:
    """Map each measured file (absolute path) to its line coverage percentage."""
    cov = coverage.Coverage(data_file=str(data_file))
    cov.load()

    result = {}
    for filename in cov.get_data().measured_files():
        _, statements, _, missing, _ = cov.analysis2(filename)
        if statements:
            result[filename] = 100.0 * (len(statements) - len(missing)) / len(statements)
        else:
            result[filename] = 100.0
    return result


def _lookup(percentages: dict[str, float], module: str) -> float | None:
    suffix = Path(module).as_posix()
    for filename, pct in percentages.items():
        if Path(filename).as_posix().endswith(suffix):
            return pct
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--data-file", type=Path, default=Path(".coverage"))
    args = parser.parse_args(argv)
    console = Console()

    if not args.data_file.exists():
        console.print(f"[red]No coverage data at {args.data_file}; run pytest --cov first[/red]")
        return 2
    try:
        percentages = measured_percentages(args.data_file)
    except CoverageException as err:
        console.print(f"[red]Cannot read coverage data: {err}[/red]")
        return 2

    table = Table(title="Module Coverage")
    table.add_column("Module")
    table.add_column("Coverage", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("")

    failed = 0
    for module, threshold in MODULE_THRESHOLDS.items():
        pct = _lookup(percentages, module)
        if pct is None:
            table.add_row(module, "-", f"{threshold:.0f}%", "[red]not measured[/red]")
            failed += 1
            continue
        ok = pct >= threshold
        failed += not ok
        table.add_row(module, f"{pct:.1f}%", f"{threshold:.0f}%", "[green]ok[/green]" if ok else "[red]low[/red]")

    console.print(table)
    if failed:
        console.print(f"[red]{failed} module(s) below threshold[/red]")
        return 1
    console.print("[green]All coverage thresholds met[/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
