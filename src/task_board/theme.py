"""Color palettes for the terminal board.

Dark is the default; the light palette swaps in darker foregrounds that stay
readable on a light terminal background.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Priority


@dataclass(frozen=True)
class Palette:
    """Rich style strings used by the board renderer."""

    name: str
    header: str
    border: str
    title: str
    description: str
    placeholder: str
    due: str
    overdue: str
    priority: dict[Priority, str]


DARK = Palette(
    name="dark",
    header="bold cyan",
    border="blue",
    title="bold white",
    description="dim",
    placeholder="dim italic",
    due="cyan",
    overdue="bold red",
    priority={Priority.LOW: "green", Priority.MEDIUM: "yellow", Priority.HIGH: "bold red"},
)

LIGHT = Palette(
    name="light",
    header="bold blue",
    border="grey50",
    title="bold black",
    description="grey35",
    placeholder="italic grey50",
    due="dark_cyan",
    overdue="bold dark_red",
    priority={
        Priority.LOW: "dark_green",
        Priority.MEDIUM: "dark_orange3",
        Priority.HIGH: "bold dark_red",
    },
)


def get_palette(is_dark: bool) -> Palette:
    return DARK if is_dark else LIGHT
