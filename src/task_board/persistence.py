"""Board persistence to disk.

A small JSON key-value store: one file per fixed key in the data directory.
The board snapshot and the theme preference are loaded and saved independently.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from .exceptions import PersistenceError
from .models import BoardState

logger = logging.getLogger(__name__)

BOARD_KEY = "board"
THEME_KEY = "theme"


class BoardPersister:
    """Loads and saves the board and theme preference under ``data_dir``."""

    def __init__(self, data_dir: Path):
        """Initialize board persister.

        Args:
            data_dir: Directory holding the store files (~/.local/share/task-board/)
        """
        self.data_dir = data_dir
        self.board_file = data_dir / f"{BOARD_KEY}.json"
        self.theme_file = data_dir / f"{THEME_KEY}.json"

    def _read(self, path: Path) -> dict | None:
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
            logger.warning(f"Unreadable store file {path.name}, ignoring: {err}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Store file {path.name} does not hold an object, ignoring")
            return None
        return data

    def _write(self, path: Path, data: dict) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as err:
            logger.error(f"Failed to save {path.name}: {err}")
            raise PersistenceError(path, str(err)) from err

    def load(self) -> BoardState | None:
        """Load the stored board.

        Returns:
            The stored board, or None if nothing usable is stored
        """
        data = self._read(self.board_file)
        if data is None:
            return None
        try:
            state = BoardState.from_dict(data)
        except (KeyError, TypeError, ValueError) as err:
            logger.warning(f"Invalid stored board, ignoring: {err}")
            return None
        logger.debug(
            "Loaded board",
            extra={"extra_context": {"file": str(self.board_file), "tasks": len(state.all_tasks())}},
        )
        return state

    def save(self, state: BoardState) -> None:
        """Write the board snapshot.

        Raises:
            PersistenceError: If the file cannot be written
        """
        data = state.to_dict()
        data["timestamp"] = datetime.now().isoformat()
        self._write(self.board_file, data)

    def load_theme(self) -> bool:
        """Return the stored dark-theme flag, dark by default."""
        data = self._read(self.theme_file)
        if data is None:
            return True
        return bool(data.get("dark", True))

    def save_theme(self, is_dark: bool) -> None:
        self._write(self.theme_file, {"dark": bool(is_dark)})
