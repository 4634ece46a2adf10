"""Board export and import.

Export wraps the board in a versioned envelope; import parses and validates
that envelope and returns a fresh board, reporting any problem as a
``BoardImportError``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from .exceptions import BoardImportError
from .models import BoardState

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


def build_export(state: BoardState, now: datetime | None = None) -> dict:
    """Build the export payload for a board."""
    now = now or datetime.now()
    payload = {"version": EXPORT_VERSION, "exportDate": now.isoformat()}
    payload.update(state.to_dict())
    return payload


def dumps_export(state: BoardState, now: datetime | None = None) -> str:
    """Serialize the export payload as pretty-printed JSON."""
    return json.dumps(build_export(state, now), indent=2, ensure_ascii=False)


def export_filename(now: datetime | None = None) -> str:
    """Default file name for an export, e.g. kanban-board-2024-01-31.json."""
    now = now or datetime.now()
    return f"kanban-board-{now.date().isoformat()}.json"


def parse_import(text: str | bytes) -> BoardState:
    """Parse an export payload into a board.

    Args:
        text: Raw JSON document

    Returns:
        Validated board

    Raises:
        BoardImportError: If the JSON is unparsable or structurally invalid
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise BoardImportError(f"invalid JSON: {err}") from err

    if not isinstance(data, dict):
        raise BoardImportError("expected a JSON object at the top level")
    for key in ("columns", "tasks"):
        if key not in data:
            raise BoardImportError(f"missing '{key}'")

    version = data.get("version")
    if version is not None and version != EXPORT_VERSION:
        logger.warning(
            "Importing board with unexpected version",
            extra={"extra_context": {"version": version, "expected": EXPORT_VERSION}},
        )

    try:
        return BoardState.from_dict(data)
    except KeyError as err:
        raise BoardImportError(f"missing field {err}") from err
    except (TypeError, ValueError) as err:
        raise BoardImportError(str(err)) from err
