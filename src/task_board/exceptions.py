"""Custom exceptions for board operations.

This module defines a hierarchy of exceptions for the failure kinds a board
command can report, so callers can tell a stale reference apart from bad input.
"""


class BoardError(Exception):
    """Base exception for all board-related errors."""


class UnknownColumnError(BoardError):
    """Raised when an operation references a column id absent from the board."""

    def __init__(self, column_id: str):
        self.column_id = column_id
        super().__init__(f"Unknown column: {column_id}")


class InvalidTaskError(BoardError):
    """Raised when task fields fail validation (empty title, bad priority, bad date)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid task: {reason}")


class TaskNotFoundError(BoardError):
    """Raised when a task id is not present in the stated column."""

    def __init__(self, task_id: str, column_id: str):
        self.task_id = task_id
        self.column_id = column_id
        super().__init__(f"Task {task_id} not found in column {column_id}")


class BoardImportError(BoardError):
    """Raised when an import payload is unparsable or structurally invalid."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error importing board: {reason}")


class PersistenceError(BoardError):
    """Raised when the persistence store cannot be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
