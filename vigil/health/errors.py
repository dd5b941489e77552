"""Error types and the error-kind vocabulary checks may report."""

from __future__ import annotations

from enum import Enum


class VigilError(Exception):
    """Base class for errors raised by the package."""


class InvalidCheckError(VigilError, TypeError):
    """Raised by ``add_check`` when the object cannot be called with a report context."""


class CheckFileError(VigilError, ValueError):
    """Raised when a check file parses but does not have the expected structure."""


class ErrorKind(str, Enum):
    """Well-known failures. Rendered to text through a message catalog."""

    DATABASE_UNAVAILABLE = "database_unavailable"


DEFAULT_MESSAGES: dict[str, str] = {
    ErrorKind.DATABASE_UNAVAILABLE.value: "Unable to connect to the database.",
}
