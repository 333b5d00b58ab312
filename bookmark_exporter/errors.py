"""
Exception hierarchy for bookmark extraction and export.

Every error raised by the extraction pipeline derives from ExporterError so
callers can report any failure with a single handler.
"""
from pathlib import Path
from typing import Optional, Union


class ExporterError(Exception):
    """Base exception for bookmark exporter errors."""
    pass


class MissingEnvironmentError(ExporterError):
    """Raised when the home directory variable is not set."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Environment variable {variable} is not set")


class ProfileNotFoundError(ExporterError):
    """Raised when no browser profile directory matches the lookup pattern."""

    def __init__(self, pattern: Union[str, Path]):
        self.pattern = str(pattern)
        super().__init__(f"No profile directory matches '{self.pattern}'")


class StoreOpenError(ExporterError):
    """Raised when a bookmark store is missing, unreadable or of the wrong kind."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unable to open '{self.path}': {reason}")


class QueryError(ExporterError):
    """Raised when a bookmark database does not have the expected schema."""

    def __init__(self, path: Union[str, Path], query: str, reason: str):
        self.path = Path(path)
        self.query = " ".join(query.split())
        self.reason = reason
        super().__init__(f"Query failed on '{self.path}': {reason} [{self.query}]")


class ParseError(ExporterError):
    """Raised for malformed bookmark documents and malformed bookmark entries."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class OutputError(ExporterError, IOError):
    """Raised when the formatted output cannot be written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unable to write '{self.path}': {reason}")
