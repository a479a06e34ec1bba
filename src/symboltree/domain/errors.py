from __future__ import annotations

"""
Domain Exception Hierarchy.

Every failure raised by the package derives from SymbolTreeError so that
interface layers can trap a single base class and map it to exit codes or
error snapshots.
"""

from typing import Optional


class SymbolTreeError(Exception):
    """Base class for all package errors."""


class ConfigurationError(SymbolTreeError):
    """Raised when mandatory build configuration is missing or invalid."""


class IngestError(SymbolTreeError):
    """Raised when the streamed data feed cannot be consumed."""


class MalformedRecordError(IngestError):
    """
    A line of the feed could not be decoded as a JSON record.

    Attributes:
        line_number: 1-based position of the offending line in the feed.
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class DataSourceError(IngestError):
    """Raised when the underlying byte source fails (network or disk)."""
