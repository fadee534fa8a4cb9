"""Raster Bounded Context - Error Hierarchy.

Custom exceptions for grid file I/O. Every failure in the readers and writers
is raised to the caller; nothing here terminates the process or cleans up
partially written files.
"""

from __future__ import annotations

from pathlib import Path


class RasterIOError(Exception):
    """Base error for raster grid I/O."""


class GridFileOpenError(RasterIOError):
    """A grid file could not be opened for reading or writing.

    Attributes:
        path: The file that failed to open
        reason: Short description from the underlying OSError
    """

    def __init__(self, path: Path | str, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Cannot open {self.path.name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class HeaderParseError(RasterIOError):
    """Grid header is malformed, incomplete or has extra fields."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid header in {self.path.name}: {reason}")


class GridParseError(RasterIOError):
    """A cell value in a text grid could not be parsed."""


class SizeMismatchError(RasterIOError):
    """Payload length does not match the declared grid dimensions.

    Attributes:
        path: The payload file
        expected: Expected size (bytes for binary payloads, cells for text)
        actual: Size actually found
    """

    def __init__(
        self, path: Path | str, expected: int, actual: int, unit: str = "bytes"
    ) -> None:
        self.path = Path(path)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{self.path.name}: expected {expected} {unit}, found {actual}"
        )


class InsufficientMemoryError(RasterIOError):
    """Declared grid requires more memory than the configured budget."""


class InvalidGridError(RasterIOError, ValueError):
    """Grid metadata or cell storage violates the grid invariants."""
