"""Infrastructure adapters for the raster bounded context.

This module provides the readers and writers for text (ArcGrid-ASCII,
OmniGlyph) and binary (`.hdr` + `.flt`) grid files, plus the progress
reporters and settings they share.
"""

from .ascii_reader import AsciiGridReader
from .ascii_writer import AsciiGridWriter
from .binary_reader import BinaryGridReader
from .binary_writer import BinaryGridWriter
from .progress import LoggingProgress, NullProgress
from .settings import GridIOSettings

__all__ = [
    "AsciiGridReader",
    "AsciiGridWriter",
    "BinaryGridReader",
    "BinaryGridWriter",
    "GridIOSettings",
    "LoggingProgress",
    "NullProgress",
]
