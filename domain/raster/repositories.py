"""Domain Port(s) for Raster Grid I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .value_objects import GridFormat, GridIOReport, RasterGrid


@runtime_checkable
class ProgressReporter(Protocol):
    """Advisory progress/timing sink injected into readers and writers.

    Implementations must not affect the outcome of an operation.
    """

    def start(self, total: int) -> None: ...

    def update(self, current: int) -> None: ...

    def stop(self) -> float:
        """Finish reporting and return elapsed seconds since start()."""
        ...


@runtime_checkable
class TextGridSink(Protocol):
    """Port for writing a grid to a text raster (ArcGrid-ASCII or OmniGlyph)."""

    def write_ascii(
        self,
        path: Path | str,
        grid: RasterGrid,
        precision: int | None = None,
        fmt: GridFormat | None = None,
    ) -> GridIOReport: ...


@runtime_checkable
class TextGridSource(Protocol):
    """Port for reading an ArcGrid-ASCII raster into a grid (mutated in place)."""

    def read_ascii(self, path: Path | str, grid: RasterGrid) -> GridIOReport: ...


@runtime_checkable
class BinaryGridSink(Protocol):
    """Port for writing a `.hdr` + `.flt` binary pair."""

    def write_binary(self, basename: Path | str, grid: RasterGrid) -> GridIOReport: ...


@runtime_checkable
class BinaryGridSource(Protocol):
    """Port for reading a `.hdr` + `.flt` binary pair into a grid (mutated in place)."""

    def read_binary(self, basename: Path | str, grid: RasterGrid) -> GridIOReport: ...
