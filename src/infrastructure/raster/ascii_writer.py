"""Text grid writer: ArcGrid-ASCII and OmniGlyph.

Lifecycle:
1) Resolve format (explicit `fmt`, else from the file suffix) and precision
2) Open destination (GridFileOpenError on failure, nothing is exited)
3) Write the format's header block
4) Stream rows in row-major order, y outer and x inner
5) Close the file and return a GridIOReport

A failure after step 2 leaves the partially written file in place; cleanup is
the caller's decision.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from domain.raster.repositories import ProgressReporter
from domain.raster.value_objects import (
    GridFileHeader,
    GridFormat,
    GridIOReport,
    RasterGrid,
)

from ._header import cell_renderer, format_fixed, header_line, open_grid_file
from .progress import NullProgress
from .settings import GridIOSettings

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

# Separators per format: (row prefix, cell separator)
_ROW_SYNTAX: dict[GridFormat, tuple[str, str]] = {
    GridFormat.ARCGRID: ("", " "),
    GridFormat.OMNIGLYPH: ("|", "|"),
}


class AsciiGridWriter:
    """Infrastructure adapter writing grids as human-readable text rasters.

    Parameters
    ----------
    settings: GridIOSettings | None
        Default precision and OmniGlyph suffix.
    progress: ProgressReporter | None
        Advisory progress sink; defaults to NullProgress.
    log: logging.Logger | None
        Diagnostic logger; defaults to this module's logger.
    """

    def __init__(
        self,
        settings: GridIOSettings | None = None,
        progress: ProgressReporter | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or GridIOSettings()
        self.progress = progress or NullProgress()
        self.log = log or logger

    def write_ascii(
        self,
        path: Path | str,
        grid: RasterGrid,
        precision: int | None = None,
        fmt: GridFormat | str | None = None,
    ) -> GridIOReport:
        """Write grid to path as ArcGrid-ASCII or OmniGlyph.

        Args:
            path: Destination file (created or overwritten)
            grid: Grid to write; not modified
            precision: Decimal digits for FLOAT cells and metadata
                (defaults to settings.precision)
            fmt: Explicit syntax; when None, a path ending in the OmniGlyph
                suffix selects OmniGlyph and anything else ArcGrid-ASCII

        Returns:
            GridIOReport for the written file

        Raises:
            ValueError: If precision is negative or the grid corners are
                not finite
            GridFileOpenError: If the destination cannot be opened
        """
        path = Path(path)
        if precision is None:
            precision = self.settings.precision
        if precision < 0:
            raise ValueError(f"precision must be non-negative, got {precision}")
        if fmt is None:
            fmt = GridFormat.from_path(path, self.settings.omniglyph_suffix)
        fmt = GridFormat(fmt)

        header = GridFileHeader.from_grid(grid)
        render = cell_renderer(grid.cell_kind, precision)
        started = time.perf_counter()

        with open_grid_file(path, "w", self.log, encoding="utf-8", newline="\n") as fout:
            if fmt is GridFormat.OMNIGLYPH:
                self.log.debug("%s: writing OmniGlyph header", path.name)
                fout.write(self._omniglyph_header(path, grid, render))
            else:
                self.log.debug("%s: writing ArcGrid ASCII header", path.name)
                fout.write(self._arcgrid_header(header, precision, render))

            prefix, sep = _ROW_SYNTAX[fmt]
            self.progress.start(grid.width * grid.height)
            for y in range(grid.height):
                self.progress.update(y * grid.width)
                cells = "".join(render(v) + sep for v in grid.data[y].tolist())
                fout.write(f"{prefix}{cells}\n")
            self.progress.update(grid.width * grid.height)
            self.progress.stop()

        elapsed = time.perf_counter() - started
        self.log.info(
            "%s: wrote %dx%d %s grid in %.3fs",
            path.name,
            grid.width,
            grid.height,
            fmt.value,
            elapsed,
        )
        return GridIOReport(
            paths=(path,),
            fmt=fmt.value,
            width=grid.width,
            height=grid.height,
            elapsed_s=elapsed,
        )

    @staticmethod
    def _arcgrid_header(
        header: GridFileHeader, precision: int, render: Callable[[Any], str]
    ) -> str:
        return "".join(
            (
                header_line("ncols", str(header.ncols)),
                header_line("nrows", str(header.nrows)),
                header_line("xllcorner", format_fixed(header.xllcorner, precision)),
                header_line("yllcorner", format_fixed(header.yllcorner, precision)),
                header_line("cellsize", format_fixed(header.cellsize, precision)),
                header_line("NODATA_value", render(header.no_data)),
            )
        )

    def _omniglyph_header(
        self, path: Path, grid: RasterGrid, render: Callable[[Any], str]
    ) -> str:
        lo, hi = grid.min(), grid.max()
        # Actual range spans the sentinel as well as the data
        actual_lo = grid.no_data if grid.no_data < lo else lo
        if grid.no_data > hi:
            self.log.warning(
                "%s: no_data %s exceeds data maximum %s",
                path.name,
                render(grid.no_data),
                render(hi),
            )
        lines = [
            "Contents: Pixel array",
            "",
            f"Width:    {grid.width}",
            f"Height:   {grid.height}",
            "",
            "Spectral bands:   1",
            "Bits per band:   32",
            f"Range of values:   {render(lo)},{render(hi)}",
            f"Actual range:   {render(actual_lo)},{render(hi)}",
            "Gamma exponent:   0.",
            "Resolution:   100 pixels per inch",
            "",
            "|",
        ]
        return "\n".join(lines) + "\n"
