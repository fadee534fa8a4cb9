"""Helpers shared by the grid adapters: file opening, header and cell formatting."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

import numpy as np
from pydantic import ValidationError

from domain.raster.errors import GridFileOpenError, HeaderParseError
from domain.raster.value_objects import CellKind, GridFileHeader, exact_integer

ARCGRID_KEYS: tuple[str, ...] = (
    "ncols",
    "nrows",
    "xllcorner",
    "yllcorner",
    "cellsize",
    "NODATA_value",
)
BINARY_KEYS: tuple[str, ...] = (*ARCGRID_KEYS, "BYTEORDER")

_FIELD_NAMES = {
    "ncols": "ncols",
    "nrows": "nrows",
    "xllcorner": "xllcorner",
    "yllcorner": "yllcorner",
    "cellsize": "cellsize",
    "NODATA_value": "no_data",
    "BYTEORDER": "byteorder",
}


@contextmanager
def open_grid_file(
    path: Path, mode: str, log: logging.Logger, **kwargs: Any
) -> Iterator[IO[Any]]:
    """Open path, turning OSError into GridFileOpenError.

    Only the file name is logged, never the full path.
    """
    log.debug("Opening %s (mode=%s)", path.name, mode)
    try:
        fh = open(path, mode, **kwargs)
    except OSError as e:
        log.error(
            "Failed to open %s (errno=%s, strerror=%s)",
            path.name,
            getattr(e, "errno", "unknown"),
            getattr(e, "strerror", "unknown"),
        )
        raise GridFileOpenError(path, e.strerror or str(e)) from e
    with fh:
        yield fh


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------
def format_fixed(value: Any, precision: int) -> str:
    """Fixed-point rendering with `precision` decimal digits.

    Integers are spelled exactly, with zero decimals appended.
    """
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        digits = "." + "0" * precision if precision else ""
        return f"{int(value)}{digits}"
    return f"{float(value):.{precision}f}"


def cell_renderer(kind: CellKind, precision: int) -> Callable[[Any], str]:
    """Return a function rendering one cell value for a text grid.

    INTEGER cells are truncated toward zero; non-finite values fall back to
    their float spelling.
    """
    if kind is CellKind.INTEGER:

        def render_int(value: Any) -> str:
            if isinstance(value, (int, np.integer)):
                return str(int(value))
            fval = float(value)
            if not math.isfinite(fval):
                return str(fval)
            return str(int(fval))

        return render_int

    def render_float(value: Any) -> str:
        return format_fixed(value, precision)

    return render_float


def header_line(key: str, value: str) -> str:
    """One `key<TAB>value` header line; short keys get a second tab."""
    sep = "\t\t" if len(key) < 8 else "\t"
    return f"{key}{sep}{value}\n"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------
def decode_header_text(path: Path, raw: bytes, where: str = "") -> str:
    """Decode raw header bytes as UTF-8.

    Raises:
        HeaderParseError: If the bytes are not valid UTF-8
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HeaderParseError(
            path, f"{where}undecodable byte 0x{raw[e.start]:02x} at offset {e.start}"
        ) from e


def parse_no_data(raw: str) -> int | float:
    """Parse a NODATA_value, keeping whole numbers as exact ints."""
    try:
        return exact_integer(raw)
    except ValueError:
        return float(raw)


def header_from_pairs(
    path: Path,
    pairs: Sequence[tuple[str, str]],
    keys: Sequence[str],
    case_sensitive: bool = True,
) -> GridFileHeader:
    """Validate key/value pairs against the expected key order.

    Raises:
        HeaderParseError: On a missing, extra, misnamed or mistyped field
    """
    if len(pairs) != len(keys):
        raise HeaderParseError(
            path, f"expected {len(keys)} fields, found {len(pairs)}"
        )

    values: dict[str, Any] = {}
    for (key, raw), expected in zip(pairs, keys):
        found = key if case_sensitive else key.lower()
        want = expected if case_sensitive else expected.lower()
        if found != want:
            raise HeaderParseError(path, f"expected '{expected}', found '{key}'")
        field = _FIELD_NAMES[expected]
        try:
            if field in ("ncols", "nrows"):
                values[field] = int(raw)
            elif field == "byteorder":
                values[field] = raw
            elif field == "no_data":
                values[field] = parse_no_data(raw)
            else:
                values[field] = float(raw)
        except ValueError as e:
            raise HeaderParseError(path, f"bad value for {expected}: '{raw}'") from e

    try:
        return GridFileHeader(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise HeaderParseError(path, f"{field}: {error['msg']}") from e


def pairs_from_tokens(path: Path, tokens: Sequence[str]) -> list[tuple[str, str]]:
    """Group whitespace tokens into (key, value) pairs.

    Raises:
        HeaderParseError: If a key has no value
    """
    if len(tokens) % 2:
        raise HeaderParseError(path, f"odd number of tokens ({len(tokens)})")
    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]
