"""Configuration for the grid readers and writers.

Environment variables (read by GridIOSettings.from_env):
    GRIDIO_PRECISION: default decimal digits for text grids (int >= 0)
    GRIDIO_MAX_BYTES: memory budget for grids created by readers (int > 0)
    GRIDIO_STRICT_SIZE: boolean ('0', 'false', 'no', 'off' read short/long
        binary payloads best-effort; '1', 'true', 'yes', 'on' reject them)
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from domain.raster.value_objects import LSB_FIRST, OMNIGLYPH_SUFFIX


class GridIOSettings(BaseModel):
    """Settings shared by all grid adapters.

    Attributes:
        precision: Decimal digits for ArcGrid/OmniGlyph values when the caller
            does not pass one
        binary_precision: Decimal digits for `.hdr` metadata values
        omniglyph_suffix: File-name suffix that selects OmniGlyph syntax
        byteorder_label: Label written to `.hdr` BYTEORDER (never computed)
        max_bytes: Optional memory budget for grids created by readers
        strict_size: Reject binary payloads whose length does not match the header
    """

    precision: int = Field(default=8, ge=0)
    binary_precision: int = Field(default=10, ge=0)
    omniglyph_suffix: str = OMNIGLYPH_SUFFIX
    byteorder_label: str = LSB_FIRST
    max_bytes: int | None = Field(default=None, gt=0)
    strict_size: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GridIOSettings":
        """Build settings from GRIDIO_* environment variables.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        if "GRIDIO_PRECISION" in env:
            overrides["precision"] = env["GRIDIO_PRECISION"]
        if "GRIDIO_MAX_BYTES" in env:
            overrides["max_bytes"] = env["GRIDIO_MAX_BYTES"]
        if "GRIDIO_STRICT_SIZE" in env:
            overrides["strict_size"] = env["GRIDIO_STRICT_SIZE"]
        return cls(**overrides)
