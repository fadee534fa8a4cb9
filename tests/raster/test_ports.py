"""Adapters satisfy the domain ports."""

from __future__ import annotations

import pytest

from domain.raster.repositories import (
    BinaryGridSink,
    BinaryGridSource,
    ProgressReporter,
    TextGridSink,
    TextGridSource,
)
from infrastructure.raster import (
    AsciiGridReader,
    AsciiGridWriter,
    BinaryGridReader,
    BinaryGridWriter,
    LoggingProgress,
    NullProgress,
)


@pytest.mark.parametrize(
    "adapter,port",
    [
        (AsciiGridWriter(), TextGridSink),
        (AsciiGridReader(), TextGridSource),
        (BinaryGridWriter(), BinaryGridSink),
        (BinaryGridReader(), BinaryGridSource),
        (NullProgress(), ProgressReporter),
        (LoggingProgress(), ProgressReporter),
    ],
)
def test_adapter_implements_port(adapter, port):
    assert isinstance(adapter, port)


def test_writer_is_not_a_reader():
    assert not isinstance(AsciiGridWriter(), TextGridSource)
    assert not isinstance(BinaryGridWriter(), BinaryGridSource)
