"""Tests for progress reporters and GridIOSettings."""

from __future__ import annotations

import logging

import pytest

from infrastructure.raster.progress import LoggingProgress, NullProgress
from infrastructure.raster.settings import GridIOSettings


# ---------------------------------------------------------------------------
# Progress reporters
# ---------------------------------------------------------------------------
def test_null_progress_measures_time():
    progress = NullProgress()
    progress.start(10)
    progress.update(5)
    assert progress.stop() >= 0.0


def test_null_progress_stop_without_start():
    assert NullProgress().stop() == 0.0


def test_logging_progress_milestones(caplog):
    log = logging.getLogger("tests.progress")
    caplog.set_level("INFO", logger="tests.progress")
    progress = LoggingProgress(step_pct=25, log=log)

    progress.start(100)
    for current in (0, 10, 25, 30, 80, 100):
        progress.update(current)
    progress.stop()

    messages = [r.getMessage() for r in caplog.records]
    assert messages[:3] == [
        "Progress: 25% (25/100 cells)",
        "Progress: 80% (80/100 cells)",
        "Progress: 100% (100/100 cells)",
    ]
    assert messages[3].startswith("Finished 100 cells in ")


def test_logging_progress_empty_total(caplog):
    caplog.set_level("INFO")
    progress = LoggingProgress()
    progress.start(0)
    progress.update(0)
    assert "Progress:" not in caplog.text


@pytest.mark.parametrize("step", [0, 101])
def test_logging_progress_rejects_bad_step(step):
    with pytest.raises(ValueError, match="step_pct"):
        LoggingProgress(step_pct=step)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
def test_settings_defaults():
    settings = GridIOSettings()
    assert settings.precision == 8
    assert settings.binary_precision == 10
    assert settings.omniglyph_suffix == ".omg"
    assert settings.byteorder_label == "LSBFIRST"
    assert settings.max_bytes is None
    assert settings.strict_size is True


def test_settings_from_env():
    settings = GridIOSettings.from_env(
        {
            "GRIDIO_PRECISION": "3",
            "GRIDIO_MAX_BYTES": "1024",
            "GRIDIO_STRICT_SIZE": "0",
        }
    )
    assert settings.precision == 3
    assert settings.max_bytes == 1024
    assert settings.strict_size is False


def test_settings_from_process_env(monkeypatch):
    monkeypatch.setenv("GRIDIO_PRECISION", "5")
    monkeypatch.delenv("GRIDIO_MAX_BYTES", raising=False)
    monkeypatch.delenv("GRIDIO_STRICT_SIZE", raising=False)
    assert GridIOSettings.from_env().precision == 5


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("0", False),
        ("false", False),
        ("no", False),
        ("off", False),
        ("1", True),
        ("true", True),
        ("yes", True),
        ("on", True),
    ],
)
def test_settings_strict_size_from_env(raw, expected):
    settings = GridIOSettings.from_env({"GRIDIO_STRICT_SIZE": raw})
    assert settings.strict_size is expected


@pytest.mark.parametrize(
    "env",
    [
        {"GRIDIO_PRECISION": "-1"},
        {"GRIDIO_MAX_BYTES": "0"},
        {"GRIDIO_PRECISION": "x"},
        {"GRIDIO_STRICT_SIZE": "maybe"},
    ],
)
def test_settings_from_env_invalid(env):
    with pytest.raises(ValueError):
        GridIOSettings.from_env(env)


def test_settings_frozen():
    with pytest.raises(ValueError):
        GridIOSettings().precision = 2
