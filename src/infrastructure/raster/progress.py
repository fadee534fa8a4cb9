"""Progress reporters for long grid reads and writes.

Both reporters measure elapsed wall time; LoggingProgress additionally logs
percentage milestones. Adapters receive a reporter through their constructor
and call start/update/stop around the row loop.
"""

from __future__ import annotations

import logging
import time

logger = logging.getLogger(__name__)


class NullProgress:
    """Reporter that only measures elapsed time."""

    def __init__(self) -> None:
        self._started: float | None = None

    def start(self, total: int) -> None:
        self._started = time.perf_counter()

    def update(self, current: int) -> None:
        pass

    def stop(self) -> float:
        if self._started is None:
            return 0.0
        elapsed = time.perf_counter() - self._started
        self._started = None
        return elapsed


class LoggingProgress(NullProgress):
    """Reporter that logs every `step_pct` percent of completed cells.

    Parameters
    ----------
    step_pct: int
        Percentage between two log lines (1-100).
    log: logging.Logger | None
        Destination logger; defaults to this module's logger.
    level: int
        Level of the milestone messages.
    """

    def __init__(
        self,
        step_pct: int = 10,
        log: logging.Logger | None = None,
        level: int = logging.INFO,
    ) -> None:
        super().__init__()
        if not 1 <= step_pct <= 100:
            raise ValueError(f"step_pct must be in [1, 100], got {step_pct}")
        self.step_pct = step_pct
        self.log = log or logger
        self.level = level
        self._total = 0
        self._next_pct = step_pct

    def start(self, total: int) -> None:
        super().start(total)
        self._total = max(total, 0)
        self._next_pct = self.step_pct

    def update(self, current: int) -> None:
        if self._total == 0:
            return
        pct = current * 100 // self._total
        if pct < self._next_pct:
            return
        self.log.log(self.level, "Progress: %d%% (%d/%d cells)", pct, current, self._total)
        # Skip milestones already passed in one large step
        self._next_pct = (pct // self.step_pct + 1) * self.step_pct

    def stop(self) -> float:
        elapsed = super().stop()
        self.log.log(self.level, "Finished %d cells in %.3fs", self._total, elapsed)
        return elapsed
