"""
LocalTimer — in-process run timer used by the command-line runner.

Keeps the run phase, the start instant and one timestamp per split.
The run ends on its own once the final segment is split, mirroring how
a speedrun timer behaves after the last split.
"""

import logging
import time
from typing import Callable, Optional

from .base import AbstractTimer, TimerState

__all__ = ["LocalTimer", "format_duration"]

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS.mmm (hours omitted when zero)."""
    millis = int(round(seconds * 1000))
    hours, rem = divmod(millis, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}.{ms:03d}"
    return f"{minutes:02d}:{secs:02d}.{ms:03d}"


class LocalTimer(AbstractTimer):
    """
    Minimal timer that tracks one run at a time.

    segment_names  — labels for each split (the profile's zone names);
                     the run ENDS after len(segment_names) splits
    clock          — monotonic time source, injectable for tests
    """

    def __init__(
        self,
        segment_names: Optional[list[str]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._segments = list(segment_names or [])
        self._clock = clock
        self._state = TimerState.NOT_RUNNING
        self._started_at: Optional[float] = None
        self._splits: list[float] = []

    # ── AbstractTimer ─────────────────────────────────────────────────────

    def state(self) -> TimerState:
        return self._state

    def start(self) -> None:
        if self._state is TimerState.RUNNING:
            logger.debug("start() ignored: already running")
            return
        self._state = TimerState.RUNNING
        self._started_at = self._clock()
        self._splits = []
        logger.info("Run started")

    def split(self) -> None:
        if self._state is not TimerState.RUNNING:
            logger.debug("split() ignored: timer is %s", self._state.value)
            return
        now = self.elapsed()
        self._splits.append(now)
        label = self._segment_label(len(self._splits) - 1)
        logger.info("Split %d %s  %s", len(self._splits), label, format_duration(now))
        if self._segments and len(self._splits) >= len(self._segments):
            self._state = TimerState.ENDED
            logger.info("Run finished in %s", format_duration(now))

    def reset(self) -> None:
        if self._state is TimerState.NOT_RUNNING:
            logger.debug("reset() ignored: not running")
            return
        logger.info("Run reset after %d split(s)", len(self._splits))
        self._state = TimerState.NOT_RUNNING
        self._started_at = None
        self._splits = []

    # ── Queries ───────────────────────────────────────────────────────────

    @property
    def splits(self) -> list[float]:
        """Elapsed seconds at each split of the current run."""
        return list(self._splits)

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        if self._state is TimerState.ENDED and self._splits:
            return self._splits[-1]
        return self._clock() - self._started_at

    def _segment_label(self, index: int) -> str:
        if 0 <= index < len(self._segments):
            return self._segments[index]
        return f"#{index + 1}"
