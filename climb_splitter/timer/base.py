"""Abstract base class for the run timer the splitter drives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from climb_splitter.exceptions import TimerError

__all__ = ["TimerState", "TimerCommand", "AbstractTimer", "UNSTARTED_STATES"]


class TimerState(str, Enum):
    NOT_RUNNING = "not_running"
    RUNNING     = "running"
    PAUSED      = "paused"
    ENDED       = "ended"
    UNKNOWN     = "unknown"


# States from which a new run may be started.
UNSTARTED_STATES = frozenset({
    TimerState.NOT_RUNNING,
    TimerState.ENDED,
    TimerState.UNKNOWN,
})


class TimerCommand(str, Enum):
    """The only three commands ever sent to a timer."""
    START = "start"
    SPLIT = "split"
    RESET = "reset"


class AbstractTimer(ABC):
    """
    External run timer.

    Implementations must treat a command issued in an incompatible state
    as a no-op; callers still gate on state() so such calls are rare.
    """

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def split(self) -> None: ...

    @abstractmethod
    def reset(self) -> None: ...

    @abstractmethod
    def state(self) -> TimerState:
        """Current phase as reported by the timer."""

    def apply(self, command: TimerCommand) -> None:
        """Dispatch one TimerCommand to the matching method."""
        if command is TimerCommand.START:
            self.start()
        elif command is TimerCommand.SPLIT:
            self.split()
        elif command is TimerCommand.RESET:
            self.reset()
        else:
            raise TimerError(f"Unknown timer command: {command!r}")
