"""
Run-timer boundary: the state enum, the three commands, the abstract
collaborator, and an in-process implementation.
"""

from .base import UNSTARTED_STATES, AbstractTimer, TimerCommand, TimerState
from .local_timer import LocalTimer, format_duration

__all__ = [
    "UNSTARTED_STATES",
    "AbstractTimer",
    "TimerCommand",
    "TimerState",
    "LocalTimer",
    "format_duration",
]
