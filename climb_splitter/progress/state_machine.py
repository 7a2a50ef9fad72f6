"""
ProgressStateMachine — turns per-tick Snapshots into timer commands.

Decisions per tick, evaluated against the timer state read at the start
of the tick:

  start  when the timer is NOT_RUNNING / ENDED / UNKNOWN and a hand goes
         from "nothing grabbed" to "something grabbed" near the ground
  split  when the timer is RUNNING and the first not-yet-reached zone in
         table order contains the player (at most one zone per tick)
  reset  when the timer is anything but NOT_RUNNING, no start was issued
         this tick, and an enabled reset policy fires

Zone progress is cleared on an issued start and on an issued reset,
nowhere else.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from climb_splitter.sampler.models import Snapshot
from climb_splitter.timer.base import UNSTARTED_STATES, TimerCommand, TimerState
from .models import ResetPolicy, Zone, ZoneProgress

__all__ = ["ProgressStateMachine"]

logger = logging.getLogger(__name__)


class ProgressStateMachine:
    """
    Monotonic run-progress tracker for one attach session.

    Args:
        zones:          ordered transition table (level traversal order)
        start_max_y:    a start only counts while position_y is below this
        reset_below_y:  POSITION policy fires when position_y drops below this
        reset_policies: enabled abort detectors (POSITION by default)
    """

    def __init__(
        self,
        zones: Sequence[Zone],
        start_max_y: float = 2.0,
        reset_below_y: float = -3.0,
        reset_policies: Sequence[ResetPolicy] = (ResetPolicy.POSITION,),
    ) -> None:
        self._zones = tuple(zones)
        self._progress = ZoneProgress(len(self._zones))
        self._start_max_y = start_max_y
        self._reset_below_y = reset_below_y
        self._reset_policies = frozenset(reset_policies)
        self._previous = Snapshot()
        self.last_split_zone: Optional[Zone] = None

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def progress(self) -> ZoneProgress:
        return self._progress

    @property
    def previous(self) -> Snapshot:
        """Snapshot consumed by the last step(); the "old state" of the next one."""
        return self._previous

    @property
    def current_zone(self) -> Optional[Zone]:
        """Next zone the runner has yet to reach, or None once all are credited."""
        index = self._progress.next_unreached()
        return None if index is None else self._zones[index]

    # ── Predicates ────────────────────────────────────────────────────────

    def should_start(self, old: Snapshot, new: Snapshot) -> bool:
        """
        Edge-triggered: neither hand held anything last tick and at least
        one does now. Grabbing with the second hand mid-climb never counts.
        """
        return not old.grabbing and new.grabbing and new.position_y < self._start_max_y

    def should_split(self, new: Snapshot) -> bool:
        """
        Credit the first unreached zone whose region holds the player.

        Table order is the tie-break: even when several thresholds are
        satisfied at once, only one bit is set per call.
        """
        for index, zone in enumerate(self._zones):
            if self._progress.is_reached(index):
                continue
            if zone.entered(new.position_x, new.position_y):
                self._progress.mark_reached(index)
                self.last_split_zone = zone
                return True
        return False

    def should_reset(self, old: Snapshot, new: Snapshot) -> bool:
        if ResetPolicy.POSITION in self._reset_policies:
            if new.position_y < self._reset_below_y:
                return True
        if ResetPolicy.LISTENING_FLAG in self._reset_policies:
            if old.is_listening is True and new.is_listening is False:
                return True
        return False

    # ── Tick ──────────────────────────────────────────────────────────────

    def step(self, new: Snapshot, timer_state: TimerState) -> list[TimerCommand]:
        """
        Evaluate one tick and return the commands to send, in order.

        *new* becomes the previous snapshot for the next call.
        """
        old = self._previous
        commands: list[TimerCommand] = []

        if timer_state in UNSTARTED_STATES and self.should_start(old, new):
            self._progress.clear()
            commands.append(TimerCommand.START)
            logger.info("Starting run")

        if timer_state is TimerState.RUNNING and self.should_split(new):
            commands.append(TimerCommand.SPLIT)
            logger.info("Splitting: %s (progress 0b%s)",
                        self.last_split_zone.name, format(self._progress.mask, "b"))

        # a run started this tick cannot also be aborted by it
        if (
            TimerCommand.START not in commands
            and timer_state is not TimerState.NOT_RUNNING
            and self.should_reset(old, new)
        ):
            self._progress.clear()
            commands.append(TimerCommand.RESET)
            logger.info("Resetting run")

        self._previous = new
        return commands

    def describe(self, snapshot: Snapshot) -> str:
        """One-line debug view: snapshot plus the progress mask."""
        upcoming = self.current_zone
        label = upcoming.name if upcoming is not None else "done"
        return f"{snapshot} - Zone: {self._progress.mask:#x} (next: {label})"
