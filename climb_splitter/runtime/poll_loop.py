"""
PollLoop — drives one tick per scheduling interval:

    resolve (cached) -> sample -> evaluate state machine -> send commands -> sleep

The outer loop waits for the game, builds a fresh AttachSession, and runs
the inner loop until the process exits; then it starts over. Nothing
decided in one attach (cached addresses, zone progress, previous
snapshot) survives into the next. The `sleep` call is the single
suspension point per iteration; there are no threads.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from climb_splitter.exceptions import ProcessGoneError
from climb_splitter.memory.process import ProcessHandle, wait_for_attach
from climb_splitter.profiles.models import GameProfile
from climb_splitter.progress.state_machine import ProgressStateMachine
from climb_splitter.resolver.models import ResolvedObject
from climb_splitter.resolver.pointer_resolver import PointerResolver
from climb_splitter.sampler.models import Snapshot
from climb_splitter.sampler.state_sampler import StateSampler
from climb_splitter.timer.base import AbstractTimer, TimerCommand

__all__ = ["TickOutcome", "AttachSession", "PollLoop"]

logger = logging.getLogger(__name__)


@dataclass
class TickOutcome:
    """
    What one tick did.

    resolved — False when a target object could not be located; the
               state machine was not evaluated on that tick
    snapshot — the sample taken (None when unresolved)
    commands — timer commands sent, in order
    """
    resolved: bool
    snapshot: Optional[Snapshot] = None
    commands: list[TimerCommand] = field(default_factory=list)


class AttachSession:
    """All per-attach state: resolver cache, sampler and state machine."""

    def __init__(self, handle: ProcessHandle, profile: GameProfile) -> None:
        self.handle = handle
        self.profile = profile
        self.resolver = PointerResolver(handle.memory)
        self.sampler = StateSampler(handle.memory, profile.fields)
        self.machine = ProgressStateMachine(
            zones=profile.zones,
            start_max_y=profile.start_max_y,
            reset_below_y=profile.reset_below_y,
            reset_policies=profile.reset_policies,
        )

    def resolve_objects(self) -> Optional[dict[str, ResolvedObject]]:
        """Resolve every object table, or None if any is currently absent."""
        resolved: dict[str, ResolvedObject] = {}
        for table in self.profile.objects:
            obj = self.resolver.resolve(table)
            if obj is None:
                return None
            resolved[table.name] = obj
        return resolved

    def tick(self, timer: AbstractTimer) -> TickOutcome:
        """
        Run one iteration against *timer*.

        Raises:
            ProcessGoneError: the game exited mid-tick.
        """
        objects = self.resolve_objects()
        if objects is None:
            return TickOutcome(resolved=False)

        snapshot = self.sampler.sample(objects)
        commands = self.machine.step(snapshot, timer.state())
        logger.debug("%s", self.machine.describe(snapshot))

        for command in commands:
            timer.apply(command)
        return TickOutcome(resolved=True, snapshot=snapshot, commands=commands)


class PollLoop:
    """
    Attach-wait loop plus per-tick driver.

    Usage::

        loop = PollLoop(profile, LocalTimer(profile.zone_names))
        loop.run()            # blocks until stop() or Ctrl+C

    Usage (tests)::

        loop = PollLoop(profile, timer, attach=lambda: fake_handle,
                        sleep=lambda _s: None)
        loop.run_attached(fake_handle)
    """

    def __init__(
        self,
        profile: GameProfile,
        timer: AbstractTimer,
        attach: Optional[Callable[[], Optional[ProcessHandle]]] = None,
        sleep: Callable[[float], None] = time.sleep,
        tick_interval: float = 1.0 / 60.0,
        attach_poll_interval: float = 1.0,
    ) -> None:
        self._profile = profile
        self._timer = timer
        self._sleep = sleep
        self._tick_interval = tick_interval
        self._attach_poll_interval = attach_poll_interval
        self._attach = attach or self._wait_for_game
        self._stopped = False

    def stop(self) -> None:
        """Finish the current tick, then leave both loops."""
        self._stopped = True

    # ── Loops ─────────────────────────────────────────────────────────────

    def run(self, max_sessions: Optional[int] = None) -> int:
        """
        Outer loop: wait for the game, run a session, repeat.

        Returns the number of attach sessions that were run.
        """
        sessions = 0
        while not self._stopped:
            if max_sessions is not None and sessions >= max_sessions:
                break
            handle = self._attach()
            if handle is None:
                break
            sessions += 1
            self.run_attached(handle)
        return sessions

    def run_attached(self, handle: ProcessHandle) -> None:
        """Inner loop for one attach; returns when the process is gone."""
        session = AttachSession(handle, self._profile)
        logger.info("Tracking %s with profile %s", handle, self._profile.name)
        try:
            while not self._stopped:
                if not handle.is_alive():
                    logger.info("%s exited", handle)
                    break
                try:
                    session.tick(self._timer)
                except ProcessGoneError as exc:
                    logger.info("Lost process: %s", exc)
                    break
                self._sleep(self._tick_interval)
        finally:
            handle.close()

    # ── Private helpers ───────────────────────────────────────────────────

    def _wait_for_game(self) -> Optional[ProcessHandle]:
        return wait_for_attach(
            self._profile.process_name,
            poll_interval=self._attach_poll_interval,
            sleep=self._sleep,
            should_stop=lambda: self._stopped,
        )
