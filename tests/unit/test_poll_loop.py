"""
Unit tests for climb_splitter/runtime/

Coverage plan
─────────────
AttachSession.tick   → resolve → sample → step → timer commands
unresolved ticks     → skipped, previous snapshot kept
PollLoop.run_attached→ exits on process exit / ProcessGoneError, closes handle
PollLoop.run         → fresh state per attach, max_sessions, stop()
full profile         → DEFAULT_PROFILE driven through planted memory
"""

import math
from typing import Callable, Optional

import pytest

from climb_splitter.memory.models import ValueKind
from climb_splitter.profiles.builtin import DEFAULT_PROFILE
from climb_splitter.runtime.poll_loop import AttachSession, PollLoop
from climb_splitter.timer.base import TimerCommand, TimerState
from climb_splitter.timer.local_timer import LocalTimer

from conftest import FakeHandle, FakeMemory, PlayerRig


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

class Script:
    """
    Plays one frame of player state per sleep() call.

    After the last frame the handle reports the process as exited, which
    ends run_attached() without any real waiting.
    """

    def __init__(self, rig: PlayerRig, handle: FakeHandle, frames: list,
                 on_frame: Optional[Callable[[int], None]] = None) -> None:
        self.rig = rig
        self.handle = handle
        self.frames = list(frames)
        self.index = 0
        self.on_frame = on_frame
        self.sleeps: list[float] = []
        self._apply()

    def _apply(self) -> None:
        frame = self.frames[self.index]
        if frame is None:
            self.rig.break_chain()
        else:
            self.rig.set(**frame)
        if self.on_frame is not None:
            self.on_frame(self.index)

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.index += 1
        if self.index >= len(self.frames):
            self.handle.alive = False
            return
        self._apply()


@pytest.fixture
def timer() -> LocalTimer:
    return LocalTimer(segment_names=["A", "B"], clock=lambda: 0.0)


def _loop(profile, timer, script: Script) -> PollLoop:
    return PollLoop(profile, timer, attach=lambda: None, sleep=script.sleep, tick_interval=0.25)


# ─────────────────────────────────────────────────────────────────────────────
# 1. AttachSession
# ─────────────────────────────────────────────────────────────────────────────

class TestAttachSession:

    def test_tick_samples_and_starts(self, handle, rig, mini_profile, timer):
        session = AttachSession(handle, mini_profile)
        rig.set(x=0.0, y=0.5)
        session.tick(timer)
        rig.set(x=0.0, y=0.5, left=3)
        outcome = session.tick(timer)
        assert outcome.resolved
        assert outcome.commands == [TimerCommand.START]
        assert outcome.snapshot.left_grab == 3
        assert timer.state() is TimerState.RUNNING

    def test_unresolved_tick_is_skipped(self, handle, rig, mini_profile, timer):
        session = AttachSession(handle, mini_profile)
        rig.set(x=0.0, y=0.5)
        session.tick(timer)
        before = session.machine.previous

        rig.break_chain()
        outcome = session.tick(timer)
        assert not outcome.resolved
        assert outcome.snapshot is None
        assert session.machine.previous is before

    def test_resolve_objects(self, handle, rig, mini_profile):
        objects = AttachSession(handle, mini_profile).resolve_objects()
        assert objects["body"].address == rig.body

    def test_resolve_objects_none_when_missing(self, handle, mini_profile):
        assert AttachSession(handle, mini_profile).resolve_objects() is None


# ─────────────────────────────────────────────────────────────────────────────
# 2. PollLoop.run_attached
# ─────────────────────────────────────────────────────────────────────────────

class TestRunAttached:

    def test_full_run(self, handle, rig, mini_profile, timer):
        frames = [
            dict(y=0.5),
            dict(y=0.5, left=1),          # start
            dict(y=10.0, left=1),
            dict(y=32.0, right=2),        # split A
            dict(x=-1.0, y=56.0, left=1), # split B, run ends
        ]
        script = Script(rig, handle, frames)
        _loop(mini_profile, timer, script).run_attached(handle)
        assert timer.state() is TimerState.ENDED
        assert len(timer.splits) == 2
        assert script.sleeps == [0.25] * len(frames)

    def test_reset_issued_once_for_consecutive_falls(self, handle, rig, mini_profile):
        applied = []
        timer = LocalTimer(clock=lambda: 0.0)
        real_apply = timer.apply
        timer.apply = lambda cmd: (applied.append(cmd), real_apply(cmd))

        frames = [dict(y=0.5), dict(y=0.5, left=1), dict(y=-5.0), dict(y=-5.0)]
        _loop(mini_profile, timer, Script(rig, handle, frames)).run_attached(handle)
        assert applied == [TimerCommand.START, TimerCommand.RESET]

    def test_skipped_ticks_do_not_touch_timer(self, handle, rig, mini_profile, timer):
        frames = [dict(y=0.5), dict(y=0.5, left=1), None, None]
        _loop(mini_profile, timer, Script(rig, handle, frames)).run_attached(handle)
        assert timer.state() is TimerState.RUNNING

    def test_process_gone_mid_tick(self, handle, rig, mini_profile, timer):
        def on_frame(index):
            if index == 2:
                handle.memory.gone = True

        frames = [dict(y=0.5)] * 5
        script = Script(rig, handle, frames, on_frame=on_frame)
        loop = _loop(mini_profile, timer, script)
        loop.run_attached(handle)
        assert len(script.sleeps) == 2
        assert handle.closed

    def test_closes_handle_on_exit(self, handle, rig, mini_profile, timer):
        _loop(mini_profile, timer, Script(rig, handle, [dict(y=0.5)])).run_attached(handle)
        assert handle.closed

    def test_stop_ends_loop(self, handle, rig, mini_profile, timer):
        loop = None

        def on_frame(index):
            if index == 1:
                loop.stop()

        script = Script(rig, handle, [dict(y=0.5)] * 10, on_frame=on_frame)
        loop = _loop(mini_profile, timer, script)
        loop.run_attached(handle)
        assert len(script.sleeps) == 1


# ─────────────────────────────────────────────────────────────────────────────
# 3. PollLoop.run
# ─────────────────────────────────────────────────────────────────────────────

class TestRun:

    def test_attach_none_ends_run(self, mini_profile, timer):
        assert PollLoop(mini_profile, timer, attach=lambda: None).run() == 0

    def test_fresh_state_per_attach(self, mini_profile):
        timer = LocalTimer(segment_names=["A", "B", "C"], clock=lambda: 0.0)
        sessions = []

        def make_handle(frames):
            memory = FakeMemory()
            handle = FakeHandle(memory)
            script = Script(PlayerRig(memory), handle, frames)
            return handle, script

        # first attach: start and reach zone A, then the game closes
        h1, s1 = make_handle([dict(y=0.5), dict(y=0.5, left=1), dict(y=32.0, left=1)])
        # second attach: standing in zone A again must split it again
        h2, s2 = make_handle([dict(y=32.0, left=1)])
        handles = iter([(h1, s1), (h2, s2)])

        def attach():
            handle, script = next(handles)
            loop._sleep = script.sleep
            sessions.append(handle)
            return handle

        loop = PollLoop(mini_profile, timer, attach=attach)
        assert loop.run(max_sessions=2) == 2
        assert len(timer.splits) == 2
        assert all(h.closed for h in sessions)

    def test_max_sessions(self, mini_profile, timer):
        attached = []

        def attach():
            memory = FakeMemory()
            handle = FakeHandle(memory)
            handle.alive = False
            attached.append(handle)
            return handle

        loop = PollLoop(mini_profile, timer, attach=attach, sleep=lambda s: None)
        assert loop.run(max_sessions=3) == 3
        assert len(attached) == 3


# ─────────────────────────────────────────────────────────────────────────────
# 4. DEFAULT_PROFILE end to end
# ─────────────────────────────────────────────────────────────────────────────

class GameRig:
    """Plants the shipped profile's third controller chain and first position chain."""

    def __init__(self, memory: FakeMemory) -> None:
        self.memory = memory
        controller = DEFAULT_PROFILE.table("animation_controller")[2]
        position = DEFAULT_PROFILE.table("position_object")[0]

        # controller +0x20 -> left hand, +0x18 -> right hand
        self.controller = memory.plant_chain(controller.chain.offsets)
        left_hand, right_hand = memory.alloc(), memory.alloc()
        memory.write_pointer(self.controller + 0x20, left_hand)
        memory.write_pointer(self.controller + 0x18, right_hand)
        memory.plant_path(left_hand, (0x18, 0x18, 0x18, 0xC0), ValueKind.F32, 75.0)
        self.left = memory.plant_path(left_hand, (0xA0, 0x34), ValueKind.U32, 0)
        self.right = memory.plant_path(right_hand, (0xA0, 0x34), ValueKind.U32, 0)

        self.body = memory.plant_chain(position.chain.offsets)
        memory.write(self.body + 0xE8, ValueKind.F32, -0.5)

    def set(self, x=0.0, y=0.0, left=0, right=0) -> None:
        self.memory.write(self.body + 0xE0, ValueKind.F32, x)
        self.memory.write(self.body + 0xE4, ValueKind.F32, y)
        self.memory.write(self.left, ValueKind.U32, left)
        self.memory.write(self.right, ValueKind.U32, right)


class TestDefaultProfile:

    def test_resolves_expected_candidates(self, memory, handle):
        GameRig(memory).set()
        session = AttachSession(handle, DEFAULT_PROFILE)
        objects = session.resolve_objects()
        assert objects["animation_controller"].index == 2
        assert objects["position_object"].index == 0

    def test_start_then_mountain_split(self, memory, handle):
        game = GameRig(memory)
        timer = LocalTimer(segment_names=DEFAULT_PROFILE.zone_names, clock=lambda: 0.0)
        session = AttachSession(handle, DEFAULT_PROFILE)

        game.set(y=0.8)
        session.tick(timer)
        game.set(y=0.8, right=0x3C)
        assert session.tick(timer).commands == [TimerCommand.START]
        game.set(x=2.0, y=31.5, right=0x3C)
        assert session.tick(timer).commands == [TimerCommand.SPLIT]
        assert session.machine.last_split_zone.name == "Mountain"

    def test_unreadable_position_is_nan(self, memory, handle, timer):
        game = GameRig(memory)
        game.set(y=0.8)
        memory.unmap(game.body + 0xE4)
        outcome = AttachSession(handle, DEFAULT_PROFILE).tick(timer)
        assert outcome.resolved
        assert math.isnan(outcome.snapshot.position_y)
