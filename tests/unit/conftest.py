"""
Shared test doubles: a dict-backed process address space and a handle
that can be told to "exit".
"""

from typing import Optional

import pytest

from climb_splitter.exceptions import GameModuleNotFoundError, MemoryReadError, ProcessGoneError
from climb_splitter.memory.base import AbstractMemory
from climb_splitter.memory.models import ProcessInfo, ValueKind
from climb_splitter.profiles.models import GameProfile
from climb_splitter.progress.models import Zone, ZoneRegion
from climb_splitter.resolver.models import Candidate, CandidateTable, PointerChain
from climb_splitter.sampler.models import FieldSpec

MODULE = "UnityPlayer.dll"
MODULE_BASE = 0x7FF6_0000_0000


# ─────────────────────────────────────────────────────────────────────────────
# Fakes
# ─────────────────────────────────────────────────────────────────────────────

class FakeMemory(AbstractMemory):
    """
    Address space made of explicitly written scalars.

    Reading an address that was never written raises MemoryReadError,
    exactly like an unmapped page in a real process.
    """

    def __init__(self, modules: Optional[dict[str, int]] = None) -> None:
        self.modules = dict(modules if modules is not None else {MODULE: MODULE_BASE})
        self.data: dict[int, bytes] = {}
        self.reads: list[int] = []
        self.gone = False
        self._next_alloc = 0x1000_0000

    # AbstractMemory

    def module_base(self, name: str) -> int:
        try:
            return self.modules[name]
        except KeyError:
            raise GameModuleNotFoundError(name) from None

    def read(self, address: int, kind: ValueKind):
        self.reads.append(address)
        if self.gone:
            raise ProcessGoneError("gone")
        data = self.data.get(address)
        if data is None or len(data) < kind.size:
            raise MemoryReadError(f"unmapped 0x{address:X}")
        return kind.decode(data)

    # Layout helpers

    def write(self, address: int, kind: ValueKind, value) -> None:
        self.data[address] = kind.encode(value)

    def write_pointer(self, address: int, target: int) -> None:
        self.write(address, ValueKind.U64, target)

    def unmap(self, address: int) -> None:
        self.data.pop(address, None)

    def alloc(self) -> int:
        address = self._next_alloc
        self._next_alloc += 0x10000
        return address

    def plant_chain(self, offsets, base: int = MODULE_BASE) -> int:
        """Lay out pointers so that following *offsets* from *base* ends at a new object."""
        address = base
        for offset in offsets:
            target = self.alloc()
            self.write_pointer(address + offset, target)
            address = target
        return address

    def plant_path(self, obj: int, path, kind: ValueKind, value) -> int:
        """Lay out *path* from *obj* (last offset not dereferenced) and write *value*."""
        address = obj
        for offset in path[:-1]:
            target = self.alloc()
            self.write_pointer(address + offset, target)
            address = target
        self.write(address + path[-1], kind, value)
        return address + path[-1]


class FakeHandle:
    """Stands in for ProcessHandle; `alive` is flipped by the test."""

    def __init__(self, memory: AbstractMemory, pid: int = 4242) -> None:
        self.info = ProcessInfo(pid=pid, name="game.exe")
        self.memory = memory
        self.alive = True
        self.closed = False

    @property
    def pid(self) -> int:
        return self.info.pid

    def is_alive(self) -> bool:
        return self.alive

    def close(self) -> None:
        self.closed = True

    def __str__(self) -> str:
        return str(self.info)


class PlayerRig:
    """
    A single planted "body" object carrying every Snapshot field.

    Layout relative to the body:
        +0x10  f32  z sentinel (-0.5)
        +0x20  f32  x
        +0x24  f32  y
        +0x30  u32  left grab
        +0x34  u32  right grab
        +0x38  u8   listening flag
    """

    CHAIN = (0x100, 0x8)

    def __init__(self, memory: FakeMemory) -> None:
        self.memory = memory
        self.body = memory.plant_chain(self.CHAIN)
        memory.write(self.body + 0x10, ValueKind.F32, -0.5)
        self.set(x=0.0, y=0.0)

    def set(self, x: float = 0.0, y: float = 0.0, left: int = 0, right: int = 0,
            listening: Optional[int] = None) -> None:
        m = self.memory
        m.write(self.body + 0x20, ValueKind.F32, x)
        m.write(self.body + 0x24, ValueKind.F32, y)
        m.write(self.body + 0x30, ValueKind.U32, left)
        m.write(self.body + 0x34, ValueKind.U32, right)
        if listening is None:
            m.unmap(self.body + 0x38)
        else:
            m.write(self.body + 0x38, ValueKind.U8, listening)

    def break_chain(self) -> None:
        """Simulate the object being freed: chain and sentinel both gone."""
        self.memory.unmap(MODULE_BASE + self.CHAIN[0])
        self.memory.unmap(self.body + 0x10)


def make_mini_profile(with_listening: bool = True) -> GameProfile:
    """Two-zone profile reading everything from PlayerRig's body."""
    table = CandidateTable(
        name="body",
        module=MODULE,
        candidates=(
            Candidate(chain=PointerChain(PlayerRig.CHAIN), validation_path=(0x10,), expected=-0.5),
        ),
    )
    fields = [
        FieldSpec("position_x", "body", (0x20,), ValueKind.F32),
        FieldSpec("position_y", "body", (0x24,), ValueKind.F32),
        FieldSpec("left_grab",  "body", (0x30,), ValueKind.U32),
        FieldSpec("right_grab", "body", (0x34,), ValueKind.U32),
    ]
    if with_listening:
        fields.append(FieldSpec("listening", "body", (0x38,), ValueKind.U8))
    return GameProfile(
        name="mini",
        process_name="game.exe",
        module_name=MODULE,
        objects=(table,),
        fields=tuple(fields),
        zones=(
            Zone("A", ZoneRegion(y_min=31)),
            Zone("B", ZoneRegion(y_min=55, x_max=0)),
        ),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def memory() -> FakeMemory:
    return FakeMemory()


@pytest.fixture
def rig(memory) -> PlayerRig:
    return PlayerRig(memory)


@pytest.fixture
def handle(memory) -> FakeHandle:
    return FakeHandle(memory)


@pytest.fixture
def mini_profile() -> GameProfile:
    return make_mini_profile()
