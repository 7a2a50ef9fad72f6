"""Abstract base class for foreign-process memory access."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from climb_splitter.exceptions import MemoryReadError
from .models import ValueKind

__all__ = ["AbstractMemory"]


class AbstractMemory(ABC):
    """
    Read-only view of another process's address space.

    Concrete backends implement `module_base` and `read`; pointer walking
    is shared here so every backend (and every test fake) follows the
    same chain semantics.

    Raises
    ──────
    MemoryReadError          — address is unmapped / pointer is null
    ProcessGoneError         — the process exited mid-read
    GameModuleNotFoundError  — module_base() for a module that isn't loaded
    """

    @abstractmethod
    def module_base(self, name: str) -> int:
        """Return the load address of module *name* (e.g. "UnityPlayer.dll")."""

    @abstractmethod
    def read(self, address: int, kind: ValueKind) -> int | float:
        """Read one scalar of *kind* at *address*."""

    def read_pointer(self, address: int) -> int:
        """
        Read a 64-bit pointer at *address*.

        A null pointer is reported as MemoryReadError: nothing valid lives
        at address 0, and following it would only fail one step later.
        """
        value = int(self.read(address, ValueKind.U64))
        if value == 0:
            raise MemoryReadError(f"Null pointer at 0x{address:X}")
        return value

    def read_path(
        self,
        base: int,
        offsets: Sequence[int],
        kind: ValueKind,
    ) -> int | float:
        """
        Follow a pointer path and read the final value.

        base -> [+off0] -> [+off1] -> ... -> +offN, read *kind*

        Every offset except the last is added then dereferenced; the last
        offset is added but NOT dereferenced.
        """
        if not offsets:
            return self.read(base, kind)
        address = base
        for offset in offsets[:-1]:
            address = self.read_pointer(address + offset)
        return self.read(address + offsets[-1], kind)
