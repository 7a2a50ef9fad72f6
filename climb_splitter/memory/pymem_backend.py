"""
PymemMemory — AbstractMemory backed by pymem (Windows ReadProcessMemory).

NOTE: pymem only imports on Windows. The import is deferred to open();
      the constructor takes an already-open Pymem instance.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from climb_splitter.exceptions import (
    GameModuleNotFoundError,
    MemoryAccessError,
    MemoryReadError,
    ProcessGoneError,
)
from .base import AbstractMemory
from .models import ValueKind

__all__ = ["PymemMemory"]

logger = logging.getLogger(__name__)


class PymemMemory(AbstractMemory):
    """
    Reads the target process through an attached `pymem.Pymem` instance.

    Usage (production)::

        memory = PymemMemory.open(pid)
        base = memory.module_base("UnityPlayer.dll")

    Usage (tests)::

        pm = MagicMock()
        memory = PymemMemory(pm, module_lookup=lambda h, n: None,
                             read_errors=(FakeReadError,))
    """

    def __init__(
        self,
        pm: Any,
        module_lookup: Callable[[Any, str], Any],
        read_errors: tuple[type[BaseException], ...],
        is_alive: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._pm = pm
        self._module_lookup = module_lookup
        self._read_errors = read_errors
        self._is_alive = is_alive
        self._module_cache: dict[str, int] = {}

    @classmethod
    def open(
        cls,
        pid: int,
        is_alive: Optional[Callable[[], bool]] = None,
    ) -> "PymemMemory":
        """
        Attach to process *pid* with read access.

        Raises:
            MemoryAccessError: pymem is missing or the process can't be opened.
        """
        try:
            import pymem
            import pymem.exception
            import pymem.process
        except ImportError as exc:
            raise MemoryAccessError(
                "pymem is not installed (or this is not Windows). Run: pip install pymem"
            ) from exc

        try:
            pm = pymem.Pymem(pid)
        except pymem.exception.PymemError as exc:
            raise MemoryAccessError(f"Cannot open process {pid}: {exc}") from exc

        logger.debug("Opened process handle for PID %d", pid)
        return cls(
            pm,
            module_lookup=pymem.process.module_from_name,
            read_errors=(
                pymem.exception.MemoryReadError,
                pymem.exception.WinAPIError,
                pymem.exception.ProcessError,
            ),
            is_alive=is_alive,
        )

    # ── AbstractMemory ────────────────────────────────────────────────────

    def module_base(self, name: str) -> int:
        key = name.lower()
        if key in self._module_cache:
            return self._module_cache[key]

        module = self._module_lookup(self._pm.process_handle, name)
        if module is None:
            raise GameModuleNotFoundError(f"Module not loaded: {name}")

        base = int(module.lpBaseOfDll)
        self._module_cache[key] = base
        logger.debug("%s base: 0x%X", name, base)
        return base

    def read(self, address: int, kind: ValueKind) -> int | float:
        try:
            data = self._pm.read_bytes(address, kind.size)
        except self._read_errors as exc:
            if self._is_alive is not None and not self._is_alive():
                raise ProcessGoneError(f"Process exited while reading 0x{address:X}") from exc
            raise MemoryReadError(f"Cannot read {kind.value} at 0x{address:X}") from exc

        if data is None or len(data) < kind.size:
            raise MemoryReadError(f"Short read of {kind.value} at 0x{address:X}")
        return kind.decode(data)

    def close(self) -> None:
        """Release the process handle."""
        self._module_cache.clear()
        close = getattr(self._pm, "close_process", None)
        if close is not None:
            close()
