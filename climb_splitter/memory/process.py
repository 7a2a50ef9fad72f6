"""
Process discovery and lifecycle via psutil.

wait_for_attach() blocks (polling at a fixed interval) until the named
process is running and a memory backend could be opened against it.
ProcessHandle.is_alive() is the only cancellation signal the poll loop
listens to.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import psutil

from climb_splitter.exceptions import MemoryAccessError, ProcessNotFoundError
from .base import AbstractMemory
from .models import ProcessInfo

__all__ = ["ProcessHandle", "find_process", "open_process", "wait_for_attach"]

logger = logging.getLogger(__name__)


@dataclass
class ProcessHandle:
    """An attached target process plus the memory view opened on it."""
    info:   ProcessInfo
    memory: AbstractMemory
    _proc:  Optional[psutil.Process] = field(default=None, repr=False)

    @property
    def pid(self) -> int:
        return self.info.pid

    def is_alive(self) -> bool:
        """
        True while the process with this PID is still running.

        AccessDenied only means the status query was refused; the PID
        table decides in that case.
        """
        try:
            proc = self._proc or psutil.Process(self.info.pid)
            self._proc = proc
            return proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            return psutil.pid_exists(self.info.pid)

    def close(self) -> None:
        close = getattr(self.memory, "close", None)
        if close is not None:
            close()

    def __str__(self) -> str:
        return str(self.info)


def find_process(name: str) -> Optional[ProcessInfo]:
    """Return the first running process whose name matches *name* (case-insensitive)."""
    wanted = name.lower()
    for proc in psutil.process_iter(["pid", "name"]):
        proc_name = proc.info.get("name") or ""
        if proc_name.lower() == wanted:
            return ProcessInfo(pid=proc.info["pid"], name=proc_name)
    return None


def _open_pymem(info: ProcessInfo) -> AbstractMemory:
    from .pymem_backend import PymemMemory

    return PymemMemory.open(info.pid, is_alive=lambda: psutil.pid_exists(info.pid))


def open_process(
    name: str,
    open_memory: Callable[[ProcessInfo], AbstractMemory] = _open_pymem,
) -> ProcessHandle:
    """
    Attach to *name* right now.

    Raises:
        ProcessNotFoundError: no such process is running.
        MemoryAccessError: the process exists but cannot be opened.
    """
    info = find_process(name)
    if info is None:
        raise ProcessNotFoundError(f"Process not running: {name}")
    return ProcessHandle(info=info, memory=open_memory(info))


def wait_for_attach(
    name: str,
    poll_interval: float = 1.0,
    open_memory: Callable[[ProcessInfo], AbstractMemory] = _open_pymem,
    sleep: Callable[[float], None] = time.sleep,
    should_stop: Callable[[], bool] = lambda: False,
) -> Optional[ProcessHandle]:
    """
    Poll until *name* is running and attachable, then return its handle.

    Returns None only when *should_stop* becomes true while waiting.
    """
    logger.info("Waiting for %s ...", name)
    while not should_stop():
        try:
            handle = open_process(name, open_memory)
        except ProcessNotFoundError:
            pass
        except MemoryAccessError as exc:
            logger.debug("Attach failed, retrying: %s", exc)
        else:
            logger.info("Attached to %s", handle)
            return handle
        sleep(poll_interval)
    return None
