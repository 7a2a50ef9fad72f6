"""
Foreign-process memory access: scalar reads, pointer paths, module bases,
and process discovery/lifecycle.
"""

from .base import AbstractMemory
from .models import POINTER_SIZE, ProcessInfo, ValueKind
from .process import ProcessHandle, find_process, open_process, wait_for_attach
from .pymem_backend import PymemMemory

__all__ = [
    "AbstractMemory",
    "POINTER_SIZE",
    "ProcessInfo",
    "ValueKind",
    "ProcessHandle",
    "find_process",
    "open_process",
    "wait_for_attach",
    "PymemMemory",
]
