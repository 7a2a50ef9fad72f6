"""Data models for the memory module."""

import struct
from dataclasses import dataclass
from enum import Enum

__all__ = ["ValueKind", "ProcessInfo", "POINTER_SIZE"]

# The target is a 64-bit Unity build; every chain link is a 64-bit pointer.
POINTER_SIZE = 8


class ValueKind(str, Enum):
    """
    Scalar types that can be read out of the target process.

    Each member knows its byte size and little-endian `struct` format so
    that backends and fakes decode raw bytes the same way.
    """
    U8  = "u8"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    F32 = "f32"

    @property
    def size(self) -> int:
        return _SIZES[self]

    @property
    def struct_format(self) -> str:
        return _FORMATS[self]

    def decode(self, data: bytes):
        """Unpack exactly `size` little-endian bytes into a Python value."""
        return struct.unpack(self.struct_format, data[: self.size])[0]

    def encode(self, value) -> bytes:
        return struct.pack(self.struct_format, value)

    @property
    def is_float(self) -> bool:
        return self is ValueKind.F32


_SIZES = {
    ValueKind.U8:  1,
    ValueKind.U32: 4,
    ValueKind.I32: 4,
    ValueKind.U64: 8,
    ValueKind.F32: 4,
}
_FORMATS = {
    ValueKind.U8:  "<B",
    ValueKind.U32: "<I",
    ValueKind.I32: "<i",
    ValueKind.U64: "<Q",
    ValueKind.F32: "<f",
}


@dataclass
class ProcessInfo:
    """Lightweight descriptor for a running OS process."""
    pid:  int
    name: str

    def __str__(self) -> str:
        return f"{self.name} (pid={self.pid})"
