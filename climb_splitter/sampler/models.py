"""Data models for the sampler module."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from climb_splitter.memory.models import ValueKind

__all__ = ["FieldSpec", "Snapshot", "SNAPSHOT_FIELDS"]

# Snapshot attribute → neutral value used when its read fails.
SNAPSHOT_FIELDS: dict[str, Optional[float | int]] = {
    "position_x": math.nan,
    "position_y": math.nan,
    "left_grab":  0,
    "right_grab": 0,
    "listening":  None,
}


@dataclass(frozen=True)
class FieldSpec:
    """
    Where one Snapshot attribute lives.

    name    — Snapshot attribute, one of SNAPSHOT_FIELDS
    source  — CandidateTable name of the object the path starts from
    path    — pointer path relative to that object (last offset not dereferenced)
    kind    — scalar type to read at the end of the path
    """
    name:   str
    source: str
    path:   tuple[int, ...]
    kind:   ValueKind

    def __post_init__(self) -> None:
        if self.name not in SNAPSHOT_FIELDS:
            raise ValueError(f"Unknown snapshot field: {self.name!r}")

    @property
    def default(self) -> Optional[float | int]:
        return SNAPSHOT_FIELDS[self.name]


@dataclass(frozen=True)
class Snapshot:
    """
    One tick's immutable sample of player state.

    A field that failed to read holds its neutral value: NaN for
    positions (every comparison on NaN is False, so nothing fires),
    0 for grabbed-surface ids, None for the optional listening flag.
    """
    position_x: float = math.nan
    position_y: float = math.nan
    left_grab:  int = 0
    right_grab: int = 0
    listening:  Optional[int] = None

    @property
    def grabbing(self) -> bool:
        """True if at least one hand holds a surface."""
        return self.left_grab != 0 or self.right_grab != 0

    @property
    def is_listening(self) -> Optional[bool]:
        """Lowest bit of the input flag, or None when it wasn't sampled."""
        if self.listening is None:
            return None
        return bool(self.listening & 1)

    def __str__(self) -> str:
        return (
            f"({self.position_x:.2f}, {self.position_y:.2f}) - "
            f"({self.left_grab:x}, {self.right_grab:x})"
        )
