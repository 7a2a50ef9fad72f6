"""
Data models for the progress module.

Key concepts
────────────
ZoneRegion    — axis-aligned open box on the (x, y) projection of the player
Zone          — named level segment entered when its region contains the player
ZoneProgress  — set of zones already credited with a split this run
ResetPolicy   — which signal counts as "the run has aborted"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

__all__ = ["ZoneRegion", "Zone", "ZoneProgress", "ResetPolicy"]


class ResetPolicy(str, Enum):
    """
    POSITION
        Player fell below the level (y under a negative threshold).
        Depends only on level geometry; the default.

    LISTENING_FLAG
        The input-listening flag went from set to clear (death/menu
        screen). Only usable when the profile samples that flag.
    """
    POSITION       = "position"
    LISTENING_FLAG = "listening_flag"


@dataclass(frozen=True)
class ZoneRegion:
    """
    Open bounds on x and y; None leaves that side unbounded.

    All comparisons are strict, so a NaN coordinate is never inside.
    """
    y_min: Optional[float] = None
    y_max: Optional[float] = None
    x_min: Optional[float] = None
    x_max: Optional[float] = None

    def contains(self, x: float, y: float) -> bool:
        if self.y_min is not None and not y > self.y_min:
            return False
        if self.y_max is not None and not y < self.y_max:
            return False
        if self.x_min is not None and not x > self.x_min:
            return False
        if self.x_max is not None and not x < self.x_max:
            return False
        return True

    def __str__(self) -> str:
        parts = []
        for axis, lo, hi in (("y", self.y_min, self.y_max), ("x", self.x_min, self.x_max)):
            if lo is not None and hi is not None:
                parts.append(f"{lo:g} < {axis} < {hi:g}")
            elif lo is not None:
                parts.append(f"{axis} > {lo:g}")
            elif hi is not None:
                parts.append(f"{axis} < {hi:g}")
        return " and ".join(parts) or "always"


@dataclass(frozen=True)
class Zone:
    """One entry of the transition table."""
    name:   str
    region: ZoneRegion

    def entered(self, x: float, y: float) -> bool:
        return self.region.contains(x, y)

    def __str__(self) -> str:
        return f"{self.name}: {self.region}"


class ZoneProgress:
    """
    Fixed-size bit set, one bit per zone in table order.

    Bits are only ever set during a run; clear() empties the whole set
    and is called exactly on run start and run reset.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("ZoneProgress needs at least one zone")
        self._size = size
        self._mask = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def mask(self) -> int:
        return self._mask

    def is_reached(self, index: int) -> bool:
        self._check(index)
        return bool(self._mask & (1 << index))

    def mark_reached(self, index: int) -> None:
        self._check(index)
        self._mask |= 1 << index

    def next_unreached(self) -> Optional[int]:
        """Lowest index whose bit is still clear, or None when all are set."""
        for index in range(self._size):
            if not self._mask & (1 << index):
                return index
        return None

    def clear(self) -> None:
        self._mask = 0

    def reached(self) -> Iterator[int]:
        return (i for i in range(self._size) if self._mask & (1 << i))

    def __len__(self) -> int:
        return bin(self._mask).count("1")

    def __bool__(self) -> bool:
        return self._mask != 0

    def _check(self, index: int) -> None:
        if not 0 <= index < self._size:
            raise IndexError(f"zone index {index} out of range 0..{self._size - 1}")

    def __repr__(self) -> str:
        return f"ZoneProgress(size={self._size}, mask=0b{self._mask:0{self._size}b})"
