"""
Data models for the resolver module.

Key concepts
────────────
PointerChain    — one hypothesis of how to reach an object from a module base
Candidate       — a PointerChain plus the exact sentinel that confirms it
CandidateTable  — ordered candidates for one target object (first match wins)
ResolvedObject  — address + index of the candidate that produced it

Raw offsets live only in these value types (filled from profiles), so a
game update means new data, never new code.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from climb_splitter.memory.models import ValueKind

__all__ = [
    "PointerChain",
    "Candidate",
    "CandidateTable",
    "ResolvedObject",
]


@dataclass(frozen=True)
class PointerChain:
    """
    Ordered offsets from a module base to an object.

    The first offset is added to the module base; the pointer stored there
    is read, the next offset added, and so on. The result is the value of
    the final dereference, i.e. the object's own address.
    """
    offsets: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.offsets:
            raise ValueError("PointerChain needs at least one offset")

    def __len__(self) -> int:
        return len(self.offsets)

    def __str__(self) -> str:
        return " -> ".join(f"0x{o:X}" for o in self.offsets)


@dataclass(frozen=True)
class Candidate:
    """
    One candidate chain and its validation rule.

    validation_path is read from the resolved object address with pointer
    path semantics (single element = plain offset) and must equal
    `expected` exactly, bit for bit. No epsilon.
    """
    chain:           PointerChain
    validation_path: tuple[int, ...]
    expected:        float | int
    validation_kind: ValueKind = ValueKind.F32

    def __str__(self) -> str:
        path = ", ".join(f"0x{o:X}" for o in self.validation_path)
        return f"Candidate({self.chain} | [{path}] == {self.expected!r})"


@dataclass(frozen=True)
class CandidateTable:
    """Ordered candidates for one target object inside one module."""
    name:       str                       # e.g. "animation_controller"
    module:     str                       # e.g. "UnityPlayer.dll"
    candidates: tuple[Candidate, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.candidates)

    def __getitem__(self, index: int) -> Candidate:
        return self.candidates[index]


@dataclass(frozen=True)
class ResolvedObject:
    """
    A located target object.

    Only valid for the current attach; must be revalidated before every
    use because the game may free the object and reuse its memory.
    """
    table:   str
    address: int
    index:   int

    def __str__(self) -> str:
        return f"{self.table}@0x{self.address:X} (candidate #{self.index})"
