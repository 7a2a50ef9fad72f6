"""
PointerResolver — locates a target object through one of several
candidate pointer chains.

Algorithm (per CandidateTable, table order is the tie-break):
  1. Look up the table's module base.
  2. For each candidate, walk its PointerChain. A read failure on any
     link means "this candidate does not currently apply"; move on.
  3. Read the candidate's validation path from the resolved address and
     compare it for exact equality with the sentinel.
  4. The first candidate that validates wins.

Caching: the winning index and address are kept per table. Each later
call re-runs only the validation read on the cached address; if that
fails the cache is dropped and the whole table is scanned again. Steady
state therefore costs one validation read per tick instead of
|candidates| x chain depth.

Errors: MemoryReadError / GameModuleNotFoundError are transient and
swallowed here. ProcessGoneError is fatal to the attach and propagates.
"""

from __future__ import annotations

import logging
from typing import Optional

from climb_splitter.exceptions import GameModuleNotFoundError, MemoryReadError
from climb_splitter.memory.base import AbstractMemory
from .models import Candidate, CandidateTable, PointerChain, ResolvedObject

__all__ = ["PointerResolver", "follow_chain"]

logger = logging.getLogger(__name__)


def follow_chain(memory: AbstractMemory, module_base: int, chain: PointerChain) -> int:
    """
    Dereference every link of *chain* starting at *module_base*.

    Raises:
        MemoryReadError: a link is unmapped or null.
    """
    address = module_base
    for offset in chain.offsets:
        address = memory.read_pointer(address + offset)
    return address


class PointerResolver:
    """
    Finds and caches the address of each target object for one attach.

    A resolver instance must not outlive the process it was built for;
    the poll loop creates a new one on every attach.
    """

    def __init__(self, memory: AbstractMemory) -> None:
        self._memory = memory
        self._cache: dict[str, ResolvedObject] = {}

    # ── Public API ────────────────────────────────────────────────────────

    def find(self, candidates: CandidateTable) -> Optional[ResolvedObject]:
        """
        Full scan of *candidates* in table order.

        Returns the first validating candidate, or None when nothing
        validates (a normal outcome, e.g. while the game is in its menu).
        """
        try:
            base = self._memory.module_base(candidates.module)
        except (GameModuleNotFoundError, MemoryReadError) as exc:
            logger.debug("%s: module unavailable: %s", candidates.name, exc)
            return None

        for index, candidate in enumerate(candidates.candidates):
            try:
                address = follow_chain(self._memory, base, candidate.chain)
            except MemoryReadError:
                logger.debug("%s: candidate #%d chain broken", candidates.name, index)
                continue

            if self._validate(address, candidate):
                resolved = ResolvedObject(table=candidates.name, address=address, index=index)
                logger.debug("%s: candidate #%d validated", candidates.name, index)
                return resolved

        logger.debug("%s: no candidate validated", candidates.name)
        return None

    def revalidate(self, obj: ResolvedObject, candidates: CandidateTable) -> bool:
        """Re-run only the sentinel check for *obj* against its own candidate."""
        if not 0 <= obj.index < len(candidates):
            return False
        return self._validate(obj.address, candidates[obj.index])

    def resolve(self, candidates: CandidateTable) -> Optional[ResolvedObject]:
        """
        Cached lookup used once per tick.

        Revalidates the cached object first; falls back to find() when
        nothing is cached or the cached object no longer validates.
        """
        cached = self._cache.get(candidates.name)
        if cached is not None:
            if self.revalidate(cached, candidates):
                return cached
            logger.debug("%s: cached %s failed validation, rescanning",
                         candidates.name, cached)
            del self._cache[candidates.name]

        resolved = self.find(candidates)
        if resolved is not None:
            logger.info("Resolved %s", resolved)
            self._cache[candidates.name] = resolved
        return resolved

    # ── Private helpers ───────────────────────────────────────────────────

    def _validate(self, address: int, candidate: Candidate) -> bool:
        try:
            value = self._memory.read_path(
                address, candidate.validation_path, candidate.validation_kind
            )
        except MemoryReadError:
            return False
        return value == candidate.expected
