"""StateSampler — reads one Snapshot per tick from resolved objects."""

from __future__ import annotations

import logging
from typing import Mapping

from climb_splitter.exceptions import MemoryReadError
from climb_splitter.memory.base import AbstractMemory
from climb_splitter.resolver.models import ResolvedObject
from .models import FieldSpec, Snapshot

__all__ = ["StateSampler"]

logger = logging.getLogger(__name__)


class StateSampler:
    """
    Reads a fixed set of fields relative to resolved object bases.

    Every field is read independently: one failed read yields that
    field's neutral value and never fails the whole Snapshot. The only
    error that escapes is ProcessGoneError.
    """

    def __init__(self, memory: AbstractMemory, fields: tuple[FieldSpec, ...]) -> None:
        self._memory = memory
        self._fields = fields

    def sample(self, resolved_objects: Mapping[str, ResolvedObject]) -> Snapshot:
        values = {}
        for spec in self._fields:
            values[spec.name] = self._read_field(spec, resolved_objects.get(spec.source))
        return Snapshot(**values)

    def _read_field(self, spec: FieldSpec, obj: ResolvedObject | None):
        if obj is None:
            return spec.default
        try:
            value = self._memory.read_path(obj.address, spec.path, spec.kind)
        except MemoryReadError:
            logger.debug("Field %s unreadable from %s", spec.name, obj)
            return spec.default
        return float(value) if spec.kind.is_float else int(value)
