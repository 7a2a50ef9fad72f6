"""Data models for the profiles module."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional, Sequence

from climb_splitter.exceptions import ProfileError
from climb_splitter.progress.models import ResetPolicy, Zone
from climb_splitter.resolver.models import CandidateTable
from climb_splitter.sampler.models import FieldSpec

__all__ = ["GameProfile"]


@dataclass(frozen=True)
class GameProfile:
    """
    Everything that depends on one build of the game, as plain data.

    objects         — one CandidateTable per target object, keyed by table name
    fields          — where each Snapshot attribute is read from
    zones           — transition table in level traversal order (last = Credits)
    start_max_y     — a run start only counts below this height
    reset_below_y   — falling under this height aborts the run
    reset_policies  — enabled abort detectors
    """
    name:           str
    process_name:   str
    module_name:    str
    objects:        tuple[CandidateTable, ...]
    fields:         tuple[FieldSpec, ...]
    zones:          tuple[Zone, ...]
    start_max_y:    float = 2.0
    reset_below_y:  float = -3.0
    reset_policies: tuple[ResetPolicy, ...] = (ResetPolicy.POSITION,)
    description:    str = ""

    # ── Helpers ───────────────────────────────────────────────────────────

    def table(self, name: str) -> CandidateTable:
        for table in self.objects:
            if table.name == name:
                return table
        raise ProfileError(f"Profile {self.name!r} has no object table {name!r}")

    @property
    def zone_names(self) -> list[str]:
        return [z.name for z in self.zones]

    @property
    def supports_flag_reset(self) -> bool:
        return any(f.name == "listening" for f in self.fields)

    def with_overrides(
        self,
        process_name: Optional[str] = None,
        reset_policies: Optional[Sequence[ResetPolicy]] = None,
    ) -> "GameProfile":
        """Return a copy with runtime overrides applied, then validated."""
        changes: dict = {}
        if process_name:
            changes["process_name"] = process_name
        if reset_policies is not None:
            changes["reset_policies"] = tuple(reset_policies)
        profile = dataclasses.replace(self, **changes)
        profile.validate()
        return profile

    def validate(self) -> None:
        """
        Raises:
            ProfileError: the profile cannot drive a run as written.
        """
        if not self.zones:
            raise ProfileError(f"Profile {self.name!r} defines no zones")
        names = {t.name for t in self.objects}
        if len(names) != len(self.objects):
            raise ProfileError(f"Profile {self.name!r} has duplicate object tables")
        for table in self.objects:
            if not table.candidates:
                raise ProfileError(f"Object table {table.name!r} has no candidates")
        for spec in self.fields:
            if spec.source not in names:
                raise ProfileError(
                    f"Field {spec.name!r} reads from unknown object {spec.source!r}"
                )
        sampled = {f.name for f in self.fields}
        for required in ("position_x", "position_y", "left_grab", "right_grab"):
            if required not in sampled:
                raise ProfileError(f"Profile {self.name!r} does not sample {required!r}")
        if not self.reset_policies:
            raise ProfileError(f"Profile {self.name!r} enables no reset policy")
        if ResetPolicy.LISTENING_FLAG in self.reset_policies and not self.supports_flag_reset:
            raise ProfileError(
                f"Profile {self.name!r} enables flag-based reset but does not "
                "sample the 'listening' field"
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.process_name}, {len(self.zones)} zones)"
