"""
Built-in profiles for A Difficult Game About Climbing.

Offsets are relative to UnityPlayer.dll of the 64-bit Windows build.
Two variants are shipped because captures disagree on the Credits
threshold (247 vs 245); pick one with --profile.
"""

from __future__ import annotations

import dataclasses

from climb_splitter.memory.models import ValueKind
from climb_splitter.progress.models import Zone, ZoneRegion
from climb_splitter.resolver.models import Candidate, CandidateTable, PointerChain
from climb_splitter.sampler.models import FieldSpec
from .models import GameProfile

__all__ = ["BUILTIN_PROFILES", "DEFAULT_PROFILE"]

PROCESS_NAME = "A Difficult Game About Climbing.exe"
MODULE_NAME = "UnityPlayer.dll"

ANIMATION_CONTROLLER = "animation_controller"
POSITION_OBJECT = "position_object"

# Left-hand grip strength is always exactly 75.0 on the real controller.
_LEFT_STRENGTH_PATH = (0x20, 0x18, 0x18, 0x18, 0xC0)
_LEFT_STRENGTH = 75.0

# The player body sits on the z = -0.5 plane.
_POS_Z_OFFSET = 0xE8
_POS_Z = -0.5

_ANIMATION_CONTROLLER_CHAINS = [
    (0x1AD8388, 0x0, 0x3A0, 0x0, 0x10, 0x30, 0x38, 0x28),
    (0x1A8C3C0, 0x328, 0x50, 0x168, 0x30, 0x78, 0x30, 0x38, 0x28),
    (0x1AD81D0, 0x940, 0x1F8, 0x298, 0x150, 0x68, 0x68, 0x38, 0x28),
    (0x1AD8388, 0x0, 0x3A0, 0x0, 0x28, 0x10, 0x0, 0x30, 0x38, 0x28),
    (0x1A8C3C0, 0xF0, 0xE8, 0x50, 0x168, 0x30, 0x78, 0x30, 0x38, 0x28),
    (0x1A8C280, 0x50, 0x128, 0xE8, 0x78, 0xC8, 0x30, 0x30, 0x38, 0x28),
    (0x1A8C3C0, 0x2A0, 0x0, 0x18, 0x10, 0xD0, 0x30, 0x30, 0x38, 0x28),
    (0x1B15160, 0x8, 0x8, 0x28, 0x0, 0x10, 0x30, 0x30, 0x38, 0x28),
    (0x1AD81C8, 0x40, 0xD78, 0xC8, 0x298, 0x150, 0x68, 0x68, 0x38, 0x28),
    (0x1AD8388, 0x0, 0x5F8, 0x3B0, 0x0, 0x10, 0x30, 0x158, 0x48, 0x28),
]

# (chain, shift of the transform data inside the object)
_POSITION_OBJECT_CHAINS = [
    ((0x1A8C3C0, 0x328, 0x78, 0xC8, 0x30, 0x30, 0x48), 0x0),
    ((0x1AD8388, 0x0, 0x3A0, 0x0, 0x10, 0x30, 0x48, 0x90), 0x0),
    ((0x1A8C3C0, 0x328, 0x78, 0xC8, 0x140, 0x30, 0x30, 0x48), 0x0),
    ((0x1AD8388, 0x0, 0x3A0, 0x0, 0x10, 0x30, 0x168, 0x80), 0x0),
    ((0x1A8C3C0, 0x328, 0x78, 0xC8, 0x30, 0x30, 0x48, 0x90), 0x0),
    ((0x1B15160, 0x8, 0x8, 0x28, 0x0, 0xA0, 0x18, 0x0), 0x10),
    ((0x1B15168, 0x8, 0x48, 0x28, 0x0, 0xA0, 0x18, 0x0), 0x10),
    ((0x1B1AAF8, 0x0, 0x88, 0x28, 0x0, 0xA0, 0x18, 0x0), 0x10),
    ((0x1A8C3C0, 0xF0, 0xE8, 0x78, 0xC8, 0x30, 0x30, 0x48, 0xE0), 0x0),
]


def _animation_controller_table() -> CandidateTable:
    return CandidateTable(
        name=ANIMATION_CONTROLLER,
        module=MODULE_NAME,
        candidates=tuple(
            Candidate(
                chain=PointerChain(chain),
                validation_path=_LEFT_STRENGTH_PATH,
                expected=_LEFT_STRENGTH,
            )
            for chain in _ANIMATION_CONTROLLER_CHAINS
        ),
    )


def _position_object_table() -> CandidateTable:
    return CandidateTable(
        name=POSITION_OBJECT,
        module=MODULE_NAME,
        candidates=tuple(
            Candidate(
                chain=PointerChain(chain),
                validation_path=(shift + _POS_Z_OFFSET,),
                expected=_POS_Z,
            )
            for chain, shift in _POSITION_OBJECT_CHAINS
        ),
    )


_FIELDS = (
    FieldSpec("left_grab",  ANIMATION_CONTROLLER, (0x20, 0xA0, 0x34), ValueKind.U32),
    FieldSpec("right_grab", ANIMATION_CONTROLLER, (0x18, 0xA0, 0x34), ValueKind.U32),
    FieldSpec("position_x", POSITION_OBJECT,      (0xE0,),            ValueKind.F32),
    FieldSpec("position_y", POSITION_OBJECT,      (0xE4,),            ValueKind.F32),
)


def _zones(credits_y: float) -> tuple[Zone, ...]:
    return (
        Zone("Mountain",     ZoneRegion(y_min=31)),
        Zone("Jungle",       ZoneRegion(y_min=55, x_max=0)),
        Zone("Factory",      ZoneRegion(y_min=80, y_max=87, x_min=8)),
        Zone("Pool",         ZoneRegion(y_min=109, x_max=20)),
        Zone("Construction", ZoneRegion(y_min=135)),
        Zone("Cave",         ZoneRegion(y_min=152)),
        Zone("Ice",          ZoneRegion(y_min=204, x_max=47)),
        Zone("Credits",      ZoneRegion(y_min=credits_y)),
    )


DEFAULT_PROFILE = GameProfile(
    name="default",
    process_name=PROCESS_NAME,
    module_name=MODULE_NAME,
    objects=(_animation_controller_table(), _position_object_table()),
    fields=_FIELDS,
    zones=_zones(credits_y=247),
    start_max_y=2.0,
    reset_below_y=-3.0,
    description="Current Steam build; Credits split at y > 247",
)

CREDITS_245_PROFILE = dataclasses.replace(
    DEFAULT_PROFILE,
    name="credits-245",
    zones=_zones(credits_y=245),
    description="Same tables as 'default' with the Credits split at y > 245",
)

BUILTIN_PROFILES: dict[str, GameProfile] = {
    p.name: p for p in (DEFAULT_PROFILE, CREDITS_245_PROFILE)
}
