"""
Profile lookup and JSON (de)serialisation.

A profile file mirrors GameProfile field by field. Offsets may be written
as integers or as "0x..." strings so values can be pasted straight from a
memory viewer:

    {
      "name": "my-build",
      "process_name": "A Difficult Game About Climbing.exe",
      "module_name": "UnityPlayer.dll",
      "objects": {
        "position_object": [
          {"chain": ["0x1A8C3C0", "0x328"], "validation_path": ["0xE8"],
           "expected": -0.5, "kind": "f32"}
        ]
      },
      "fields": [{"name": "position_y", "source": "position_object",
                  "path": ["0xE4"], "kind": "f32"}],
      "zones": [{"name": "Mountain", "y_min": 31}],
      "start_max_y": 2.0,
      "reset_below_y": -3.0,
      "reset_policies": ["position"]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from climb_splitter.exceptions import ProfileError
from climb_splitter.memory.models import ValueKind
from climb_splitter.progress.models import ResetPolicy, Zone, ZoneRegion
from climb_splitter.resolver.models import Candidate, CandidateTable, PointerChain
from climb_splitter.sampler.models import FieldSpec
from .builtin import BUILTIN_PROFILES
from .models import GameProfile

__all__ = [
    "get_profile",
    "list_profiles",
    "load_profile_file",
    "profile_from_dict",
    "profile_to_dict",
]

logger = logging.getLogger(__name__)

_REGION_KEYS = ("y_min", "y_max", "x_min", "x_max")


def list_profiles() -> list[GameProfile]:
    return list(BUILTIN_PROFILES.values())


def get_profile(name: str) -> GameProfile:
    """
    Return the built-in profile called *name*.

    Raises:
        ProfileError: no such built-in profile.
    """
    try:
        return BUILTIN_PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(BUILTIN_PROFILES))
        raise ProfileError(f"Unknown profile {name!r} (known: {known})") from None


def load_profile_file(path: str | Path) -> GameProfile:
    """
    Load and validate a profile from a JSON file.

    Raises:
        ProfileError: unreadable file, invalid JSON, or invalid profile.
    """
    path = Path(path).expanduser()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProfileError(f"Cannot read profile file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProfileError(f"Invalid JSON in {path}: {exc}") from exc

    profile = profile_from_dict(data)
    logger.info("Loaded profile %s from %s", profile, path)
    return profile


# ── dict <-> GameProfile ──────────────────────────────────────────────────────


def profile_from_dict(data: dict[str, Any]) -> GameProfile:
    if not isinstance(data, dict):
        raise ProfileError("Profile must be a JSON object")
    try:
        module = data.get("module_name", "UnityPlayer.dll")
        objects = tuple(
            CandidateTable(
                name=name,
                module=module,
                candidates=tuple(_candidate(c) for c in candidates),
            )
            for name, candidates in data["objects"].items()
        )
        fields = tuple(
            FieldSpec(
                name=f["name"],
                source=f["source"],
                path=_offsets(f["path"]),
                kind=ValueKind(f.get("kind", "f32")),
            )
            for f in data["fields"]
        )
        zones = tuple(
            Zone(z["name"], ZoneRegion(**{k: _float(z[k]) for k in _REGION_KEYS if k in z}))
            for z in data["zones"]
        )
        profile = GameProfile(
            name=data["name"],
            process_name=data["process_name"],
            module_name=module,
            objects=objects,
            fields=fields,
            zones=zones,
            start_max_y=_float(data.get("start_max_y", 2.0)),
            reset_below_y=_float(data.get("reset_below_y", -3.0)),
            reset_policies=tuple(
                ResetPolicy(p) for p in data.get("reset_policies", ["position"])
            ),
            description=data.get("description", ""),
        )
    except KeyError as exc:
        raise ProfileError(f"Profile is missing key {exc}") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise ProfileError(f"Malformed profile: {exc}") from exc

    profile.validate()
    return profile


def profile_to_dict(profile: GameProfile) -> dict[str, Any]:
    """Inverse of profile_from_dict; offsets are written as hex strings."""
    return {
        "name": profile.name,
        "description": profile.description,
        "process_name": profile.process_name,
        "module_name": profile.module_name,
        "objects": {
            table.name: [
                {
                    "chain": _hex(c.chain.offsets),
                    "validation_path": _hex(c.validation_path),
                    "expected": c.expected,
                    "kind": c.validation_kind.value,
                }
                for c in table.candidates
            ]
            for table in profile.objects
        },
        "fields": [
            {"name": f.name, "source": f.source, "path": _hex(f.path), "kind": f.kind.value}
            for f in profile.fields
        ],
        "zones": [
            {"name": z.name, **{k: getattr(z.region, k) for k in _REGION_KEYS
                                if getattr(z.region, k) is not None}}
            for z in profile.zones
        ],
        "start_max_y": profile.start_max_y,
        "reset_below_y": profile.reset_below_y,
        "reset_policies": [p.value for p in profile.reset_policies],
    }


# ── Private helpers ───────────────────────────────────────────────────────────


def _candidate(data: dict[str, Any]) -> Candidate:
    kind = ValueKind(data.get("kind", "f32"))
    expected = data["expected"]
    expected = float(expected) if kind.is_float else _int(expected)
    return Candidate(
        chain=PointerChain(_offsets(data["chain"])),
        validation_path=_offsets(data["validation_path"]),
        expected=expected,
        validation_kind=kind,
    )


def _offsets(values: list) -> tuple[int, ...]:
    if not isinstance(values, list) or not values:
        raise ValueError(f"expected a non-empty list of offsets, got {values!r}")
    return tuple(_int(v) for v in values)


def _int(value: int | str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not an offset: {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value), 0)


def _float(value: float | int | str) -> float:
    return float(value)


def _hex(values: tuple[int, ...]) -> list[str]:
    return [f"0x{v:X}" for v in values]
