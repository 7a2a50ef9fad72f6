"""
Per-game-build data: candidate tables, field locations, the zone table
and thresholds. Supporting a new build is a new profile, not new code.
"""

from .builtin import BUILTIN_PROFILES, DEFAULT_PROFILE
from .loader import (
    get_profile,
    list_profiles,
    load_profile_file,
    profile_from_dict,
    profile_to_dict,
)
from .models import GameProfile

__all__ = [
    "BUILTIN_PROFILES",
    "DEFAULT_PROFILE",
    "GameProfile",
    "get_profile",
    "list_profiles",
    "load_profile_file",
    "profile_from_dict",
    "profile_to_dict",
]
