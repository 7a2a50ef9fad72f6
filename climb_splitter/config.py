"""
Runtime configuration for the splitter.

The only real configuration is which process to attach to and which
profile (candidate tables + zone table) to drive it with; everything
else is cadence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from climb_splitter.exceptions import ConfigError, ProfileError
from climb_splitter.profiles.loader import get_profile, load_profile_file
from climb_splitter.profiles.models import GameProfile
from climb_splitter.progress.models import ResetPolicy

__all__ = ["SplitterConfig"]


@dataclass
class SplitterConfig:
    """Runtime configuration for PollLoop and the CLI."""
    profile:              str            = "default"
    profile_file:         Optional[str]  = None    # JSON profile; wins over `profile`
    process_name:         Optional[str]  = None    # override the profile's process
    tick_rate:            float          = 60.0    # ticks per second
    attach_poll_interval: float          = 1.0     # seconds between attach attempts
    flag_reset:           bool           = False   # also reset on listening-flag drop
    debug:                bool           = False

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.tick_rate

    def validate(self) -> None:
        """
        Raises:
            ConfigError: a rate or interval is not positive.
        """
        if self.tick_rate <= 0:
            raise ConfigError(f"tick_rate must be > 0 (got {self.tick_rate})")
        if self.attach_poll_interval <= 0:
            raise ConfigError(
                f"attach_poll_interval must be > 0 (got {self.attach_poll_interval})"
            )

    def resolve_profile(self) -> GameProfile:
        """
        Return the effective profile with overrides applied.

        Raises:
            ProfileError: unknown profile, bad file, or flag reset requested
                          for a profile that does not sample the flag.
        """
        self.validate()
        base = load_profile_file(self.profile_file) if self.profile_file else get_profile(self.profile)

        policies = None
        if self.flag_reset:
            if not base.supports_flag_reset:
                raise ProfileError(
                    f"Profile {base.name!r} does not sample the input-listening flag; "
                    "flag-based reset is unavailable"
                )
            policies = tuple(dict.fromkeys(base.reset_policies + (ResetPolicy.LISTENING_FLAG,)))

        return base.with_overrides(process_name=self.process_name, reset_policies=policies)
