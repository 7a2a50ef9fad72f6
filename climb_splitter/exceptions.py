"""
Project-wide custom exception hierarchy.
All modules raise subclasses of SplitterBaseError — never bare Exception.
"""

__all__ = [
    "SplitterBaseError",
    "MemoryAccessError",
    "MemoryReadError",
    "ProcessGoneError",
    "GameModuleNotFoundError",
    "ProcessNotFoundError",
    "ProfileError",
    "ConfigError",
    "TimerError",
]


class SplitterBaseError(Exception):
    """Root exception for all climb-splitter errors."""


# ── Memory access ─────────────────────────────────────────────────────────────

class MemoryAccessError(SplitterBaseError):
    """Base class for foreign-process memory access errors."""


class MemoryReadError(MemoryAccessError):
    """Raised when an address is unmapped or a pointer in a chain is null."""


class ProcessGoneError(MemoryAccessError):
    """Raised when the target process exited while it was being read."""


class GameModuleNotFoundError(MemoryAccessError):
    """Raised when a module (e.g. UnityPlayer.dll) is not loaded in the target."""


# ── Process lifecycle ─────────────────────────────────────────────────────────

class ProcessNotFoundError(SplitterBaseError):
    """Raised when the target process is not running."""


# ── Configuration ─────────────────────────────────────────────────────────────

class ProfileError(SplitterBaseError):
    """Raised when a game profile is unknown or malformed."""


class ConfigError(SplitterBaseError):
    """Raised when runtime configuration values are out of range."""


# ── Timer ─────────────────────────────────────────────────────────────────────

class TimerError(SplitterBaseError):
    """Raised when a timer command cannot be dispatched."""
