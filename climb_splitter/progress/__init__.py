"""
Run progress: the ordered zone table, the progress bit set and the state
machine that decides start / split / reset.
"""

from .models import ResetPolicy, Zone, ZoneProgress, ZoneRegion
from .state_machine import ProgressStateMachine

__all__ = [
    "ResetPolicy",
    "Zone",
    "ZoneProgress",
    "ZoneRegion",
    "ProgressStateMachine",
]
