from .models import SNAPSHOT_FIELDS, FieldSpec, Snapshot
from .state_sampler import StateSampler

__all__ = ["SNAPSHOT_FIELDS", "FieldSpec", "Snapshot", "StateSampler"]
