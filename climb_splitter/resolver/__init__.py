"""
Heuristic object location — ordered candidate pointer chains, each
confirmed by an exact sentinel value, with a per-attach cache.
"""

from .models import Candidate, CandidateTable, PointerChain, ResolvedObject
from .pointer_resolver import PointerResolver, follow_chain

__all__ = [
    "Candidate",
    "CandidateTable",
    "PointerChain",
    "ResolvedObject",
    "PointerResolver",
    "follow_chain",
]
