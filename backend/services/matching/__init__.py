"""
Mechanic matching and accept dispatch.

This module handles:
    - Ranking eligible mechanics around a location
    - Arrival estimates
    - Resolving concurrent accept attempts to a single winner
"""

from .match_engine import MatchEngine, MatchCandidate
from .dispatch import DispatchCoordinator

__all__ = [
    "MatchEngine",
    "MatchCandidate",
    "DispatchCoordinator",
]
