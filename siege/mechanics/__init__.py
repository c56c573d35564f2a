"""Game mechanics: combat, tower control, win checks and repetition draws."""

from .combat import CombatResolver, ResolutionResult
from .objective import ControlResult, ObjectiveTracker
from .victory import VictoryConditions, VictoryResult
from .stalemate import MoveRecord, StalemateDetector

__all__ = [
    "CombatResolver",
    "ResolutionResult",
    "ObjectiveTracker",
    "ControlResult",
    "VictoryConditions",
    "VictoryResult",
    "MoveRecord",
    "StalemateDetector",
]
