"""Core types, rules and actions for the Siege Pulse rules engine."""

from .types import (
    PLAYER_IDS,
    ActionType,
    ActionValidation,
    Direction,
    GameStatus,
    GridPos,
    RejectionKind,
    UnitType,
    is_grid_pos,
    manhattan,
    opponent_of,
)
from .rules import GameRules
from .actions import Action

__all__ = [
    "PLAYER_IDS",
    "Action",
    "ActionType",
    "ActionValidation",
    "Direction",
    "GameRules",
    "GameStatus",
    "GridPos",
    "RejectionKind",
    "UnitType",
    "is_grid_pos",
    "manhattan",
    "opponent_of",
]
