"""
Siege Pulse - a two-player tactics game on a 5x5 grid.

Each side commands a Blaster, a Shield and a Launcher. A side wins by
destroying every enemy unit or by holding the central tower for three
consecutive turns of its own.

Quick Start:
    from siege import SiegeEnv, Action
    from siege.scenario import create_default_scenario

    env = SiegeEnv()
    env.reset(create_default_scenario())
    info = env.submit_action(Action.move(0, 0, (1, 1)))
"""

__version__ = "1.0.0"

from .environment import SiegeEnv, StepInfo
from .scenario import (
    Scenario,
    create_ai_battle_scenario,
    create_default_scenario,
    default_units,
)
from .core import (
    PLAYER_IDS,
    Action,
    ActionType,
    ActionValidation,
    Direction,
    GameRules,
    GameStatus,
    GridPos,
    RejectionKind,
    UnitType,
)
from .entities import Player, Unit
from .world import Board, WorldState

__all__ = [
    # Main interface
    "SiegeEnv",
    "StepInfo",

    # Scenario system
    "Scenario",
    "create_default_scenario",
    "create_ai_battle_scenario",
    "default_units",

    # Core types
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

    # State
    "Player",
    "Unit",
    "Board",
    "WorldState",
]
