"""
Core type definitions for Siege Pulse.

This module contains the closed vocabularies used throughout the rules
engine: unit roles, movement directions, action kinds, game status and
rejection categories, plus the ActionValidation value object.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Grid coordinate (col, row), 0-indexed
GridPos = Tuple[int, int]

PLAYER_IDS: Tuple[int, int] = (0, 1)


def opponent_of(player: int) -> int:
    """Return the id of the other player."""
    if player not in PLAYER_IDS:
        raise ValueError(f"Unknown player id: {player}")
    return 1 - player


def manhattan(a: GridPos, b: GridPos) -> int:
    """Manhattan distance between two grid positions."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_grid_pos(value: object) -> bool:
    """True for a tuple or list of exactly two ints."""
    return (
        isinstance(value, (tuple, list))
        and len(value) == 2
        and all(isinstance(c, int) and not isinstance(c, bool) for c in value)
    )


class UnitType(Enum):
    """
    The three unit roles.

    Each role carries its own fixed stats and attack capability; callers
    ask the variant instead of comparing type names.
    """
    BLASTER = "Blaster"
    SHIELD = "Shield"
    LAUNCHER = "Launcher"

    @property
    def max_hp(self) -> int:
        return _MAX_HP[self]

    @property
    def can_adjacent_attack(self) -> bool:
        return self is UnitType.BLASTER

    @property
    def can_line_attack(self) -> bool:
        return self is UnitType.LAUNCHER


_MAX_HP = {
    UnitType.BLASTER: 2,
    UnitType.SHIELD: 3,
    UnitType.LAUNCHER: 2,
}


class Direction(Enum):
    """
    Orthogonal directions, in the fixed enumeration order +x, -x, +y, -y.

    Rows grow downwards, so +y is DOWN.
    """
    RIGHT = (1, 0)
    LEFT = (-1, 0)
    DOWN = (0, 1)
    UP = (0, -1)

    def step(self, pos: GridPos, distance: int = 1) -> GridPos:
        """Position reached by moving `distance` cells from `pos`."""
        dx, dy = self.value
        return (pos[0] + dx * distance, pos[1] + dy * distance)

    @classmethod
    def between(cls, origin: GridPos, target: GridPos) -> Optional[Direction]:
        """
        Direction pointing from origin to a target on the same row or column.

        Returns None when the cells coincide or are not aligned.
        """
        dx = target[0] - origin[0]
        dy = target[1] - origin[1]
        if (dx == 0) == (dy == 0):
            return None
        unit = ((dx > 0) - (dx < 0), (dy > 0) - (dy < 0))
        return cls(unit)


class ActionType(Enum):
    """Kinds of actions a player can submit."""
    MOVE = "move"
    ADJACENT_ATTACK = "adjacent_attack"
    LINE_ATTACK = "line_attack"
    PASS = "pass"

    @property
    def is_attack(self) -> bool:
        return self in (ActionType.ADJACENT_ATTACK, ActionType.LINE_ATTACK)


class GameStatus(Enum):
    """High-level game state. WON and DRAW are terminal."""
    SETUP = "setup"
    ACTIVE = "active"
    WON = "won"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.DRAW)


class RejectionKind(Enum):
    """Why an action was turned down."""
    ILLEGAL_ACTION = "IllegalAction"   # adjacency / range / occupancy / type rules
    INVALID_STATE = "InvalidState"     # wrong game state or wrong owner


@dataclass(frozen=True)
class ActionValidation:
    """
    Result of validating an action.

    Attributes:
        valid: Whether the action may be applied
        kind: Rejection category (None when valid)
        code: Short machine-readable reason, e.g. "CELL_OCCUPIED"
        message: Human-readable explanation
    """
    valid: bool
    kind: Optional[RejectionKind] = None
    code: str = "OK"
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> ActionValidation:
        return cls(valid=True, message=message)

    @classmethod
    def illegal(cls, code: str, message: str) -> ActionValidation:
        return cls(valid=False, kind=RejectionKind.ILLEGAL_ACTION, code=code, message=message)

    @classmethod
    def invalid_state(cls, code: str, message: str) -> ActionValidation:
        return cls(valid=False, kind=RejectionKind.INVALID_STATE, code=code, message=message)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "kind": self.kind.value if self.kind else None,
            "code": self.code,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ActionValidation:
        kind = data.get("kind")
        return cls(
            valid=data["valid"],
            kind=RejectionKind(kind) if kind else None,
            code=data.get("code", "OK"),
            message=data.get("message", ""),
        )
