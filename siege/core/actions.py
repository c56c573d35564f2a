"""
Action value objects.

An Action names the acting player, the roster index of the unit that acts,
and the kind-specific parameters:

    Action.move(0, 0, (1, 1))              # unit 0 steps to (1, 1)
    Action.adjacent_attack(1, 0, (1, 2))   # Blaster hits the adjacent cell
    Action.line_attack(0, 2, Direction.DOWN)
    Action.pass_turn(1)                    # only legal when nothing else is
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .types import ActionType, Direction, GridPos, is_grid_pos


def _as_grid_pos(value: Any, name: str) -> GridPos:
    if not is_grid_pos(value):
        raise ValueError(f"{name} must be a pair of ints, got {value!r}")
    return tuple(value)


@dataclass(frozen=True)
class Action:
    """
    A single player action.

    Attributes:
        type: What kind of action this is
        player: Acting player id
        unit_index: Index into the acting player's roster (None for PASS)
        params: Kind-specific parameters ("to", "target" or "direction")
    """
    type: ActionType
    player: int
    unit_index: Optional[int] = None
    params: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def move(cls, player: int, unit_index: int, to: GridPos) -> Action:
        return cls(ActionType.MOVE, player, unit_index, {"to": _as_grid_pos(to, "to")})

    @classmethod
    def adjacent_attack(cls, player: int, unit_index: int, target: GridPos) -> Action:
        return cls(ActionType.ADJACENT_ATTACK, player, unit_index, {"target": _as_grid_pos(target, "target")})

    @classmethod
    def line_attack(cls, player: int, unit_index: int, direction: Direction) -> Action:
        if not isinstance(direction, Direction):
            raise ValueError(f"direction must be a Direction, got {direction!r}")
        return cls(ActionType.LINE_ATTACK, player, unit_index, {"direction": direction})

    @classmethod
    def pass_turn(cls, player: int) -> Action:
        return cls(ActionType.PASS, player)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def to(self) -> Optional[GridPos]:
        return self.params.get("to")

    @property
    def target(self) -> Optional[GridPos]:
        return self.params.get("target")

    @property
    def direction(self) -> Optional[Direction]:
        return self.params.get("direction")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.to is not None:
            params["to"] = list(self.to)
        if self.target is not None:
            params["target"] = list(self.target)
        if self.direction is not None:
            params["direction"] = self.direction.name
        return {
            "type": self.type.value,
            "player": self.player,
            "unit_index": self.unit_index,
            "params": params,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """
        Build an action from its dict form.

        Raises:
            ValueError: If the type or direction name is unknown, a required
                parameter is missing, or a cell is not a pair of ints
        """
        try:
            action_type = ActionType(data["type"])
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown action type: {data.get('type')!r}") from exc

        player = data.get("player")
        if not isinstance(player, int):
            raise ValueError("Action requires an integer 'player'")
        unit_index = data.get("unit_index")
        params = data.get("params", {})
        if not isinstance(params, dict):
            raise ValueError("Action params must be an object")

        if action_type == ActionType.PASS:
            return cls.pass_turn(player)
        if not isinstance(unit_index, int):
            raise ValueError(f"{action_type.value} requires an integer 'unit_index'")

        if action_type == ActionType.MOVE:
            if "to" not in params:
                raise ValueError("move requires params.to")
            return cls.move(player, unit_index, params["to"])
        if action_type == ActionType.ADJACENT_ATTACK:
            if "target" not in params:
                raise ValueError("adjacent_attack requires params.target")
            return cls.adjacent_attack(player, unit_index, params["target"])

        name = params.get("direction")
        if not isinstance(name, str):
            raise ValueError(f"line_attack requires a direction name, got {name!r}")
        try:
            direction = Direction[name]
        except KeyError as exc:
            raise ValueError(f"Unknown direction: {name!r}") from exc
        return cls.line_attack(player, unit_index, direction)

    def __str__(self) -> str:
        if self.type == ActionType.MOVE:
            return f"P{self.player} unit {self.unit_index} MOVE -> {self.to}"
        if self.type == ActionType.ADJACENT_ATTACK:
            return f"P{self.player} unit {self.unit_index} ATTACK {self.target}"
        if self.type == ActionType.LINE_ATTACK:
            return f"P{self.player} unit {self.unit_index} FIRE {self.direction.name}"
        return f"P{self.player} PASS"
