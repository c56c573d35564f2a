from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from siege.core.actions import Action
from siege.environment import StepInfo
from siege.world import WorldState


@dataclass
class Frame:
    """
    Snapshot of a single action, with helpers to serialize for transport.

    `world` is the state after the action was applied.
    """

    world: WorldState
    action: Optional[Action] = None
    action_metadata: Optional[Mapping[str, Any]] = None
    step_info: Optional[StepInfo] = None
    done: bool = False
    ai_turn: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the frame into a JSON-friendly dictionary.
        """
        frame: Dict[str, Any] = {
            "turn": self.world.turn,
            "done": self.done,
            "ai_turn": self.ai_turn,
            "world": self.world.to_dict(),
            "board": self.world.board.to_rows(),
            "units": self._serialize_units(self.world),
        }

        if self.action is not None:
            frame["action"] = {
                **self.action.to_dict(),
                "label": str(self.action),
            }
        if self.action_metadata is not None:
            frame["action_metadata"] = dict(self.action_metadata)
        if self.step_info is not None:
            frame["step_info"] = self.step_info.to_dict()

        return frame

    @staticmethod
    def _serialize_units(world: WorldState) -> List[Dict[str, Any]]:
        """
        Flat unit list for the front-end, without altering the canonical world dict.
        """
        serialized: List[Dict[str, Any]] = []
        for player in world.players:
            for index, unit in enumerate(player.units):
                serialized.append({
                    "owner": unit.owner,
                    "unit_index": index,
                    "type": unit.unit_type.value,
                    "position": list(unit.pos),
                    "hp": unit.hp,
                    "max_hp": unit.max_hp,
                    "near_objective": world.distance_to_objective(unit.pos) <= 1,
                    "can_adjacent_attack": unit.unit_type.can_adjacent_attack,
                    "can_line_attack": unit.unit_type.can_line_attack,
                })
        return serialized
