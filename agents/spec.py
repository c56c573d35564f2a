from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from siege.core.types import PLAYER_IDS


@dataclass
class AgentSpec:
    """
    Declarative description of the agent driving one player.

    Attributes:
        type: Registered agent name ("greedy", "random", ...)
        player: Player id the agent controls
        name: Optional display name
        init_params: Extra keyword arguments for the agent constructor
    """
    type: str
    player: int
    name: Optional[str] = None
    init_params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.player not in PLAYER_IDS:
            raise ValueError(f"AgentSpec player must be 0 or 1, got {self.player}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "player": self.player,
            "name": self.name,
            "init_params": dict(self.init_params),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSpec:
        if "type" not in data or "player" not in data:
            raise ValueError("AgentSpec requires 'type' and 'player'")
        return cls(
            type=data["type"],
            player=data["player"],
            name=data.get("name"),
            init_params=dict(data.get("init_params") or {}),
        )
