"""
VictoryConditions - end-of-turn win checks.

Checked after the acting player's action, in this order:
1. Opponent has no units left -> acting player wins ("elimination")
2. Acting player's tower streak reached the threshold -> acting player wins ("tower")
3. Acting player has no units left -> opponent wins ("elimination")

The stalemate draw is decided separately by the StalemateDetector and only
applies when none of these fired.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..core.types import GameStatus, opponent_of

if TYPE_CHECKING:
    from ..world.world import WorldState


@dataclass
class VictoryResult:
    """Result of a victory check."""
    status: GameStatus
    winner: Optional[int] = None
    reason: Optional[str] = None

    @property
    def is_game_over(self) -> bool:
        return self.status.is_terminal

    @classmethod
    def ongoing(cls) -> VictoryResult:
        return cls(status=GameStatus.ACTIVE)

    @classmethod
    def win(cls, winner: int, reason: str) -> VictoryResult:
        return cls(status=GameStatus.WON, winner=winner, reason=reason)

    @classmethod
    def draw(cls, reason: str) -> VictoryResult:
        return cls(status=GameStatus.DRAW, reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "winner": self.winner,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> VictoryResult:
        return cls(
            status=GameStatus(data["status"]),
            winner=data.get("winner"),
            reason=data.get("reason"),
        )


class VictoryConditions:
    """Win checks for the end of a turn."""

    def check_all(self, world: WorldState, acting_player: int) -> VictoryResult:
        """
        Run every win check for the player who just acted.

        Args:
            world: Current world state (read only)
            acting_player: Player whose action just resolved

        Returns:
            VictoryResult (ACTIVE when nobody has won)
        """
        other = opponent_of(acting_player)

        if world.get_player(other).defeated:
            return VictoryResult.win(acting_player, "elimination")

        threshold = world.rules.tower_turns_to_win
        if world.get_player(acting_player).tower_streak >= threshold:
            return VictoryResult.win(acting_player, "tower")

        if world.get_player(acting_player).defeated:
            return VictoryResult.win(other, "elimination")

        return VictoryResult.ongoing()
