"""
ObjectiveTracker - tower control streaks.

At the end of each turn the acting player's streak is updated:
- Player near the objective, opponent not: streak + 1 ("gained")
- Both sides near the objective: streak unchanged ("contested")
- Player not near the objective: streak reset to 0 ("lost")

"Near" means Manhattan distance <= 1 from the objective cell.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from ..core.types import opponent_of

if TYPE_CHECKING:
    from ..world.world import WorldState


GAINED = "gained"
CONTESTED = "contested"
LOST = "lost"


@dataclass
class ControlResult:
    """Outcome of one streak update."""
    player: int
    before: int
    after: int
    holding: bool
    contested: bool
    outcome: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "before": self.before,
            "after": self.after,
            "holding": self.holding,
            "contested": self.contested,
            "outcome": self.outcome,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ControlResult:
        return cls(
            player=data["player"],
            before=data["before"],
            after=data["after"],
            holding=data["holding"],
            contested=data["contested"],
            outcome=data["outcome"],
        )


class ObjectiveTracker:
    """Stateless streak bookkeeping; the streak itself lives on the Player."""

    def is_holding(self, world: WorldState, player_id: int) -> bool:
        return bool(world.units_near_objective(player_id))

    def is_contested(self, world: WorldState, player_id: int) -> bool:
        """Both sides have a unit near the objective."""
        return (
            self.is_holding(world, player_id)
            and self.is_holding(world, opponent_of(player_id))
        )

    def evaluate_control(self, world: WorldState, player_id: int) -> ControlResult:
        """
        Update the given player's tower streak.

        Args:
            world: Current world state (the player's streak is modified)
            player_id: Player whose turn just ended

        Returns:
            ControlResult with the streak before and after the update
        """
        player = world.get_player(player_id)
        before = player.tower_streak
        holding = self.is_holding(world, player_id)
        enemy_near = self.is_holding(world, opponent_of(player_id))

        if holding and not enemy_near:
            player.tower_streak += 1
            outcome = GAINED
        elif holding:
            outcome = CONTESTED
        else:
            player.tower_streak = 0
            outcome = LOST

        return ControlResult(
            player=player_id,
            before=before,
            after=player.tower_streak,
            holding=holding,
            contested=holding and enemy_near,
            outcome=outcome,
        )
