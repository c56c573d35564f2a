"""
Random agent implementation for testing and baseline comparison.

This agent plays a uniformly random legal action each turn.
"""

import random
from typing import Dict, Any, Optional, TYPE_CHECKING
from siege.core.actions import Action
from siege.mechanics import CombatResolver
from siege.world import WorldState
from ..base_agent import BaseAgent
from ..registry import register_agent

if TYPE_CHECKING:
    from siege.environment import StepInfo


@register_agent("random")
class RandomAgent(BaseAgent):
    """
    Agent that takes random actions.

    Decision process:
    - Sample uniformly from every legal action of every unit.
    - Pass only when nothing is legal.

    This serves as a baseline for comparing the heuristic AI.
    """

    def __init__(
        self,
        player: int,
        name: Optional[str] = None,
        seed: Optional[int] = None,
        **_: Any,
    ):
        """
        Initialize random agent.

        Args:
            player: Player to control
            name: Agent name (default: "RandomAgent")
            seed: Random seed for reproducibility (None = random)
        """
        super().__init__(player, name)
        self.rng = random.Random(seed)
        self._combat = CombatResolver()

    def get_action(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Optional[Action], Dict[str, Any]]:
        """
        Pick one random legal action.

        Args:
            state: Current game state
            step_info: Optional previous step resolution info (unused)

        Returns:
            Tuple of (action, metadata)
        """
        world: WorldState = state["world"]
        allowed = self._combat.get_all_legal_actions(world, self.player)
        action = self.rng.choice(allowed) if allowed else Action.pass_turn(self.player)

        metadata = {
            "policy": "random",
            "choices": len(allowed),
            "injections": {**kwargs},
        }
        return action, metadata
