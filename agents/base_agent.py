"""
Base agent interface for Siege Pulse.

All agents must implement this interface to play a side of the game.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TYPE_CHECKING
from siege.core.actions import Action

if TYPE_CHECKING:
    from siege.environment import StepInfo


class BaseAgent(ABC):
    """
    Abstract base class for all agents.

    Agents look at the world and produce one action for their side each
    time it is their turn.

    Subclasses must implement:
    - get_action(): Produce the action for the current turn

    Attributes:
        player: The player id this agent controls (0 or 1)
        name: Agent name for logging/identification
    """

    def __init__(self, player: int, name: Optional[str] = None):
        """
        Initialize the agent.

        Args:
            player: Player this agent controls
            name: Optional name for the agent (defaults to class name)
        """
        self.player = player
        self.name = name or self.__class__.__name__

    @abstractmethod
    def get_action(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Optional[Action], Dict[str, Any]]:
        """
        Choose the action for this turn.

        State structure:
            {
                "world": WorldState,
            }
        step_info:
            Optional resolution info of the previous action.
        **kwargs:
            Reserved for future fields.

        The world must be treated as read-only; agents that want to try
        something out work on world.clone().

        Args:
            state: Current game state from the environment

        Returns:
            Tuple of:
                - The chosen Action (Action.pass_turn when nothing is legal),
                  or None if the agent declines to act
                - Metadata dict (chosen tier, score, ...)
        """
        pass

    def __str__(self) -> str:
        return f"{self.name} (P{self.player})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(player={self.player}, name='{self.name}')"
