from __future__ import annotations

from dataclasses import dataclass

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec


@dataclass
class PreparedAgent:
    """An instantiated agent together with the spec it was built from."""
    agent: BaseAgent
    spec: AgentSpec

    @property
    def player(self) -> int:
        return self.spec.player


def create_agent_from_spec(spec: AgentSpec) -> PreparedAgent:
    """
    Instantiate the agent a spec describes.

    Raises:
        ValueError: If the agent type is not registered
    """
    agent_cls = resolve_agent_class(spec.type)
    agent = agent_cls(player=spec.player, name=spec.name, **spec.init_params)
    return PreparedAgent(agent=agent, spec=spec)
