"""
Agent interface and implementations for Siege Pulse.

This module provides:
- BaseAgent: Abstract interface for all agents
- AgentSpec / create_agent_from_spec: Declarative agent wiring for scenarios
- GreedyAgent: The heuristic AI opponent
- RandomAgent: Uniformly random baseline
"""

from .base_agent import BaseAgent
from .factory import PreparedAgent, create_agent_from_spec

from .registry import register_agent, registered_agents, resolve_agent_class
from .spec import AgentSpec
from .random_agent import RandomAgent
from .greedy_agent import GreedyAgent

__all__ = [
    "BaseAgent",
    "AgentSpec",
    "PreparedAgent",
    "create_agent_from_spec",
    "register_agent",
    "registered_agents",
    "resolve_agent_class",
    "RandomAgent",
    "GreedyAgent",
]
