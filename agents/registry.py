"""
Name -> agent class registry.

Agent classes register themselves with @register_agent("name") so that
scenarios can refer to them by a plain string in their AgentSpec.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from .base_agent import BaseAgent

_REGISTRY: Dict[str, Type["BaseAgent"]] = {}


def register_agent(name: str) -> Callable[[Type["BaseAgent"]], Type["BaseAgent"]]:
    """Class decorator registering an agent under `name`."""
    key = name.lower()

    def decorator(cls: Type["BaseAgent"]) -> Type["BaseAgent"]:
        existing = _REGISTRY.get(key)
        if existing is not None and existing is not cls:
            raise ValueError(f"Agent type '{name}' already registered by {existing.__name__}")
        _REGISTRY[key] = cls
        return cls

    return decorator


def resolve_agent_class(name: str) -> Type["BaseAgent"]:
    """
    Look up a registered agent class.

    Raises:
        ValueError: If no agent is registered under that name
    """
    try:
        return _REGISTRY[name.lower()]
    except KeyError as exc:
        known = ", ".join(sorted(_REGISTRY)) or "none"
        raise ValueError(f"Unknown agent type '{name}' (registered: {known})") from exc


def registered_agents() -> List[str]:
    return sorted(_REGISTRY)
