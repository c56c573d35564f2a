"""
Scenario system for creating and managing game setups.

A scenario holds everything needed to start a game: the rule constants, the
starting roster of both players and which players are driven by agents.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import json
import time

from infra.logger import get_logger
from infra.paths import PROJECT_ROOT, SCENARIO_STORAGE_DIR
from .core.rules import GameRules
from .core.types import PLAYER_IDS, UnitType
from .entities import Unit

if TYPE_CHECKING:
    from agents import AgentSpec

logger = get_logger(__name__)


class Scenario:
    """
    A complete, self-contained game setup.

    Players without an AgentSpec are driven by a human through the
    environment's action interface.

    Example:
        scenario = Scenario(
            units=[
                Unit(owner=0, unit_type=UnitType.BLASTER, pos=(1, 0)),
                Unit(owner=1, unit_type=UnitType.SHIELD, pos=(2, 4)),
            ],
            agents=[AgentSpec(type="greedy", player=1)],
        )
        scenario.save_json("my_scenario.json")
        scenario = Scenario.load_json("my_scenario.json")
    """

    def __init__(
        self,
        rules: GameRules | None = None,
        units: Optional[List[Unit]] = None,
        agents: Optional[List["AgentSpec"]] = None,
        seed: Optional[int] = None,
        starting_player: int = 0,
    ):
        """
        Initialize a scenario.

        Args:
            rules: Rule constants (defaults to the standard 5x5 game)
            units: Starting units, roster order per player is kept
            agents: Optional list of AgentSpec (at most one per player)
            seed: Random seed handed to agents without their own seed
            starting_player: Player who moves first
        """
        if starting_player not in PLAYER_IDS:
            raise ValueError(f"starting_player must be 0 or 1, got {starting_player}")
        self.rules = rules or GameRules()
        self.seed = seed
        self.starting_player = starting_player
        self.agents: List["AgentSpec"] = list(agents or [])

        self.units: List[Unit] = []
        for unit in units or []:
            self.add_unit(unit)
        self._check_agents()

    def add_unit(self, unit: Unit) -> Scenario:
        """Add a unit (owner must be set on the unit)."""
        if unit.owner not in PLAYER_IDS:
            raise ValueError(f"Unit owner must be 0 or 1, got {unit.owner}")
        self.units.append(unit)
        return self

    def agent_for(self, player: int) -> Optional["AgentSpec"]:
        return next((spec for spec in self.agents if spec.player == player), None)

    def _check_agents(self) -> None:
        seen = set()
        for spec in self.agents:
            if spec.player in seen:
                raise ValueError(f"Multiple AgentSpecs found for player {spec.player}")
            seen.add(spec.player)

    def clone(self) -> Scenario:
        """
        Deep copy of this scenario (including units).

        Lets several environments start from the same base scenario without
        sharing mutable units.
        """
        return Scenario.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dictionary.

        Returns:
            Dict with config, units and agent specs
        """
        return {
            "config": {
                "rules": self.rules.to_dict(),
                "seed": self.seed,
                "starting_player": self.starting_player,
            },
            "units": [u.to_dict() for u in self.units],
            "agents": [spec.to_dict() for spec in self.agents],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Scenario:
        """
        Deserialize from a dictionary produced by to_dict().

        Raises:
            ValueError: If a unit or agent definition is malformed
        """
        from agents import AgentSpec

        config = data.get("config", {})
        agents = []
        for value in data.get("agents") or []:
            if isinstance(value, AgentSpec):
                agents.append(value)
            elif isinstance(value, dict):
                agents.append(AgentSpec.from_dict(value))
            else:
                raise ValueError(f"Agent definition must be AgentSpec or dict, got {type(value)}")

        return cls(
            rules=GameRules.from_dict(config.get("rules", {})),
            units=[Unit.from_dict(u) for u in data.get("units", [])],
            agents=agents,
            seed=config.get("seed"),
            starting_player=config.get("starting_player", 0),
        )

    def save_json(self, filepath: str | Path | None = None, indent: int = 2) -> Path:
        """
        Save scenario to a JSON file.

        Args:
            filepath: Path to save to. If None, saves under storage/scenarios with a timestamped name.
            indent: JSON indentation (default: 2)

        Returns:
            The path written
        """
        if filepath is None:
            base_dir = SCENARIO_STORAGE_DIR
            base_dir.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filepath = base_dir / f"scenario_{timestamp}.json"
        else:
            filepath = Path(filepath)
            if not filepath.is_absolute():
                filepath = PROJECT_ROOT / filepath
            filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Saving scenario JSON to %s", filepath)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=indent, ensure_ascii=False)
        return filepath

    @classmethod
    def load_json(cls, filepath: str | Path) -> Scenario:
        """Load a scenario from a JSON file."""
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __str__(self) -> str:
        return f"Scenario(units={len(self.units)}, agents={len(self.agents)})"

    def __repr__(self) -> str:
        return f"Scenario(units={self.units}, agents={self.agents})"


# =============================================================================
# SCENARIO BUILDERS
# =============================================================================

def default_units() -> List[Unit]:
    """Standard starting line-up: each side on its home row, Shield in the middle."""
    units: List[Unit] = []
    for owner, row in ((0, 0), (1, 4)):
        units.extend([
            Unit(owner=owner, unit_type=UnitType.BLASTER, pos=(1, row)),
            Unit(owner=owner, unit_type=UnitType.SHIELD, pos=(2, row)),
            Unit(owner=owner, unit_type=UnitType.LAUNCHER, pos=(3, row)),
        ])
    return units


def create_default_scenario(seed: Optional[int] = None) -> Scenario:
    """Human (player 0) against the greedy AI (player 1)."""
    from agents import AgentSpec

    return Scenario(
        units=default_units(),
        agents=[AgentSpec(type="greedy", player=1, name="Greedy AI")],
        seed=seed,
    )


def create_ai_battle_scenario(
    first: str = "greedy",
    second: str = "greedy",
    seed: Optional[int] = None,
) -> Scenario:
    """Two agents playing each other from the standard line-up."""
    from agents import AgentSpec

    return Scenario(
        units=default_units(),
        agents=[
            AgentSpec(type=first, player=0, name=f"P0 {first}", init_params={"seed": seed}),
            AgentSpec(type=second, player=1, name=f"P1 {second}",
                      init_params={"seed": None if seed is None else seed + 1}),
        ],
        seed=seed,
    )


if __name__ == "__main__":
    # python -m siege.scenario
    from infra.logger import configure_logging
    configure_logging(level="INFO", json=True)
    create_default_scenario().save_json()
