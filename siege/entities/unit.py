from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.types import GridPos, UnitType, is_grid_pos


@dataclass
class Unit:
    """
    A unit on the board.

    A unit belongs to one player, has a fixed role and a hit-point pool.
    max_hp is taken from the role at creation and never changes. The roster
    index inside the owning Player is the unit's identity; units carry no
    separate id.
    """

    # Required attributes (NO defaults)
    owner: int
    unit_type: UnitType
    pos: GridPos

    # Starts at full health unless given explicitly
    hp: Optional[int] = None
    max_hp: int = field(init=False)

    def __post_init__(self):
        """Validate unit after initialization."""
        if not is_grid_pos(self.pos):
            raise ValueError(f"Unit position must be a pair of ints: {self.pos!r}")
        self.max_hp = self.unit_type.max_hp
        if self.hp is None:
            self.hp = self.max_hp
        if not 0 < self.hp <= self.max_hp:
            raise ValueError(
                f"{self.unit_type.value} hp must be in (0, {self.max_hp}]: {self.hp}"
            )
        self.pos = tuple(self.pos)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def label(self) -> str:
        """
        Human-readable label.

        Returns:
            String like "Blaster(P0)@(1, 0)"
        """
        return f"{self.unit_type.value}(P{self.owner})@{self.pos}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "type": self.unit_type.value,
            "pos": list(self.pos),
            "hp": self.hp,
            "max_hp": self.max_hp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Unit:
        """
        Deserialize a unit.

        Raises:
            ValueError: If the type name is unknown or hp is out of range
        """
        try:
            unit_type = UnitType(data["type"])
        except ValueError as exc:
            raise ValueError(f"Unknown unit type: {data['type']!r}") from exc
        return cls(
            owner=data["owner"],
            unit_type=unit_type,
            pos=data["pos"],
            hp=data.get("hp"),
        )

    def __str__(self) -> str:
        return f"{self.label()} [{self.hp}/{self.max_hp}]"
