from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.types import GridPos, UnitType
from .unit import Unit


@dataclass
class Player:
    """
    One side of the game.

    Attributes:
        id: Player id (0 or 1)
        name: Display name
        units: Ordered roster; the order is stable and used for indexing
        tower_streak: Consecutive turns of objective control
    """
    id: int
    name: Optional[str] = None
    units: List[Unit] = field(default_factory=list)
    tower_streak: int = 0

    def __post_init__(self):
        if self.name is None:
            self.name = f"Player {self.id + 1}"
        if self.tower_streak < 0:
            raise ValueError(f"tower_streak cannot be negative: {self.tower_streak}")
        for unit in self.units:
            if unit.owner != self.id:
                raise ValueError(f"{unit.label()} does not belong to player {self.id}")

    @property
    def defeated(self) -> bool:
        return not self.units

    def get_unit(self, index: int) -> Optional[Unit]:
        if 0 <= index < len(self.units):
            return self.units[index]
        return None

    def index_of(self, unit: Unit) -> int:
        """Roster index of a unit (identity, not equality)."""
        for i, candidate in enumerate(self.units):
            if candidate is unit:
                return i
        raise ValueError(f"{unit.label()} is not in {self.name}'s roster")

    def unit_at(self, pos: GridPos) -> Optional[Unit]:
        return next((u for u in self.units if u.pos == pos), None)

    def units_of_type(self, unit_type: UnitType) -> List[Unit]:
        return [u for u in self.units if u.unit_type is unit_type]

    def remove(self, unit: Unit) -> None:
        del self.units[self.index_of(unit)]

    def total_hp(self) -> int:
        return sum(u.hp for u in self.units)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tower_streak": self.tower_streak,
            "units": [u.to_dict() for u in self.units],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        return cls(
            id=data["id"],
            name=data.get("name"),
            units=[Unit.from_dict(u) for u in data.get("units", [])],
            tower_streak=data.get("tower_streak", 0),
        )
