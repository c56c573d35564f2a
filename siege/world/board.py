from __future__ import annotations

from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from ..core.types import GridPos, manhattan

if TYPE_CHECKING:
    from ..entities import Player, Unit


class Board:
    """
    Derived occupancy index: grid cell -> unit.

    The board is never authoritative. It is rebuilt from the rosters after
    every mutation (see WorldState.refresh_board) instead of being patched
    piecemeal.
    """

    def __init__(self, width: int = 5, height: int = 5):
        self.width = width
        self.height = height
        self._cells: Dict[GridPos, Unit] = {}

    def rebuild(self, players: Iterable[Player]) -> None:
        """
        Re-index every living unit.

        Raises:
            RuntimeError: If two units share a cell or a unit is off-grid
        """
        self._cells = {}
        for player in players:
            for unit in player.units:
                if not self.in_bounds(unit.pos):
                    raise RuntimeError(f"{unit.label()} is outside the grid")
                if unit.pos in self._cells:
                    other = self._cells[unit.pos]
                    raise RuntimeError(f"{unit.label()} overlaps {other.label()}")
                self._cells[unit.pos] = unit

    def in_bounds(self, pos: GridPos) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    @staticmethod
    def distance(a: GridPos, b: GridPos) -> int:
        return manhattan(a, b)

    def unit_at(self, pos: GridPos) -> Optional[Unit]:
        return self._cells.get(tuple(pos))

    def is_empty(self, pos: GridPos) -> bool:
        """True for an in-bounds cell with no unit on it."""
        return self.in_bounds(pos) and tuple(pos) not in self._cells

    def to_rows(self) -> List[List[Optional[dict]]]:
        """Row-major snapshot for the presentation layer."""
        rows: List[List[Optional[dict]]] = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                unit = self._cells.get((x, y))
                row.append(None if unit is None else {
                    "owner": unit.owner,
                    "type": unit.unit_type.value,
                    "hp": unit.hp,
                })
            rows.append(row)
        return rows

    def __str__(self) -> str:
        symbols = {"Blaster": "b", "Shield": "s", "Launcher": "l"}
        lines = []
        for y in range(self.height):
            cells = []
            for x in range(self.width):
                unit = self._cells.get((x, y))
                if unit is None:
                    cells.append(".")
                else:
                    sym = symbols[unit.unit_type.value]
                    cells.append(sym.upper() if unit.owner == 1 else sym)
            lines.append(" ".join(cells))
        return "\n".join(lines)
