"""
Fixed game constants, grouped so every subsystem reads the same values.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict

from .types import GridPos


@dataclass(frozen=True)
class GameRules:
    """
    Rule constants for one game.

    Attributes:
        width: Grid columns
        height: Grid rows
        objective: The central tower cell
        tower_turns_to_win: Consecutive control turns needed to win
        line_attack_range: Cells a Launcher shot travels
        history_size: Stalemate ring buffer capacity (records)
        max_repetitions: Consecutive repeated sub-cycles that force a draw
        attack_threshold: Minimum rubric score for the AI's opportunistic attack
    """
    width: int = 5
    height: int = 5
    objective: GridPos = (2, 2)
    tower_turns_to_win: int = 3
    line_attack_range: int = 3
    history_size: int = 6
    max_repetitions: int = 3
    attack_threshold: int = 50

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive: {self.width}x{self.height}")
        ox, oy = self.objective
        if not (0 <= ox < self.width and 0 <= oy < self.height):
            raise ValueError(f"Objective {self.objective} lies outside the grid")
        if self.tower_turns_to_win < 1:
            raise ValueError(f"tower_turns_to_win must be >= 1: {self.tower_turns_to_win}")
        if self.history_size < 2 or self.history_size % 2:
            raise ValueError(f"history_size must be a positive even number: {self.history_size}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["objective"] = list(self.objective)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameRules:
        values = dict(data)
        if "objective" in values:
            values["objective"] = tuple(values["objective"])
        return cls(**values)
