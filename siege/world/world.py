"""
WorldState - the explicit game context.

Every rules subsystem receives the WorldState it acts on; nothing in the
engine keeps process-wide game state.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional

from ..core.rules import GameRules
from ..core.types import PLAYER_IDS, GameStatus, GridPos, opponent_of
from ..entities import Player, Unit
from .board import Board


class WorldState:
    """
    Complete in-memory state of one game.

    Attributes:
        rules: Rule constants (grid size, objective, thresholds)
        board: Derived occupancy index, rebuilt after every mutation
        players: Both players, indexed by id
        current_player: Id of the player whose turn it is
        status: SETUP, ACTIVE, WON or DRAW
        winner: Winning player id (None unless WON)
        game_over_reason: Short reason string once terminal
        turn: Number of completed actions
    """

    def __init__(
        self,
        rules: GameRules | None = None,
        players: Optional[List[Player]] = None,
    ):
        self.rules = rules or GameRules()
        self.board = Board(self.rules.width, self.rules.height)
        self.players: List[Player] = players or [Player(pid) for pid in PLAYER_IDS]
        if [p.id for p in self.players] != list(PLAYER_IDS):
            raise ValueError("WorldState requires players [0, 1] in order")

        self.current_player = 0
        self.status = GameStatus.SETUP
        self.winner: Optional[int] = None
        self.game_over_reason: Optional[str] = None
        self.turn = 0

        self.refresh_board()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def objective(self) -> GridPos:
        return self.rules.objective

    @property
    def game_over(self) -> bool:
        return self.status.is_terminal

    def get_player(self, player_id: int) -> Player:
        if player_id not in PLAYER_IDS:
            raise ValueError(f"Unknown player id: {player_id}")
        return self.players[player_id]

    def get_opponent(self, player_id: int) -> Player:
        return self.players[opponent_of(player_id)]

    def get_units(self, player_id: int) -> List[Unit]:
        return self.get_player(player_id).units

    def get_all_units(self) -> List[Unit]:
        return [u for p in self.players for u in p.units]

    def owner_of(self, unit: Unit) -> Player:
        return self.players[unit.owner]

    def distance_to_objective(self, pos: GridPos) -> int:
        return self.board.distance(pos, self.objective)

    def units_near_objective(self, player_id: int) -> List[Unit]:
        """Units standing on or orthogonally next to the objective."""
        return [
            u for u in self.get_units(player_id)
            if self.distance_to_objective(u.pos) <= 1
        ]

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------
    def refresh_board(self) -> None:
        """Rebuild the occupancy index from both rosters."""
        self.board.rebuild(self.players)

    def remove_unit(self, unit: Unit) -> None:
        """Take a unit out of its owner's roster and re-index the board."""
        self.owner_of(unit).remove(unit)
        self.refresh_board()

    def place_units(self, units: Iterable[Unit]) -> None:
        """Append units to their owners' rosters (used by scenarios and tests)."""
        for unit in units:
            self.get_player(unit.owner).units.append(unit)
        self.refresh_board()

    def clone(self) -> WorldState:
        """
        Isolated deep copy.

        Used for speculative evaluation: nothing done to the clone is
        visible through the source world.
        """
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "rules": self.rules.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "current_player": self.current_player,
            "status": self.status.value,
            "winner": self.winner,
            "game_over_reason": self.game_over_reason,
            "turn": self.turn,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WorldState:
        world = cls(
            rules=GameRules.from_dict(data.get("rules", {})),
            players=[Player.from_dict(p) for p in data["players"]],
        )
        world.current_player = data.get("current_player", 0)
        world.status = GameStatus(data.get("status", GameStatus.SETUP.value))
        world.winner = data.get("winner")
        world.game_over_reason = data.get("game_over_reason")
        world.turn = data.get("turn", 0)
        return world

    def __str__(self) -> str:
        return (
            f"WorldState(turn={self.turn}, player={self.current_player}, "
            f"status={self.status.value})\n{self.board}"
        )
