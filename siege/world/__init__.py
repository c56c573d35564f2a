from .board import Board
from .world import WorldState

__all__ = ["Board", "WorldState"]
