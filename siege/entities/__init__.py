from .unit import Unit
from .player import Player

__all__ = ["Unit", "Player"]
