"""
StalemateDetector - repetition draw.

The detector keeps the most recent resolved actions in a ring buffer, which
holds one sub-cycle (history_size // 2 records) per player. It checks once
per completed round, i.e. once both players have acted since the last
check. A player repeats when their buffered sub-cycle, together with the
oldest record of their sub-cycle at the previous check, replays itself
with a period of two turns: every record matches the one two turns before
it. When both players repeat, the repetition counter goes up; any other
round resets it. Reaching max_repetitions forces a draw.

With the default sizes (6 records, 3 repetitions) a pure two-sided shuttle
is declared a draw on the 12th action, after three round trips per side.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Set

from ..core.types import PLAYER_IDS, GridPos, UnitType
from .combat import ResolutionResult


@dataclass(frozen=True)
class MoveRecord:
    """One resolved action as seen by the repetition check."""
    player: int
    unit_type: UnitType
    origin: GridPos
    destination: GridPos
    was_attack: bool = False

    @classmethod
    def from_resolution(cls, result: ResolutionResult) -> MoveRecord:
        return cls(
            player=result.player,
            unit_type=result.unit_type,
            origin=tuple(result.origin),
            destination=tuple(result.destination),
            was_attack=result.is_attack,
        )

    def replays(self, other: MoveRecord) -> bool:
        """Same unit role, same cells, same kind of action."""
        return (
            self.unit_type is other.unit_type
            and self.origin == other.origin
            and self.destination == other.destination
            and self.was_attack == other.was_attack
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player,
            "unit_type": self.unit_type.value,
            "origin": list(self.origin),
            "destination": list(self.destination),
            "was_attack": self.was_attack,
        }


class StalemateDetector:
    """
    Ring buffer of recent actions plus the repetition counter.

    Args:
        history_size: Ring buffer capacity (records)
        max_repetitions: Consecutive repeated rounds that force a draw
    """

    def __init__(self, history_size: int = 6, max_repetitions: int = 3):
        self.history_size = history_size
        self.max_repetitions = max_repetitions
        self.cycle_length = history_size // len(PLAYER_IDS)
        self._history: Deque[MoveRecord] = deque(maxlen=history_size)
        self._previous: Dict[int, List[MoveRecord]] = {}
        self._acted: Set[int] = set()
        self.repetition_count = 0

    @property
    def history(self) -> List[MoveRecord]:
        return list(self._history)

    @property
    def is_stalemate(self) -> bool:
        return self.repetition_count >= self.max_repetitions

    def reset(self) -> None:
        self._history.clear()
        self._previous.clear()
        self._acted.clear()
        self.repetition_count = 0

    def record(self, record: MoveRecord) -> int:
        """
        Append a record and, when it completes a round, update the counter.

        Returns:
            The repetition counter after the update
        """
        self._history.append(record)
        self._acted.add(record.player)
        if len(self._acted) < len(PLAYER_IDS):
            return self.repetition_count
        self._acted.clear()

        current = {pid: self._sub_cycle(pid) for pid in PLAYER_IDS}
        if len(self._history) == self.history_size and all(
            self._player_repeats(current[pid], self._previous.get(pid, []))
            for pid in PLAYER_IDS
        ):
            self.repetition_count += 1
        else:
            self.repetition_count = 0
        self._previous = current
        return self.repetition_count

    def record_result(self, result: ResolutionResult) -> Optional[int]:
        """Record an applied move or attack; PASS and rejections are ignored."""
        if not result.applied or result.unit_type is None:
            return None
        return self.record(MoveRecord.from_resolution(result))

    def _sub_cycle(self, player_id: int) -> List[MoveRecord]:
        return [r for r in self._history if r.player == player_id]

    def _player_repeats(self, current: List[MoveRecord], previous: List[MoveRecord]) -> bool:
        n = self.cycle_length
        if len(current) != n or len(previous) != n:
            return False
        # Exactly one new action since the last round.
        if previous[1:] != current[:-1]:
            return False
        sequence = [previous[0]] + current
        return all(sequence[i].replays(sequence[i - 2]) for i in range(2, len(sequence)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "history": [r.to_dict() for r in self._history],
            "repetition_count": self.repetition_count,
        }
