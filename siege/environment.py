"""
SiegeEnv - Main environment interface.

This is the primary API for the Siege Pulse rules engine. It owns the game
context and is the only place where the world is mutated.

Usage:
    from siege import SiegeEnv
    from siege.scenario import create_default_scenario

    env = SiegeEnv()
    state = env.reset(create_default_scenario())

    while not env.is_game_over:
        action = ...  # human input, or agent.get_action(state)
        info = env.submit_action(action)
        if not info.applied:
            print(info.resolution.log)

    print(f"Winner: {env.winner}")

State Structure:
    {
        "world": WorldState  # Raw world object
    }
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from infra.logger import get_logger
from .core.actions import Action
from .core.types import ActionType, ActionValidation, GameStatus, opponent_of
from .entities import Player, Unit
from .world import WorldState
from .scenario import Scenario
from .mechanics import (
    CombatResolver,
    ControlResult,
    ObjectiveTracker,
    ResolutionResult,
    StalemateDetector,
    VictoryConditions,
    VictoryResult,
)

logger = get_logger(__name__)


@dataclass
class StepInfo:
    """
    Per-action metadata returned by submit_action().

    Rejected actions carry only the resolution (with its rejection); the
    end-of-turn fields stay None.
    """
    resolution: ResolutionResult
    control: Optional[ControlResult] = None
    victory: Optional[VictoryResult] = None
    stalemate_count: int = 0
    status: GameStatus = GameStatus.ACTIVE

    @property
    def applied(self) -> bool:
        return self.resolution.applied

    def to_dict(self) -> Dict[str, Any]:
        """Serialize step info to a plain dict."""
        return {
            "applied": self.applied,
            "resolution": self.resolution.to_dict(),
            "control": self.control.to_dict() if self.control else None,
            "victory": self.victory.to_dict() if self.victory else None,
            "stalemate_count": self.stalemate_count,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StepInfo:
        """Deserialize step info from a dict."""
        control = data.get("control")
        victory = data.get("victory")
        return cls(
            resolution=ResolutionResult.from_dict(data["resolution"]),
            control=ControlResult.from_dict(control) if control else None,
            victory=VictoryResult.from_dict(victory) if victory else None,
            stalemate_count=data.get("stalemate_count", 0),
            status=GameStatus(data.get("status", GameStatus.ACTIVE.value)),
        )


class SiegeEnv:
    """
    Siege Pulse environment - turn and game state machine.

    The environment manages:
    - World state (rosters, board, whose turn it is)
    - The end-of-turn pipeline (resolve, refresh, track, check)
    - Tower streaks, win checks and repetition draws
    - Unit selection for the presentation layer

    Attributes:
        world: Current world state (None until reset())
        verbose: Log every applied action at INFO instead of DEBUG
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

        self.world: Optional[WorldState] = None
        self._scenario: Optional[Scenario] = None

        # Mechanics modules (stateless, can be reused)
        self._combat = CombatResolver()
        self._objective = ObjectiveTracker()
        self._victory = VictoryConditions()

        # Per-game state (rebuilt in reset())
        self._stalemate = StalemateDetector()
        self._ai_players: Set[int] = set()
        self._selected: Optional[int] = None
        self._last_info: Optional[StepInfo] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, scenario: Scenario | Dict[str, Any]) -> Dict[str, Any]:
        """
        Start a new game from a scenario.

        Args:
            scenario: Scenario instance or dict from Scenario.to_dict()

        Returns:
            Initial state ({"world": WorldState})

        Raises:
            ValueError: If the scenario data is malformed
            RuntimeError: If the starting roster overlaps or leaves the grid
        """
        if isinstance(scenario, Scenario):
            scenario_obj = scenario.clone()
        else:
            if "units" not in scenario:
                raise ValueError("Scenario must contain a 'units' list")
            scenario_obj = Scenario.from_dict(scenario)
        self._scenario = scenario_obj

        rules = scenario_obj.rules
        players = [Player(pid) for pid in (0, 1)]
        for unit in scenario_obj.clone().units:
            players[unit.owner].units.append(unit)
        for spec in scenario_obj.agents:
            if spec.name:
                players[spec.player].name = spec.name

        self.world = WorldState(rules=rules, players=players)
        self.world.status = GameStatus.SETUP
        self.world.current_player = scenario_obj.starting_player

        self._stalemate = StalemateDetector(rules.history_size, rules.max_repetitions)
        self._ai_players = {spec.player for spec in scenario_obj.agents}
        self._selected = None
        self._last_info = None

        self.world.status = GameStatus.ACTIVE
        logger.info(
            "Game started: %d vs %d units, P%d to move",
            len(players[0].units), len(players[1].units), self.world.current_player,
        )
        return self._build_state()

    def restart(self) -> Dict[str, Any]:
        """Reset to the starting roster of the current scenario."""
        if self._scenario is None:
            raise RuntimeError("Must call reset() before calling restart()")
        return self.reset(self._scenario)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def submit_action(self, action: Action) -> StepInfo:
        """
        Validate and apply one action, then run the end-of-turn pipeline.

        Pipeline order:
        1. Validate and resolve the action (rejections stop here, no change)
        2. Update the acting player's tower streak
        3. Record the action for the repetition check (not for PASS)
        4. Win checks
        5. Repetition draw
        6. Hand the turn to the other player and clear the selection

        Args:
            action: The action to apply

        Returns:
            StepInfo describing the outcome

        Raises:
            RuntimeError: If reset() hasn't been called
        """
        if self.world is None:
            raise RuntimeError("Must call reset() before calling submit_action()")

        world = self.world
        resolution = self._combat.resolve(world, action)
        if not resolution.applied:
            logger.debug("Rejected %s: %s", action, resolution.log)
            return StepInfo(
                resolution=resolution,
                stalemate_count=self._stalemate.repetition_count,
                status=world.status,
            )

        if self.verbose:
            logger.info(resolution.log)
        else:
            logger.debug(resolution.log)

        actor = action.player
        world.turn += 1
        world.refresh_board()
        control = self._objective.evaluate_control(world, actor)

        if action.type != ActionType.PASS:
            self._stalemate.record_result(resolution)

        victory = self._victory.check_all(world, actor)
        if not victory.is_game_over and self._stalemate.is_stalemate:
            victory = VictoryResult.draw("stalemate")

        if victory.is_game_over:
            world.status = victory.status
            world.winner = victory.winner
            world.game_over_reason = victory.reason
            self._selected = None
            if victory.winner is not None:
                logger.info("P%d wins by %s after %d turns", victory.winner, victory.reason, world.turn)
            else:
                logger.info("Draw (%s) after %d turns", victory.reason, world.turn)
        else:
            world.current_player = opponent_of(actor)
            self._selected = None

        info = StepInfo(
            resolution=resolution,
            control=control,
            victory=victory,
            stalemate_count=self._stalemate.repetition_count,
            status=world.status,
        )
        self._last_info = info
        return info

    def validate_action(self, action: Action) -> ActionValidation:
        """Check an action without applying it."""
        self._require_world()
        return self._combat.validate(self.world, action)

    # ------------------------------------------------------------------
    # Queries for the presentation layer
    # ------------------------------------------------------------------
    def list_legal_actions_for(self, unit_index: int, player: Optional[int] = None) -> List[Action]:
        """
        Legal actions of one unit, for highlighting.

        Args:
            unit_index: Roster index of the unit
            player: Owner of the unit (defaults to the player to move)

        Returns:
            Legal actions; empty when the game is over, the unit does not
            exist, or it is not that player's turn
        """
        world = self._require_world()
        owner = world.current_player if player is None else player
        if world.status != GameStatus.ACTIVE or owner != world.current_player:
            return []
        unit = world.get_player(owner).get_unit(unit_index)
        if unit is None:
            return []
        return self._combat.get_legal_actions(world, unit)

    def select_unit(self, player: int, unit_index: int) -> ActionValidation:
        """
        Mark a unit of the player to move as selected.

        Selection is presentation state only; it never changes the rules.
        """
        world = self._require_world()
        if world.status != GameStatus.ACTIVE:
            return ActionValidation.invalid_state("GAME_NOT_ACTIVE", "No game in progress")
        if player != world.current_player:
            return ActionValidation.invalid_state(
                "NOT_YOUR_TURN", f"P{player} cannot select during P{world.current_player}'s turn"
            )
        if world.get_player(player).get_unit(unit_index) is None:
            return ActionValidation.invalid_state(
                "UNKNOWN_UNIT", f"P{player} has no unit at roster index {unit_index}"
            )
        self._selected = unit_index
        return ActionValidation.success()

    def clear_selection(self) -> None:
        self._selected = None

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def selected_unit(self) -> Optional[Unit]:
        if self.world is None or self._selected is None:
            return None
        return self.world.get_player(self.world.current_player).get_unit(self._selected)

    @property
    def is_ai_turn(self) -> bool:
        return (
            self.world is not None
            and self.world.status == GameStatus.ACTIVE
            and self.world.current_player in self._ai_players
        )

    @property
    def last_info(self) -> Optional[StepInfo]:
        return self._last_info

    @property
    def last_result(self) -> Optional[ResolutionResult]:
        """Resolution of the last applied action."""
        return self._last_info.resolution if self._last_info else None

    @property
    def scenario(self) -> Optional[Scenario]:
        return self._scenario

    @property
    def stalemate(self) -> StalemateDetector:
        return self._stalemate

    @property
    def is_game_over(self) -> bool:
        return self.world is not None and self.world.game_over

    @property
    def winner(self) -> Optional[int]:
        """Winning player (None if draw or in progress)."""
        return self.world.winner if self.world else None

    def snapshot(self) -> Dict[str, Any]:
        """
        Everything the presentation layer draws, as plain data.

        Returns:
            Dict with board grid, rosters, streaks, status, winner, the last
            action result, selection and whether the AI is to move
        """
        world = self._require_world()
        selected = self.selected_unit
        return {
            "turn": world.turn,
            "status": world.status.value,
            "current_player": world.current_player,
            "winner": world.winner,
            "game_over_reason": world.game_over_reason,
            "objective": list(world.objective),
            "board": world.board.to_rows(),
            "players": [p.to_dict() for p in world.players],
            "selected": None if selected is None else {
                "unit_index": self._selected,
                "unit": selected.to_dict(),
                "legal_actions": [
                    a.to_dict() for a in self.list_legal_actions_for(self._selected)
                ],
            },
            "last_action": self._last_info.to_dict() if self._last_info else None,
            "stalemate_count": self._stalemate.repetition_count,
            "ai_turn": self.is_ai_turn,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_world(self) -> WorldState:
        if self.world is None:
            raise RuntimeError("Must call reset() before querying the environment")
        return self.world

    def _build_state(self) -> Dict[str, Any]:
        return {
            "world": self.world,
        }
