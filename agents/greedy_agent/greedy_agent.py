"""
Greedy agent: single-ply heuristic play with hard priority gates.

Each turn the agent walks a fixed chain of tiers and plays the first
action a tier produces:

1. defend    - own streak one short of winning: keep or retake the objective
2. attack    - best attack by the rubric, if it scores above the threshold
3. disrupt   - opponent streak one short of winning: hit or crowd the objective
4. evaluate  - every move (scored on a cloned board) and every attack
5. fallback  - a random legal move, else pass

Every candidate is checked with the CombatResolver before it is returned;
a candidate that would be rejected falls through to the next tier.
"""

import random
from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from infra.logger import get_logger
from siege.core.actions import Action
from siege.core.types import Direction, GameStatus, opponent_of
from siege.mechanics import CombatResolver
from siege.world import WorldState
from ..base_agent import BaseAgent
from ..registry import register_agent
from .evaluation import BoardEvaluator, EvaluatorWeights
from .targeting import (
    AttackRubric,
    enumerate_all_attacks,
    enumerate_attacks,
    unprotected_targets_near_objective,
)

if TYPE_CHECKING:
    from siege.environment import StepInfo

logger = get_logger(__name__)

Candidate = Tuple[Action, float]

DEFEND_ATTACK_SCORE = 250
DEFEND_REACH_SCORE = 220
DISRUPT_ATTACK_SCORE = 200
DISRUPT_REACH_SCORE = 180


@register_agent("greedy")
class GreedyAgent(BaseAgent):
    """
    Heuristic AI opponent.

    The agent is deterministic apart from the fallback tier, which draws
    from its own seeded random generator.
    """

    def __init__(
        self,
        player: int,
        name: Optional[str] = None,
        seed: Optional[int] = None,
        weights: Optional[EvaluatorWeights] = None,
        **_: Any,
    ):
        """
        Initialize the greedy agent.

        Args:
            player: Player to control
            name: Optional agent name (default: "GreedyAgent")
            seed: Seed for the fallback tier
            weights: Optional evaluator weights
        """
        super().__init__(player, name)
        self.rng = random.Random(seed)
        self.resolver = CombatResolver()
        self.rubric = AttackRubric(resolver=self.resolver)
        self.evaluator = BoardEvaluator(weights, resolver=self.resolver)

    def get_action(
        self,
        state: Dict[str, Any],
        step_info: Optional["StepInfo"] = None,
        **kwargs: Any,
    ) -> tuple[Optional[Action], Dict[str, Any]]:
        """
        Choose this turn's action.

        Args:
            state: Current game state ({"world": WorldState})
            step_info: Previous step info (unused)

        Returns:
            (action, metadata) where metadata names the tier and its score.
            The action is None when it is not this agent's turn.
        """
        world: WorldState = state["world"]
        if world.status != GameStatus.ACTIVE or world.current_player != self.player:
            return None, {"policy": "greedy", "tier": None, "reason": "not my turn"}

        tiers: List[Tuple[str, Callable[[WorldState], Optional[Candidate]]]] = [
            ("defend", self.defend_streak),
            ("attack", self.opportunistic_attack),
            ("disrupt", self.disrupt_streak),
            ("evaluate", self.general_evaluation),
        ]
        for tier, search in tiers:
            candidate = search(world)
            if candidate is None:
                continue
            action, score = candidate
            if self._accept(world, action):
                logger.debug("P%d %s tier -> %s (score %s)", self.player, tier, action, score)
                return action, {"policy": "greedy", "tier": tier, "score": score}
            logger.debug("P%d %s tier candidate %s rejected", self.player, tier, action)

        action = self.fallback(world)
        logger.debug("P%d fallback -> %s", self.player, action)
        return action, {"policy": "greedy", "tier": "fallback", "score": None}

    # ------------------------------------------------------------------
    # Tier 1: defend own near-win streak
    # ------------------------------------------------------------------
    def defend_streak(self, world: WorldState) -> Optional[Candidate]:
        threshold = world.rules.tower_turns_to_win
        if world.get_player(self.player).tower_streak != threshold - 1:
            return None

        mine = world.units_near_objective(self.player)
        theirs = world.units_near_objective(opponent_of(self.player))

        if mine and theirs:
            options = unprotected_targets_near_objective(world, self.player, self.resolver)
            if options:
                return options[0].action, DEFEND_ATTACK_SCORE

        if mine and not theirs:
            return None

        return self._reach_objective(world, DEFEND_REACH_SCORE, nearest_first=True) \
            or self._best_approach(world)

    # ------------------------------------------------------------------
    # Tier 2: opportunistic elimination
    # ------------------------------------------------------------------
    def opportunistic_attack(self, world: WorldState) -> Optional[Candidate]:
        best = self.rubric.best(world, enumerate_all_attacks(world, self.player, self.resolver))
        if best is None:
            return None
        option, score = best
        if score <= world.rules.attack_threshold:
            return None
        logger.debug("P%d best attack on %s scores %d", self.player, option.describe(), score)
        return option.action, score

    # ------------------------------------------------------------------
    # Tier 3: disrupt the opponent's near-win streak
    # ------------------------------------------------------------------
    def disrupt_streak(self, world: WorldState) -> Optional[Candidate]:
        threshold = world.rules.tower_turns_to_win
        opponent = opponent_of(self.player)
        if world.get_player(opponent).tower_streak != threshold - 1:
            return None
        if not world.units_near_objective(opponent):
            return None

        options = unprotected_targets_near_objective(world, self.player, self.resolver)
        if options:
            return options[0].action, DISRUPT_ATTACK_SCORE
        return self._reach_objective(world, DISRUPT_REACH_SCORE, nearest_first=False)

    # ------------------------------------------------------------------
    # Tier 4: general evaluation
    # ------------------------------------------------------------------
    def general_evaluation(self, world: WorldState) -> Optional[Candidate]:
        """
        Score every legal move on a cloned board and every attack by the rubric.

        Order: units in roster order; for each unit its moves (Direction
        order) then its attacks. Only a strictly higher score replaces the
        current best.
        """
        best: Optional[Candidate] = None
        player = world.get_player(self.player)
        for index, unit in enumerate(player.units):
            for direction in Direction:
                dest = direction.step(unit.pos)
                if not world.board.is_empty(dest):
                    continue
                score = self._score_move(world, index, dest)
                if best is None or score > best[1]:
                    best = (Action.move(self.player, index, dest), score)

            for option in enumerate_attacks(world, unit, self.resolver):
                score = self.rubric.score(world, option)
                if best is None or score > best[1]:
                    best = (option.action, score)
        return best

    def _score_move(self, world: WorldState, unit_index: int, dest) -> float:
        """Evaluate the board after a move, on a throwaway copy."""
        trial = world.clone()
        unit = trial.get_player(self.player).get_unit(unit_index)
        self.resolver.try_move(trial, unit, dest)
        return self.evaluator.evaluate(trial, self.player)

    # ------------------------------------------------------------------
    # Tier 5: fallback
    # ------------------------------------------------------------------
    def fallback(self, world: WorldState) -> Action:
        units = world.get_units(self.player)
        if units:
            index = self.rng.randrange(len(units))
            unit = units[index]
            directions = list(Direction)
            self.rng.shuffle(directions)
            for direction in directions:
                dest = direction.step(unit.pos)
                if world.board.is_empty(dest):
                    return Action.move(self.player, index, dest)

        legal = self.resolver.get_all_legal_actions(world, self.player)
        if legal:
            return legal[0]
        return Action.pass_turn(self.player)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _accept(self, world: WorldState, action: Action) -> bool:
        return self.resolver.validate(world, action).valid

    def _reach_objective(self, world: WorldState, score: float, nearest_first: bool) -> Optional[Candidate]:
        """First move that brings a unit two cells out onto the objective's edge."""
        indexed = list(enumerate(world.get_units(self.player)))
        if nearest_first:
            indexed.sort(key=lambda item: world.distance_to_objective(item[1].pos))
        for index, unit in indexed:
            if world.distance_to_objective(unit.pos) != 2:
                continue
            for direction in Direction:
                dest = direction.step(unit.pos)
                if world.distance_to_objective(dest) == 1 and world.board.is_empty(dest):
                    return Action.move(self.player, index, dest), score
        return None

    def _best_approach(self, world: WorldState) -> Optional[Candidate]:
        """Best step toward the objective for units further than two cells out."""
        best: Optional[Candidate] = None
        indexed = sorted(
            enumerate(world.get_units(self.player)),
            key=lambda item: world.distance_to_objective(item[1].pos),
        )
        for index, unit in indexed:
            current = world.distance_to_objective(unit.pos)
            if current <= 2:
                continue
            directions = sorted(Direction, key=lambda d: world.distance_to_objective(d.step(unit.pos)))
            for direction in directions:
                dest = direction.step(unit.pos)
                new_distance = world.distance_to_objective(dest)
                if new_distance < current and world.board.is_empty(dest):
                    score = 150 + (5 - new_distance) * 20
                    if best is None or score > best[1]:
                        best = (Action.move(self.player, index, dest), score)
        return best
