"""
Static board evaluation for the greedy agent.

The score is a weighted sum seen from one player's side: tower streaks,
presence next to the objective, material and hit points, Shield coverage,
attacks that are available right now, and units standing between an enemy
and the objective. Higher is better for that player.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from siege.core.types import UnitType, opponent_of
from siege.mechanics import CombatResolver
from siege.world import WorldState

from .targeting import enumerate_all_attacks


@dataclass(frozen=True)
class EvaluatorWeights:
    """Fixed evaluator constants. Opponent weights are applied as penalties."""
    own_streak: int = 150
    opponent_streak: int = 180
    objective_presence: int = 80
    approach_multiplier: int = 8
    approach_reach: int = 5
    own_unit: int = 70
    opponent_unit: int = 90
    own_hp: int = 25
    opponent_hp: int = 30
    own_shield: int = 30
    opponent_shield: int = 50
    own_shield_cover: int = 40
    opponent_shield_cover: int = 60
    protected_ally: int = 25
    path_block: int = 30

    # Attack opportunities: (direct, low hp, Shield target, near objective, redirect)
    launcher_opportunity: tuple = (50, 80, 70, 90, 85)
    blaster_opportunity: tuple = (45, 75, 65, 85, 80)


class BoardEvaluator:
    """
    Scores a position for one player.

    Args:
        weights: Evaluator constants
        resolver: Shared CombatResolver for protection and line checks
    """

    def __init__(
        self,
        weights: Optional[EvaluatorWeights] = None,
        resolver: Optional[CombatResolver] = None,
    ):
        self.weights = weights or EvaluatorWeights()
        self.resolver = resolver or CombatResolver()

    def evaluate(self, world: WorldState, player_id: int) -> float:
        """Total score of the position for player_id."""
        return sum(self.breakdown(world, player_id).values())

    def breakdown(self, world: WorldState, player_id: int) -> Dict[str, float]:
        """Per-term scores; evaluate() is their sum."""
        return {
            "streaks": self._streaks(world, player_id),
            "objective": self._objective(world, player_id),
            "material": self._material(world, player_id),
            "shields": self._shields(world, player_id),
            "opportunities": self._opportunities(world, player_id),
            "path_block": self._path_block(world, player_id),
        }

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------
    def _streaks(self, world: WorldState, me: int) -> float:
        w = self.weights
        return (
            world.get_player(me).tower_streak * w.own_streak
            - world.get_opponent(me).tower_streak * w.opponent_streak
        )

    def _objective(self, world: WorldState, me: int) -> float:
        w = self.weights
        mine = len(world.units_near_objective(me))
        theirs = len(world.units_near_objective(opponent_of(me)))
        score = (mine - theirs) * w.objective_presence
        if mine == 0 and theirs == 0:
            for unit in world.get_units(me):
                d = world.distance_to_objective(unit.pos)
                score += (w.approach_reach - d) ** 3 * w.approach_multiplier
        return score

    def _material(self, world: WorldState, me: int) -> float:
        w = self.weights
        own = world.get_player(me)
        opp = world.get_opponent(me)
        return (
            len(own.units) * w.own_unit
            - len(opp.units) * w.opponent_unit
            + own.total_hp() * w.own_hp
            - opp.total_hp() * w.opponent_hp
        )

    def _shields(self, world: WorldState, me: int) -> float:
        w = self.weights
        score = 0
        for shield in world.get_player(me).units_of_type(UnitType.SHIELD):
            covered = len(self.resolver.protected_allies(world, shield))
            score += w.own_shield + covered * (w.own_shield_cover + w.protected_ally)
        for shield in world.get_opponent(me).units_of_type(UnitType.SHIELD):
            covered = len(self.resolver.protected_allies(world, shield))
            score -= w.opponent_shield + covered * w.opponent_shield_cover
        return score

    def _opportunities(self, world: WorldState, me: int) -> float:
        score = 0
        for option in enumerate_all_attacks(world, me, self.resolver):
            if option.attacker.unit_type is UnitType.LAUNCHER:
                direct, low_hp, shield, near, redirect = self.weights.launcher_opportunity
            else:
                direct, low_hp, shield, near, redirect = self.weights.blaster_opportunity
            if option.is_redirect:
                score += redirect
                continue
            target = option.target
            score += direct
            if target.hp == 1:
                score += low_hp
            if target.unit_type is UnitType.SHIELD:
                score += shield
            if world.distance_to_objective(target.pos) <= 1:
                score += near
        return score

    def _path_block(self, world: WorldState, me: int) -> float:
        """Own units on the objective's side of an enemy on both axes, per pair."""
        if not world.units_near_objective(me):
            return 0
        tx, ty = world.objective
        score = 0
        for unit in world.get_units(me):
            for enemy in world.get_units(opponent_of(me)):
                if (
                    (unit.pos[0] - enemy.pos[0]) * (tx - enemy.pos[0]) > 0
                    and (unit.pos[1] - enemy.pos[1]) * (ty - enemy.pos[1]) > 0
                ):
                    score += self.weights.path_block
        return score
