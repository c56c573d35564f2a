"""
Attack enumeration and the attack scoring rubric.

An attack option is one attack a unit could make right now. Protected
targets are never struck directly; when the Shield protecting them can be
reached instead, the option is a "redirect" onto that Shield.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from siege.core.actions import Action
from siege.core.types import Direction, UnitType, manhattan, opponent_of
from siege.entities import Unit
from siege.mechanics import CombatResolver
from siege.world import WorldState


@dataclass
class AttackOption:
    """
    One available attack.

    Attributes:
        attacker: Unit making the attack
        action: The Action to submit
        target: Unit that would take the hit
        redirect_from: Protected unit whose Shield is struck instead (None
            for a direct attack)
    """
    attacker: Unit
    action: Action
    target: Unit
    redirect_from: Optional[Unit] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_from is not None

    def describe(self) -> str:
        if self.redirect_from is not None:
            return f"{self.target.label()} (shielding {self.redirect_from.label()})"
        return self.target.label()


def enumerate_attacks(
    world: WorldState,
    attacker: Unit,
    resolver: CombatResolver | None = None,
) -> List[AttackOption]:
    """
    All attack options of one unit, in Direction order.

    Args:
        world: Current world state (read only)
        attacker: Unit to enumerate for
        resolver: Shared resolver (a fresh one when omitted)
    """
    resolver = resolver or CombatResolver()
    index = world.get_player(attacker.owner).index_of(attacker)
    options: List[AttackOption] = []

    for direction in Direction:
        if attacker.unit_type.can_adjacent_attack:
            pos = direction.step(attacker.pos)
            enemy = world.board.unit_at(pos) if world.board.in_bounds(pos) else None
            if enemy is None or enemy.owner == attacker.owner:
                continue
            if not resolver.is_protected(world, enemy):
                options.append(AttackOption(attacker, Action.adjacent_attack(attacker.owner, index, pos), enemy))
                continue
            for shield in resolver.protecting_shields(world, enemy):
                if manhattan(attacker.pos, shield.pos) == 1 and not resolver.is_protected(world, shield):
                    action = Action.adjacent_attack(attacker.owner, index, shield.pos)
                    options.append(AttackOption(attacker, action, shield, redirect_from=enemy))

        elif attacker.unit_type.can_line_attack:
            hit = resolver.first_in_line(world, attacker.pos, direction)
            if hit is None or hit[1].owner == attacker.owner:
                continue
            enemy = hit[1]
            if not resolver.is_protected(world, enemy):
                options.append(AttackOption(attacker, Action.line_attack(attacker.owner, index, direction), enemy))
                continue
            for shield in resolver.protecting_shields(world, enemy):
                to_shield = Direction.between(attacker.pos, shield.pos)
                if to_shield is None or resolver.is_protected(world, shield):
                    continue
                in_line = resolver.first_in_line(world, attacker.pos, to_shield)
                if in_line is not None and in_line[1] is shield:
                    action = Action.line_attack(attacker.owner, index, to_shield)
                    options.append(AttackOption(attacker, action, shield, redirect_from=enemy))

    return options


def enumerate_all_attacks(
    world: WorldState,
    player_id: int,
    resolver: CombatResolver | None = None,
) -> List[AttackOption]:
    """Attack options of every unit a player owns, in roster order."""
    resolver = resolver or CombatResolver()
    options: List[AttackOption] = []
    for unit in world.get_units(player_id):
        options.extend(enumerate_attacks(world, unit, resolver))
    return options


def unprotected_targets_near_objective(
    world: WorldState,
    player_id: int,
    resolver: CombatResolver | None = None,
) -> List[AttackOption]:
    """Direct attacks on unprotected enemies standing next to the objective."""
    near = world.units_near_objective(opponent_of(player_id))
    return [
        option for option in enumerate_all_attacks(world, player_id, resolver)
        if not option.is_redirect and any(option.target is unit for unit in near)
    ]


@dataclass(frozen=True)
class RubricWeights:
    """Score weights for one attacking role."""
    base: int
    low_hp: int = 80
    shield_target: int = 70
    near_objective: int = 100
    lethal: int = 150
    redirect_base: int = 0
    redirect_low_hp: int = 80
    redirect_near_objective: int = 90
    per_protected: int = 40


DEFAULT_RUBRIC: Dict[UnitType, RubricWeights] = {
    UnitType.LAUNCHER: RubricWeights(base=100, redirect_base=120),
    UnitType.BLASTER: RubricWeights(base=90, redirect_base=110),
}


class AttackRubric:
    """
    Fixed scoring of a single attack.

    Direct attack: base + bonuses for a target on 1 hp, a Shield target, a
    target next to the objective and a killing blow. Redirect onto a Shield:
    redirect base + bonuses for the Shield on 1 hp, the Shield next to the
    objective and each unit it currently protects.
    """

    def __init__(
        self,
        weights: Dict[UnitType, RubricWeights] | None = None,
        resolver: CombatResolver | None = None,
    ):
        self.weights = weights or DEFAULT_RUBRIC
        self.resolver = resolver or CombatResolver()

    def score(self, world: WorldState, option: AttackOption) -> int:
        w = self.weights[option.attacker.unit_type]
        target = option.target
        near = world.distance_to_objective(target.pos) <= 1

        if option.is_redirect:
            score = w.redirect_base
            if target.hp == 1:
                score += w.redirect_low_hp
            if near:
                score += w.redirect_near_objective
            score += w.per_protected * len(self.resolver.protected_allies(world, target))
            return score

        score = w.base
        if target.hp == 1:
            score += w.low_hp
        if target.unit_type is UnitType.SHIELD:
            score += w.shield_target
        if near:
            score += w.near_objective
        if target.hp <= 1:
            score += w.lethal
        return score

    def best(self, world: WorldState, options: List[AttackOption]) -> Optional[tuple[AttackOption, int]]:
        """Highest-scoring option; ties keep the earliest."""
        best: Optional[tuple[AttackOption, int]] = None
        for option in options:
            score = self.score(world, option)
            if best is None or score > best[1]:
                best = (option, score)
        return best
