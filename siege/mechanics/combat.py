"""
CombatResolver - movement and attack resolution.

This module handles:
- Validating moves, adjacent attacks and line attacks
- Line-of-fire scanning for Launchers
- Shield protection checks
- Applying damage and removing destroyed units
- Listing the legal actions of a unit
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..core.actions import Action
from ..core.types import (
    ActionType,
    ActionValidation,
    Direction,
    GameStatus,
    GridPos,
    UnitType,
    is_grid_pos,
    manhattan,
)

if TYPE_CHECKING:
    from ..entities import Unit
    from ..world.world import WorldState


@dataclass
class ResolutionResult:
    """
    Result of resolving a single action.

    Attributes:
        applied: Whether the action changed the game (blocked attacks count)
        action_type: Kind of action attempted
        player: Acting player id
        unit_type: Role of the acting unit (None for PASS or unknown units)
        origin: Acting unit's position before the action
        destination: Move target, or the cell an attack struck
        target_type: Role of the unit that was attacked
        damage: Hit points removed (0 or 1)
        blocked: True when a Shield absorbed the attack
        target_killed: Whether the target was removed
        rejection: Validation failure (None when applied)
        log: Human-readable log message
    """
    applied: bool
    action_type: ActionType
    player: int
    unit_type: Optional[UnitType] = None
    origin: Optional[GridPos] = None
    destination: Optional[GridPos] = None
    target_type: Optional[UnitType] = None
    damage: int = 0
    blocked: bool = False
    target_killed: bool = False
    rejection: Optional[ActionValidation] = None
    log: str = ""

    @property
    def is_attack(self) -> bool:
        return self.action_type.is_attack

    @classmethod
    def rejected(cls, action: Action, validation: ActionValidation) -> ResolutionResult:
        return cls(
            applied=False,
            action_type=action.type,
            player=action.player,
            rejection=validation,
            log=validation.message,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize resolution result to a plain dict."""
        return {
            "applied": self.applied,
            "action_type": self.action_type.value,
            "player": self.player,
            "unit_type": self.unit_type.value if self.unit_type else None,
            "origin": list(self.origin) if self.origin else None,
            "destination": list(self.destination) if self.destination else None,
            "target_type": self.target_type.value if self.target_type else None,
            "damage": self.damage,
            "blocked": self.blocked,
            "target_killed": self.target_killed,
            "rejection": self.rejection.to_dict() if self.rejection else None,
            "log": self.log,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResolutionResult:
        """Deserialize a resolution result from a dict."""
        def _pos(value):
            return tuple(value) if value is not None else None

        def _type(value):
            return UnitType(value) if value is not None else None

        rejection = data.get("rejection")
        return cls(
            applied=data["applied"],
            action_type=ActionType(data["action_type"]),
            player=data["player"],
            unit_type=_type(data.get("unit_type")),
            origin=_pos(data.get("origin")),
            destination=_pos(data.get("destination")),
            target_type=_type(data.get("target_type")),
            damage=data.get("damage", 0),
            blocked=data.get("blocked", False),
            target_killed=data.get("target_killed", False),
            rejection=ActionValidation.from_dict(rejection) if rejection else None,
            log=data.get("log", ""),
        )


class CombatResolver:
    """
    Stateless resolver for moves and attacks.

    The CombatResolver:
    - Validates actions against turn, ownership and board rules
    - Moves units
    - Resolves Blaster and Launcher attacks, honouring Shield protection
    - Removes destroyed units in the same step

    All methods are stateless - they only touch the WorldState passed in.
    Rejected actions never modify the world.
    """

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def resolve(self, world: WorldState, action: Action) -> ResolutionResult:
        """
        Validate and apply one action.

        Args:
            world: Current world state (modified in-place on success)
            action: Action to resolve

        Returns:
            ResolutionResult describing what happened
        """
        validation = self.validate(world, action)
        if not validation.valid:
            return ResolutionResult.rejected(action, validation)

        if action.type == ActionType.PASS:
            return ResolutionResult(
                applied=True,
                action_type=ActionType.PASS,
                player=action.player,
                log=f"P{action.player} has no legal action and passes",
            )

        unit = world.get_player(action.player).get_unit(action.unit_index)
        if action.type == ActionType.MOVE:
            return self.try_move(world, unit, action.to)
        if action.type == ActionType.ADJACENT_ATTACK:
            return self.try_adjacent_attack(world, unit, action.target)
        return self.try_line_attack(world, unit, action.direction)

    def validate(self, world: WorldState, action: Action) -> ActionValidation:
        """
        Check an action without applying it.

        State checks (game active, acting player, known unit) come first and
        report INVALID_STATE; rule checks report ILLEGAL_ACTION.
        """
        if world.status != GameStatus.ACTIVE:
            return ActionValidation.invalid_state(
                "GAME_NOT_ACTIVE",
                f"Game is {world.status.value}; no actions accepted"
            )
        if action.player != world.current_player:
            return ActionValidation.invalid_state(
                "NOT_YOUR_TURN",
                f"P{action.player} acted during P{world.current_player}'s turn"
            )

        if action.type == ActionType.PASS:
            if self.get_all_legal_actions(world, action.player):
                return ActionValidation.illegal(
                    "HAS_LEGAL_ACTIONS",
                    f"P{action.player} cannot pass while a legal action exists"
                )
            return ActionValidation.success()

        unit = world.get_player(action.player).get_unit(action.unit_index)
        if unit is None:
            return ActionValidation.invalid_state(
                "UNKNOWN_UNIT",
                f"P{action.player} has no unit at roster index {action.unit_index}"
            )

        if action.type == ActionType.MOVE:
            return self.validate_move(world, unit, action.to)
        if action.type == ActionType.ADJACENT_ATTACK:
            return self.validate_adjacent_attack(world, unit, action.target)
        if action.type == ActionType.LINE_ATTACK:
            return self.validate_line_attack(world, unit, action.direction)
        return ActionValidation.illegal(
            "UNKNOWN_ACTION",
            f"{unit.label()} unknown action type {action.type}"
        )

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def validate_move(self, world: WorldState, unit: Unit, destination: GridPos) -> ActionValidation:
        """Validate a MOVE (bounds, orthogonal adjacency, empty cell)."""
        if not is_grid_pos(destination) or not world.board.in_bounds(destination):
            return ActionValidation.illegal(
                "OUT_OF_BOUNDS",
                f"{unit.label()} cannot move off the grid to {destination}"
            )
        if manhattan(unit.pos, destination) != 1:
            return ActionValidation.illegal(
                "NOT_ADJACENT",
                f"{unit.label()} can only move one cell orthogonally, not to {destination}"
            )
        if not world.board.is_empty(destination):
            return ActionValidation.illegal(
                "CELL_OCCUPIED",
                f"{unit.label()} cannot move to occupied cell {destination}"
            )
        return ActionValidation.success()

    def try_move(self, world: WorldState, unit: Unit, destination: GridPos) -> ResolutionResult:
        """
        Move a unit one cell.

        Args:
            world: Current world state (modified in-place on success)
            unit: Unit to move
            destination: Target cell

        Returns:
            ResolutionResult (applied or rejected)
        """
        validation = self.validate_move(world, unit, destination)
        if not validation.valid:
            return ResolutionResult(
                applied=False,
                action_type=ActionType.MOVE,
                player=unit.owner,
                unit_type=unit.unit_type,
                origin=unit.pos,
                destination=destination,
                rejection=validation,
                log=validation.message,
            )

        origin = unit.pos
        unit.pos = tuple(destination)
        world.refresh_board()

        return ResolutionResult(
            applied=True,
            action_type=ActionType.MOVE,
            player=unit.owner,
            unit_type=unit.unit_type,
            origin=origin,
            destination=unit.pos,
            log=f"{unit.unit_type.value}(P{unit.owner}) moves {origin} -> {unit.pos}",
        )

    # ------------------------------------------------------------------
    # Attacks
    # ------------------------------------------------------------------
    def validate_adjacent_attack(
        self,
        world: WorldState,
        attacker: Unit,
        target_pos: GridPos,
    ) -> ActionValidation:
        """Validate a Blaster attack on an orthogonally adjacent enemy."""
        if not attacker.unit_type.can_adjacent_attack:
            return ActionValidation.illegal(
                "NO_CAPABILITY",
                f"{attacker.label()} has no adjacent attack"
            )
        if not is_grid_pos(target_pos) or not world.board.in_bounds(target_pos):
            return ActionValidation.illegal(
                "OUT_OF_BOUNDS",
                f"{attacker.label()} cannot attack off-grid cell {target_pos}"
            )
        if manhattan(attacker.pos, target_pos) != 1:
            return ActionValidation.illegal(
                "NOT_ADJACENT",
                f"{attacker.label()} can only attack adjacent cells, not {target_pos}"
            )
        target = world.board.unit_at(target_pos)
        if target is None:
            return ActionValidation.illegal(
                "NO_TARGET",
                f"{attacker.label()} attacks empty cell {target_pos}"
            )
        if target.owner == attacker.owner:
            return ActionValidation.illegal(
                "FRIENDLY_TARGET",
                f"{attacker.label()} cannot attack friendly {target.label()}"
            )
        return ActionValidation.success()

    def try_adjacent_attack(
        self,
        world: WorldState,
        attacker: Unit,
        target_pos: GridPos,
    ) -> ResolutionResult:
        """Blaster attack on the enemy standing at target_pos."""
        validation = self.validate_adjacent_attack(world, attacker, target_pos)
        if not validation.valid:
            return ResolutionResult(
                applied=False,
                action_type=ActionType.ADJACENT_ATTACK,
                player=attacker.owner,
                unit_type=attacker.unit_type,
                origin=attacker.pos,
                destination=target_pos,
                rejection=validation,
                log=validation.message,
            )
        target = world.board.unit_at(target_pos)
        return self._strike(world, attacker, target, ActionType.ADJACENT_ATTACK)

    def validate_line_attack(
        self,
        world: WorldState,
        attacker: Unit,
        direction: Direction,
    ) -> ActionValidation:
        """Validate a Launcher shot: the first occupant in line must be an enemy."""
        if not attacker.unit_type.can_line_attack:
            return ActionValidation.illegal(
                "NO_CAPABILITY",
                f"{attacker.label()} has no line attack"
            )
        if not isinstance(direction, Direction):
            return ActionValidation.illegal(
                "INVALID_DIRECTION",
                f"{attacker.label()} invalid attack direction {direction!r}"
            )
        hit = self.first_in_line(world, attacker.pos, direction)
        if hit is None:
            return ActionValidation.illegal(
                "NO_TARGET",
                f"{attacker.label()} has nothing in range {direction.name}"
            )
        target = hit[1]
        if target.owner == attacker.owner:
            return ActionValidation.illegal(
                "LINE_BLOCKED",
                f"{attacker.label()} line {direction.name} is blocked by friendly {target.label()}"
            )
        return ActionValidation.success()

    def try_line_attack(
        self,
        world: WorldState,
        attacker: Unit,
        direction: Direction,
    ) -> ResolutionResult:
        """Launcher shot: hits the nearest unit in line, never pierces."""
        validation = self.validate_line_attack(world, attacker, direction)
        if not validation.valid:
            return ResolutionResult(
                applied=False,
                action_type=ActionType.LINE_ATTACK,
                player=attacker.owner,
                unit_type=attacker.unit_type,
                origin=attacker.pos,
                rejection=validation,
                log=validation.message,
            )
        _, target = self.first_in_line(world, attacker.pos, direction)
        return self._strike(world, attacker, target, ActionType.LINE_ATTACK)

    def first_in_line(
        self,
        world: WorldState,
        origin: GridPos,
        direction: Direction,
    ) -> Optional[Tuple[GridPos, Unit]]:
        """
        Scan outward from origin for the first occupied cell.

        The scan covers at most rules.line_attack_range cells and stops at
        the grid edge.

        Returns:
            (position, unit) of the first occupant, or None
        """
        for dist in range(1, world.rules.line_attack_range + 1):
            pos = direction.step(origin, dist)
            if not world.board.in_bounds(pos):
                return None
            unit = world.board.unit_at(pos)
            if unit is not None:
                return pos, unit
        return None

    # ------------------------------------------------------------------
    # Protection and damage
    # ------------------------------------------------------------------
    def protecting_shields(self, world: WorldState, unit: Unit) -> List[Unit]:
        """Same-owner Shields (other than the unit itself) within distance 1."""
        return [
            shield for shield in world.get_player(unit.owner).units
            if shield.unit_type is UnitType.SHIELD
            and shield is not unit
            and manhattan(shield.pos, unit.pos) <= 1
        ]

    def is_protected(self, world: WorldState, unit: Unit) -> bool:
        """
        Whether incoming damage to the unit is absorbed.

        Recomputed at the moment of each attack; never cached.
        """
        return bool(self.protecting_shields(world, unit))

    def protected_allies(self, world: WorldState, shield: Unit) -> List[Unit]:
        """Units this Shield currently protects."""
        return [
            ally for ally in world.get_player(shield.owner).units
            if ally is not shield and manhattan(shield.pos, ally.pos) <= 1
        ]

    def _strike(
        self,
        world: WorldState,
        attacker: Unit,
        target: Unit,
        action_type: ActionType,
    ) -> ResolutionResult:
        """Apply one point of damage unless the target is protected."""
        target_pos = target.pos
        if self.is_protected(world, target):
            return ResolutionResult(
                applied=True,
                action_type=action_type,
                player=attacker.owner,
                unit_type=attacker.unit_type,
                origin=attacker.pos,
                destination=target_pos,
                target_type=target.unit_type,
                blocked=True,
                log=f"{attacker.label()} attacks {target.label()} -> BLOCKED by shield",
            )

        target.hp -= 1
        killed = not target.alive
        if killed:
            world.remove_unit(target)
        log = (
            f"{attacker.label()} attacks {target.unit_type.value}(P{target.owner})@{target_pos} "
            f"-> HIT ({'destroyed' if killed else f'hp {target.hp}'})"
        )
        return ResolutionResult(
            applied=True,
            action_type=action_type,
            player=attacker.owner,
            unit_type=attacker.unit_type,
            origin=attacker.pos,
            destination=target_pos,
            target_type=target.unit_type,
            damage=1,
            target_killed=killed,
            log=log,
        )

    # ------------------------------------------------------------------
    # Legal action listing
    # ------------------------------------------------------------------
    def get_legal_actions(self, world: WorldState, unit: Unit) -> List[Action]:
        """
        Every rule-legal action for a unit, ignoring whose turn it is.

        Moves come first, then attacks, each in Direction order. Attacks on
        protected targets are included: a blocked attack is a legal action.
        """
        player = world.get_player(unit.owner)
        index = player.index_of(unit)
        actions: List[Action] = []

        for direction in Direction:
            dest = direction.step(unit.pos)
            if world.board.is_empty(dest):
                actions.append(Action.move(unit.owner, index, dest))

        if unit.unit_type.can_adjacent_attack:
            for direction in Direction:
                target_pos = direction.step(unit.pos)
                target = world.board.unit_at(target_pos) if world.board.in_bounds(target_pos) else None
                if target is not None and target.owner != unit.owner:
                    actions.append(Action.adjacent_attack(unit.owner, index, target_pos))

        if unit.unit_type.can_line_attack:
            for direction in Direction:
                hit = self.first_in_line(world, unit.pos, direction)
                if hit is not None and hit[1].owner != unit.owner:
                    actions.append(Action.line_attack(unit.owner, index, direction))

        return actions

    def get_all_legal_actions(self, world: WorldState, player_id: int) -> List[Action]:
        """Legal actions of every unit a player owns, in roster order."""
        actions: List[Action] = []
        for unit in world.get_player(player_id).units:
            actions.extend(self.get_legal_actions(world, unit))
        return actions
