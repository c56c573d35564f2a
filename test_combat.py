"""
Combat resolver tests: movement legality, Blaster and Launcher attacks,
Shield protection and unit removal.

Run with ``python -m unittest test_combat.py`` or ``pytest``.
"""

import unittest

from siege import Action, ActionType, Direction, GameStatus, RejectionKind, SiegeEnv, UnitType
from siege.entities import Unit
from siege.mechanics import CombatResolver, ResolutionResult
from siege.scenario import Scenario, create_default_scenario

B, S, L = UnitType.BLASTER, UnitType.SHIELD, UnitType.LAUNCHER


def start_env(units, starting_player: int = 0) -> SiegeEnv:
    """Environment running a custom line-up with no agents."""
    env = SiegeEnv()
    env.reset(Scenario(units=units, starting_player=starting_player))
    return env


class TestMovement(unittest.TestCase):
    def setUp(self) -> None:
        self.env = SiegeEnv()
        self.env.reset(create_default_scenario())
        self.world = self.env.world

    def test_blaster_steps_forward_and_turn_passes(self) -> None:
        info = self.env.submit_action(Action.move(0, 0, (1, 1)))

        self.assertTrue(info.applied)
        self.assertEqual(self.world.get_player(0).units[0].pos, (1, 1))
        self.assertIs(self.world.board.unit_at((1, 1)), self.world.get_player(0).units[0])
        self.assertIsNone(self.world.board.unit_at((1, 0)))
        self.assertEqual(self.world.current_player, 1)
        self.assertEqual(self.world.turn, 1)
        self.assertEqual(info.resolution.origin, (1, 0))
        self.assertEqual(info.resolution.destination, (1, 1))

    def test_move_onto_occupied_cell_is_rejected(self) -> None:
        before = self.world.to_dict()
        info = self.env.submit_action(Action.move(0, 0, (2, 0)))

        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.kind, RejectionKind.ILLEGAL_ACTION)
        self.assertEqual(info.resolution.rejection.code, "CELL_OCCUPIED")
        self.assertEqual(self.world.to_dict(), before)

    def test_move_two_cells_is_rejected(self) -> None:
        info = self.env.submit_action(Action.move(0, 0, (1, 2)))
        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.code, "NOT_ADJACENT")
        self.assertEqual(self.world.current_player, 0)

    def test_diagonal_move_is_rejected(self) -> None:
        info = self.env.submit_action(Action.move(0, 0, (0, 1)))
        self.assertEqual(info.resolution.rejection.code, "NOT_ADJACENT")

    def test_move_off_grid_is_rejected(self) -> None:
        info = self.env.submit_action(Action.move(0, 0, (1, -1)))
        self.assertEqual(info.resolution.rejection.code, "OUT_OF_BOUNDS")

    def test_move_to_a_three_coordinate_cell_is_rejected(self) -> None:
        action = Action(ActionType.MOVE, 0, 0, {"to": (1, 1, 0)})

        info = self.env.submit_action(action)

        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.code, "OUT_OF_BOUNDS")
        self.assertEqual(self.world.get_player(0).units[0].pos, (1, 0))
        self.assertEqual(self.world.current_player, 0)

    def test_factories_refuse_malformed_cells(self) -> None:
        for bad in [(1, 1, 0), (1,), (1.0, 1), ("a", "b"), 5, None]:
            with self.subTest(cell=bad):
                with self.assertRaises(ValueError):
                    Action.move(0, 0, bad)
                with self.assertRaises(ValueError):
                    Action.adjacent_attack(0, 0, bad)

    def test_from_dict_refuses_malformed_params(self) -> None:
        malformed = [
            {"type": "move", "player": 0, "unit_index": 0, "params": {"to": 5}},
            {"type": "move", "player": 0, "unit_index": 0, "params": {"to": ["a", "b"]}},
            {"type": "move", "player": 0, "unit_index": 0, "params": {"to": [1, 1, 0]}},
            {"type": "adjacent_attack", "player": 0, "unit_index": 0, "params": {"target": [True, 1]}},
            {"type": "line_attack", "player": 0, "unit_index": 2, "params": {"direction": ["DOWN"]}},
            {"type": "move", "player": 0, "unit_index": 0, "params": [1, 1]},
        ]
        for data in malformed:
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    Action.from_dict(data)

    def test_from_dict_accepts_list_cells(self) -> None:
        action = Action.from_dict({"type": "move", "player": 0, "unit_index": 0, "params": {"to": [1, 1]}})
        self.assertEqual(action, Action.move(0, 0, (1, 1)))
        self.assertEqual(action.to, (1, 1))

    def test_acting_out_of_turn_is_invalid_state(self) -> None:
        info = self.env.submit_action(Action.move(1, 0, (1, 3)))
        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.kind, RejectionKind.INVALID_STATE)
        self.assertEqual(info.resolution.rejection.code, "NOT_YOUR_TURN")

    def test_unknown_unit_index_is_invalid_state(self) -> None:
        info = self.env.submit_action(Action.move(0, 7, (1, 1)))
        self.assertEqual(info.resolution.rejection.kind, RejectionKind.INVALID_STATE)
        self.assertEqual(info.resolution.rejection.code, "UNKNOWN_UNIT")

    def test_pass_is_rejected_while_moves_exist(self) -> None:
        info = self.env.submit_action(Action.pass_turn(0))
        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.code, "HAS_LEGAL_ACTIONS")


class TestAttacks(unittest.TestCase):
    def test_launcher_hits_only_first_unit_in_line(self) -> None:
        env = start_env([
            Unit(0, B, (0, 0)),
            Unit(0, L, (3, 0)),
            Unit(1, S, (3, 2)),
            Unit(1, B, (3, 3)),
        ])
        shield, blaster = env.world.get_units(1)

        info = env.submit_action(Action.line_attack(0, 1, Direction.DOWN))

        self.assertTrue(info.applied)
        self.assertEqual(shield.hp, 2)
        self.assertEqual(blaster.hp, 2)
        self.assertEqual(info.resolution.destination, (3, 2))
        self.assertEqual(info.resolution.target_type, UnitType.SHIELD)
        self.assertFalse(info.resolution.blocked)

    def test_line_attack_blocked_by_friendly_is_rejected(self) -> None:
        env = start_env([
            Unit(0, L, (0, 0)),
            Unit(0, B, (0, 1)),
            Unit(1, B, (0, 2)),
        ])
        info = env.submit_action(Action.line_attack(0, 0, Direction.DOWN))

        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.code, "LINE_BLOCKED")
        self.assertEqual(env.world.get_units(1)[0].hp, 2)

    def test_line_attack_out_of_range_finds_nothing(self) -> None:
        env = start_env([
            Unit(0, L, (0, 0)),
            Unit(1, B, (0, 4)),
        ])
        info = env.submit_action(Action.line_attack(0, 0, Direction.DOWN))
        self.assertEqual(info.resolution.rejection.code, "NO_TARGET")

    def test_blaster_cannot_line_attack(self) -> None:
        env = start_env([Unit(0, B, (0, 0)), Unit(1, B, (0, 1))])
        info = env.submit_action(Action.line_attack(0, 0, Direction.DOWN))
        self.assertEqual(info.resolution.rejection.code, "NO_CAPABILITY")

    def test_launcher_cannot_adjacent_attack(self) -> None:
        env = start_env([Unit(0, L, (0, 0)), Unit(1, B, (0, 1))])
        info = env.submit_action(Action.adjacent_attack(0, 0, (0, 1)))
        self.assertEqual(info.resolution.rejection.code, "NO_CAPABILITY")

    def test_blaster_cannot_attack_friendly_or_empty_cells(self) -> None:
        env = start_env([Unit(0, B, (0, 0)), Unit(0, S, (1, 0)), Unit(1, B, (4, 4))])

        friendly = env.submit_action(Action.adjacent_attack(0, 0, (1, 0)))
        empty = env.submit_action(Action.adjacent_attack(0, 0, (0, 1)))

        self.assertEqual(friendly.resolution.rejection.code, "FRIENDLY_TARGET")
        self.assertEqual(empty.resolution.rejection.code, "NO_TARGET")

    def test_adjacent_attack_on_a_three_coordinate_cell_is_rejected(self) -> None:
        env = start_env([Unit(0, B, (0, 0)), Unit(1, B, (1, 0))])
        action = Action(ActionType.ADJACENT_ATTACK, 0, 0, {"target": (1, 0, 0)})

        info = env.submit_action(action)

        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.code, "OUT_OF_BOUNDS")
        self.assertEqual(env.world.get_player(1).units[0].hp, 2)

    def test_shield_blocks_damage_to_adjacent_ally(self) -> None:
        env = start_env([
            Unit(0, B, (0, 2)),
            Unit(1, B, (1, 2)),
            Unit(1, S, (1, 3)),
        ])
        target = env.world.get_units(1)[0]

        info = env.submit_action(Action.adjacent_attack(0, 0, (1, 2)))

        self.assertTrue(info.applied)
        self.assertTrue(info.resolution.blocked)
        self.assertEqual(info.resolution.damage, 0)
        self.assertEqual(target.hp, 2)
        self.assertEqual(env.world.current_player, 1)

    def test_shield_does_not_protect_itself(self) -> None:
        env = start_env([Unit(0, B, (0, 2)), Unit(1, S, (1, 2))])
        info = env.submit_action(Action.adjacent_attack(0, 0, (1, 2)))

        self.assertFalse(info.resolution.blocked)
        self.assertEqual(env.world.get_units(1)[0].hp, 2)

    def test_enemy_shield_does_not_protect(self) -> None:
        env = start_env([
            Unit(0, B, (0, 2)),
            Unit(0, S, (1, 3)),
            Unit(1, B, (1, 2)),
            Unit(1, L, (4, 4)),
        ])
        env.submit_action(Action.adjacent_attack(0, 0, (1, 2)))
        self.assertEqual(env.world.get_units(1)[0].hp, 1)

    def test_killing_blow_removes_unit(self) -> None:
        env = start_env([
            Unit(0, B, (0, 2)),
            Unit(1, B, (1, 2), hp=1),
            Unit(1, L, (4, 4)),
        ])
        info = env.submit_action(Action.adjacent_attack(0, 0, (1, 2)))

        self.assertTrue(info.resolution.target_killed)
        self.assertEqual(len(env.world.get_units(1)), 1)
        self.assertIsNone(env.world.board.unit_at((1, 2)))
        self.assertEqual(env.world.status, GameStatus.ACTIVE)


class TestLegalActions(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = CombatResolver()

    def test_starting_blaster_moves(self) -> None:
        env = SiegeEnv()
        env.reset(create_default_scenario())
        blaster = env.world.get_units(0)[0]

        actions = self.resolver.get_legal_actions(env.world, blaster)

        self.assertEqual([a.to for a in actions], [(0, 0), (1, 1)])

    def test_launcher_lists_only_enemy_lines(self) -> None:
        env = start_env([
            Unit(0, L, (2, 2)),
            Unit(0, S, (1, 2)),
            Unit(1, B, (2, 0)),
            Unit(1, B, (4, 2)),
        ])
        launcher = env.world.get_units(0)[0]

        actions = self.resolver.get_legal_actions(env.world, launcher)
        directions = [a.direction for a in actions if a.direction is not None]

        self.assertEqual(directions, [Direction.RIGHT, Direction.UP])

    def test_boxed_in_shield_has_no_actions_and_may_pass(self) -> None:
        env = start_env([
            Unit(0, S, (0, 0)),
            Unit(1, B, (1, 0)),
            Unit(1, S, (0, 1)),
        ])
        self.assertEqual(self.resolver.get_all_legal_actions(env.world, 0), [])

        info = env.submit_action(Action.pass_turn(0))

        self.assertTrue(info.applied)
        self.assertEqual(env.world.current_player, 1)
        self.assertEqual(env.stalemate.history, [])


class TestResolutionResult(unittest.TestCase):
    def test_dict_round_trip(self) -> None:
        env = start_env([Unit(0, B, (0, 2)), Unit(1, S, (1, 2))])
        result = env.submit_action(Action.adjacent_attack(0, 0, (1, 2))).resolution

        restored = ResolutionResult.from_dict(result.to_dict())

        self.assertEqual(restored, result)


if __name__ == "__main__":
    unittest.main()
