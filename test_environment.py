"""
Turn/game state machine tests: lifecycle, win conditions, presentation
queries and scenario persistence.
"""

import os
import tempfile
import unittest

from siege import (
    Action,
    GameStatus,
    RejectionKind,
    SiegeEnv,
    UnitType,
    WorldState,
)
from siege.entities import Player, Unit
from siege.mechanics import VictoryConditions
from siege.scenario import Scenario, create_default_scenario

B, S, L = UnitType.BLASTER, UnitType.SHIELD, UnitType.LAUNCHER


def start_env(units, starting_player: int = 0) -> SiegeEnv:
    env = SiegeEnv()
    env.reset(Scenario(units=units, starting_player=starting_player))
    return env


class TestLifecycle(unittest.TestCase):
    def test_submit_before_reset_raises(self) -> None:
        env = SiegeEnv()
        with self.assertRaises(RuntimeError):
            env.submit_action(Action.move(0, 0, (1, 1)))

    def test_reset_builds_starting_line_up(self) -> None:
        env = SiegeEnv()
        state = env.reset(create_default_scenario())
        world = state["world"]

        self.assertIs(world, env.world)
        self.assertEqual(world.status, GameStatus.ACTIVE)
        self.assertEqual(world.current_player, 0)
        self.assertEqual(
            [(u.unit_type, u.pos, u.hp) for u in world.get_units(0)],
            [(B, (1, 0), 2), (S, (2, 0), 3), (L, (3, 0), 2)],
        )
        self.assertEqual(
            [(u.unit_type, u.pos) for u in world.get_units(1)],
            [(B, (1, 4)), (S, (2, 4)), (L, (3, 4))],
        )

    def test_reset_accepts_scenario_dict(self) -> None:
        env = SiegeEnv()
        env.reset(create_default_scenario().to_dict())
        self.assertEqual(len(env.world.get_all_units()), 6)

        with self.assertRaises(ValueError):
            env.reset({"config": {}})

    def test_overlapping_start_is_an_internal_error(self) -> None:
        with self.assertRaises(RuntimeError):
            start_env([Unit(0, B, (0, 0)), Unit(1, B, (0, 0))])

    def test_restart_restores_everything(self) -> None:
        env = SiegeEnv()
        env.reset(create_default_scenario())
        env.submit_action(Action.move(0, 0, (1, 1)))
        env.submit_action(Action.move(1, 0, (1, 3)))
        env.world.get_player(0).tower_streak = 2

        env.restart()

        world = env.world
        self.assertEqual(world.turn, 0)
        self.assertEqual(world.current_player, 0)
        self.assertEqual(world.status, GameStatus.ACTIVE)
        self.assertEqual(world.get_units(0)[0].pos, (1, 0))
        self.assertEqual([p.tower_streak for p in world.players], [0, 0])
        self.assertEqual(env.stalemate.history, [])
        self.assertIsNone(env.last_result)

    def test_restart_before_reset_raises(self) -> None:
        with self.assertRaises(RuntimeError):
            SiegeEnv().restart()


class TestWinConditions(unittest.TestCase):
    def test_last_enemy_destroyed_wins(self) -> None:
        env = start_env([
            Unit(0, B, (0, 3)),
            Unit(1, L, (1, 3), hp=1),
        ])
        info = env.submit_action(Action.adjacent_attack(0, 0, (1, 3)))

        self.assertEqual(info.status, GameStatus.WON)
        self.assertEqual(env.winner, 0)
        self.assertEqual(env.world.game_over_reason, "elimination")
        self.assertTrue(env.is_game_over)

    def test_actions_after_game_over_are_invalid_state(self) -> None:
        env = start_env([Unit(0, B, (0, 3)), Unit(1, L, (1, 3), hp=1)])
        env.submit_action(Action.adjacent_attack(0, 0, (1, 3)))

        info = env.submit_action(Action.move(0, 0, (0, 2)))

        self.assertFalse(info.applied)
        self.assertEqual(info.resolution.rejection.kind, RejectionKind.INVALID_STATE)
        self.assertEqual(info.resolution.rejection.code, "GAME_NOT_ACTIVE")

    def test_three_turns_of_tower_control_win(self) -> None:
        env = start_env([
            Unit(0, B, (2, 1)),
            Unit(1, B, (0, 4)),
            Unit(1, S, (4, 4)),
        ])
        moves = [
            Action.move(0, 0, (2, 2)),
            Action.move(1, 0, (0, 3)),
            Action.move(0, 0, (2, 1)),
            Action.move(1, 0, (0, 4)),
        ]
        for action in moves:
            self.assertTrue(env.submit_action(action).applied)
        self.assertEqual(env.world.get_player(0).tower_streak, 2)
        self.assertEqual(env.world.status, GameStatus.ACTIVE)

        info = env.submit_action(Action.move(0, 0, (2, 2)))

        self.assertEqual(info.control.after, 3)
        self.assertEqual(info.status, GameStatus.WON)
        self.assertEqual(env.winner, 0)
        self.assertEqual(env.world.game_over_reason, "tower")

    def test_victory_precedence(self) -> None:
        checker = VictoryConditions()

        lone = WorldState(players=[Player(0), Player(1, units=[Unit(1, B, (0, 0))])])
        result = checker.check_all(lone, 0)
        self.assertEqual((result.winner, result.reason), (1, "elimination"))

        both_empty = WorldState()
        self.assertEqual(checker.check_all(both_empty, 1).winner, 1)

        holding = WorldState(players=[
            Player(0, units=[Unit(0, B, (2, 1))], tower_streak=3),
            Player(1, units=[Unit(1, B, (4, 4))]),
        ])
        result = checker.check_all(holding, 0)
        self.assertEqual((result.winner, result.reason), (0, "tower"))
        self.assertFalse(checker.check_all(holding, 1).is_game_over)


class TestPresentationQueries(unittest.TestCase):
    def setUp(self) -> None:
        self.env = SiegeEnv()
        self.env.reset(create_default_scenario())

    def test_select_and_list_legal_actions(self) -> None:
        result = self.env.select_unit(0, 0)

        self.assertTrue(result.valid)
        self.assertEqual(self.env.selected_unit.pos, (1, 0))
        self.assertEqual(
            [a.to for a in self.env.list_legal_actions_for(0)],
            [(0, 0), (1, 1)],
        )

    def test_cannot_select_opponent_unit(self) -> None:
        result = self.env.select_unit(1, 0)
        self.assertFalse(result.valid)
        self.assertEqual(result.kind, RejectionKind.INVALID_STATE)
        self.assertEqual(self.env.list_legal_actions_for(0, player=1), [])

    def test_turn_end_clears_selection(self) -> None:
        self.env.select_unit(0, 0)
        self.env.submit_action(Action.move(0, 0, (1, 1)))
        self.assertIsNone(self.env.selected_unit)

    def test_clear_selection(self) -> None:
        self.env.select_unit(0, 2)
        self.env.clear_selection()
        self.assertIsNone(self.env.selected_index)

    def test_ai_turn_flag_follows_agent_specs(self) -> None:
        self.assertFalse(self.env.is_ai_turn)
        self.env.submit_action(Action.move(0, 0, (1, 1)))
        self.assertTrue(self.env.is_ai_turn)

    def test_snapshot_contents(self) -> None:
        self.env.submit_action(Action.move(0, 0, (1, 1)))
        snap = self.env.snapshot()

        self.assertEqual(snap["status"], "active")
        self.assertEqual(snap["current_player"], 1)
        self.assertTrue(snap["ai_turn"])
        self.assertEqual(snap["board"][1][1], {"owner": 0, "type": "Blaster", "hp": 2})
        self.assertEqual([p["tower_streak"] for p in snap["players"]], [0, 0])
        self.assertTrue(snap["last_action"]["applied"])
        self.assertEqual(snap["last_action"]["resolution"]["destination"], [1, 1])
        self.assertIsNone(snap["winner"])


class TestScenarioPersistence(unittest.TestCase):
    def test_json_round_trip(self) -> None:
        scenario = create_default_scenario(seed=5)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = scenario.save_json(os.path.join(tmpdir, "scenario.json"))
            loaded = Scenario.load_json(path)

        self.assertEqual(loaded.to_dict(), scenario.to_dict())
        self.assertEqual(loaded.agent_for(1).type, "greedy")
        self.assertIsNone(loaded.agent_for(0))

    def test_bad_unit_type_is_rejected(self) -> None:
        data = create_default_scenario().to_dict()
        data["units"][0]["type"] = "Dragon"
        with self.assertRaises(ValueError):
            Scenario.from_dict(data)

    def test_malformed_unit_position_is_rejected(self) -> None:
        data = create_default_scenario().to_dict()
        data["units"][0]["pos"] = [1, 0, 0]
        with self.assertRaises(ValueError):
            Scenario.from_dict(data)
        with self.assertRaises(ValueError):
            Unit(0, UnitType.BLASTER, (1, 0, 0))

    def test_duplicate_agent_specs_are_rejected(self) -> None:
        data = create_default_scenario().to_dict()
        data["agents"].append(dict(data["agents"][0]))
        with self.assertRaises(ValueError):
            Scenario.from_dict(data)


if __name__ == "__main__":
    unittest.main()
