"""
Greedy agent tests: each priority tier, candidate validation and the
guarantee that move simulation never touches the live world.
"""

import unittest

from agents import GreedyAgent, RandomAgent, resolve_agent_class
from siege import Action, ActionType, Direction, SiegeEnv, UnitType
from siege.entities import Unit
from siege.scenario import Scenario, create_default_scenario

B, S, L = UnitType.BLASTER, UnitType.SHIELD, UnitType.LAUNCHER


def start_env(units, starting_player: int = 1) -> SiegeEnv:
    env = SiegeEnv()
    env.reset(Scenario(units=units, starting_player=starting_player))
    return env


class TestGreedyTiers(unittest.TestCase):
    def setUp(self) -> None:
        self.agent = GreedyAgent(player=1)

    def test_opportunistic_attack_on_weak_unit(self) -> None:
        env = start_env([
            Unit(0, L, (1, 1), hp=1),
            Unit(0, B, (4, 0)),
            Unit(1, B, (1, 2)),
        ])
        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(action, Action.adjacent_attack(1, 0, (1, 1)))
        self.assertEqual(meta["tier"], "attack")
        self.assertEqual(meta["score"], 90 + 80 + 150)

    def test_defend_moves_nearest_unit_onto_objective_edge(self) -> None:
        env = start_env([
            Unit(0, B, (4, 0)),
            Unit(1, B, (0, 4)),
            Unit(1, S, (2, 4)),
        ])
        env.world.get_player(1).tower_streak = 2

        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(action, Action.move(1, 1, (2, 3)))
        self.assertEqual(meta["tier"], "defend")
        self.assertEqual(meta["score"], 220)

    def test_defend_attacks_contesting_unit(self) -> None:
        env = start_env([
            Unit(0, L, (2, 2)),
            Unit(0, B, (4, 4)),
            Unit(1, B, (2, 1)),
        ])
        env.world.get_player(1).tower_streak = 2

        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(action, Action.adjacent_attack(1, 0, (2, 2)))
        self.assertEqual(meta["tier"], "defend")
        self.assertEqual(meta["score"], 250)

    def test_defend_approach_when_nobody_is_two_cells_out(self) -> None:
        env = start_env([
            Unit(0, B, (4, 0)),
            Unit(1, B, (0, 4)),
        ])
        env.world.get_player(1).tower_streak = 2

        action, score = self.agent.defend_streak(env.world)

        self.assertEqual(action, Action.move(1, 0, (1, 4)))
        self.assertEqual(score, 150 + (5 - 3) * 20)

    def test_defend_holds_when_uncontested(self) -> None:
        env = start_env([
            Unit(0, B, (4, 4)),
            Unit(1, B, (2, 1)),
        ])
        env.world.get_player(1).tower_streak = 2
        self.assertIsNone(self.agent.defend_streak(env.world))

    def test_disrupt_attack_on_unit_holding_objective(self) -> None:
        env = start_env([
            Unit(0, B, (2, 1)),
            Unit(1, L, (2, 4)),
        ])
        env.world.get_player(0).tower_streak = 2

        self.assertEqual(
            self.agent.disrupt_streak(env.world),
            (Action.line_attack(1, 0, Direction.UP), 200),
        )
        # The same shot already clears the opportunistic threshold.
        action, meta = self.agent.get_action({"world": env.world})
        self.assertEqual(action, Action.line_attack(1, 0, Direction.UP))
        self.assertEqual(meta["tier"], "attack")

    def test_disrupt_moves_next_to_objective(self) -> None:
        env = start_env([
            Unit(0, S, (2, 1)),
            Unit(1, B, (0, 2)),
        ])
        env.world.get_player(0).tower_streak = 2

        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(action, Action.move(1, 0, (1, 2)))
        self.assertEqual(meta["tier"], "disrupt")
        self.assertEqual(meta["score"], 180)

    def test_no_disruption_when_opponent_streak_is_low(self) -> None:
        env = start_env([Unit(0, S, (2, 1)), Unit(1, B, (0, 2))])
        self.assertIsNone(self.agent.disrupt_streak(env.world))

    def test_general_evaluation_leaves_world_untouched(self) -> None:
        env = SiegeEnv()
        env.reset(Scenario(units=create_default_scenario().units, starting_player=1))
        before = env.world.to_dict()

        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(meta["tier"], "evaluate")
        self.assertEqual(action.type, ActionType.MOVE)
        self.assertEqual(env.world.to_dict(), before)
        self.assertTrue(env.submit_action(action).applied)

    def test_general_evaluation_prefers_the_centre(self) -> None:
        env = start_env([
            Unit(0, B, (0, 0)),
            Unit(1, B, (2, 4)),
        ])
        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(meta["tier"], "evaluate")
        self.assertEqual(action, Action.move(1, 0, (2, 3)))

    def test_boxed_in_agent_passes(self) -> None:
        env = start_env([
            Unit(0, B, (1, 0)),
            Unit(0, S, (0, 1)),
            Unit(1, S, (0, 0)),
        ])
        action, meta = self.agent.get_action({"world": env.world})

        self.assertEqual(action, Action.pass_turn(1))
        self.assertEqual(meta["tier"], "fallback")
        self.assertTrue(env.submit_action(action).applied)

    def test_no_action_out_of_turn(self) -> None:
        env = start_env([Unit(0, B, (0, 0)), Unit(1, B, (4, 4))], starting_player=0)
        action, meta = self.agent.get_action({"world": env.world})
        self.assertIsNone(action)
        self.assertIsNone(meta["tier"])


class TestAgentRegistry(unittest.TestCase):
    def test_registered_names(self) -> None:
        self.assertIs(resolve_agent_class("greedy"), GreedyAgent)
        self.assertIs(resolve_agent_class("Random"), RandomAgent)

    def test_unknown_agent_type(self) -> None:
        with self.assertRaises(ValueError):
            resolve_agent_class("minimax")


class TestRandomAgent(unittest.TestCase):
    def test_picks_a_legal_action(self) -> None:
        env = SiegeEnv()
        env.reset(create_default_scenario())
        agent = RandomAgent(player=0, seed=3)

        action, meta = agent.get_action({"world": env.world})

        self.assertEqual(meta["policy"], "random")
        self.assertTrue(env.validate_action(action).valid)


if __name__ == "__main__":
    unittest.main()
