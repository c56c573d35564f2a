import unittest

from siege import UnitType, WorldState
from siege.entities import Player, Unit
from siege.mechanics import ObjectiveTracker

B, S = UnitType.BLASTER, UnitType.SHIELD


def world_with(p0_units, p1_units, p0_streak: int = 0) -> WorldState:
    return WorldState(players=[
        Player(0, units=p0_units, tower_streak=p0_streak),
        Player(1, units=p1_units),
    ])


class TestObjectiveTracker(unittest.TestCase):
    def setUp(self) -> None:
        self.tracker = ObjectiveTracker()

    def test_uncontested_control_increments(self) -> None:
        world = world_with([Unit(0, B, (2, 1))], [Unit(1, B, (4, 4))], p0_streak=1)
        result = self.tracker.evaluate_control(world, 0)

        self.assertEqual((result.before, result.after), (1, 2))
        self.assertEqual(result.outcome, "gained")
        self.assertEqual(world.get_player(0).tower_streak, 2)

    def test_standing_on_the_objective_counts(self) -> None:
        world = world_with([Unit(0, B, (2, 2))], [Unit(1, B, (4, 4))])
        self.assertEqual(self.tracker.evaluate_control(world, 0).after, 1)

    def test_contested_control_keeps_streak(self) -> None:
        world = world_with([Unit(0, B, (2, 1))], [Unit(1, S, (3, 2))], p0_streak=2)
        result = self.tracker.evaluate_control(world, 0)

        self.assertTrue(result.contested)
        self.assertEqual(result.outcome, "contested")
        self.assertEqual(world.get_player(0).tower_streak, 2)

    def test_leaving_the_objective_resets(self) -> None:
        world = world_with([Unit(0, B, (1, 1))], [Unit(1, S, (3, 2))], p0_streak=2)
        result = self.tracker.evaluate_control(world, 0)

        self.assertFalse(result.holding)
        self.assertEqual(result.outcome, "lost")
        self.assertEqual(world.get_player(0).tower_streak, 0)

    def test_only_the_given_player_is_updated(self) -> None:
        world = world_with([Unit(0, B, (2, 1))], [Unit(1, S, (4, 4))])
        world.get_player(1).tower_streak = 2
        self.tracker.evaluate_control(world, 0)
        self.assertEqual(world.get_player(1).tower_streak, 2)


if __name__ == "__main__":
    unittest.main()
