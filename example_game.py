from infra.logger import configure_logging
from siege.scenario import create_ai_battle_scenario
from game_runner import run_single_game, run_multiple_games


def main():
    """Run example games."""
    configure_logging(level="WARNING")

    print("Siege Pulse - Example Game Runner")
    print("=" * 80)

    # =========================================================================
    # Example 1: Greedy vs greedy, printing the final board
    # =========================================================================
    print("\n" + "=" * 80)
    print("EXAMPLE 1: Greedy vs Greedy")
    print("=" * 80)

    scenario = create_ai_battle_scenario("greedy", "greedy", seed=7)
    print(f"Loaded scenario: {scenario}")
    summary = run_single_game(scenario, max_turns=200)
    print(summary.world)
    winner = f"P{summary.winner}" if summary.winner is not None else "DRAW"
    print(f"Result: {winner} ({summary.reason}) after {summary.turns} turns")

    # =========================================================================
    # Example 2: Greedy vs random over several seeds
    # =========================================================================
    print("\n" + "=" * 80)
    print("EXAMPLE 2: Greedy (P0) vs Random (P1), 10 games")
    print("=" * 80)

    results = run_multiple_games(
        scenario=create_ai_battle_scenario("greedy", "random"),
        num_games=10,
        base_seed=100,
    )

    greedy_wins = sum(1 for r in results if r.winner == 0)
    random_wins = sum(1 for r in results if r.winner == 1)
    draws = len(results) - greedy_wins - random_wins

    print("\nStatistics across 10 games:")
    print(f"  Greedy wins: {greedy_wins} ({greedy_wins/len(results)*100:.1f}%)")
    print(f"  Random wins: {random_wins} ({random_wins/len(results)*100:.1f}%)")
    print(f"  Draws:       {draws} ({draws/len(results)*100:.1f}%)")

    print("\nIndividual Game Results:")
    print(f"{'Game':<6} {'Winner':<10} {'Reason':<14} {'Turns':<8}")
    print("-" * 80)
    for i, r in enumerate(results, 1):
        winner_str = f"P{r.winner}" if r.winner is not None else "DRAW"
        print(f"{i:<6} {winner_str:<10} {str(r.reason):<14} {r.turns:<8}")


if __name__ == "__main__":
    main()
