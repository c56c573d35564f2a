from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from agents import PreparedAgent, create_agent_from_spec
from infra.logger import get_logger
from siege import SiegeEnv
from siege.core.actions import Action
from siege.core.types import GameStatus
from siege.environment import StepInfo
from siege.scenario import Scenario
from siege.world import WorldState

from game_frame import Frame

logger = get_logger(__name__)


class GameRunner:
    """
    Step-by-step game runner that returns UI-friendly frames.

    Players with an AgentSpec in the scenario are played by their agent;
    the others expect a human action passed to step().
    Use get_frame() before any actions, then step() until done.
    """

    def __init__(self, scenario: Scenario, verbose: bool = False):
        self.scenario = scenario.clone()
        self.verbose = verbose

        self.env = SiegeEnv(verbose=verbose)
        self._state = self.env.reset(self.scenario)
        self._agents: Dict[int, PreparedAgent] = self._agents_from_scenario(self.scenario)

        self._last_info: StepInfo | None = None

    # ------------------------------------------------------------------#
    # Properties
    # ------------------------------------------------------------------#
    @property
    def state(self) -> Dict[str, Any]:
        return self._state

    @property
    def world(self) -> WorldState:
        world = self._state["world"]
        if world is None:
            raise RuntimeError("World state is not initialized")
        return world

    @property
    def done(self) -> bool:
        return self.env.is_game_over

    @property
    def turn(self) -> int:
        """Completed actions, pulled directly from the world state."""
        return self.world.turn

    @property
    def is_ai_turn(self) -> bool:
        return self.env.is_ai_turn

    @property
    def agents(self) -> Dict[int, PreparedAgent]:
        return dict(self._agents)

    # ------------------------------------------------------------------#
    # Core API
    # ------------------------------------------------------------------#
    def step(
        self,
        action: Optional[Action] = None,
        injections: Optional[Dict[str, Any]] = None,
    ) -> Frame:
        """
        Play one action and return a frame of the resulting position.

        On an AI turn the agent chooses the action and `action` must be
        None; on a human turn `action` is required.

        Args:
            action: Human action for a human turn
            injections: Optional extra kwargs for the agent

        Raises:
            RuntimeError: If the game is over or the call does not fit whose
                turn it is
        """
        if self.done:
            raise RuntimeError("Game is already finished")

        metadata: Optional[Dict[str, Any]] = None
        if self.env.is_ai_turn:
            if action is not None:
                raise RuntimeError("It is the AI's turn; no human action accepted")
            prepared = self._agents[self.world.current_player]
            action, metadata = prepared.agent.get_action(
                self._state,
                step_info=self._last_info,
                **(injections or {}),
            )
            if action is None:
                raise RuntimeError(f"{prepared.agent} produced no action")
        elif action is None:
            raise RuntimeError(f"P{self.world.current_player} is human-controlled; an action is required")

        info = self.env.submit_action(action)
        if info.applied:
            self._last_info = info
        elif metadata is not None:
            logger.warning("Agent action %s rejected: %s", action, info.resolution.log)

        return Frame(
            world=self.world.clone(),
            action=action,
            action_metadata=metadata,
            step_info=info,
            done=self.done,
            ai_turn=self.env.is_ai_turn,
        )

    def run(self, max_turns: Optional[int] = None, *, include_history: bool = False) -> Frame | List[Frame]:
        """
        Let the agents play until the game ends (or max_turns actions).

        Returns the final frame, or the full frame history if include_history
        is True.

        Raises:
            RuntimeError: If a human-controlled player is to move
        """
        frames: List[Frame] = []
        while not self.done:
            if max_turns is not None and len(frames) >= max_turns:
                logger.info("Stopping after %d actions without a result", len(frames))
                break
            if not self.env.is_ai_turn:
                raise RuntimeError("run() needs an agent for every player")
            frames.append(self.step())

        if not frames:
            frames.append(self.get_frame())
        return frames if include_history else frames[-1]

    def restart(self) -> Frame:
        self._state = self.env.restart()
        self._last_info = None
        return self.get_frame()

    def get_frame(self) -> Frame:
        """Current position without an action, e.g. for the initial view."""
        return Frame(world=self.world.clone(), done=self.done, ai_turn=self.env.is_ai_turn)

    # Helpers
    def _agents_from_scenario(self, scenario: Scenario) -> Dict[int, PreparedAgent]:
        agents: Dict[int, PreparedAgent] = {}
        for spec in scenario.agents:
            if spec.player in agents:
                raise ValueError(f"Multiple AgentSpecs found for player {spec.player}")
            if "seed" not in spec.init_params and scenario.seed is not None:
                spec.init_params["seed"] = scenario.seed + spec.player
            agents[spec.player] = create_agent_from_spec(spec)
        return agents


@dataclass
class GameSummary:
    """Outcome of one finished (or turn-limited) game."""
    status: GameStatus
    winner: Optional[int]
    reason: Optional[str]
    turns: int
    world: WorldState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "winner": self.winner,
            "reason": self.reason,
            "turns": self.turns,
        }


def run_single_game(
    scenario: Scenario,
    verbose: bool = False,
    max_turns: Optional[int] = 200,
) -> GameSummary:
    """
    Play one agent-vs-agent game to completion.

    Args:
        scenario: Scenario with an AgentSpec for both players
        verbose: Log every action at INFO
        max_turns: Safety cap on actions (None = unlimited)
    """
    runner = GameRunner(scenario, verbose=verbose)
    runner.run(max_turns=max_turns)
    world = runner.world
    summary = GameSummary(
        status=world.status,
        winner=world.winner,
        reason=world.game_over_reason or ("turn limit" if not world.game_over else None),
        turns=world.turn,
        world=world.clone(),
    )
    logger.info("Game finished: %s", summary.to_dict())
    return summary


def run_multiple_games(
    scenario: Scenario,
    num_games: int = 10,
    verbose: bool = False,
    max_turns: Optional[int] = 200,
    base_seed: Optional[int] = None,
) -> List[GameSummary]:
    """
    Play several games from the same scenario.

    With base_seed set, game i seeds its agents with base_seed + i.
    """
    results: List[GameSummary] = []
    for i in range(num_games):
        game = scenario.clone()
        if base_seed is not None:
            game.seed = base_seed + i
            for spec in game.agents:
                spec.init_params.pop("seed", None)
        results.append(run_single_game(game, verbose=verbose, max_turns=max_turns))
    return results
