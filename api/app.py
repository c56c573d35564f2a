"""HTTP API entrypoint for driving the game from a web UI."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from game_runner import GameRunner
from infra.logger import get_logger
from siege.core.actions import Action
from siege.core.types import RejectionKind
from siege.scenario import Scenario, create_default_scenario

log = get_logger(__name__)

app = FastAPI(title="Siege Pulse")
runner: GameRunner | None = None

# Allow the browser-based board (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartRequest(BaseModel):
    scenario: Optional[Dict[str, Any]] = None


class ActionRequest(BaseModel):
    action: Dict[str, Any]


class AIMoveRequest(BaseModel):
    injections: Optional[Dict[str, Any]] = None


class SelectRequest(BaseModel):
    player: int
    unit_index: int


def _require_runner() -> GameRunner:
    if runner is None:
        raise HTTPException(400, "No active game")
    return runner


def _snapshot(current: GameRunner) -> Dict[str, Any]:
    return current.env.snapshot()


@app.post("/start")
def start(request: StartRequest):
    global runner
    try:
        scenario = Scenario.from_dict(request.scenario) if request.scenario else create_default_scenario()
        runner = GameRunner(scenario)
    except (ValueError, RuntimeError) as exc:
        raise HTTPException(400, str(exc)) from exc
    log.info("Started game via API")
    return {"success": True, "state": _snapshot(runner)}


@app.post("/restart")
def restart():
    current = _require_runner()
    current.restart()
    return {"success": True, "state": _snapshot(current)}


@app.post("/action")
def action(request: ActionRequest):
    current = _require_runner()
    try:
        parsed = Action.from_dict(request.action)
        frame = current.step(parsed)
    except (ValueError, RuntimeError) as exc:
        raise HTTPException(400, str(exc)) from exc
    rejection = frame.step_info.resolution.rejection
    if rejection is not None and rejection.kind is RejectionKind.INVALID_STATE:
        raise HTTPException(400, rejection.message)
    return {
        "applied": frame.step_info.applied,
        "rejection": rejection.to_dict() if rejection else None,
        "frame": frame.to_dict(),
        "state": _snapshot(current),
    }


@app.post("/ai-move")
def ai_move(request: Optional[AIMoveRequest] = None):
    current = _require_runner()
    if not current.is_ai_turn:
        raise HTTPException(400, "It is not the AI's turn")
    try:
        frame = current.step(injections=request.injections if request else None)
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc
    return {
        "applied": frame.step_info.applied,
        "frame": frame.to_dict(),
        "state": _snapshot(current),
    }


@app.post("/select")
def select(request: SelectRequest):
    current = _require_runner()
    result = current.env.select_unit(request.player, request.unit_index)
    if not result.valid:
        raise HTTPException(400, result.message)
    return {
        "success": True,
        "legal_actions": [a.to_dict() for a in current.env.list_legal_actions_for(request.unit_index)],
        "state": _snapshot(current),
    }


@app.post("/clear-selection")
def clear_selection():
    current = _require_runner()
    current.env.clear_selection()
    return {"success": True}


@app.get("/state")
def state():
    return _snapshot(_require_runner())


@app.get("/legal-actions/{unit_index}")
def legal_actions(unit_index: int):
    current = _require_runner()
    return {
        "player": current.world.current_player,
        "unit_index": unit_index,
        "actions": [a.to_dict() for a in current.env.list_legal_actions_for(unit_index)],
    }


@app.get("/status")
def status():
    if runner is None:
        return {"active": False}
    world = runner.world
    return {
        "active": True,
        "turn": runner.turn,
        "done": runner.done,
        "status": world.status.value,
        "current_player": world.current_player,
        "winner": world.winner,
        "ai_turn": runner.is_ai_turn,
    }
