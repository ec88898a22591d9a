"""Keyboard bindings for the engine."""

from .game import SimulationEngine
from .models import GamePhase

KEY_DIRECTIONS = {
    "ArrowUp": "up", "KeyW": "up",
    "ArrowDown": "down", "KeyS": "down",
    "ArrowLeft": "left", "KeyA": "left",
    "ArrowRight": "right", "KeyD": "right",
}


def handle_key(engine: SimulationEngine, code: str) -> bool:
    """Apply a browser ``KeyboardEvent.code`` to the engine.

    Space pauses/resumes a game in progress and restarts a finished one.
    R restarts at any time, Enter starts from idle. Returns whether the
    key changed anything.
    """
    if code == "Space":
        if engine.is_playing:
            return engine.toggle_pause()
        if engine.phase == GamePhase.OVER:
            engine.restart()
            return True
        return False

    if code == "KeyR":
        if engine.phase == GamePhase.IDLE:
            return False
        engine.restart()
        return True

    if code == "Enter":
        return engine.start()

    if not isinstance(code, str):
        return False

    direction = KEY_DIRECTIONS.get(code)
    if direction is None:
        return False
    return engine.set_input_direction(direction)
