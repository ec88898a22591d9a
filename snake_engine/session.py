"""Host-side scheduling for a single game."""

import asyncio
import logging
import random
from typing import Optional

from .clock import Clock
from .config import Settings
from .connection_manager import ConnectionManager, build_event_msg, build_state_msg
from .controls import handle_key
from .game import SimulationEngine
from .highscores import HighScoreStore
from .models import EngineEvent, GamePhase

logger = logging.getLogger(__name__)


class GameSession:
    """Drives one engine from an asyncio task and fans its output out.

    The loop task exists only while a game is running or paused. Restarting
    cancels it before the engine is reset.
    """

    def __init__(
        self,
        settings: Settings,
        manager: ConnectionManager,
        high_scores: Optional[HighScoreStore] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        self.manager = manager
        self.frame_interval = 1 / settings.frame_rate
        self.pending_events: list[EngineEvent] = []
        self.engine = SimulationEngine(
            grid_count=settings.grid_count,
            difficulty=settings.difficulty,
            clock=clock,
            high_scores=high_scores,
            listeners=[self.pending_events.append],
            rng=rng,
        )
        self.loop_task: Optional[asyncio.Task] = None

    async def handle_message(self, msg: dict) -> Optional[str]:
        """Apply a client command. Returns an error message when rejected."""
        engine = self.engine
        kind = msg.get("type")

        if kind == "start":
            if not engine.start():
                return "game already started"
            self.ensure_loop()

        elif kind == "pause":
            if not engine.pause():
                return "game is not running"

        elif kind == "resume":
            if not engine.resume():
                return "game is not paused"

        elif kind == "toggle_pause":
            if not engine.toggle_pause():
                return "game is not in progress"

        elif kind == "restart":
            self.cancel_loop()
            engine.restart()

        elif kind == "difficulty":
            name = msg.get("name")
            if not isinstance(name, str):
                return "difficulty name must be a string"
            if not engine.select_difficulty(name):
                if engine.is_playing:
                    return "difficulty cannot change during a game"
                return f"unknown difficulty {name!r}"

        elif kind == "input":
            d = msg.get("direction")
            if not isinstance(d, str):
                return "direction must be a string"
            if not engine.set_input_direction(d):
                return None

        elif kind == "key":
            code = msg.get("code", "")
            if not isinstance(code, str):
                return "key code must be a string"
            if not handle_key(engine, code):
                return None
            if engine.phase == GamePhase.RUNNING:
                self.ensure_loop()
            elif engine.phase == GamePhase.IDLE:
                self.cancel_loop()

        else:
            return f"unknown message type {kind!r}"

        await self.publish()
        return None

    async def publish(self):
        events = list(self.pending_events)
        self.pending_events.clear()
        for event in events:
            await self.manager.broadcast(build_event_msg(event))
        await self.manager.broadcast(build_state_msg(self.engine))

    def ensure_loop(self):
        if self.loop_task is None or self.loop_task.done():
            self.loop_task = asyncio.create_task(self._run())

    def cancel_loop(self):
        if self.loop_task is not None and not self.loop_task.done():
            self.loop_task.cancel()
        self.loop_task = None

    async def _run(self):
        logger.debug("Game loop started")
        try:
            while self.engine.is_playing:
                if self.engine.advance():
                    await self.publish()
                await asyncio.sleep(self.frame_interval)
        except asyncio.CancelledError:
            logger.debug("Game loop cancelled")
            raise
        logger.debug("Game loop finished")
