"""WebSocket connection management and state serialization."""

import json
import logging

from fastapi import WebSocket

from .game import SimulationEngine
from .models import EngineEvent, PROFILES

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.connections: set[WebSocket] = set()

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def broadcast(self, message: str):
        disconnected = []
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug(f"Dropping connection after send failure: {e}")
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def build_state_msg(engine: SimulationEngine) -> str:
    return json.dumps({"type": "state", **engine.snapshot().to_dict()})


def build_event_msg(event: EngineEvent) -> str:
    return json.dumps(event.to_dict())


def build_welcome_msg(engine: SimulationEngine) -> str:
    return json.dumps({
        "type": "welcome",
        "grid": [engine.grid_count, engine.grid_count],
        "difficulties": [p.to_dict() for p in PROFILES.values()],
        "difficulty": engine.profile.name,
    })


def build_error_msg(message: str) -> str:
    return json.dumps({"type": "error", "message": message})
