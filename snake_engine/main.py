"""FastAPI application: HTTP routes, WebSocket endpoint, game session."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from .config import Settings
from .connection_manager import ConnectionManager, build_error_msg, build_state_msg, build_welcome_msg
from .highscores import HighScoreStore, JsonHighScoreStore
from .logging_config import configure_logging
from .models import PROFILES
from .session import GameSession


def create_app(settings: Optional[Settings] = None, high_scores: Optional[HighScoreStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = high_scores if high_scores is not None else JsonHighScoreStore(settings.highscore_path)
        app.state.session = GameSession(settings, ConnectionManager(), high_scores=store)
        yield
        app.state.session.cancel_loop()

    app = FastAPI(lifespan=lifespan)

    @app.get("/")
    async def index():
        return {"name": "snake_engine", "ws": "/ws"}

    @app.get("/state")
    async def state():
        return app.state.session.engine.snapshot().to_dict()

    @app.get("/difficulties")
    async def difficulties():
        return [p.to_dict() for p in PROFILES.values()]

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        session: GameSession = app.state.session
        manager = session.manager
        await manager.connect(ws)
        try:
            await manager.send_personal(ws, build_welcome_msg(session.engine))
            await manager.send_personal(ws, build_state_msg(session.engine))
            while True:
                raw = await ws.receive_text()
                try:
                    msg = json.loads(raw)
                except ValueError:
                    await manager.send_personal(ws, build_error_msg("invalid JSON"))
                    continue
                if not isinstance(msg, dict):
                    await manager.send_personal(ws, build_error_msg("expected a JSON object"))
                    continue
                error = await session.handle_message(msg)
                if error:
                    await manager.send_personal(ws, build_error_msg(error))
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(ws)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    logger = logging.getLogger("snake_engine")
    logger.info(f"Snake server starting on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
