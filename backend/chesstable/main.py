"""
Общий шахматный стол: HTTP API и WebSocket.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import get_config
from .game import GameSession
from .ws_handlers import ws_loop
from .ws_manager import WSManager

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(
    manager: WSManager | None = None,
    session: GameSession | None = None,
) -> FastAPI:
    manager = WSManager() if manager is None else manager
    if session is None:
        session = GameSession(
            manager.deliver,
            reset_delay_seconds=config.reset_delay_seconds,
            allow_solo_moves=config.allow_solo_moves,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        session.close()

    app = FastAPI(title="Chess Table API", lifespan=lifespan)
    app.state.manager = manager
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/table")
    def table():
        return {**session.snapshot(), "connections": len(manager)}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_loop(ws, session, manager)

    # Статика фронтенда (для разработки)
    if config.frontend_dir and Path(config.frontend_dir).is_dir():
        app.mount("/", StaticFiles(directory=config.frontend_dir, html=True), name="frontend")

    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
