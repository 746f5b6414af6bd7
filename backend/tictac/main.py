"""
TicTac API и WebSocket.
"""
import logging

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .ws_handlers import Dispatcher, ws_loop

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(config=None) -> FastAPI:
    config = config or get_config()
    app = FastAPI(title="TicTac API")
    # Состояние игры живёт столько же, сколько процесс
    app.state.dispatcher = Dispatcher.from_config(config)

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

    @app.get("/stats")
    def stats(request: Request):
        return request.app.state.dispatcher.stats()

    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_loop(ws, ws.app.state.dispatcher)

    # Эталонный клиент подключается к корню хоста
    app.add_api_websocket_route("/ws", websocket_endpoint)
    app.add_api_websocket_route("/", websocket_endpoint)

    logger.info(
        "App created: board %dx%d, win length %d",
        config.board_size,
        config.board_size,
        config.win_length,
    )
    return app


configure_logging(get_config().log_level)
app = create_app()
