"""Запуск сервера через uvicorn: python -m tictac."""
import uvicorn

from .config import get_config
from .main import app


def run() -> None:
    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run()
