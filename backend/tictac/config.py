"""Конфигурация приложения."""
import os
from functools import lru_cache

from .constants import DEFAULT_BOARD_SIZE, MIN_BOARD_SIZE


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _board_geometry() -> tuple[int, int]:
    """Размер доски и длина выигрышной линии; ValueError при неверных значениях."""
    size = int(os.environ.get("BOARD_SIZE", DEFAULT_BOARD_SIZE))
    if size < MIN_BOARD_SIZE:
        raise ValueError(f"BOARD_SIZE must be >= {MIN_BOARD_SIZE}, got {size}")
    win_length = int(os.environ.get("WIN_LENGTH", size))
    if not MIN_BOARD_SIZE <= win_length <= size:
        raise ValueError(
            f"WIN_LENGTH must be between {MIN_BOARD_SIZE} and {size}, got {win_length}"
        )
    return size, win_length


@lru_cache
def get_config():
    board_size, win_length = _board_geometry()
    return type("Config", (), {
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "8080")),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "board_size": board_size,
        "win_length": win_length,
        "coalesce_board_updates": _flag("COALESCE_BOARD_UPDATES"),
    })()
