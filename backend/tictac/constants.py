"""Константы игры и протокола."""
from typing import Literal

Mark = Literal["X", "O"]

FIRST_MARK: Mark = "X"
SECOND_MARK: Mark = "O"

DEFAULT_BOARD_SIZE = 3
MIN_BOARD_SIZE = 3

# Входящие сообщения
SEARCH_GAME = "search_game"
MAKE_MOVE = "make_move"
CANCEL_SEARCH = "cancel_search"
RESIGN = "resign"

# Исходящие сообщения
START_GAME = "start_game"
UPDATE_BOARD = "update_board"
ERROR = "error"
GAME_END = "game_end"

# Итоги, не являющиеся идентификатором игрока
DRAW = "draw"
OPPONENT_DISCONNECTED = "opponent_disconnected"
