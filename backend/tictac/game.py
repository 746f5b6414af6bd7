"""
Правила игры: чистые функции над доской.
Доска — список строк, клетка — None | "X" | "O"; board[x][y], x — строка.
"""
from .constants import DEFAULT_BOARD_SIZE, MIN_BOARD_SIZE, Mark

Cell = Mark | None
Board = list[list[Cell]]

# Направления линий: строка, столбец, две диагонали
_DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


def new_board(size: int = DEFAULT_BOARD_SIZE) -> Board:
    if size < MIN_BOARD_SIZE:
        raise ValueError(f"board size must be >= {MIN_BOARD_SIZE}, got {size}")
    return [[None] * size for _ in range(size)]


def is_coordinate(value: object) -> bool:
    # bool является подклассом int, но координатой не считается
    return isinstance(value, int) and not isinstance(value, bool)


def in_bounds(board: Board, x: int, y: int) -> bool:
    size = len(board)
    return 0 <= x < size and 0 <= y < size


def is_free(board: Board, x: int, y: int) -> bool:
    return board[x][y] is None


def check_win(board: Board, mark: Mark, win_length: int | None = None) -> bool:
    """
    Есть ли на доске win_length подряд клеток с mark по строке,
    столбцу или диагонали. По умолчанию линия во всю длину доски.
    """
    size = len(board)
    length = win_length or size
    for x in range(size):
        for y in range(size):
            if board[x][y] != mark:
                continue
            for dx, dy in _DIRECTIONS:
                end_x = x + dx * (length - 1)
                end_y = y + dy * (length - 1)
                if not in_bounds(board, end_x, end_y):
                    continue
                if all(board[x + dx * i][y + dy * i] == mark for i in range(length)):
                    return True
    return False


def check_draw(board: Board) -> bool:
    """Все клетки заняты. Вызывать только если победы нет."""
    return all(cell is not None for row in board for cell in row)


def board_payload(board: Board) -> list[list[Cell]]:
    """Копия доски для отправки клиенту."""
    return [list(row) for row in board]
