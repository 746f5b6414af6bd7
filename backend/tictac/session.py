"""
Партия: доска, два участника, очередь хода.
Состояния: ожидание хода активного участника -> завершена (result не None).
"""
import uuid
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_BOARD_SIZE,
    DRAW,
    FIRST_MARK,
    OPPONENT_DISCONNECTED,
    SECOND_MARK,
    Mark,
)
from .exceptions import InvalidMove
from .game import (
    Board,
    check_draw,
    check_win,
    in_bounds,
    is_coordinate,
    is_free,
    new_board,
)


@dataclass
class Participant:
    conn_id: str
    player_id: str
    mark: Mark


@dataclass
class MoveResult:
    mover: Participant
    next_player: Participant
    winner: str | None = None  # None | player_id | "draw"

    @property
    def is_terminal(self) -> bool:
        return self.winner is not None


@dataclass
class Session:
    first: Participant
    second: Participant
    size: int = DEFAULT_BOARD_SIZE
    win_length: int | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    board: Board = field(init=False)
    active: Participant = field(init=False)
    result: str | None = None  # None | player_id | "draw" | "opponent_disconnected"

    def __post_init__(self) -> None:
        self.board = new_board(self.size)
        if self.win_length is None:
            self.win_length = self.size
        self.active = self.first

    @classmethod
    def create(
        cls,
        first_conn_id: str,
        first_player_id: str,
        second_conn_id: str,
        second_player_id: str,
        size: int = DEFAULT_BOARD_SIZE,
        win_length: int | None = None,
    ) -> "Session":
        return cls(
            first=Participant(first_conn_id, first_player_id, FIRST_MARK),
            second=Participant(second_conn_id, second_player_id, SECOND_MARK),
            size=size,
            win_length=win_length,
        )

    @property
    def participants(self) -> tuple[Participant, Participant]:
        return self.first, self.second

    @property
    def player_ids(self) -> list[str]:
        return [self.first.player_id, self.second.player_id]

    @property
    def concluded(self) -> bool:
        return self.result is not None

    def participant(self, conn_id: str) -> Participant | None:
        for p in self.participants:
            if p.conn_id == conn_id:
                return p
        return None

    def opponent_of(self, conn_id: str) -> Participant | None:
        if self.first.conn_id == conn_id:
            return self.second
        if self.second.conn_id == conn_id:
            return self.first
        return None

    def apply_move(self, conn_id: str, x: object, y: object) -> MoveResult:
        """
        Применить ход участника conn_id в клетку (x, y).
        При любом нарушении InvalidMove, состояние не меняется.
        """
        if self.concluded:
            raise InvalidMove("Game is over")
        if not (is_coordinate(x) and is_coordinate(y)):
            raise InvalidMove("Coordinates must be integers")
        if not in_bounds(self.board, x, y):
            raise InvalidMove("Move out of bounds")
        if not is_free(self.board, x, y):
            raise InvalidMove("Cell is already taken")
        if self.active.conn_id != conn_id:
            raise InvalidMove("Not your turn")

        mover = self.active
        self.board[x][y] = mover.mark
        if check_win(self.board, mover.mark, self.win_length):
            self.result = mover.player_id
        elif check_draw(self.board):
            self.result = DRAW
        else:
            self.active = self.opponent_of(mover.conn_id)
        return MoveResult(mover=mover, next_player=self.active, winner=self.result)

    def resign(self, conn_id: str) -> str:
        """Сдача: победитель — соперник. Возвращает идентификатор победителя."""
        opponent = self.opponent_of(conn_id)
        if self.concluded or opponent is None:
            raise InvalidMove("No game to resign")
        self.result = opponent.player_id
        return self.result

    def abandon(self, conn_id: str) -> Participant | None:
        """
        Участник conn_id отключился. Завершает партию и возвращает
        оставшегося участника; None если партия уже завершена.
        """
        opponent = self.opponent_of(conn_id)
        if self.concluded or opponent is None:
            return None
        self.result = OPPONENT_DISCONNECTED
        return opponent
