"""
Очередь подбора соперника (in-memory).
Пара — самый ранний ждущий игрок с другим идентификатором.
"""
import logging
from dataclasses import dataclass

from .constants import DEFAULT_BOARD_SIZE
from .session import Session

logger = logging.getLogger(__name__)


@dataclass
class WaitingEntry:
    conn_id: str
    player_id: str


class MatchmakingQueue:
    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE, win_length: int | None = None):
        self.board_size = board_size
        self.win_length = win_length
        self._waiting: list[WaitingEntry] = []

    def join(self, conn_id: str, player_id: str) -> Session | None:
        """
        Добавить в очередь или сразу создать партию, если есть подходящий соперник.
        Ждавший игрок становится первым участником и ходит первым.
        Возвращает Session если пара найдена, иначе None.
        """
        for i, entry in enumerate(self._waiting):
            if entry.player_id != player_id:
                opponent = self._waiting.pop(i)
                logger.info(
                    "Pairing: matched %s with %s", opponent.player_id, player_id
                )
                return Session.create(
                    opponent.conn_id,
                    opponent.player_id,
                    conn_id,
                    player_id,
                    size=self.board_size,
                    win_length=self.win_length,
                )
        self._waiting.append(WaitingEntry(conn_id=conn_id, player_id=player_id))
        logger.info("Pairing: %s queued (%d waiting)", player_id, len(self._waiting))
        return None

    def leave(self, conn_id: str) -> bool:
        """Убрать из очереди. Возвращает True если был в очереди."""
        for i, entry in enumerate(self._waiting):
            if entry.conn_id == conn_id:
                self._waiting.pop(i)
                return True
        return False

    def waiting_ids(self) -> list[str]:
        return [entry.player_id for entry in self._waiting]

    def __contains__(self, conn_id: str) -> bool:
        return any(entry.conn_id == conn_id for entry in self._waiting)

    def __len__(self) -> int:
        return len(self._waiting)
