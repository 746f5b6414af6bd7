"""
Обработка сообщений WebSocket: search_game, make_move, cancel_search, resign.
Dispatcher владеет очередью, реестром партий и менеджером подключений.
Каждое событие (сообщение или отключение) обрабатывается целиком,
включая рассылку, прежде чем начнётся следующее.
"""
import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .constants import (
    CANCEL_SEARCH,
    ERROR,
    GAME_END,
    MAKE_MOVE,
    RESIGN,
    SEARCH_GAME,
    START_GAME,
    UPDATE_BOARD,
)
from .exceptions import InvalidMove, MalformedRequest
from .game import board_payload
from .pairing import MatchmakingQueue
from .registry import SessionRegistry
from .session import Participant, Session
from .ws_manager import Connection, WSManager

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(
        self,
        manager: WSManager | None = None,
        queue: MatchmakingQueue | None = None,
        registry: SessionRegistry | None = None,
        coalesce_board_updates: bool = False,
    ):
        self.manager = manager or WSManager()
        self.queue = queue or MatchmakingQueue()
        self.registry = registry or SessionRegistry()
        self.coalesce_board_updates = coalesce_board_updates
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config) -> "Dispatcher":
        return cls(
            queue=MatchmakingQueue(config.board_size, config.win_length),
            coalesce_board_updates=config.coalesce_board_updates,
        )

    def connect(self, conn: Connection) -> None:
        self.manager.connect(conn)

    def stats(self) -> dict[str, int]:
        return {
            "waiting": len(self.queue),
            "sessions": len(self.registry),
            "connections": len(self.manager),
        }

    async def handle_message(self, conn_id: str, data: Any) -> None:
        """Обработать одно декодированное сообщение от подключения conn_id."""
        async with self._lock:
            try:
                await self._route(conn_id, data)
            except MalformedRequest as e:
                logger.warning("WS: malformed request from %s: %s", conn_id, e)
            except InvalidMove as e:
                logger.info("WS: rejected move from %s: %s", conn_id, e)
                await self._send_error(conn_id, str(e))

    async def handle_disconnect(self, conn_id: str) -> None:
        """
        Ждущий в очереди убирается молча; в партии сопернику уходит
        game_end(opponent_disconnected). Повторный вызов ничего не делает.
        """
        async with self._lock:
            self.manager.disconnect(conn_id)
            if self.queue.leave(conn_id):
                logger.info("WS: %s left queue on disconnect", conn_id)
                return
            session = self.registry.get(conn_id)
            if not session:
                return
            opponent = session.abandon(conn_id)
            self.registry.remove(session)
            if opponent:
                await self.manager.send_to(
                    opponent.conn_id, {"type": GAME_END, "winner": session.result}
                )
            logger.info("Game %s ended: %s", session.id, session.result)

    async def _route(self, conn_id: str, data: Any) -> None:
        if not isinstance(data, dict):
            raise MalformedRequest("message is not an object")
        t = data.get("type")
        logger.debug("WS: msg from %s type=%s", conn_id, t)
        if t == SEARCH_GAME:
            await self._search_game(conn_id, data.get("playerID"))
            return
        if t == MAKE_MOVE:
            await self._make_move(conn_id, data.get("x"), data.get("y"))
            return
        if t == CANCEL_SEARCH:
            if self.queue.leave(conn_id):
                logger.info("WS: %s cancelled search", conn_id)
            return
        if t == RESIGN:
            await self._resign(conn_id)
            return
        raise MalformedRequest(f"unknown type {t!r}")

    async def _search_game(self, conn_id: str, player_id: Any) -> None:
        if not isinstance(player_id, str) or not player_id:
            raise MalformedRequest("playerID must be a non-empty string")
        if conn_id in self.queue or conn_id in self.registry:
            await self._send_error(conn_id, "Already searching or playing")
            return
        session = self.queue.join(conn_id, player_id)
        if not session:
            return
        self.registry.register(session)
        payload = {"type": START_GAME, "players": session.player_ids}
        await self.manager.send_many(self._conn_ids(session), payload)
        logger.info("Game %s started: %s", session.id, session.player_ids)

    async def _make_move(self, conn_id: str, x: Any, y: Any) -> None:
        session = self.registry.get(conn_id)
        if not session:
            raise InvalidMove("No active game")
        result = session.apply_move(conn_id, x, y)
        if self.coalesce_board_updates:
            current = result.mover if result.is_terminal else result.next_player
            await self._broadcast_board(session, current)
        else:
            # Сначала доска с ходившим, затем (если игра идёт) со следующим
            await self._broadcast_board(session, result.mover)
            if not result.is_terminal:
                await self._broadcast_board(session, result.next_player)
        if result.is_terminal:
            await self._conclude(session, result.winner)

    async def _resign(self, conn_id: str) -> None:
        session = self.registry.get(conn_id)
        if not session:
            raise InvalidMove("No active game")
        winner = session.resign(conn_id)
        await self._conclude(session, winner)

    async def _conclude(self, session: Session, winner: str) -> None:
        payload = {"type": GAME_END, "winner": winner}
        for conn_id in self._conn_ids(session):
            await self.manager.send_to(conn_id, payload)
        self.registry.remove(session)
        logger.info("Game %s ended: %s", session.id, winner)

    async def _broadcast_board(self, session: Session, current: Participant) -> None:
        payload = {
            "type": UPDATE_BOARD,
            "board": board_payload(session.board),
            "currentPlayer": current.player_id,
        }
        await self.manager.send_many(self._conn_ids(session), payload)

    async def _send_error(self, conn_id: str, message: str) -> None:
        await self.manager.send_to(conn_id, {"type": ERROR, "message": message})

    @staticmethod
    def _conn_ids(session: Session) -> list[str]:
        return [p.conn_id for p in session.participants]


def _frame_text(message: dict[str, Any]) -> str | None:
    """Текст кадра; None если кадр не декодируется в UTF-8."""
    if message.get("text") is not None:
        return message["text"]
    raw = message.get("bytes")
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


async def ws_loop(ws: WebSocket, dispatcher: Dispatcher) -> None:
    """
    Принять подключение, выдать conn_id и передавать сообщения диспетчеру
    до отключения.
    """
    await ws.accept()
    conn = Connection(ws)
    dispatcher.connect(conn)
    logger.info("WS: accepted conn_id=%s from %s", conn.conn_id, ws.client)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
            raw = _frame_text(message)
            if raw is None:
                logger.warning("WS: undecodable frame from %s", conn.conn_id)
                continue
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning("WS: invalid JSON from %s: %s", conn.conn_id, e)
                continue
            await dispatcher.handle_message(conn.conn_id, data)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s conn_id=%s", e.code, conn.conn_id)
    except Exception as e:
        logger.exception("WS: error conn_id=%s: %s", conn.conn_id, e)
        await conn.close(code=1011)
    finally:
        await dispatcher.handle_disconnect(conn.conn_id)
        logger.info("WS: disconnected conn_id=%s", conn.conn_id)
