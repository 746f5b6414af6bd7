"""
Менеджер WebSocket: подключения по conn_id, доставка сообщений.
conn_id выдаётся при accept и служит ключом реестра партий.
"""
import logging
import uuid
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, conn_id: str | None = None):
        self.ws = ws
        self.conn_id = conn_id or uuid.uuid4().hex

    async def send(self, payload: dict[str, Any]) -> None:
        await self.ws.send_json(payload)

    async def close(self, code: int = 1000) -> None:
        try:
            await self.ws.close(code=code)
        except Exception as e:
            logger.warning("close %s: %s", self.conn_id, e)

    def __repr__(self) -> str:
        return f"Connection({self.conn_id})"


class WSManager:
    def __init__(self):
        self._by_id: dict[str, Connection] = {}

    def connect(self, conn: Connection) -> None:
        self._by_id[conn.conn_id] = conn

    def disconnect(self, conn_id: str) -> None:
        self._by_id.pop(conn_id, None)

    async def send_to(self, conn_id: str, payload: dict[str, Any]) -> bool:
        conn = self._by_id.get(conn_id)
        if not conn:
            return False
        try:
            await conn.send(payload)
            return True
        except Exception as e:
            logger.warning("send_to %s: %s", conn_id, e)
            return False

    async def send_many(self, conn_ids: list[str], payload: dict[str, Any]) -> None:
        for conn_id in conn_ids:
            await self.send_to(conn_id, payload)

    def __len__(self) -> int:
        return len(self._by_id)
