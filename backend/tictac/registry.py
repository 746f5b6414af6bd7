"""Реестр активных партий: conn_id -> Session."""
from .session import Session


class SessionRegistry:
    def __init__(self):
        self._by_conn: dict[str, Session] = {}
        self._sessions: dict[str, Session] = {}

    def register(self, session: Session) -> None:
        for p in session.participants:
            self._by_conn[p.conn_id] = session
        self._sessions[session.id] = session

    def get(self, conn_id: str) -> Session | None:
        return self._by_conn.get(conn_id)

    def remove(self, session: Session) -> bool:
        """Убрать партию для обоих участников. False если её уже нет."""
        if self._sessions.pop(session.id, None) is None:
            return False
        for p in session.participants:
            if self._by_conn.get(p.conn_id) is session:
                del self._by_conn[p.conn_id]
        return True

    def __contains__(self, conn_id: str) -> bool:
        return conn_id in self._by_conn

    def __len__(self) -> int:
        return len(self._sessions)
