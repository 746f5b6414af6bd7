import pytest

from tictac.config import get_config
from tictac.ws_handlers import Dispatcher
from tictac.ws_manager import Connection


class FakeWebSocket:
    """Stand-in for a FastAPI WebSocket that records outgoing payloads."""

    def __init__(self):
        self.sent = []
        self.closed = False

    async def send_json(self, payload):
        if self.closed:
            raise RuntimeError("websocket is closed")
        self.sent.append(payload)

    def types(self):
        return [m["type"] for m in self.sent]

    def of_type(self, kind):
        return [m for m in self.sent if m["type"] == kind]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ("BOARD_SIZE", "WIN_LENGTH", "COALESCE_BOARD_UPDATES", "PORT", "HOST"):
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture()
def connect_factory():
    def _factory(**kwargs):
        dispatcher = Dispatcher(**kwargs)

        def _connect(conn_id):
            ws = FakeWebSocket()
            dispatcher.connect(Connection(ws, conn_id))
            return ws

        return dispatcher, _connect

    return _factory


@pytest.fixture()
def dispatcher_and_connect(connect_factory):
    return connect_factory()


@pytest.fixture()
def dispatcher(dispatcher_and_connect):
    return dispatcher_and_connect[0]


@pytest.fixture()
def connect(dispatcher_and_connect):
    return dispatcher_and_connect[1]
