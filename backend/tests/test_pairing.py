from tictac.pairing import MatchmakingQueue
from tictac.registry import SessionRegistry
from tictac.session import Session


class TestMatchmakingQueue:
    def test_first_player_waits(self):
        queue = MatchmakingQueue()
        assert queue.join("c1", "1") is None
        assert "c1" in queue
        assert len(queue) == 1

    def test_pairs_waiting_player_as_first_participant(self):
        queue = MatchmakingQueue()
        queue.join("c1", "1")
        session = queue.join("c2", "2")
        assert session is not None
        assert session.player_ids == ["1", "2"]
        assert session.active.conn_id == "c1"
        assert len(queue) == 0

    def test_same_identity_never_paired(self):
        queue = MatchmakingQueue()
        queue.join("c1", "same")
        assert queue.join("c2", "same") is None
        assert queue.waiting_ids() == ["same", "same"]

    def test_earliest_eligible_opponent_first(self):
        queue = MatchmakingQueue()
        queue.join("c1", "A")
        queue.join("c2", "A")
        session = queue.join("c3", "B")
        assert session.first.conn_id == "c1"
        assert queue.waiting_ids() == ["A"]
        assert "c2" in queue

    def test_waiting_identity_matched_once_distinct_player_arrives(self):
        queue = MatchmakingQueue()
        queue.join("c1", "A")
        queue.join("c2", "A")
        assert queue.join("c3", "B").first.conn_id == "c1"
        assert queue.join("c4", "C").first.conn_id == "c2"
        assert len(queue) == 0

    def test_leave(self):
        queue = MatchmakingQueue()
        queue.join("c1", "1")
        assert queue.leave("c1")
        assert not queue.leave("c1")
        assert len(queue) == 0

    def test_board_geometry_passed_to_session(self):
        queue = MatchmakingQueue(board_size=5, win_length=4)
        queue.join("c1", "1")
        session = queue.join("c2", "2")
        assert len(session.board) == 5
        assert session.win_length == 4


class TestSessionRegistry:
    def test_register_for_both_connections(self):
        registry = SessionRegistry()
        session = Session.create("c1", "1", "c2", "2")
        registry.register(session)
        assert registry.get("c1") is session
        assert registry.get("c2") is session
        assert len(registry) == 1

    def test_remove_is_idempotent(self):
        registry = SessionRegistry()
        session = Session.create("c1", "1", "c2", "2")
        registry.register(session)
        assert registry.remove(session)
        assert not registry.remove(session)
        assert registry.get("c1") is None
        assert "c2" not in registry
        assert len(registry) == 0
