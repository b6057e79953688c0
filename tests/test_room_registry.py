"""Tests for the process-wide room table."""

import pytest

from wordle_rooms.config.game_settings import ROOM_ID_ALPHABET, ROOM_ID_LENGTH
from wordle_rooms.errors import IdentityError, NotFoundError, StateError
from wordle_rooms.models.game import AnswerMode
from wordle_rooms.models.room import PlayerStatus, RoomState
from wordle_rooms.services.room_registry import RoomRegistry


class TestRoomRegistry:
    """Test cases for RoomRegistry."""

    @pytest.fixture(autouse=True)
    def setup_registry(self, clock):
        self.clock = clock
        self.registry = RoomRegistry(word_list=["CRANE"], clock=clock)

    def test_create_room(self):
        room, player = self.registry.create_room("c1", "Alice", 3, AnswerMode.ADVERSARIAL)

        assert len(room.room_id) == ROOM_ID_LENGTH
        assert all(char in ROOM_ID_ALPHABET for char in room.room_id)
        assert room.state == RoomState.WAITING
        assert room.max_players == 3
        assert room.answer_mode is AnswerMode.ADVERSARIAL
        assert player.is_host
        assert self.registry.get_room(room.room_id) is room
        assert self.registry.room_for_connection("c1") == room.room_id

    def test_unknown_room(self):
        with pytest.raises(NotFoundError, match="Room not found"):
            self.registry.join_room("ZZZZZZ", "c1", "Alice")

    def test_connection_can_only_sit_in_one_room(self):
        room, _ = self.registry.create_room("c1", "Alice")
        with pytest.raises(StateError, match="Already in room"):
            self.registry.create_room("c1", "Alice")
        with pytest.raises(StateError):
            self.registry.join_room(room.room_id, "c1", "Alice")

    def test_reconnect_keeps_player_identity(self):
        room, alice = self.registry.create_room("c1", "Alice")
        self.registry.join_room(room.room_id, "c2", "Bob")

        assert self.registry.handle_disconnect("c1") is room
        assert alice.status == PlayerStatus.DISCONNECTED
        assert self.registry.room_for_connection("c1") is None

        _, player = self.registry.reconnect(room.room_id, "c3", "Alice")

        assert player.player_id == alice.player_id
        assert len(room.players) == 2
        assert self.registry.room_for_connection("c3") == room.room_id

    def test_disconnect_of_unknown_connection(self):
        assert self.registry.handle_disconnect("ghost") is None

    def test_leave_last_player_deletes_room(self):
        room, alice = self.registry.create_room("c1", "Alice")
        _, deleted = self.registry.leave_room(room.room_id, alice.player_id, "c1")

        assert deleted
        assert room.closed
        with pytest.raises(NotFoundError):
            self.registry.get_room(room.room_id)

    def test_leave_migrates_host(self):
        room, alice = self.registry.create_room("c1", "Alice")
        _, bob = self.registry.join_room(room.room_id, "c2", "Bob")
        _, deleted = self.registry.leave_room(room.room_id, alice.player_id, "c1")

        assert not deleted
        assert bob.is_host
        assert self.registry.room_for_connection("c1") is None

    def test_cannot_remove_someone_else(self):
        room, alice = self.registry.create_room("c1", "Alice")
        self.registry.join_room(room.room_id, "c2", "Bob")
        with pytest.raises(IdentityError, match="only remove yourself"):
            self.registry.leave_room(room.room_id, alice.player_id, "c2")

    def test_outsider_cannot_remove_disconnected_player(self):
        room, _ = self.registry.create_room("c1", "Alice")
        _, bob = self.registry.join_room(room.room_id, "c2", "Bob")
        self.registry.handle_disconnect("c2")

        with pytest.raises(IdentityError, match="not an active player"):
            self.registry.leave_room(room.room_id, bob.player_id, "stranger")

        assert bob.player_id in room.players
        assert self.registry.reconnect(room.room_id, "c3", "Bob")[1] is bob

    def test_member_can_clear_disconnected_seat(self):
        room, _ = self.registry.create_room("c1", "Alice")
        _, bob = self.registry.join_room(room.room_id, "c2", "Bob")
        self.registry.handle_disconnect("c2")

        _, deleted = self.registry.leave_room(room.room_id, bob.player_id, "c1")

        assert not deleted
        assert bob.player_id not in room.players
        assert len(room.players) == 1

    def test_list_open_rooms(self):
        older, alice = self.registry.create_room("c1", "Alice")
        self.registry.join_room(older.room_id, "c2", "Bob")
        self.clock.advance(10)
        newer, _ = self.registry.create_room("c3", "Carol")

        listed = [summary['room_id'] for summary in self.registry.list_open_rooms()]
        assert listed == [newer.room_id, older.room_id]

        older.start_game(alice.player_id)
        listed = [summary['room_id'] for summary in self.registry.list_open_rooms()]
        assert listed == [newer.room_id]

    def test_stats(self):
        room, _ = self.registry.create_room("c1", "Alice")
        self.registry.join_room(room.room_id, "c2", "Bob")
        stats = self.registry.get_stats()

        assert stats['total_rooms'] == 1
        assert stats['waiting_rooms'] == 1
        assert stats['total_players'] == 2

    def test_delete_room(self):
        room, _ = self.registry.create_room("c1", "Alice")
        assert self.registry.delete_room(room.room_id)
        assert not self.registry.delete_room(room.room_id)
        assert self.registry.room_for_connection("c1") is None


class TestRoomSweep:
    """Test cases for the periodic cleanup pass."""

    @pytest.fixture(autouse=True)
    def setup_registry(self, clock):
        self.clock = clock
        self.registry = RoomRegistry(word_list=["CRANE"], clock=clock)
        self.room, self.alice = self.registry.create_room("c1", "Alice")
        self.registry.join_room(self.room.room_id, "c2", "Bob")

    def test_nothing_to_do(self):
        report = self.registry.sweep()
        assert not report.changed

    def test_disconnected_player_removed_after_grace(self):
        self.registry.handle_disconnect("c2")

        self.clock.advance(5 * 60)
        assert self.registry.sweep().players_removed == 0

        self.clock.advance(1)
        report = self.registry.sweep()

        assert report.players_removed == 1
        assert len(self.room.players) == 1
        assert report.room_updates[0][0] == self.room.room_id

    def test_room_emptied_by_sweep_is_deleted(self):
        self.registry.handle_disconnect("c1")
        self.registry.handle_disconnect("c2")
        self.clock.advance(5 * 60 + 1)
        report = self.registry.sweep()

        assert report.rooms_deleted == [self.room.room_id]
        assert report.closed_connections == []
        with pytest.raises(NotFoundError):
            self.registry.get_room(self.room.room_id)

    def test_inactive_room_deleted(self):
        self.clock.advance(30 * 60 + 1)
        report = self.registry.sweep()

        assert report.rooms_deleted == [self.room.room_id]
        assert sorted(report.closed_connections) == [("c1", self.room.room_id), ("c2", self.room.room_id)]
        assert self.registry.room_for_connection("c1") is None

    def test_finished_room_kept_longer(self):
        self.room.state = RoomState.FINISHED
        self.clock.advance(30 * 60 + 1)
        assert not self.registry.sweep().changed

        self.clock.advance(30 * 60)
        assert self.registry.sweep().rooms_deleted == [self.room.room_id]
