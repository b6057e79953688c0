"""Tests for the real-time room protocol using the Flask-SocketIO test client."""

import pytest

from wordle_rooms import create_app
from wordle_rooms.config import TestingConfig
from wordle_rooms.services.room_registry import RoomRegistry


def received(client):
    """Group everything a test client has received by event name."""
    by_event = {}
    for packet in client.get_received():
        by_event.setdefault(packet['name'], []).append(packet['args'][0])
    return by_event


class TestRoomEvents:
    """Test cases for multiplayer WebSocket events."""

    @pytest.fixture(autouse=True)
    def setup_app(self, clock):
        self.registry = RoomRegistry(word_list=["CRANE"], clock=clock)
        self.app, self.socketio = create_app(TestingConfig, registry=self.registry)
        self.alice = self.socketio.test_client(self.app)
        self.bob = self.socketio.test_client(self.app)
        yield
        for client in (self.alice, self.bob):
            if client.is_connected():
                client.disconnect()

    def open_room(self):
        self.alice.emit('join_room', {'player_name': 'Alice', 'create_new': True})
        room_id = received(self.alice)['room_join_result'][0]['room_id']
        self.bob.emit('join_room', {'player_name': 'Bob', 'room_id': room_id})
        received(self.alice)
        received(self.bob)
        return room_id

    def test_create_room(self):
        self.alice.emit('join_room', {'player_name': 'Alice', 'create_new': True})
        events = received(self.alice)

        result = events['room_join_result'][0]
        assert result['success'] is True
        assert result['created'] is True
        assert result['room']['players'][0]['is_host'] is True
        assert events['room_state_update'][0]['room']['room_id'] == result['room_id']

    def test_join_notifies_existing_members(self):
        self.alice.emit('join_room', {'player_name': 'Alice', 'create_new': True})
        room_id = received(self.alice)['room_join_result'][0]['room_id']

        self.bob.emit('join_room', {'player_name': 'bob', 'room_id': room_id.lower()})

        assert received(self.bob)['room_join_result'][0]['success'] is True
        update = received(self.alice)['room_state_update'][0]['room']
        assert [player['name'] for player in update['players']] == ["Alice", "bob"]

    def test_malformed_payload_answered_on_result_event(self):
        self.alice.emit('join_room', {'create_new': True})
        result = received(self.alice)['room_join_result'][0]

        assert result['success'] is False
        assert result['error'] == "Player name is required"

    def test_game_flow(self):
        room_id = self.open_room()

        self.bob.emit('start_game', {'room_id': room_id})
        assert received(self.bob)['game_start_result'][0]['error'] == "Only the host can start the game"

        self.alice.emit('start_game', {'room_id': room_id})
        assert received(self.alice)['game_start_result'][0]['success'] is True
        assert received(self.bob)['room_state_update'][0]['room']['state'] == "PLAYING"

        self.alice.emit('submit_guess', {'room_id': room_id, 'guess': 'crane'})
        guess = received(self.alice)['guess_result'][0]
        assert guess['guess']['status'] == "WIN"
        assert guess['round'] == 1

        # Bob sees Alice's feedback but not her letters
        update = received(self.bob)['room_state_update'][0]['room']
        alice_view = next(player for player in update['players'] if player['name'] == "Alice")
        assert alice_view['score'] == 100
        assert 'guess' not in alice_view['guesses'][0]

        self.bob.emit('submit_guess', {'room_id': room_id, 'guess': 'CRANE'})
        assert received(self.bob)['guess_result'][0]['room']['current_round'] == 2

    def test_disconnect_and_rejoin(self):
        room_id = self.open_room()

        self.bob.disconnect()
        update = received(self.alice)['room_state_update'][0]['room']
        bob_view = next(player for player in update['players'] if player['name'] == "Bob")
        assert bob_view['status'] == "DISCONNECTED"

        carol = self.socketio.test_client(self.app)
        carol.emit('rejoin_room', {'room_id': room_id, 'player_name': 'Bob'})
        result = received(carol)['rejoin_result'][0]

        assert result['success'] is True
        assert result['player_id'] == bob_view['player_id']
        assert len(result['room']['players']) == 2
        carol.disconnect()

    def test_leave_room(self):
        room_id = self.open_room()
        self.bob.emit('get_room_info', {'room_id': room_id})
        player_id = received(self.bob)['room_info'][0]['player_id']

        self.bob.emit('leave_room', {'room_id': room_id, 'player_id': player_id})

        assert received(self.bob)['room_leave_result'][0]['success'] is True
        update = received(self.alice)['room_state_update'][0]['room']
        assert len(update['players']) == 1

    def test_room_info(self):
        room_id = self.open_room()
        self.bob.emit('get_room_info', {'room_id': room_id})
        events = received(self.bob)

        assert events['room_info'][0]['room']['room_id'] == room_id
        assert 'room_state_update' not in events
        assert 'room_state_update' not in received(self.alice)

    def test_lobby_updates(self):
        watcher = self.socketio.test_client(self.app)
        watcher.emit('join_lobby')
        assert received(watcher)['lobby_state_update'][0]['rooms'] == []

        self.alice.emit('join_room', {'player_name': 'Alice', 'create_new': True})
        rooms = received(watcher)['lobby_state_update'][0]['rooms']

        assert len(rooms) == 1
        assert rooms[0]['player_count'] == 1
        watcher.disconnect()
