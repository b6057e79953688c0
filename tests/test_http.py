"""Tests for the HTTP API using the Flask test client."""

import pytest

from wordle_rooms import create_app
from wordle_rooms.config import TestingConfig
from wordle_rooms.services.game_service import GameService
from wordle_rooms.services.room_registry import RoomRegistry


class TestGameEndpoints:
    """Test cases for single-player endpoints."""

    def setup_method(self):
        app, _ = create_app(TestingConfig, games=GameService(word_list=["CRANE"]))
        self.client = app.test_client()

    def new_game(self, **body):
        response = self.client.post('/api/new_game', json=body)
        assert response.status_code == 200
        return response.get_json()

    def test_new_game(self):
        data = self.new_game()

        assert data['success'] is True
        assert data['state']['game_mode'] == "wordle"
        assert data['state']['status'] == "IN_PROGRESS"
        assert data['state']['answer'] is None

    def test_new_game_without_body_defaults_to_wordle(self):
        response = self.client.post('/api/new_game')
        assert response.status_code == 200
        assert response.get_json()['state']['game_mode'] == "wordle"

    def test_new_game_rejects_unknown_mode(self):
        response = self.client.post('/api/new_game', json={'game_mode': 'chess'})

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_winning_guess(self):
        game_id = self.new_game()['game_id']
        response = self.client.post(f'/api/game/{game_id}/guess', json={'guess': 'crane'})
        data = response.get_json()

        assert response.status_code == 200
        assert data['result']['feedback'] == ["hit"] * 5
        assert data['state']['status'] == "WIN"
        assert data['state']['answer'] == "CRANE"

    def test_guess_errors(self):
        game_id = self.new_game()['game_id']

        missing = self.client.post(f'/api/game/{game_id}/guess', json={})
        assert missing.status_code == 400
        assert missing.get_json()['error'] == "Guess is required"

        malformed = self.client.post(f'/api/game/{game_id}/guess', json={'guess': 'abc'})
        assert malformed.status_code == 400
        assert malformed.get_json()['error_type'] == "ValidationError"

        unknown = self.client.post('/api/game/nope/guess', json={'guess': 'CRANE'})
        assert unknown.status_code == 404

    def test_guess_after_game_over(self):
        game_id = self.new_game()['game_id']
        self.client.post(f'/api/game/{game_id}/guess', json={'guess': 'CRANE'})
        response = self.client.post(f'/api/game/{game_id}/guess', json={'guess': 'CRANE'})

        assert response.status_code == 409
        assert response.get_json()['error'] == "Game is over"

    def test_absurdle_state_reports_candidates(self):
        game_id = self.new_game(game_mode='absurdle')['game_id']
        state = self.client.get(f'/api/game/{game_id}/state').get_json()['state']

        assert state['game_mode'] == "absurdle"
        assert state['candidates_count'] == 1

    def test_delete_game(self):
        game_id = self.new_game()['game_id']

        assert self.client.delete(f'/api/game/{game_id}').get_json() == {'success': True}
        assert self.client.get(f'/api/game/{game_id}/state').status_code == 404

    def test_modes_and_health(self):
        modes = self.client.get('/api/modes').get_json()
        assert modes['modes'] == ["wordle", "absurdle"]

        health = self.client.get('/api/health')
        assert health.status_code == 200
        assert health.get_json()['status'] == "healthy"


class TestMultiplayerEndpoints:
    """Test cases for room discovery endpoints."""

    @pytest.fixture(autouse=True)
    def setup_app(self, clock):
        self.registry = RoomRegistry(word_list=["CRANE"], clock=clock)
        app, _ = create_app(TestingConfig, registry=self.registry)
        self.client = app.test_client()

    def test_list_rooms(self):
        assert self.client.get('/api/multiplayer/rooms').get_json()['rooms'] == []

        room, _ = self.registry.create_room("c1", "Alice")
        data = self.client.get('/api/multiplayer/rooms').get_json()

        assert data['total'] == 1
        assert data['rooms'][0]['room_id'] == room.room_id
        assert data['rooms'][0]['player_count'] == 1

    def test_stats(self):
        self.registry.create_room("c1", "Alice")
        stats = self.client.get('/api/multiplayer/stats').get_json()['stats']

        assert stats['total_rooms'] == 1
        assert stats['total_players'] == 1
