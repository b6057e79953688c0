"""Tests for single-player sessions and the HTTP game service."""

import random

import pytest

from wordle_rooms.errors import NotFoundError, StateError, ValidationError
from wordle_rooms.models.game import AnswerMode, LetterStatus, SessionStatus
from wordle_rooms.services.game_service import GameService
from wordle_rooms.services.session import RoundSecret, create_session

SMALL_POOL = ["HELLO", "WORLD", "QUITE", "FANCY"]


class TestFixedSession:
    """Test cases for sessions with a fixed answer."""

    def setup_method(self):
        self.session = create_session(AnswerMode.FIXED, ["CRANE"], max_rounds=3, answer="CRANE")

    def test_win_reveals_answer(self):
        result = self.session.make_guess("crane")

        assert result.status == SessionStatus.WIN
        assert result.feedback == (LetterStatus.HIT,) * 5
        assert result.answer == "CRANE"
        assert result.rounds_left == 2
        assert self.session.is_over

    def test_answer_hidden_while_in_progress(self):
        result = self.session.make_guess("SLATE")
        state = self.session.get_state()

        assert result.status == SessionStatus.IN_PROGRESS
        assert result.answer is None
        assert state['answer'] is None
        assert state['status'] == "IN_PROGRESS"
        assert state['guesses'][0]['guess'] == "SLATE"

    def test_lose_after_last_guess(self):
        for _ in range(3):
            result = self.session.make_guess("SLATE")

        assert result.status == SessionStatus.LOSE
        assert result.answer == "CRANE"
        assert result.rounds_left == 0

    def test_guess_after_game_over_rejected(self):
        self.session.make_guess("CRANE")
        with pytest.raises(StateError, match="Game is over"):
            self.session.make_guess("SLATE")
        assert len(self.session.guesses) == 1

    def test_invalid_guess_does_not_consume_a_turn(self):
        with pytest.raises(ValidationError):
            self.session.make_guess("CRAN")
        assert self.session.guesses == []
        assert self.session.rounds_left == 3


class TestAdversarialSession:
    """Test cases for Absurdle-style sessions."""

    def setup_method(self):
        self.session = create_session(AnswerMode.ADVERSARIAL, SMALL_POOL, max_rounds=6)

    def test_first_guess_dodged(self):
        result = self.session.make_guess("HELLO")

        assert result.feedback == (LetterStatus.MISS,) * 5
        assert result.status == SessionStatus.IN_PROGRESS
        assert result.candidates_count == 1
        assert self.session.get_state()['candidates_count'] == 1

    def test_win_once_cornered(self):
        self.session.make_guess("HELLO")
        result = self.session.make_guess("FANCY")

        assert result.status == SessionStatus.WIN
        assert result.answer == "FANCY"
        assert result.remaining_candidates == ["FANCY"]


class TestRoundSecret:
    """Test cases for the per-round shared answer."""

    def test_fixed_secret_shared_across_sessions(self):
        secret = RoundSecret.draw(AnswerMode.FIXED, ["CRANE", "SLATE"], rng=random.Random(3))
        first = secret.new_session()
        second = secret.new_session()

        assert secret.answer in ("CRANE", "SLATE")
        first.make_guess(secret.answer)
        assert first.status == SessionStatus.WIN
        assert second.guesses == []

    def test_adversarial_secret_has_no_fixed_answer(self):
        secret = RoundSecret.draw(AnswerMode.ADVERSARIAL, SMALL_POOL)
        assert secret.answer is None
        assert secret.new_session().mode is AnswerMode.ADVERSARIAL


class TestGameService:
    """Test cases for GameService."""

    def setup_method(self):
        self.service = GameService(word_list=["CRANE"])

    def test_create_and_fetch_state(self):
        game_id = self.service.create_new_game()
        state = self.service.get_game_state(game_id)

        assert state.game_id == game_id
        assert state.game_mode == "wordle"
        assert state.max_rounds == 6
        assert state.answer is None

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            self.service.create_new_game("scrabble")

    def test_invalid_max_rounds_rejected(self):
        with pytest.raises(ValidationError):
            self.service.create_new_game("wordle", 0)

    def test_make_guess(self):
        game_id = self.service.create_new_game()
        result, state = self.service.make_guess(game_id, "crane")

        assert result.is_over
        assert state.status == "WIN"
        assert state.answer == "CRANE"

    def test_unknown_game(self):
        with pytest.raises(NotFoundError):
            self.service.get_game_state("missing")
        with pytest.raises(NotFoundError):
            self.service.make_guess("missing", "CRANE")

    def test_delete_game(self):
        game_id = self.service.create_new_game("absurdle")
        assert self.service.delete_game(game_id) is True
        assert self.service.delete_game(game_id) is False
