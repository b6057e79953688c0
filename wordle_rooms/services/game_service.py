"""
Game Service

Single-player games served over HTTP. Each game is one ``GameSession`` in
fixed (Wordle) or adversarial (Absurdle) mode.
"""

import random
import threading
import uuid
from typing import Dict, Optional, Sequence, Tuple

from ..config.game_settings import MAX_ROUNDS, WORD_LIST
from ..errors import NotFoundError, ValidationError
from ..models.game import AnswerMode, GameState, GuessResult
from .session import GameSession, create_session


class GameService:
    """
    Core game service managing multiple single-player sessions.

    This class handles:
    - Game session management with unique game IDs
    - Secure answer storage (answers are only revealed once a game is over)
    - Guess evaluation through the session's answer source
    """

    def __init__(self, word_list: Optional[Sequence[str]] = None, max_rounds: int = MAX_ROUNDS,
                 rng: Optional[random.Random] = None):
        self.games: Dict[str, GameSession] = {}  # Store active games by game_id
        self.word_list = list(word_list or WORD_LIST)
        self.max_rounds = max_rounds
        self.rng = rng or random.Random()
        self._lock = threading.Lock()

    def create_new_game(self, game_mode: str = "wordle", max_rounds: Optional[int] = None) -> str:
        """
        Creates a new game session.

        Args:
            game_mode: "wordle" (fixed answer) or "absurdle" (adversarial host)
            max_rounds: Guess limit, defaults to the configured maximum

        Returns:
            str: Unique game ID for this session

        Raises:
            ValidationError: unknown mode or a non-positive guess limit
        """
        try:
            mode = AnswerMode(game_mode)
        except ValueError:
            raise ValidationError('Invalid game mode. Must be "wordle" or "absurdle"')

        if max_rounds is None:
            max_rounds = self.max_rounds
        if isinstance(max_rounds, bool) or not isinstance(max_rounds, int) or max_rounds < 1:
            raise ValidationError("max_rounds must be a positive integer")

        game_id = str(uuid.uuid4())
        session = create_session(mode, self.word_list, max_rounds, rng=self.rng)
        with self._lock:
            self.games[game_id] = session
        return game_id

    def _require(self, game_id: str) -> GameSession:
        session = self.games.get(game_id)
        if session is None:
            raise NotFoundError("Game not found")
        return session

    def get_game_state(self, game_id: str) -> GameState:
        """
        Returns the current game state for a session (without revealing the answer).

        Raises:
            NotFoundError: unknown game id
        """
        with self._lock:
            session = self._require(game_id)
            return GameState(game_id=game_id, **session.get_state())

    def make_guess(self, game_id: str, guess) -> Tuple[GuessResult, GameState]:
        """
        Processes a guess and returns the guess result with the updated state.

        Raises:
            NotFoundError: unknown game id
            StateError: the game is already over
            ValidationError: malformed guess
        """
        with self._lock:
            session = self._require(game_id)
            result = session.make_guess(guess)
            return result, GameState(game_id=game_id, **session.get_state())

    def delete_game(self, game_id: str) -> bool:
        """
        Removes a game session from memory.

        Returns:
            bool: True if game was deleted, False if not found
        """
        with self._lock:
            return self.games.pop(game_id, None) is not None
