"""
Game Session

A single player's guessing session. The answer comes either from a fixed word
or from the adversarial selector; both sit behind the same answer-source
interface so the session logic does not care which one it has.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..config.game_settings import MAX_ROUNDS
from ..errors import StateError
from ..models.game import AnswerMode, Feedback, GuessRecord, GuessResult, SessionStatus
from .adversary import AdversarialSelector
from .scoring import normalize_guess, score_guess


class FixedAnswer:
    """Answer chosen before the first guess and never changed."""

    mode = AnswerMode.FIXED

    def __init__(self, answer: str):
        self.answer = answer.upper()

    def answer_for(self, guess: str) -> str:
        return self.answer

    def observe(self, guess: str, feedback: Feedback) -> None:
        pass

    @property
    def candidates_count(self) -> Optional[int]:
        return None

    @property
    def remaining_candidates(self) -> Optional[List[str]]:
        return None


class AdversarialAnswer:
    """Answer re-picked for every guess by an ``AdversarialSelector``."""

    mode = AnswerMode.ADVERSARIAL

    def __init__(self, word_list: Sequence[str]):
        self.selector = AdversarialSelector(word_list)

    def answer_for(self, guess: str) -> str:
        return self.selector.select_worst(guess)

    def observe(self, guess: str, feedback: Feedback) -> None:
        self.selector.narrow(guess, feedback)

    @property
    def candidates_count(self) -> Optional[int]:
        return len(self.selector)

    @property
    def remaining_candidates(self) -> Optional[List[str]]:
        return list(self.selector.candidates)


class GameSession:
    """
    Tracks guesses and status for one player.

    Guesses are append-only and the status flips from IN_PROGRESS to WIN or
    LOSE exactly once.
    """

    def __init__(self, answer_source, max_rounds: int = MAX_ROUNDS):
        self.answer_source = answer_source
        self.max_rounds = max_rounds
        self.guesses: List[GuessRecord] = []
        self.status = SessionStatus.IN_PROGRESS
        self.answer: Optional[str] = None  # Revealed once the session is over

    @property
    def mode(self) -> AnswerMode:
        return self.answer_source.mode

    @property
    def is_over(self) -> bool:
        return self.status != SessionStatus.IN_PROGRESS

    @property
    def rounds_left(self) -> int:
        return self.max_rounds - len(self.guesses)

    def make_guess(self, raw_guess) -> GuessResult:
        """
        Score a guess and update the session.

        Raises:
            StateError: the session is already over
            ValidationError: the guess is malformed (state is left untouched)
        """
        if self.is_over:
            raise StateError("Game is over")

        guess = normalize_guess(raw_guess)

        answer = self.answer_source.answer_for(guess)
        feedback = score_guess(guess, answer)
        self.answer_source.observe(guess, feedback)

        self.guesses.append(GuessRecord(guess, feedback))

        if guess == answer:
            self.status = SessionStatus.WIN
        elif len(self.guesses) >= self.max_rounds:
            self.status = SessionStatus.LOSE

        if self.is_over:
            self.answer = answer

        return self._result(feedback)

    def _result(self, feedback: Feedback) -> GuessResult:
        return GuessResult(
            feedback=feedback,
            guesses=list(self.guesses),
            status=self.status,
            rounds_left=self.rounds_left,
            answer=self.answer,
            candidates_count=self.answer_source.candidates_count,
            remaining_candidates=self.answer_source.remaining_candidates if self.is_over else None
        )

    def get_state(self) -> Dict:
        """Current session state; the answer stays hidden until the session is over."""
        state = {
            'game_mode': self.mode.value,
            'guesses': [record.to_dict() for record in self.guesses],
            'status': self.status.value,
            'max_rounds': self.max_rounds,
            'rounds_left': self.rounds_left,
            'answer': self.answer
        }
        if self.mode is AnswerMode.ADVERSARIAL:
            state['candidates_count'] = self.answer_source.candidates_count
            state['remaining_candidates'] = self.answer_source.remaining_candidates if self.is_over else None
        return state


@dataclass(frozen=True)
class RoundSecret:
    """
    The shared answer context for one room round.

    Every player's session for the round is built from the same secret: the
    same fixed answer, or the same starting candidate pool for adversarial
    rounds.
    """
    mode: AnswerMode
    word_list: Tuple[str, ...]
    max_rounds: int = MAX_ROUNDS
    answer: Optional[str] = None

    @classmethod
    def draw(cls, mode: AnswerMode, word_list: Sequence[str], max_rounds: int = MAX_ROUNDS,
             rng: Optional[random.Random] = None) -> 'RoundSecret':
        rng = rng or random.Random()
        answer = rng.choice(list(word_list)).upper() if mode is AnswerMode.FIXED else None
        return cls(mode=mode, word_list=tuple(word_list), max_rounds=max_rounds, answer=answer)

    def new_session(self) -> GameSession:
        return create_session(self.mode, self.word_list, self.max_rounds, answer=self.answer)


def create_session(mode: AnswerMode, word_list: Sequence[str], max_rounds: int = MAX_ROUNDS,
                   answer: Optional[str] = None, rng: Optional[random.Random] = None) -> GameSession:
    """
    Build a session for ``mode``.

    Fixed sessions use ``answer`` when given, otherwise a random word from
    ``word_list``.
    """
    if not word_list:
        raise ValueError("Word list must be a non-empty list")

    if mode is AnswerMode.FIXED:
        if answer is None:
            answer = (rng or random.Random()).choice(list(word_list))
        return GameSession(FixedAnswer(answer), max_rounds)
    if mode is AnswerMode.ADVERSARIAL:
        return GameSession(AdversarialAnswer(word_list), max_rounds)
    raise ValueError(f"Unknown game mode: {mode}")
