"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple


class LetterStatus(Enum):
    """Letter evaluation status for one position of a guess."""
    HIT = "hit"
    PRESENT = "present"
    MISS = "miss"


Feedback = Tuple[LetterStatus, ...]


class SessionStatus(Enum):
    IN_PROGRESS = "IN_PROGRESS"
    WIN = "WIN"
    LOSE = "LOSE"


class AnswerMode(Enum):
    """How a session resolves its answer."""
    FIXED = "wordle"
    ADVERSARIAL = "absurdle"


class CandidateScore(NamedTuple):
    """How much a candidate answer would reveal; smaller tuples are worse for the player."""
    hits: int
    presents: int


def feedback_values(feedback: Feedback) -> List[str]:
    """Serializable form of a feedback tuple."""
    return [status.value for status in feedback]


@dataclass(frozen=True)
class GuessRecord:
    """A scored guess, optionally tagged with the room round it belongs to."""
    guess: str
    feedback: Feedback
    round_number: Optional[int] = None

    def to_dict(self) -> Dict:
        data = {'guess': self.guess, 'feedback': feedback_values(self.feedback)}
        if self.round_number is not None:
            data['round'] = self.round_number
        return data


@dataclass
class GuessResult:
    """Outcome of a single accepted guess."""
    feedback: Feedback
    guesses: List[GuessRecord]
    status: SessionStatus
    rounds_left: int
    answer: Optional[str] = None  # Only included when the session is over
    candidates_count: Optional[int] = None  # Adversarial sessions only
    remaining_candidates: Optional[List[str]] = None  # Adversarial, once over

    @property
    def is_over(self) -> bool:
        return self.status != SessionStatus.IN_PROGRESS

    def to_dict(self) -> Dict:
        data = {
            'feedback': feedback_values(self.feedback),
            'guesses': [record.to_dict() for record in self.guesses],
            'status': self.status.value,
            'rounds_left': self.rounds_left,
            'answer': self.answer
        }
        if self.candidates_count is not None:
            data['candidates_count'] = self.candidates_count
        if self.remaining_candidates is not None:
            data['remaining_candidates'] = list(self.remaining_candidates)
        return data


@dataclass
class GameState:
    """Server-side single-player game state representation."""
    game_id: str
    game_mode: str
    status: str
    max_rounds: int
    rounds_left: int
    guesses: List[Dict] = field(default_factory=list)
    answer: Optional[str] = None  # Only included when game is over
    candidates_count: Optional[int] = None
    remaining_candidates: Optional[List[str]] = None
