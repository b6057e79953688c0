"""
Adversarial Answer Selector

Absurdle-style host: the answer is not fixed up front. For every guess the
selector answers with the remaining candidate that reveals the least, then
drops every candidate that would have produced different feedback.
"""

from collections import Counter
from typing import Iterable, List

from ..config.game_settings import WORD_LENGTH
from ..models.game import CandidateScore, Feedback
from .scoring import score_guess


class AdversarialSelector:
    """
    Holds the candidate set for one adversarial session.

    Ties between equally bad candidates are broken alphabetically, so the
    host's choices are deterministic.
    """

    def __init__(self, word_list: Iterable[str]):
        self.candidates: List[str] = sorted(set(word.upper() for word in word_list))
        if not self.candidates:
            raise ValueError("Word list must be a non-empty list")

    def __len__(self) -> int:
        return len(self.candidates)

    @staticmethod
    def score_candidate(candidate: str, guess: str) -> CandidateScore:
        """Count hits, then presents among the non-hit positions only."""
        hits = 0
        unmatched = Counter()
        open_positions = []
        for i in range(WORD_LENGTH):
            if candidate[i] == guess[i]:
                hits += 1
            else:
                unmatched[candidate[i]] += 1
                open_positions.append(i)

        presents = 0
        for i in open_positions:
            if unmatched[guess[i]] > 0:
                unmatched[guess[i]] -= 1
                presents += 1

        return CandidateScore(hits, presents)

    def select_worst(self, guess: str) -> str:
        """Return the candidate with the smallest (hits, presents) score for ``guess``."""
        return min(self.candidates, key=lambda word: (self.score_candidate(word, guess), word))

    def narrow(self, guess: str, feedback: Feedback) -> None:
        """Keep only candidates that would have produced exactly ``feedback``."""
        self.candidates = [word for word in self.candidates if score_guess(guess, word) == feedback]
