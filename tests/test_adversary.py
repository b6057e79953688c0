"""Tests for the adversarial (Absurdle) answer selector."""

import pytest

from wordle_rooms.config import WORD_LIST
from wordle_rooms.models.game import CandidateScore
from wordle_rooms.services.adversary import AdversarialSelector
from wordle_rooms.services.scoring import score_guess


class TestAdversarialSelector:
    """Test cases for AdversarialSelector."""

    def setup_method(self):
        self.selector = AdversarialSelector(["HELLO", "WORLD", "QUITE", "FANCY"])

    def test_candidates_sorted_and_deduplicated(self):
        selector = AdversarialSelector(["world", "HELLO", "WORLD"])
        assert selector.candidates == ["HELLO", "WORLD"]
        assert len(selector) == 2

    def test_empty_word_list_rejected(self):
        with pytest.raises(ValueError):
            AdversarialSelector([])

    def test_score_candidate(self):
        assert AdversarialSelector.score_candidate("HELLO", "HELLO") == CandidateScore(5, 0)
        assert AdversarialSelector.score_candidate("WORLD", "HELLO") == CandidateScore(1, 1)
        assert AdversarialSelector.score_candidate("QUITE", "HELLO") == CandidateScore(0, 1)
        assert AdversarialSelector.score_candidate("FANCY", "HELLO") == CandidateScore(0, 0)

    def test_selects_least_revealing_candidate(self):
        worst = self.selector.select_worst("HELLO")
        assert worst == "FANCY"
        assert AdversarialSelector.score_candidate(worst, "HELLO").hits == 0

    def test_ties_broken_alphabetically(self):
        selector = AdversarialSelector(["MMMMM", "CCCCC", "PPPPP"])
        assert selector.select_worst("AAAAA") == "CCCCC"

    def test_narrow_keeps_consistent_candidates(self):
        worst = self.selector.select_worst("HELLO")
        self.selector.narrow("HELLO", score_guess("HELLO", worst))
        assert self.selector.candidates == ["FANCY"]

    def test_selected_word_scores_no_higher_than_any_candidate(self):
        for opening in ["CRANE", "SOUTH", "QUITE", "BUGGY"]:
            selector = AdversarialSelector(WORD_LIST)
            for guess in [opening, "PANIC", "HAPPY", "SMILE"]:
                worst = selector.select_worst(guess)
                best_possible = min(selector.score_candidate(word, guess) for word in selector.candidates)

                assert worst in selector.candidates
                assert selector.score_candidate(worst, guess) == best_possible

                selector.narrow(guess, score_guess(guess, worst))

    def test_narrowed_set_always_contains_selected_word(self):
        selector = AdversarialSelector(WORD_LIST)
        for guess in ["CRANE", "SOUTH", "PANIC"]:
            worst = selector.select_worst(guess)
            selector.narrow(guess, score_guess(guess, worst))
            assert worst in selector.candidates
            assert len(selector) >= 1
