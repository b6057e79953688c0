"""
Feedback Scorer

Implements the authentic Wordle letter evaluation algorithm.
"""

import re
from typing import List, Optional

from ..config.game_settings import WORD_LENGTH
from ..errors import ValidationError
from ..models.game import Feedback, LetterStatus

_WORD_PATTERN = re.compile(r'[A-Z]+')


def normalize_guess(raw) -> str:
    """
    Normalize a raw guess and check its shape.

    Only the length and the A-Z charset are enforced; the guess does not have
    to be in the word list.

    Raises:
        ValidationError: the guess is not a string, has the wrong length or
            contains characters outside A-Z
    """
    if not isinstance(raw, str):
        raise ValidationError("Guess must be a valid string")

    word = raw.strip().upper()
    if len(word) != WORD_LENGTH:
        raise ValidationError(f"Guess must be exactly {WORD_LENGTH} letters")
    if not _WORD_PATTERN.fullmatch(word):
        raise ValidationError("Guess must contain only letters A-Z")
    return word


def score_guess(guess: str, answer: str) -> Feedback:
    """
    Score ``guess`` against ``answer``.

    Both words must already be normalized. Each answer letter is consumed at
    most once, so duplicate letters in the guess are never over-credited.
    """
    result: List[Optional[LetterStatus]] = [None] * WORD_LENGTH
    consumed = [False] * WORD_LENGTH

    # First pass: exact position matches
    for i in range(WORD_LENGTH):
        if guess[i] == answer[i]:
            result[i] = LetterStatus.HIT
            consumed[i] = True

    # Second pass: leftmost unconsumed occurrence, else a miss
    for i in range(WORD_LENGTH):
        if result[i] is not None:
            continue
        result[i] = LetterStatus.MISS
        for j in range(WORD_LENGTH):
            if not consumed[j] and guess[i] == answer[j]:
                result[i] = LetterStatus.PRESENT
                consumed[j] = True
                break

    return tuple(result)
