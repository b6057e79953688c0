"""
Game Configuration Constants Module

This module defines the game rules shared by single-player sessions and
multiplayer rooms: word length, guess limits, the room code alphabet, the
points table and the curated word database.
"""

import json
import os
from typing import List, Final

WORD_LENGTH: Final[int] = 5

# Guess attempts allowed per session
MAX_ROUNDS: Final[int] = 6

# Rounds played in a multiplayer room before it finishes
ROUNDS_PER_GAME: Final[int] = 5

MIN_PLAYERS_TO_START: Final[int] = 2
DEFAULT_MAX_PLAYERS: Final[int] = 4
MAX_PLAYERS_LIMIT: Final[int] = 8
MAX_NAME_LENGTH: Final[int] = 20

# Room codes are short and human-typeable
ROOM_ID_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
ROOM_ID_LENGTH: Final[int] = 6

# Points for a win: first guess earns the most, never below the floor
BASE_POINTS: Final[int] = 100
POINTS_STEP: Final[int] = 20
MIN_POINTS: Final[int] = 10


def points_for_win(guesses_used: int) -> int:
    """Points awarded for solving a round in ``guesses_used`` guesses."""
    return max(BASE_POINTS - (guesses_used - 1) * POINTS_STEP, MIN_POINTS)


# Load word list from JSON file
def _load_word_list() -> List[str]:
    """
    Load word list from wordles.json file.

    Returns:
        List[str]: List of uppercase 5-letter words

    Raises:
        FileNotFoundError: If wordles.json file is not found
        ValueError: If word list is empty, malformed or contains invalid words
    """
    config_dir = os.path.dirname(os.path.abspath(__file__))
    json_file_path = os.path.join(config_dir, 'wordles.json')

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in wordles.json: {e}")

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    if not word_list:
        raise ValueError("Word list cannot be empty")

    # Convert all words to uppercase and validate
    uppercase_words = [word.upper() for word in word_list]

    for word in uppercase_words:
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' is not {WORD_LENGTH} characters long")
        if not (word.isascii() and word.isalpha()):
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")

    return uppercase_words

# Curated Word Database loaded from JSON file
WORD_LIST: Final[List[str]] = _load_word_list()


def validate_word_list_integrity(words: List[str] = WORD_LIST) -> bool:
    """
    Validates the integrity and consistency of a word database.

    Checks that every word is exactly five uppercase ASCII letters and that
    there are no duplicate entries.

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word at index {index} '{word}' is not {WORD_LENGTH} characters long")

        if not (word.isascii() and word.isalpha()):
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.isupper():
            raise ValueError(f"Word at index {index} '{word}' is not in uppercase format")

    if len(words) != len(set(words)):
        duplicates = sorted({word for word in words if words.count(word) > 1})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True


def get_word_statistics(words: List[str] = WORD_LIST) -> dict:
    """
    Analyzes a word list and returns statistical information for game balancing.

    Returns:
        dict: total_words, avg_vowel_count, letter_frequency, most_common_letters
    """
    if not words:
        return {"error": "Word list is empty"}

    vowels = set('AEIOU')
    total_vowels = sum(len([char for char in word if char in vowels]) for word in words)

    letter_frequency = {}
    for word in words:
        for char in word:
            letter_frequency[char] = letter_frequency.get(char, 0) + 1

    return {
        "total_words": len(words),
        "avg_vowel_count": round(total_vowels / len(words), 2),
        "letter_frequency": letter_frequency,
        "most_common_letters": sorted(letter_frequency.items(), key=lambda x: x[1], reverse=True)[:5]
    }

