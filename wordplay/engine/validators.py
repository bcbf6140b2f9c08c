"""
WordPlay - Input Validation Utilities

Normalisation and validation helpers for words, letters and game
configuration. The ``validate_*`` functions either return validated data or
raise descriptive ValueError exceptions; the ``normalize_*`` functions never
raise.
"""

import string

from wordplay.engine.base import MAX_WORD_LENGTH, MIN_WORD_LENGTH

_ALPHABET = frozenset(string.ascii_uppercase)

MIN_PLAYERS = 1
MAX_PLAYERS = 4


def normalize_word(word: str | None) -> str:
    """Trim whitespace and upper-case a word. None becomes ''."""
    if word is None:
        return ""
    return word.strip().upper()


def normalize_letter(letter: str | None) -> str:
    """Normalise a single letter; returns '' unless the result is one of A-Z."""
    normalized = normalize_word(letter)
    if len(normalized) != 1 or normalized not in _ALPHABET:
        return ""
    return normalized


def normalize_letters(letters) -> frozenset[str]:
    """Normalise a collection of letters, dropping anything that is not A-Z."""
    if not letters:
        return frozenset()
    return frozenset(filter(None, (normalize_letter(letter) for letter in letters)))


def is_alphabetic(word: str) -> bool:
    """True if every character of an upper-cased word is A-Z."""
    return bool(word) and all(ch in _ALPHABET for ch in word)


def is_valid_length(word: str) -> bool:
    return MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH


def validate_word_shape(word: str) -> str:
    """
    Validate and normalise a playable word.

    Args:
        word: Raw word (any case, surrounding whitespace allowed)

    Returns:
        Upper-cased word

    Raises:
        ValueError: If the word is empty, non-alphabetic or of invalid length
    """
    normalized = normalize_word(word)
    if not normalized:
        raise ValueError("Word cannot be empty.")
    if not is_alphabetic(normalized):
        raise ValueError(f"Word must contain only letters A-Z, got {word!r}.")
    if not is_valid_length(normalized):
        raise ValueError(
            f"Word must be {MIN_WORD_LENGTH}-{MAX_WORD_LENGTH} letters, "
            f"got {len(normalized)}."
        )
    return normalized


def validate_player_count(count: int) -> int:
    """
    Validate number of players.

    Args:
        count: Number of players

    Returns:
        Validated count

    Raises:
        ValueError: If count is not 1-4
    """
    if not isinstance(count, int):
        raise ValueError(f"Player count must be an integer, got {type(count).__name__}.")

    if not (MIN_PLAYERS <= count <= MAX_PLAYERS):
        raise ValueError(f"Player count must be {MIN_PLAYERS}-{MAX_PLAYERS}, got {count}.")

    return count


def validate_max_turns(max_turns: int) -> int:
    """
    Validate the turn limit for a game.

    Raises:
        ValueError: If max_turns is not a positive integer
    """
    if not isinstance(max_turns, int) or isinstance(max_turns, bool):
        raise ValueError(f"Max turns must be an integer, got {type(max_turns).__name__}.")

    if max_turns < 1:
        raise ValueError(f"Max turns must be positive, got {max_turns}.")

    return max_turns
