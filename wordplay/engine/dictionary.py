"""
WordPlay - In-Memory Dictionary

A DictionaryOracle backed by a word list held in memory. Loading the list
(from a file, a package resource, a database) is the caller's business.
"""

import random
from collections import defaultdict
from typing import Iterable

from wordplay.engine.validators import is_alphabetic, normalize_word


class WordListDictionary:
    """Set-backed dictionary indexed by word length."""

    def __init__(self, words: Iterable[str], rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._words: set[str] = set()
        self._by_length: dict[int, list[str]] = defaultdict(list)
        for word in words:
            self.add(word)

    def add(self, word: str) -> bool:
        """Add a word. Returns False for blanks, non-letters and duplicates."""
        normalized = normalize_word(word)
        if not is_alphabetic(normalized) or normalized in self._words:
            return False
        self._words.add(normalized)
        self._by_length[len(normalized)].append(normalized)
        return True

    def is_valid_word(self, word: str) -> bool:
        return normalize_word(word) in self._words

    def random_word_of_length(self, length: int) -> str | None:
        candidates = self._by_length.get(length)
        if not candidates:
            return None
        return self._rng.choice(candidates)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.is_valid_word(word)

    def __len__(self) -> int:
        return len(self._words)
