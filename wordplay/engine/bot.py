"""
WordPlay - Greedy Bot

Reference BotProposer. Generates every word reachable with one addition,
one removal, one substitution, or a bounded number of rearrangements, keeps
the dictionary words, probes each through attempt_move and picks the highest
scoring legal one.

The bot plays by the same rules as a human: it never sees or touches the
game state beyond what propose() is given.
"""

from __future__ import annotations

import itertools
import logging
import string
import threading
import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterator

from wordplay.engine.interfaces import AttemptMove, DictionaryOracle
from wordplay.engine.validators import normalize_letters, normalize_word

logger = logging.getLogger(__name__)

_ALPHABET = string.ascii_uppercase


@dataclass(frozen=True)
class BotCandidate:
    """A legal word the bot considered, with its probe result."""
    word: str
    points: int
    bonus_points: int


def generate_add_moves(word: str) -> Iterator[str]:
    """Insert each letter at each position."""
    for i in range(len(word) + 1):
        for letter in _ALPHABET:
            yield word[:i] + letter + word[i:]


def generate_remove_moves(word: str) -> Iterator[str]:
    """Drop each position in turn."""
    for i in range(len(word)):
        yield word[:i] + word[i + 1:]


def generate_substitute_moves(word: str) -> Iterator[str]:
    """Replace each position with every other letter."""
    for i, current in enumerate(word):
        for letter in _ALPHABET:
            if letter != current:
                yield word[:i] + letter + word[i + 1:]


def generate_rearrange_moves(word: str, max_variations: int = 50) -> Iterator[str]:
    """Distinct permutations of the word, capped at ``max_variations``."""
    seen = {word}
    produced = 0
    for perm in itertools.permutations(word):
        if produced >= max_variations:
            return
        candidate = "".join(perm)
        if candidate not in seen:
            seen.add(candidate)
            produced += 1
            yield candidate


class GreedyBot:
    """
    Picks the highest-scoring legal move it can find in time.

    Ties on points go to the move that plays a key letter, then to the first
    candidate generated.
    """

    def __init__(
        self,
        dictionary: DictionaryOracle,
        *,
        time_limit: float = 0.1,
        max_candidates: int = 1000,
        max_rearrangements: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._dictionary = dictionary
        self.time_limit = time_limit
        self.max_candidates = max_candidates
        self.max_rearrangements = max_rearrangements
        self._clock = clock

    def candidates(
        self,
        current_word: str,
        priority_letters: frozenset[str] = frozenset(),
        locked_letters: frozenset[str] = frozenset(),
    ) -> list[str]:
        """
        Distinct dictionary words one move away from ``current_word``.

        Words that would remove a locked letter are left out. Words containing
        one of ``priority_letters`` come first, so key-letter moves are probed
        before the time limit runs out.
        """
        word = normalize_word(current_word)
        current_counts = Counter(word)
        seen = {word}
        generators = itertools.chain(
            generate_add_moves(word),
            generate_remove_moves(word),
            generate_substitute_moves(word),
            generate_rearrange_moves(word, self.max_rearrangements),
        )
        found = []
        for candidate in generators:
            if candidate in seen:
                continue
            seen.add(candidate)
            if locked_letters and any(
                candidate.count(letter) < current_counts[letter] for letter in locked_letters
            ):
                continue
            if self._dictionary.is_valid_word(candidate):
                found.append(candidate)
        # sort is stable: generation order is kept within each group
        found.sort(key=lambda w: not any(letter in w for letter in priority_letters))
        return found

    def evaluate(
        self,
        current_word: str,
        attempt_move: AttemptMove,
        cancel_event: threading.Event | None = None,
        *,
        priority_letters: frozenset[str] = frozenset(),
        locked_letters: frozenset[str] = frozenset(),
    ) -> list[BotCandidate]:
        """Probe candidates until the budget, the time limit or cancellation."""
        deadline = self._clock() + self.time_limit
        legal: list[BotCandidate] = []
        words = self.candidates(current_word, priority_letters, locked_letters)
        for checked, word in enumerate(words):
            if checked >= self.max_candidates:
                break
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Bot search cancelled after %d candidates", checked)
                break
            if self._clock() > deadline:
                logger.info("Bot search hit its %.3fs time limit after %d candidates",
                            self.time_limit, checked)
                break

            attempt = attempt_move(word)
            if attempt.can_apply and attempt.score_breakdown is not None:
                legal.append(BotCandidate(
                    word=attempt.new_word,
                    points=attempt.score_breakdown.total,
                    bonus_points=attempt.score_breakdown.bonus_points,
                ))
        return legal

    def propose(
        self,
        current_word: str,
        available_bonus_letters: frozenset[str],
        locked_bonus_letters: frozenset[str],
        attempt_move: AttemptMove,
        cancel_event: threading.Event | None = None,
    ) -> str | None:
        """
        Best legal move found, or None.

        Available key letters order the search; locked letters prune it.
        ``attempt_move`` still has the final say on legality and points.
        """
        legal = self.evaluate(
            current_word,
            attempt_move,
            cancel_event,
            priority_letters=normalize_letters(available_bonus_letters),
            locked_letters=normalize_letters(locked_bonus_letters),
        )
        if not legal:
            return None
        # max() keeps the first of equal candidates
        best = max(legal, key=lambda c: (c.points, c.bonus_points))
        logger.debug(
            "Bot chose %s (%d points) from %d legal moves", best.word, best.points, len(legal)
        )
        return best.word
