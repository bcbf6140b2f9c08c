"""
WordPlay - Daily Challenge

Single-player puzzle: turn a start word into a target word one legal move at
a time, in as few steps as possible.

Challenge Rules:
- Each step must be a dictionary word that differs from the current word
- Each step follows the move-shape rule (at most one letter added and one
  removed, rearranging is free)
- A word can only be played once per challenge
- Reaching the target completes the challenge; the player may forfeit

The start/target pair for a date is drawn with a ``random.Random`` seeded
from the date, so every player gets the same puzzle on the same day. Like the
scoring engine, the challenge engine holds no game state: each operation takes
a ChallengeState and returns a new one.
"""

from __future__ import annotations

import datetime
import logging
import random
from collections import Counter
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from wordplay.engine.interfaces import DictionaryOracle, MoveScorer
from wordplay.engine.scoring import ScoringEngine
from wordplay.engine.validators import is_alphabetic, is_valid_length, normalize_word

logger = logging.getLogger(__name__)


START_WORD_LENGTH = 5
MIN_TARGET_LENGTH = 5
MAX_TARGET_LENGTH = 8
MAX_COMMON_LETTERS = 2
FIRST_CHALLENGE_DATE = datetime.date(2024, 1, 1)

NEW_LETTER_TILE = "🀫"
KEPT_LETTER_TILE = "*"

DEFAULT_START_WORDS = (
    "GAMES", "WORDS", "PLAYS", "TIMES", "MAKES",
    "WORLD", "HOUSE", "LIGHT", "SOUND", "NIGHT",
)

DEFAULT_TARGET_WORDS = (
    "QUICK", "JUMPY", "BLITZ", "WALTZ", "QUIRK", "FJORD", "BUMPH",
    "ZINGY", "PROXY", "WHISK", "JERKY", "MIXED", "VINYL", "ZEBRA",
    "QUARTZ", "JOCKEY", "WHISKY", "ZEPHYR", "OXYGEN", "PYTHON",
    "SPHINX", "GIZMOS", "HIJACK", "JAUNTY",
    "QUICKLY", "JOCKEYS", "WHISKEY", "ZEPHYRS", "PYTHONS",
    "HIJACKS", "JAUNTED", "COMPLEX", "DYNASTY",
    "RHYTHMIC", "HIJACKED", "DYNAMITE", "SYMPHONY",
)

LAST_RESORT_TARGETS = ("QUICK", "JUMPY", "BLITZ")


@dataclass(frozen=True)
class ChallengeState:
    """
    Progress through one challenge.

    Attributes:
        date: ISO date (YYYY-MM-DD) the puzzle belongs to
        start_word: Word the challenge starts from
        target_word: Word to reach
        current_word: Latest word played
        word_sequence: Every word so far, start word first
        step_count: Number of accepted words
        completed: Whether the target was reached
        failed: Whether the player forfeited
        failed_at_word: Current word at the time of forfeit
    """
    date: str
    start_word: str
    target_word: str
    current_word: str
    word_sequence: tuple[str, ...]
    step_count: int = 0
    completed: bool = False
    failed: bool = False
    failed_at_word: str | None = None

    @property
    def is_over(self) -> bool:
        return self.completed or self.failed

    @classmethod
    def new(cls, date: str, start_word: str, target_word: str) -> "ChallengeState":
        return cls(
            date=date,
            start_word=start_word,
            target_word=target_word,
            current_word=start_word,
            word_sequence=(start_word,),
        )


@dataclass(frozen=True)
class ChallengeSubmission:
    """Outcome of submitting a word. ``state`` is unchanged when invalid."""
    state: ChallengeState
    is_valid: bool
    is_complete: bool = False
    error: str | None = None


def has_repeating_letters(word: str) -> bool:
    return len(set(word)) != len(word)


def count_common_letters(first: str, second: str) -> int:
    """Letters shared by two words, counting repeats."""
    return sum((Counter(first) & Counter(second)).values())


def is_valid_target_word(start_word: str, target_word: str) -> bool:
    """
    A target must differ from the start, have at least five distinct letters
    and share at most two letters with the start word.
    """
    return (
        bool(target_word)
        and target_word != start_word
        and len(target_word) >= MIN_TARGET_LENGTH
        and count_common_letters(start_word, target_word) <= MAX_COMMON_LETTERS
        and not has_repeating_letters(target_word)
    )


def challenge_number(date: str) -> int:
    """1-based puzzle number, counted in days from the first challenge."""
    return (datetime.date.fromisoformat(date) - FIRST_CHALLENGE_DATE).days + 1


class ChallengeEngine:
    """
    Daily challenge rules.

    Args:
        dictionary: Word legality for every step
        word_pool: Words the daily start/target pair is drawn from. Only the
            ones the dictionary accepts are used. Defaults to a built-in list.
        scorer: Move analysis (ScoringEngine by default)
        today: Supplies the date used when none is given
    """

    def __init__(
        self,
        dictionary: DictionaryOracle,
        word_pool: Iterable[str] | None = None,
        *,
        scorer: MoveScorer = ScoringEngine,
        today: Callable[[], datetime.date] = datetime.date.today,
    ) -> None:
        self._dictionary = dictionary
        self._scorer = scorer
        self._today = today
        pool = DEFAULT_START_WORDS + DEFAULT_TARGET_WORDS if word_pool is None else word_pool
        words = {normalize_word(w) for w in pool}
        self._pool = sorted(
            w for w in words if is_alphabetic(w) and self._dictionary.is_valid_word(w)
        )

    # -- Daily words -----------------------------------------------------

    def daily_words(self, date: str) -> tuple[str, str]:
        """Deterministic (start, target) pair for an ISO date."""
        rng = random.Random(f"wordplay-challenge:{date}")
        start = self._pick_start_word(rng)
        target = self._pick_target_word(rng, start)
        return start, target

    def _pick_start_word(self, rng: random.Random) -> str:
        candidates = [
            w for w in self._pool
            if len(w) == START_WORD_LENGTH and not has_repeating_letters(w)
        ]
        return rng.choice(candidates or list(DEFAULT_START_WORDS))

    def _pick_target_word(self, rng: random.Random, start: str) -> str:
        length = len(start) + rng.randint(-1, 1)
        length = max(MIN_TARGET_LENGTH, min(MAX_TARGET_LENGTH, length))

        valid = [w for w in self._pool if is_valid_target_word(start, w)]
        exact = [w for w in valid if len(w) == length]
        if exact or valid:
            return rng.choice(exact or valid)

        fallbacks = [w for w in DEFAULT_TARGET_WORDS if is_valid_target_word(start, w)]
        return rng.choice(fallbacks or list(LAST_RESORT_TARGETS))

    # -- Progression -----------------------------------------------------

    def start_daily_challenge(self, date: str | datetime.date | None = None) -> ChallengeState:
        """Fresh state for the given day (today by default)."""
        if date is None:
            date = self._today()
        if not isinstance(date, datetime.date):
            date = datetime.date.fromisoformat(date)
        date = date.isoformat()

        start, target = self.daily_words(date)
        logger.info("Challenge %s: %s -> %s", date, start, target)
        return ChallengeState.new(date, start, target)

    def is_valid_move(self, from_word: str | None, to_word: str | None) -> bool:
        """A different, well-formed dictionary word within the move-shape rule."""
        previous = normalize_word(from_word)
        word = normalize_word(to_word)
        if not previous or not word or previous == word:
            return False
        if not is_alphabetic(word) or not is_valid_length(word):
            return False
        if not self._dictionary.is_valid_word(word):
            return False
        return ScoringEngine.is_valid_move(previous, word)

    def submit_word(self, word: str | None, state: ChallengeState) -> ChallengeSubmission:
        """
        Play the next word of a challenge.

        Returns:
            ChallengeSubmission with the advanced state, or the unchanged
            state and an error message when the word is not accepted
        """
        candidate = normalize_word(word)
        if state.is_over:
            return ChallengeSubmission(state=state, is_valid=False, error="Challenge is over")
        if candidate in state.word_sequence:
            return ChallengeSubmission(state=state, is_valid=False, error="Word already used")
        if not self.is_valid_move(state.current_word, candidate):
            return ChallengeSubmission(
                state=state, is_valid=False, error="Invalid word transformation"
            )

        is_complete = candidate == state.target_word
        new_state = replace(
            state,
            current_word=candidate,
            word_sequence=state.word_sequence + (candidate,),
            step_count=state.step_count + 1,
            completed=is_complete,
        )
        if is_complete:
            logger.info("Challenge %s completed in %d steps", state.date, new_state.step_count)
        return ChallengeSubmission(state=new_state, is_valid=True, is_complete=is_complete)

    def forfeit_challenge(self, state: ChallengeState) -> ChallengeState:
        """Give up. A finished challenge is returned unchanged."""
        if state.is_over:
            return state
        return replace(state, failed=True, failed_at_word=state.current_word)

    # -- Sharing ---------------------------------------------------------

    def sharing_pattern(self, word_sequence: Iterable[str]) -> list[str]:
        """
        One row per step: a tile for each letter of the new word, marking
        letters that were added on that step.
        """
        words = [normalize_word(w) for w in word_sequence]
        rows = []
        for previous, current in zip(words, words[1:]):
            added = Counter(self._scorer.analyze(previous, current).added_letters)
            row = []
            for ch in current:
                if added[ch] > 0:
                    added[ch] -= 1
                    row.append(NEW_LETTER_TILE)
                else:
                    row.append(KEPT_LETTER_TILE)
            rows.append("".join(row))
        return rows

    def sharing_text(self, state: ChallengeState) -> str:
        """Spoiler-free summary of a challenge, ready to paste."""
        header = f"Challenge #{challenge_number(state.date)}"
        route = f"{state.start_word} → {state.target_word}"
        if state.completed:
            header += f" ✓ {route}"
        elif state.failed:
            header += f" ❌ {route}"
        else:
            header += f" {route} (in progress)"

        text = header + "\n\n" + "\n".join(self.sharing_pattern(state.word_sequence))
        if state.completed:
            text += f"\n{state.step_count} turns"
        return text
