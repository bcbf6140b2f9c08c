"""
WordPlay - Collaborator Interfaces

One protocol per capability the turn state machine depends on. Implementations
are injected through the TurnStateMachine constructor.
"""

import threading
from typing import Callable, Iterable, Protocol

from wordplay.engine.base import MoveAttempt, ScoreBreakdown, TransformationAnalysis


class DictionaryOracle(Protocol):
    """Word validation and random word supply. Case-insensitive, synchronous."""

    def is_valid_word(self, word: str) -> bool:
        """True if the word is a legal dictionary word."""
        ...

    def random_word_of_length(self, length: int) -> str | None:
        """A random legal word of the given length, or None if there is none."""
        ...


class MoveScorer(Protocol):
    """Pure move classification and scoring."""

    def analyze(
        self,
        previous_word: str | None,
        new_word: str | None,
        bonus_letters: Iterable[str] | None = None,
    ) -> TransformationAnalysis:
        ...

    def score(
        self,
        previous_word: str | None,
        new_word: str | None,
        bonus_letters: Iterable[str] | None = None,
    ) -> ScoreBreakdown:
        ...

    def breakdown_from_analysis(self, analysis: TransformationAnalysis) -> ScoreBreakdown:
        """Points for an analysis already computed by analyze()."""
        ...


AttemptMove = Callable[[str], MoveAttempt]


class BotProposer(Protocol):
    """Proposes a word for an automated player.

    The proposer only ever sees read-only state and the side-effect free
    ``attempt_move`` probe; its answer is submitted like any human move.
    """

    def propose(
        self,
        current_word: str,
        available_bonus_letters: frozenset[str],
        locked_bonus_letters: frozenset[str],
        attempt_move: AttemptMove,
        cancel_event: threading.Event | None = None,
    ) -> str | None:
        """Return the chosen word, or None when no move was found."""
        ...
