"""
WordPlay - Scoring Engine

Classifies the change from one word to the next and awards points.

Scoring Rules:
- Add one or more letters: +1
- Remove one or more letters: +1
- Rearrange the letters that stayed: +1
- Play a bonus (key) letter: +1
- Substitution = Add + Remove = +2

Each action type scores at most once per move. A rearrangement only counts
when the letters that survived the move changed relative order; letters that
merely shifted because of an insertion or deletion are a natural shift.

Examples:
- CAT -> CATS: +1 (add)
- POPE -> OPE: +1 (remove, natural shift)
- FLOE -> FOES: +2 (add S, remove L, F-O-E keep their order)
- NARD -> YARN: +3 (add Y, remove D, N-A-R rearranged to A-R-N)
- CAT -> TAC: +1 (rearrange)

All methods are stateless class methods. Nothing here raises on bad input:
empty or missing words score zero.
"""

from collections import Counter
from typing import Iterable

from wordplay.engine.base import ScoreBreakdown, TransformationAnalysis
from wordplay.engine.validators import normalize_letters, normalize_word


def is_subsequence(needle: str, haystack: str) -> bool:
    """True if ``needle`` can be read from ``haystack`` left to right.

    >>> is_subsequence("ACE", "ABCDE")
    True
    """
    it = iter(haystack)
    return all(ch in it for ch in needle)


def stayed_letters(first: str, second: str) -> Counter:
    """Multiset intersection of two words: the letters that stayed."""
    return Counter(first) & Counter(second)


def extract_stayed_sequence(word: str, stayed: Counter) -> str:
    """
    Subsequence of ``word`` made of the stayed letters, in word order.

    Each letter is taken at most as many times as it stayed, earliest
    occurrences first.

    Example: extract_stayed_sequence("LANG", Counter("NAG")) -> "ANG"
    """
    remaining = Counter(stayed)
    sequence = []
    for ch in word:
        if remaining[ch] > 0:
            sequence.append(ch)
            remaining[ch] -= 1
    return "".join(sequence)


class ScoringEngine:
    """
    Stateless scoring engine.

    All methods are class methods operating on plain strings. Input is
    case-insensitive and surrounding whitespace is ignored.
    """

    @classmethod
    def analyze(
        cls,
        previous_word: str | None,
        new_word: str | None,
        bonus_letters: Iterable[str] | None = None,
    ) -> TransformationAnalysis:
        """
        Work out which letters were added, removed and rearranged.

        Args:
            previous_word: Word before the move
            new_word: Candidate word after the move
            bonus_letters: Active bonus (key) letters

        Returns:
            TransformationAnalysis; empty when either word is empty
        """
        prev = normalize_word(previous_word)
        curr = normalize_word(new_word)
        if not prev or not curr:
            return TransformationAnalysis()

        prev_counts = Counter(prev)
        curr_counts = Counter(curr)
        added = curr_counts - prev_counts
        removed = prev_counts - curr_counts

        bonus = normalize_letters(bonus_letters)
        used = frozenset(ch for ch in curr if ch in bonus)

        return TransformationAnalysis(
            added_letters=tuple(sorted(added.elements())),
            removed_letters=tuple(sorted(removed.elements())),
            is_reordered=cls._is_reordered(prev, curr, bool(added), bool(removed)),
            bonus_letters_used=used,
        )

    @classmethod
    def _is_reordered(cls, prev: str, curr: str, has_added: bool, has_removed: bool) -> bool:
        """Distinguish a genuine rearrangement from a natural shift."""
        if not has_added and not has_removed:
            # Same multiset: any difference is a permutation.
            return prev != curr

        if has_added and not has_removed:
            return not is_subsequence(prev, curr)

        if has_removed and not has_added:
            return not is_subsequence(curr, prev)

        stayed = stayed_letters(prev, curr)
        return extract_stayed_sequence(prev, stayed) != extract_stayed_sequence(curr, stayed)

    @classmethod
    def score(
        cls,
        previous_word: str | None,
        new_word: str | None,
        bonus_letters: Iterable[str] | None = None,
    ) -> ScoreBreakdown:
        """
        Score a move.

        Args:
            previous_word: Word before the move
            new_word: Candidate word after the move
            bonus_letters: Active bonus (key) letters

        Returns:
            ScoreBreakdown with 0/1 per action type and descriptive actions
        """
        analysis = cls.analyze(previous_word, new_word, bonus_letters)
        return cls.breakdown_from_analysis(analysis)

    @classmethod
    def breakdown_from_analysis(cls, analysis: TransformationAnalysis) -> ScoreBreakdown:
        """Convert an analysis into points."""
        actions = []
        if analysis.added_letters:
            actions.append(f"Added letter(s): {', '.join(analysis.added_letters)}")
        if analysis.removed_letters:
            actions.append(f"Removed letter(s): {', '.join(analysis.removed_letters)}")
        if analysis.is_reordered:
            actions.append("Rearranged letters")
        if analysis.bonus_letters_used:
            actions.append(
                f"Used key letter(s): {', '.join(sorted(analysis.bonus_letters_used))}"
            )

        return ScoreBreakdown(
            add_points=1 if analysis.added_letters else 0,
            remove_points=1 if analysis.removed_letters else 0,
            reorder_points=1 if analysis.is_reordered else 0,
            bonus_points=1 if analysis.bonus_letters_used else 0,
            actions=tuple(actions),
        )

    @classmethod
    def score_for_move(
        cls,
        previous_word: str | None,
        new_word: str | None,
        bonus_letters: Iterable[str] | None = None,
    ) -> int:
        """Total points for a move, without the breakdown."""
        return cls.score(previous_word, new_word, bonus_letters).total

    @classmethod
    def is_valid_move(cls, previous_word: str | None, new_word: str | None) -> bool:
        """
        Check the move-shape rule.

        At most one net addition and at most one net removal per turn;
        rearranging is unrestricted.
        """
        analysis = cls.analyze(previous_word, new_word)
        return analysis.add_count <= 1 and analysis.remove_count <= 1

    @classmethod
    def validate_breakdown(cls, breakdown: ScoreBreakdown) -> bool:
        """True if the total equals the sum of components and nothing is negative."""
        components = (
            breakdown.add_points,
            breakdown.remove_points,
            breakdown.reorder_points,
            breakdown.bonus_points,
        )
        if any(points < 0 for points in components):
            return False
        return breakdown.total == sum(components) and breakdown.total >= 0

    @classmethod
    def format_breakdown(cls, breakdown: ScoreBreakdown) -> str:
        """Short display string, e.g. 'Add: +1, Rearrange: +1'."""
        parts = []
        if breakdown.add_points:
            parts.append(f"Add: +{breakdown.add_points}")
        if breakdown.remove_points:
            parts.append(f"Remove: +{breakdown.remove_points}")
        if breakdown.reorder_points:
            parts.append(f"Rearrange: +{breakdown.reorder_points}")
        if breakdown.bonus_points:
            parts.append(f"Key Usage: +{breakdown.bonus_points}")
        return ", ".join(parts) if parts else "No score"
