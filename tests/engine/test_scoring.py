"""
WordPlay - Scoring Engine Tests

Tests for move classification, natural-shift detection and point totals.
"""

from collections import Counter

import pytest

from wordplay.engine.base import ActionType, ScoreBreakdown
from wordplay.engine.scoring import (
    ScoringEngine,
    extract_stayed_sequence,
    is_subsequence,
    stayed_letters,
)


# === Helpers ===


class TestHelpers:
    """Tests for the subsequence and stayed-letter helpers."""

    def test_is_subsequence_true(self):
        assert is_subsequence("ACE", "ABCDE") is True

    def test_is_subsequence_false_when_out_of_order(self):
        assert is_subsequence("NAG", "LANG") is False

    def test_empty_is_subsequence(self):
        assert is_subsequence("", "CAT") is True

    def test_stayed_letters_respects_counts(self):
        assert stayed_letters("APPLE", "PALE") == Counter({"P": 1, "A": 1, "L": 1, "E": 1})

    def test_extract_stayed_sequence(self):
        assert extract_stayed_sequence("LANG", Counter("NAG")) == "ANG"
        assert extract_stayed_sequence("NAG", Counter("NAG")) == "NAG"

    def test_extract_takes_earliest_occurrences(self):
        assert extract_stayed_sequence("POPE", Counter("PE")) == "PE"


# === Score Vectors ===


class TestScore:
    """Tests for ScoringEngine.score()."""

    @pytest.mark.parametrize(
        "previous,new,expected",
        [
            # (add, remove, reorder)
            ("CAT", "CATS", (1, 0, 0)),
            ("CAT", "COAT", (1, 0, 0)),
            ("CATS", "BATS", (1, 1, 0)),
            ("CATS", "TABS", (1, 1, 1)),
            ("NAG", "LANG", (1, 0, 1)),
            ("POPE", "OPE", (0, 1, 0)),
            ("FLOE", "FOES", (1, 1, 0)),
            ("NARD", "YARN", (1, 1, 1)),
            ("CAT", "TAC", (0, 0, 1)),
            ("STOP", "POTS", (0, 0, 1)),
            ("CATS", "ACT", (0, 1, 1)),
        ],
    )
    def test_action_points(self, previous, new, expected):
        result = ScoringEngine.score(previous, new)
        assert (result.add_points, result.remove_points, result.reorder_points) == expected
        assert result.total == sum(expected)

    def test_same_word_scores_zero(self):
        assert ScoringEngine.score("CAT", "CAT").total == 0

    @pytest.mark.parametrize("word", ["CAT", "POPE", "YARN", "BOSSY", "LETTER"])
    def test_identity_is_always_zero(self, word):
        result = ScoringEngine.score(word, word, ())
        assert result.total == 0
        assert result.actions == ()

    def test_natural_shift_on_front_removal(self):
        result = ScoringEngine.score("POPE", "OPE")
        assert result.remove_points == 1
        assert result.reorder_points == 0
        assert result.total == 1

    def test_substitution_keeping_order_is_not_reorder(self):
        result = ScoringEngine.score("FLOE", "FOES")
        assert result.reorder_points == 0
        assert result.total == 2

    def test_genuine_transposition_with_substitution(self):
        result = ScoringEngine.score("NARD", "YARN")
        assert result.reorder_points == 1
        assert result.total == 3

    def test_pure_permutation(self):
        result = ScoringEngine.score("CAT", "TAC")
        assert result.total == 1
        assert result.reorder_points == 1

    def test_double_substitution_with_order_kept(self):
        """Two letters swapped out, the three that stayed keep their order."""
        analysis = ScoringEngine.analyze("BRAKE", "CRATE")
        assert analysis.added_letters == ("C", "T")
        assert analysis.removed_letters == ("B", "K")
        assert analysis.is_reordered is False

    def test_double_substitution_with_transposition(self):
        analysis = ScoringEngine.analyze("BRAKE", "ARCTE")
        assert analysis.is_reordered is True

    def test_case_and_whitespace_insensitive(self):
        result = ScoringEngine.score("  cat ", "Cats\n", ["s"])
        assert result.add_points == 1
        assert result.bonus_points == 1
        assert result.total == 2

    @pytest.mark.parametrize("previous,new", [("", "CAT"), ("CAT", ""), (None, "CAT"), ("CAT", None), ("   ", "  ")])
    def test_empty_input_scores_zero(self, previous, new):
        result = ScoringEngine.score(previous, new, ["C"])
        assert result == ScoreBreakdown.zero()

    def test_total_matches_components(self):
        for previous, new in [("CAT", "CATS"), ("CATS", "TABS"), ("NARD", "YARN")]:
            result = ScoringEngine.score(previous, new, ["Y", "B"])
            assert ScoringEngine.validate_breakdown(result)
            for points in (result.add_points, result.remove_points,
                           result.reorder_points, result.bonus_points):
                assert points in (0, 1)

    def test_points_do_not_scale_with_letter_count(self):
        """DOG -> DOGGY adds two letters but add_points stays 1."""
        result = ScoringEngine.score("DOG", "DOGGY")
        assert result.add_points == 1


# === Bonus Letters ===


class TestBonusLetters:
    """Tests for key-letter detection."""

    def test_bonus_letter_added(self):
        result = ScoringEngine.score("CAT", "BAT", ["B"])
        assert result.bonus_points == 1
        assert result.total == 3

    def test_bonus_used_set(self):
        analysis = ScoringEngine.analyze("CAT", "BAT", ["b", "z"])
        assert analysis.bonus_letters_used == frozenset({"B"})

    def test_multiple_bonus_letters_score_once(self):
        result = ScoringEngine.score("CAT", "CATS", ["S", "C"])
        assert result.bonus_points == 1
        assert ScoringEngine.analyze("CAT", "CATS", ["S", "C"]).bonus_letters_used == {"S", "C"}

    def test_bonus_letter_absent(self):
        result = ScoringEngine.score("CAT", "CATS", ["Q"])
        assert result.bonus_points == 0

    def test_junk_bonus_letters_ignored(self):
        result = ScoringEngine.score("CAT", "CATS", ["", "1", "ST"])
        assert result.bonus_points == 0


# === Analysis ===


class TestAnalyze:
    """Tests for ScoringEngine.analyze()."""

    def test_added_and_removed_multisets(self):
        analysis = ScoringEngine.analyze("DOSS", "BOSSY")
        assert analysis.added_letters == ("B", "Y")
        assert analysis.removed_letters == ("D",)

    def test_repeated_letter_added(self):
        analysis = ScoringEngine.analyze("DOG", "DOGGY")
        assert analysis.added_letters == ("G", "Y")
        assert analysis.add_count == 2

    def test_action_types(self):
        analysis = ScoringEngine.analyze("CATS", "TABS", ["B"])
        assert analysis.action_types == (
            ActionType.ADD, ActionType.REMOVE, ActionType.REORDER, ActionType.KEY_LETTER,
        )

    def test_actions_are_described(self):
        result = ScoringEngine.score("CATS", "TABS", ["B"])
        assert result.actions == (
            "Added letter(s): B",
            "Removed letter(s): C",
            "Rearranged letters",
            "Used key letter(s): B",
        )


# === Move Shape ===


class TestIsValidMove:
    """Tests for ScoringEngine.is_valid_move()."""

    @pytest.mark.parametrize(
        "previous,new",
        [("CAT", "CATS"), ("CATS", "CAT"), ("CATS", "BATS"), ("CATS", "TABS"), ("CAT", "ACT")],
    )
    def test_legal_shapes(self, previous, new):
        assert ScoringEngine.is_valid_move(previous, new) is True

    def test_two_additions_rejected(self):
        assert ScoringEngine.is_valid_move("DOG", "DOGGY") is False

    def test_remove_plus_two_additions_rejected(self):
        assert ScoringEngine.is_valid_move("DOSS", "BOSSY") is False

    def test_two_removals_rejected(self):
        assert ScoringEngine.is_valid_move("COATS", "CAT") is False


# === Presentation helpers ===


class TestFormatting:
    """Tests for score_for_move(), format_breakdown() and validate_breakdown()."""

    def test_score_for_move(self):
        assert ScoringEngine.score_for_move("CATS", "TABS") == 3

    def test_format_full(self):
        result = ScoringEngine.score("CATS", "TABS", ["B"])
        assert ScoringEngine.format_breakdown(result) == (
            "Add: +1, Remove: +1, Rearrange: +1, Key Usage: +1"
        )

    def test_format_no_score(self):
        assert ScoringEngine.format_breakdown(ScoreBreakdown.zero()) == "No score"

    def test_breakdown_rejects_out_of_range_points(self):
        with pytest.raises(ValueError, match="add_points must be 0 or 1"):
            ScoreBreakdown(add_points=2)

    def test_validate_breakdown(self):
        assert ScoringEngine.validate_breakdown(ScoreBreakdown(add_points=1, bonus_points=1))
