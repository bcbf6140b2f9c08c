"""
WordPlay - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random

import pytest

from wordplay.engine.base import GameConfig, Player
from wordplay.engine.dictionary import WordListDictionary
from wordplay.engine.turns import TurnStateMachine


# =============================================================================
# WORD LIST
# =============================================================================

TEST_WORDS = (
    "CAT", "CATS", "COAT", "COATS", "BAT", "BATS", "TABS", "TAB", "ACT",
    "ACTS", "CAST", "SCAT", "STAB", "BEAT", "DOG", "DOGS", "DOGGY", "GOD",
    "DOSS", "BOSS", "BOSSY", "POPE", "OPE", "FLOE", "FOES", "NARD", "YARN",
    "WORD", "WORDS", "SWORD", "LORD", "STOP", "POTS", "SPOT", "TOPS",
)


@pytest.fixture
def words() -> tuple[str, ...]:
    return TEST_WORDS


@pytest.fixture
def dictionary() -> WordListDictionary:
    """Dictionary over the shared test word list, seeded for repeatable draws."""
    return WordListDictionary(TEST_WORDS, rng=random.Random(7))


# =============================================================================
# GAME FIXTURES
# =============================================================================

TWO_HUMANS = (
    Player(id="alice", name="Alice"),
    Player(id="bob", name="Bob"),
)


@pytest.fixture
def make_game(dictionary):
    """
    Factory for games with manual key letters.

    Defaults: two human players, initial word CAT, 10 turns, no automatic
    key letters, deterministic clock. Pass ``start=False`` to get a game in
    NOT_STARTED.
    """
    def _make(
        initial_word: str = "CAT",
        max_turns: int = 10,
        players=TWO_HUMANS,
        enable_key_letters: bool = False,
        start: bool = True,
        **kwargs,
    ) -> TurnStateMachine:
        config = GameConfig(
            max_turns=max_turns,
            initial_word=initial_word,
            enable_key_letters=enable_key_letters,
            players=players,
        )
        kwargs.setdefault("clock", lambda: 1000.0)
        game = TurnStateMachine(dictionary, config, **kwargs)
        if start:
            game.start()
        return game

    return _make


@pytest.fixture
def game(make_game) -> TurnStateMachine:
    """A started two-player game on CAT."""
    return make_game()
