"""
WordPlay - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Everything handed out of the engine is immutable (frozen
dataclasses); the turn state machine keeps its own private mutable state and
publishes snapshots built from these types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wordplay.config.settings import Settings


MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 10
FALLBACK_INITIAL_WORD = "WORD"


class GameStatus(Enum):
    """Lifecycle of a game. Transitions only move forward."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    FINISHED = "finished"


class ActionType(Enum):
    """Kinds of scoring action a move can contain."""
    ADD = "add"
    REMOVE = "remove"
    REORDER = "reorder"
    KEY_LETTER = "key_letter"


class RejectionReason(Enum):
    """Machine-readable reasons a candidate word cannot be played."""
    GAME_NOT_ACTIVE = "game_not_active"
    EMPTY_WORD = "empty_word"
    INVALID_CHARACTERS = "invalid_characters"
    INVALID_LENGTH = "invalid_length"
    NO_OP_MOVE = "no_op_move"
    WORD_ALREADY_USED = "word_already_used"
    NOT_IN_DICTIONARY = "not_in_dictionary"
    TOO_MANY_ADDITIONS = "too_many_additions"
    TOO_MANY_REMOVALS = "too_many_removals"
    LOCKED_LETTER_REMOVED = "locked_letter_removed"


PASS_ACTION = "PASS"


@dataclass(frozen=True)
class TransformationAnalysis:
    """
    What changed between two words.

    Attributes:
        added_letters: Letters gained, one entry per added occurrence (sorted)
        removed_letters: Letters lost, one entry per removed occurrence (sorted)
        is_reordered: Whether the letters that stayed changed relative order
        bonus_letters_used: Bonus letters present in the new word
    """
    added_letters: tuple[str, ...] = ()
    removed_letters: tuple[str, ...] = ()
    is_reordered: bool = False
    bonus_letters_used: frozenset[str] = field(default_factory=frozenset)

    @property
    def add_count(self) -> int:
        return len(self.added_letters)

    @property
    def remove_count(self) -> int:
        return len(self.removed_letters)

    @property
    def action_types(self) -> tuple[ActionType, ...]:
        """Action types present in this transformation, in scoring order."""
        actions = []
        if self.added_letters:
            actions.append(ActionType.ADD)
        if self.removed_letters:
            actions.append(ActionType.REMOVE)
        if self.is_reordered:
            actions.append(ActionType.REORDER)
        if self.bonus_letters_used:
            actions.append(ActionType.KEY_LETTER)
        return tuple(actions)


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Points awarded for a single move.

    Each action type contributes at most one point, however many letters
    it touches.

    Attributes:
        add_points: 1 if any letter was added
        remove_points: 1 if any letter was removed
        reorder_points: 1 if the surviving letters were genuinely rearranged
        bonus_points: 1 if any bonus (key) letter appears in the new word
        actions: Human-readable description of each scoring action
    """
    add_points: int = 0
    remove_points: int = 0
    reorder_points: int = 0
    bonus_points: int = 0
    actions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Each component is a 0/1 flag."""
        for name in ("add_points", "remove_points", "reorder_points", "bonus_points"):
            value = getattr(self, name)
            if value not in (0, 1):
                raise ValueError(f"{name} must be 0 or 1, got {value}.")

    @property
    def total(self) -> int:
        """Sum of all components."""
        return self.add_points + self.remove_points + self.reorder_points + self.bonus_points

    @property
    def is_pass(self) -> bool:
        return self.actions == (PASS_ACTION,)

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        """An empty breakdown with no actions."""
        return cls()

    @classmethod
    def for_pass(cls) -> "ScoreBreakdown":
        """Zero breakdown tagged as a pass."""
        return cls(actions=(PASS_ACTION,))

    def __str__(self) -> str:
        lines = [f"Total: {self.total} points"]
        for action in self.actions:
            lines.append(f"  - {action}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Player:
    """
    A seat at the table.

    Attributes:
        id: Stable identifier, unique within a game
        name: Display name
        is_automated: Whether the seat is played by a bot
        score: Points accumulated so far
        is_current_turn: Whether this player holds the turn (snapshots only)
    """
    id: str
    name: str
    is_automated: bool = False
    score: int = 0
    is_current_turn: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Player id cannot be empty.")
        if self.score < 0:
            raise ValueError(f"Player score cannot be negative, got {self.score}.")


DEFAULT_PLAYERS: tuple[Player, ...] = (
    Player(id="human", name="Player"),
    Player(id="bot", name="Bot AI", is_automated=True),
)


@dataclass(frozen=True)
class TurnRecord:
    """
    Immutable history entry for one resolved turn (a move or a pass).

    Attributes:
        turn_number: Turn the record was made on (1-based)
        player_id: Player who held the turn
        previous_word: Word before the turn
        new_word: Word after the turn (unchanged for a pass)
        score_breakdown: Points awarded
        bonus_letters_used: Bonus letters played this turn
        is_pass: Whether the turn was passed
        timestamp: Wall-clock time the turn resolved (epoch seconds)
    """
    turn_number: int
    player_id: str
    previous_word: str
    new_word: str
    score_breakdown: ScoreBreakdown
    bonus_letters_used: frozenset[str] = field(default_factory=frozenset)
    is_pass: bool = False
    timestamp: float = 0.0

    @property
    def points(self) -> int:
        return self.score_breakdown.total


@dataclass(frozen=True)
class MoveAttempt:
    """
    Read-only validation result for a candidate word.

    Carries enough of the state it was computed against (game, turn number,
    acting player, previous word, active bonus letters) for the state
    machine to detect a stale or foreign attempt when it is applied.
    """
    new_word: str
    previous_word: str
    turn_number: int
    player_id: str | None
    can_apply: bool
    reason: RejectionReason | None = None
    message: str = ""
    analysis: TransformationAnalysis | None = None
    score_breakdown: ScoreBreakdown | None = None
    bonus_letters: frozenset[str] = field(default_factory=frozenset)
    game_id: str | None = None

    @property
    def points(self) -> int:
        """Points the move would score (0 when rejected)."""
        return self.score_breakdown.total if self.score_breakdown else 0


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for a game session.

    Attributes:
        max_turns: Number of turns (across all players) before the game ends
        initial_word: Starting word; drawn from the dictionary when None
        initial_word_length: Length of the drawn starting word
        enable_key_letters: Draw a fresh key letter at start and after each move
        players: Seats in turn order
    """
    max_turns: int = 10
    initial_word: str | None = None
    initial_word_length: int = 4
    enable_key_letters: bool = True
    players: tuple[Player, ...] = DEFAULT_PLAYERS

    def __post_init__(self) -> None:
        """Validate configuration."""
        # Local import: validators depend on the constants defined above.
        from wordplay.engine.validators import (
            validate_max_turns,
            validate_player_count,
            validate_word_shape,
        )

        validate_max_turns(self.max_turns)
        validate_player_count(len(self.players))

        if not MIN_WORD_LENGTH <= self.initial_word_length <= MAX_WORD_LENGTH:
            raise ValueError(
                f"Initial word length must be between {MIN_WORD_LENGTH} and "
                f"{MAX_WORD_LENGTH}, got {self.initial_word_length}."
            )

        if self.initial_word is not None:
            object.__setattr__(self, "initial_word", validate_word_shape(self.initial_word))

        ids = [p.id for p in self.players]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Player ids must be unique, got {ids}.")

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        players: tuple[Player, ...] = DEFAULT_PLAYERS,
    ) -> "GameConfig":
        """Build a per-game config from application settings."""
        return cls(
            max_turns=settings.max_turns,
            initial_word=settings.initial_word,
            initial_word_length=settings.initial_word_length,
            enable_key_letters=settings.enable_key_letters,
            players=players,
        )


@dataclass(frozen=True)
class PlayerStats:
    """Per-player summary for a game in progress or finished."""
    id: str
    name: str
    score: int
    move_count: int
    pass_count: int
    average_score_per_move: float


@dataclass(frozen=True)
class GameStats:
    """Aggregate statistics over the turn history."""
    duration: float
    total_moves: int
    total_passes: int
    average_score: float
    player_stats: tuple[PlayerStats, ...]


@dataclass(frozen=True)
class GameSnapshot:
    """
    Read-only view of the complete game state.

    Attributes:
        game_id: Identifier of the game instance
        current_word: The shared word
        players: Seats in turn order, with scores and current-turn flag
        current_turn_index: Index into players of whoever holds the turn
        turn_number: 1-based turn counter
        max_turns: Turn limit
        status: Lifecycle status
        used_words: Every word played so far, in order of first use
        available_bonus_letters: Key letters that score when played
        locked_bonus_letters: Key letters that cannot be removed this turn
        used_key_letters: Key letters retired after being played or rotated out
        history: Append-only turn log
        started_at: Epoch seconds the game started (0.0 before start)
        enable_key_letters: Whether key letters are drawn automatically
        initial_word_length: Length used when drawing the starting word
    """
    game_id: str
    current_word: str
    players: tuple[Player, ...]
    current_turn_index: int
    turn_number: int
    max_turns: int
    status: GameStatus
    used_words: tuple[str, ...] = ()
    available_bonus_letters: tuple[str, ...] = ()
    locked_bonus_letters: tuple[str, ...] = ()
    used_key_letters: tuple[str, ...] = ()
    history: tuple[TurnRecord, ...] = ()
    started_at: float = 0.0
    enable_key_letters: bool = True
    initial_word_length: int = 4

    @property
    def current_player(self) -> Player | None:
        if not self.players:
            return None
        return self.players[self.current_turn_index]

    @property
    def total_moves(self) -> int:
        """Number of committed (non-pass) moves."""
        return sum(1 for record in self.history if not record.is_pass)

    @property
    def winner(self) -> Player | None:
        """
        The player with the strictly highest score once the game is finished.

        Returns None while the game is running and on a tie for first place.
        """
        if self.status is not GameStatus.FINISHED or not self.players:
            return None
        best = max(p.score for p in self.players)
        leaders = [p for p in self.players if p.score == best]
        return leaders[0] if len(leaders) == 1 else None

    @property
    def is_draw(self) -> bool:
        return self.status is GameStatus.FINISHED and self.winner is None
