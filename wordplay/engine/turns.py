"""
WordPlay - Turn State Machine

Owns the authoritative game state and mediates every transition:
start, attempt a move, apply a move, pass, end.

Game Rules:
- Players take turns changing the shared word into another dictionary word
- A move may add at most one letter and remove at most one letter;
  rearranging is unrestricted
- A word can only be played once per game
- Bonus (key) letters score +1 when played, then lock for the next
  player's turn: they may be moved but not removed
- The game ends after max_turns turns; the strictly highest score wins,
  a tie is a draw

Concurrency: every mutating method holds a per-game re-entrant lock.
attempt_move is read-only and cheap; apply_move re-validates that the
attempt still matches the current turn before committing.
"""

from __future__ import annotations

import logging
import random
import string
import threading
import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable

from wordplay.engine.base import (
    FALLBACK_INITIAL_WORD,
    MAX_WORD_LENGTH,
    MIN_WORD_LENGTH,
    GameConfig,
    GameSnapshot,
    GameStats,
    GameStatus,
    MoveAttempt,
    Player,
    PlayerStats,
    RejectionReason,
    ScoreBreakdown,
    TurnRecord,
)
from wordplay.engine.events import EventBus, EventPayload, GameEvent, Listener
from wordplay.engine.interfaces import BotProposer, DictionaryOracle, MoveScorer
from wordplay.engine.scoring import ScoringEngine
from wordplay.engine.validators import (
    is_alphabetic,
    is_valid_length,
    normalize_letter,
    normalize_word,
)
from wordplay.errors import BotNotConfiguredError, GameNotStartedError, InvalidTransitionError

logger = logging.getLogger(__name__)


_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.GAME_NOT_ACTIVE: "The game is not in progress.",
    RejectionReason.EMPTY_WORD: "Word cannot be empty.",
    RejectionReason.INVALID_CHARACTERS: "Only letters A-Z are allowed.",
    RejectionReason.INVALID_LENGTH: (
        f"Words must be {MIN_WORD_LENGTH}-{MAX_WORD_LENGTH} letters long."
    ),
    RejectionReason.NO_OP_MOVE: "That is already the current word.",
    RejectionReason.WORD_ALREADY_USED: "That word has already been played this game.",
    RejectionReason.NOT_IN_DICTIONARY: "Not a word.",
    RejectionReason.TOO_MANY_ADDITIONS: "You can only add one letter per turn.",
    RejectionReason.TOO_MANY_REMOVALS: "You can only remove one letter per turn.",
    RejectionReason.LOCKED_LETTER_REMOVED: "Locked key letters cannot be removed this turn.",
}


@dataclass
class _GameState:
    """Private mutable state. Only TurnStateMachine touches it."""

    current_word: str
    players: list[Player]
    max_turns: int
    current_turn_index: int = 0
    turn_number: int = 1
    status: GameStatus = GameStatus.NOT_STARTED
    # dict keys keep first-use order and reject duplicates
    used_words: dict[str, None] = field(default_factory=dict)
    available_bonus_letters: list[str] = field(default_factory=list)
    locked_bonus_letters: list[str] = field(default_factory=list)
    used_key_letters: list[str] = field(default_factory=list)
    history: list[TurnRecord] = field(default_factory=list)
    started_at: float = 0.0


class TurnStateMachine:
    """
    Authoritative state for one game.

    Collaborators are injected: a DictionaryOracle for word legality and the
    starting word, a MoveScorer (ScoringEngine by default) and an optional
    BotProposer for automated seats.
    """

    def __init__(
        self,
        dictionary: DictionaryOracle,
        config: GameConfig | None = None,
        *,
        scorer: MoveScorer = ScoringEngine,
        bot: BotProposer | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        game_id: str | None = None,
    ) -> None:
        self._dictionary = dictionary
        self._config = config or GameConfig()
        self._scorer = scorer
        self._bot = bot
        self._rng = rng or random.Random()
        self._clock = clock
        self._events = EventBus()
        self._lock = threading.RLock()
        self.game_id = game_id or uuid.uuid4().hex
        self._state = self._initial_state()

    # -- Construction ----------------------------------------------------

    def _initial_state(self) -> _GameState:
        word = self._config.initial_word
        if word is None:
            word = normalize_word(
                self._dictionary.random_word_of_length(self._config.initial_word_length)
            ) or FALLBACK_INITIAL_WORD

        players = [
            replace(p, score=0, is_current_turn=False) for p in self._config.players
        ]
        return _GameState(
            current_word=word,
            players=players,
            max_turns=self._config.max_turns,
        )

    @classmethod
    def restore(
        cls,
        snapshot: GameSnapshot,
        dictionary: DictionaryOracle,
        *,
        enable_key_letters: bool | None = None,
        scorer: MoveScorer = ScoringEngine,
        bot: BotProposer | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> TurnStateMachine:
        """
        Rebuild a state machine from a previously taken snapshot.

        The key-letter mode and starting-word length come from the snapshot
        unless ``enable_key_letters`` overrides the former.
        """
        if enable_key_letters is None:
            enable_key_letters = snapshot.enable_key_letters
        config = GameConfig(
            max_turns=snapshot.max_turns,
            initial_word=snapshot.current_word,
            initial_word_length=snapshot.initial_word_length,
            enable_key_letters=enable_key_letters,
            players=tuple(replace(p, is_current_turn=False) for p in snapshot.players),
        )
        machine = cls(
            dictionary,
            config,
            scorer=scorer,
            bot=bot,
            rng=rng,
            clock=clock,
            game_id=snapshot.game_id,
        )
        machine._state = _GameState(
            current_word=snapshot.current_word,
            players=[replace(p, is_current_turn=False) for p in snapshot.players],
            max_turns=snapshot.max_turns,
            current_turn_index=snapshot.current_turn_index,
            turn_number=snapshot.turn_number,
            status=snapshot.status,
            used_words=dict.fromkeys(snapshot.used_words),
            available_bonus_letters=list(snapshot.available_bonus_letters),
            locked_bonus_letters=list(snapshot.locked_bonus_letters),
            used_key_letters=list(snapshot.used_key_letters),
            history=list(snapshot.history),
            started_at=snapshot.started_at,
        )
        return machine

    # -- Read-only access ------------------------------------------------

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def status(self) -> GameStatus:
        return self._state.status

    def get_state(self) -> GameSnapshot:
        """Immutable snapshot of the full game state."""
        with self._lock:
            state = self._state
            players = tuple(
                replace(p, is_current_turn=(i == state.current_turn_index))
                for i, p in enumerate(state.players)
            )
            return GameSnapshot(
                game_id=self.game_id,
                current_word=state.current_word,
                players=players,
                current_turn_index=state.current_turn_index,
                turn_number=state.turn_number,
                max_turns=state.max_turns,
                status=state.status,
                used_words=tuple(state.used_words),
                available_bonus_letters=tuple(state.available_bonus_letters),
                locked_bonus_letters=tuple(state.locked_bonus_letters),
                used_key_letters=tuple(state.used_key_letters),
                history=tuple(state.history),
                started_at=state.started_at,
                enable_key_letters=self._config.enable_key_letters,
                initial_word_length=self._config.initial_word_length,
            )

    def current_player(self) -> Player:
        with self._lock:
            return replace(
                self._state.players[self._state.current_turn_index], is_current_turn=True
            )

    def winner(self) -> Player | None:
        """Strict leader once the game has finished; None while playing or on a tie."""
        return self.get_state().winner

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for GameEvents. Returns an unsubscribe function."""
        return self._events.subscribe(listener)

    # -- Lifecycle -------------------------------------------------------

    def start(self) -> None:
        """Move from NOT_STARTED to PLAYING."""
        with self._lock:
            state = self._state
            if state.status is not GameStatus.NOT_STARTED:
                raise InvalidTransitionError(state.status.value, GameStatus.PLAYING.value)

            state.status = GameStatus.PLAYING
            state.started_at = self._clock()
            state.used_words.setdefault(state.current_word, None)

            if self._config.enable_key_letters:
                self._draw_key_letter()

            logger.info(
                "Game %s started with word %s (%d players, %d turns)",
                self.game_id, state.current_word, len(state.players), state.max_turns,
            )
            self._emit(
                GameEvent.GAME_STARTED,
                player_id=state.players[state.current_turn_index].id,
                current_word=state.current_word,
                key_letters=list(state.available_bonus_letters),
            )

    def end_game(self) -> bool:
        """Terminate a game in progress. Returns False if it already finished."""
        with self._lock:
            self._require_started("end the game")
            if self._state.status is not GameStatus.PLAYING:
                return False
            self._finish()
            return True

    def reset(self) -> None:
        """Discard all progress and return to a fresh NOT_STARTED game."""
        with self._lock:
            self._state = self._initial_state()
            logger.info("Game %s reset", self.game_id)
            self._emit(GameEvent.GAME_RESET, current_word=self._state.current_word)

    # -- Moves -----------------------------------------------------------

    def attempt_move(self, candidate_word: str | None) -> MoveAttempt:
        """
        Validate a candidate word against the current state without changing it.

        Args:
            candidate_word: Proposed next word (any case, whitespace trimmed)

        Returns:
            MoveAttempt with can_apply=True and a score breakdown, or
            can_apply=False with a rejection reason and message
        """
        with self._lock:
            state = self._state
            word = normalize_word(candidate_word)
            bonus = frozenset(state.available_bonus_letters)
            player_id = state.players[state.current_turn_index].id

            def reject(reason: RejectionReason, analysis=None) -> MoveAttempt:
                logger.debug("Rejected %r in game %s: %s", word, self.game_id, reason.value)
                return MoveAttempt(
                    new_word=word,
                    previous_word=state.current_word,
                    turn_number=state.turn_number,
                    player_id=player_id,
                    can_apply=False,
                    reason=reason,
                    message=_MESSAGES[reason],
                    analysis=analysis,
                    bonus_letters=bonus,
                    game_id=self.game_id,
                )

            if state.status is not GameStatus.PLAYING:
                return reject(RejectionReason.GAME_NOT_ACTIVE)
            if not word:
                return reject(RejectionReason.EMPTY_WORD)
            if not is_alphabetic(word):
                return reject(RejectionReason.INVALID_CHARACTERS)
            if not is_valid_length(word):
                return reject(RejectionReason.INVALID_LENGTH)
            if word == state.current_word:
                return reject(RejectionReason.NO_OP_MOVE)
            if word in state.used_words:
                return reject(RejectionReason.WORD_ALREADY_USED)
            if not self._dictionary.is_valid_word(word):
                return reject(RejectionReason.NOT_IN_DICTIONARY)

            analysis = self._scorer.analyze(state.current_word, word, bonus)
            if analysis.add_count > 1:
                return reject(RejectionReason.TOO_MANY_ADDITIONS, analysis)
            if analysis.remove_count > 1:
                return reject(RejectionReason.TOO_MANY_REMOVALS, analysis)
            if set(analysis.removed_letters) & set(state.locked_bonus_letters):
                return reject(RejectionReason.LOCKED_LETTER_REMOVED, analysis)

            return MoveAttempt(
                new_word=word,
                previous_word=state.current_word,
                turn_number=state.turn_number,
                player_id=player_id,
                can_apply=True,
                analysis=analysis,
                score_breakdown=self._scorer.breakdown_from_analysis(analysis),
                bonus_letters=bonus,
                game_id=self.game_id,
            )

    def apply_move(self, attempt: MoveAttempt) -> bool:
        """
        Commit a validated move.

        Returns False without touching the state if the attempt was rejected,
        belongs to another game, no longer matches the current turn (another
        mutation happened in between), or does not agree with a fresh
        validation of its word. Only the freshly computed score is committed.
        """
        with self._lock:
            self._require_started("apply a move")
            state = self._state
            if state.status is not GameStatus.PLAYING:
                return False
            if not attempt.can_apply or attempt.score_breakdown is None:
                logger.warning(
                    "Refusing to apply rejected attempt %r in game %s", attempt.new_word, self.game_id
                )
                return False
            if not self._is_current(attempt):
                logger.warning(
                    "Refusing to apply stale attempt %r in game %s (turn %d, now %d)",
                    attempt.new_word, self.game_id, attempt.turn_number, state.turn_number,
                )
                return False

            verified = self.attempt_move(attempt.new_word)
            if (
                not verified.can_apply
                or verified.score_breakdown != attempt.score_breakdown
                or verified.analysis != attempt.analysis
            ):
                logger.warning(
                    "Refusing to apply attempt %r in game %s: it does not match validation",
                    attempt.new_word, self.game_id,
                )
                return False

            player = state.players[state.current_turn_index]
            breakdown = verified.score_breakdown
            used_bonus = verified.analysis.bonus_letters_used
            previous_word = state.current_word

            state.used_words.setdefault(previous_word, None)
            state.used_words.setdefault(attempt.new_word, None)
            state.current_word = attempt.new_word
            state.players[state.current_turn_index] = replace(
                player, score=player.score + breakdown.total
            )
            state.history.append(TurnRecord(
                turn_number=state.turn_number,
                player_id=player.id,
                previous_word=previous_word,
                new_word=attempt.new_word,
                score_breakdown=breakdown,
                bonus_letters_used=used_bonus,
                timestamp=self._clock(),
            ))

            # Locking is per turn: this move's bonus letters replace any earlier lock.
            state.available_bonus_letters = [
                letter for letter in state.available_bonus_letters if letter not in used_bonus
            ]
            state.locked_bonus_letters = sorted(used_bonus)
            for letter in sorted(used_bonus):
                if letter not in state.used_key_letters:
                    state.used_key_letters.append(letter)

            if self._config.enable_key_letters:
                self._rotate_key_letters()

            logger.info(
                "Game %s turn %d: %s played %s -> %s for %d",
                self.game_id, state.turn_number, player.id,
                previous_word, attempt.new_word, breakdown.total,
            )
            self._emit(
                GameEvent.WORD_CHANGED,
                player_id=player.id,
                previous_word=previous_word,
                new_word=attempt.new_word,
                score=breakdown.total,
                locked_letters=list(state.locked_bonus_letters),
            )
            self._advance_turn()
            return True

    def submit_word(self, candidate_word: str | None) -> MoveAttempt:
        """Attempt and, if legal, apply a move as one serialised step."""
        with self._lock:
            attempt = self.attempt_move(candidate_word)
            if attempt.can_apply:
                self.apply_move(attempt)
            return attempt

    def pass_turn(self) -> bool:
        """
        Give up the turn without changing the word.

        Lifts the incoming player's locked letters. Returns False if the game
        is not in progress.
        """
        with self._lock:
            self._require_started("pass the turn")
            state = self._state
            if state.status is not GameStatus.PLAYING:
                return False

            player = state.players[state.current_turn_index]
            state.locked_bonus_letters = []
            state.history.append(TurnRecord(
                turn_number=state.turn_number,
                player_id=player.id,
                previous_word=state.current_word,
                new_word=state.current_word,
                score_breakdown=ScoreBreakdown.for_pass(),
                is_pass=True,
                timestamp=self._clock(),
            ))

            logger.info("Game %s turn %d: %s passed", self.game_id, state.turn_number, player.id)
            self._emit(GameEvent.TURN_PASSED, player_id=player.id, player_name=player.name)
            self._advance_turn()
            return True

    def make_bot_move(self, cancel_event: threading.Event | None = None) -> str | None:
        """
        Let the injected bot play the current automated seat.

        The bot only proposes a word; it goes through attempt_move and
        apply_move like any other move. When the search finds nothing, is
        cancelled, or its word no longer applies, the turn is passed.

        Returns:
            The word played, or None if the turn was passed or the current
            player is not automated
        """
        with self._lock:
            self._require_started("make a bot move")
            if self._bot is None:
                raise BotNotConfiguredError("No BotProposer was injected into this game")
            state = self._state
            if state.status is not GameStatus.PLAYING:
                return None
            player = state.players[state.current_turn_index]
            if not player.is_automated:
                logger.debug("Bot move requested for human player %s", player.id)
                return None
            turn_number = state.turn_number
            current_word = state.current_word
            available = frozenset(state.available_bonus_letters)
            locked = frozenset(state.locked_bonus_letters)

        # Search outside the lock so readers are not blocked.
        proposal = self._bot.propose(
            current_word, available, locked, self.attempt_move, cancel_event
        )

        with self._lock:
            if self._state.status is not GameStatus.PLAYING or self._state.turn_number != turn_number:
                return None
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Bot search cancelled in game %s; passing", self.game_id)
                self.pass_turn()
                return None
            if proposal is not None:
                attempt = self.attempt_move(proposal)
                if attempt.can_apply and self.apply_move(attempt):
                    return attempt.new_word
                logger.info(
                    "Bot proposal %r rejected in game %s (%s); passing",
                    proposal, self.game_id, attempt.reason.value if attempt.reason else "stale",
                )
            else:
                logger.info("Bot found no move in game %s; passing", self.game_id)
            self.pass_turn()
            return None

    # -- Key letters -----------------------------------------------------

    def add_key_letter(self, letter: str) -> bool:
        """Make a letter available as a bonus letter. Returns True if it was added."""
        with self._lock:
            self._require_started("add a key letter")
            state = self._state
            normalized = normalize_letter(letter)
            if state.status is not GameStatus.PLAYING or not normalized:
                return False
            if normalized in state.available_bonus_letters or normalized in state.locked_bonus_letters:
                return False
            state.available_bonus_letters.append(normalized)
            self._emit_key_letters("key_added", normalized)
            return True

    def remove_key_letter(self, letter: str) -> bool:
        """Withdraw an available bonus letter. Returns True if it was removed."""
        with self._lock:
            self._require_started("remove a key letter")
            state = self._state
            normalized = normalize_letter(letter)
            if state.status is not GameStatus.PLAYING or normalized not in state.available_bonus_letters:
                return False
            state.available_bonus_letters.remove(normalized)
            self._emit_key_letters("key_removed", normalized)
            return True

    def _rotate_key_letters(self) -> None:
        """Retire this turn's key letters and draw a fresh one."""
        state = self._state
        for letter in state.available_bonus_letters:
            if letter not in state.used_key_letters:
                state.used_key_letters.append(letter)
        state.available_bonus_letters = []
        self._draw_key_letter()

    def _draw_key_letter(self) -> str | None:
        state = self._state
        excluded = (
            set(state.used_key_letters)
            | set(state.available_bonus_letters)
            | set(state.locked_bonus_letters)
            | set(state.current_word)
        )
        candidates = [letter for letter in string.ascii_uppercase if letter not in excluded]
        if not candidates:
            logger.debug("No key letters left to draw in game %s", self.game_id)
            return None
        letter = self._rng.choice(candidates)
        state.available_bonus_letters.append(letter)
        self._emit_key_letters("key_drawn", letter)
        return letter

    def _emit_key_letters(self, action: str, letter: str) -> None:
        self._emit(
            GameEvent.KEY_LETTERS_UPDATED,
            action=action,
            letter=letter,
            key_letters=list(self._state.available_bonus_letters),
            locked_letters=list(self._state.locked_bonus_letters),
        )

    # -- Statistics ------------------------------------------------------

    def get_game_stats(self) -> GameStats:
        """Summarise the turn history."""
        snapshot = self.get_state()
        moves = [r for r in snapshot.history if not r.is_pass]
        total_points = sum(r.points for r in moves)

        player_stats = []
        for player in snapshot.players:
            own = [r for r in snapshot.history if r.player_id == player.id]
            move_count = sum(1 for r in own if not r.is_pass)
            player_stats.append(PlayerStats(
                id=player.id,
                name=player.name,
                score=player.score,
                move_count=move_count,
                pass_count=len(own) - move_count,
                average_score_per_move=player.score / move_count if move_count else 0.0,
            ))

        started = snapshot.started_at
        return GameStats(
            duration=self._clock() - started if started else 0.0,
            total_moves=len(moves),
            total_passes=len(snapshot.history) - len(moves),
            average_score=total_points / len(moves) if moves else 0.0,
            player_stats=tuple(player_stats),
        )

    # -- Internals -------------------------------------------------------

    def _require_started(self, operation: str) -> None:
        if self._state.status is GameStatus.NOT_STARTED:
            raise GameNotStartedError(operation)

    def _is_current(self, attempt: MoveAttempt) -> bool:
        state = self._state
        return (
            attempt.game_id == self.game_id
            and attempt.turn_number == state.turn_number
            and attempt.player_id == state.players[state.current_turn_index].id
            and attempt.previous_word == state.current_word
            and attempt.bonus_letters == frozenset(state.available_bonus_letters)
            and attempt.new_word not in state.used_words
        )

    def _advance_turn(self) -> None:
        state = self._state
        state.current_turn_index = (state.current_turn_index + 1) % len(state.players)
        state.turn_number += 1
        self._emit(
            GameEvent.TURN_ADVANCED,
            player_id=state.players[state.current_turn_index].id,
            turn_number=state.turn_number,
        )
        if state.turn_number > state.max_turns:
            self._finish()

    def _finish(self) -> None:
        state = self._state
        state.status = GameStatus.FINISHED
        winner = self.get_state().winner
        logger.info(
            "Game %s finished after %d turns; winner: %s",
            self.game_id, len(state.history), winner.id if winner else "draw",
        )
        self._emit(
            GameEvent.GAME_FINISHED,
            winner_id=winner.id if winner else None,
            final_scores={p.id: p.score for p in state.players},
        )

    def _emit(self, event: GameEvent, player_id: str | None = None, **data) -> None:
        self._events.emit(EventPayload(
            event=event, game_id=self.game_id, player_id=player_id, data=data,
        ))
