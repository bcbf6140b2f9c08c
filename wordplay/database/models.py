"""
WordPlay - Database Models

Pydantic models for saved games. GameStateModel round-trips every field of
an engine GameSnapshot; SavedGame mirrors the `saved_games` table.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from wordplay.engine.base import (
    GameSnapshot,
    GameStatus,
    Player,
    ScoreBreakdown,
    TurnRecord,
)


class PlayerModel(BaseModel):
    """Serialized Player."""

    id: str
    name: str
    is_automated: bool = False
    score: int = Field(default=0, ge=0)
    is_current_turn: bool = False

    model_config = {"from_attributes": True}

    def to_player(self) -> Player:
        return Player(
            id=self.id,
            name=self.name,
            is_automated=self.is_automated,
            score=self.score,
            is_current_turn=self.is_current_turn,
        )


class TurnRecordModel(BaseModel):
    """Serialized TurnRecord with its score breakdown flattened."""

    turn_number: int = Field(ge=1)
    player_id: str
    previous_word: str
    new_word: str
    add_points: int = 0
    remove_points: int = 0
    reorder_points: int = 0
    bonus_points: int = 0
    actions: list[str] = Field(default_factory=list)
    bonus_letters_used: list[str] = Field(default_factory=list)
    is_pass: bool = False
    timestamp: float = 0.0

    @classmethod
    def from_record(cls, record: TurnRecord) -> "TurnRecordModel":
        breakdown = record.score_breakdown
        return cls(
            turn_number=record.turn_number,
            player_id=record.player_id,
            previous_word=record.previous_word,
            new_word=record.new_word,
            add_points=breakdown.add_points,
            remove_points=breakdown.remove_points,
            reorder_points=breakdown.reorder_points,
            bonus_points=breakdown.bonus_points,
            actions=list(breakdown.actions),
            bonus_letters_used=sorted(record.bonus_letters_used),
            is_pass=record.is_pass,
            timestamp=record.timestamp,
        )

    def to_record(self) -> TurnRecord:
        return TurnRecord(
            turn_number=self.turn_number,
            player_id=self.player_id,
            previous_word=self.previous_word,
            new_word=self.new_word,
            score_breakdown=ScoreBreakdown(
                add_points=self.add_points,
                remove_points=self.remove_points,
                reorder_points=self.reorder_points,
                bonus_points=self.bonus_points,
                actions=tuple(self.actions),
            ),
            bonus_letters_used=frozenset(self.bonus_letters_used),
            is_pass=self.is_pass,
            timestamp=self.timestamp,
        )


class GameStateModel(BaseModel):
    """Serialized GameSnapshot."""

    game_id: str
    current_word: str
    players: list[PlayerModel]
    current_turn_index: int = Field(default=0, ge=0)
    turn_number: int = Field(default=1, ge=1)
    max_turns: int = Field(ge=1)
    status: GameStatus = GameStatus.NOT_STARTED
    used_words: list[str] = Field(default_factory=list)
    available_bonus_letters: list[str] = Field(default_factory=list)
    locked_bonus_letters: list[str] = Field(default_factory=list)
    used_key_letters: list[str] = Field(default_factory=list)
    history: list[TurnRecordModel] = Field(default_factory=list)
    started_at: float = 0.0
    enable_key_letters: bool = True
    initial_word_length: int = Field(default=4, ge=3, le=10)

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> "GameStateModel":
        return cls(
            game_id=snapshot.game_id,
            current_word=snapshot.current_word,
            players=[PlayerModel.model_validate(p) for p in snapshot.players],
            current_turn_index=snapshot.current_turn_index,
            turn_number=snapshot.turn_number,
            max_turns=snapshot.max_turns,
            status=snapshot.status,
            used_words=list(snapshot.used_words),
            available_bonus_letters=list(snapshot.available_bonus_letters),
            locked_bonus_letters=list(snapshot.locked_bonus_letters),
            used_key_letters=list(snapshot.used_key_letters),
            history=[TurnRecordModel.from_record(r) for r in snapshot.history],
            started_at=snapshot.started_at,
            enable_key_letters=snapshot.enable_key_letters,
            initial_word_length=snapshot.initial_word_length,
        )

    def to_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            game_id=self.game_id,
            current_word=self.current_word,
            players=tuple(p.to_player() for p in self.players),
            current_turn_index=self.current_turn_index,
            turn_number=self.turn_number,
            max_turns=self.max_turns,
            status=self.status,
            used_words=tuple(self.used_words),
            available_bonus_letters=tuple(self.available_bonus_letters),
            locked_bonus_letters=tuple(self.locked_bonus_letters),
            used_key_letters=tuple(self.used_key_letters),
            history=tuple(r.to_record() for r in self.history),
            started_at=self.started_at,
            enable_key_letters=self.enable_key_letters,
            initial_word_length=self.initial_word_length,
        )


class SavedGame(BaseModel):
    """Mirrors the `saved_games` table."""

    game_id: str
    state: GameStateModel
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
