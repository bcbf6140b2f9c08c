"""Tests for wordplay/database: saved-game models and the Supabase manager."""

from unittest.mock import MagicMock

import pytest

from wordplay.database.game_state import GameStateManager
from wordplay.database.models import GameStateModel, SavedGame, TurnRecordModel
from wordplay.engine.base import GameStatus, ScoreBreakdown, TurnRecord
from wordplay.engine.turns import TurnStateMachine


@pytest.fixture
def mock_client():
    """Mock Supabase client whose query builder chains back to itself."""
    client = MagicMock()
    table = client.table.return_value
    for method in ("select", "eq", "order", "upsert", "delete"):
        getattr(table, method).return_value = table
    return client


@pytest.fixture
def played_snapshot(make_game):
    game = make_game(enable_key_letters=False)
    game.add_key_letter("S")
    game.submit_word("CATS")
    game.pass_turn()
    return game.get_state()


# ── Models ──────────────────────────────────────────────────────────────

class TestGameStateModel:
    def test_round_trip_preserves_snapshot(self, played_snapshot):
        model = GameStateModel.from_snapshot(played_snapshot)
        assert model.to_snapshot() == played_snapshot

    def test_round_trip_through_json(self, played_snapshot):
        dumped = GameStateModel.from_snapshot(played_snapshot).model_dump(mode="json")
        assert dumped["status"] == "playing"
        restored = GameStateModel.model_validate(dumped).to_snapshot()
        assert restored == played_snapshot

    def test_turn_record_flattens_breakdown(self):
        record = TurnRecord(
            turn_number=1,
            player_id="alice",
            previous_word="CAT",
            new_word="BAT",
            score_breakdown=ScoreBreakdown(add_points=1, remove_points=1, bonus_points=1),
            bonus_letters_used=frozenset({"B"}),
        )
        model = TurnRecordModel.from_record(record)
        assert (model.add_points, model.remove_points, model.bonus_points) == (1, 1, 1)
        assert model.bonus_letters_used == ["B"]
        assert model.to_record() == record


# ── GameStateManager ────────────────────────────────────────────────────

class TestGameStateManager:
    def test_uses_saved_games_table(self, mock_client):
        GameStateManager(mock_client)
        mock_client.table.assert_called_once_with("saved_games")

    def test_save_upserts_serialized_state(self, mock_client, played_snapshot):
        table = mock_client.table.return_value
        state = GameStateModel.from_snapshot(played_snapshot).model_dump(mode="json")
        table.execute.return_value.data = [{"game_id": played_snapshot.game_id, "state": state}]

        saved = GameStateManager(mock_client).save(played_snapshot)

        table.upsert.assert_called_once_with({"game_id": played_snapshot.game_id, "state": state})
        assert isinstance(saved, SavedGame)
        assert saved.state.current_word == "CATS"

    def test_get_returns_snapshot(self, mock_client, played_snapshot):
        table = mock_client.table.return_value
        state = GameStateModel.from_snapshot(played_snapshot).model_dump(mode="json")
        table.execute.return_value.data = [{"game_id": "g-1", "state": state}]

        snapshot = GameStateManager(mock_client).get("g-1")

        table.eq.assert_called_once_with("game_id", "g-1")
        assert snapshot == played_snapshot
        assert snapshot.status is GameStatus.PLAYING

    def test_get_missing_returns_none(self, mock_client):
        mock_client.table.return_value.execute.return_value.data = []
        assert GameStateManager(mock_client).get("nope") is None

    def test_list_ids(self, mock_client):
        table = mock_client.table.return_value
        table.execute.return_value.data = [{"game_id": "b"}, {"game_id": "a"}]

        assert GameStateManager(mock_client).list_ids() == ["b", "a"]
        table.order.assert_called_once_with("updated_at", desc=True)

    def test_delete(self, mock_client):
        table = mock_client.table.return_value
        GameStateManager(mock_client).delete("g-1")
        table.delete.assert_called_once_with()
        table.eq.assert_called_once_with("game_id", "g-1")

    def test_saved_game_keeps_key_letter_mode(self, mock_client, played_snapshot, dictionary):
        table = mock_client.table.return_value
        state = GameStateModel.from_snapshot(played_snapshot).model_dump(mode="json")
        table.execute.return_value.data = [{"game_id": "g-1", "state": state}]

        restored = TurnStateMachine.restore(GameStateManager(mock_client).get("g-1"), dictionary)

        assert state["enable_key_letters"] is False
        assert restored.config.enable_key_letters is False
        restored.submit_word("CAST")
        assert restored.get_state().available_bonus_letters == ()
