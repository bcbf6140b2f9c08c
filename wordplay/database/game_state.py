"""
WordPlay - Saved Game Manager

CRUD operations for the `saved_games` table.
"""

from supabase import Client

from wordplay.database.models import GameStateModel, SavedGame
from wordplay.engine.base import GameSnapshot


class GameStateManager:
    """Manages saved game snapshots in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("saved_games")

    def save(self, snapshot: GameSnapshot) -> SavedGame:
        """Insert or replace the saved state of a game."""
        state = GameStateModel.from_snapshot(snapshot)
        data = (
            self.table
            .upsert({
                "game_id": snapshot.game_id,
                "state": state.model_dump(mode="json"),
            })
            .execute()
        )
        return SavedGame.model_validate(data.data[0])

    def get(self, game_id: str) -> GameSnapshot | None:
        """Load the saved state of a game."""
        data = (
            self.table
            .select("*")
            .eq("game_id", game_id)
            .execute()
        )
        if data.data:
            return SavedGame.model_validate(data.data[0]).state.to_snapshot()
        return None

    def list_ids(self) -> list[str]:
        """IDs of all saved games, most recently updated first."""
        data = (
            self.table
            .select("game_id")
            .order("updated_at", desc=True)
            .execute()
        )
        return [row["game_id"] for row in data.data]

    def delete(self, game_id: str) -> None:
        """Delete the saved state of a game."""
        self.table.delete().eq("game_id", game_id).execute()
