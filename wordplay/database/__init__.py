"""
WordPlay Database Layer.

Supabase persistence for saved games.
"""

from wordplay.database.client import get_supabase_client
from wordplay.database.game_state import GameStateManager
from wordplay.database.models import GameStateModel, PlayerModel, SavedGame, TurnRecordModel

__all__ = [
    "get_supabase_client",
    "GameStateManager",
    "GameStateModel",
    "PlayerModel",
    "SavedGame",
    "TurnRecordModel",
]
