"""
WordPlay Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles word transformation scoring, move legality, turn order and the
key-letter lifecycle.
"""

from wordplay.engine.base import (
    ActionType,
    GameConfig,
    GameSnapshot,
    GameStats,
    GameStatus,
    MoveAttempt,
    Player,
    PlayerStats,
    RejectionReason,
    ScoreBreakdown,
    TransformationAnalysis,
    TurnRecord,
)
from wordplay.engine.bot import GreedyBot
from wordplay.engine.challenge import ChallengeEngine, ChallengeState, ChallengeSubmission
from wordplay.engine.dictionary import WordListDictionary
from wordplay.engine.events import EventPayload, GameEvent
from wordplay.engine.interfaces import BotProposer, DictionaryOracle, MoveScorer
from wordplay.engine.scoring import ScoringEngine
from wordplay.engine.turns import TurnStateMachine

__all__ = [
    # Data Classes
    "ChallengeState",
    "ChallengeSubmission",
    "GameConfig",
    "GameSnapshot",
    "GameStats",
    "MoveAttempt",
    "Player",
    "PlayerStats",
    "ScoreBreakdown",
    "TransformationAnalysis",
    "TurnRecord",
    "EventPayload",
    # Enums
    "ActionType",
    "GameEvent",
    "GameStatus",
    "RejectionReason",
    # Interfaces
    "BotProposer",
    "DictionaryOracle",
    "MoveScorer",
    # Engines
    "ChallengeEngine",
    "GreedyBot",
    "ScoringEngine",
    "TurnStateMachine",
    "WordListDictionary",
]
