"""
wordplay.errors: contract violation exceptions
==============================================

User-facing move problems are never raised: they come back as data on a
MoveAttempt. These exceptions signal programmer errors in how the engine is
driven.
"""


class WordPlayError(Exception):
    """Base exception for all WordPlay engine errors."""
    pass


class GameNotStartedError(WordPlayError):
    """Raised when a state-mutating method is called before start()."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot {operation}: the game has not been started")


class InvalidTransitionError(WordPlayError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid game transition: {from_status} -> {to_status}")


class BotNotConfiguredError(WordPlayError):
    """Raised when a bot move is requested but no BotProposer was injected."""
    pass
