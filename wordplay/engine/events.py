"""
WordPlay - Game Event Definitions

Event types, payloads and an in-process listener registry for game state
changes. Presentation layers subscribe here instead of polling the state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_STARTED = auto()
    WORD_CHANGED = auto()
    TURN_PASSED = auto()
    TURN_ADVANCED = auto()
    KEY_LETTERS_UPDATED = auto()
    GAME_FINISHED = auto()
    GAME_RESET = auto()


@dataclass
class EventPayload:
    """Wrapper for game event data."""

    event: GameEvent
    game_id: str
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[EventPayload], None]


class EventBus:
    """Fan-out of EventPayloads to subscribed listeners.

    A failing listener is logged and skipped; it never breaks the emitter
    or the remaining listeners.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, payload: EventPayload) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception(
                    "Listener error for %s in game %s", payload.event.name, payload.game_id
                )
