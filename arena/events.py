"""
Match events for XO Arena.
The engine tells observers (UI, sound, haptics) what just happened.
"""

import logging
from enum import Enum
from dataclasses import dataclass
from typing import Callable, List, Optional

from logic.board import Player

LOGGER = logging.getLogger(__name__)


class EventKind(Enum):
    """Simple tags for everything an observer may react to."""
    GAME_START = "game_start"
    MOVE = "move"
    INVALID_MOVE = "invalid_move"
    BOARD_WIN = "board_win"
    BOARD_DRAW = "board_draw"
    BOARD_TRANSITION = "board_transition"
    GAME_WIN = "game_win"
    GAME_DRAW = "game_draw"
    TIMER_TICK = "timer_tick"
    TIMER_WARNING = "timer_warning"
    PAUSED = "paused"
    RESUMED = "resumed"
    AI_THINKING = "ai_thinking"


@dataclass(frozen=True)
class MatchEvent:
    """One thing that happened in the match."""
    kind: EventKind
    board_index: Optional[int] = None
    player: Optional[Player] = None
    cell: Optional[int] = None
    time_remaining: Optional[int] = None


Observer = Callable[[MatchEvent], None]


class EventBus:
    """
    Ordered list of observers.

    A failing observer is logged and skipped; the others still run
    and the engine state is untouched.
    """

    def __init__(self):
        self._observers: List[Observer] = []

    def add(self, observer: Observer) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def publish(self, event: MatchEvent) -> None:
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                LOGGER.exception("Observer %r failed on %s", observer, event.kind.value)

    def __len__(self) -> int:
        return len(self._observers)
