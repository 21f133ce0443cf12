"""
Match configuration for XO Arena.
Engine constants, game options, and the player's saved settings.
"""

from enum import Enum
from dataclasses import dataclass

from logic.ai_player import Difficulty


class GameMode(Enum):
    """Game mode (with or without timer)."""
    CLASSIC = "Classic"
    TIMED = "Timed"


class TimerDuration(Enum):
    """Timer durations offered for timed matches, in seconds."""
    ONE_MINUTE = 60
    TWO_MINUTES = 120
    THREE_MINUTES = 180
    FIVE_MINUTES = 300

    @property
    def display_name(self) -> str:
        minutes = self.value // 60
        return f"{minutes} Minute" + ("s" if minutes > 1 else "")


class GameState(Enum):
    """Where the match is in its lifecycle."""
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class MatchConfig:
    """
    Configuration for the match engine.
    Override any value on an instance, e.g. ``config.AI_MOVE_DELAY = 0``
    in tests.
    """

    # ==================== MATCH RULES ====================
    BOARD_COUNT = 8
    WINS_TO_WIN_MATCH = 5

    # The pointer normally moves to the next board even when that board
    # is already complete, which leaves the match with no legal move.
    # Set True to move on to the next open board instead.
    SKIP_COMPLETED_BOARDS = False

    # ==================== PACING (seconds) ====================
    # "Thinking" pause before the AI answers; presentation only
    AI_MOVE_DELAY = 0.8

    # Length of one timer tick
    TICK_INTERVAL = 1.0

    # ==================== TIMER ====================
    # Remaining seconds at which a TIMER_WARNING event is sent
    TIMER_WARNINGS = (30, 10)


@dataclass
class GameSettings:
    """
    The player's saved preferences.

    Stored by the host; the engine only reads the first three at
    start_new_game. Sound and haptics are for presentation.
    """
    ai_difficulty: Difficulty = Difficulty.NORMAL
    game_mode: GameMode = GameMode.CLASSIC
    timer_duration: TimerDuration = TimerDuration.THREE_MINUTES
    sound_enabled: bool = True
    haptic_enabled: bool = True
