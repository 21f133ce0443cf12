"""
Arena module for XO Arena.
Runs the eight-board match: turns, scores, timer, and the AI's replies.
"""

from .config import GameMode, GameSettings, GameState, MatchConfig, TimerDuration
from .events import EventKind, MatchEvent
from .match_engine import MatchEngine
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .snapshot import MatchSnapshot
from .stats import GameStats
