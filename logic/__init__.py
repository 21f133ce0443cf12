"""
Logic module for XO Arena.
Handles single-board rules, win detection, and the AI opponent.
"""

from .board import Board, Cell, Player, WINNING_COMBINATIONS
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker
from .ai_player import AIPlayer, Difficulty
