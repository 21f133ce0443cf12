"""
AI player for XO Arena.
Picks a cell on a single board at one of three difficulty levels.
"""

import logging
import random
from enum import Enum
from typing import Optional, List
from .board import Board, Cell, Player, WINNING_COMBINATIONS, CENTER, CORNERS
from .move_validator import MoveValidator

LOGGER = logging.getLogger(__name__)


class Difficulty(Enum):
    """AI difficulty levels."""
    NORMAL = "Normal"    # Random moves
    HARD = "Hard"        # Win, block, center, corner
    EXPERT = "Expert"    # Minimax with alpha-beta pruning


# Plies searched before falling back to the static evaluation
MAX_SEARCH_DEPTH = 6
WIN_SCORE = 10.0


class AIPlayer:
    """
    An AI that plays one board of the match.

    The AI always scores positions as O, whichever mark the match
    actually gave it. When it plays X this makes its Hard and Expert
    choices unreliable; see DESIGN.md.
    """

    MARK = Player.O

    def __init__(self, difficulty: Difficulty = Difficulty.NORMAL, rng: Optional[random.Random] = None):
        """
        Initialize the AI player.

        Args:
            difficulty: How hard the AI plays.
            rng: Random source for Normal/Hard choices (default: a fresh unseeded Random).
        """
        self.difficulty = difficulty
        self.rng = rng or random.Random()
        self.validator = MoveValidator()

        # Keep track of how many positions we've evaluated (for debugging)
        self.positions_evaluated = 0

    def get_move(self, board: Board) -> Optional[int]:
        """
        Get a move for the given board.

        Args:
            board: Board to play on. Never mutated.

        Returns:
            Cell index, or None if the board has no empty cell.
        """
        available_moves = self.validator.available_moves(board)
        if not available_moves:
            return None

        if self.difficulty == Difficulty.NORMAL:
            return self.rng.choice(available_moves)
        if self.difficulty == Difficulty.HARD:
            return self._get_hard_move(board, available_moves)
        return self._get_expert_move(board, available_moves)

    # ==================== HARD ====================

    def _get_hard_move(self, board: Board, available_moves: List[int]) -> int:
        """Win, else block, else center, else a corner, else anything."""
        winning_move = self._find_winning_move(board, self.MARK, available_moves)
        if winning_move is not None:
            return winning_move

        blocking_move = self._find_winning_move(board, self.MARK.opposite(), available_moves)
        if blocking_move is not None:
            return blocking_move

        if CENTER in available_moves:
            return CENTER

        available_corners = [move for move in available_moves if move in CORNERS]
        if available_corners:
            return self.rng.choice(available_corners)

        return self.rng.choice(available_moves)

    def _find_winning_move(self, board: Board, player: Player, available_moves: List[int]) -> Optional[int]:
        """First move (ascending) that would complete a line for player."""
        for move in available_moves:
            test_board = board.copy()
            if not self.validator.make_move(move, player, test_board):
                continue
            if test_board.winner == player:
                return move
        return None

    # ==================== EXPERT ====================

    def _get_expert_move(self, board: Board, available_moves: List[int]) -> Optional[int]:
        """
        Run minimax from every root move and keep the best.

        Only a strictly better score replaces the current choice, so
        ties go to the lowest index.
        """
        self.positions_evaluated = 0
        best_score = float('-inf')
        best_move = None

        for move in available_moves:
            new_board = board.copy()
            if not self.validator.make_move(move, self.MARK, new_board):
                continue

            score = self._minimax(new_board, 0, float('-inf'), float('inf'), is_maximizing=False)

            if score > best_score:
                best_score = score
                best_move = move

        LOGGER.debug(
            "AI evaluated %d positions on board %s. Best move: %s (score: %.1f)",
            self.positions_evaluated, board.id, best_move, best_score
        )

        return best_move

    def _minimax(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        is_maximizing: bool
    ) -> float:
        """
        Minimax algorithm with alpha-beta pruning.

        Args:
            board: Position to evaluate.
            depth: Plies played below the root move.
            alpha: Best score the maximizer can force so far.
            beta: Best score the minimizer can force so far.
            is_maximizing: True if it's the AI's (O's) turn.

        Returns:
            The score of the position, from O's point of view.
        """
        self.positions_evaluated += 1

        # Terminal states (prefer faster wins and slower losses)
        if board.winner == self.MARK:
            return WIN_SCORE - depth
        if board.winner == self.MARK.opposite():
            return depth - WIN_SCORE
        if board.is_full:
            return 0.0

        if depth > MAX_SEARCH_DEPTH:
            return self._evaluate_board(board)

        mover = self.MARK if is_maximizing else self.MARK.opposite()

        if is_maximizing:
            max_score = float('-inf')
            for move in self.validator.available_moves(board):
                new_board = board.copy()
                self.validator.make_move(move, mover, new_board)
                score = self._minimax(new_board, depth + 1, alpha, beta, False)
                max_score = max(max_score, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Prune
            return max_score
        else:
            min_score = float('inf')
            for move in self.validator.available_moves(board):
                new_board = board.copy()
                self.validator.make_move(move, mover, new_board)
                score = self._minimax(new_board, depth + 1, alpha, beta, True)
                min_score = min(min_score, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break  # Prune
            return min_score

    def _evaluate_board(self, board: Board) -> float:
        """
        Static score of an unfinished board, from O's point of view.

        Each line counts once: two marks and a gap is worth 3,
        one mark and two gaps is worth 1.
        """
        own = self.MARK.cell
        other = self.MARK.opposite().cell
        score = 0.0

        for line in WINNING_COMBINATIONS:
            cells = [board.cells[index] for index in line]
            own_count = cells.count(own)
            other_count = cells.count(other)
            empty_count = cells.count(Cell.EMPTY)

            if other_count == 2 and empty_count == 1:
                score -= 3.0
            elif own_count == 2 and empty_count == 1:
                score += 3.0
            elif other_count == 1 and empty_count == 2:
                score -= 1.0
            elif own_count == 1 and empty_count == 2:
                score += 1.0

        return score
