"""
Move validator for XO Arena.
Validates and applies moves on a single board.
"""

import logging
from typing import Optional, List
from dataclasses import dataclass
from .board import Board, Cell, Player, CELL_COUNT
from .win_checker import WinChecker

LOGGER = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates and applies moves on one board.

    Rules:
    1. The index must be 0-8
    2. Can only place on empty cells
    3. A won or full board takes no more moves

    Rejected moves never raise; the board is simply left untouched.
    """

    def __init__(self, win_checker: Optional[WinChecker] = None):
        self.win_checker = win_checker or WinChecker()

    def is_valid_move(self, index: int, board: Board) -> bool:
        """True if index is on the board and that cell is empty."""
        return 0 <= index < CELL_COUNT and board.cells[index] == Cell.EMPTY

    def validate_move(self, index: int, board: Board) -> ValidationResult:
        """
        Validate a move.

        Args:
            index: Cell to place a mark on (0-8).
            board: Board the move is for.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if not (0 <= index < CELL_COUNT):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index}. Must be 0-{CELL_COUNT - 1}."
            )

        if board.cells[index] != Cell.EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {board.cells[index].value}"
            )

        if board.is_complete:
            return ValidationResult(
                is_valid=False,
                error_message=f"Board {board.id} is already complete!"
            )

        return ValidationResult(is_valid=True)

    def available_moves(self, board: Board) -> List[int]:
        """
        Get all empty cells of a board.

        Args:
            board: The board.

        Returns:
            Empty cell indices in ascending order.
        """
        return [index for index, cell in enumerate(board.cells) if cell == Cell.EMPTY]

    def make_move(self, index: int, player: Player, board: Board) -> bool:
        """
        Place a player's mark and recompute the board winner.

        Does not look at or change board.is_active; that is the
        match's business.

        Args:
            index: Cell index (0-8).
            player: Who is moving.
            board: Board to mutate in place.

        Returns:
            True if the mark was placed, False otherwise.
        """
        if not self.is_valid_move(index, board):
            LOGGER.debug("Rejected %s on board %s cell %s", player.value, board.id, index)
            return False

        board.cells[index] = player.cell
        board.winner = self.win_checker.check_winner(board)

        return True
