"""
Win checker for XO Arena.
Checks if a player has completed a line on a board.
"""

from typing import Optional, Tuple
from .board import Board, Cell, Player, WINNING_COMBINATIONS


class WinChecker:
    """
    Checks for win conditions on a single board.

    Win condition: 3 marks of the same player in a row
    (horizontally, vertically, or diagonally)
    """

    WINNING_LINES = WINNING_COMBINATIONS

    def check_winner(self, board: Board) -> Optional[Player]:
        """
        Check if there's a winner.

        Lines are checked in their declared order, so the result is
        deterministic even for boards that could not arise in play.

        Args:
            board: The board to inspect.

        Returns:
            The winning Player, or None if no winner yet.
        """
        for line in self.WINNING_LINES:
            winner = self._check_line(board, line)
            if winner is not None:
                return winner

        return None

    def _check_line(
        self,
        board: Board,
        line: Tuple[int, int, int]
    ) -> Optional[Player]:
        """
        Check if a single line has a winner.

        Args:
            board: The board.
            line: Three cell indices.

        Returns:
            The Player owning all three cells, None otherwise.
        """
        a, b, c = (board.cells[index] for index in line)

        if a == Cell.EMPTY:
            return None  # Empty cell, no winner on this line

        if a == b == c:
            return Player.X if a == Cell.X else Player.O

        return None

    def get_winning_line(self, board: Board) -> Optional[Tuple[int, int, int]]:
        """
        Get the winning line if there is one.

        Args:
            board: The board.

        Returns:
            The winning line as a tuple of cell indices, or None.
        """
        for line in self.WINNING_LINES:
            if self._check_line(board, line) is not None:
                return line
        return None

    def is_draw(self, board: Board) -> bool:
        """A board is drawn when it is full and nobody won."""
        return board.is_full and self.check_winner(board) is None
