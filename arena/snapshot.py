"""
Read-only view of a match for presentation layers.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from logic.board import Board, Cell, Player, CELL_COUNT
from logic.win_checker import WinChecker
from .config import GameState

# Integer code per cell mark in MatchSnapshot.cells
CELL_CODES = {Cell.EMPTY: 0, Cell.X: 1, Cell.O: 2}


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Everything a UI needs to draw the match, detached from the engine.

    cells is an (8, 9) int8 array: 0 empty, 1 X, 2 O.
    """
    cells: np.ndarray
    winners: Tuple[Optional[Player], ...]
    active: Tuple[bool, ...]
    winning_lines: Tuple[Optional[Tuple[int, int, int]], ...]
    current_board_index: int
    current_player: Player
    x_score: int
    o_score: int
    draws: int
    winner: Optional[Player]
    game_state: GameState
    time_remaining: Optional[int]

    def board_cells(self, board_index: int) -> List[Cell]:
        """Decode one board row of the array back to Cell marks."""
        by_code = {code: cell for cell, code in CELL_CODES.items()}
        return [by_code[int(code)] for code in self.cells[board_index]]


def encode_boards(boards: Sequence[Board]) -> np.ndarray:
    """Encode boards as an (n, 9) int8 array."""
    grid = np.zeros((len(boards), CELL_COUNT), dtype=np.int8)
    for row, board in enumerate(boards):
        grid[row] = [CELL_CODES[cell] for cell in board.cells]
    grid.setflags(write=False)
    return grid


def take_snapshot(engine, win_checker: Optional[WinChecker] = None) -> MatchSnapshot:
    """
    Build a MatchSnapshot from a MatchEngine.

    Args:
        engine: The match to copy.
        win_checker: Used to find each board's winning line.

    Returns:
        A snapshot that later moves do not change.
    """
    checker = win_checker or WinChecker()
    boards = engine.boards
    return MatchSnapshot(
        cells=encode_boards(boards),
        winners=tuple(board.winner for board in boards),
        active=tuple(board.is_active for board in boards),
        winning_lines=tuple(checker.get_winning_line(board) for board in boards),
        current_board_index=engine.current_board_index,
        current_player=engine.current_player,
        x_score=engine.x_score,
        o_score=engine.o_score,
        draws=engine.draws,
        winner=engine.winner,
        game_state=engine.game_state,
        time_remaining=engine.time_remaining,
    )
