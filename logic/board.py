"""
Board model for XO Arena.
Defines the cell marks, the two players and a single 3x3 board.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field


class Cell(Enum):
    """What a board cell can hold."""
    EMPTY = ""
    X = "X"
    O = "O"


class Player(Enum):
    """The two players in the game."""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        """Get the opposite player."""
        return Player.O if self == Player.X else Player.X

    @property
    def cell(self) -> Cell:
        """The mark this player leaves on a board."""
        return Cell.X if self == Player.X else Cell.O


# Cells are indexed 0-8, row-major (row = index // 3, col = index % 3)
BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# All lines that win a board: rows, then columns, then diagonals
WINNING_COMBINATIONS: Tuple[Tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    # Columns
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    # Diagonals
    (0, 4, 8), (2, 4, 6),
)

CENTER = 4
CORNERS = (0, 2, 6, 8)


@dataclass
class Board:
    """
    One 3x3 board of the match.

    Tracks:
    - The 9 cells
    - Whether this board is the one currently accepting moves
    - Who won it (if anyone)
    """

    # Stable identity within the match (0-7)
    id: int

    cells: List[Cell] = field(
        default_factory=lambda: [Cell.EMPTY for _ in range(CELL_COUNT)]
    )

    is_active: bool = False
    winner: Optional[Player] = None

    @property
    def is_full(self) -> bool:
        """True when no empty cell is left."""
        return Cell.EMPTY not in self.cells

    @property
    def is_complete(self) -> bool:
        """A board is complete once it is won or full."""
        return self.winner is not None or self.is_full

    def copy(self) -> "Board":
        """Create an independent copy of the board."""
        return Board(
            id=self.id,
            cells=list(self.cells),
            is_active=self.is_active,
            winner=self.winner
        )

    def render(self) -> str:
        """Render the board as three text rows."""
        lines = []
        for row in range(BOARD_SIZE):
            marks = []
            for col in range(BOARD_SIZE):
                index = row * BOARD_SIZE + col
                marks.append(self.cells[index].value or str(index))
            lines.append(" | ".join(marks))
        return "\n---------\n".join(lines)
