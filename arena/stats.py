"""
Match statistics for XO Arena.
Kept in memory; saving them is the host's job.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional

from logic.board import Player


@dataclass
class GameStats:
    """Totals over all finished matches."""
    games_played: int = 0
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, winner: Optional[Player]) -> None:
        """
        Count one finished match.

        Args:
            winner: Match winner, or None for a drawn match.
        """
        self.games_played += 1
        if winner == Player.X:
            self.x_wins += 1
        elif winner == Player.O:
            self.o_wins += 1
        else:
            self.draws += 1

    def to_dict(self) -> Dict[str, int]:
        """Plain record for a key-value store."""
        return asdict(self)
