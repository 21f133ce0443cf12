"""
Match engine for XO Arena.

Plays eight boards in turn. X moves on the active board, the pointer
moves on to the next board, O moves there, then X, and so on. First to
win five boards takes the match; in timed mode the higher board score
when the clock runs out wins.

The engine is passive and single-threaded: hosts call its methods, and
anything delayed (the AI's answer, timer ticks) goes through the
injected Scheduler.
"""

import logging
import random
from typing import List, Optional, Tuple, Union

from logic.ai_player import AIPlayer, Difficulty
from logic.board import Board, Player
from logic.move_validator import MoveValidator
from .config import GameMode, GameSettings, GameState, MatchConfig, TimerDuration
from .events import EventBus, EventKind, MatchEvent, Observer
from .scheduler import ManualScheduler, ScheduledCall, Scheduler
from .snapshot import MatchSnapshot, take_snapshot
from .stats import GameStats

LOGGER = logging.getLogger(__name__)


class MatchEngine:
    """
    State machine for one match: MENU -> PLAYING <-> PAUSED -> FINISHED.

    Every rejected call is a no-op reported through its return value;
    nothing here raises for bad player input.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        settings: Optional[GameSettings] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        stats: Optional[GameStats] = None
    ):
        """
        Initialize the engine in the MENU state.

        Args:
            config: Engine constants. Uses defaults if not provided.
            settings: Saved player preferences, read at start_new_game.
            scheduler: Source of delayed callbacks (default: ManualScheduler).
            rng: Random source for player assignment and the AI.
            stats: Totals to update when a match finishes.
        """
        self.config = config or MatchConfig()
        self.settings = settings or GameSettings()
        self.scheduler = scheduler or ManualScheduler()
        self.rng = rng or random.Random()
        self.stats = stats or GameStats()
        self.validator = MoveValidator()
        self.events = EventBus()

        # Board state
        self._boards: List[Board] = []
        self.current_board_index = 0
        self.current_player = Player.X

        # Scores
        self.x_score = 0
        self.o_score = 0
        self.draws = 0

        self.winner: Optional[Player] = None
        self.game_state = GameState.MENU

        # Timer
        self.game_mode = self.settings.game_mode
        self.timer_duration = self.settings.timer_duration
        self.time_remaining: Optional[int] = None

        # AI
        self.ai_enabled = False
        self.ai_difficulty = self.settings.ai_difficulty
        self.ai_player = Player.O
        self.human_player = Player.X
        self.ai = AIPlayer(self.ai_difficulty, rng=self.rng)

        self._pending_ai_call: Optional[ScheduledCall] = None
        self._tick_call: Optional[ScheduledCall] = None

        # Events raised while a move is being applied, sent once it is done
        self._held_events: Optional[List[MatchEvent]] = None

        self._create_boards()

    # ==================== READ-ONLY STATE ====================

    @property
    def boards(self) -> Tuple[Board, ...]:
        """Copies of the eight boards; changing them does not touch the match."""
        return tuple(board.copy() for board in self._boards)

    @property
    def current_board(self) -> Board:
        """Copy of the board the pointer is on."""
        return self._active_board().copy()

    def _active_board(self) -> Board:
        return self._boards[self.current_board_index]

    @property
    def completed_board_indices(self) -> List[int]:
        return [index for index, board in enumerate(self._boards) if board.is_complete]

    @property
    def is_paused(self) -> bool:
        return self.game_state == GameState.PAUSED

    @property
    def is_ai_turn(self) -> bool:
        return self.ai_enabled and self.current_player == self.ai_player

    @property
    def is_ai_moving(self) -> bool:
        """True while an AI move is scheduled but not yet played."""
        return self._pending_ai_call is not None

    def snapshot(self) -> MatchSnapshot:
        """Detached copy of everything a UI needs."""
        return take_snapshot(self, self.validator.win_checker)

    def add_observer(self, observer: Observer) -> None:
        self.events.add(observer)

    def remove_observer(self, observer: Observer) -> None:
        self.events.remove(observer)

    # ==================== GAME MANAGEMENT ====================

    def start_new_game(
        self,
        ai_enabled: bool = False,
        ai_difficulty: Union[Difficulty, str, None] = None,
        game_mode: Union[GameMode, str, None] = None,
        timer_duration: Union[TimerDuration, int, None] = None
    ) -> None:
        """
        Start a match with the given options.

        Options left as None come from the saved settings.

        Args:
            ai_enabled: Play against the AI.
            ai_difficulty: Difficulty or its name ("Normal", "Hard", "Expert").
            game_mode: GameMode or its name ("Classic", "Timed").
            timer_duration: TimerDuration or seconds (60, 120, 180, 300).

        Raises:
            ValueError: If an option is not one of the allowed values.
        """
        # Resolve every option before touching the running match
        difficulty = Difficulty(
            self.settings.ai_difficulty if ai_difficulty is None else ai_difficulty
        )
        mode = GameMode(self.settings.game_mode if game_mode is None else game_mode)
        duration = TimerDuration(
            self.settings.timer_duration if timer_duration is None else timer_duration
        )

        self.ai_enabled = ai_enabled
        self.ai_difficulty = difficulty
        self.game_mode = mode
        self.timer_duration = duration
        self.ai = AIPlayer(self.ai_difficulty, rng=self.rng)

        if ai_enabled:
            # Randomly assign players
            if self.rng.random() < 0.5:
                self.human_player, self.ai_player = Player.X, Player.O
            else:
                self.human_player, self.ai_player = Player.O, Player.X

        LOGGER.info(
            "New match: ai=%s difficulty=%s ai_plays=%s mode=%s duration=%ss",
            ai_enabled, self.ai_difficulty.value, self.ai_player.value,
            self.game_mode.value, self.timer_duration.value
        )

        self.reset_game()

    def reset_game(self) -> None:
        """
        Throw away the current boards and start over with the same options.

        Cancels any pending AI move and timer tick first, so nothing
        from the old match can land on the new one.
        """
        self._cancel_ai_move()
        self._stop_timer()

        self._create_boards()
        self.current_board_index = 0
        self.current_player = Player.X
        self.x_score = 0
        self.o_score = 0
        self.draws = 0
        self.winner = None
        self.time_remaining = self.timer_duration.value if self.game_mode == GameMode.TIMED else None

        self._update_active_board()
        self.game_state = GameState.PLAYING

        self._publish(EventKind.GAME_START)
        self._start_timer()
        self._schedule_ai_move()

    def _create_boards(self) -> None:
        self._boards = [Board(id=index) for index in range(self.config.BOARD_COUNT)]

    # ==================== MOVES ====================

    def make_move(self, index: int) -> bool:
        """
        Play the current player's mark on the active board.

        Human input is ignored while the AI is to move.

        Args:
            index: Cell on the active board (0-8).

        Returns:
            True if the move was applied, False if it was rejected.
        """
        if self.is_ai_turn:
            LOGGER.debug("Ignoring move %s: waiting for the AI", index)
            self._publish(EventKind.INVALID_MOVE, cell=index)
            return False
        return self._apply_move(index)

    def _apply_move(self, index: int) -> bool:
        board = self._active_board()

        if (
            self.game_state != GameState.PLAYING
            or not board.is_active
            or board.is_complete
            or not self.validator.is_valid_move(index, board)
        ):
            LOGGER.debug(
                "Invalid move %s by %s on board %s (state=%s)",
                index, self.current_player.value, self.current_board_index, self.game_state.value
            )
            self._publish(EventKind.INVALID_MOVE, cell=index)
            return False

        # Observers only hear about the move once scores, winner, turn
        # and pointer all agree with it
        self._held_events = []
        try:
            mover = self.current_player
            self.validator.make_move(index, mover, board)
            self._publish(EventKind.MOVE, player=mover, cell=index)

            self._handle_board_completion(board)
            self.check_game_winner()

            self.current_player = mover.opposite()

            # One move each per board: the pointer moves on after X's move
            if self.current_player == Player.O:
                self._move_to_next_board()
            elif self.config.SKIP_COMPLETED_BOARDS and board.is_complete:
                self._move_to_next_board()

            self._schedule_ai_move()
        finally:
            held, self._held_events = self._held_events, None

        for event in held:
            self.events.publish(event)
        return True

    def _handle_board_completion(self, board: Board) -> None:
        """Score a board that the last move completed."""
        if not board.is_complete:
            return

        if board.winner == Player.X:
            self.x_score += 1
        elif board.winner == Player.O:
            self.o_score += 1
        else:
            self.draws += 1

        if board.winner is not None:
            LOGGER.debug("Board %s won by %s", board.id, board.winner.value)
            self._publish(EventKind.BOARD_WIN, board_index=board.id, player=board.winner)
        else:
            LOGGER.debug("Board %s drawn", board.id)
            self._publish(EventKind.BOARD_DRAW, board_index=board.id)

    def check_game_winner(self) -> bool:
        """
        Finish the match if someone has enough board wins or all boards are done.

        Returns:
            True if the match is over.
        """
        if self.game_state == GameState.FINISHED:
            return True

        x_wins = sum(1 for board in self._boards if board.winner == Player.X)
        o_wins = sum(1 for board in self._boards if board.winner == Player.O)

        if x_wins >= self.config.WINS_TO_WIN_MATCH:
            self.winner = Player.X
        elif o_wins >= self.config.WINS_TO_WIN_MATCH:
            self.winner = Player.O
        elif not all(board.is_complete for board in self._boards):
            return False

        self._end_game()
        return True

    def _move_to_next_board(self) -> None:
        """
        Advance the board pointer by one, wrapping after the last board.

        Complete boards are not skipped unless SKIP_COMPLETED_BOARDS is
        set, in which case the pointer stops at the next open board.
        """
        count = len(self._boards)
        next_index = (self.current_board_index + 1) % count

        if self.config.SKIP_COMPLETED_BOARDS:
            for offset in range(count):
                candidate = (self.current_board_index + 1 + offset) % count
                if not self._boards[candidate].is_complete:
                    next_index = candidate
                    break

        self.current_board_index = next_index
        self._update_active_board()
        self._publish(EventKind.BOARD_TRANSITION, board_index=next_index)

    def _update_active_board(self) -> None:
        for index, board in enumerate(self._boards):
            board.is_active = index == self.current_board_index

    def set_active_board(self, index: int) -> bool:
        """
        Point the match at another board.

        Args:
            index: Board index (0-7).

        Returns:
            True if the pointer moved, False for a bad index or outside play.
        """
        if self.game_state != GameState.PLAYING or not (0 <= index < len(self._boards)):
            LOGGER.debug("Cannot activate board %s (state=%s)", index, self.game_state.value)
            return False

        self.current_board_index = index
        self._update_active_board()
        self._publish(EventKind.BOARD_TRANSITION, board_index=index)
        return True

    def _end_game(self) -> None:
        if self.game_state == GameState.FINISHED:
            return  # Prevent multiple calls

        self.game_state = GameState.FINISHED
        self._stop_timer()
        self._cancel_ai_move()
        self.stats.record(self.winner)

        if self.winner is not None:
            LOGGER.info("Match won by %s (%d-%d, %d drawn)", self.winner.value, self.x_score, self.o_score, self.draws)
            self._publish(EventKind.GAME_WIN, player=self.winner)
        else:
            LOGGER.info("Match drawn (%d-%d, %d drawn)", self.x_score, self.o_score, self.draws)
            self._publish(EventKind.GAME_DRAW)

    # ==================== AI ====================

    def _schedule_ai_move(self) -> None:
        """Queue the AI's reply if it is now the AI's turn."""
        if self.game_state != GameState.PLAYING or not self.is_ai_turn:
            return
        if self._pending_ai_call is not None:
            return

        self._publish(EventKind.AI_THINKING, player=self.ai_player)
        self._pending_ai_call = self.scheduler.call_later(self.config.AI_MOVE_DELAY, self._make_ai_move)

    def _cancel_ai_move(self) -> None:
        if self._pending_ai_call is not None:
            self._pending_ai_call.cancel()
            self._pending_ai_call = None

    def _make_ai_move(self) -> None:
        self._pending_ai_call = None

        if self.game_state != GameState.PLAYING or not self.is_ai_turn:
            return

        board = self._active_board()
        if not board.is_active or board.is_complete:
            LOGGER.warning("AI has no open board to play on (board %s)", board.id)
            return

        move = self.ai.get_move(board)
        if move is None:
            # Fallback: make a random move if the AI found nothing
            available = self.validator.available_moves(board)
            if not available:
                LOGGER.error("AI failed to find a move and no moves are available on board %s", board.id)
                return
            move = self.rng.choice(available)

        LOGGER.debug("AI (%s) plays board %s cell %s", self.ai_player.value, board.id, move)
        self._apply_move(move)

    # ==================== TIMER ====================

    def _start_timer(self) -> None:
        self._stop_timer()
        if self.game_mode != GameMode.TIMED or self.game_state != GameState.PLAYING:
            return
        self._tick_call = self.scheduler.call_later(self.config.TICK_INTERVAL, self._on_tick)

    def _stop_timer(self) -> None:
        if self._tick_call is not None:
            self._tick_call.cancel()
            self._tick_call = None

    def _on_tick(self) -> None:
        self._tick_call = None
        self.update_timer()
        self._start_timer()

    def update_timer(self) -> bool:
        """
        Count one second off the clock.

        At zero the match ends and the higher board score wins; boards
        still in progress do not count.

        Returns:
            True if the tick was applied.
        """
        if self.game_mode != GameMode.TIMED or self.game_state != GameState.PLAYING:
            return False
        if self.time_remaining is None:
            return False

        self.time_remaining = max(0, self.time_remaining - 1)
        self._publish(EventKind.TIMER_TICK, time_remaining=self.time_remaining)

        if self.time_remaining in self.config.TIMER_WARNINGS:
            self._publish(EventKind.TIMER_WARNING, time_remaining=self.time_remaining)

        if self.time_remaining == 0:
            # Time's up - decide on the current score
            if self.x_score > self.o_score:
                self.winner = Player.X
            elif self.o_score > self.x_score:
                self.winner = Player.O
            else:
                self.winner = None
            self._end_game()

        return True

    # ==================== PAUSE / RESUME ====================

    def pause_game(self) -> bool:
        """Freeze the match: no moves, no ticks, no AI."""
        if self.game_state != GameState.PLAYING:
            return False

        self.game_state = GameState.PAUSED
        self._stop_timer()
        self._cancel_ai_move()
        self._publish(EventKind.PAUSED)
        return True

    def resume_game(self) -> bool:
        """Continue a paused match, re-queueing the AI if it was its turn."""
        if self.game_state != GameState.PAUSED:
            return False

        self.game_state = GameState.PLAYING
        self._publish(EventKind.RESUMED)
        self._start_timer()
        self._schedule_ai_move()
        return True

    # ==================== EVENTS ====================

    def _publish(
        self,
        kind: EventKind,
        board_index: Optional[int] = None,
        player: Optional[Player] = None,
        cell: Optional[int] = None,
        time_remaining: Optional[int] = None
    ) -> None:
        if board_index is None:
            board_index = self.current_board_index
        event = MatchEvent(
            kind=kind,
            board_index=board_index,
            player=player,
            cell=cell,
            time_remaining=time_remaining,
        )
        if self._held_events is not None:
            self._held_events.append(event)
        else:
            self.events.publish(event)
