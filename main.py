"""
Console host for XO Arena.

Plays a full eight-board match in the terminal, either two players at
one keyboard or against the AI. The engine does all the work; this
script only prints boards and reads cell numbers.

Run this script to play:
    python main.py --ai --difficulty Expert --mode Timed --duration 120
"""

import argparse
import logging
import random
import time
from typing import Optional

from arena.config import GameMode, GameSettings, GameState, MatchConfig, TimerDuration
from arena.events import EventKind, MatchEvent
from arena.match_engine import MatchEngine
from arena.scheduler import ManualScheduler
from logic.ai_player import Difficulty


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play eight-board Tic-Tac-Toe in the terminal.")
    parser.add_argument("--ai", action="store_true", help="Play against the AI")
    parser.add_argument(
        "--difficulty",
        type=str,
        default=Difficulty.NORMAL.value,
        choices=[level.value for level in Difficulty],
        help="AI difficulty",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default=GameMode.CLASSIC.value,
        choices=[mode.value for mode in GameMode],
        help="Classic, or Timed with a countdown",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=TimerDuration.THREE_MINUTES.value,
        choices=[duration.value for duration in TimerDuration],
        help="Timer length in seconds (Timed mode)",
    )
    parser.add_argument("--ai-delay", type=float, default=MatchConfig.AI_MOVE_DELAY, help="AI thinking pause in seconds")
    parser.add_argument(
        "--skip-completed-boards",
        action="store_true",
        help="Move on to the next open board instead of the next board",
    )
    parser.add_argument("--seed", type=int, default=None, help="Deterministic random seed")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Python logging level")
    return parser.parse_args(argv)


def describe_event(event: MatchEvent) -> Optional[str]:
    """Text to show the player for an engine event, if any."""
    board = (event.board_index or 0) + 1
    if event.kind == EventKind.BOARD_WIN:
        return f"*** Board {board} won by {event.player.value}!"
    if event.kind == EventKind.BOARD_DRAW:
        return f"*** Board {board} is a draw."
    if event.kind == EventKind.BOARD_TRANSITION:
        return f"--> Now playing board {board}"
    if event.kind == EventKind.TIMER_WARNING:
        return f"!!! {event.time_remaining} seconds left"
    if event.kind == EventKind.AI_THINKING:
        return "AI is thinking..."
    if event.kind == EventKind.MOVE:
        return f"{event.player.value} plays cell {event.cell} on board {board}"
    return None


class ConsoleGame:
    """
    Drives a MatchEngine from stdin.

    The scheduler's clock follows the wall clock: before each prompt is
    handled, it is advanced by the real time that has passed, which
    plays any due AI move and timer ticks.
    """

    def __init__(self, args: argparse.Namespace):
        config = MatchConfig()
        config.AI_MOVE_DELAY = args.ai_delay
        config.SKIP_COMPLETED_BOARDS = args.skip_completed_boards

        self.args = args
        self.scheduler = ManualScheduler()
        self.engine = MatchEngine(
            config=config,
            settings=GameSettings(),
            scheduler=self.scheduler,
            rng=random.Random(args.seed),
        )
        self.engine.add_observer(self._on_event)
        self._last_time = time.monotonic()

    def _on_event(self, event: MatchEvent) -> None:
        text = describe_event(event)
        if text:
            print(text)

    def _pump(self) -> None:
        """Let the scheduler catch up with real time."""
        now = time.monotonic()
        self.scheduler.advance(now - self._last_time)
        self._last_time = now

    def _wait_for_ai(self) -> None:
        """Sleep until the pending AI move has been played."""
        while self.engine.is_ai_moving and self.engine.game_state == GameState.PLAYING:
            due = self.scheduler.next_due()
            if due is not None:
                time.sleep(max(0.0, due - self.scheduler.now))
            self._pump()

    def print_match(self) -> None:
        engine = self.engine
        board = engine.current_board
        print()
        print(f"Board {engine.current_board_index + 1}/{len(engine.boards)}   "
              f"X {engine.x_score} - O {engine.o_score}   draws {engine.draws}")
        if engine.time_remaining is not None:
            print(f"Time left: {engine.time_remaining}s")
        print(board.render())
        print(f"Turn: {engine.current_player.value}")

    def play(self) -> None:
        engine = self.engine
        engine.start_new_game(
            ai_enabled=self.args.ai,
            ai_difficulty=self.args.difficulty,
            game_mode=self.args.mode,
            timer_duration=self.args.duration,
        )
        if engine.ai_enabled:
            print(f"You play {engine.human_player.value}, the AI plays {engine.ai_player.value}.")
        print("Commands: 0-8 place a mark | p pause | r reset | q quit")

        while engine.game_state != GameState.FINISHED:
            self._wait_for_ai()
            if engine.game_state == GameState.FINISHED:
                break

            self.print_match()
            command = input("Your move> ").strip().lower()
            self._pump()
            if engine.game_state == GameState.FINISHED:
                print("Match over.")
                break

            if command in {"q", "quit", "exit"}:
                print("Exiting game.")
                return
            if command == "p":
                engine.pause_game()
                input("Paused. Press Enter to resume.")
                self._last_time = time.monotonic()
                engine.resume_game()
                continue
            if command == "r":
                engine.reset_game()
                continue

            try:
                index = int(command)
            except ValueError:
                print("Type a cell number 0-8.")
                continue

            if not engine.make_move(index):
                print("Invalid move!")

        self.print_result()

    def print_result(self) -> None:
        engine = self.engine
        print()
        print(f"Final score: X {engine.x_score} - O {engine.o_score}   draws {engine.draws}")
        if engine.winner:
            print(f"{engine.winner.value} WINS THE MATCH!")
        else:
            print("The match is a DRAW!")


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING))
    ConsoleGame(args).play()


if __name__ == "__main__":
    main()
