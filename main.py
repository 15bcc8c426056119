# main.py

from __future__ import annotations

import logging
from typing import Tuple

from board import Board
from config import DEFAULT_GAME, LOG_LEVEL, PRESETS, GameConfig
from errors import CellLookupError, ConfigurationError
from solver.deduction import AnalysisMode
from solver.driver import LocalRuleSolver


# ---------------------------------------------------------------------------
# Helper functions for user input
# ---------------------------------------------------------------------------

def ask_yes_no(prompt: str, default: bool = True) -> bool:
    default_str = "Y/n" if default else "y/N"
    while True:
        answer = input(f"{prompt} [{default_str}]: ").strip().lower()
        if not answer:
            return default
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        print("Please enter 'y' or 'n'.")


def ask_int(prompt: str, minimum: int, maximum: int, default: int) -> int:
    full_prompt = f"{prompt} (min={minimum}, max={maximum}, default={default}): "
    while True:
        raw = input(full_prompt).strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            print("Please enter an integer.")
            continue
        if not (minimum <= value <= maximum):
            print(f"Value must be between {minimum} and {maximum}.")
            continue
        return value


def parse_move(user_input: str) -> Tuple[str, int, int]:
    """
    Parse a move string like:
      'r 3 4' or 'reveal 3 4' -> reveal cell (x=3, y=4)
      'f 3 4' or 'flag 3 4'   -> toggle flag

    Coordinates are 0-based, as shown by Board.render().
    Returns: (action, x, y). Raises ValueError on bad input.
    """
    tokens = user_input.strip().split()
    if not tokens:
        raise ValueError("Empty input.")

    action_token = tokens[0].lower()
    if action_token in {"q", "quit", "exit"}:
        return ("quit", -1, -1)

    if len(tokens) != 3:
        raise ValueError("Format must be: 'r x y' or 'f x y' (or 'q' to quit).")

    if action_token in {"r", "reveal", "o", "open"}:
        action = "reveal"
    elif action_token in {"f", "flag"}:
        action = "flag"
    else:
        raise ValueError("First token must be 'r'/'reveal', 'f'/'flag', or 'q' to quit.")

    try:
        x = int(tokens[1])
        y = int(tokens[2])
    except ValueError:
        raise ValueError("x and y must be integers.")

    return (action, x, y)


# ---------------------------------------------------------------------------
# Game setup
# ---------------------------------------------------------------------------

def ask_game_config() -> GameConfig:
    """Ask the user for a preset or a custom size and mine count."""
    print("=== Minesweeper Configuration ===")
    names = ", ".join(PRESETS)
    while True:
        raw = input(f"Preset ({names}) or 'custom' [default={DEFAULT_GAME.name.lower()}]: ")
        choice = raw.strip().lower()
        if not choice:
            return DEFAULT_GAME
        if choice in PRESETS:
            return PRESETS[choice]
        if choice == "custom":
            break
        print(f"Unknown preset: {choice!r}")

    width = ask_int("Width", minimum=2, maximum=60, default=16)
    height = ask_int("Height", minimum=2, maximum=60, default=16)

    max_mines = width * height - 1  # at least one safe cell
    default_mines = max(1, (width * height) // 6)  # roughly intermediate density
    mines = ask_int("Number of mines", minimum=1, maximum=max_mines, default=default_mines)

    return GameConfig(width=width, height=height, mines=mines)


def configure_board() -> Board:
    config = ask_game_config().validate()
    print(f"\nCreating a {config.width}x{config.height} board with {config.mines} mines...\n")
    return Board(width=config.width, height=config.height, mine_count=config.mines)


def print_outcome(board: Board, player: str) -> None:
    if board.win:
        print(f"\n{player} revealed all safe cells. {player} wins!")
    elif board.game_over:
        print(f"\n{player} hit a mine. Game over!")
    else:
        print("\nGame ended with some cells still unknown.")
    print("\nFinal board (mines shown):")
    print(board.render(reveal_mines=True))


# ---------------------------------------------------------------------------
# Human game loop
# ---------------------------------------------------------------------------

def run_human_game(board: Board) -> None:
    print("=== Minesweeper (Human Mode) ===")
    print("Commands:")
    print("  r x y   -> reveal cell at column x, row y (0-based)")
    print("  f x y   -> toggle flag at column x, row y")
    print("  q       -> quit")
    print()

    while not board.game_over:
        print(board.render())
        print(f"Mines remaining (estimate): {board.remaining_mines_estimate()}")

        user_input = input("\nEnter your move: ")
        try:
            action, x, y = parse_move(user_input)
        except ValueError as exc:
            print(f"Invalid move: {exc}")
            continue

        if action == "quit":
            print("Goodbye!")
            return

        try:
            if action == "reveal":
                board.reveal_cell(x, y)
            else:
                board.toggle_flag(x, y)
        except CellLookupError as exc:
            print(exc)

    print_outcome(board, "You")


# ---------------------------------------------------------------------------
# AI game loop
# ---------------------------------------------------------------------------

def run_ai_game(board: Board, show_steps: bool = True) -> None:
    print("=== Minesweeper (AI Mode) ===")
    solver = LocalRuleSolver(mode=AnalysisMode.SELF_AUTHORITATIVE)

    step = 0
    while not board.game_over:
        actions = solver.play_step(board, board)
        if not actions:
            print("\nAI is stuck and cannot find a move.")
            break

        step += 1
        if show_steps:
            kinds = ", ".join(f"{a.kind} ({a.x}, {a.y})" for a in actions)
            print(f"\nAI step {step}: {kinds}")
            print(board.render())

    print_outcome(board, "AI")
    print(
        f"Passes: {solver.passes}, certain actions: {solver.certain_count}, "
        f"guesses: {solver.guess_count}"
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    logging.basicConfig(level=LOG_LEVEL)

    if ask_yes_no("Play on minesweeper.online in a browser?", default=False):
        # Selenium is only needed for live play
        from online import play_online

        play_online()
        return

    try:
        board = configure_board()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}")
        return

    if ask_yes_no("Do you want to play the game yourself?", default=True):
        run_human_game(board)
    else:
        show_steps = ask_yes_no("Print the board after every AI step?", default=True)
        run_ai_game(board, show_steps=show_steps)


if __name__ == "__main__":
    main()
