# tests/test_driver.py

import random

import pytest

from board import Board
from solver.deduction import AnalysisMode
from solver.driver import BaseSolver, LocalRuleSolver
from solver.utils import Action, ActionSink, BoardSnapshot, BoardSource, GameState, SnapshotCell


class RecordingSink:
    def __init__(self, board: Board) -> None:
        self.board = board
        self.applied = []

    def apply(self, action: Action) -> None:
        self.applied.append(action)
        self.board.apply(action)


def test_board_implements_both_capabilities():
    board = Board.from_layout(3, 3, [(0, 0)])

    assert isinstance(board, BoardSource)
    assert isinstance(board, ActionSink)


def test_base_solver_is_abstract():
    with pytest.raises(TypeError):
        BaseSolver()


def test_play_step_applies_certain_actions_in_order():
    board = Board.from_layout(3, 3, [(0, 0), (1, 0)])
    board.reveal_cell(0, 2)
    sink = RecordingSink(board)
    solver = LocalRuleSolver(rng=random.Random(0))

    actions = solver.play_step(board, sink)

    assert sink.applied == actions
    assert [a.kind for a in actions] == ["flag", "flag", "reveal"]
    assert board.win is True
    assert solver.certain_count == 3
    assert solver.guess_count == 0


def test_play_step_on_finished_game_does_nothing():
    board = Board.from_layout(3, 3, [(0, 0)])
    board.reveal_cell(0, 0)
    solver = LocalRuleSolver()

    assert solver.play_step(board, board) == []
    assert solver.passes == 0


def test_random_fallback_only_picks_undecided_cells():
    board = Board.from_layout(3, 3, [(0, 0), (2, 0)])
    board.reveal_cell(0, 2)
    board.flag_cell(0, 0)
    solver = LocalRuleSolver(rng=random.Random(5))

    for _ in range(20):
        (guess,) = solver.random_fallback(board.snapshot())
        assert guess.kind == "reveal"
        assert guess.coord in {(1, 0), (2, 0)}


def test_random_fallback_is_reproducible_with_seed():
    board = Board(width=9, height=9, mine_count=10, rng=random.Random(11))
    snapshot = board.snapshot()

    first = LocalRuleSolver(rng=random.Random(99)).random_fallback(snapshot)
    second = LocalRuleSolver(rng=random.Random(99)).random_fallback(snapshot)

    assert first == second


def test_random_fallback_with_nothing_left_is_empty():
    snapshot = BoardSnapshot(
        2,
        1,
        (
            SnapshotCell(0, 0, flagged=True),
            SnapshotCell(1, 0, discovered=True, count=1),
        ),
    )
    solver = LocalRuleSolver()

    assert solver.random_fallback(snapshot) == []
    assert solver.guess_count == 0


def test_next_actions_guesses_only_when_nothing_is_certain():
    board = Board.from_layout(3, 3, [(0, 0), (2, 0)])
    board.reveal_cell(0, 2)
    solver = LocalRuleSolver(rng=random.Random(1))

    actions = solver.next_actions(board.snapshot())

    assert len(actions) == 1
    assert actions[0].coord in {(0, 0), (1, 0), (2, 0)}
    assert solver.guess_count == 1


def test_solver_without_guessing_reports_stuck():
    board = Board.from_layout(3, 3, [(0, 0), (2, 0)])
    board.reveal_cell(0, 2)
    solver = LocalRuleSolver(allow_guess=False)

    assert solver.play_step(board, board) == []
    assert solver.play_game(board, board) == GameState.RUNNING


@pytest.mark.parametrize("mode", [AnalysisMode.SNAPSHOT_AUTHORITATIVE, AnalysisMode.SELF_AUTHORITATIVE])
@pytest.mark.parametrize("seed", range(15))
def test_play_game_always_finishes(mode, seed):
    board = Board(width=9, height=9, mine_count=10, rng=random.Random(seed))
    solver = LocalRuleSolver(rng=random.Random(seed + 1337), mode=mode)

    state = solver.play_game(board, board)

    assert state.is_terminal
    assert state == board.state


def test_play_game_respects_max_steps():
    board = Board(width=16, height=16, mine_count=40, rng=random.Random(2))
    solver = LocalRuleSolver(rng=random.Random(3))

    solver.play_game(board, board, max_steps=1)

    assert solver.passes == 1
