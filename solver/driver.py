# solver/driver.py
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional

from .deduction import AnalysisMode, GameAnalysis
from .utils import Action, ActionSink, BoardSnapshot, BoardSource, GameState

logger = logging.getLogger(__name__)


class BaseSolver(ABC):
    """
    Abstract base class for solvers that drive a board.

    A board is anything with a ``snapshot()`` (BoardSource) and an
    ``apply(action)`` (ActionSink); the simulated Board and the live
    OnlineBoard both qualify.

    Typical usage:
        solver = SomeSolver()
        solver.play_game(board, board)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        mode: AnalysisMode = AnalysisMode.SNAPSHOT_AUTHORITATIVE,
    ) -> None:
        self.rng = rng or random.Random()
        self.mode = mode

        # Counters for the CLI / benchmark
        self.passes = 0
        self.certain_count = 0
        self.guess_count = 0

    @abstractmethod
    def next_actions(self, snapshot: BoardSnapshot) -> List[Action]:
        """
        Compute the next actions for the solver to play.
        This method MUST NOT modify the board.
        """
        raise NotImplementedError

    def play_step(self, source: BoardSource, sink: ActionSink) -> List[Action]:
        """
        Snapshot the board, compute actions via next_actions(...) and apply
        them through the sink, in order.

        Returns the list of actions actually applied.
        """
        snapshot = source.snapshot()
        if snapshot.state.is_terminal:
            return []

        actions = self.next_actions(snapshot)
        for action in actions:
            sink.apply(action)

        return actions

    def play_game(
        self,
        source: BoardSource,
        sink: ActionSink,
        max_steps: Optional[int] = None,
    ) -> GameState:
        """
        Let this solver play automatically until:
          - the game is over, or
          - it gets stuck (no actions), or
          - max_steps is reached (if provided).

        Returns the state of the board when play stopped.
        """
        steps = 0
        while True:
            actions = self.play_step(source, sink)
            if not actions:
                break
            steps += 1
            if max_steps is not None and steps >= max_steps:
                break

        state = source.snapshot().state
        logger.info(
            "Stopped after %d steps (%d certain, %d guessed): %s",
            steps,
            self.certain_count,
            self.guess_count,
            state.name,
        )
        return state


class LocalRuleSolver(BaseSolver):
    """
    Solver built on the single-pass deduction engine.

    Strategy:
      1. Run one deduction pass and return its certain actions.
      2. If there are none, reveal an undecided cell chosen uniformly at
         random (unless allow_guess is False, in which case the solver
         reports that it is stuck by returning nothing).
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        mode: AnalysisMode = AnalysisMode.SNAPSHOT_AUTHORITATIVE,
        allow_guess: bool = True,
    ) -> None:
        super().__init__(rng=rng, mode=mode)
        self.allow_guess = allow_guess

    def next_actions(self, snapshot: BoardSnapshot) -> List[Action]:
        analysis = GameAnalysis(snapshot, self.mode)
        self.passes += 1

        actions = analysis.certain_actions()
        if actions:
            self.certain_count += len(actions)
            return actions

        if not self.allow_guess:
            return []
        return self.random_fallback(snapshot)

    def random_fallback(self, snapshot: BoardSnapshot) -> List[Action]:
        """A single reveal of a uniformly chosen undecided cell, or nothing."""
        candidates = list(snapshot.undecided())
        if not candidates:
            return []

        chosen = self.rng.choice(candidates)
        self.guess_count += 1
        logger.debug("No certain action, guessing (%d, %d)", chosen.x, chosen.y)
        return [Action("reveal", chosen.x, chosen.y)]
