# solver/deduction.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from grid import Coord, neighbor_coords
from .utils import Action, BoardSnapshot

logger = logging.getLogger(__name__)


class AnalysisMode(Enum):
    """
    Who owns the truth about revealed cells between passes.

    SNAPSHOT_AUTHORITATIVE : the next snapshot does (live play). A reveal
                             decided in a pass leaves the analysis cell hidden.
    SELF_AUTHORITATIVE     : the solver does (simulation). A reveal decided
                             in a pass marks the analysis cell discovered and
                             drops its flag.
    """
    SNAPSHOT_AUTHORITATIVE = "snapshot"
    SELF_AUTHORITATIVE = "self"


@dataclass(eq=False)
class AnalysisCell:
    """Per-pass working copy of one snapshot cell."""
    x: int
    y: int
    count: Optional[int] = None
    discovered: bool = False
    flag: bool = False
    # Reveal already decided in this pass (snapshot-authoritative guard)
    pending: bool = False
    neighbors: Tuple["AnalysisCell", ...] = field(default=(), repr=False)

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)


class GameAnalysis:
    """
    One deduction pass over a board snapshot.

    Only two local rules are applied, to every discovered cell with a known
    count N, in snapshot order:

      1. U = neighbours not discovered. If len(U) == N, every cell in U is a
         mine -> flag the ones not flagged yet (visible to later cells).
      2. F = flagged neighbours. If len(F) == N, every other hidden
         neighbour is safe -> reveal it.

    The pass runs once; the caller re-snapshots and re-analyses to make
    further progress.
    """

    def __init__(
        self,
        snapshot: BoardSnapshot,
        mode: AnalysisMode = AnalysisMode.SNAPSHOT_AUTHORITATIVE,
    ) -> None:
        self.snapshot = snapshot
        self.mode = mode
        self.board: List[AnalysisCell] = []
        by_coord: Dict[Coord, AnalysisCell] = {}

        for cell in snapshot.cells:
            analysis_cell = AnalysisCell(cell.x, cell.y)
            if cell.discovered:
                analysis_cell.discovered = True
                analysis_cell.count = cell.count
            elif cell.flagged:
                analysis_cell.flag = True
            self.board.append(analysis_cell)
            by_coord[analysis_cell.coord] = analysis_cell

        for cell in self.board:
            cell.neighbors = tuple(
                by_coord[c]
                for c in neighbor_coords(cell.x, cell.y, snapshot.width, snapshot.height)
            )

    def certain_actions(self) -> List[Action]:
        # Sources are fixed up front: cells discovered mid-pass have no count.
        sources = [c for c in self.board if c.discovered and c.count is not None]
        actions: List[Action] = []

        for cell in sources:
            required = cell.count

            # flag
            potential_mines = [n for n in cell.neighbors if not n.discovered]
            if len(potential_mines) == required:
                for mine in potential_mines:
                    if mine.flag or mine.pending:
                        continue
                    mine.flag = True
                    actions.append(Action("flag", mine.x, mine.y))

            # reveal
            flags = [n for n in cell.neighbors if n.flag]
            if len(flags) == required:
                for safe in cell.neighbors:
                    if safe.discovered or safe.flag or safe.pending:
                        continue
                    self._mark_revealed(safe)
                    actions.append(Action("reveal", safe.x, safe.y))

        logger.debug(
            "Deduction pass over %d sources produced %d actions",
            len(sources),
            len(actions),
        )
        return actions

    def _mark_revealed(self, cell: AnalysisCell) -> None:
        cell.pending = True
        if self.mode is AnalysisMode.SELF_AUTHORITATIVE:
            cell.discovered = True

    def undecided_cells(self) -> List[AnalysisCell]:
        """Cells that are neither discovered nor flagged: candidates for a guess."""
        return [c for c in self.board if not c.discovered and not c.flag]


def certain_actions(
    snapshot: BoardSnapshot,
    mode: AnalysisMode = AnalysisMode.SNAPSHOT_AUTHORITATIVE,
) -> List[Action]:
    """Run a single deduction pass over ``snapshot``."""
    return GameAnalysis(snapshot, mode).certain_actions()
