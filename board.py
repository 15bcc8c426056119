from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

from errors import CellLookupError, ConfigurationError
from grid import Coord, in_bounds, neighbor_coords
from solver.utils import Action, BoardSnapshot, GameState, SnapshotCell

__all__ = [
    "Board",
    "Cell",
    "CellState",
    "CellLookupError",
    "ConfigurationError",
    "GameState",
]

logger = logging.getLogger(__name__)


class CellState(Enum):
    """Possible visible states of a cell."""
    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


@dataclass(eq=False)
class Cell:
    """Represents a single square on the Minesweeper board."""
    x: int
    y: int
    is_mine: bool = False
    state: CellState = CellState.HIDDEN
    neighbors: Tuple["Cell", ...] = field(default=(), repr=False)

    @property
    def is_revealed(self) -> bool:
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    @property
    def adjacent_mines(self) -> int:
        return sum(1 for n in self.neighbors if n.is_mine)

    @property
    def is_zero(self) -> bool:
        return self.adjacent_mines == 0

    def display_char(self, reveal_mines: bool = False) -> str:
        """
        Character for this cell:

        - '.' : hidden
        - ' ' : revealed, 0 adjacent mines
        - '1'..'8' : revealed, that many adjacent mines
        - 'F' : flagged
        - '*' : mine (when revealed or reveal_mines=True)
        """
        if reveal_mines and self.is_mine:
            return "*"

        if self.state == CellState.FLAGGED:
            return "F"
        if self.state == CellState.HIDDEN:
            return "."

        if self.is_mine:
            # Only a lost game shows a revealed mine
            return "*"

        return " " if self.is_zero else str(self.adjacent_mines)


def validate_dimensions(width: int, height: int, mine_count: int) -> None:
    if width <= 0 or height <= 0:
        raise ConfigurationError("Board dimensions must be positive.")
    if mine_count <= 0 or mine_count >= width * height:
        raise ConfigurationError("Number of mines must be between 1 and width*height-1.")


class Board:
    """
    Simulated Minesweeper board.

    Design:
    - Mines are placed at setup, drawn uniformly without replacement from
      the injected random source.
    - Coordinates are 0-indexed: x in [0, width-1], y in [0, height-1].
    - Cells are stored row-major (y outer, x inner); snapshots keep that order.
    - A board is both a BoardSource (snapshot) and an ActionSink (apply).
    """

    def __init__(
        self,
        width: int = 16,
        height: int = 16,
        mine_count: int = 40,
        rng: Optional[random.Random] = None,
        mines: Optional[Iterable[Coord]] = None,
    ) -> None:
        validate_dimensions(width, height, mine_count)

        self.width = width
        self.height = height
        self.mine_count = mine_count
        self.rng = rng or random.Random()
        self.state: GameState = GameState.RUNNING

        self.cells: List[Cell] = [
            Cell(x, y) for y in range(height) for x in range(width)
        ]
        for cell in self.cells:
            cell.neighbors = tuple(
                self.cells[ny * width + nx]
                for nx, ny in neighbor_coords(cell.x, cell.y, width, height)
            )

        if mines is None:
            self._place_random_mines()
        else:
            self._place_mines(mines)

    @classmethod
    def from_layout(cls, width: int, height: int, mines: Iterable[Coord]) -> "Board":
        """Build a board with a known mine layout (fixtures, replays)."""
        mines = list(mines)
        return cls(width, height, len(mines), mines=mines)

    # ------------------------------------------------------------------
    # Core board / cell helpers
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return in_bounds(x, y, self.width, self.height)

    def cell_at(self, x: int, y: int) -> Cell:
        if not self.in_bounds(x, y):
            raise CellLookupError(f"Cell ({x}, {y}) is out of bounds.")
        return self.cells[y * self.width + x]

    @property
    def game_over(self) -> bool:
        return self.state.is_terminal

    @property
    def win(self) -> bool:
        return self.state == GameState.WON

    # ------------------------------------------------------------------
    # Mine placement
    # ------------------------------------------------------------------
    def _place_random_mines(self) -> None:
        positions = [(c.x, c.y) for c in self.cells]
        self._place_mines(self.rng.sample(positions, self.mine_count))

    def _place_mines(self, mines: Iterable[Coord]) -> None:
        mine_positions = set(mines)
        if len(mine_positions) != self.mine_count:
            raise ConfigurationError(
                f"Expected {self.mine_count} distinct mines, got {len(mine_positions)}."
            )

        for cell in self.cells:
            cell.is_mine = False
        for x, y in mine_positions:
            self.cell_at(x, y).is_mine = True

        logger.debug(
            "Placed %d mines on a %dx%d board", self.mine_count, self.width, self.height
        )

    def reset(self, new_layout: bool = False) -> None:
        """
        Hide every cell and start over. The mine layout is kept unless
        new_layout is set, in which case mines are drawn again.
        """
        for cell in self.cells:
            cell.state = CellState.HIDDEN
        if new_layout:
            self._place_random_mines()
        self.state = GameState.RUNNING

    # ------------------------------------------------------------------
    # Game actions: reveal / flag cells
    # ------------------------------------------------------------------
    def reveal_cell(self, x: int, y: int) -> None:
        self.reveal(self.cell_at(x, y))

    def reveal(self, cell: Cell) -> None:
        """
        Reveal ``cell``.

        - Already revealed cells and finished games are left alone.
        - Revealing a mine loses the game.
        - Revealing a zero cell reveals its neighbours, transitively.
        """
        if self.game_over or cell.is_revealed:
            return

        if cell.is_mine:
            cell.state = CellState.REVEALED
            self.state = GameState.LOST
            logger.info("Mine revealed at (%d, %d), game lost", cell.x, cell.y)
            return

        self._flood_fill_reveal(cell)

        if self._all_safe_cells_revealed():
            self.state = GameState.WON
            logger.info("All safe cells revealed, game won")

    def _flood_fill_reveal(self, start: Cell) -> None:
        """
        Reveal a region of zero cells plus their numbered border.

        Neighbours are pushed in reverse so they are popped in adjacency
        order, which keeps the reveal order reproducible.
        """
        stack: List[Cell] = [start]

        while stack:
            cell = stack.pop()
            if cell.is_revealed or cell.is_mine:
                continue

            cell.state = CellState.REVEALED

            if cell.is_zero:
                for neighbor in reversed(cell.neighbors):
                    if not neighbor.is_revealed:
                        stack.append(neighbor)

    def flag_cell(self, x: int, y: int) -> None:
        self.flag(self.cell_at(x, y))

    def flag(self, cell: Cell) -> None:
        """Mark a hidden cell as a mine. Revealed cells are left alone."""
        if self.game_over or cell.is_revealed:
            return
        cell.state = CellState.FLAGGED

    def unflag_cell(self, x: int, y: int) -> None:
        cell = self.cell_at(x, y)
        if self.game_over or not cell.is_flagged:
            return
        cell.state = CellState.HIDDEN

    def toggle_flag(self, x: int, y: int) -> None:
        if self.cell_at(x, y).is_flagged:
            self.unflag_cell(x, y)
        else:
            self.flag_cell(x, y)

    # ------------------------------------------------------------------
    # Source / sink capabilities
    # ------------------------------------------------------------------
    def snapshot(self) -> BoardSnapshot:
        """Visible state only: mines stay hidden unless revealed."""
        cells = tuple(
            SnapshotCell(
                x=cell.x,
                y=cell.y,
                discovered=cell.is_revealed,
                flagged=cell.is_flagged,
                count=cell.adjacent_mines if cell.is_revealed and not cell.is_mine else None,
            )
            for cell in self.cells
        )
        return BoardSnapshot(self.width, self.height, cells, self.state)

    def apply(self, action: Action) -> None:
        cell = self.cell_at(action.x, action.y)
        if action.kind == "reveal":
            self.reveal(cell)
        elif action.kind == "flag":
            self.flag(cell)
        else:
            raise ValueError(f"Unknown action: {action.kind}")

    # ------------------------------------------------------------------
    # Queries (useful for solvers & tests)
    # ------------------------------------------------------------------
    def _all_safe_cells_revealed(self) -> bool:
        """True iff every non-mine cell is revealed."""
        return all(cell.is_revealed for cell in self.cells if not cell.is_mine)

    def iter_cells(self) -> Iterable[Cell]:
        """Iterate over all cells in row-major order."""
        return iter(self.cells)

    def revealed_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_revealed)

    def count_flags(self) -> int:
        return sum(1 for cell in self.cells if cell.is_flagged)

    def remaining_mines_estimate(self) -> int:
        """
        How many mines *should* remain, assuming every flag is correct.
        Mainly for UI/debugging, not strict rule enforcement.
        """
        return self.mine_count - self.count_flags()

    # ------------------------------------------------------------------
    # Rendering helpers (terminal front-end can just print(board))
    # ------------------------------------------------------------------
    def to_display_grid(self, reveal_mines: bool = False) -> List[List[str]]:
        return [
            [
                self.cell_at(x, y).display_char(
                    reveal_mines=reveal_mines or self.game_over
                )
                for x in range(self.width)
            ]
            for y in range(self.height)
        ]

    def __str__(self) -> str:
        return self.render()

    def render(self, reveal_mines: bool = False) -> str:
        """
        Render the board as a multiline string with x labels on top and
        y labels on the left, e.g.:

             0  1  2
          0 [.][1][ ]
          1 [F][2][ ]
        """
        grid = self.to_display_grid(reveal_mines=reveal_mines)
        header = "    " + "".join(f"{x:>2} " for x in range(self.width))
        lines = [header]
        for y in range(self.height):
            line = "".join(f"[{grid[y][x]}]" for x in range(self.width))
            lines.append(f"{y:>3} {line}")
        return "\n".join(lines)
