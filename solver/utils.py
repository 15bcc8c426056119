# solver/utils.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, Iterator, Literal, Optional, Protocol, Tuple, runtime_checkable

from errors import CellLookupError, ConfigurationError
from grid import Coord, in_bounds


# ---------------------------------------------------------------------------
# Core data structures
# ---------------------------------------------------------------------------

ActionType = Literal["reveal", "flag"]
ACTION_TYPES: Tuple[str, ...] = ("reveal", "flag")


class GameState(Enum):
    """Lifecycle of one game. RUNNING moves to exactly one of WON / LOST."""
    RUNNING = auto()
    WON = auto()
    LOST = auto()

    @property
    def is_terminal(self) -> bool:
        return self is not GameState.RUNNING


@dataclass(frozen=True)
class Action:
    """A single certain (or guessed) move on the board."""
    kind: ActionType
    x: int
    y: int

    def __post_init__(self) -> None:
        if self.kind not in ACTION_TYPES:
            raise ValueError(f"Unknown action: {self.kind}")

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)


@dataclass(frozen=True)
class SnapshotCell:
    """
    What a board source knows about one cell.

    discovered : the cell's number is visible
    flagged    : the cell carries a flag (ignored when discovered)
    count      : adjacent mine count, None when hidden or unreadable
    """
    x: int
    y: int
    discovered: bool = False
    flagged: bool = False
    count: Optional[int] = None


@dataclass(frozen=True)
class BoardSnapshot:
    """
    Immutable view of a whole board, handed from a source to the solver.

    Cells keep the order the source produced them in; the deduction pass
    visits them in that order.
    """
    width: int
    height: int
    cells: Tuple[SnapshotCell, ...]
    state: GameState = GameState.RUNNING

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("Board dimensions must be positive.")

        seen: set[Coord] = set()
        for cell in self.cells:
            coord = (cell.x, cell.y)
            if not in_bounds(cell.x, cell.y, self.width, self.height):
                raise CellLookupError(f"Snapshot cell {coord} is out of bounds.")
            if coord in seen:
                raise CellLookupError(f"Snapshot cell {coord} appears more than once.")
            seen.add(coord)

        if len(seen) != self.width * self.height:
            raise CellLookupError(
                f"Snapshot has {len(seen)} cells, expected {self.width * self.height}."
            )

    @classmethod
    def from_cells(
        cls, cells: Iterable[SnapshotCell], state: GameState = GameState.RUNNING
    ) -> "BoardSnapshot":
        """Build a snapshot whose extents are inferred from the cell coordinates."""
        cells = tuple(cells)
        if not cells:
            raise CellLookupError("Snapshot has no cells.")
        width = max(c.x for c in cells) + 1
        height = max(c.y for c in cells) + 1
        return cls(width=width, height=height, cells=cells, state=state)

    def __iter__(self) -> Iterator[SnapshotCell]:
        return iter(self.cells)

    def by_coord(self) -> Dict[Coord, SnapshotCell]:
        return {(c.x, c.y): c for c in self.cells}

    def cell_at(self, x: int, y: int) -> SnapshotCell:
        try:
            return self.by_coord()[(x, y)]
        except KeyError:
            raise CellLookupError(f"Cell ({x}, {y}) is not in the snapshot.") from None

    def undecided(self) -> Iterator[SnapshotCell]:
        """Cells that are neither discovered nor flagged."""
        for cell in self.cells:
            if not cell.discovered and not cell.flagged:
                yield cell


# ---------------------------------------------------------------------------
# Capabilities shared by the simulated and the live board
# ---------------------------------------------------------------------------

@runtime_checkable
class BoardSource(Protocol):
    """Anything that can describe its current board as a snapshot."""

    def snapshot(self) -> BoardSnapshot:
        ...


@runtime_checkable
class ActionSink(Protocol):
    """Anything that can carry out a solver action."""

    def apply(self, action: Action) -> None:
        ...
