from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Tuple

from errors import CellLookupError, ConfigurationError

if TYPE_CHECKING:
    from board import Board, Cell


Coord = Tuple[int, int]


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    return 0 <= x < width and 0 <= y < height


NEIGHBOR_CACHE_SIZE = 4096


@lru_cache(maxsize=NEIGHBOR_CACHE_SIZE)
def neighbor_coords(x: int, y: int, width: int, height: int) -> Tuple[Coord, ...]:
    """
    Coordinates of the up-to-8 cells touching (x, y).

    Ordered with dy as the outer loop and dx as the inner one, so the result
    is stable across calls and boards of the same size.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError("Board dimensions must be positive.")
    if not in_bounds(x, y, width, height):
        raise CellLookupError(f"Cell ({x}, {y}) is out of bounds.")

    coords = []
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            nx, ny = x + dx, y + dy
            if in_bounds(nx, ny, width, height):
                coords.append((nx, ny))
    return tuple(coords)


def neighbors_of(board: "Board", cell: "Cell") -> Tuple["Cell", ...]:
    """Neighbouring cells of ``cell``, as wired when ``board`` was built."""
    if board.cell_at(cell.x, cell.y) is not cell:
        raise CellLookupError(f"Cell ({cell.x}, {cell.y}) does not belong to this board.")
    return cell.neighbors
