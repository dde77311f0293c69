"""
Flat grid helpers shared by the Sudoku and KenKen code.

A grid is a row-major list of n*n ints, 0 meaning an empty cell.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

EMPTY = 0


class InvalidInputError(ValueError):
    """Malformed grid, size or cage set. Fatal to the call."""


class SearchLimitExceeded(RuntimeError):
    """The solver used up the node budget the caller gave it."""

    def __init__(self, max_nodes: int):
        super().__init__(f"Search aborted after {max_nodes} nodes")
        self.max_nodes = max_nodes


@dataclass(frozen=True)
class GridShape:
    """Side length plus optional box dimensions (3x3 for Sudoku)."""
    size: int
    box_rows: int = 0
    box_cols: int = 0

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @property
    def has_boxes(self) -> bool:
        return self.box_rows > 0 and self.box_cols > 0

    def row_col(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.size)

    def box_index(self, r: int, c: int) -> int:
        return (r // self.box_rows) * (self.size // self.box_cols) + c // self.box_cols


SUDOKU_SHAPE = GridShape(9, 3, 3)


def latin_shape(n: int) -> GridShape:
    return GridShape(n)


def neighbors(index: int, n: int) -> List[int]:
    """Orthogonal neighbours of a cell (4-connectivity)."""
    r, c = divmod(index, n)
    result = []
    for dr, dc in [(0, 1), (1, 0), (0, -1), (-1, 0)]:
        nr, nc = r + dr, c + dc
        if 0 <= nr < n and 0 <= nc < n:
            result.append(nr * n + nc)
    return result


def check_values(shape: GridShape, grid: Sequence[int], name: str = "grid"):
    """Raises InvalidInputError unless grid has n*n cells with values in 0..n."""
    if len(grid) != shape.cell_count:
        raise InvalidInputError(
            f"{name} must have {shape.cell_count} cells, got {len(grid)}"
        )
    for i, v in enumerate(grid):
        if isinstance(v, bool) or not isinstance(v, int) or v < 0 or v > shape.size:
            raise InvalidInputError(f"{name}[{i}] = {v!r} is outside 0..{shape.size}")


def to_rows(grid: Sequence[int], n: int) -> List[List[int]]:
    return [list(grid[r * n:(r + 1) * n]) for r in range(n)]


def format_grid(grid: Sequence[int], n: int) -> str:
    width = len(str(n))
    lines = []
    for row in to_rows(grid, n):
        lines.append(" ".join(str(v).rjust(width) if v else ".".rjust(width) for v in row))
    return "\n".join(lines)
