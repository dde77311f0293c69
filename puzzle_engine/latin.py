import logging
import math
from typing import List, Optional

from puzzle_engine.grid import SUDOKU_SHAPE, InvalidInputError
from puzzle_engine.random_source import RandomSource

logger = logging.getLogger("latin_square")


def build_sudoku_solution(rng: Optional[RandomSource] = None) -> List[int]:
    """
    Fills an empty 9x9 grid by randomized backtracking in row-major order.
    Each cell tries 1..9 in its own shuffled order, row/column/box tables
    make every placement check O(1).
    """
    rng = rng or RandomSource()
    n = SUDOKU_SHAPE.size
    total = SUDOKU_SHAPE.cell_count

    grid = [0] * total
    rows = [[False] * (n + 1) for _ in range(n)]
    cols = [[False] * (n + 1) for _ in range(n)]
    boxes = [[False] * (n + 1) for _ in range(n)]
    # Remaining untried values per position, None until the position is reached
    pending: List[Optional[List[int]]] = [None] * total

    pos = 0
    restarts = 0
    while pos < total:
        r, c = divmod(pos, n)
        b = SUDOKU_SHAPE.box_index(r, c)

        if pending[pos] is None:
            order = list(range(1, n + 1))
            rng.shuffle(order)
            pending[pos] = order

        # Returning here after a backtrack: release the previous value
        old = grid[pos]
        if old:
            rows[r][old] = cols[c][old] = boxes[b][old] = False
            grid[pos] = 0

        placed = False
        candidates = pending[pos]
        while candidates:
            v = candidates.pop()
            if not (rows[r][v] or cols[c][v] or boxes[b][v]):
                grid[pos] = v
                rows[r][v] = cols[c][v] = boxes[b][v] = True
                placed = True
                break

        if placed:
            pos += 1
            continue

        pending[pos] = None
        pos -= 1
        if pos < 0:
            # Exhausted the first cell; start over from an empty grid
            restarts += 1
            logger.warning(f"Sudoku fill exhausted the search, restarting (#{restarts})")
            grid = [0] * total
            for table in (rows, cols, boxes):
                for used in table:
                    used[:] = [False] * (n + 1)
            pending = [None] * total
            pos = 0

    logger.debug(f"Built sudoku solution with {restarts} restarts")
    return grid


def _banded_order(n: int, rng: RandomSource) -> List[int]:
    """Row order built from bands of floor(sqrt(n)) rows: shuffle inside bands, then the bands."""
    band = max(1, math.isqrt(n))
    bands = [list(range(start, min(start + band, n))) for start in range(0, n, band)]
    for rows in bands:
        rng.shuffle(rows)
    rng.shuffle(bands)
    return [r for rows in bands for r in rows]


def build_kenken_solution(n: int, rng: Optional[RandomSource] = None) -> List[int]:
    """
    Random Latin square of order n.

    Starts from the cyclic square (r + c) mod n + 1 and applies a row
    permutation, a column permutation and a relabeling of the symbols.
    Each of these maps Latin squares to Latin squares.
    """
    if n < 1:
        raise InvalidInputError(f"Latin square order must be at least 1, got {n}")
    rng = rng or RandomSource()

    row_order = _banded_order(n, rng)
    col_order = rng.permutation(n)
    symbols = rng.permutation(n)  # symbols[k] + 1 replaces k + 1

    grid = [0] * (n * n)
    for r in range(n):
        src_r = row_order[r]
        for c in range(n):
            base = (src_r + col_order[c]) % n
            grid[r * n + c] = symbols[base] + 1

    logger.debug(f"Built {n}x{n} latin square")
    return grid
