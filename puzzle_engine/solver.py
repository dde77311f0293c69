from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set
import logging

from puzzle_engine.cages import Cage, evaluate_cage, validate_cages
from puzzle_engine.grid import GridShape, InvalidInputError, SearchLimitExceeded, check_values

logger = logging.getLogger("puzzle_solver")


@dataclass
class SearchState:
    """
    Everything one search owns: the grid, used-value sets per row/column/box
    and the values placed so far in each cage. Undo is explicit via clear().
    """
    shape: GridShape
    grid: List[int]
    row_used: List[Set[int]]
    col_used: List[Set[int]]
    box_used: List[Set[int]]
    cage_of: List[Optional[Cage]]
    cage_values: Dict[int, List[int]]
    nodes: int = 0

    @classmethod
    def empty(cls, shape: GridShape, cages: Sequence[Cage]) -> "SearchState":
        n = shape.size
        cage_of: List[Optional[Cage]] = [None] * shape.cell_count
        for cage in cages:
            for cell in cage.cells:
                cage_of[cell] = cage
        return cls(
            shape=shape,
            grid=[0] * shape.cell_count,
            row_used=[set() for _ in range(n)],
            col_used=[set() for _ in range(n)],
            box_used=[set() for _ in range(n)] if shape.has_boxes else [],
            cage_of=cage_of,
            cage_values={cage.id: [] for cage in cages},
        )

    def conflicts(self, index: int, value: int) -> bool:
        r, c = self.shape.row_col(index)
        if value in self.row_used[r] or value in self.col_used[c]:
            return True
        if self.box_used and value in self.box_used[self.shape.box_index(r, c)]:
            return True
        return False

    def place(self, index: int, value: int):
        r, c = self.shape.row_col(index)
        self.grid[index] = value
        self.row_used[r].add(value)
        self.col_used[c].add(value)
        if self.box_used:
            self.box_used[self.shape.box_index(r, c)].add(value)
        cage = self.cage_of[index]
        if cage is not None:
            self.cage_values[cage.id].append(value)

    def clear(self, index: int):
        r, c = self.shape.row_col(index)
        value = self.grid[index]
        self.grid[index] = 0
        self.row_used[r].discard(value)
        self.col_used[c].discard(value)
        if self.box_used:
            self.box_used[self.shape.box_index(r, c)].discard(value)
        cage = self.cage_of[index]
        if cage is not None:
            self.cage_values[cage.id].remove(value)

    def cage_admits(self, cage: Cage, value: int) -> bool:
        values = self.cage_values[cage.id] + [value]
        return evaluate_cage(cage, values, len(values) == len(cage.cells))

    def candidates(self, index: int) -> List[int]:
        cage = self.cage_of[index]
        result = []
        for v in range(1, self.shape.size + 1):
            if self.conflicts(index, v):
                continue
            if cage is not None and not self.cage_admits(cage, v):
                continue
            result.append(v)
        return result


class CSPSolver:
    """
    Backtracking solver with the most-constrained-variable (MRV) heuristic.

    Row and column uniqueness always apply; boxes apply when the shape has
    them; cages are optional extra constraints. The solver keeps no state
    between calls, every solve builds its own SearchState.
    """

    def __init__(self, shape: GridShape, cages: Optional[Sequence[Cage]] = None, max_nodes: Optional[int] = None):
        if shape.size < 1:
            raise InvalidInputError(f"Grid size must be positive, got {shape.size}")
        self.shape = shape
        self.cages = list(cages) if cages is not None else []
        # Any cage set, even an empty one, must cover the grid
        if cages is not None:
            validate_cages(shape.size, self.cages)
        self.max_nodes = max_nodes

    def solve(self, givens: Optional[Sequence[int]] = None) -> Optional[List[int]]:
        """First completion found, or None when the puzzle is unsatisfiable."""
        state = self._start(givens)
        if state is None:
            return None

        found: List[List[int]] = []

        def keep_first(grid: List[int]) -> bool:
            found.append(grid)
            return True

        self._search(state, keep_first)
        logger.debug(f"Solve finished after {state.nodes} nodes, solved={bool(found)}")
        return found[0] if found else None

    def count_solutions(self, givens: Optional[Sequence[int]] = None, limit: int = 2) -> int:
        """Number of completions, counting stops at limit."""
        if limit < 1:
            raise InvalidInputError(f"limit must be at least 1, got {limit}")
        state = self._start(givens)
        if state is None:
            return 0

        count = [0]

        def tally(grid: List[int]) -> bool:
            count[0] += 1
            return count[0] >= limit

        self._search(state, tally)
        return count[0]

    def _start(self, givens: Optional[Sequence[int]]) -> Optional[SearchState]:
        state = SearchState.empty(self.shape, self.cages)
        if givens is None:
            return state

        check_values(self.shape, givens)
        for i, v in enumerate(givens):
            if not v:
                continue
            if state.conflicts(i, v):
                logger.debug(f"Given {v} at cell {i} repeats in its row, column or box")
                return None
            state.place(i, v)

        for cage in self.cages:
            values = state.cage_values[cage.id]
            if values and not evaluate_cage(cage, values, len(values) == len(cage.cells)):
                logger.debug(f"Givens already break {cage!r}")
                return None
        return state

    def _search(self, state: SearchState, on_solution: Callable[[List[int]], bool]) -> bool:
        """Returns True once on_solution asks to stop."""
        state.nodes += 1
        if self.max_nodes is not None and state.nodes > self.max_nodes:
            raise SearchLimitExceeded(self.max_nodes)

        best = -1
        best_candidates: List[int] = []
        for i, v in enumerate(state.grid):
            if v:
                continue
            candidates = state.candidates(i)
            if not candidates:
                return False  # dead end
            if best < 0 or len(candidates) < len(best_candidates):
                best, best_candidates = i, candidates

        if best < 0:
            return on_solution(list(state.grid))

        for v in best_candidates:
            state.place(best, v)
            if self._search(state, on_solution):
                return True
            state.clear(best)
        return False


def solve(shape: GridShape, givens: Optional[Sequence[int]] = None, cages: Optional[Sequence[Cage]] = None,
          max_nodes: Optional[int] = None) -> Optional[List[int]]:
    return CSPSolver(shape, cages, max_nodes).solve(givens)


def count_solutions(shape: GridShape, givens: Optional[Sequence[int]] = None, cages: Optional[Sequence[Cage]] = None,
                    limit: int = 2, max_nodes: Optional[int] = None) -> int:
    return CSPSolver(shape, cages, max_nodes).count_solutions(givens, limit)


@dataclass
class ValidationReport:
    """Cells (and cages) that are already wrong in a partially filled grid."""
    duplicates: Set[int] = field(default_factory=set)
    mismatches: Set[int] = field(default_factory=set)
    cage_violations: Set[int] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return not (self.duplicates or self.mismatches or self.cage_violations)

    def to_dict(self):
        return {
            "ok": self.ok,
            "duplicates": sorted(self.duplicates),
            "mismatches": sorted(self.mismatches),
            "cage_violations": sorted(self.cage_violations),
        }


def units(shape: GridShape) -> Iterator[List[int]]:
    """Rows, then columns, then boxes (when present) as lists of cell indices."""
    n = shape.size
    for r in range(n):
        yield [r * n + c for c in range(n)]
    for c in range(n):
        yield [r * n + c for r in range(n)]
    if shape.has_boxes:
        for br in range(0, n, shape.box_rows):
            for bc in range(0, n, shape.box_cols):
                yield [(br + r) * n + bc + c for r in range(shape.box_rows) for c in range(shape.box_cols)]


def check_grid(shape: GridShape, grid: Sequence[int], solution: Optional[Sequence[int]] = None) -> ValidationReport:
    """
    Single pass "does this look good so far" check, no search.
    Flags every cell that shares a non-zero value with another cell of the
    same unit, and every filled cell that disagrees with the known solution.
    """
    check_values(shape, grid)
    report = ValidationReport()

    for unit in units(shape):
        seen: Dict[int, List[int]] = {}
        for i in unit:
            if grid[i]:
                seen.setdefault(grid[i], []).append(i)
        for cells in seen.values():
            if len(cells) > 1:
                report.duplicates.update(cells)

    if solution is not None:
        check_values(shape, solution, name="solution")
        report.mismatches = {i for i, v in enumerate(grid) if v and v != solution[i]}

    return report
