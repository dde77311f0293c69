import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from puzzle_engine.cages import Cage, evaluate_cage, partition_cages, validate_cages
from puzzle_engine.grid import InvalidInputError, latin_shape
from puzzle_engine.latin import build_kenken_solution
from puzzle_engine.random_source import RandomSource
from puzzle_engine.solver import CSPSolver, ValidationReport, check_grid

logger = logging.getLogger("kenken_generator")

MIN_SIZE = 2


@dataclass(frozen=True)
class KenKenPuzzle:
    size: int
    cages: List[Cage]
    solution: List[int]

    def to_dict(self):
        return {
            "size": self.size,
            "cages": [cage.to_dict() for cage in self.cages],
            "solution": list(self.solution),
        }


def _check_size(n: int):
    if isinstance(n, bool) or not isinstance(n, int) or n < MIN_SIZE:
        raise InvalidInputError(f"KenKen size must be an integer >= {MIN_SIZE}, got {n!r}")


def generate_kenken(n: int, rng: Optional[RandomSource] = None) -> KenKenPuzzle:
    """
    Random Latin square plus a random cage partition labelled from it.
    The cages are not checked for a unique solution.
    """
    _check_size(n)
    rng = rng or RandomSource()
    solution = build_kenken_solution(n, rng)
    cages = partition_cages(n, solution, rng)
    logger.info(f"Generated {n}x{n} kenken with {len(cages)} cages")
    return KenKenPuzzle(size=n, cages=cages, solution=solution)


def solve_kenken(n: int, cages: Sequence[Cage], max_nodes: Optional[int] = None) -> Optional[List[int]]:
    """A grid satisfying every row, column and cage, or None if there is none."""
    _check_size(n)
    return CSPSolver(latin_shape(n), cages, max_nodes).solve()


def kenken_has_unique_solution(n: int, cages: Sequence[Cage], max_nodes: Optional[int] = None) -> bool:
    """Diagnostic only; generation never calls this."""
    _check_size(n)
    return CSPSolver(latin_shape(n), cages, max_nodes).count_solutions(limit=2) == 1


def validate_kenken(n: int, grid: Sequence[int], cages: Sequence[Cage],
                    solution: Optional[Sequence[int]] = None) -> ValidationReport:
    """
    Row/column duplicates and solution mismatches as for Sudoku, plus the ids
    of cages whose filled cells already break the cage's arithmetic.
    """
    _check_size(n)
    shape = latin_shape(n)
    validate_cages(n, cages)

    report = check_grid(shape, grid, solution)
    for cage in cages:
        filled = [grid[i] for i in cage.cells if grid[i]]
        if filled and not evaluate_cage(cage, filled, len(filled) == len(cage.cells)):
            report.cage_violations.add(cage.id)
    return report
