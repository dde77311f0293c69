"""
Sudoku generation, solving and validation.

Carving does not check uniqueness: a carved puzzle can (rarely) have more
than one completion, and solve_sudoku then returns one of them, which need
not be the solution the puzzle was carved from.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from puzzle_engine.grid import SUDOKU_SHAPE, check_values
from puzzle_engine.latin import build_sudoku_solution
from puzzle_engine.random_source import RandomSource
from puzzle_engine.solver import CSPSolver, ValidationReport, check_grid

logger = logging.getLogger("sudoku_generator")

DIFFICULTY_HOLES = {
    "easy": 40,
    "medium": 50,
    "hard": 56,
}
DEFAULT_DIFFICULTY = "medium"


@dataclass(frozen=True)
class SudokuPuzzle:
    puzzle: List[int]
    solution: List[int]
    difficulty: str

    @property
    def holes(self) -> int:
        return self.puzzle.count(0)

    def to_dict(self):
        return {
            "size": SUDOKU_SHAPE.size,
            "difficulty": self.difficulty,
            "holes": self.holes,
            "puzzle": list(self.puzzle),
            "solution": list(self.solution),
        }


def resolve_difficulty(difficulty: Optional[str]) -> str:
    key = (difficulty or "").strip().lower()
    if key in DIFFICULTY_HOLES:
        return key
    logger.warning(f"Unknown difficulty {difficulty!r}, using {DEFAULT_DIFFICULTY}")
    return DEFAULT_DIFFICULTY


def carve(solution: Sequence[int], difficulty: str = DEFAULT_DIFFICULTY,
          rng: Optional[RandomSource] = None) -> List[int]:
    """Zeroes cells of the solution in random order until the difficulty's hole count is reached."""
    check_values(SUDOKU_SHAPE, solution, name="solution")
    rng = rng or RandomSource()
    holes = DIFFICULTY_HOLES[resolve_difficulty(difficulty)]

    puzzle = list(solution)
    order = rng.permutation(len(puzzle))
    for index in order[:holes]:
        puzzle[index] = 0
    return puzzle


def generate_sudoku(difficulty: str = DEFAULT_DIFFICULTY, rng: Optional[RandomSource] = None) -> SudokuPuzzle:
    rng = rng or RandomSource()
    level = resolve_difficulty(difficulty)
    solution = build_sudoku_solution(rng)
    puzzle = carve(solution, level, rng)
    logger.info(f"Generated {level} sudoku with {puzzle.count(0)} holes")
    return SudokuPuzzle(puzzle=puzzle, solution=solution, difficulty=level)


def solve_sudoku(grid: Optional[Sequence[int]] = None, max_nodes: Optional[int] = None) -> Optional[List[int]]:
    """
    Completes the grid (an empty grid when None is given).
    Returns None if no completion exists.
    """
    return CSPSolver(SUDOKU_SHAPE, max_nodes=max_nodes).solve(grid)


def validate_sudoku(grid: Sequence[int], solution: Optional[Sequence[int]] = None) -> ValidationReport:
    return check_grid(SUDOKU_SHAPE, grid, solution)


def sudoku_has_unique_solution(grid: Sequence[int], max_nodes: Optional[int] = None) -> bool:
    """Diagnostic only; generation never calls this."""
    return CSPSolver(SUDOKU_SHAPE, max_nodes=max_nodes).count_solutions(grid, limit=2) == 1
