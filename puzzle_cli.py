import argparse
import logging
import sys

from puzzle_engine.grid import SUDOKU_SHAPE, InvalidInputError, format_grid
from puzzle_engine.kenken import generate_kenken, solve_kenken
from puzzle_engine.random_source import RandomSource
from puzzle_engine.sudoku import DEFAULT_DIFFICULTY, DIFFICULTY_HOLES, generate_sudoku, solve_sudoku
import puzzle_engine.config as config


def _rng(seed):
    if seed is None:
        seed = config.PUZZLE_SEED
    return RandomSource(seed)


def sudoku(difficulty, seed=None, solve=False):
    result = generate_sudoku(difficulty, _rng(seed))
    print(f"Sudoku ({result.difficulty}, {result.holes} holes)")
    print(format_grid(result.puzzle, SUDOKU_SHAPE.size))

    if solve:
        solution = solve_sudoku(result.puzzle)
        print("\nSolver result:")
        if solution is None:
            print("Unsatisfiable")
        else:
            print(format_grid(solution, SUDOKU_SHAPE.size))
            if solution != result.solution:
                print("(differs from the generated solution: puzzle has several completions)")
    else:
        print("\nSolution:")
        print(format_grid(result.solution, SUDOKU_SHAPE.size))


def kenken(size, seed=None, solve=False):
    if size > config.KENKEN_MAX_SIZE:
        raise InvalidInputError(f"size {size} exceeds the maximum of {config.KENKEN_MAX_SIZE}")
    result = generate_kenken(size, _rng(seed))
    print(f"KenKen {size}x{size}, {len(result.cages)} cages")
    for cage in result.cages:
        print(f"  {cage.label:>6}  cells {list(cage.cells)}")

    grid = result.solution
    if solve:
        grid = solve_kenken(size, result.cages)
        print("\nSolver result:")
        if grid is None:
            print("Unsatisfiable")
            return
    else:
        print("\nSolution:")
    print(format_grid(grid, size))


def main():
    parser = argparse.ArgumentParser(description="Sudoku and KenKen puzzle engine")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    sudoku_parser = subparsers.add_parser("sudoku", help="Generate a sudoku")
    sudoku_parser.add_argument("--difficulty", default=DEFAULT_DIFFICULTY, choices=sorted(DIFFICULTY_HOLES))
    sudoku_parser.add_argument("--seed", type=int, help="Random seed")
    sudoku_parser.add_argument("--solve", action="store_true", help="Solve the carved puzzle instead of printing the stored solution")

    kenken_parser = subparsers.add_parser("kenken", help="Generate a kenken")
    kenken_parser.add_argument("--size", type=int, default=4, help="Grid size (>= 2)")
    kenken_parser.add_argument("--seed", type=int, help="Random seed")
    kenken_parser.add_argument("--solve", action="store_true", help="Solve from the cages instead of printing the stored solution")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        if args.command == "sudoku":
            sudoku(args.difficulty, args.seed, args.solve)
        elif args.command == "kenken":
            kenken(args.size, args.seed, args.solve)
        else:
            parser.print_help()
    except InvalidInputError as e:
        print(f"Error: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
