"""
Tests for randomized Latin square construction
"""

import pytest

from conftest import assert_latin
from puzzle_engine.grid import InvalidInputError
from puzzle_engine.latin import _banded_order, build_kenken_solution, build_sudoku_solution
from puzzle_engine.random_source import RandomSource


class TestSudokuSolution:
    """Full 9x9 grids from randomized backtracking"""

    @pytest.mark.parametrize("seed", [0, 1, 7, 42, 2024])
    def test_rows_columns_boxes(self, seed):
        grid = build_sudoku_solution(RandomSource(seed))
        assert_latin(grid, 9)
        for br in range(0, 9, 3):
            for bc in range(0, 9, 3):
                box = {grid[(br + r) * 9 + bc + c] for r in range(3) for c in range(3)}
                assert box == set(range(1, 10))

    def test_same_seed_same_grid(self):
        assert build_sudoku_solution(RandomSource(5)) == build_sudoku_solution(RandomSource(5))

    def test_seeds_vary_output(self):
        grids = {tuple(build_sudoku_solution(RandomSource(s))) for s in range(5)}
        assert len(grids) > 1


class TestKenKenSolution:
    """Permuted cyclic Latin squares"""

    @pytest.mark.parametrize("n", range(1, 10))
    def test_latin_property(self, n):
        for seed in range(3):
            assert_latin(build_kenken_solution(n, RandomSource(seed)), n)

    def test_rejects_empty_order(self):
        with pytest.raises(InvalidInputError):
            build_kenken_solution(0)

    @pytest.mark.parametrize("n", [1, 2, 5, 9, 10])
    def test_banded_order_is_permutation(self, n):
        assert sorted(_banded_order(n, RandomSource(3))) == list(range(n))

    def test_not_always_cyclic(self):
        cyclic = [(r + c) % 6 + 1 for r in range(6) for c in range(6)]
        grids = [build_kenken_solution(6, RandomSource(s)) for s in range(10)]
        assert any(g != cyclic for g in grids)
