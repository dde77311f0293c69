"""
Tests for the generic MRV backtracking solver and the grid check
"""

import pytest

from conftest import assert_latin
from puzzle_engine.cages import Cage, Operator
from puzzle_engine.grid import GridShape, InvalidInputError, SearchLimitExceeded, latin_shape
from puzzle_engine.solver import CSPSolver, SearchState, check_grid, count_solutions, solve, units


class TestSearchState:
    """Explicit place / clear bookkeeping"""

    def test_place_and_clear_restore_state(self):
        shape = GridShape(4, 2, 2)
        cages = [Cage(0, (0, 1), Operator.ADD, 3)] + [Cage(i, (i,), Operator.NONE, 1) for i in range(2, 16)]
        state = SearchState.empty(shape, cages)

        state.place(0, 2)
        assert state.grid[0] == 2
        assert 2 in state.row_used[0] and 2 in state.col_used[0] and 2 in state.box_used[0]
        assert state.cage_values[0] == [2]
        assert state.conflicts(1, 2)

        state.clear(0)
        assert state.grid == [0] * 16
        assert not state.row_used[0] and not state.col_used[0] and not state.box_used[0]
        assert state.cage_values[0] == []

    def test_candidates_respect_cage_bound(self):
        cages = [Cage(0, (0, 1), Operator.ADD, 3), Cage(1, (2, 3), Operator.ADD, 7)] + \
                [Cage(i, (i,), Operator.NONE, 1) for i in range(4, 16)]
        state = SearchState.empty(latin_shape(4), cages)
        assert state.candidates(0) == [1, 2, 3]
        assert state.candidates(2) == [1, 2, 3, 4]
        state.place(2, 3)
        assert state.candidates(3) == [4]


class TestSolve:
    """Completion search"""

    def test_most_constrained_cell_goes_first(self, monkeypatch):
        # Last row holds 2 3 4, so cell 12 can only be 1; every other empty cell has more options
        givens = [0] * 12 + [0, 2, 3, 4]
        placed = []
        original = SearchState.place

        def recording_place(state, index, value):
            placed.append((index, value))
            original(state, index, value)

        monkeypatch.setattr(SearchState, "place", recording_place)
        grid = solve(latin_shape(4), givens)
        assert_latin(grid, 4)
        assert placed[:3] == [(13, 2), (14, 3), (15, 4)]
        assert placed[3] == (12, 1)

    def test_empty_latin_square_is_deterministic(self):
        first = solve(latin_shape(3))
        assert first == [1, 2, 3, 2, 3, 1, 3, 1, 2]
        assert solve(latin_shape(3)) == first

    def test_boxed_4x4(self):
        shape = GridShape(4, 2, 2)
        grid = solve(shape)
        assert_latin(grid, 4)
        assert check_grid(shape, grid).ok

    def test_givens_kept(self):
        givens = [0] * 16
        givens[5] = 3
        givens[10] = 1
        grid = solve(latin_shape(4), givens)
        assert grid[5] == 3 and grid[10] == 1
        assert_latin(grid, 4)

    def test_conflicting_givens_unsatisfiable(self):
        givens = [1, 1, 0, 0] + [0] * 12
        assert solve(latin_shape(4), givens) is None

    def test_givens_breaking_a_cage(self):
        cages = [Cage(0, (0, 1), Operator.ADD, 3), Cage(1, (2, 3), Operator.ADD, 7)] + \
                [Cage(i, (i,), Operator.NONE, (i % 4) + 1) for i in range(4, 16)]
        givens = [4] + [0] * 15
        assert solve(latin_shape(4), givens, cages) is None

    def test_node_budget(self):
        with pytest.raises(SearchLimitExceeded):
            solve(GridShape(9, 3, 3), max_nodes=1)

    def test_invalid_givens(self):
        with pytest.raises(InvalidInputError):
            solve(latin_shape(3), [0] * 8)
        with pytest.raises(InvalidInputError):
            solve(latin_shape(3), [4] + [0] * 8)

    def test_solver_has_no_state_between_calls(self):
        solver = CSPSolver(latin_shape(4))
        a = solver.solve([1] + [0] * 15)
        b = solver.solve([2] + [0] * 15)
        assert a[0] == 1 and b[0] == 2


class TestCountSolutions:
    def test_latin_2x2(self):
        assert count_solutions(latin_shape(2), limit=10) == 2

    def test_limit_stops_counting(self):
        assert count_solutions(latin_shape(4), limit=3) == 3

    def test_full_grid_counts_once(self):
        grid = solve(latin_shape(4))
        assert count_solutions(latin_shape(4), grid) == 1

    def test_bad_limit(self):
        with pytest.raises(InvalidInputError):
            count_solutions(latin_shape(2), limit=0)


class TestCheckGrid:
    """Non-backtracking 'looks good so far' pass"""

    def test_units_cover_every_cell(self):
        shape = GridShape(9, 3, 3)
        all_units = list(units(shape))
        assert len(all_units) == 27
        for unit in all_units:
            assert len(set(unit)) == 9

    def test_box_duplicate(self):
        shape = GridShape(4, 2, 2)
        grid = [0] * 16
        grid[0] = 2
        grid[5] = 2
        report = check_grid(shape, grid)
        assert report.duplicates == {0, 5}
        assert not report.ok

    def test_no_box_without_box_shape(self):
        grid = [0] * 16
        grid[0] = 2
        grid[5] = 2
        assert check_grid(latin_shape(4), grid).ok

    def test_mismatches(self):
        solution = solve(latin_shape(3))
        grid = list(solution)
        grid[4] = 0
        grid[0] = solution[1]
        report = check_grid(latin_shape(3), grid, solution)
        assert 0 in report.mismatches
        assert 4 not in report.mismatches

    def test_report_dict(self):
        report = check_grid(latin_shape(2), [1, 1, 0, 0])
        assert report.to_dict() == {"ok": False, "duplicates": [0, 1], "mismatches": [], "cage_violations": []}
