# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "puzzle_engine", "routes" and "main" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from puzzle_engine.random_source import RandomSource


@pytest.fixture
def rng():
    return RandomSource(1234)


def assert_latin(grid, n):
    """Every row and column is a permutation of 1..n."""
    expected = set(range(1, n + 1))
    assert len(grid) == n * n
    for r in range(n):
        assert set(grid[r * n:(r + 1) * n]) == expected, f"row {r}"
    for c in range(n):
        assert {grid[r * n + c] for r in range(n)} == expected, f"column {c}"
