import logging
from dataclasses import dataclass
from enum import Enum
from math import prod
from typing import Dict, List, Optional, Sequence, Set, Tuple

from puzzle_engine.grid import InvalidInputError, neighbors
from puzzle_engine.random_source import RandomSource

logger = logging.getLogger("kenken_cages")

# Cumulative weights for the requested cage size: 1 -> 0.2, 2 -> 0.5, 3 -> 0.3
CAGE_SIZE_WEIGHTS: List[Tuple[int, float]] = [(1, 0.2), (2, 0.5), (3, 0.3)]
LARGE_CAGE_ADD_PROBABILITY = 0.75


class Operator(str, Enum):
    NONE = "none"
    ADD = "add"
    MULTIPLY = "multiply"
    SUBTRACT = "subtract"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


def _strict_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    return value


_SYMBOLS = {
    Operator.NONE: "",
    Operator.ADD: "+",
    Operator.MULTIPLY: "×",
    Operator.SUBTRACT: "−",
    Operator.DIVIDE: "÷",
}


@dataclass(frozen=True)
class Cage:
    id: int
    cells: Tuple[int, ...]
    operator: Operator
    target: int

    @property
    def anchor(self) -> int:
        """Cell that carries the label."""
        return min(self.cells)

    @property
    def label(self) -> str:
        return f"{self.target}{self.operator.symbol}"

    def to_dict(self):
        return {
            "id": self.id,
            "cells": list(self.cells),
            "operator": self.operator.value,
            "target": self.target,
            "anchor": self.anchor,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Cage":
        try:
            operator = Operator(data["operator"])
            cells = tuple(sorted(_strict_int(c, "cell") for c in data["cells"]))
            return cls(id=_strict_int(data["id"], "id"), cells=cells, operator=operator,
                       target=_strict_int(data["target"], "target"))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed cage {data!r}: {e}") from e

    def __repr__(self):
        return f"Cage#{self.id}({self.label} {list(self.cells)})"


def evaluate_cage(cage: Cage, known_values: Sequence[int], is_complete: bool) -> bool:
    """
    Can (or, once complete, does) the cage accept these values?

    Partial sums and products may not exceed the target, which lets the
    solver prune early. Subtraction and division only judge complete cages.
    """
    op = cage.operator
    target = cage.target

    if op is Operator.NONE:
        if not is_complete:
            return True
        return len(known_values) == 1 and known_values[0] == target

    if op is Operator.ADD:
        total = sum(known_values)
        return total == target if is_complete else total <= target

    if op is Operator.MULTIPLY:
        if any(v < 1 for v in known_values):
            return False
        product = prod(known_values)
        return product == target if is_complete else product <= target

    if op is Operator.SUBTRACT:
        if not is_complete:
            return True
        if len(cage.cells) != 2 or len(known_values) != 2:
            return False
        return abs(known_values[0] - known_values[1]) == target

    if op is Operator.DIVIDE:
        if not is_complete:
            return True
        if len(cage.cells) != 2 or len(known_values) != 2:
            return False
        lo, hi = sorted(known_values)
        return lo > 0 and hi % lo == 0 and hi // lo == target

    raise ValueError(f"Unknown cage operator: {op!r}")


def _pick_cage_size(rng: RandomSource) -> int:
    roll = rng.random()
    acc = 0.0
    for size, weight in CAGE_SIZE_WEIGHTS:
        acc += weight
        if roll < acc:
            return size
    return CAGE_SIZE_WEIGHTS[-1][0]


def _grow_cage(seed: int, size: int, n: int, unassigned: Set[int], rng: RandomSource) -> List[int]:
    cells = [seed]
    unassigned.discard(seed)
    while len(cells) < size:
        frontier = sorted({nb for cell in cells for nb in neighbors(cell, n) if nb in unassigned})
        if not frontier:
            break  # boxed in, keep the smaller cage
        nxt = rng.choice(frontier)
        cells.append(nxt)
        unassigned.discard(nxt)
    return sorted(cells)


def choose_operation(values: Sequence[int], rng: RandomSource) -> Tuple[Operator, int]:
    """Operator and target for a cage holding these solution values."""
    if len(values) == 1:
        return Operator.NONE, values[0]

    if len(values) == 2:
        a, b = values
        lo, hi = min(a, b), max(a, b)
        options = [(Operator.ADD, a + b), (Operator.MULTIPLY, a * b)]
        if a != b:
            options.append((Operator.SUBTRACT, hi - lo))
        if hi % lo == 0:
            options.append((Operator.DIVIDE, hi // lo))
        return rng.choice(options)

    if rng.random() < LARGE_CAGE_ADD_PROBABILITY:
        return Operator.ADD, sum(values)
    return Operator.MULTIPLY, prod(values)


def partition_cages(n: int, solution: Sequence[int], rng: Optional[RandomSource] = None) -> List[Cage]:
    """
    Splits the n x n grid into connected cages and labels each one from the solution.
    """
    rng = rng or RandomSource()
    unassigned = set(range(n * n))
    cages: List[Cage] = []

    while unassigned:
        seed = rng.choice(sorted(unassigned))
        wanted = _pick_cage_size(rng)
        cells = _grow_cage(seed, wanted, n, unassigned, rng)
        operator, target = choose_operation([solution[i] for i in cells], rng)
        cages.append(Cage(id=len(cages), cells=tuple(cells), operator=operator, target=target))

    logger.debug(f"Partitioned {n}x{n} grid into {len(cages)} cages")
    return cages


def validate_cages(n: int, cages: Sequence[Cage]):
    """Raises InvalidInputError unless the cages partition the n x n grid."""
    seen_ids = set()
    owner: Dict[int, int] = {}
    for cage in cages:
        if cage.id in seen_ids:
            raise InvalidInputError(f"Duplicate cage id {cage.id}")
        seen_ids.add(cage.id)

        if not cage.cells:
            raise InvalidInputError(f"Cage {cage.id} has no cells")
        if len(set(cage.cells)) != len(cage.cells):
            raise InvalidInputError(f"Cage {cage.id} lists a cell twice")
        if cage.target < 1:
            raise InvalidInputError(f"Cage {cage.id} target must be positive, got {cage.target}")
        if (cage.operator is Operator.NONE) != (len(cage.cells) == 1):
            raise InvalidInputError(
                f"Cage {cage.id}: operator 'none' is reserved for single-cell cages"
            )

        for cell in cage.cells:
            if not 0 <= cell < n * n:
                raise InvalidInputError(f"Cage {cage.id} cell {cell} is outside the {n}x{n} grid")
            if cell in owner:
                raise InvalidInputError(f"Cell {cell} belongs to cages {owner[cell]} and {cage.id}")
            owner[cell] = cage.id

    if len(owner) != n * n:
        missing = sorted(set(range(n * n)) - owner.keys())
        raise InvalidInputError(f"Cells not covered by any cage: {missing}")
