import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Uniform random source used for shuffles and random choices.
    Generators take one explicitly so that a fixed seed reproduces a puzzle.
    Not suitable for anything security related.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        """Random integer in [low, high], both ends included."""
        return self._rng.randint(low, high)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, items: Sequence[T]) -> T:
        return items[self._rng.randrange(len(items))]

    def shuffle(self, items: List[T]) -> None:
        self._rng.shuffle(items)

    def permutation(self, n: int) -> List[int]:
        """Shuffled list of 0..n-1."""
        order = list(range(n))
        self._rng.shuffle(order)
        return order

    def __repr__(self):
        return f"RandomSource(seed={self.seed})"
