import operator
from random import Random
from typing import List, Sequence, Tuple

from .matrix import DistanceMatrix, tour_length


class Tour:
    """
    A closed route visiting every city once, with its cost cached.

    Every method that changes the order also brings ``cost`` up to date
    before returning: ``mutate`` recomputes it in full, ``local_improve``
    updates it per accepted swap.
    """

    __slots__ = ("_cities", "_cost", "matrix")

    def __init__(self, cities: Sequence[int], matrix: DistanceMatrix):
        cities = list(cities)
        try:
            cities = [operator.index(c) for c in cities]
        except TypeError:
            raise ValueError(f"Tour cities must be integer indices, got {cities}.") from None
        n = matrix.size
        if len(cities) != n:
            raise ValueError(f"Tour has {len(cities)} cities but the matrix has {n}.")
        if sorted(cities) != list(range(n)):
            raise ValueError(f"Tour must be a permutation of 0..{n - 1}, got {cities}.")
        self.matrix = matrix
        self._cities: List[int] = cities
        self._cost = tour_length(matrix, cities)

    @staticmethod
    def random(matrix: DistanceMatrix, rng: Random) -> "Tour":
        cities = list(range(matrix.size))
        rng.shuffle(cities)
        return Tour(cities, matrix)

    @property
    def cities(self) -> Tuple[int, ...]:
        return tuple(self._cities)

    @property
    def cost(self) -> int:
        return self._cost

    def copy(self) -> "Tour":
        clone = Tour.__new__(Tour)
        clone.matrix = self.matrix
        clone._cities = self._cities[:]
        clone._cost = self._cost
        return clone

    def mutate(self, probability: float, rng: Random) -> bool:
        """Swap two random positions with the given probability.

        Both positions are drawn independently, so they may coincide and leave
        the tour unchanged. Returns True when a swap was drawn.
        """
        if rng.random() >= probability:
            return False
        n = len(self._cities)
        i = rng.randrange(n)
        j = rng.randrange(n)
        self._cities[i], self._cities[j] = self._cities[j], self._cities[i]
        self._cost = tour_length(self.matrix, self._cities)
        return True

    def _swap_delta(self, i: int, j: int) -> int:
        # Edge k joins positions k and k + 1 (mod n); only edges touching i or j change.
        cities = self._cities
        rows = self.matrix.rows
        n = len(cities)
        edges = {(i - 1) % n, i, j - 1, j}
        before = 0
        for k in edges:
            before += rows[cities[k]][cities[(k + 1) % n]]
        cities[i], cities[j] = cities[j], cities[i]
        after = 0
        for k in edges:
            after += rows[cities[k]][cities[(k + 1) % n]]
        cities[i], cities[j] = cities[j], cities[i]
        return after - before

    def local_improve(self) -> int:
        """One greedy pass of position swaps.

        Pairs (i, j) with i < j are tried in row-major order. A swap is kept
        only if it makes the tour strictly shorter than it currently is, and a
        kept swap is seen by every later pair. The pass is not repeated.
        Returns how much the cost dropped.
        """
        cities = self._cities
        n = len(cities)
        start = self._cost
        for i in range(n - 1):
            for j in range(i + 1, n):
                delta = self._swap_delta(i, j)
                if delta < 0:
                    cities[i], cities[j] = cities[j], cities[i]
                    self._cost += delta
        return start - self._cost

    def __len__(self) -> int:
        return len(self._cities)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tour):
            return NotImplemented
        return self._cities == other._cities and self.matrix is other.matrix

    __hash__ = None

    def __repr__(self) -> str:
        return f"Tour(cost={self._cost}, cities={self._cities})"
