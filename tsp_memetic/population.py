import logging
import random
from typing import Dict, List, Optional, Tuple

import numpy as np

from .matrix import DistanceMatrix
from .tour import Tour


logger = logging.getLogger(__name__)


def check_probability(probability: float) -> float:
    if isinstance(probability, bool) or not isinstance(probability, (int, float)):
        raise ValueError(f"Mutation probability must be a number, got {probability!r}.")
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"Mutation probability must lie in [0, 1], got {probability}.")
    return float(probability)


class Population:
    """
    One generation of candidate tours over a shared distance matrix.

    Each call to ``evolve`` builds a complete set of children and only then
    swaps it in, so readers never see a half-built generation. The previous
    generation is dropped entirely; there is no elitism.
    """

    def __init__(self, size: int, matrix: DistanceMatrix, rng: Optional[random.Random] = None):
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"Population size must be a positive integer, got {size!r}.")
        if not isinstance(matrix, DistanceMatrix):
            matrix = DistanceMatrix(matrix)
        self.matrix = matrix
        self.rng = rng or random.Random()
        self._tours: List[Tour] = [Tour.random(matrix, self.rng) for _ in range(size)]
        self.generation = 0

    @property
    def tours(self) -> Tuple[Tour, ...]:
        return tuple(self._tours)

    @property
    def size(self) -> int:
        return len(self._tours)

    def __len__(self) -> int:
        return len(self._tours)

    def costs(self) -> List[int]:
        return [t.cost for t in self._tours]

    def statistics(self) -> Dict[str, float]:
        costs = np.array(self.costs(), dtype=float)
        return {"best": float(costs.min()), "mean": float(costs.mean()), "worst": float(costs.max())}

    def select_parent(self) -> Tour:
        return self.rng.choice(self._tours)

    def crossover(self, parent1: Tour, parent2: Tour) -> Tour:
        """Order-preserving crossover.

        A random inclusive block of ``parent1`` keeps its positions; the
        remaining slots are filled left to right with the missing cities in
        the order they appear in ``parent2``.
        """
        p1 = parent1.cities
        size = len(p1)
        start = self.rng.randrange(size)
        end = self.rng.randrange(size)
        if start > end:
            start, end = end, start

        child: List[Optional[int]] = [None] * size
        child[start : end + 1] = p1[start : end + 1]
        taken = set(p1[start : end + 1])

        slot = 0
        for city in parent2.cities:
            if city in taken:
                continue
            while child[slot] is not None:
                slot += 1
            child[slot] = city
            taken.add(city)
        return Tour(child, parent1.matrix)

    def evolve(self, mutation_probability: float) -> None:
        mutation_probability = check_probability(mutation_probability)
        new_tours: List[Tour] = []
        for _ in range(len(self._tours)):
            parent1 = self.select_parent()
            parent2 = self.select_parent()
            child = self.crossover(parent1, parent2)
            child.mutate(mutation_probability, self.rng)
            child.local_improve()
            new_tours.append(child)
        self._tours = new_tours
        self.generation += 1
        logger.debug("generation %d: best=%d", self.generation, min(self.costs()))

    def best_route(self) -> Tour:
        if not self._tours:
            raise RuntimeError("Cannot pick the best route of an empty population.")
        # min() keeps the first of equally short tours.
        return min(self._tours, key=lambda t: t.cost)
