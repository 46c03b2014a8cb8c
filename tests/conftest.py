import random

import pytest

from tsp_memetic.matrix import DistanceMatrix


FOUR_CITIES = [
    [0, 10, 15, 20],
    [10, 0, 35, 25],
    [15, 35, 0, 30],
    [20, 25, 30, 0],
]


def cycle_cost(rows, cities):
    n = len(cities)
    return sum(rows[cities[i]][cities[(i + 1) % n]] for i in range(n))


def is_permutation(cities, n):
    return sorted(cities) == list(range(n))


@pytest.fixture
def four_cities():
    return DistanceMatrix(FOUR_CITIES)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def random_matrix():
    def build(n, seed, low=1, high=100):
        r = random.Random(seed)
        rows = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                rows[i][j] = rows[j][i] = r.randint(low, high)
        return DistanceMatrix(rows)

    return build
