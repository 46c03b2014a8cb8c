import random

import pytest

from tsp_memetic.matrix import DistanceMatrix
from tsp_memetic.tour import Tour

from conftest import cycle_cost, is_permutation


def reference_local_improve(rows, cities):
    """Brute force pass: full recomputation for every trial swap."""
    cities = list(cities)
    n = len(cities)
    cost = cycle_cost(rows, cities)
    for i in range(n - 1):
        for j in range(i + 1, n):
            cities[i], cities[j] = cities[j], cities[i]
            new_cost = cycle_cost(rows, cities)
            if new_cost < cost:
                cost = new_cost
            else:
                cities[i], cities[j] = cities[j], cities[i]
    return cities, cost


def test_cost_is_computed_on_construction(four_cities):
    tour = Tour([0, 1, 2, 3], four_cities)
    assert tour.cost == 95
    assert tour.cities == (0, 1, 2, 3)
    assert len(tour) == 4


@pytest.mark.parametrize("cities", [[0, 1, 2], [0, 1, 2, 3, 4], [0, 1, 1, 3], [1, 2, 3, 4]])
def test_invalid_sequence_rejected(four_cities, cities):
    with pytest.raises(ValueError):
        Tour(cities, four_cities)


def test_fractional_cities_rejected():
    m = DistanceMatrix([[0, 7], [7, 0]])
    with pytest.raises(ValueError, match="integer"):
        Tour([0.5, 1.9], m)
    with pytest.raises(ValueError, match="integer"):
        Tour([0.0, 1.0], m)


def test_cities_snapshot_cannot_touch_tour(four_cities):
    tour = Tour([0, 1, 2, 3], four_cities)
    snapshot = tour.cities
    assert isinstance(snapshot, tuple)
    tour.local_improve()
    assert snapshot == (0, 1, 2, 3)


def test_degenerate_sizes():
    one = Tour([0], DistanceMatrix([[0]]))
    assert one.cost == 0
    assert one.local_improve() == 0
    assert one.mutate(1.0, random.Random(0))
    assert one.cities == (0,)

    two = Tour([1, 0], DistanceMatrix([[0, 7], [7, 0]]))
    assert two.cost == 14
    two.local_improve()
    assert two.cost == 14


def test_random_tour_is_permutation(random_matrix, rng):
    m = random_matrix(9, seed=3)
    for _ in range(20):
        tour = Tour.random(m, rng)
        assert is_permutation(tour.cities, 9)
        assert tour.cost == cycle_cost(m.rows, tour.cities)


def test_mutate_with_zero_probability_is_noop(random_matrix, rng):
    m = random_matrix(8, seed=1)
    tour = Tour.random(m, rng)
    before = tour.cities
    for _ in range(50):
        assert tour.mutate(0.0, rng) is False
    assert tour.cities == before


def test_mutate_keeps_permutation_and_cost(random_matrix, rng):
    m = random_matrix(8, seed=2)
    tour = Tour.random(m, rng)
    for _ in range(100):
        assert tour.mutate(1.0, rng) is True
        assert is_permutation(tour.cities, 8)
        assert tour.cost == cycle_cost(m.rows, tour.cities)


def test_mutate_swaps_at_most_two_positions(random_matrix, rng):
    m = random_matrix(10, seed=4)
    tour = Tour.random(m, rng)
    for _ in range(50):
        before = tour.cities
        tour.mutate(1.0, rng)
        changed = [k for k in range(10) if before[k] != tour.cities[k]]
        assert len(changed) in (0, 2)


def test_local_improve_first_improving_swap(four_cities):
    tour = Tour([0, 1, 2, 3], four_cities)
    gain = tour.local_improve()
    assert tour.cities == (1, 0, 2, 3)
    assert tour.cost == 80
    assert gain == 15


@pytest.mark.parametrize("n", [3, 4, 5, 7, 10])
def test_local_improve_matches_full_recomputation(random_matrix, n):
    m = random_matrix(n, seed=n)
    rng = random.Random(n * 31)
    for _ in range(25):
        tour = Tour.random(m, rng)
        expected_cities, expected_cost = reference_local_improve(m.rows, tour.cities)
        tour.local_improve()
        assert list(tour.cities) == expected_cities
        assert tour.cost == expected_cost


def test_local_improve_is_monotone(random_matrix, rng):
    m = random_matrix(12, seed=9)
    for _ in range(20):
        tour = Tour.random(m, rng)
        before = tour.cost
        gain = tour.local_improve()
        assert tour.cost <= before
        assert gain == before - tour.cost
        assert tour.cost == cycle_cost(m.rows, tour.cities)
        assert is_permutation(tour.cities, 12)


def test_local_improve_is_idempotent_at_local_optimum(random_matrix, rng):
    m = random_matrix(9, seed=11)
    tour = Tour.random(m, rng)
    for _ in range(1000):
        if tour.local_improve() == 0:
            break
    settled = (tour.cities, tour.cost)
    assert tour.local_improve() == 0
    assert (tour.cities, tour.cost) == settled


def test_copy_is_independent(random_matrix, rng):
    m = random_matrix(6, seed=5)
    tour = Tour.random(m, rng)
    clone = tour.copy()
    assert clone == tour
    clone.mutate(1.0, random.Random(1))
    clone.local_improve()
    assert tour.cost == cycle_cost(m.rows, tour.cities)
    assert clone.matrix is tour.matrix


def test_rng_annotations_resolve_to_random_class():
    import typing

    assert typing.get_type_hints(Tour.mutate)["rng"] is random.Random
    assert typing.get_type_hints(Tour.random)["rng"] is random.Random
