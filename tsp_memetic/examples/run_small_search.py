import random

from tsp_memetic.data import random_symmetric_matrix
from tsp_memetic.evolution import EvolutionConfig, EvolutionLoop


def main():
    rng = random.Random(7)
    matrix = random_symmetric_matrix(12, 1, 100, rng)

    cfg = EvolutionConfig(
        population_size=12,
        iterations=5,
        mutation_probability=0.1,
    )
    loop = EvolutionLoop(cfg, matrix, rng=rng)
    for g in range(cfg.iterations):
        loop.step()
        best = loop.best()
        print(f"gen {g+1}: best={best.cost} route={list(best.cities)}")


if __name__ == "__main__":
    main()
