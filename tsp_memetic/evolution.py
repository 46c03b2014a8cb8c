import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .matrix import DistanceMatrix
from .population import Population, check_probability
from .tour import Tour


logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    population_size: int = 50
    iterations: int = 100
    mutation_probability: float = 0.1
    random_seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.population_size, bool) or not isinstance(self.population_size, int) \
                or self.population_size <= 0:
            raise ValueError(f"population_size must be a positive integer, got {self.population_size!r}.")
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int) or self.iterations < 0:
            raise ValueError(f"iterations must be a non-negative integer, got {self.iterations!r}.")
        self.mutation_probability = check_probability(self.mutation_probability)


@dataclass
class EvolutionResult:
    tour: List[int]
    length: int
    best_ever: List[int]
    best_ever_length: int
    initial_costs: List[int]
    final_costs: List[int]
    history: List[int] = field(default_factory=list)
    generations: int = 0
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum

    def to_dict(self) -> Dict:
        return {
            "tour": self.tour,
            "length": self.length,
            "best_ever": self.best_ever,
            "best_ever_length": self.best_ever_length,
            "initial_costs": self.initial_costs,
            "final_costs": self.final_costs,
            "history": self.history,
            "generations": self.generations,
            "optimum": self.optimum,
            "gap": None if self.optimum is None else self.gap,
        }


class EvolutionLoop:
    """
    Runs a fixed number of generations over one population.

    The loop never stops early. Besides the final population's best tour it
    remembers the best tour seen in any generation, since generational
    replacement can lose it.
    """

    def __init__(
        self,
        config: EvolutionConfig,
        matrix: DistanceMatrix,
        rng: Optional[random.Random] = None,
    ):
        if not isinstance(matrix, DistanceMatrix):
            matrix = DistanceMatrix(matrix)
        self.cfg = config
        self.matrix = matrix
        self.rng = rng or random.Random(config.random_seed)
        self.population = Population(config.population_size, matrix, rng=self.rng)
        self.initial_costs: List[int] = self.population.costs()
        best = self.population.best_route()
        self.best_ever: Tour = best.copy()
        self.history: List[int] = [best.cost]

    @property
    def generation(self) -> int:
        return self.population.generation

    def step(self) -> None:
        self.population.evolve(self.cfg.mutation_probability)
        best = self.population.best_route()
        self.history.append(best.cost)
        if best.cost < self.best_ever.cost:
            self.best_ever = best.copy()
            logger.debug("generation %d: new best %d", self.generation, best.cost)

    def best(self) -> Tour:
        return self.population.best_route()

    def run(self, callback: Optional[Callable[["EvolutionLoop"], None]] = None,
            optimum: Optional[float] = None) -> EvolutionResult:
        logger.info(
            "evolving %d tours over %d cities for %d generations",
            self.cfg.population_size, self.matrix.size, self.cfg.iterations,
        )
        while self.generation < self.cfg.iterations:
            self.step()
            if callback is not None:
                callback(self)
        best = self.best()
        logger.info("finished after %d generations: best=%d", self.generation, best.cost)
        return EvolutionResult(
            tour=list(best.cities),
            length=best.cost,
            best_ever=list(self.best_ever.cities),
            best_ever_length=self.best_ever.cost,
            initial_costs=list(self.initial_costs),
            final_costs=self.population.costs(),
            history=list(self.history),
            generations=self.generation,
            optimum=optimum,
        )


def solve(
    matrix: DistanceMatrix,
    population_size: int,
    iterations: int,
    mutation_probability: float = 0.1,
    random_seed: Optional[int] = None,
    optimum: Optional[float] = None,
) -> EvolutionResult:
    cfg = EvolutionConfig(
        population_size=population_size,
        iterations=iterations,
        mutation_probability=mutation_probability,
        random_seed=random_seed,
    )
    return EvolutionLoop(cfg, matrix).run(optimum=optimum)
