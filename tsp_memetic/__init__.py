"""
Memetic search for the symmetric TSP: a generational GA whose children are
polished by a greedy position-swap hill climb.
"""

from .evolution import EvolutionConfig, EvolutionLoop, EvolutionResult, solve
from .matrix import DistanceMatrix, tour_length
from .population import Population
from .tour import Tour

__all__ = [
    "DistanceMatrix",
    "EvolutionConfig",
    "EvolutionLoop",
    "EvolutionResult",
    "Population",
    "Tour",
    "solve",
    "tour_length",
]
