import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np
import tsplib95

from .matrix import DistanceMatrix, tour_length


logger = logging.getLogger(__name__)


@dataclass
class Instance:
    name: str
    path: Optional[Path]
    matrix: DistanceMatrix
    optimum: Optional[float]


def random_symmetric_matrix(
    num_cities: int, min_distance: int, max_distance: int, rng: Optional[random.Random] = None
) -> DistanceMatrix:
    """Random symmetric matrix with a zero diagonal.

    Every pair of distinct cities gets an integer distance drawn uniformly
    from ``[min_distance, max_distance]``.
    """
    if num_cities < 1:
        raise ValueError(f"Need at least one city, got {num_cities}.")
    if min_distance < 0 or min_distance > max_distance:
        raise ValueError(
            f"Distance bounds must satisfy 0 <= min <= max, got min={min_distance}, max={max_distance}."
        )
    rng = rng or random.Random()
    mat = np.zeros((num_cities, num_cities), dtype=np.int64)
    for i in range(num_cities):
        for j in range(i + 1, num_cities):
            mat[i, j] = mat[j, i] = rng.randint(min_distance, max_distance)
    return DistanceMatrix(mat)


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(matrix: DistanceMatrix, nodes: List, path: Path) -> Optional[float]:
    idx_map = {n: i for i, n in enumerate(nodes)}
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            tour_nodes = list(tour_file.tours[0])
            # Tour files number cities from 1 even when the problem graph starts at 0.
            offset = min(tour_nodes) - min(nodes)
            order = [idx_map[n - offset] for n in tour_nodes]
        except Exception as exc:
            logger.warning("ignoring unreadable tour file %s: %s", candidate, exc)
            continue
        if sorted(order) != list(range(matrix.size)):
            logger.warning("ignoring tour file %s: not a full tour", candidate)
            continue
        return float(tour_length(matrix, order))
    return None


def load_instance(path: Path) -> Instance:
    """Read a TSPLIB problem and, if one sits next to it, its optimal tour."""
    path = Path(path)
    if not path.exists():
        raise RuntimeError(f"TSPLIB file {path} does not exist.")
    problem = tsplib95.load(path)
    graph = problem.get_graph()
    nodes = sorted(graph.nodes())
    matrix = DistanceMatrix.from_graph(graph)
    optimum = _load_optimum(matrix, nodes, path)
    logger.info("loaded %s: %d cities, optimum=%s", problem.name, matrix.size, optimum)
    return Instance(name=problem.name or path.stem, path=path, matrix=matrix, optimum=optimum)
