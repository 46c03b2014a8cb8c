import logging
from typing import Iterator, Sequence, Tuple

import networkx as nx
import numpy as np


logger = logging.getLogger(__name__)


def tour_length(matrix: "DistanceMatrix", tour: Sequence[int]) -> int:
    rows = matrix.rows
    dist = 0
    n = len(tour)
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += rows[a][b]
    return dist


class DistanceMatrix:
    """
    Read-only square table of non-negative integer distances.

    The table must be symmetric with a zero diagonal. It is validated once
    here and shared by reference between every tour and generation.
    """

    def __init__(self, data):
        arr = np.asarray(data)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {arr.shape}.")
        if arr.shape[0] == 0:
            raise ValueError("Distance matrix must contain at least one city.")
        if arr.dtype.kind not in "iuf":
            raise ValueError(f"Distance matrix must hold numbers, got dtype {arr.dtype}.")
        if arr.dtype.kind == "f":
            if not np.all(np.isfinite(arr)) or not np.array_equal(arr, np.round(arr)):
                raise ValueError("Distance matrix entries must be integers.")
        arr = arr.astype(np.int64)
        if (arr < 0).any():
            i, j = np.argwhere(arr < 0)[0]
            raise ValueError(f"Negative distance {arr[i, j]} between cities {i} and {j}.")
        diag = np.diagonal(arr)
        if diag.any():
            i = int(np.flatnonzero(diag)[0])
            raise ValueError(f"Distance from city {i} to itself must be 0, got {diag[i]}.")
        if not np.array_equal(arr, arr.T):
            i, j = np.argwhere(arr != arr.T)[0]
            raise ValueError(
                f"Distance matrix is not symmetric: d[{i}][{j}]={arr[i, j]} but d[{j}][{i}]={arr[j, i]}."
            )
        arr.flags.writeable = False
        self._arr = arr
        # Plain ints are much faster than numpy scalars for per-element lookups.
        self.rows: Tuple[Tuple[int, ...], ...] = tuple(tuple(int(v) for v in row) for row in arr)
        logger.debug("distance matrix ready: %d cities", len(self.rows))

    @classmethod
    def from_graph(cls, graph: nx.Graph, weight: str = "weight") -> "DistanceMatrix":
        nodes = sorted(graph.nodes())
        idx_map = {n: i for i, n in enumerate(nodes)}
        mat = np.zeros((len(nodes), len(nodes)), dtype=float)
        for u, v, w in graph.edges(data=weight, default=0):
            if u == v:
                continue
            mat[idx_map[u], idx_map[v]] = w
            mat[idx_map[v], idx_map[u]] = w
        return cls(mat)

    def to_graph(self) -> nx.Graph:
        graph = nx.Graph()
        n = self.size
        graph.add_nodes_from(range(n))
        for i in range(n):
            for j in range(i + 1, n):
                graph.add_edge(i, j, weight=self.rows[i][j])
        return graph

    @property
    def size(self) -> int:
        return len(self.rows)

    def dist(self, i: int, j: int) -> int:
        return self.rows[i][j]

    def as_array(self) -> np.ndarray:
        return self._arr

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, key):
        return self._arr[key]

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        return iter(self.rows)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DistanceMatrix):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash(self.rows)

    def __repr__(self) -> str:
        return f"DistanceMatrix(size={self.size})"
