"""
Visibility Graphs.

Nodes are the time indices 0..n-1 of one series. Indices p < q are linked
when nothing in between blocks the view:

    nvg (natural)     blocked by any i with x[i] >= x[q] + (x[p] - x[q]) * (q - i) / (q - p)
    hvg (horizontal)  blocked by any i with x[i] >= max(x[p], x[q])

Adjacent indices are always linked. Note that under nvg a point lying
exactly on the line of sight blocks it, so collinear runs only link
their neighbours, while under hvg an ascending run links every pair.

Each index is scanned forward once, keeping the intermediate most likely
to block (steepest slope for nvg, highest value for hvg).
"""

from typing import List, Optional

import networkx as nx
import numpy as np
from joblib import Parallel, delayed


VG_METHODS = ('nvg', 'hvg')


def _nvg_neighbours(x: np.ndarray, p: int, stop: int) -> List[int]:
    if p + 1 >= stop:
        return []
    out = [p + 1]
    steepest = p + 1
    for q in range(p + 2, stop):
        i = steepest
        if not x[i] >= x[q] + (x[p] - x[q]) * (q - i) / (q - p):
            out.append(q)
        # slope(p, q) > slope(p, steepest), denominators are positive
        if (x[q] - x[p]) * (steepest - p) > (x[steepest] - x[p]) * (q - p):
            steepest = q
    return out


def _hvg_neighbours(x: np.ndarray, p: int, stop: int) -> List[int]:
    out = []
    highest = -np.inf
    for q in range(p + 1, stop):
        if highest < max(x[p], x[q]):
            out.append(q)
        highest = max(highest, x[q])
    return out


def _neighbours_chunk(x: np.ndarray, starts: List[int], method: str, limit: Optional[int]):
    scan = _nvg_neighbours if method == 'nvg' else _hvg_neighbours
    n = len(x)
    edges = []
    for p in starts:
        stop = n if limit is None else min(n, p + limit + 1)
        edges.extend((p, q) for q in scan(x, p, stop))
    return edges


def tsnet_vg(x, method: str = 'nvg', limit: Optional[int] = None, n_jobs: int = 1) -> nx.Graph:
    """
    Natural or horizontal visibility graph of a time series.

    Args:
        x: Time series (no NaN)
        method: 'nvg' or 'hvg'
        limit: Maximum temporal distance q - p of a link (None = unbounded)
        n_jobs: joblib workers; the start indices are split into chunks

    Returns:
        Undirected networkx Graph on nodes 0..n-1
    """
    if method not in VG_METHODS:
        raise ValueError(f"method must be one of {list(VG_METHODS)}, got {method!r}")
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    if n_jobs == 0:
        raise ValueError("n_jobs must be a non-zero integer")

    x = np.asarray(x, dtype=np.float64).ravel()
    if np.isnan(x).any():
        raise ValueError("Time series contains NaN values")
    n = len(x)

    if n_jobs == 1:
        edges = _neighbours_chunk(x, list(range(n)), method, limit)
    else:
        chunks = [c.tolist() for c in np.array_split(np.arange(n), max(1, min(n, 4 * abs(n_jobs))))]
        parts = Parallel(n_jobs=n_jobs, prefer="processes")(
            delayed(_neighbours_chunk)(x, chunk, method, limit) for chunk in chunks if chunk
        )
        edges = [e for part in parts for e in part]

    G = nx.Graph()
    G.add_nodes_from(range(n))
    G.add_edges_from(edges)
    return G
