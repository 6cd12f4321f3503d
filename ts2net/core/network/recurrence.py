"""
Recurrence Networks.

The series is embedded in a reconstructed phase space (Takens delay
embedding); embedded points are the nodes, and two points are linked when
their distance is within `radius`. The embedding dimension is estimated
with pmtvs' false-nearest-neighbours estimator when not given.
"""

from typing import Optional

import networkx as nx
import numpy as np
from scipy.spatial.distance import pdist, squareform


def delay_embedding(x: np.ndarray, dimension: int, delay: int = 1) -> np.ndarray:
    """
    Time-delay embedding.

    Args:
        x: Time series
        dimension: Embedding dimension
        delay: Time lag between coordinates

    Returns:
        (n - (dimension - 1) * delay, dimension) array, row t is
        (x[t], x[t + delay], ..., x[t + (dimension - 1) * delay])
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    if dimension < 1:
        raise ValueError(f"dimension must be >= 1, got {dimension}")
    if delay < 1:
        raise ValueError(f"delay must be >= 1, got {delay}")

    n_points = len(x) - (dimension - 1) * delay
    if n_points < 1:
        raise ValueError(
            f"Series of length {len(x)} is too short for dimension={dimension}, delay={delay}"
        )
    return np.column_stack([x[k * delay:k * delay + n_points] for k in range(dimension)])


def recurrence_matrix(points: np.ndarray, radius: float, metric: str = 'euclidean') -> np.ndarray:
    """Boolean matrix R[i, j] = dist(points[i], points[j]) <= radius, zero diagonal."""
    if len(points) < 2:
        return np.zeros((len(points), len(points)), dtype=bool)
    R = squareform(pdist(points, metric=metric)) <= radius
    np.fill_diagonal(R, False)
    return R


def tsnet_rn(
    x,
    radius: float,
    embedding_dim: Optional[int] = None,
    time_lag: int = 1,
    metric: str = 'euclidean',
) -> nx.Graph:
    """
    Recurrence network of a time series.

    Args:
        x: Time series (no NaN)
        radius: Recurrence threshold (inclusive)
        embedding_dim: Embedding dimension (estimated when None)
        time_lag: Delay between embedding coordinates
        metric: Any scipy.spatial.distance.pdist metric

    Returns:
        Undirected networkx Graph on embedded points 0..m-1, with
        G.graph['embedding_dim'], G.graph['time_lag'], G.graph['radius']
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    if np.isnan(x).any():
        raise ValueError("Time series contains NaN values")
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")

    if embedding_dim is None:
        from ts2net.core._pmtvs import optimal_dimension
        embedding_dim = int(optimal_dimension(x, time_lag, max_dim=10))

    points = delay_embedding(x, embedding_dim, time_lag)
    R = recurrence_matrix(points, radius, metric)

    G = nx.Graph(embedding_dim=embedding_dim, time_lag=time_lag, radius=radius)
    G.add_nodes_from(range(len(points)))
    rows, cols = np.nonzero(np.triu(R, k=1))
    G.add_edges_from(zip(rows.tolist(), cols.tolist()))
    return G
