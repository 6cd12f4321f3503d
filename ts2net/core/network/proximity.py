"""
Proximity Networks from a Distance Matrix.

Nodes are the series (labels of a labelled D, else positions 0..n-1).

    net_knn                 k nearest neighbours of every node, OR-combined
    net_knn_approx          same, through a scikit-learn neighbour index
    net_enn                 every pair with D <= eps
    net_enn_approx          same, through a radius-neighbour index
    net_weighted            complete weighted graph (eps = inf)
    net_significant_links   pairs flagged 0 by a significance-tested distance

NaN cells are never guessed: the eps family replaces them with
treat_na_as (1 by default, i.e. "no link" for distances in [0, 1]) and
the k-NN family refuses them.
"""

import logging
from typing import List, Optional

import networkx as nx
import numpy as np
from sklearn.neighbors import NearestNeighbors

from ts2net.core.matrix import as_matrix

logger = logging.getLogger(__name__)


def _node_ids(n: int, labels: Optional[List]) -> List:
    return list(labels) if labels is not None else list(range(n))


def _empty_graph(nodes: List, directed: bool = False) -> nx.Graph:
    G = nx.DiGraph() if directed else nx.Graph()
    G.add_nodes_from(nodes)
    return G


def _fill_na(values: np.ndarray, treat_na_as: Optional[float]) -> np.ndarray:
    nas = np.isnan(values)
    if nas.any():
        if treat_na_as is None:
            raise ValueError(
                f"Distance matrix has {int(nas.sum())} NaN cells; pass treat_na_as to resolve them"
            )
        values[nas] = treat_na_as
    return values


def _check_k(k: int, n: int) -> None:
    if not 1 <= k <= n - 1:
        raise ValueError(f"k must be in [1, {n - 1}] for {n} nodes, got {k}")


def _check_no_na(values: np.ndarray) -> None:
    if np.isnan(values).any():
        raise ValueError("Distance matrix has NaN cells; resolve them before building a k-NN network")


def _undirected_from_adjacency(A: np.ndarray, nodes: List) -> nx.Graph:
    """Simple undirected graph with an edge wherever A or its transpose is set."""
    A = A | A.T
    rows, cols = np.nonzero(np.triu(A, k=1))
    G = _empty_graph(nodes)
    G.add_edges_from((nodes[r], nodes[c]) for r, c in zip(rows, cols))
    return G


# ============================================================
# k NEAREST NEIGHBOURS
# ============================================================

def net_knn(D, k: int) -> nx.Graph:
    """
    k-nearest-neighbour network.

    Each node selects its k closest other nodes (ties by index order); an
    edge exists when either endpoint selected the other, so every degree
    is at least k.

    Args:
        D: Distance matrix (ndarray or labelled DataFrame), no NaN
        k: Neighbours per node, 1 <= k <= n-1

    Returns:
        Undirected networkx Graph

    Raises:
        ValueError: k outside [1, n-1]. A collection too small for k
            neighbours is a usage error, not a complete graph.
    """
    values, labels = as_matrix(D)
    n = values.shape[0]
    _check_no_na(values)
    _check_k(k, n)

    np.fill_diagonal(values, np.inf)
    nearest = np.argsort(values, axis=1, kind='stable')[:, :k]

    A = np.zeros((n, n), dtype=bool)
    A[np.arange(n)[:, None], nearest] = True

    G = _undirected_from_adjacency(A, _node_ids(n, labels))
    logger.info("k-NN network (k=%d): %d nodes, %d edges", k, G.number_of_nodes(), G.number_of_edges())
    return G


def net_knn_approx(D, k: int, n_jobs: Optional[int] = None) -> nx.Graph:
    """
    k-nearest-neighbour network through sklearn's NearestNeighbors.

    Uses the precomputed distances directly; with large collections the
    index may resolve ties differently than net_knn().

    Args:
        D: Distance matrix, non-negative, no NaN
        k: Neighbours per node
        n_jobs: Workers for the neighbour search

    Returns:
        Undirected networkx Graph
    """
    values, labels = as_matrix(D)
    n = values.shape[0]
    _check_no_na(values)
    _check_k(k, n)

    nn = NearestNeighbors(n_neighbors=k, metric='precomputed', n_jobs=n_jobs)
    nn.fit(values)
    # No query points: each node's own row, excluding itself
    neighbours = nn.kneighbors(return_distance=False)

    A = np.zeros((n, n), dtype=bool)
    A[np.arange(n)[:, None], neighbours] = True
    return _undirected_from_adjacency(A, _node_ids(n, labels))


# ============================================================
# EPSILON NEIGHBOURHOOD
# ============================================================

def net_enn(
    D,
    eps: float,
    treat_na_as: Optional[float] = 1.0,
    directed: bool = False,
    weighted: bool = False,
    invert_dist_as_weight: bool = True,
) -> nx.Graph:
    """
    epsilon-neighbourhood network: an edge for every pair with D <= eps.

    Args:
        D: Distance matrix (ndarray or labelled DataFrame)
        eps: Distance threshold (inclusive)
        treat_na_as: Replacement for NaN cells; None makes NaN an error
        directed: DiGraph from D[i, j] if True; otherwise an undirected
            edge when either direction qualifies, weighted by the larger
            of the two weights
        weighted: Attach a 'weight' edge attribute
        invert_dist_as_weight: weight = 1 - D (requires D <= 1) instead of D

    Returns:
        networkx Graph or DiGraph, no self-loops
    """
    values, labels = as_matrix(D)
    n = values.shape[0]
    values = _fill_na(values, treat_na_as)

    if weighted and invert_dist_as_weight and (values > 1).any():
        raise ValueError(
            "With invert_dist_as_weight=True the edge weight is 1 - d, "
            "so every distance in D must lie in [0, 1]"
        )

    mask = values <= eps
    np.fill_diagonal(mask, False)
    weights = 1.0 - values if invert_dist_as_weight else values

    nodes = _node_ids(n, labels)
    G = _empty_graph(nodes, directed)

    if directed:
        rows, cols = np.nonzero(mask)
    else:
        # -inf marks "no edge" so the max over both directions keeps the real weight
        W = np.where(mask, weights, -np.inf)
        weights = np.maximum(W, W.T)
        mask = mask | mask.T
        rows, cols = np.nonzero(np.triu(mask, k=1))

    if weighted:
        G.add_weighted_edges_from(
            (nodes[r], nodes[c], float(weights[r, c])) for r, c in zip(rows, cols)
        )
    else:
        G.add_edges_from((nodes[r], nodes[c]) for r, c in zip(rows, cols))

    logger.info("eps-NN network (eps=%g): %d nodes, %d edges", eps, G.number_of_nodes(), G.number_of_edges())
    return G


def net_enn_approx(D, eps: float, treat_na_as: float = 1.0, n_jobs: Optional[int] = None) -> nx.Graph:
    """
    epsilon-neighbourhood network through sklearn's radius neighbours.

    Args:
        D: Distance matrix, non-negative
        eps: Radius (inclusive)
        treat_na_as: Replacement for NaN cells
        n_jobs: Workers for the neighbour search

    Returns:
        Undirected, unweighted networkx Graph
    """
    values, labels = as_matrix(D)
    n = values.shape[0]
    values = _fill_na(values, treat_na_as)

    nn = NearestNeighbors(radius=eps, metric='precomputed', n_jobs=n_jobs)
    nn.fit(values)
    neighbours = nn.radius_neighbors(return_distance=False)

    A = np.zeros((n, n), dtype=bool)
    for i, idx in enumerate(neighbours):
        A[i, idx] = True
    np.fill_diagonal(A, False)
    return _undirected_from_adjacency(A, _node_ids(n, labels))


def net_weighted(D, invert_dist_as_weight: bool = True) -> nx.Graph:
    """Complete weighted network (every off-diagonal pair linked)."""
    return net_enn(D, eps=np.inf, weighted=True, invert_dist_as_weight=invert_dist_as_weight)


def net_significant_links(D, directed: bool = False) -> nx.Graph:
    """
    Network of significant links from a binary distance matrix.

    Expects D from a significance-tested distance (0 = significant,
    1 = not); NaN cells count as not significant.
    """
    return net_enn(D, eps=0.0, treat_na_as=1.0, directed=directed)
