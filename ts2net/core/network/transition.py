"""
Transition (Quantile) Networks.

Values are binned; each bin is a node and every consecutive pair of time
steps adds one to the directed edge bin(x[t]) -> bin(x[t+1]).
"""

from typing import Sequence, Union

import networkx as nx
import numpy as np
import pandas as pd


def transition_counts(codes: np.ndarray, num_bins: int) -> np.ndarray:
    """(num_bins, num_bins) matrix of observed bin-to-bin transitions."""
    counts = np.zeros((num_bins, num_bins))
    if len(codes) > 1:
        np.add.at(counts, (codes[:-1], codes[1:]), 1)
    return counts


def tsnet_qn(
    x,
    breaks: Union[int, Sequence[float]],
    weighted: bool = True,
    remove_loops: bool = False,
) -> nx.DiGraph:
    """
    Transition network of a time series.

    Args:
        x: Time series (no NaN)
        breaks: Number of equal-width bins over the range of x, or the
            explicit bin edges (every value must fall inside them)
        weighted: Row-normalised transition probabilities if True, raw
            counts otherwise
        remove_loops: Drop bin-to-itself transitions before normalising

    Returns:
        networkx DiGraph on bins 0..k-1 with a 'weight' edge attribute and
        'lower'/'upper' node attributes. A bin without outgoing transitions
        has no outgoing edges.
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    if np.isnan(x).any():
        raise ValueError("Time series contains NaN values")
    if len(x) == 0:
        raise ValueError("Time series is empty")
    if np.ndim(breaks) == 0 and int(breaks) < 1:
        raise ValueError(f"breaks must be >= 1, got {breaks}")

    codes, edges = pd.cut(x, bins=breaks, labels=False, include_lowest=True, retbins=True)
    if np.isnan(codes).any():
        raise ValueError("Some values fall outside the given breaks")
    codes = codes.astype(int)
    num_bins = len(edges) - 1

    W = transition_counts(codes, num_bins)
    if remove_loops:
        np.fill_diagonal(W, 0.0)
    if weighted:
        out = W.sum(axis=1, keepdims=True)
        W = np.divide(W, out, out=np.zeros_like(W), where=out > 0)

    G = nx.DiGraph()
    for b in range(num_bins):
        G.add_node(b, lower=float(edges[b]), upper=float(edges[b + 1]))
    rows, cols = np.nonzero(W)
    G.add_weighted_edges_from((int(r), int(c), float(W[r, c])) for r, c in zip(rows, cols))
    return G
