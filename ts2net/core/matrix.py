"""
Distance Matrix Utilities.

D travels between the engine and the network builders either as a plain
n x n numpy array or as a labelled pandas DataFrame. These helpers accept
both and keep the labels.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


def as_matrix(D) -> Tuple[np.ndarray, Optional[List]]:
    """
    Split D into a float array and its node labels.

    Args:
        D: Square numpy array or DataFrame

    Returns:
        (values copy, labels or None)
    """
    if isinstance(D, pd.DataFrame):
        values = D.to_numpy(dtype=np.float64, copy=True)
        labels = list(D.columns)
    else:
        values = np.array(D, dtype=np.float64, copy=True)
        labels = None

    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        raise ValueError(f"Distance matrix must be square, got shape {values.shape}")
    return values, labels


def like(values: np.ndarray, labels: Optional[Sequence]):
    """Wrap values back into a DataFrame when labels exist."""
    if labels is None:
        return values
    return pd.DataFrame(values, index=list(labels), columns=list(labels))


def dist_matrix_normalize(D, to: Tuple[float, float] = (0.0, 1.0)):
    """
    Rescale a symmetric distance matrix into an interval.

    The upper triangle is min-max rescaled and mirrored; the diagonal is 0.
    NaN cells stay NaN.

    Args:
        D: Distance/similarity matrix
        to: (min_value, max_value) of the target interval

    Returns:
        Normalised matrix, same type and labels as D
    """
    values, labels = as_matrix(D)
    n = values.shape[0]
    lo, hi = to
    iu = np.triu_indices(n, k=1)
    d = values[iu]

    d_min, d_max = np.nanmin(d) if d.size else 0.0, np.nanmax(d) if d.size else 0.0
    if d_max > d_min:
        scaled = lo + (d - d_min) * (hi - lo) / (d_max - d_min)
    else:
        # Constant input maps to the middle of the interval
        scaled = np.where(np.isnan(d), np.nan, (lo + hi) / 2.0)

    out = np.zeros((n, n))
    out[iu] = scaled
    out = out + out.T
    return like(out, labels)


def dist_percentile(D, percentile: float = 0.1, symmetric: bool = True) -> float:
    """
    Distance value at a percentile of the off-diagonal distances.

    Handy to give networks built from different distance functions the same
    link density: use the result as eps in net_enn().

    Args:
        D: Distance matrix (NaN counts as +inf)
        percentile: Quantile in [0, 1]
        symmetric: Use only the upper triangle if True

    Returns:
        Distance threshold
    """
    if not 0 <= percentile <= 1:
        raise ValueError(f"percentile must be in [0, 1], got {percentile}")
    values, _ = as_matrix(D)
    values[np.isnan(values)] = np.inf
    n = values.shape[0]

    if symmetric:
        d = values[np.triu_indices(n, k=1)]
    else:
        d = values[~np.eye(n, dtype=bool)]
    if d.size == 0:
        raise ValueError("Distance matrix has no off-diagonal cells")

    # Linear interpolation between order statistics; an infinite upper
    # neighbour makes the result infinite instead of NaN
    d = np.sort(d)
    h = (d.size - 1) * percentile
    lo = int(np.floor(h))
    hi = min(lo + 1, d.size - 1)
    frac = h - lo
    if frac == 0 or d[hi] == d[lo]:
        return float(d[lo])
    if np.isinf(d[hi]):
        return float(np.inf)
    return float(d[lo] + frac * (d[hi] - d[lo]))
