"""
Information-Theoretic Distances.

Computes distances from discretised joint distributions:
- Normalized mutual information distance (1 - I / normaliser)
- Variation of information (H1 + H2 - 2I)
- Maximal information coefficient distance (1 - MIC)

Binning:
    The bin count comes from the longer series (first series on ties),
    either given explicitly or by a rule ('sturges', 'freedman-diaconis',
    'scott'). Each series is then cut into that many equal-width bins over
    its own range.

Entropy estimators (all in nats, via scipy.stats.entropy):
    emp   plug-in estimate
    mm    Miller-Madow bias correction, + (m - 1) / (2n)
    sg    Schurmann-Grassberger, pseudo-count 1/m on each of the m observed cells
"""

from typing import Union

import numpy as np
from scipy import stats

from ts2net.core.distances.options import NBINS_RULES, NMI_NORMALIZATIONS, ENTROPY_METHODS


_NUMPY_RULES = {
    'sturges': 'sturges',
    'freedman-diaconis': 'fd',
    'scott': 'scott',
}


# ============================================================
# DISCRETISATION
# ============================================================

def num_bins(ts1: np.ndarray, ts2: np.ndarray, nbins: Union[int, str] = 'sturges') -> int:
    """
    Bin count for a pair of series.

    Args:
        ts1, ts2: Time series
        nbins: Explicit count or rule name

    Returns:
        Number of bins (>= 1)
    """
    if not isinstance(nbins, str):
        if nbins < 1:
            raise ValueError(f"nbins must be >= 1, got {nbins}")
        return int(nbins)
    if nbins not in NBINS_RULES:
        raise ValueError(f"nbins must be an integer or one of {list(NBINS_RULES)}, got {nbins!r}")

    longer = ts1 if len(ts1) >= len(ts2) else ts2
    edges = np.histogram_bin_edges(longer, bins=_NUMPY_RULES[nbins])
    return max(1, len(edges) - 1)


def discretize(x: np.ndarray, nbins: int) -> np.ndarray:
    """Equal-width bin labels 0..nbins-1 over the range of x."""
    lo, hi = float(np.min(x)), float(np.max(x))
    if hi == lo:
        return np.zeros(len(x), dtype=np.int64)
    labels = np.floor((x - lo) / (hi - lo) * nbins).astype(np.int64)
    return np.clip(labels, 0, nbins - 1)


# ============================================================
# ENTROPY
# ============================================================

def entropy_from_counts(counts: np.ndarray, method: str = 'emp') -> float:
    """
    Entropy (nats) of a histogram.

    Args:
        counts: Counts over every possible cell, empty cells included
            (sg ignores them)
        method: 'emp', 'mm' or 'sg'

    Returns:
        Entropy estimate
    """
    if method not in ENTROPY_METHODS:
        raise ValueError(f"method must be one of {list(ENTROPY_METHODS)}, got {method!r}")
    counts = np.asarray(counts, dtype=np.float64).ravel()
    n = counts.sum()

    if method == 'sg':
        observed = counts[counts > 0]
        if observed.size == 0:
            return 0.0
        return float(stats.entropy(observed + 1.0 / observed.size))

    h = float(stats.entropy(counts[counts > 0]))
    if method == 'mm':
        m = np.count_nonzero(counts)
        h += (m - 1) / (2.0 * n)
    return h


def _entropies(ts1, ts2, nbins, method):
    x = np.asarray(ts1, dtype=np.float64).ravel()
    y = np.asarray(ts2, dtype=np.float64).ravel()
    if len(x) != len(y):
        raise ValueError(f"Series lengths differ: {len(x)} vs {len(y)}")

    k = num_bins(x, y, nbins)
    bx = discretize(x, k)
    by = discretize(y, k)

    h1 = entropy_from_counts(np.bincount(bx, minlength=k), method)
    h2 = entropy_from_counts(np.bincount(by, minlength=k), method)
    h12 = entropy_from_counts(np.bincount(bx * k + by, minlength=k * k), method)
    mi = h1 + h2 - h12
    return h1, h2, mi


# ============================================================
# DISTANCES
# ============================================================

def tsdist_voi(
    ts1: np.ndarray,
    ts2: np.ndarray,
    nbins: Union[int, str] = 'sturges',
    method: str = 'emp',
) -> float:
    """
    Variation of information distance, H1 + H2 - 2I.

    Args:
        ts1, ts2: Time series of equal length
        nbins: Bin count or rule
        method: Entropy estimator

    Returns:
        VoI in nats (0 for identical discretisations)
    """
    h1, h2, mi = _entropies(ts1, ts2, nbins, method)
    return float(h1 + h2 - 2.0 * mi)


def tsdist_nmi(
    ts1: np.ndarray,
    ts2: np.ndarray,
    nbins: Union[int, str] = 'sturges',
    normalization: str = 'sum',
    method: str = 'emp',
) -> float:
    """
    Normalized mutual information distance, 1 - I / normaliser.

    Args:
        ts1, ts2: Time series of equal length
        nbins: Bin count or rule
        normalization: 'sum' -> (H1 + H2) / 2, 'min', 'max', 'sqrt' -> sqrt(H1 * H2)
        method: Entropy estimator

    Returns:
        Distance in [0, 1], NaN when the normaliser is zero
    """
    if normalization not in NMI_NORMALIZATIONS:
        raise ValueError(
            f"normalization must be one of {list(NMI_NORMALIZATIONS)}, got {normalization!r}"
        )
    h1, h2, mi = _entropies(ts1, ts2, nbins, method)

    if normalization == 'min':
        norm = min(h1, h2)
    elif normalization == 'max':
        norm = max(h1, h2)
    elif normalization == 'sqrt':
        norm = np.sqrt(h1 * h2)
    else:
        norm = 0.5 * (h1 + h2)

    if norm <= 0:
        return np.nan
    return float(1.0 - mi / norm)


def mic(ts1: np.ndarray, ts2: np.ndarray, alpha: float = 0.6) -> float:
    """
    Maximal information coefficient.

    Grid search over equal-frequency partitions with nx * ny <= n ** alpha,
    scoring each grid by I / log(min(nx, ny)).

    Args:
        ts1, ts2: Time series of equal length (>= 4 samples)
        alpha: Grid budget exponent

    Returns:
        MIC in [0, 1]; 0 when either series is constant
    """
    x = np.asarray(ts1, dtype=np.float64).ravel()
    y = np.asarray(ts2, dtype=np.float64).ravel()
    n = len(x)
    if n != len(y):
        raise ValueError(f"Series lengths differ: {n} vs {len(y)}")
    if n < 4:
        raise ValueError(f"MIC needs at least 4 samples, got {n}")
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0

    budget = max(4, int(np.floor(n ** alpha)))
    rx = stats.rankdata(x, method='ordinal').astype(np.int64) - 1
    ry = stats.rankdata(y, method='ordinal').astype(np.int64) - 1

    best = 0.0
    for nx in range(2, budget // 2 + 1):
        bx = (rx * nx) // n
        hx = stats.entropy(np.bincount(bx, minlength=nx))
        for ny in range(2, budget // nx + 1):
            by = (ry * ny) // n
            hy = stats.entropy(np.bincount(by, minlength=ny))
            joint = np.bincount(bx * ny + by, minlength=nx * ny)
            hxy = stats.entropy(joint[joint > 0])
            score = (hx + hy - hxy) / np.log(min(nx, ny))
            best = max(best, float(score))

    return float(min(best, 1.0))


def tsdist_mic(ts1: np.ndarray, ts2: np.ndarray, alpha: float = 0.6) -> float:
    """
    Maximal information coefficient distance, 1 - MIC.

    Args:
        ts1, ts2: Time series of equal length
        alpha: Grid budget exponent

    Returns:
        Distance in [0, 1]
    """
    return 1.0 - mic(ts1, ts2, alpha=alpha)
