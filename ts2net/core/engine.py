"""
Pairwise Distance Engine
========================

Computes the distance matrix D of a series collection with any distance
function:

    D = ts_dist(ts_list, tsdist_cor, options=CorrelationOptions(cor_type='+'), n_jobs=4)

Pair enumeration (deterministic, lexicographic):
    symmetric     all C(n, 2) pairs i < j, D[i, j] = D[j, i] = d(i, j)
    asymmetric    all n^2 ordered pairs (self-pairs computed, not assumed 0),
                  D[i, j] = d(i, j) only

Parallelism:
    One joblib task per pair. n_jobs=1 runs in-process. Results are placed
    by pair index, so completion order never matters.

Failure isolation:
    An exception raised for one pair never aborts the run. The pair gets
    error_value (NaN by default) and, with warn_error=True, a single
    RuntimeWarning lists every failed pair by its 1-based indices.
"""

import itertools
import logging
import warnings
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from ts2net.core.distances.correlation import tsdist_cor
from ts2net.core.distances.options import options_to_kwargs
from ts2net.core.series import as_series_collection

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]


def pair_indices(n: int, symmetric: bool = True) -> List[Pair]:
    """
    Enumerate the 0-based pairs evaluated for n series.

    Args:
        n: Number of series
        symmetric: Unordered pairs i < j if True, all ordered pairs otherwise

    Returns:
        List of (i, j) in lexicographic order
    """
    if symmetric:
        return list(itertools.combinations(range(n), 2))
    return list(itertools.product(range(n), repeat=2))


# ============================================================
# WORKERS
# ============================================================

def _compute_one(
    dist_func: Callable,
    ts1: np.ndarray,
    ts2: np.ndarray,
    kwargs: Dict[str, Any],
    error_value: float,
) -> Tuple[float, Optional[str]]:
    """Evaluate one pair. Runs in a worker; never raises."""
    try:
        return float(dist_func(ts1, ts2, **kwargs)), None
    except Exception as e:
        return error_value, f"{type(e).__name__}: {e}"


def _report_failures(pairs: Sequence[Pair], results, warn_error: bool) -> None:
    failed = [(pair, err) for pair, (_, err) in zip(pairs, results) if err is not None]
    if not failed:
        return

    for pair, err in failed:
        logger.debug("Distance failed for pair %s: %s", pair, err)

    if warn_error:
        listed = ", ".join(str(pair) for pair, _ in failed[:20])
        more = f" and {len(failed) - 20} more" if len(failed) > 20 else ""
        warnings.warn(
            f"Error when calculating distance between time series {listed}{more}",
            RuntimeWarning,
            stacklevel=3,
        )


def run_pairs(
    tasks: Sequence,
    pairs: Sequence[Pair],
    warn_error: bool = True,
    n_jobs: int = 1,
) -> List[float]:
    """
    Execute prepared per-pair tasks and report failures.

    Args:
        tasks: joblib delayed calls returning (value, error_or_None)
        pairs: 1-based pair labels, aligned with tasks (used in warnings)
        warn_error: Emit a RuntimeWarning listing failed pairs
        n_jobs: joblib worker count

    Returns:
        Values aligned with pairs
    """
    if n_jobs == 0:
        raise ValueError("n_jobs must be a non-zero integer")

    logger.info("Computing %d pair distances on %s worker(s)", len(pairs), n_jobs)
    results = Parallel(n_jobs=n_jobs, prefer="processes")(tasks) if tasks else []
    _report_failures(pairs, results, warn_error)
    return [value for value, _ in results]


# ============================================================
# DISTANCE MATRIX
# ============================================================

def ts_dist(
    ts_list,
    dist_func: Callable = tsdist_cor,
    options=None,
    symmetric: bool = True,
    error_value: float = np.nan,
    warn_error: bool = True,
    n_jobs: int = 1,
):
    """
    Distance matrix between all series of a collection.

    Args:
        ts_list: List/tuple of arrays, dict name -> array, or DataFrame
        dist_func: Distance function (ts1, ts2, **options) -> float
        options: DistanceOptions instance or dict forwarded to dist_func
        symmetric: Whether dist_func is symmetric
        error_value: Value stored for pairs whose computation fails
        warn_error: Warn about failed pairs
        n_jobs: Number of parallel workers (joblib semantics, -1 = all cores)

    Returns:
        n x n numpy array, or a DataFrame labelled with the series names
        when the collection is named
    """
    collection = as_series_collection(ts_list)
    kwargs = options_to_kwargs(options)
    n = len(collection)

    pairs = pair_indices(n, symmetric)
    tasks = [
        delayed(_compute_one)(dist_func, collection[i], collection[j], kwargs, error_value)
        for i, j in pairs
    ]
    # Warnings name pairs 1-based, as in record batches
    labels = [(i + 1, j + 1) for i, j in pairs]
    values = run_pairs(tasks, labels, warn_error=warn_error, n_jobs=n_jobs)

    D = np.zeros((n, n))
    if pairs:
        rows, cols = np.array(pairs).T
        D[rows, cols] = values
        if symmetric:
            D[cols, rows] = values

    if collection.names is not None:
        return pd.DataFrame(D, index=collection.names, columns=collection.names)
    return D
