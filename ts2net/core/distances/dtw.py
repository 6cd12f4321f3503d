"""
Dynamic Time Warping Distance.

Thin wrapper over pmtvs.dynamic_time_warping. Returns the raw alignment
cost, which is not bounded to [0, 1]; normalise the resulting matrix with
dist_matrix_normalize() before building weighted networks.
"""

from typing import Optional

import numpy as np


def tsdist_dtw(
    ts1: np.ndarray,
    ts2: np.ndarray,
    window: Optional[int] = None,
) -> float:
    """
    Compute the DTW distance between two time series.

    Args:
        ts1: First time series
        ts2: Second time series (lengths may differ)
        window: Sakoe-Chiba band width, None for no constraint

    Returns:
        DTW alignment cost (float)
    """
    from ts2net.core._pmtvs import dynamic_time_warping

    x = np.asarray(ts1, dtype=np.float64).ravel()
    y = np.asarray(ts2, dtype=np.float64).ravel()

    if window is not None:
        window = int(window)
    return float(dynamic_time_warping(x, y, window=window))
