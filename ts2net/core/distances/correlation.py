"""
Correlation Distances.

Turns linear association into a distance in [0, 1]:
- Pearson correlation distance (absolute, positive-only, negative-only)
- Pearson significance-test distance (0 = significant, 1 = not)
- Cross-correlation distance over a lag window

cor_type selects which sign counts as similarity:
    'abs'  1 - |r|
    '+'    1 - max(0, r)
    '-'    1 - max(0, -r)
"""

from typing import NamedTuple, Union

import numpy as np
from scipy import stats

from ts2net.core.distances.options import COR_TYPES, CCF_TYPES


class LaggedDistance(NamedTuple):
    """Cross-correlation distance together with the lag of the maximum."""
    dist: float
    lag: int


def _pair(ts1, ts2):
    x = np.asarray(ts1, dtype=np.float64).ravel()
    y = np.asarray(ts2, dtype=np.float64).ravel()
    if len(x) != len(y):
        raise ValueError(f"Series lengths differ: {len(x)} vs {len(y)}")
    return x, y


def _signed_distance(r: float, cor_type: str) -> float:
    if cor_type == '+':
        return 1.0 - max(0.0, r)
    if cor_type == '-':
        return 1.0 - max(0.0, -r)
    return 1.0 - abs(r)


def tsdist_cor(
    ts1: np.ndarray,
    ts2: np.ndarray,
    cor_type: str = 'abs',
    sig_test: bool = False,
    sig_level: float = 0.01,
) -> float:
    """
    Absolute, positive, or negative correlation distance.

    Args:
        ts1, ts2: Time series of equal length
        cor_type: 'abs', '+' or '-'
        sig_test: If True, return 0 when a two-sided Pearson test rejects
            the null at sig_level with the sign required by cor_type, else 1
        sig_level: Significance level for sig_test

    Returns:
        Distance in [0, 1] (exactly 0 or 1 when sig_test is True)
    """
    if cor_type not in COR_TYPES:
        raise ValueError(f"cor_type must be one of {list(COR_TYPES)}, got {cor_type!r}")
    x, y = _pair(ts1, ts2)

    if not sig_test:
        r = float(np.corrcoef(x, y)[0, 1])
        return _signed_distance(r, cor_type)

    result = stats.pearsonr(x, y)
    r = float(result.statistic)
    p_value = float(result.pvalue)

    if np.isnan(p_value) or p_value >= sig_level:
        return 1.0
    if cor_type == '+':
        return 0.0 if r > 0 else 1.0
    if cor_type == '-':
        return 0.0 if r < 0 else 1.0
    return 0.0


def cross_correlation(
    x: np.ndarray,
    y: np.ndarray,
    lag_max: int,
    type: str = 'correlation',
) -> tuple:
    """
    Sample cross-correlation function cor(x[t+k], y[t]).

    Uses the biased (1/n) estimator so that values stay in [-1, 1].

    Args:
        x, y: Series of equal length
        lag_max: Largest absolute lag (capped at n - 1)
        type: 'correlation' or 'covariance'

    Returns:
        (lags, values), both of length 2 * lag_max + 1, lags ascending
    """
    n = len(x)
    lag_max = min(int(lag_max), n - 1)
    xc = x - x.mean()
    yc = y - y.mean()

    lags = np.arange(-lag_max, lag_max + 1)
    values = np.empty(len(lags))
    for idx, k in enumerate(lags):
        if k >= 0:
            values[idx] = np.dot(xc[k:], yc[:n - k]) / n
        else:
            values[idx] = np.dot(xc[:n + k], yc[-k:]) / n

    if type == 'correlation':
        scale = np.sqrt(np.dot(xc, xc) / n * np.dot(yc, yc) / n)
        values = values / scale

    return lags, values


def tsdist_ccf(
    ts1: np.ndarray,
    ts2: np.ndarray,
    type: str = 'correlation',
    cor_type: str = 'abs',
    directed: bool = False,
    lag_max: int = 10,
    return_lag: bool = False,
) -> Union[float, LaggedDistance]:
    """
    Cross-correlation distance.

    Minimum correlation distance over the lag window [-lag_max, lag_max]
    ([-lag_max, 0] when directed).

    Args:
        ts1, ts2: Time series of equal length
        type: 'correlation' or 'covariance'
        cor_type: 'abs', '+' or '-'
        directed: Only consider non-positive lags
        lag_max: Largest lag considered
        return_lag: Also return the lag with the shortest distance

    Returns:
        1 - max |ccf|, or LaggedDistance(dist, lag) when return_lag is True
    """
    if type not in CCF_TYPES:
        raise ValueError(f"type must be one of {list(CCF_TYPES)}, got {type!r}")
    if cor_type not in COR_TYPES:
        raise ValueError(f"cor_type must be one of {list(COR_TYPES)}, got {cor_type!r}")
    x, y = _pair(ts1, ts2)

    lags, cc = cross_correlation(x, y, lag_max=lag_max, type=type)
    if directed:
        keep = lags <= 0
        lags, cc = lags[keep], cc[keep]

    # Sign filter before taking magnitudes
    if cor_type == '+':
        cc = np.where(cc < 0, 0.0, cc)
    elif cor_type == '-':
        cc = np.where(cc > 0, 0.0, cc)
    cc = np.abs(cc)

    best = int(np.argmax(cc))
    dist = 1.0 - float(cc[best])

    if return_lag:
        return LaggedDistance(dist=dist, lag=int(lags[best]))
    return dist
