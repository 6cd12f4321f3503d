"""
Event Sequence Distances
========================

Distances between binary event sequences (1 = event at that index):
- Event synchronization (Quiroga et al. 2002; Boers et al. 2014 raw count)
- Van Rossum spike-train distance (exponential kernel)

Also turns a real-valued time series into an event sequence
(events_from_ts) and draws random event sequences for the null models
used by the significance tests.

Significance testing:
    Both distances can replace their value by a binary decision. Events of
    the same counts are placed uniformly at random `reps` times; the
    observed statistic is compared with the null quantile. 0 means the
    pair is more synchronous than chance, 1 otherwise.

References:
    Quiroga, Kreuz & Grassberger (2002) "Event synchronization: a simple
        and fast method to measure synchronicity and time delay patterns"
    Boers et al. (2014) "Prediction of extreme floods in the eastern
        Central Andes based on a complex networks approach"
    van Rossum (2001) "A novel spike distance"
"""

import math
import warnings
from typing import Optional

import numpy as np

from ts2net.core.distances.options import ES_METHODS


EVENT_METHODS = (
    'greater_than', 'lower_than',
    'top_percentile', 'lower_percentile',
    'highest', 'lowest',
)


# ============================================================
# EVENT EXTRACTION
# ============================================================

def events_from_ts(
    ts: np.ndarray,
    th: Optional[float] = None,
    method: str = 'greater_than',
    return_marked_times: bool = False,
) -> np.ndarray:
    """
    Extract events from a time series.

    Args:
        ts: Time series
        th: Threshold (greater_than / lower_than), percentile in [0, 1]
            (top_percentile / lower_percentile), or event count in
            [0, len(ts)] (highest / lowest)
        method: One of:
            greater_than      values >= th
            lower_than        values <= th
            top_percentile    values >= the (1 - th) quantile
            lower_percentile  values <= the th quantile
            highest           the th largest values
            lowest            the th smallest values
        return_marked_times: Return event indices instead of the binary series

    Returns:
        Binary event sequence (float 0/1), or 0-based event indices
    """
    if method not in EVENT_METHODS:
        raise ValueError(f"method must be one of {list(EVENT_METHODS)}, got {method!r}")
    x = np.asarray(ts, dtype=np.float64).ravel()

    if method in ('top_percentile', 'lower_percentile'):
        if th is None or th < 0 or th > 1:
            raise ValueError("Please inform the percentile th in [0, 1].")
    elif method in ('greater_than', 'lower_than'):
        if th is None:
            raise ValueError("Please inform the threshold th.")
    else:
        if th is None:
            raise ValueError(f"Please inform the desired number of {method} values.")
        if th < 0 or th > len(x) or int(th) != th:
            raise ValueError(
                f"Please inform a valid number of {method} values: "
                f"an integer in [0, {len(x)}], got {th}."
            )

    ets = np.zeros(len(x))
    if method == 'greater_than':
        ets[x >= th] = 1
    elif method == 'lower_than':
        ets[x <= th] = 1
    elif method == 'top_percentile':
        ets[x >= np.quantile(x, 1 - th)] = 1
    elif method == 'lower_percentile':
        ets[x <= np.quantile(x, th)] = 1
    elif method == 'highest':
        ets[np.argsort(-x, kind='stable')[:int(th)]] = 1
    else:
        ets[np.argsort(x, kind='stable')[:int(th)]] = 1

    if return_marked_times:
        return np.flatnonzero(ets == 1)
    return ets


def random_events(
    ts_length: int,
    num_events: int,
    rng: Optional[np.random.Generator] = None,
    return_marked_times: bool = False,
) -> np.ndarray:
    """
    Random event sequence with uniformly placed events.

    Args:
        ts_length: Sequence length
        num_events: Number of events (clamped to ts_length with a warning)
        rng: numpy Generator (a fresh default_rng() when None)
        return_marked_times: Return sorted event indices instead

    Returns:
        Binary event sequence, or event indices
    """
    if num_events > ts_length:
        warnings.warn(
            f"Desired number of events ({num_events}) larger than the time series "
            f"length ({ts_length}). Returning {ts_length} events.",
            RuntimeWarning,
            stacklevel=2,
        )
        num_events = ts_length
    rng = rng if rng is not None else np.random.default_rng()

    marked = np.sort(rng.choice(ts_length, size=num_events, replace=False))
    if return_marked_times:
        return marked
    ets = np.zeros(ts_length)
    ets[marked] = 1
    return ets


def _event_times(ets) -> np.ndarray:
    return np.flatnonzero(np.asarray(ets, dtype=np.float64).ravel() > 0).astype(np.float64)


def _check_lengths(ets1, ets2) -> int:
    n1, n2 = len(np.ravel(ets1)), len(np.ravel(ets2))
    if n1 != n2:
        raise ValueError(f"Event sequence lengths differ: {n1} vs {n2}")
    return n1


def _null_samples(statistic, n, n1, n2, reps, seed):
    """Statistic over `reps` random placements with the observed counts."""
    rng = np.random.default_rng(seed)
    return np.array([
        statistic(
            random_events(n, n1, rng, return_marked_times=True).astype(np.float64),
            random_events(n, n2, rng, return_marked_times=True).astype(np.float64),
        )
        for _ in range(reps)
    ])


# ============================================================
# EVENT SYNCHRONIZATION
# ============================================================

def _local_gaps(t: np.ndarray) -> np.ndarray:
    """Smallest distance from each event to its neighbouring events."""
    if len(t) == 0:
        return t
    d = np.diff(t)
    before = np.concatenate(([np.inf], d))
    after = np.concatenate((d, [np.inf]))
    return np.minimum(before, after)


def event_sync_count(tx: np.ndarray, ty: np.ndarray, tau_max: float = math.inf) -> float:
    """
    Number of synchronised event pairs, c(x|y) + c(y|x).

    The coincidence window of a pair is half the smallest local
    inter-event gap of either event, capped at tau_max. Simultaneous
    events count 1/2 in each direction.

    Args:
        tx, ty: Event times (sorted)
        tau_max: Cap on the adaptive window

    Returns:
        Synchronisation count
    """
    if len(tx) == 0 or len(ty) == 0:
        return 0.0
    delay = tx[:, None] - ty[None, :]
    tau = np.minimum(_local_gaps(tx)[:, None], _local_gaps(ty)[None, :]) / 2.0
    tau = np.minimum(tau, tau_max)

    same = np.count_nonzero(delay == 0)
    c_xy = np.count_nonzero((delay > 0) & (delay <= tau)) + 0.5 * same
    c_yx = np.count_nonzero((delay < 0) & (-delay <= tau)) + 0.5 * same
    return float(c_xy + c_yx)


def _es_statistic(tx, ty, tau_max, method):
    count = event_sync_count(tx, ty, tau_max)
    if method == 'boers':
        return count
    if len(tx) == 0 or len(ty) == 0:
        return np.nan
    return count / math.sqrt(len(tx) * len(ty))


def tsdist_es(
    ets1: np.ndarray,
    ets2: np.ndarray,
    tau_max: float = math.inf,
    method: str = 'quiroga',
    sig_test: bool = False,
    reps: int = 100,
    alpha: float = 0.05,
    seed: Optional[int] = None,
) -> float:
    """
    Event synchronization distance.

    Args:
        ets1, ets2: Binary event sequences of equal length
        tau_max: Cap on the adaptive coincidence window
        method: 'quiroga' (count / sqrt(N1 * N2)) or 'boers' (raw count,
            only with sig_test)
        sig_test: Binary decision against random event placements
        reps: Null-model resamples
        alpha: Significance level
        seed: Seed for the null model

    Returns:
        1 - Q (quiroga), or 0/1 when sig_test is True. Sequences without
        events are at distance 1.
    """
    if method not in ES_METHODS:
        raise ValueError(f"method must be one of {list(ES_METHODS)}, got {method!r}")
    if method == 'boers' and not sig_test:
        raise ValueError("method='boers' is only valid with sig_test=True")
    if tau_max < 0:
        raise ValueError(f"tau_max must be >= 0, got {tau_max}")

    n = _check_lengths(ets1, ets2)
    tx, ty = _event_times(ets1), _event_times(ets2)
    if len(tx) == 0 or len(ty) == 0:
        return 1.0

    observed = _es_statistic(tx, ty, tau_max, method)

    if not sig_test:
        return float(1.0 - observed)

    null = _null_samples(
        lambda a, b: _es_statistic(a, b, tau_max, method),
        n, len(tx), len(ty), reps, seed,
    )
    return 0.0 if observed > np.quantile(null, 1 - alpha) else 1.0


# ============================================================
# VAN ROSSUM
# ============================================================

def van_rossum_similarity(tx: np.ndarray, ty: np.ndarray, tau: float = 1.0) -> float:
    """
    Normalised inner product of exponentially filtered spike trains.

    With f(t) = sum_i exp(-(t - t_i) / tau) for t >= t_i, the inner
    product <f, g> is proportional to sum_ij exp(-|t_i - s_j| / tau).

    Returns:
        <f, g> / sqrt(<f, f> <g, g>) in [0, 1]; NaN when tau <= 0 or a
        train is empty
    """
    if tau <= 0 or len(tx) == 0 or len(ty) == 0:
        return np.nan

    def _inner(a, b):
        return float(np.exp(-np.abs(a[:, None] - b[None, :]) / tau).sum())

    return _inner(tx, ty) / math.sqrt(_inner(tx, tx) * _inner(ty, ty))


def _vr_distance(tx, ty, tau):
    d = 1.0 - van_rossum_similarity(tx, ty, tau)
    return 1.0 if np.isnan(d) else d


def tsdist_vr(
    ets1: np.ndarray,
    ets2: np.ndarray,
    tau: float = 1.0,
    sig_test: bool = False,
    reps: int = 100,
    alpha: float = 0.05,
    seed: Optional[int] = None,
) -> float:
    """
    Van Rossum distance.

    Args:
        ets1, ets2: Binary event sequences of equal length
        tau: Kernel time constant
        sig_test: Binary decision against random event placements
        reps: Null-model resamples
        alpha: Significance level
        seed: Seed for the null model

    Returns:
        1 - similarity in [0, 1] (undefined similarity gives 1), or 0/1
        when sig_test is True
    """
    n = _check_lengths(ets1, ets2)
    tx, ty = _event_times(ets1), _event_times(ets2)
    observed = _vr_distance(tx, ty, tau)

    if not sig_test:
        return float(observed)
    if len(tx) == 0 or len(ty) == 0 or tau <= 0:
        return 1.0

    null = _null_samples(
        lambda a, b: _vr_distance(a, b, tau),
        n, len(tx), len(ty), reps, seed,
    )
    return 0.0 if observed < np.quantile(null, alpha) else 1.0
