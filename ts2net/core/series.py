"""
Series Collections.

Normalises the accepted inputs into one shape for the engines:

    list / tuple of arrays   -> unnamed collection
    dict name -> array       -> named collection (insertion order)
    pandas.DataFrame         -> named collection, one column per series

Series may have different lengths; distance functions that need equal
lengths raise, and the engine turns that into the error sentinel.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class SeriesCollection:
    """Ordered time series with optional names."""
    values: List[np.ndarray]
    names: Optional[List[str]] = None

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, idx: int) -> np.ndarray:
        return self.values[idx]


def as_series_collection(ts_list) -> SeriesCollection:
    """
    Build a SeriesCollection from a list, dict, DataFrame or collection.

    Args:
        ts_list: Series container

    Returns:
        SeriesCollection with float64 1-D arrays
    """
    if isinstance(ts_list, SeriesCollection):
        return ts_list
    if isinstance(ts_list, pd.DataFrame):
        names = [str(c) for c in ts_list.columns]
        values = [ts_list[c].to_numpy(dtype=np.float64) for c in ts_list.columns]
        return SeriesCollection(values=values, names=names)
    if isinstance(ts_list, dict):
        names = [str(k) for k in ts_list.keys()]
        values = [np.asarray(v, dtype=np.float64).ravel() for v in ts_list.values()]
        return SeriesCollection(values=values, names=names)
    if isinstance(ts_list, np.ndarray) and ts_list.ndim == 2:
        return SeriesCollection(values=[row.astype(np.float64) for row in ts_list])
    if isinstance(ts_list, (list, tuple)):
        return SeriesCollection(values=[np.asarray(v, dtype=np.float64).ravel() for v in ts_list])
    raise TypeError(
        "ts_list must be a list/tuple of arrays, a 2-D array (one series per row), "
        f"a dict or a pandas DataFrame, got {type(ts_list).__name__}"
    )


def ts_to_windows(x: np.ndarray, width: int, by: int = 1) -> List[np.ndarray]:
    """
    Sliding windows over a single time series.

    Turns one series into a collection that ts_dist() accepts, so a
    window-by-window distance network can be built.

    Args:
        x: Time series
        width: Window length
        by: Step between consecutive windows

    Returns:
        List of windows (copies), in time order
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    if width < 1 or width > len(x):
        raise ValueError(f"width must be in [1, {len(x)}], got {width}")
    if by < 1:
        raise ValueError(f"by must be >= 1, got {by}")

    windows = np.lib.stride_tricks.sliding_window_view(x, width)[::by]
    return [w.copy() for w in windows]
