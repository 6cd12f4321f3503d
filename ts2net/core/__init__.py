"""
ts2net Core
===========

Computation only; file I/O lives in ts2net.io.

Structure:
    distances/    - Distance functions and their options structures
    series.py     - Series collections and sliding windows
    engine.py     - Pairwise distance matrix (joblib)
    partition.py  - Partitioned computation and merge of record batches
    matrix.py     - Distance matrix utilities (normalise, percentile)
    network/      - Graph construction (proximity, visibility, recurrence, transition)
"""

from ts2net.core.engine import ts_dist, pair_indices
from ts2net.core.partition import (
    ts_dist_part,
    ts_dist_part_file,
    dist_parts_merge,
    dist_file_parts_merge,
    split_parts,
    all_combinations,
)
from ts2net.core.series import SeriesCollection, as_series_collection, ts_to_windows
from ts2net.core.matrix import dist_matrix_normalize, dist_percentile

__all__ = [
    'ts_dist', 'pair_indices',
    'ts_dist_part', 'ts_dist_part_file', 'dist_parts_merge', 'dist_file_parts_merge',
    'split_parts', 'all_combinations',
    'SeriesCollection', 'as_series_collection', 'ts_to_windows',
    'dist_matrix_normalize', 'dist_percentile',
]
