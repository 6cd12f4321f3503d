"""
Partitioned Distance Computation
================================

Splits the pair enumeration of ts_dist() into contiguous parts that can
run as independent jobs (e.g. one cluster task per part), then merges the
per-part records back into the full matrix.

    # job k of 10
    records = ts_dist_part(ts_list, part=k, total_parts=10)
    write_records(records, f"dists/{k:03d}")

    # afterwards, anywhere
    D = dist_file_parts_merge(num_elements=len(ts_list), dir_path="dists")

Records:
    polars DataFrame with columns i, j, dist. Indices are 1-based
    positions in the series collection (or in the sorted file list for the
    directory-backed variant). Symmetric runs emit (i, j, d) and (j, i, d)
    so the merge needs no symmetry logic.

Merge:
    A fold over record batches into an n x n matrix initialised with
    fill_value (default 0). Each record writes one cell, so batches can
    be merged in any order.
"""

import logging
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import polars as pl
from joblib import delayed

from ts2net.config import get_config
from ts2net.core.distances.correlation import tsdist_cor
from ts2net.core.distances.options import options_to_kwargs
from ts2net.core.engine import pair_indices, run_pairs, _compute_one
from ts2net.core.matrix import like
from ts2net.core.series import as_series_collection
from ts2net.io.reader import list_series_files, list_record_files, read_records, read_series
from ts2net.validation import validate_records

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]

RECORD_SCHEMA = {'i': pl.Int64, 'j': pl.Int64, 'dist': pl.Float64}


# ============================================================
# SPLITTING
# ============================================================

def all_combinations(n: int, symmetric: bool = True) -> List[Pair]:
    """Every 1-based pair of the full enumeration, in engine order."""
    return [(i + 1, j + 1) for i, j in pair_indices(n, symmetric)]


def split_parts(combinations: Sequence[Pair], part: int, total_parts: int) -> List[Pair]:
    """
    Contiguous chunk `part` (1-based) of `total_parts` near-equal chunks.

    Element t (1-based) belongs to chunk ceil(t * total_parts / N). Chunks
    are empty when total_parts exceeds the number of elements.

    Args:
        combinations: Full pair list
        part: Chunk to return, 1 <= part <= total_parts
        total_parts: Number of chunks

    Returns:
        Pairs of the chunk, in original order
    """
    if total_parts < 1:
        raise ValueError(f"total_parts must be >= 1, got {total_parts}")
    if not 1 <= part <= total_parts:
        raise ValueError(f"part must be in [1, {total_parts}], got {part}")

    n = len(combinations)
    start = (part - 1) * n // total_parts
    stop = part * n // total_parts
    return list(combinations[start:stop])


def _resolve_pairs(n, part, total_parts, combinations, symmetric) -> List[Pair]:
    if combinations is not None:
        pairs = [(int(i), int(j)) for i, j in combinations]
        bad = [p for p in pairs if not (1 <= p[0] <= n and 1 <= p[1] <= n)]
        if bad:
            raise ValueError(f"combinations contain indices outside [1, {n}]: {bad[:5]}")
        return pairs
    if part is None or total_parts is None:
        raise ValueError("Either combinations or both part and total_parts are required")
    return split_parts(all_combinations(n, symmetric), part, total_parts)


def _records_frame(pairs: Sequence[Pair], values: Sequence[float], symmetric: bool) -> pl.DataFrame:
    if symmetric:
        i = [k for a, b in pairs for k in (a, b)]
        j = [k for a, b in pairs for k in (b, a)]
        dist = [v for v in values for _ in range(2)]
    else:
        i = [a for a, _ in pairs]
        j = [b for _, b in pairs]
        dist = list(values)
    return pl.DataFrame({'i': i, 'j': j, 'dist': dist}, schema=RECORD_SCHEMA)


# ============================================================
# PART COMPUTATION
# ============================================================

def ts_dist_part(
    ts_list,
    part: Optional[int] = None,
    total_parts: Optional[int] = None,
    combinations: Optional[Sequence[Pair]] = None,
    dist_func: Callable = tsdist_cor,
    options=None,
    symmetric: bool = True,
    error_value: float = np.nan,
    warn_error: bool = True,
    n_jobs: int = 1,
) -> pl.DataFrame:
    """
    Distance records for one part of the pair enumeration.

    All series are held in memory; use ts_dist_part_file() when the
    collection does not fit.

    Args:
        ts_list: Series collection (see ts_dist)
        part: Part to compute (1-based)
        total_parts: Number of parts
        combinations: Explicit 1-based pairs; bypasses part/total_parts
        dist_func: Distance function
        options: DistanceOptions or dict for dist_func
        symmetric: Whether dist_func is symmetric
        error_value: Value recorded for failed pairs
        warn_error: Warn about failed pairs
        n_jobs: Parallel workers

    Returns:
        Records DataFrame (i, j, dist)
    """
    collection = as_series_collection(ts_list)
    kwargs = options_to_kwargs(options)
    pairs = _resolve_pairs(len(collection), part, total_parts, combinations, symmetric)

    logger.info("Part %s/%s: %d pairs", part, total_parts, len(pairs))
    tasks = [
        delayed(_compute_one)(dist_func, collection[i - 1], collection[j - 1], kwargs, error_value)
        for i, j in pairs
    ]
    values = run_pairs(tasks, pairs, warn_error=warn_error, n_jobs=n_jobs)
    return _records_frame(pairs, values, symmetric)


def _compute_from_files(
    dist_func: Callable,
    path1: Path,
    path2: Path,
    kwargs,
    error_value: float,
) -> Tuple[float, Optional[str]]:
    """Read one pair of series and evaluate it. Runs in a worker; never raises."""
    try:
        ts1 = read_series(path1)
        ts2 = read_series(path2)
    except Exception as e:
        return error_value, f"{type(e).__name__}: {e}"
    return _compute_one(dist_func, ts1, ts2, kwargs, error_value)


def ts_dist_part_file(
    input_dir,
    part: Optional[int] = None,
    total_parts: Optional[int] = None,
    combinations: Optional[Sequence[Pair]] = None,
    dist_func: Callable = tsdist_cor,
    options=None,
    symmetric: bool = True,
    error_value: float = np.nan,
    warn_error: bool = True,
    n_jobs: int = 1,
    pattern: Optional[str] = None,
) -> pl.DataFrame:
    """
    Distance records for one part, reading series from files on demand.

    Each pair reads only its two series inside the worker, so memory use is
    bounded by one pair rather than the whole collection. Indices refer to
    the files in lexicographic filename order.

    Args:
        input_dir: Directory with one series per file
        part, total_parts, combinations: As in ts_dist_part
        dist_func, options, symmetric, error_value, warn_error, n_jobs:
            As in ts_dist_part
        pattern: Glob for series files (config 'series.pattern' when None)

    Returns:
        Records DataFrame (i, j, dist)
    """
    files = list_series_files(input_dir, pattern)
    kwargs = options_to_kwargs(options)
    pairs = _resolve_pairs(len(files), part, total_parts, combinations, symmetric)

    logger.info("Part %s/%s from %s: %d pairs over %d files",
                part, total_parts, input_dir, len(pairs), len(files))
    tasks = [
        delayed(_compute_from_files)(dist_func, files[i - 1], files[j - 1], kwargs, error_value)
        for i, j in pairs
    ]
    values = run_pairs(tasks, pairs, warn_error=warn_error, n_jobs=n_jobs)
    return _records_frame(pairs, values, symmetric)


# ============================================================
# MERGE
# ============================================================

def _as_record_frame(part) -> pl.DataFrame:
    if isinstance(part, pl.DataFrame):
        return part
    if isinstance(part, pd.DataFrame):
        return pl.DataFrame({c: part[c].to_numpy() for c in part.columns})
    rows = list(part)
    if not rows:
        return pl.DataFrame(schema=RECORD_SCHEMA)
    i, j, dist = zip(*rows)
    return pl.DataFrame({'i': list(i), 'j': list(j), 'dist': list(dist)},
                        schema={'i': pl.Int64, 'j': pl.Int64, 'dist': pl.Float64})


def write_cells(D: np.ndarray, records: pl.DataFrame) -> np.ndarray:
    """Fold step: write every record of a batch into its own cell of D."""
    if records.height:
        rows = records['i'].to_numpy() - 1
        cols = records['j'].to_numpy() - 1
        D[rows, cols] = records['dist'].to_numpy()
    return D


def dist_parts_merge(
    parts: Iterable,
    num_elements: int,
    fill_value: Optional[float] = None,
    names: Optional[Sequence[str]] = None,
):
    """
    Build the distance matrix from record batches.

    Args:
        parts: Iterable of record batches (polars/pandas DataFrames with
            i, j, dist, or sequences of (i, j, dist) tuples)
        num_elements: Number of series (matrix size)
        fill_value: Value of cells no record writes (config
            'partition.fill_value', 0 by default)
        names: Optional labels, returns a DataFrame when given

    Returns:
        n x n matrix
    """
    if fill_value is None:
        fill_value = float(get_config().get('partition.fill_value', 0.0))
    if names is not None and len(names) != num_elements:
        raise ValueError(f"Got {len(names)} names for {num_elements} elements")

    batches = (
        validate_records(_as_record_frame(part), num_elements, source=f"part {k}")
        for k, part in enumerate(parts, start=1)
    )
    D = reduce(write_cells, batches, np.full((num_elements, num_elements), fill_value, dtype=np.float64))
    return like(D, names)


def dist_file_parts_merge(
    num_elements: int,
    files: Optional[Sequence] = None,
    dir_path=None,
    file_format: Optional[str] = None,
    fill_value: Optional[float] = None,
    names: Optional[Sequence[str]] = None,
):
    """
    Build the distance matrix from record files.

    Files are read one at a time, so only one batch is held in memory.

    Args:
        num_elements: Number of series (matrix size)
        files: Record files (.parquet or .csv); takes precedence over dir_path
        dir_path: Directory whose record files are merged
        file_format: 'parquet' or 'csv' when listing dir_path
        fill_value: Value of cells no record writes
        names: Optional labels

    Returns:
        n x n matrix
    """
    if files is None:
        if dir_path is None:
            raise ValueError("Either files or dir_path is required")
        files = list_record_files(dir_path, file_format)
    files = [Path(f) for f in files]
    logger.info("Merging %d record files into a %dx%d matrix", len(files), num_elements, num_elements)

    def _batches():
        for path in files:
            yield validate_records(read_records(path), num_elements, source=str(path))

    if fill_value is None:
        fill_value = float(get_config().get('partition.fill_value', 0.0))
    D = reduce(write_cells, _batches(), np.full((num_elements, num_elements), fill_value, dtype=np.float64))
    return like(D, names)
