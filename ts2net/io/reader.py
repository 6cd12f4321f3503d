"""
Reader: all series and record-file reads go through here.

Series files hold one time series each:
    .npy      numpy array
    .parquet  first column (or a column named 'value')
    .csv      first column (or a column named 'value'), with header

Record files hold distance records with columns i, j, dist:
    .parquet  compact binary (default)
    .csv      plain text
"""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import polars as pl

from ts2net.config import get_config


RECORD_FORMATS = ('parquet', 'csv')

PathLike = Union[str, Path]


def _value_column(df: pl.DataFrame) -> pl.Series:
    if df.width == 0:
        raise ValueError("Series file has no columns")
    return df['value'] if 'value' in df.columns else df.to_series(0)


def read_series(path: PathLike) -> np.ndarray:
    """
    Read a single time series from a file.

    Args:
        path: .npy, .parquet or .csv file

    Returns:
        1-D float64 array
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == '.npy':
        values = np.load(path, allow_pickle=False)
    elif suffix == '.parquet':
        values = _value_column(pl.read_parquet(path)).to_numpy()
    elif suffix == '.csv':
        values = _value_column(pl.read_csv(path)).to_numpy()
    else:
        raise ValueError(f"Unsupported series file type: {path.name}")

    return np.asarray(values, dtype=np.float64).ravel()


def list_series_files(input_dir: PathLike, pattern: Optional[str] = None) -> List[Path]:
    """
    Series files of a directory in lexicographic filename order.

    Pair indices refer to positions in this order, so names should sort
    the way the series are meant to be numbered (e.g. 0001.npy).

    Args:
        input_dir: Directory with one series per file
        pattern: Glob (config 'series.pattern' when None)

    Returns:
        Sorted list of paths
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Series directory not found: {input_dir}")
    pattern = pattern or get_config().get('series.pattern', '*.npy')
    return sorted((p for p in input_dir.glob(pattern) if p.is_file()), key=lambda p: p.name)


def record_format_of(path: PathLike) -> str:
    """'parquet' or 'csv' from a record file suffix."""
    fmt = Path(path).suffix.lower().lstrip('.')
    if fmt not in RECORD_FORMATS:
        raise ValueError(f"Unsupported record file type: {Path(path).name}")
    return fmt


def read_records(path: PathLike) -> pl.DataFrame:
    """
    Read one batch of distance records.

    Args:
        path: .parquet or .csv file with columns i, j, dist

    Returns:
        DataFrame as stored (validated at merge time)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Record file not found: {path}")
    if record_format_of(path) == 'parquet':
        return pl.read_parquet(path)
    return pl.read_csv(path)


def list_record_files(dir_path: PathLike, file_format: Optional[str] = None) -> List[Path]:
    """
    Record files of a directory, sorted by filename.

    Args:
        dir_path: Directory holding record batches
        file_format: 'parquet' or 'csv' (config 'partition.record_format' when None)

    Returns:
        Sorted list of paths
    """
    dir_path = Path(dir_path)
    if not dir_path.is_dir():
        raise FileNotFoundError(f"Record directory not found: {dir_path}")
    file_format = file_format or get_config().get('partition.record_format', 'parquet')
    if file_format not in RECORD_FORMATS:
        raise ValueError(f"file_format must be one of {list(RECORD_FORMATS)}, got {file_format!r}")
    return sorted(
        (p for p in dir_path.glob(f"*.{file_format}") if p.is_file()),
        key=lambda p: p.name,
    )
