"""
Writer: all series and record-file writes go through here.

No other module should call write_parquet / write_csv / np.save directly.
"""

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import polars as pl

from ts2net.config import get_config
from ts2net.io.reader import RECORD_FORMATS, PathLike

logger = logging.getLogger(__name__)


def write_records(
    df: pl.DataFrame,
    path: PathLike,
    file_format: Optional[str] = None,
) -> Path:
    """
    Persist one batch of distance records.

    An empty batch is written as a schema-only file so every part of a
    partitioned run leaves exactly one file behind.

    Args:
        df: Records with columns i, j, dist
        path: Target file; the suffix is set from file_format
        file_format: 'parquet' or 'csv' (config 'partition.record_format' when None)

    Returns:
        Path written
    """
    file_format = file_format or get_config().get('partition.record_format', 'parquet')
    if file_format not in RECORD_FORMATS:
        raise ValueError(f"file_format must be one of {list(RECORD_FORMATS)}, got {file_format!r}")

    path = Path(path).with_suffix(f".{file_format}")
    path.parent.mkdir(parents=True, exist_ok=True)

    if file_format == 'parquet':
        df.write_parquet(str(path))
    else:
        df.write_csv(str(path))

    logger.info("Wrote %d records to %s", df.height, path)
    return path


def write_series(x: np.ndarray, path: PathLike) -> Path:
    """
    Persist one time series (.npy, .parquet or .csv by suffix).

    Args:
        x: Time series
        path: Target file

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    values = np.asarray(x, dtype=np.float64).ravel()
    suffix = path.suffix.lower()

    if suffix == '.npy':
        np.save(path, values)
    elif suffix == '.parquet':
        pl.DataFrame({'value': values}).write_parquet(str(path))
    elif suffix == '.csv':
        pl.DataFrame({'value': values}).write_csv(str(path))
    else:
        raise ValueError(f"Unsupported series file type: {path.name}")
    return path
