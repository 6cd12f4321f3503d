"""
Record Validation

Checks distance-record tables before they are merged into a matrix:
required columns present, indices integral and inside [1, num_elements].

Usage:
    from ts2net.validation import validate_records, RecordValidationError

    validate_records(df, num_elements=10)   # raises on the first bad table
"""

from typing import List

import polars as pl


RECORD_COLUMNS = ('i', 'j', 'dist')


class RecordValidationError(ValueError):
    """Raised when a distance-record table is unusable."""

    def __init__(self, errors: List[str], source: str = None):
        self.errors = errors
        self.source = source

        header = "Distance records failed validation"
        if source:
            header += f" ({source})"
        message = header + ":\n" + "\n".join(f"  ERROR: {e}" for e in errors)
        super().__init__(message)


def validate_records(df: pl.DataFrame, num_elements: int, source: str = None) -> pl.DataFrame:
    """
    Validate a record table and cast it to the canonical schema.

    Args:
        df: Table with columns i, j, dist (1-based indices)
        num_elements: Matrix size
        source: Label (e.g. file path) used in the error message

    Returns:
        DataFrame with i: Int64, j: Int64, dist: Float64

    Raises:
        RecordValidationError: With every problem found
    """
    errors = []

    missing = [c for c in RECORD_COLUMNS if c not in df.columns]
    if missing:
        errors.append(f"missing columns: {missing} (have {df.columns})")
        raise RecordValidationError(errors, source)

    if df.height == 0:
        return df.select(
            pl.col('i').cast(pl.Int64),
            pl.col('j').cast(pl.Int64),
            pl.col('dist').cast(pl.Float64),
        )

    for col in ('i', 'j'):
        if df[col].null_count() > 0:
            errors.append(f"column '{col}' has {df[col].null_count()} null values")
            continue
        as_float = df[col].cast(pl.Float64)
        if (as_float != as_float.round(0)).any():
            errors.append(f"column '{col}' has non-integer indices")
            continue
        lo, hi = as_float.min(), as_float.max()
        if lo < 1 or hi > num_elements:
            errors.append(
                f"column '{col}' has indices outside [1, {num_elements}]: min={lo:g}, max={hi:g}"
            )

    if errors:
        raise RecordValidationError(errors, source)

    return df.select(
        pl.col('i').cast(pl.Int64),
        pl.col('j').cast(pl.Int64),
        pl.col('dist').cast(pl.Float64),
    )
