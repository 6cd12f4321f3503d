"""Validation of interchange artifacts (distance records)."""

from ts2net.validation.records import RecordValidationError, validate_records, RECORD_COLUMNS

__all__ = ['RecordValidationError', 'validate_records', 'RECORD_COLUMNS']
