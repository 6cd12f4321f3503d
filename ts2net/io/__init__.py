"""Series and distance-record file I/O."""

from ts2net.io.reader import (
    read_series,
    list_series_files,
    read_records,
    list_record_files,
    record_format_of,
    RECORD_FORMATS,
)
from ts2net.io.writer import write_records, write_series

__all__ = [
    'read_series', 'list_series_files', 'read_records', 'list_record_files',
    'record_format_of', 'RECORD_FORMATS', 'write_records', 'write_series',
]
