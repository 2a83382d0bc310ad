"""
Record source module
Provides DataFrame and DuckDB table readers producing StudentRecord objects
"""

from .student_table import DEFAULT_COLUMN_MAPPING, StudentTableReader, records_from_dataframe

__all__ = [
    'DEFAULT_COLUMN_MAPPING',
    'StudentTableReader',
    'records_from_dataframe'
]
