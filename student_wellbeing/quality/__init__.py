"""
Data quality module for pre-aggregation diagnostics
Null counts, instrument range checks and observed score ranges
"""

from .data_quality import (
    INSTRUMENT_RANGES,
    DataQualityChecker,
    count_nulls,
    range_check,
    score_ranges
)

__all__ = [
    'INSTRUMENT_RANGES',
    'DataQualityChecker',
    'count_nulls',
    'range_check',
    'score_ranges'
]
