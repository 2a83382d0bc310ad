# student_wellbeing/aggregation/__init__.py
"""
Aggregation module for grouped student wellbeing summaries
Provides the aggregator, metric computation and cohort risk labels
"""

from .aggregator import (
    Aggregator,
    AggregationResult,
    aggregate,
    compare_classifications,
    validate_config
)
from .metrics import AGGREGATE_FUNCTIONS, compute_metric, extended_metrics
from .risk import classify_risk_profile

__all__ = [
    'Aggregator',
    'AggregationResult',
    'aggregate',
    'compare_classifications',
    'validate_config',
    'AGGREGATE_FUNCTIONS',
    'compute_metric',
    'extended_metrics',
    'classify_risk_profile'
]
