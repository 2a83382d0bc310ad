"""
Per-group metric computation
Nulls are dropped per metric, never per record
"""

from typing import Any, List, Optional

import pandas as pd

from ..models import MetricSpec, FIELD_LABELS
from ..utils.common import round_half_away_from_zero, to_python_scalar

AGGREGATE_FUNCTIONS = ('mean', 'count', 'min', 'max', 'stddev')


def compute_metric(values: pd.Series, metric: MetricSpec) -> Optional[Any]:
    """
    Compute one metric over the values of a single group

    Args:
        values: Numeric values of the metric's source field for the group (NaN = null)
        metric: Metric specification

    Returns:
        Rounded metric value; None when no value is available.
        'count' returns the number of non-null values as an int.
    """
    present = values.dropna()
    aggregate_fn = metric.aggregate_fn

    if aggregate_fn == 'count':
        return int(present.count())

    if present.empty:
        return None

    if aggregate_fn == 'mean':
        raw = present.mean()
    elif aggregate_fn == 'min':
        raw = present.min()
    elif aggregate_fn == 'max':
        raw = present.max()
    elif aggregate_fn == 'stddev':
        # Sample standard deviation, undefined for a single value
        if len(present) < 2:
            return None
        raw = present.std(ddof=1)
    else:
        raise ValueError(f"Unsupported aggregate function: {aggregate_fn}")

    return round_half_away_from_zero(to_python_scalar(raw), metric.decimal_places)


def extended_metrics(source_field: str = 'depression_score', decimal_places: int = 2) -> List[MetricSpec]:
    """
    Mean, standard deviation, minimum and maximum for one score field

    Args:
        source_field: StudentRecord score field
        decimal_places: Rounding for every metric

    Returns:
        Metric specs named e.g. mean_depression, stddev_depression, min_depression, max_depression
    """
    label = FIELD_LABELS.get(source_field, source_field)
    return [
        MetricSpec(source_field, aggregate_fn, decimal_places, f"{aggregate_fn}_{label}")
        for aggregate_fn in ('mean', 'stddev', 'min', 'max')
    ]
