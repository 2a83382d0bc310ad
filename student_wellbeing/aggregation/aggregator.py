"""
Grouped summary statistics over student records
Filter, group, aggregate, sort and limit in one pure batch computation
"""

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ..models import (
    AggregationConfig,
    Classification,
    GROUPABLE_FIELDS,
    NUMERIC_FIELDS,
    RECORD_FIELDS,
    StudentRecord,
    SummaryRow,
    reference_config
)
from ..utils.common import is_missing, to_python_scalar
from ..utils.exceptions import ValidationError
from ..utils.logging_config import get_logger, log_performance_metric
from .metrics import AGGREGATE_FUNCTIONS, compute_metric
from .risk import classify_risk_profile

logger = get_logger('aggregation')

SORT_DIRECTIONS = ('asc', 'desc')
RESERVED_COLUMNS = ('count', 'risk_profile')
RISK_PROFILE_METRICS = ('mean_depression', 'mean_connectedness')

_GROUP_COLUMN = '__group_key'
_SECONDARY_COLUMN = '__secondary_key'


@dataclass
class AggregationResult:
    """Summary rows plus the record counts behind them"""
    rows: List[SummaryRow]
    records_received: int
    records_filtered: int
    excluded_null_group_key: int
    groups_before_limit: int

    @property
    def records_grouped(self) -> int:
        return self.records_filtered - self.excluded_null_group_key

    def get_diagnostics(self) -> Dict[str, int]:
        return {
            'records_received': self.records_received,
            'records_filtered': self.records_filtered,
            'excluded_null_group_key': self.excluded_null_group_key,
            'records_grouped': self.records_grouped,
            'groups_before_limit': self.groups_before_limit,
            'rows_returned': len(self.rows)
        }


def validate_config(config: AggregationConfig) -> None:
    """
    Check an aggregation config before any record is touched

    Raises:
        ValidationError: On unknown fields, functions or directions, negative
            decimal places, a non-positive limit, or clashing output names
    """
    if config.group_by not in GROUPABLE_FIELDS:
        raise ValidationError(f"Unknown group field: {config.group_by}", column=config.group_by)

    secondary = config.secondary_group_by
    if secondary is not None and (secondary not in GROUPABLE_FIELDS or secondary == config.group_by):
        raise ValidationError(f"Secondary group field must be a record field other than "
                              f"{config.group_by}, got: {secondary}", column=secondary)

    if config.filter_classification is not None and Classification.parse(config.filter_classification) is None:
        raise ValidationError(f"Unknown classification filter: {config.filter_classification}",
                              column='classification',
                              sample_values=[config.filter_classification])

    output_names = []
    for metric in config.metrics:
        if metric.source_field not in RECORD_FIELDS:
            raise ValidationError(f"Metric field not present on StudentRecord: {metric.source_field}",
                                  column=metric.source_field)
        if metric.source_field not in NUMERIC_FIELDS:
            raise ValidationError(f"Metric field is not numeric: {metric.source_field}",
                                  column=metric.source_field)
        if metric.aggregate_fn not in AGGREGATE_FUNCTIONS:
            raise ValidationError(f"Unknown aggregate function '{metric.aggregate_fn}', "
                                  f"expected one of {list(AGGREGATE_FUNCTIONS)}",
                                  column=metric.source_field)
        if not _is_int(metric.decimal_places) or metric.decimal_places < 0:
            raise ValidationError(f"decimal_places must be a non-negative integer, "
                                  f"got {metric.decimal_places!r} for {metric.output_name}",
                                  column=metric.source_field)
        output_names.append(metric.output_name)

    clashes = sorted({name for name in output_names
                      if output_names.count(name) > 1 or name in RESERVED_COLUMNS
                      or name in (config.group_by, secondary)})
    if clashes:
        raise ValidationError(f"Metric names clash with other output columns: {clashes}")

    if config.sort_direction not in SORT_DIRECTIONS:
        raise ValidationError(f"sort_direction must be one of {list(SORT_DIRECTIONS)}, "
                              f"got {config.sort_direction!r}")

    sortable = [config.group_by] + ([secondary] if secondary else []) + ['count'] + output_names
    if config.effective_sort_key not in sortable:
        raise ValidationError(f"Unknown sort key '{config.effective_sort_key}', expected one of {sortable}",
                              column=config.effective_sort_key)

    if config.limit is not None and (not _is_int(config.limit) or config.limit <= 0):
        raise ValidationError(f"limit must be a positive integer, got {config.limit!r}")

    if config.risk_profile:
        missing = [name for name in RISK_PROFILE_METRICS if name not in output_names]
        if missing:
            raise ValidationError(f"Risk profile needs metrics: {missing}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_float(value: Any) -> Optional[float]:
    return None if is_missing(value) else float(value)


def _sortable(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class Aggregator:
    """
    Grouped summary of student records
    Holds only its validated config; every run starts from scratch
    """

    def __init__(self, config: AggregationConfig = None):
        """
        Initialise aggregator

        Args:
            config: Aggregation settings (reference International/stay/top-9 config when omitted)

        Raises:
            ValidationError: If the config is malformed
        """
        self.config = config if config is not None else reference_config()
        validate_config(self.config)
        self.filter_value = Classification.parse(self.config.filter_classification)
        self._metric_fields = list(dict.fromkeys(m.source_field for m in self.config.metrics))
        self._group_fields = [self.config.group_by] + (
            [self.config.secondary_group_by] if self.config.secondary_group_by else []
        )

    def run(self, records: Iterable[StudentRecord]) -> AggregationResult:
        """
        Aggregate records into summary rows

        Args:
            records: Any finite iterable of StudentRecord; buffered before grouping

        Returns:
            AggregationResult with rows sorted and limited
        """
        start_time = time.time()
        group_by = ' and '.join(self._group_fields)

        snapshot = tuple(records)
        filtered = [record for record in snapshot if self._matches_filter(record)]
        groupable = [record for record in filtered
                     if not any(is_missing(getattr(record, f)) for f in self._group_fields)]
        excluded = len(filtered) - len(groupable)

        if excluded:
            logger.info(f"Excluded {excluded} records with null {group_by} from grouping")

        rows = []
        if groupable:
            frame = self._build_frame(groupable)
            group_columns = _GROUP_COLUMN if len(self._group_fields) == 1 else [_GROUP_COLUMN, _SECONDARY_COLUMN]
            for key, group in frame.groupby(group_columns, sort=False):
                rows.append(self._summarise_group(key, group))

        groups_before_limit = len(rows)
        rows = self._sort_rows(rows)
        if self.config.limit is not None:
            rows = rows[:self.config.limit]

        logger.info(f"Aggregated {len(groupable)} of {len(snapshot)} records into "
                    f"{groups_before_limit} groups by {group_by}, returning {len(rows)}")
        log_performance_metric(logger, 'aggregation', time.time() - start_time, len(snapshot))

        return AggregationResult(
            rows=rows,
            records_received=len(snapshot),
            records_filtered=len(filtered),
            excluded_null_group_key=excluded,
            groups_before_limit=groups_before_limit
        )

    def _matches_filter(self, record: StudentRecord) -> bool:
        if self.filter_value is None:
            return True
        # Null classification never matches a configured filter
        return Classification.parse(record.classification) is self.filter_value

    def _build_frame(self, records: List[StudentRecord]) -> pd.DataFrame:
        """One row per record: the group keys as objects, metric sources as floats"""
        data = {}
        for column, group_field in zip((_GROUP_COLUMN, _SECONDARY_COLUMN), self._group_fields):
            data[column] = pd.Series([getattr(r, group_field) for r in records], dtype=object)
        for source_field in self._metric_fields:
            data[source_field] = pd.Series(
                [_as_float(getattr(r, source_field)) for r in records], dtype='float64'
            )
        return pd.DataFrame(data)

    def _summarise_group(self, key: Any, group: pd.DataFrame) -> SummaryRow:
        secondary_key = None
        if self.config.secondary_group_by:
            key, secondary_key = key

        metrics = {
            metric.output_name: compute_metric(group[metric.source_field], metric)
            for metric in self.config.metrics
        }

        risk_profile = None
        if self.config.risk_profile:
            risk_profile = classify_risk_profile(
                metrics['mean_depression'],
                metrics['mean_connectedness'],
                self.config.depression_threshold,
                self.config.connectedness_threshold
            )

        row = SummaryRow(
            group_field=self.config.group_by,
            group_key=to_python_scalar(key),
            count=len(group),
            metrics=metrics,
            risk_profile=risk_profile,
            secondary_field=self.config.secondary_group_by,
            secondary_key=to_python_scalar(secondary_key)
        )
        logger.debug(f"Group {row.group_key}: {row.to_dict()}")
        return row

    def _sort_rows(self, rows: List[SummaryRow]) -> List[SummaryRow]:
        """
        Sort by the configured key and direction

        Ties keep ascending group key order, then ascending secondary key order
        (stable sort over a key-ordered list).
        Rows with a null sort value go last.
        """
        sort_key = self.config.effective_sort_key
        by_group = sorted(rows, key=lambda row: (_sortable(row.group_key), _sortable(row.secondary_key)))

        present = [row for row in by_group if not is_missing(row[sort_key])]
        missing = [row for row in by_group if is_missing(row[sort_key])]

        present.sort(key=lambda row: _sortable(row[sort_key]),
                     reverse=self.config.sort_direction == 'desc')
        return present + missing


def aggregate(records: Iterable[StudentRecord], config: AggregationConfig = None) -> List[SummaryRow]:
    """
    Summarise student records by group

    Args:
        records: Student records (may be empty)
        config: Aggregation settings (reference config when omitted)

    Returns:
        Ordered summary rows; empty when nothing survives the filter

    Raises:
        ValidationError: If the config is malformed
    """
    return Aggregator(config).run(records).rows


def compare_classifications(records: Iterable[StudentRecord],
                            config: AggregationConfig = None) -> Dict[Classification, List[SummaryRow]]:
    """
    Aggregate each classification separately, without a row limit

    Args:
        records: Student records
        config: Base settings; its filter and limit are overridden

    Returns:
        Mapping of classification to its summary rows
    """
    snapshot = tuple(records)
    base = config if config is not None else reference_config()

    comparison = {}
    for classification in Classification:
        per_class = replace(base, filter_classification=classification, limit=None)
        comparison[classification] = aggregate(snapshot, per_class)
    return comparison
