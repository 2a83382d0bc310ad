"""
Pre-aggregation data quality checks
Single responsibility: report nulls and out-of-range scores, never drop or clamp them
"""

import time
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config.config_manager import ValidationRule
from ..models import (
    Classification,
    INSTRUMENT_RANGES,
    NUMERIC_FIELDS,
    RECORD_FIELDS,
    SCORE_FIELDS,
    StudentRecord
)
from ..utils.common import is_missing
from ..utils.exceptions import DataQualityError, ValidationError
from ..utils.logging_config import get_logger, log_validation_result, log_performance_metric

logger = get_logger('quality')

DEFAULT_NULL_CHECK_FIELDS = ('classification',) + NUMERIC_FIELDS


def count_nulls(records: Iterable[StudentRecord], fields: Sequence[str]) -> Dict[str, int]:
    """
    Count null values per field

    Args:
        records: Student records
        fields: Record field names to inspect

    Returns:
        Mapping of field name to null count, in the order given
    """
    unknown = [f for f in fields if f not in RECORD_FIELDS]
    if unknown:
        raise ValidationError(f"Unknown record fields: {unknown}", column=unknown[0])

    null_counts = {f: 0 for f in fields}
    for record in records:
        for f in fields:
            if is_missing(getattr(record, f)):
                null_counts[f] += 1
    return null_counts


def range_check(records: Iterable[StudentRecord], field: str,
                expected_min: Optional[float], expected_max: Optional[float]) -> List[Any]:
    """
    Flag records whose value lies outside [expected_min, expected_max]

    Null values are not flagged. A None bound leaves that side open.

    Args:
        records: Student records
        field: Numeric record field
        expected_min: Lowest in-range value
        expected_max: Highest in-range value

    Returns:
        record_id of every out-of-range record, in input order
    """
    if field not in NUMERIC_FIELDS:
        raise ValidationError(f"Range check needs a numeric record field, got: {field}", column=field)
    if expected_min is not None and expected_max is not None and expected_min > expected_max:
        raise ValidationError(f"expected_min {expected_min} is greater than expected_max {expected_max}",
                              column=field)

    flagged = []
    for record in records:
        value = getattr(record, field)
        if is_missing(value):
            continue
        if (expected_min is not None and value < expected_min) or \
                (expected_max is not None and value > expected_max):
            flagged.append(record.record_id)
    return flagged


def score_ranges(records: Iterable[StudentRecord],
                 fields: Sequence[str] = SCORE_FIELDS) -> Dict[str, Dict[str, Any]]:
    """
    Observed minimum and maximum per numeric field

    Returns:
        {field: {'min_value', 'max_value', 'n_records', 'n_values'}}; min/max are None
        when the field has no values
    """
    unknown = [f for f in fields if f not in NUMERIC_FIELDS]
    if unknown:
        raise ValidationError(f"Score ranges need numeric record fields, got: {unknown}", column=unknown[0])

    snapshot = tuple(records)
    ranges = {}
    for f in fields:
        values = [getattr(r, f) for r in snapshot if not is_missing(getattr(r, f))]
        ranges[f] = {
            'min_value': min(values) if values else None,
            'max_value': max(values) if values else None,
            'n_records': len(snapshot),
            'n_values': len(values)
        }
    return ranges


class DataQualityChecker:
    """
    Runs the configured null and range checks over a record set
    Results are reported and logged; the records are left untouched
    """

    def __init__(self, config: Dict[str, Any] = None, rules: Dict[str, ValidationRule] = None):
        """
        Initialise data quality checker

        Args:
            config: data_quality configuration section (enabled, null_check_fields,
                fail_on_violation)
            rules: Range rules per field (instrument ranges when omitted)
        """
        config = config or {}
        self.enabled = config.get('enabled', True)
        self.null_check_fields = list(config.get('null_check_fields', DEFAULT_NULL_CHECK_FIELDS))
        self.fail_on_violation = config.get('fail_on_violation', False)

        if rules is None:
            rules = {
                f: ValidationRule(min_value=low, max_value=high)
                for f, (low, high) in INSTRUMENT_RANGES.items()
            }
        self.rules = rules

    def run(self, records: Iterable[StudentRecord],
            filter_classification: Optional[Classification] = None) -> Dict[str, Any]:
        """
        Run all checks

        Args:
            records: Student records
            filter_classification: Only check records of this classification

        Returns:
            Report with null_counts, range_violations, score_ranges and is_clean

        Raises:
            DataQualityError: If fail_on_violation is set and any check fails
        """
        start_time = time.time()
        snapshot = tuple(records)

        if filter_classification is not None:
            target = Classification.parse(filter_classification)
            snapshot = tuple(r for r in snapshot if Classification.parse(r.classification) is target)

        if not self.enabled:
            logger.info("Data quality checks disabled in configuration")
            return {
                'enabled': False,
                'records_checked': len(snapshot),
                'null_counts': {},
                'range_violations': {},
                'score_ranges': {},
                'violation_count': 0,
                'is_clean': True
            }

        null_counts = count_nulls(snapshot, self.null_check_fields)
        for f, null_count in null_counts.items():
            log_validation_result(logger, f"null_check_{f}", null_count == 0,
                                  f"{null_count} null values" if null_count else None)

        range_violations = {}
        for f, rule in self.rules.items():
            flagged = range_check(snapshot, f, rule.min_value, rule.max_value)
            range_violations[f] = flagged
            log_validation_result(
                logger, f"range_check_{f}", not flagged,
                f"{len(flagged)} values outside [{rule.min_value}, {rule.max_value}], "
                f"sample ids: {flagged[:5]}" if flagged else None
            )

        violation_count = sum(null_counts.values()) + sum(len(ids) for ids in range_violations.values())
        report = {
            'enabled': True,
            'records_checked': len(snapshot),
            'null_counts': null_counts,
            'range_violations': range_violations,
            'score_ranges': score_ranges(snapshot, SCORE_FIELDS),
            'violation_count': violation_count,
            'is_clean': violation_count == 0
        }

        log_performance_metric(logger, 'data_quality_checks', time.time() - start_time, len(snapshot))

        if not report['is_clean'] and self.fail_on_violation:
            raise DataQualityError(f"Data quality checks failed with {violation_count} violations",
                                   affected_rows=violation_count)

        return report
