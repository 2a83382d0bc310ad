"""
Data model for the student wellbeing summary
Student records going in, summary rows coming out, and the aggregation settings between them
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from .utils.common import is_missing, normalise_text


class Classification(Enum):
    """International/Domestic status of a respondent"""
    INTERNATIONAL = 'International'
    DOMESTIC = 'Domestic'

    @classmethod
    def parse(cls, value: Any) -> Optional['Classification']:
        """
        Parse a raw classification code

        Accepts enum members, full names and the short 'Inter'/'Dom' codes,
        case-insensitively.

        Returns:
            Classification, or None for null and unrecognised values
        """
        if isinstance(value, cls):
            return value
        if is_missing(value):
            return None
        return _CLASSIFICATION_ALIASES.get(normalise_text(value))


_CLASSIFICATION_ALIASES = {
    'inter': Classification.INTERNATIONAL,
    'international': Classification.INTERNATIONAL,
    'dom': Classification.DOMESTIC,
    'domestic': Classification.DOMESTIC,
}


@dataclass(frozen=True)
class StudentRecord:
    """One survey respondent"""
    record_id: Any
    classification: Optional[Classification]
    stay_years: Optional[int]
    depression_score: Optional[float] = None
    connectedness_score: Optional[float] = None
    acculturative_stress_score: Optional[float] = None
    academic_level: Optional[str] = None


RECORD_FIELDS = tuple(f.name for f in fields(StudentRecord))
GROUPABLE_FIELDS = tuple(name for name in RECORD_FIELDS if name != 'record_id')
NUMERIC_FIELDS = (
    'stay_years',
    'depression_score',
    'connectedness_score',
    'acculturative_stress_score'
)
SCORE_FIELDS = NUMERIC_FIELDS[1:]

# Documented instrument domains (PHQ-9, SCS, ASISS) and the expected stay range
INSTRUMENT_RANGES = {
    'stay_years': (1, 10),
    'depression_score': (0, 27),
    'connectedness_score': (20, 80),
    'acculturative_stress_score': (24, 120),
}

# Short labels used when building metric names
FIELD_LABELS = {
    'stay_years': 'stay',
    'depression_score': 'depression',
    'connectedness_score': 'connectedness',
    'acculturative_stress_score': 'acculturative_stress',
}


@dataclass(frozen=True)
class MetricSpec:
    """One aggregate column of the summary"""
    source_field: str
    aggregate_fn: str = 'mean'
    decimal_places: int = 2
    name: Optional[str] = None

    @property
    def output_name(self) -> str:
        if self.name:
            return self.name
        label = FIELD_LABELS.get(self.source_field, self.source_field)
        return f"{self.aggregate_fn}_{label}"


DEFAULT_METRICS = (
    MetricSpec('depression_score', 'mean', 2, 'mean_depression'),
    MetricSpec('connectedness_score', 'mean', 2, 'mean_connectedness'),
    MetricSpec('acculturative_stress_score', 'mean', 2, 'mean_acculturative_stress'),
)


@dataclass
class AggregationConfig:
    """
    Settings for one aggregation run

    sort_key defaults to the group field. secondary_group_by splits each group
    further (e.g. stay by academic level); rows sharing a sort value keep
    ascending secondary order. risk_profile adds a risk label to each row and
    needs the mean_depression and mean_connectedness metrics.
    """
    filter_classification: Optional[Classification] = None
    group_by: str = 'stay_years'
    secondary_group_by: Optional[str] = None
    metrics: Tuple[MetricSpec, ...] = DEFAULT_METRICS
    sort_key: Optional[str] = None
    sort_direction: str = 'desc'
    limit: Optional[int] = None
    risk_profile: bool = False
    depression_threshold: float = 7.0
    connectedness_threshold: float = 40.0

    @property
    def effective_sort_key(self) -> str:
        return self.sort_key or self.group_by

    @property
    def output_columns(self) -> List[str]:
        columns = [self.group_by]
        if self.secondary_group_by:
            columns.append(self.secondary_group_by)
        columns += ['count'] + [m.output_name for m in self.metrics]
        if self.risk_profile:
            columns.append('risk_profile')
        return columns


def reference_config() -> AggregationConfig:
    """International students by length of stay, longest stay first, at most nine groups"""
    return AggregationConfig(
        filter_classification=Classification.INTERNATIONAL,
        group_by='stay_years',
        metrics=DEFAULT_METRICS,
        sort_key='stay_years',
        sort_direction='desc',
        limit=9
    )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class SummaryRow:
    """
    One group of the summary

    Metrics are held as (name, value) pairs in configured order; a dict
    passed in is converted so rows stay hashable.
    """
    group_field: str
    group_key: Any
    count: int
    metrics: Tuple[Tuple[str, Any], ...] = ()
    risk_profile: Optional[str] = None
    secondary_field: Optional[str] = None
    secondary_key: Any = None

    def __post_init__(self):
        if isinstance(self.metrics, dict):
            object.__setattr__(self, 'metrics', tuple(self.metrics.items()))

    @property
    def metric_values(self) -> Dict[str, Any]:
        return dict(self.metrics)

    def __getitem__(self, name: str) -> Any:
        if name == self.group_field:
            return self.group_key
        if self.secondary_field and name == self.secondary_field:
            return self.secondary_key
        if name == 'count':
            return self.count
        if name == 'risk_profile':
            return self.risk_profile
        values = self.metric_values
        if name in values:
            return values[name]
        raise KeyError(name)

    @property
    def stay_years(self) -> Any:
        if self.secondary_field == 'stay_years':
            return self.secondary_key
        return self.group_key

    @property
    def mean_depression(self) -> Optional[float]:
        return self.metric_values.get('mean_depression')

    @property
    def mean_connectedness(self) -> Optional[float]:
        return self.metric_values.get('mean_connectedness')

    @property
    def mean_acculturative_stress(self) -> Optional[float]:
        return self.metric_values.get('mean_acculturative_stress')

    def to_dict(self) -> Dict[str, Any]:
        row = {self.group_field: _plain(self.group_key)}
        if self.secondary_field:
            row[self.secondary_field] = _plain(self.secondary_key)
        row['count'] = self.count
        row.update(self.metrics)
        if self.risk_profile is not None:
            row['risk_profile'] = self.risk_profile
        return row


def rows_to_dataframe(rows: List[SummaryRow], config: AggregationConfig = None) -> pd.DataFrame:
    """
    Convert summary rows into a DataFrame for reporting layers

    Args:
        rows: Summary rows in output order
        config: Aggregation config, used to keep columns on an empty result

    Returns:
        DataFrame with one row per group
    """
    columns = config.output_columns if config is not None else None
    if not rows:
        return pd.DataFrame(columns=columns or [])
    return pd.DataFrame([row.to_dict() for row in rows], columns=columns)
