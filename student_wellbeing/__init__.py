"""
Student Wellbeing Summary Package
Grouped depression, social connectedness and acculturative stress statistics by length of stay
"""

# Package metadata
__version__ = "1.0.0"
__description__ = "Grouped wellbeing summaries for international students by length of stay"

from .models import (
    Classification,
    StudentRecord,
    SummaryRow,
    MetricSpec,
    AggregationConfig,
    reference_config,
    rows_to_dataframe
)
from .aggregation import (
    Aggregator,
    AggregationResult,
    aggregate,
    compare_classifications,
    classify_risk_profile,
    extended_metrics
)
from .quality import DataQualityChecker, count_nulls, range_check, score_ranges
from .config.config_manager import ConfigManager
from .load import StudentTableReader, records_from_dataframe
from .pipeline import SummaryPipeline
from .utils.exceptions import (
    StudentWellbeingError,
    ConfigurationError,
    ValidationError,
    EmptyResultError,
    DatabaseError,
    DataQualityError,
    PipelineError
)
from .utils.logging_config import setup_logging, get_logger

__all__ = [
    'Classification',
    'StudentRecord',
    'SummaryRow',
    'MetricSpec',
    'AggregationConfig',
    'reference_config',
    'rows_to_dataframe',
    'Aggregator',
    'AggregationResult',
    'aggregate',
    'compare_classifications',
    'classify_risk_profile',
    'extended_metrics',
    'DataQualityChecker',
    'count_nulls',
    'range_check',
    'score_ranges',
    'ConfigManager',
    'StudentTableReader',
    'records_from_dataframe',
    'SummaryPipeline',
    'setup_logging',
    'get_logger',
    'StudentWellbeingError',
    'ConfigurationError',
    'ValidationError',
    'EmptyResultError',
    'DatabaseError',
    'DataQualityError',
    'PipelineError'
]

# Package configuration
PACKAGE_INFO = {
    'name': 'student-wellbeing-summary',
    'version': __version__,
    'description': __description__,
    'components': {
        'aggregation': 'Grouped summary statistics and risk labels',
        'quality': 'Null counts and instrument range checks',
        'load': 'DataFrame and DuckDB record sources',
        'config': 'YAML configuration management',
        'utils': 'Shared utilities and exceptions'
    }
}
