"""
Configuration management for the student wellbeing summary
Centralised configuration loading and validation
"""

import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass

from ..aggregation.aggregator import validate_config
from ..load.student_table import DEFAULT_COLUMN_MAPPING
from ..models import AggregationConfig, Classification, DEFAULT_METRICS, INSTRUMENT_RANGES, MetricSpec
from ..utils.exceptions import ConfigurationError, ValidationError
from ..utils.logging_config import get_logger

logger = get_logger('config')


@dataclass
class ValidationRule:
    """Expected value range for one record field"""
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    required: bool = False


class ConfigManager:
    """
    Manages configuration loading and validation
    Single responsibility: Configuration management only
    """

    REQUIRED_SECTIONS = ['aggregation', 'logging']

    def __init__(self, config_path: str):
        """
        Initialise with path to YAML config file

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self._validate_config()
        logger.info(f"Configuration loaded successfully from {self.config_path}")

    def _load_config(self) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {self.config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}")

        if not config:
            raise ConfigurationError(f"Configuration file is empty: {self.config_path}")
        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        logger.info(f"Loaded configuration from {self.config_path}")
        return config

    def _validate_config(self) -> None:
        """Validate required configuration sections exist"""
        for section in self.REQUIRED_SECTIONS:
            if section not in self.config:
                raise ConfigurationError(f"Missing required config section: {section}")

        self._validate_aggregation_section()
        self._validate_database_section()

        logger.info("Configuration validation passed")

    def _validate_aggregation_section(self) -> None:
        """Validate aggregation section structure"""
        aggregation = self.config['aggregation']

        if not isinstance(aggregation, dict):
            raise ConfigurationError("aggregation section must be a mapping")

        metrics = aggregation.get('metrics')
        if metrics is None:
            return

        if not isinstance(metrics, list):
            raise ConfigurationError("aggregation.metrics must be a list")

        for position, metric in enumerate(metrics):
            if not isinstance(metric, dict) or 'source_field' not in metric:
                raise ConfigurationError(f"Missing source_field in aggregation.metrics[{position}]")

    def _validate_database_section(self) -> None:
        """Validate database configuration if present"""
        db_config = self.config.get('database')
        if db_config is None:
            return

        if not isinstance(db_config, dict):
            raise ConfigurationError("database section must be a mapping")

        db_path = db_config.get('path')
        if not db_path or not isinstance(db_path, str):
            raise ConfigurationError(f"Invalid database path: {db_path}")

    def get_aggregation_config(self) -> AggregationConfig:
        """
        Build the aggregation settings

        Returns:
            Validated AggregationConfig

        Raises:
            ValidationError: If the settings are malformed
        """
        section = self.config['aggregation']

        raw_filter = section.get('filter_classification')
        filter_classification = None
        if raw_filter is not None:
            filter_classification = Classification.parse(raw_filter)
            if filter_classification is None:
                raise ValidationError(f"Unknown classification filter: {raw_filter}",
                                      column='classification', sample_values=[raw_filter])

        if 'metrics' in section:
            metrics = tuple(
                MetricSpec(
                    source_field=metric['source_field'],
                    aggregate_fn=metric.get('aggregate_fn', 'mean'),
                    decimal_places=metric.get('decimal_places', 2),
                    name=metric.get('name')
                )
                for metric in section['metrics']
            )
        else:
            metrics = DEFAULT_METRICS

        risk_config = section.get('risk_profile') or {}

        aggregation_config = AggregationConfig(
            filter_classification=filter_classification,
            group_by=section.get('group_by', 'stay_years'),
            secondary_group_by=section.get('secondary_group_by'),
            metrics=metrics,
            sort_key=section.get('sort_key'),
            sort_direction=str(section.get('sort_direction', 'desc')).lower(),
            limit=section.get('limit'),
            risk_profile=risk_config.get('enabled', False),
            depression_threshold=risk_config.get('depression_threshold', 7.0),
            connectedness_threshold=risk_config.get('connectedness_threshold', 40.0)
        )

        validate_config(aggregation_config)
        return aggregation_config

    def get_database_config(self) -> Dict[str, Any]:
        """Get database configuration"""
        db_config = self.config.get('database') or {}
        return {
            'path': db_config.get('path', 'data/students.duckdb'),
            'table': db_config.get('table', 'students'),
            'id_column': db_config.get('id_column')
        }

    def get_database_path(self) -> str:
        """Get database file path"""
        return self.get_database_config()['path']

    def get_column_mapping(self) -> Dict[str, str]:
        """Get source column -> record field mapping"""
        return self.config.get('column_mapping') or dict(DEFAULT_COLUMN_MAPPING)

    def get_data_quality_config(self) -> Dict[str, Any]:
        """Get data quality configuration"""
        quality_config = self.config.get('data_quality') or {}
        return {
            'enabled': quality_config.get('enabled', True),
            'null_check_fields': quality_config.get('null_check_fields', [
                'classification',
                'stay_years',
                'depression_score',
                'connectedness_score',
                'acculturative_stress_score'
            ]),
            'fail_on_violation': quality_config.get('fail_on_violation', False)
        }

    def get_range_rules(self) -> Dict[str, ValidationRule]:
        """Get expected value ranges per field (instrument ranges by default)"""
        quality_config = self.config.get('data_quality') or {}
        range_config = quality_config.get('range_checks')

        if range_config is None:
            return {
                field: ValidationRule(min_value=low, max_value=high)
                for field, (low, high) in INSTRUMENT_RANGES.items()
            }

        rules = {}
        for field, rule_config in range_config.items():
            rules[field] = ValidationRule(
                min_value=rule_config.get('min'),
                max_value=rule_config.get('max'),
                required=rule_config.get('required', False)
            )
        return rules

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration"""
        return self.config.get('logging') or {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'log_to_file': False,
            'log_file_path': 'student_wellbeing.log'
        }

    def get_config_summary(self) -> Dict[str, Any]:
        """
        Get summary of configuration for logging/debugging

        Returns:
            Summary dictionary
        """
        aggregation_config = self.get_aggregation_config()
        filter_value = aggregation_config.filter_classification

        return {
            'config_file': str(self.config_path),
            'database_path': self.get_database_path(),
            'table': self.get_database_config()['table'],
            'filter_classification': filter_value.value if filter_value else None,
            'group_by': aggregation_config.group_by,
            'secondary_group_by': aggregation_config.secondary_group_by,
            'metrics': [m.output_name for m in aggregation_config.metrics],
            'sort': f"{aggregation_config.effective_sort_key} {aggregation_config.sort_direction}",
            'limit': aggregation_config.limit,
            'risk_profile_enabled': aggregation_config.risk_profile,
            'data_quality_enabled': self.get_data_quality_config()['enabled'],
            'range_rules_count': len(self.get_range_rules())
        }
