"""
Configuration-specific test fixtures and factories
"""
import pytest
import yaml
from typing import Dict, Any


class ConfigFactory:
    """Factory for creating test configurations"""

    @staticmethod
    def create_valid_config(db_path: str = 'test_students.duckdb') -> Dict[str, Any]:
        """Create a complete valid configuration"""
        return {
            'database': {
                'path': db_path,
                'table': 'students'
            },
            'column_mapping': {
                'inter_dom': 'classification',
                'stay': 'stay_years',
                'todep': 'depression_score',
                'tosc': 'connectedness_score',
                'toas': 'acculturative_stress_score'
            },
            'aggregation': {
                'filter_classification': 'International',
                'group_by': 'stay_years',
                'metrics': [
                    {'name': 'mean_depression', 'source_field': 'depression_score',
                     'aggregate_fn': 'mean', 'decimal_places': 2},
                    {'name': 'mean_connectedness', 'source_field': 'connectedness_score',
                     'aggregate_fn': 'mean', 'decimal_places': 2},
                    {'name': 'mean_acculturative_stress', 'source_field': 'acculturative_stress_score',
                     'aggregate_fn': 'mean', 'decimal_places': 2}
                ],
                'sort_key': 'stay_years',
                'sort_direction': 'desc',
                'limit': 9
            },
            'data_quality': {
                'enabled': True,
                'fail_on_violation': False,
                'range_checks': {
                    'stay_years': {'min': 1, 'max': 10},
                    'depression_score': {'min': 0, 'max': 27}
                }
            },
            'logging': {
                'level': 'INFO',
                'log_to_file': False  # Disable file logging in tests
            }
        }

    @staticmethod
    def create_minimal_config() -> Dict[str, Any]:
        """Create minimal configuration with only required sections"""
        return {
            'aggregation': {'filter_classification': 'Inter', 'limit': 9},
            'logging': {'level': 'INFO', 'log_to_file': False}
        }

    @staticmethod
    def create_invalid_config_missing_section(missing_section: str) -> Dict[str, Any]:
        """Create invalid configuration missing a required section"""
        config = ConfigFactory.create_minimal_config()
        if missing_section in config:
            del config[missing_section]
        return config


def write_config(config_dir, config: Dict[str, Any], name: str = "test_config.yaml"):
    """Dump a configuration dictionary to a YAML file"""
    config_file = config_dir / name
    with open(config_file, 'w') as f:
        yaml.dump(config, f)
    return config_file


@pytest.fixture
def config_factory():
    """Provide configuration factory for tests"""
    return ConfigFactory


@pytest.fixture
def valid_config():
    """Provide a valid test configuration"""
    return ConfigFactory.create_valid_config()


@pytest.fixture
def minimal_config():
    """Provide minimal valid configuration"""
    return ConfigFactory.create_minimal_config()


@pytest.fixture
def valid_config_file(temp_config_dir, valid_config):
    """Create a valid configuration file on disk"""
    return write_config(temp_config_dir, valid_config)


@pytest.fixture
def pipeline_config_file(temp_config_dir, students_database):
    """Create a configuration file pointing at the test students database"""
    config = ConfigFactory.create_valid_config(db_path=str(students_database))
    config['database']['id_column'] = 'id'
    return write_config(temp_config_dir, config, "pipeline_config.yaml")
