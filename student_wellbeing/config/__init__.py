"""
Configuration module
YAML-backed settings for aggregation, data quality, the students table and logging
"""

from .config_manager import ConfigManager, ValidationRule

__all__ = [
    'ConfigManager',
    'ValidationRule'
]
