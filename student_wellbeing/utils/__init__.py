"""
Shared utilities for the student wellbeing summary
Exceptions, logging setup, DuckDB access and small helpers
"""

from .exceptions import (
    StudentWellbeingError,
    ConfigurationError,
    ValidationError,
    EmptyResultError,
    DatabaseError,
    DataQualityError,
    PipelineError
)
from .logging_config import setup_logging, get_logger

__all__ = [
    'StudentWellbeingError',
    'ConfigurationError',
    'ValidationError',
    'EmptyResultError',
    'DatabaseError',
    'DataQualityError',
    'PipelineError',
    'setup_logging',
    'get_logger'
]
