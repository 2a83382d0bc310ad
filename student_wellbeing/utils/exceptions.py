"""
Custom exceptions for the student wellbeing summary
Centralised exception handling for better error management
"""


class StudentWellbeingError(Exception):
    """Base exception for all student wellbeing summary errors"""
    pass


class ConfigurationError(StudentWellbeingError):
    """Raised when configuration is invalid or missing"""
    pass


class ValidationError(StudentWellbeingError):
    """Raised when an aggregation or data quality request is malformed"""
    def __init__(self, message: str, column: str = None, sample_values: list = None):
        super().__init__(message)
        self.column = column
        self.sample_values = sample_values


class EmptyResultError(StudentWellbeingError):
    """
    Reserved for an empty aggregation result.
    Never raised: zero groups is a valid, empty result.
    """
    pass


class DatabaseError(StudentWellbeingError):
    """Raised when database operations fail"""
    def __init__(self, message: str, table_name: str = None, query: str = None):
        super().__init__(message)
        self.table_name = table_name
        self.query = query


class DataQualityError(StudentWellbeingError):
    """Raised when data quality issues are found"""
    def __init__(self, message: str, table_name: str = None, affected_rows: int = None):
        super().__init__(message)
        self.table_name = table_name
        self.affected_rows = affected_rows


class PipelineError(StudentWellbeingError):
    """Raised when pipeline orchestration fails"""
    def __init__(self, message: str, step: str = None, original_error: Exception = None):
        super().__init__(message)
        self.step = step
        self.original_error = original_error
