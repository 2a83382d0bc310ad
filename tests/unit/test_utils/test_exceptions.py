"""
Unit tests for custom exceptions
Tests the exception hierarchy and the context each exception carries
"""
import pytest

from student_wellbeing.utils.exceptions import (
    StudentWellbeingError,
    ConfigurationError,
    ValidationError,
    EmptyResultError,
    DatabaseError,
    DataQualityError,
    PipelineError
)


class TestExceptionHierarchy:
    """Test suite for the exception hierarchy"""

    def test_student_wellbeing_error_is_base_exception(self):
        """Test that the base error is a plain Exception"""
        # Act
        error = StudentWellbeingError("Base error")

        # Assert
        assert isinstance(error, Exception)
        assert str(error) == "Base error"

    @pytest.mark.parametrize("exception_class", [
        ConfigurationError,
        ValidationError,
        EmptyResultError,
        DatabaseError,
        DataQualityError,
        PipelineError
    ])
    def test_all_errors_inherit_from_base(self, exception_class):
        """Test that every project error can be caught through the base class"""
        with pytest.raises(StudentWellbeingError):
            raise exception_class("failure")


class TestValidationError:
    """Test suite for ValidationError"""

    def test_validation_error_with_basic_message(self):
        """Test ValidationError without context"""
        # Act
        error = ValidationError("Unknown sort key")

        # Assert
        assert str(error) == "Unknown sort key"
        assert error.column is None
        assert error.sample_values is None

    def test_validation_error_with_column_and_samples(self):
        """Test ValidationError with the offending column and values"""
        # Act
        error = ValidationError("Non-numeric values", column='todep', sample_values=['high', 'low'])

        # Assert
        assert error.column == 'todep'
        assert error.sample_values == ['high', 'low']


class TestContextErrors:
    """Test suite for errors carrying database and pipeline context"""

    def test_database_error_with_full_context(self):
        """Test DatabaseError with table and query"""
        # Act
        error = DatabaseError("Query failed", table_name='students', query='SELECT 1')

        # Assert
        assert error.table_name == 'students'
        assert error.query == 'SELECT 1'

    def test_data_quality_error_with_affected_rows(self):
        """Test DataQualityError with affected row count"""
        error = DataQualityError("Range check failed", affected_rows=4)
        assert error.affected_rows == 4
        assert error.table_name is None

    def test_pipeline_error_keeps_original_error(self):
        """Test PipelineError wrapping the failing step's error"""
        # Arrange
        original = DatabaseError("Table students does not exist")

        # Act
        error = PipelineError("Pipeline step 'load_records' failed", step='load_records', original_error=original)

        # Assert
        assert error.step == 'load_records'
        assert error.original_error is original
