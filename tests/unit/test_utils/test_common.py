"""
Unit tests for common utility functions
Tests text normalisation, null detection, rounding and numeric conversion
"""
import pytest
import numpy as np
import pandas as pd

from student_wellbeing.utils.common import (
    normalise_text,
    is_missing,
    round_half_away_from_zero,
    safe_convert_numeric,
    format_number_with_commas,
    to_python_scalar
)


class TestCommonUtils:
    """Test suite for common utility functions"""

    # ========================================
    # Text Processing Tests
    # ========================================

    def test_normalise_text_basic_cases(self):
        """Test basic text normalisation cases"""
        test_cases = [
            ("Stay Years", "stay_years"),
            (" Inter ", "inter"),
            ("DOM", "dom"),
            ("to-dep", "to_dep"),
        ]

        for input_text, expected in test_cases:
            assert normalise_text(input_text) == expected, f"Failed for input: {input_text}"

    def test_normalise_text_with_none_returns_empty_string(self):
        """Test normalise_text with None and NaN inputs"""
        assert normalise_text(None) == ""
        assert normalise_text(np.nan) == ""

    # ========================================
    # Null Detection Tests
    # ========================================

    @pytest.mark.parametrize("value", [None, np.nan, pd.NA, float('nan')])
    def test_is_missing_with_null_values(self, value):
        """Test null detection for every null flavour"""
        assert is_missing(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, "", "Inter", [1, 2]])
    def test_is_missing_with_present_values(self, value):
        """Test that falsy and list-like values are not null"""
        assert is_missing(value) is False

    # ========================================
    # Rounding Tests
    # ========================================

    @pytest.mark.parametrize("value, decimal_places, expected", [
        (0.125, 2, 0.13),
        (2.675, 2, 2.68),
        (-2.675, 2, -2.68),
        (6.0, 2, 6.0),
        (41.666666666666664, 2, 41.67),
        (2.5, 0, 3.0),
        (-0.5, 0, -1.0),
    ])
    def test_round_half_away_from_zero(self, value, decimal_places, expected):
        """Test that halves round away from zero"""
        assert round_half_away_from_zero(value, decimal_places) == expected

    def test_round_half_away_from_zero_passes_null_through(self):
        """Test that null inputs stay null"""
        assert round_half_away_from_zero(None, 2) is None
        assert round_half_away_from_zero(np.nan, 2) is None

    @pytest.mark.parametrize("value, decimal_places", [
        (6.0, 30),
        (41.666666666666664, 27),
        (123456.5, 40),
    ])
    def test_round_half_away_from_zero_with_many_decimal_places(self, value, decimal_places):
        """Test that precision beyond the default decimal context does not fail"""
        assert round_half_away_from_zero(value, decimal_places) == value

    def test_round_half_away_from_zero_accepts_numpy_scalars(self):
        """Test rounding of a pandas aggregate result"""
        result = round_half_away_from_zero(np.float64(6.005), 2)
        assert result == 6.01
        assert type(result) is float

    # ========================================
    # Numeric Conversion Tests
    # ========================================

    def test_safe_convert_numeric_basic_integer_conversion(self):
        """Test basic integer conversions"""
        assert safe_convert_numeric("42", int) == 42
        assert safe_convert_numeric(3.0, int) == 3
        assert safe_convert_numeric(np.int64(7), int) == 7

    def test_safe_convert_numeric_rejects_fractional_integers(self):
        """Test that a fractional value is not truncated to an int"""
        assert safe_convert_numeric(1.5, int) is None
        assert safe_convert_numeric(1.5, int, default=-1) == -1

    def test_safe_convert_numeric_basic_float_conversion(self):
        """Test basic float conversions"""
        assert safe_convert_numeric("12.5", float) == 12.5
        assert safe_convert_numeric(7, float) == 7.0

    def test_safe_convert_numeric_with_invalid_values_returns_default(self):
        """Test conversion with invalid values returns default"""
        assert safe_convert_numeric("invalid", int) is None
        assert safe_convert_numeric(None, float) is None
        assert safe_convert_numeric(np.nan, int, default=0) == 0

    # ========================================
    # Formatting Tests
    # ========================================

    def test_format_number_with_commas_basic_cases(self):
        """Test number formatting with commas"""
        test_cases = [
            (0, "0"),
            (999, "999"),
            (1000, "1,000"),
            (1234567, "1,234,567"),
        ]

        for number, expected in test_cases:
            assert format_number_with_commas(number) == expected

    def test_to_python_scalar_unwraps_numpy_values(self):
        """Test unwrapping of numpy scalars"""
        # Act
        unwrapped_int = to_python_scalar(np.int64(3))
        unwrapped_float = to_python_scalar(np.float64(2.5))

        # Assert
        assert type(unwrapped_int) is int
        assert type(unwrapped_float) is float
        assert to_python_scalar("Inter") == "Inter"
