"""
Common utilities for the student wellbeing summary
Shared functions used across multiple modules
"""

import re
import numpy as np
import pandas as pd
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Optional


def normalise_text(text: str) -> str:
    """
    Normalise text to snake_case format

    Args:
        text: Input text to normalise

    Returns:
        Normalised text in snake_case format

    Examples:
        >>> normalise_text("Stay Years")
        'stay_years'
        >>> normalise_text(" Inter ")
        'inter'
    """
    if text is None or is_missing(text):
        return ""

    normalised = str(text).strip().lower()
    normalised = re.sub(r'[^a-z0-9]+', '_', normalised)
    normalised = re.sub(r'_+', '_', normalised).strip('_')

    return normalised


def is_missing(value: Any) -> bool:
    """
    Check whether a scalar value is null (None, NaN, pd.NA, NaT)

    Args:
        value: Value to check

    Returns:
        True if the value counts as null
    """
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # pd.isna on list-likes returns an array; those are never null scalars
        return False


def round_half_away_from_zero(value: Optional[float], decimal_places: int) -> Optional[float]:
    """
    Round a number to a fixed number of decimal places, halves away from zero

    Rounding works on the shortest decimal representation of the float,
    so 2.675 rounds to 2.68 and -2.675 to -2.68.

    Args:
        value: Number to round (None passes through)
        decimal_places: Number of decimal places (>= 0)

    Returns:
        Rounded float, or None for a null input

    Examples:
        >>> round_half_away_from_zero(2.675, 2)
        2.68
        >>> round_half_away_from_zero(0.125, 2)
        0.13
    """
    if value is None or is_missing(value):
        return None

    exact = Decimal(repr(float(value)))
    quantum = Decimal(1).scaleb(-decimal_places)
    with localcontext() as ctx:
        # Room for every integer digit plus the requested fraction digits
        ctx.prec = max(ctx.prec, exact.adjusted() + decimal_places + 2)
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def safe_convert_numeric(value: Any, target_type: type, default: Optional[Any] = None) -> Any:
    """
    Safely convert value to numeric type with fallback

    Args:
        value: Value to convert
        target_type: Target type (int or float)
        default: Value returned when the input is null or not numeric

    Returns:
        Converted value or default
    """
    if is_missing(value):
        return default

    try:
        if target_type == int:
            as_float = float(value)
            if not as_float.is_integer():
                return default
            return int(as_float)
        elif target_type == float:
            return float(value)
        else:
            return value
    except (ValueError, TypeError):
        return default


def format_number_with_commas(number: int) -> str:
    """
    Format large numbers with comma separators

    Examples:
        >>> format_number_with_commas(1234567)
        '1,234,567'
    """
    return f"{number:,}"


def to_python_scalar(value: Any) -> Any:
    """
    Unwrap numpy scalars (as returned by pandas) into plain Python values

    Examples:
        >>> to_python_scalar(np.int64(3))
        3
    """
    if isinstance(value, np.generic):
        return value.item()
    return value
