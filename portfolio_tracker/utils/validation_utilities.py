"""
Utilities for validating user-entered values.
Validators return (is_valid, error_message) tuples.
"""

import math
from typing import Any, Tuple


def _to_number(value: Any) -> Tuple[bool, float, str]:
    if isinstance(value, bool):
        return False, 0.0, "Invalid number format."
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False, 0.0, "Invalid number format."
    if not math.isfinite(num):
        return False, 0.0, "Value must be a finite number."
    return True, num, ""


def validate_positive_number(value: Any, min_value: float = 0) -> Tuple[bool, str]:
    """
    Validate that a value can be converted to a number greater than min_value.
    
    Args:
        value: String or number to validate
        min_value: Exclusive lower bound (default: 0)
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    ok, num, error = _to_number(value)
    if not ok:
        return False, error
    if num <= min_value:
        return False, f"Value must be greater than {min_value}."
    return True, ""


def validate_non_negative_number(value: Any) -> Tuple[bool, str]:
    """Validate that a value is a number of at least zero."""
    ok, num, error = _to_number(value)
    if not ok:
        return False, error
    if num < 0:
        return False, "Value must not be negative."
    return True, ""


def validate_ticker(value: str) -> Tuple[bool, str]:
    """
    Validate a stock ticker symbol.
    
    Accepts letters, digits and the separators used by listed share
    classes and exchanges (".", "-", "^", "=").
    """
    symbol = (value or "").strip().upper()
    if not symbol:
        return False, "Ticker is empty."
    if len(symbol) > 15:
        return False, f"Ticker {symbol} is too long."
    if not all(ch.isalnum() or ch in ".-^=" for ch in symbol):
        return False, f"Ticker {symbol} contains invalid characters."
    return True, ""
