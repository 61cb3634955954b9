# File: utils/math_utils.py
"""Math and calculation utilities for KidRewards.

Pure Python math functions with ZERO Home Assistant dependencies.

Functions:
    - round_points: Consistent rounding to configured precision
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value to a range
    - parse_quick_add_values: Parse and normalize quick-add point values
"""

from __future__ import annotations

import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for progress rounding
DATA_FLOAT_PRECISION = 2

DEFAULT_QUICK_ADD_VALUES = [1, 5, 10]
QUICK_ADD_MIN = 1
QUICK_ADD_MAX = 100


# ==============================================================================
# Arithmetic
# ==============================================================================


def round_points(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a value to the configured precision.

    Examples:
        round_points(10.456) → 10.46
        round_points(10.0) → 10.0
    """
    return round(value, precision)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage, capped at 100.

    Args:
        current: Current progress value
        target: Target/total value
        precision: Number of decimal places for rounding

    Returns:
        Percentage (0-100) with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(150, 100) → 100.0
        calculate_percentage(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return round_points(clamp((current / target) * 100, 0.0, 100.0), precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


# ==============================================================================
# Quick-Add Value Parsing
# ==============================================================================


def parse_quick_add_values(raw_input: str | list | None = None) -> list[int]:
    """Parse quick-add point values from any input type into a sorted int list.

    Handles multiple input types:
    - None / empty: Returns default quick-add values
    - list: Converts each element to int
    - str: Parses pipe-separated values ("1|5|10")

    Values outside 1..100 and duplicates are dropped.

    Examples:
        parse_quick_add_values(None) → [1, 5, 10]
        parse_quick_add_values("2|5|10") → [2, 5, 10]
        parse_quick_add_values("abc|10|10") → [10]  # Skips invalid and duplicates
        parse_quick_add_values("0|500") → [1, 5, 10]  # Nothing valid, defaults
    """
    if not raw_input:
        return list(DEFAULT_QUICK_ADD_VALUES)

    if isinstance(raw_input, str):
        parts: list = [part.strip() for part in raw_input.split("|") if part.strip()]
    elif isinstance(raw_input, list):
        parts = raw_input
    else:
        _LOGGER.error(
            "Unexpected quick-add values type: %s, using defaults", type(raw_input)
        )
        return list(DEFAULT_QUICK_ADD_VALUES)

    values: set[int] = set()
    for part in parts:
        try:
            value = int(part)
        except (ValueError, TypeError):
            _LOGGER.error("Invalid number '%s' in quick-add values", part)
            continue
        if QUICK_ADD_MIN <= value <= QUICK_ADD_MAX:
            values.add(value)
        else:
            _LOGGER.warning("Quick-add value %s out of range, skipped", value)

    return sorted(values) or list(DEFAULT_QUICK_ADD_VALUES)
