"""
Decimal-примитивы для positive_decimal

Ограниченный контекст, разбор входа и трансляция ошибок decimal.
"""

from positive_decimal.core.math.decimal_safeguards import (
    # Context constants
    DECIMAL_CONTEXT,
    DECIMAL_PRECISION,
    EPSILON,
    MAX_RELATIVE,
    MAX_VALUE,
    # Types
    DecimalLike,
    # Parsing
    check_bounds,
    is_valid_decimal,
    to_decimal,
    # Guarded computation
    decimal_guard,
    # Comparisons
    compare,
    is_close,
    is_relatively_close,
)

__all__ = [
    # Context constants
    "DECIMAL_CONTEXT",
    "DECIMAL_PRECISION",
    "EPSILON",
    "MAX_RELATIVE",
    "MAX_VALUE",
    # Types
    "DecimalLike",
    # Parsing
    "check_bounds",
    "is_valid_decimal",
    "to_decimal",
    # Guarded computation
    "decimal_guard",
    # Comparisons
    "compare",
    "is_close",
    "is_relatively_close",
]
