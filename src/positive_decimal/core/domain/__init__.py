"""
Domain models and value objects.

PositiveDecimal — неотрицательное decimal-значение с замкнутой алгеброй.
"""

from positive_decimal.core.domain.positive import (
    E,
    HUNDRED,
    MAX,
    ONE,
    PI,
    TEN,
    THOUSAND,
    TWO,
    ZERO,
    PositiveDecimal,
    invariant_error_from,
    parse_non_negative,
    pos,
    pos_or_none,
    try_new,
    zero,
)

__all__ = [
    # Model
    "PositiveDecimal",
    # Construction
    "try_new",
    "zero",
    "pos",
    "pos_or_none",
    "parse_non_negative",
    "invariant_error_from",
    # Constants
    "ZERO",
    "ONE",
    "TWO",
    "TEN",
    "HUNDRED",
    "THOUSAND",
    "PI",
    "E",
    "MAX",
]
