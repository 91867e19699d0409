"""
positive_decimal — неотрицательный decimal для финансовых вычислений

Инвариант value >= 0 выполняется для каждого экземпляра PositiveDecimal.
Операции, которые могут его нарушить (sub, div), явно поднимают
InvariantError вместо молчаливого clamp.
"""

import logging

from positive_decimal.core.domain import (
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
    pos,
    pos_or_none,
    try_new,
    zero,
)
from positive_decimal.core.errors import (
    DecimalOverflowError,
    DivisionByZeroError,
    FatalInvariantError,
    InvariantError,
    InvariantErrorKind,
    NegativeValueError,
    ParseFailureError,
)
from positive_decimal.core.math import EPSILON, MAX_VALUE

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Model
    "PositiveDecimal",
    # Construction
    "try_new",
    "zero",
    "pos",
    "pos_or_none",
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
    "EPSILON",
    "MAX_VALUE",
    # Errors
    "InvariantError",
    "InvariantErrorKind",
    "NegativeValueError",
    "ParseFailureError",
    "DivisionByZeroError",
    "DecimalOverflowError",
    "FatalInvariantError",
]
