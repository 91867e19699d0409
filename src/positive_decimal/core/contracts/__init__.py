"""
Contract Validation Module

JSON Schema контракт сериализованной формы PositiveDecimal.
"""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    PositiveDecimalValidator,
    SchemaLoader,
    get_schema_loader,
    validate_positive_decimal,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PositiveDecimalValidator",
    # Functions
    "get_schema_loader",
    "validate_positive_decimal",
    # Constants
    "SCHEMA_DIR",
]
