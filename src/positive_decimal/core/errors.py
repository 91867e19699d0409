"""
InvariantError — таксономия ошибок PositiveDecimal

Все ошибки восстанавливаемые и поднимаются на границе: при конструировании
или на результате арифметической операции. Молчаливый clamp запрещён.

Иерархия:
    InvariantError (ValueError)
    ├── NegativeValueError      — результат или вход < 0
    ├── ParseFailureError       — вход не интерпретируется как decimal
    ├── DivisionByZeroError     — делитель равен нулю (также ZeroDivisionError)
    └── DecimalOverflowError    — превышена граница decimal (также ArithmeticError)

FatalInvariantError (RuntimeError) — единственное исключение вне иерархии,
поднимается только literal-конструктором pos().
"""

from decimal import Decimal
from enum import Enum
from typing import Any


# =============================================================================
# ENUMS
# =============================================================================


class InvariantErrorKind(str, Enum):
    """Вид нарушения"""

    NEGATIVE = "negative"
    PARSE_FAILURE = "parse_failure"
    DIVISION_BY_ZERO = "division_by_zero"
    OVERFLOW = "overflow"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvariantError(ValueError):
    """
    Базовая ошибка нарушения инварианта value >= 0.

    Наследуется от ValueError, поэтому внутри pydantic-валидаторов
    превращается в ValidationError, а исходный объект доступен
    через ctx["error"].

    Attributes:
        kind: Вид нарушения
        value: Проблемное значение (вход или результат операции)
        reason: Человекочитаемое описание
    """

    kind: InvariantErrorKind

    def __init__(self, value: Any, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"{self.kind.value}: {reason} (value={value!r})")

    def __reduce__(self):
        return (type(self), (self.value, self.reason))


class NegativeValueError(InvariantError):
    """Значение или результат операции ниже нуля."""

    kind = InvariantErrorKind.NEGATIVE


class ParseFailureError(InvariantError):
    """Вход не может быть интерпретирован как конечный decimal."""

    kind = InvariantErrorKind.PARSE_FAILURE


class DivisionByZeroError(InvariantError, ZeroDivisionError):
    """Деление на ноль."""

    kind = InvariantErrorKind.DIVISION_BY_ZERO


class DecimalOverflowError(InvariantError, ArithmeticError):
    """Превышена граница величины или точности decimal-примитива."""

    kind = InvariantErrorKind.OVERFLOW


class FatalInvariantError(RuntimeError):
    """
    Нарушение инварианта в literal-конструкторе pos().

    Намеренно НЕ является InvariantError: pos() предназначен только для
    заведомо неотрицательных констант, и нарушение означает ошибку
    в коде, а не в данных. Исходная InvariantError доступна через __cause__.
    """


def negative(value: Decimal | Any, operation: str | None = None) -> NegativeValueError:
    """Фабрика NegativeValueError с единообразным сообщением."""
    if operation is None:
        return NegativeValueError(value, "value must be non-negative")
    return NegativeValueError(value, f"{operation} result would be negative")
