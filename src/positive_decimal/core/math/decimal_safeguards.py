"""
Decimal Safeguards — граница decimal-примитива

Модуль инкапсулирует всё, что касается decimal.Decimal:
- Ограниченный контекст вычислений (29 значащих цифр, MAX_VALUE)
- Разбор decimal-like входа (Decimal, int, float, str) в конечный Decimal
- Трансляция сигналов модуля decimal в таксономию InvariantError
- Epsilon-сравнения для Decimal

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Infinity никогда не проходят разбор (ParseFailureError)
2. Float разбирается через repr, а не через двоичное разложение
3. Разобранное значение округляется до DECIMAL_PRECISION значащих цифр
4. Любое значение по модулю больше MAX_VALUE → DecimalOverflowError
5. Вычисления идут в thread-local копии DECIMAL_CONTEXT
"""

import math
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import (
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Final, Union

from positive_decimal.core.errors import (
    DecimalOverflowError,
    DivisionByZeroError,
    ParseFailureError,
)

DecimalLike = Union[Decimal, int, float, str]


# =============================================================================
# ПАРАМЕТРЫ DECIMAL-КОНТЕКСТА
# =============================================================================

# Количество значащих цифр: MAX_VALUE представимо точно
DECIMAL_PRECISION: Final[int] = 29

# Максимальная представимая величина: 2^96 - 1
MAX_VALUE: Final[Decimal] = Decimal("79228162514264337593543950335")

# Epsilon для приближённых сравнений (is_close, is_multiple_of)
EPSILON: Final[Decimal] = Decimal("1e-16")

# Относительная толерантность по умолчанию для is_relatively_close
MAX_RELATIVE: Final[Decimal] = EPSILON * 100

# Контекст вычислений: сигналы переполнения и деления на ноль поднимают исключения
DECIMAL_CONTEXT: Final[Context] = Context(
    prec=DECIMAL_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[Overflow, DivisionByZero, InvalidOperation],
)


# =============================================================================
# РАЗБОР ВХОДА
# =============================================================================


def is_valid_decimal(value: Decimal) -> bool:
    """
    Проверка, является ли Decimal конечным (не NaN, не Infinity).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return value.is_finite()


def to_decimal(raw: DecimalLike) -> Decimal:
    """
    Разбор decimal-like значения в конечный Decimal без проверки знака.

    Float переводится через кратчайшее repr-представление:
    100.5 → Decimal("100.5"). Значение с большим числом значащих цифр,
    чем DECIMAL_PRECISION, округляется (ROUND_HALF_EVEN) так же, как
    результат любой арифметической операции.

    Args:
        raw: Decimal, int, float или str

    Returns:
        Конечный Decimal; отрицательный ноль нормализуется в 0

    Raises:
        ParseFailureError: Некорректная строка, NaN/Inf, bool или
            неподдерживаемый тип
        DecimalOverflowError: Величина больше MAX_VALUE

    Examples:
        >>> to_decimal("1.50")
        Decimal('1.50')
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal(-3)
        Decimal('-3')
    """
    # bool является подклассом int, но как число не принимается
    if isinstance(raw, bool):
        raise ParseFailureError(raw, "bool is not a decimal value")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            raise ParseFailureError(raw, "float is not finite")
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        # Decimal("1_000") принимается интерпретатором, для внешнего входа запрещён
        if "_" in raw:
            raise ParseFailureError(raw, "digit separators are not allowed")
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ParseFailureError(raw, "malformed decimal string") from exc
    else:
        raise ParseFailureError(raw, f"unsupported type {type(raw).__name__}")

    if not is_valid_decimal(value):
        raise ParseFailureError(raw, "decimal is not finite")

    if len(value.as_tuple().digits) > DECIMAL_PRECISION:
        with decimal_guard("parse"):
            value = +value

    check_bounds(value)

    if value.is_zero():
        return value.copy_abs()
    return value


def check_bounds(value: Decimal) -> Decimal:
    """
    Проверка, что величина не превышает MAX_VALUE.

    Raises:
        DecimalOverflowError: Если abs(value) > MAX_VALUE
    """
    if value.copy_abs() > MAX_VALUE:
        raise DecimalOverflowError(value, f"magnitude exceeds {MAX_VALUE}")
    return value


# =============================================================================
# ОГРАНИЧЕННЫЕ ВЫЧИСЛЕНИЯ
# =============================================================================


@contextmanager
def decimal_guard(operation: str) -> Iterator[Context]:
    """
    Выполнение decimal-операции в ограниченном контексте.

    Сигналы модуля decimal транслируются в таксономию InvariantError
    с сохранением причины (raise ... from).

    Args:
        operation: Имя операции для сообщений об ошибках

    Yields:
        Thread-local копия DECIMAL_CONTEXT

    Raises:
        DecimalOverflowError: decimal.Overflow или выход за точность
            (прочие decimal.InvalidOperation на конечных операндах)
        DivisionByZeroError: decimal.DivisionByZero (0/0 проверяется вызывающим)

    Examples:
        >>> with decimal_guard("add") as ctx:
        ...     result = Decimal("1.5") + Decimal("2")
    """
    with localcontext(DECIMAL_CONTEXT) as ctx:
        try:
            yield ctx
        except Overflow as exc:
            raise DecimalOverflowError(operation, f"{operation} overflowed") from exc
        except DivisionByZero as exc:
            raise DivisionByZeroError(operation, f"{operation} by zero") from exc
        except InvalidOperation as exc:
            raise DecimalOverflowError(
                operation, f"{operation} exceeds decimal precision"
            ) from exc


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def is_close(a: Decimal, b: Decimal, abs_tol: Decimal = EPSILON) -> bool:
    """
    Сравнение Decimal с абсолютной толерантностью.

    Args:
        a: Первое значение
        b: Второе значение
        abs_tol: Абсолютная толерантность (default: EPSILON)

    Returns:
        True если abs(a - b) <= abs_tol

    Raises:
        ValueError: Если abs_tol отрицательный
    """
    if abs_tol < 0:
        raise ValueError(f"abs_tol must be non-negative, got {abs_tol}")

    with decimal_guard("is_close"):
        return abs(a - b) <= abs_tol


def is_relatively_close(
    a: Decimal,
    b: Decimal,
    max_relative: Decimal = MAX_RELATIVE,
    abs_tol: Decimal = EPSILON,
) -> bool:
    """
    Сравнение Decimal с относительной толерантностью.

    Разница сравнивается с max_relative от большего по модулю значения;
    abs_tol покрывает значения около нуля.

    Returns:
        True если abs(a - b) <= abs_tol или
        abs(a - b) <= max_relative * max(abs(a), abs(b))

    Raises:
        ValueError: Если одна из толерантностей отрицательна
    """
    if max_relative < 0:
        raise ValueError(f"max_relative must be non-negative, got {max_relative}")
    if abs_tol < 0:
        raise ValueError(f"abs_tol must be non-negative, got {abs_tol}")

    with decimal_guard("is_relatively_close"):
        diff = abs(a - b)
        if diff <= abs_tol:
            return True
        return diff <= max_relative * max(abs(a), abs(b))


def compare(a: Decimal, b: Decimal) -> int:
    """
    Трёхзначное сравнение двух Decimal.

    Returns:
        -1 если a < b, 0 если a == b, +1 если a > b

    Examples:
        >>> compare(Decimal("1.0"), Decimal("1.00"))
        0
        >>> compare(Decimal("1"), Decimal("2"))
        -1
    """
    if a < b:
        return -1
    elif a > b:
        return 1
    else:
        return 0
