"""
PositiveDecimal — неотрицательное decimal-значение

Immutable Pydantic RootModel над decimal.Decimal с инвариантом value >= 0,
который выполняется для каждого живого экземпляра.

Замкнутая алгебра:
    add(a, b)  — тотальна по знаку, может поднять DecimalOverflowError
    sub(a, b)  — NegativeValueError если a - b < 0 (без clamp)
    mul(a, b)  — тотальна по знаку, может поднять DecimalOverflowError
    div(a, b)  — DivisionByZeroError если b == 0

Операторы +, -, *, / — тонкие обёртки над методами. Выход из домена
(унарный минус, ln, операции с сырым левым операндом) возвращает
сырой Decimal/float, а не PositiveDecimal.

Сериализация совпадает с сериализацией Decimal в pydantic: строка
в JSON-режиме, без обёртки и тегов. Десериализация повторяет полную
валидацию try_new.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_EVEN, Decimal
from typing import Any, Callable, Optional, Union

from pydantic import ConfigDict, RootModel, ValidationError, field_serializer, field_validator
from pydantic.json_schema import JsonSchemaValue

from positive_decimal.core.contracts import get_schema_loader
from positive_decimal.core.errors import (
    DivisionByZeroError,
    FatalInvariantError,
    InvariantError,
    ParseFailureError,
    negative,
)
from positive_decimal.core.math.decimal_safeguards import (
    EPSILON,
    MAX_RELATIVE,
    MAX_VALUE,
    DecimalLike,
    check_bounds,
    compare,
    decimal_guard,
    is_close,
    is_relatively_close,
    to_decimal,
)

logger = logging.getLogger(__name__)

Operand = Union["PositiveDecimal", Decimal, int, float]


# =============================================================================
# POSITIVE DECIMAL MODEL
# =============================================================================


class PositiveDecimal(RootModel[Decimal]):
    """
    Неотрицательное decimal-значение.

    Immutable модель (frozen=True): изменение создаёт новый экземпляр.
    Конструирование только через валидирующие пути: try_new, pos,
    PositiveDecimal(raw), model_validate / model_validate_json.

    Для разбора примитивов используйте try_new: он поднимает InvariantError
    напрямую. PositiveDecimal(raw) выполняет тот же разбор, но как любая
    pydantic модель оборачивает ошибку в ValidationError (исходная
    InvariantError доступна через invariant_error_from). model_copy с
    update также валидирует новое значение.
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root", mode="plain")
    @classmethod
    def validate_non_negative(cls, value: Any) -> Decimal:
        """Тот же разбор, что и в try_new."""
        if isinstance(value, PositiveDecimal):
            return value.root
        return parse_non_negative(value)

    @field_serializer("root", when_used="json")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema: Any, handler: Any) -> JsonSchemaValue:
        schema = dict(get_schema_loader().load_schema("positive_decimal"))
        schema.pop("$schema", None)
        schema.pop("$id", None)
        return schema

    def model_copy(
        self, *, update: Optional[Mapping[str, Any]] = None, deep: bool = False
    ) -> "PositiveDecimal":
        """
        Копия экземпляра. Новое значение в update проходит валидацию try_new.

        Raises:
            InvariantError: update["root"] нарушает инвариант
            ValueError: update содержит поля, отличные от "root"
        """
        if not update:
            return super().model_copy(deep=deep)
        unknown = set(update) - {"root"}
        if unknown:
            raise ValueError(f"PositiveDecimal has no fields {sorted(unknown)}")
        return type(self).try_new(update["root"])

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def try_new(cls, raw: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Валидирующий конструктор.

        Args:
            raw: PositiveDecimal, Decimal, int, float или str

        Returns:
            Экземпляр, value которого точно равен разобранному decimal

        Raises:
            NegativeValueError: raw < 0
            ParseFailureError: некорректная строка, NaN/Inf, неподдерживаемый тип
            DecimalOverflowError: raw > MAX_VALUE
        """
        if isinstance(raw, PositiveDecimal):
            return raw
        try:
            value = parse_non_negative(raw)
        except InvariantError as exc:
            logger.debug("Rejected %r: %s", raw, exc)
            raise
        return cls.model_construct(value)

    @classmethod
    def zero(cls) -> "PositiveDecimal":
        """Аддитивная единица."""
        return ZERO

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "PositiveDecimal":
        """
        Десериализация JSON-литерала (строка или число).

        Raises:
            InvariantError: Та же таксономия, что и у try_new;
                невалидный JSON → ParseFailureError
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise invariant_error_from(exc) from exc

    @classmethod
    def sum(cls, values: Iterable[Operand]) -> "PositiveDecimal":
        """
        Сумма последовательности, ZERO для пустой.

        Raises:
            DecimalOverflowError: Сумма превышает MAX_VALUE
        """
        total = ZERO
        for value in values:
            total = total.add(value)
        return total

    @classmethod
    def _from_result(cls, result: Decimal, operation: str) -> "PositiveDecimal":
        # Единственная точка, где результат арифметики снова становится экземпляром
        check_bounds(result)
        if result < 0:
            error = negative(result, operation)
            logger.debug("Rejected %s result: %s", operation, error)
            raise error
        if result.is_zero():
            result = result.copy_abs()
        return cls.model_construct(result)

    # -------------------------------------------------------------------------
    # Accessors & conversions
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Decimal:
        """Обёрнутый Decimal."""
        return self.root

    def to_decimal(self) -> Decimal:
        return self.root

    def to_float(self) -> float:
        """Конверсия в float; потеря точности ожидаема и не является ошибкой."""
        return float(self.root)

    def to_int(self) -> int:
        """Целая часть (усечение к нулю)."""
        return int(self.root)

    def is_zero(self) -> bool:
        return self.root.is_zero()

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return self.to_int()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        return str(self.root)

    def __repr__(self) -> str:
        return f"PositiveDecimal('{self.root}')"

    def __format__(self, format_spec: str) -> str:
        return format(self.root, format_spec)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Сложение. Для двух PositiveDecimal тотально по знаку.

        Raises:
            DecimalOverflowError: Сумма превышает MAX_VALUE
            NegativeValueError: Сырой отрицательный операнд увёл сумму ниже нуля
        """
        rhs = _operand_value(other)
        with decimal_guard("add"):
            result = self.root + rhs
        return self._from_result(result, "add")

    def sub(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Вычитание. Никогда не ограничивает результат нулём.

        Raises:
            NegativeValueError: self - other < 0
        """
        rhs = _operand_value(other)
        with decimal_guard("sub"):
            result = self.root - rhs
        return self._from_result(result, "sub")

    def sub_or_none(
        self, other: Union["PositiveDecimal", DecimalLike]
    ) -> Optional["PositiveDecimal"]:
        """Вычитание, None вместо NegativeValueError."""
        rhs = _operand_value(other)
        if self.root < rhs:
            return None
        return self.sub(rhs)

    def mul(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Умножение. Для двух PositiveDecimal тотально по знаку.

        Raises:
            DecimalOverflowError: Произведение превышает MAX_VALUE
            NegativeValueError: Сырой отрицательный множитель
        """
        rhs = _operand_value(other)
        with decimal_guard("mul"):
            result = self.root * rhs
        return self._from_result(result, "mul")

    def div(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Деление.

        Raises:
            DivisionByZeroError: other == 0
            NegativeValueError: Сырой отрицательный делитель
            DecimalOverflowError: Частное превышает MAX_VALUE
        """
        rhs = _operand_value(other)
        if rhs.is_zero():
            raise DivisionByZeroError(self.root, "division by zero")
        with decimal_guard("div"):
            result = self.root / rhs
        return self._from_result(result, "div")

    def negate(self) -> Decimal:
        """Унарный минус. Результат покидает домен: сырой Decimal."""
        # copy_negate не округляет до точности текущего контекста
        return self.root.copy_negate()

    def __add__(self, other: Any) -> "PositiveDecimal":
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Any) -> "PositiveDecimal":
        if not _is_operand(other):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other: Any) -> "PositiveDecimal":
        if not _is_operand(other):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other: Any) -> "PositiveDecimal":
        if not _is_operand(other):
            return NotImplemented
        return self.div(other)

    # Сырой левый операнд: результат в типе левого операнда
    def __radd__(self, other: Any) -> Union[Decimal, float]:
        return self._reflected(other, "add", lambda a, b: a + b)

    def __rsub__(self, other: Any) -> Union[Decimal, float]:
        return self._reflected(other, "sub", lambda a, b: a - b)

    def __rmul__(self, other: Any) -> Union[Decimal, float]:
        return self._reflected(other, "mul", lambda a, b: a * b)

    def __rtruediv__(self, other: Any) -> Union[Decimal, float]:
        return self._reflected(other, "div", lambda a, b: a / b)

    def _reflected(self, other: Any, operation: str, op: Callable[[Any, Any], Any]) -> Any:
        if not _is_operand(other) or isinstance(other, PositiveDecimal):
            return NotImplemented
        if operation == "div" and self.is_zero():
            raise DivisionByZeroError(other, "division by zero")
        if isinstance(other, float):
            return op(other, self.to_float())
        with decimal_guard(operation):
            return op(Decimal(other), self.root)

    def __neg__(self) -> Decimal:
        return self.negate()

    def __pos__(self) -> "PositiveDecimal":
        return self

    def __abs__(self) -> "PositiveDecimal":
        return self

    # -------------------------------------------------------------------------
    # Comparison & ordering
    # -------------------------------------------------------------------------

    def compare(self, other: Operand) -> int:
        """
        Трёхзначное сравнение.

        Returns:
            -1, 0 или +1

        Raises:
            TypeError: Неподдерживаемый тип или NaN
        """
        rhs = _comparable(other)
        if rhs is NotImplemented or rhs is None:
            raise TypeError(f"Cannot compare PositiveDecimal with {other!r}")
        return compare(self.root, rhs)

    def __eq__(self, other: Any) -> bool:
        rhs = _comparable(other)
        if rhs is NotImplemented:
            return NotImplemented
        if rhs is None:
            return False
        return self.root == rhs

    def __hash__(self) -> int:
        return hash(self.root)

    def __lt__(self, other: Any) -> bool:
        rhs = _comparable(other)
        if rhs is NotImplemented:
            return NotImplemented
        return rhs is not None and self.root < rhs

    def __le__(self, other: Any) -> bool:
        rhs = _comparable(other)
        if rhs is NotImplemented:
            return NotImplemented
        return rhs is not None and self.root <= rhs

    def __gt__(self, other: Any) -> bool:
        rhs = _comparable(other)
        if rhs is NotImplemented:
            return NotImplemented
        return rhs is not None and self.root > rhs

    def __ge__(self, other: Any) -> bool:
        rhs = _comparable(other)
        if rhs is NotImplemented:
            return NotImplemented
        return rhs is not None and self.root >= rhs

    def max(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        other = try_new(other)
        return self if self >= other else other

    def min(self, other: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        other = try_new(other)
        return self if self <= other else other

    def clamp(
        self,
        lower: Union["PositiveDecimal", DecimalLike],
        upper: Union["PositiveDecimal", DecimalLike],
    ) -> "PositiveDecimal":
        """
        Ограничение значения диапазоном [lower, upper].

        Raises:
            ValueError: Если lower > upper
        """
        lower, upper = try_new(lower), try_new(upper)
        if lower > upper:
            raise ValueError(f"lower {lower} must not exceed upper {upper}")
        if self < lower:
            return lower
        if self > upper:
            return upper
        return self

    def is_close(
        self, other: Union["PositiveDecimal", DecimalLike], abs_tol: Decimal = EPSILON
    ) -> bool:
        """Равенство с абсолютной толерантностью (default: EPSILON)."""
        return is_close(self.root, _operand_value(other), abs_tol=abs_tol)

    def is_relatively_close(
        self,
        other: Union["PositiveDecimal", DecimalLike],
        max_relative: Decimal = MAX_RELATIVE,
        abs_tol: Decimal = EPSILON,
    ) -> bool:
        """Равенство с относительной толерантностью (default: 100 * EPSILON)."""
        return is_relatively_close(
            self.root, _operand_value(other), max_relative=max_relative, abs_tol=abs_tol
        )

    def is_multiple_of(self, other: Union["PositiveDecimal", DecimalLike]) -> bool:
        """
        Кратность другому значению с толерантностью EPSILON.

        Returns:
            False если other равен нулю
        """
        rhs = _operand_value(other)
        if rhs.is_zero():
            return False
        with decimal_guard("is_multiple_of") as ctx:
            # Целая часть частного должна помещаться в точность контекста
            ctx.prec = max(ctx.prec, self.root.adjusted() - rhs.adjusted() + 2)
            remainder = self.root % rhs
        return abs(remainder) < EPSILON

    # -------------------------------------------------------------------------
    # Rounding & functions
    # -------------------------------------------------------------------------

    def floor(self) -> "PositiveDecimal":
        with decimal_guard("floor"):
            result = self.root.to_integral_value(rounding=ROUND_FLOOR)
        return self._from_result(result, "floor")

    def ceiling(self) -> "PositiveDecimal":
        with decimal_guard("ceiling"):
            result = self.root.to_integral_value(rounding=ROUND_CEILING)
        return self._from_result(result, "ceiling")

    def round(self) -> "PositiveDecimal":
        """Округление до целого (banker's rounding)."""
        return self.round_to(0)

    def round_to(self, places: int) -> "PositiveDecimal":
        """
        Округление до places знаков после запятой (ROUND_HALF_EVEN).

        Raises:
            ValueError: Если places < 0
        """
        if places < 0:
            raise ValueError(f"places must be non-negative, got {places}")
        exponent = self.root.as_tuple().exponent
        if isinstance(exponent, int) and exponent >= -places:
            return self
        with decimal_guard("round_to") as ctx:
            ctx.prec = max(ctx.prec, self.root.adjusted() + places + 2)
            result = self.root.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)
        return self._from_result(result, "round_to")

    def format_fixed_places(self, places: int) -> str:
        """Строка с фиксированным числом знаков: 4.5 → '4.50' для places=2."""
        return f"{self.round_to(places).root:.{places}f}"

    def round_to_nice_number(self) -> "PositiveDecimal":
        """
        Округление до "красивого" числа 1, 2, 5 или 10, умноженного на
        степень десяти порядка значения: 0.037 → 0.05, 1234 → 1000.

        Returns:
            ZERO для нулевого значения

        Raises:
            DecimalOverflowError: Результат превышает MAX_VALUE
        """
        if self.is_zero():
            return ZERO
        magnitude = self.root.adjusted()
        with decimal_guard("round_to_nice_number"):
            normalized = self.root.scaleb(-magnitude)
            if normalized < Decimal("1.5"):
                nice = 1
            elif normalized < 3:
                nice = 2
            elif normalized < 7:
                nice = 5
            else:
                nice = 10
            result = nice * Decimal(10) ** magnitude
        return self._from_result(result, "round_to_nice_number")

    def sqrt(self) -> "PositiveDecimal":
        with decimal_guard("sqrt"):
            result = self.root.sqrt()
        return self._from_result(result, "sqrt")

    def exp(self) -> "PositiveDecimal":
        """
        Экспонента e^value (>= 1).

        Raises:
            DecimalOverflowError: Результат превышает MAX_VALUE
        """
        with decimal_guard("exp"):
            result = self.root.exp()
        return self._from_result(result, "exp")

    def pow(self, exponent: Union["PositiveDecimal", DecimalLike]) -> "PositiveDecimal":
        """
        Возведение в степень. Неотрицательное основание даёт
        неотрицательный результат при любом конечном показателе.

        Raises:
            DivisionByZeroError: Нулевое основание и отрицательный показатель
            DecimalOverflowError: Результат превышает MAX_VALUE
        """
        power = _operand_value(exponent)
        if power.is_zero():
            return ONE
        if self.is_zero() and power < 0:
            raise DivisionByZeroError(self.root, "zero raised to a negative power")
        with decimal_guard("pow"):
            result = self.root**power
        return self._from_result(result, "pow")

    def ln(self) -> Decimal:
        """
        Натуральный логарифм. Результат может быть отрицательным: сырой Decimal.

        Raises:
            ValueError: Для нулевого значения
        """
        if self.is_zero():
            raise ValueError("logarithm of zero is undefined")
        with decimal_guard("ln"):
            return self.root.ln()

    def log10(self) -> Decimal:
        """
        Десятичный логарифм. Результат может быть отрицательным: сырой Decimal.

        Raises:
            ValueError: Для нулевого значения
        """
        if self.is_zero():
            raise ValueError("logarithm of zero is undefined")
        with decimal_guard("log10"):
            return self.root.log10()


# =============================================================================
# OPERAND HELPERS
# =============================================================================


def _is_operand(value: Any) -> bool:
    return isinstance(value, (PositiveDecimal, Decimal, int, float)) and not isinstance(
        value, bool
    )


def _operand_value(value: Union[PositiveDecimal, DecimalLike]) -> Decimal:
    # Правый операнд может быть отрицательным: проверяется результат
    if isinstance(value, PositiveDecimal):
        return value.root
    return to_decimal(value)


def _comparable(value: Any) -> Any:
    """
    Decimal для точного сравнения, None для NaN, NotImplemented для чужих типов.

    Float сравнивается точно (Decimal(float)), согласованно с hash.
    """
    if isinstance(value, PositiveDecimal):
        return value.root
    if isinstance(value, bool):
        return NotImplemented
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return None if math.isnan(value) else Decimal(value)
    return NotImplemented


# =============================================================================
# CONSTRUCTION FUNCTIONS
# =============================================================================


def parse_non_negative(raw: DecimalLike) -> Decimal:
    """
    Разбор decimal-like значения с проверкой инварианта value >= 0.

    Raises:
        NegativeValueError: raw < 0
        ParseFailureError: Вход не является конечным decimal
        DecimalOverflowError: raw > MAX_VALUE
    """
    value = to_decimal(raw)
    if value < 0:
        raise negative(raw)
    return value


def try_new(raw: Union[PositiveDecimal, DecimalLike]) -> PositiveDecimal:
    """Валидирующий конструктор, см. PositiveDecimal.try_new."""
    return PositiveDecimal.try_new(raw)


def zero() -> PositiveDecimal:
    """Аддитивная единица."""
    return ZERO


def pos(raw: Union[PositiveDecimal, DecimalLike]) -> PositiveDecimal:
    """
    Literal-конструктор для заведомо неотрицательных констант.

    ВНИМАНИЕ: нарушение инварианта фатально. Вместо восстанавливаемой
    InvariantError поднимается FatalInvariantError (RuntimeError).
    Используйте только для констант в коде, например pos("0.25");
    для данных извне — try_new.

    Raises:
        FatalInvariantError: Значение отрицательное или не является decimal
    """
    try:
        return try_new(raw)
    except InvariantError as exc:
        logger.error("Literal %r violates the non-negative invariant: %s", raw, exc)
        raise FatalInvariantError(f"pos({raw!r}) is not a non-negative decimal") from exc


def pos_or_none(raw: Union[PositiveDecimal, DecimalLike]) -> Optional[PositiveDecimal]:
    """try_new, возвращающий None вместо InvariantError."""
    try:
        return try_new(raw)
    except InvariantError:
        return None


def invariant_error_from(exc: ValidationError) -> InvariantError:
    """
    Извлечение исходной InvariantError из pydantic ValidationError.

    Ошибки без InvariantError в контексте (например, невалидный JSON)
    становятся ParseFailureError.
    """
    for error in exc.errors():
        cause = (error.get("ctx") or {}).get("error")
        if isinstance(cause, InvariantError):
            return cause
    first = exc.errors()[0] if exc.error_count() else {}
    return ParseFailureError(first.get("input"), first.get("msg", str(exc)))


# =============================================================================
# CONSTANTS
# =============================================================================

ZERO = PositiveDecimal.model_construct(Decimal(0))
ONE = PositiveDecimal.model_construct(Decimal(1))
TWO = PositiveDecimal.model_construct(Decimal(2))
TEN = PositiveDecimal.model_construct(Decimal(10))
HUNDRED = PositiveDecimal.model_construct(Decimal(100))
THOUSAND = PositiveDecimal.model_construct(Decimal(1000))
PI = PositiveDecimal.model_construct(Decimal("3.1415926535897932384626433833"))
E = PositiveDecimal.model_construct(Decimal("2.7182818284590452353602874714"))
MAX = PositiveDecimal.model_construct(MAX_VALUE)
