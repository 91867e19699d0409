"""
Тесты для модуля Decimal Safeguards

Проверяет:
1. Разбор decimal-like входа (to_decimal)
2. Границу MAX_VALUE
3. Трансляцию сигналов decimal в InvariantError (decimal_guard)
4. Epsilon-сравнения и трёхзначное сравнение
5. Изоляцию контекста вычислений
"""

import decimal
import threading
from decimal import Decimal

import pytest

from positive_decimal.core.errors import (
    DecimalOverflowError,
    DivisionByZeroError,
    ParseFailureError,
)
from positive_decimal.core.math import (
    DECIMAL_CONTEXT,
    DECIMAL_PRECISION,
    EPSILON,
    MAX_VALUE,
    check_bounds,
    compare,
    decimal_guard,
    MAX_RELATIVE,
    is_close,
    is_relatively_close,
    is_valid_decimal,
    to_decimal,
)


# =============================================================================
# ТЕСТЫ РАЗБОРА
# =============================================================================


class TestToDecimal:
    """Тесты для to_decimal"""

    def test_sign_not_checked(self) -> None:
        """Отрицательные значения разбираются без ошибки"""
        assert to_decimal(-3) == Decimal("-3")
        assert to_decimal("-1.5") == Decimal("-1.5")

    def test_float_shortest_repr(self) -> None:
        """Float переводится через repr"""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(1e-7) == Decimal("1e-7")

    def test_decimal_identity(self) -> None:
        """Decimal возвращается без изменений"""
        value = Decimal("12.3400")
        assert to_decimal(value) is value

    def test_negative_zero_normalized(self) -> None:
        """-0 → 0"""
        assert str(to_decimal("-0")) == "0"
        assert not to_decimal(Decimal("-0.0")).is_signed()

    def test_excess_digits_rounded(self) -> None:
        """Больше DECIMAL_PRECISION цифр: ROUND_HALF_EVEN до 29 цифр"""
        assert to_decimal("0.1234567890123456789012345678951") == Decimal(
            "0.12345678901234567890123456790"
        )
        assert to_decimal(Decimal("1.00000000000000000000000000025")) == Decimal(
            "1.0000000000000000000000000002"
        )
        with pytest.raises(DecimalOverflowError):
            to_decimal(10**30 + 1)

    def test_whitespace_stripped(self) -> None:
        assert to_decimal("\t 5 \n") == 5

    @pytest.mark.parametrize("raw", ["1_0", "abc", "", " ", "1,5"])
    def test_malformed_strings(self, raw: str) -> None:
        with pytest.raises(ParseFailureError):
            to_decimal(raw)

    def test_bool_rejected(self) -> None:
        """bool не считается числом"""
        with pytest.raises(ParseFailureError, match="bool"):
            to_decimal(False)

    def test_unsupported_type(self) -> None:
        with pytest.raises(ParseFailureError, match="unsupported type"):
            to_decimal(object())

    def test_non_finite(self) -> None:
        with pytest.raises(ParseFailureError, match="not finite"):
            to_decimal(float("nan"))
        with pytest.raises(ParseFailureError, match="not finite"):
            to_decimal(Decimal("-Infinity"))

    def test_parse_failure_chains_cause(self) -> None:
        """Причина decimal.InvalidOperation сохраняется"""
        with pytest.raises(ParseFailureError) as exc_info:
            to_decimal("abc")
        assert isinstance(exc_info.value.__cause__, decimal.InvalidOperation)


class TestBounds:
    """Тесты границы MAX_VALUE"""

    def test_max_value(self) -> None:
        """MAX_VALUE = 2^96 - 1"""
        assert MAX_VALUE == 2**96 - 1

    def test_within_bounds(self) -> None:
        assert check_bounds(MAX_VALUE) == MAX_VALUE
        assert check_bounds(MAX_VALUE.copy_negate()) == MAX_VALUE.copy_negate()

    def test_out_of_bounds(self) -> None:
        with pytest.raises(DecimalOverflowError, match="magnitude exceeds"):
            check_bounds(Decimal(2**96))
        with pytest.raises(DecimalOverflowError):
            to_decimal(-(2**97))

    def test_is_valid_decimal(self) -> None:
        assert is_valid_decimal(Decimal("1"))
        assert not is_valid_decimal(Decimal("NaN"))
        assert not is_valid_decimal(Decimal("Infinity"))


# =============================================================================
# ТЕСТЫ ОГРАНИЧЕННЫХ ВЫЧИСЛЕНИЙ
# =============================================================================


class TestDecimalGuard:
    """Тесты для decimal_guard"""

    def test_context_precision(self) -> None:
        """Вычисления идут с точностью DECIMAL_PRECISION"""
        with decimal_guard("div") as ctx:
            assert ctx.prec == DECIMAL_PRECISION
            result = Decimal(2) / Decimal(3)
        assert len(result.as_tuple().digits) == DECIMAL_PRECISION

    def test_max_value_exact_in_context(self) -> None:
        """MAX_VALUE представимо в контексте без округления"""
        with decimal_guard("add"):
            assert MAX_VALUE + 0 == MAX_VALUE

    def test_division_by_zero_translated(self) -> None:
        with pytest.raises(DivisionByZeroError) as exc_info:
            with decimal_guard("div"):
                Decimal(1) / Decimal(0)
        assert isinstance(exc_info.value.__cause__, decimal.DivisionByZero)

    def test_overflow_translated(self) -> None:
        with pytest.raises(DecimalOverflowError, match="overflowed"):
            with decimal_guard("mul"):
                Decimal("9e999999") * 10

    def test_precision_exceeded_translated(self) -> None:
        """Выход quantize за точность → DecimalOverflowError"""
        with pytest.raises(DecimalOverflowError, match="precision"):
            with decimal_guard("round_to"):
                Decimal("1e40").quantize(Decimal("0.01"))

    def test_context_not_leaked(self) -> None:
        """Контекст потока восстанавливается после выхода"""
        before = decimal.getcontext().prec
        with decimal_guard("add"):
            pass
        assert decimal.getcontext().prec == before

    def test_shared_context_untouched(self) -> None:
        """Флаги общего DECIMAL_CONTEXT не изменяются"""
        with decimal_guard("div"):
            Decimal(1) / Decimal(3)
        assert not any(DECIMAL_CONTEXT.flags.values())

    def test_thread_isolation(self) -> None:
        """Каждый поток получает свою копию контекста"""
        results: list[int] = []

        def worker() -> None:
            with decimal_guard("div") as ctx:
                results.append(ctx.prec)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [DECIMAL_PRECISION] * 4


# =============================================================================
# ТЕСТЫ СРАВНЕНИЙ
# =============================================================================


class TestComparisons:
    """Тесты is_close и compare"""

    def test_is_close_default_eps(self) -> None:
        assert is_close(Decimal("1"), Decimal("1") + EPSILON)
        assert not is_close(Decimal("1"), Decimal("1") + EPSILON * 2)

    def test_is_close_negative_tol(self) -> None:
        with pytest.raises(ValueError, match="abs_tol must be non-negative"):
            is_close(Decimal("1"), Decimal("1"), abs_tol=Decimal("-1"))

    def test_is_relatively_close(self) -> None:
        assert MAX_RELATIVE == EPSILON * 100
        assert is_relatively_close(Decimal("1e20"), Decimal("1e20") + 1)
        assert not is_close(Decimal("1e20"), Decimal("1e20") + 1)
        assert not is_relatively_close(Decimal("1"), Decimal("1.1"))
        assert is_relatively_close(Decimal("0"), Decimal("1e-17"))

    def test_is_relatively_close_negative_tol(self) -> None:
        with pytest.raises(ValueError, match="max_relative must be non-negative"):
            is_relatively_close(Decimal("1"), Decimal("1"), max_relative=Decimal("-1"))
        with pytest.raises(ValueError, match="abs_tol must be non-negative"):
            is_relatively_close(Decimal("1"), Decimal("1"), abs_tol=Decimal("-1"))

    def test_compare(self) -> None:
        assert compare(Decimal("1.0"), Decimal("1.00")) == 0
        assert compare(Decimal("1"), Decimal("2")) == -1
        assert compare(Decimal("2"), Decimal("1")) == 1
