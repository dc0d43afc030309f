"""
core/utils/money.py 테스트

센타보 정규화(half-up), 양수 검증, 합계
"""

from decimal import Decimal

import pytest

from core.errors import ValidationError
from core.utils.money import money_str, round2, sum_money, to_money, to_positive_money


class TestRound2:
    """round2 테스트"""

    def test_half_up(self) -> None:
        """0.005는 올림"""
        assert round2(Decimal("333.335")) == Decimal("333.34")
        assert round2(Decimal("0.005")) == Decimal("0.01")

    def test_negative_half_up(self) -> None:
        """음수도 절댓값 기준 올림"""
        assert round2(Decimal("-1.005")) == Decimal("-1.01")

    def test_already_rounded(self) -> None:
        assert round2(Decimal("10.50")) == Decimal("10.50")


class TestToMoney:
    """to_money 테스트"""

    def test_from_string(self) -> None:
        assert to_money("1234.56") == Decimal("1234.56")
        assert to_money(" 100 ") == Decimal("100.00")

    def test_from_int(self) -> None:
        assert to_money(5) == Decimal("5.00")

    def test_from_float_no_binary_noise(self) -> None:
        """float는 str을 거쳐 변환"""
        assert to_money(0.1 + 0.2) == Decimal("0.30")
        assert to_money(1.15) == Decimal("1.15")

    def test_invalid_string(self) -> None:
        with pytest.raises(ValidationError):
            to_money("1.234,56")

    def test_bool_rejected(self) -> None:
        with pytest.raises(ValidationError):
            to_money(True)  # type: ignore[arg-type]

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(ValidationError):
            to_money(Decimal("NaN"))
        with pytest.raises(ValidationError):
            to_money("Infinity")


class TestToPositiveMoney:
    """to_positive_money 테스트"""

    def test_positive(self) -> None:
        assert to_positive_money("10") == Decimal("10.00")

    @pytest.mark.parametrize("value", ["0", "-5", "0.001"])
    def test_non_positive_rejected(self, value: str) -> None:
        """0, 음수, 반올림 후 0 거부"""
        with pytest.raises(ValidationError, match="monto"):
            to_positive_money(value)

    def test_field_name_in_message(self) -> None:
        with pytest.raises(ValidationError, match="monto total"):
            to_positive_money(0, "monto total")


class TestMoneyStrAndSum:
    """money_str / sum_money 테스트"""

    def test_money_str_two_decimals(self) -> None:
        assert money_str(Decimal("7")) == "7.00"
        assert money_str(Decimal("-0.5")) == "-0.50"

    def test_sum_empty(self) -> None:
        assert sum_money([]) == Decimal("0.00")

    def test_sum_generator(self) -> None:
        assert sum_money(Decimal(x) for x in ["1.10", "2.20", "-0.30"]) == Decimal("3.00")
