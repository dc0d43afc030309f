"""
금액 유틸리티

모든 금액은 Decimal, 소수점 2자리(센타보)로 정규화.
float는 str을 거쳐 변환하여 이진 오차 유입 방지.

지역 형식 문자열("1.234,56") 파싱은 코어 책임이 아님 (scripts/compare_egresos.py 참고).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.constants import Money
from core.errors import ValidationError


def round2(value: Decimal) -> Decimal:
    """소수점 2자리 반올림 (half-up)

    Args:
        value: Decimal 값

    Returns:
        0.01 단위로 반올림된 Decimal

    Example:
        >>> round2(Decimal("333.335"))
        Decimal('333.34')
    """
    return value.quantize(Money.CENT, rounding=ROUND_HALF_UP)


def to_money(value: Decimal | int | float | str) -> Decimal:
    """정규화된 숫자 값을 금액 Decimal로 변환

    Args:
        value: Decimal, int, float 또는 숫자 문자열 ("1234.56")

    Returns:
        0.01 단위 Decimal

    Raises:
        ValidationError: 숫자로 변환할 수 없거나 유한하지 않은 값
    """
    if isinstance(value, bool):
        raise ValidationError(f"Monto inválido: {value!r}")

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Monto inválido: {value!r}") from e

    if not amount.is_finite():
        raise ValidationError(f"Monto inválido: {value!r}")

    return round2(amount)


def to_positive_money(value: Decimal | int | float | str, field: str = "monto") -> Decimal:
    """양수 금액 검증 후 변환

    Raises:
        ValidationError: 0 이하인 경우
    """
    amount = to_money(value)
    if amount <= 0:
        raise ValidationError(f"El {field} debe ser mayor a cero: {amount}")
    return amount


def money_str(value: Decimal) -> str:
    """저장/직렬화용 문자열 (항상 소수점 2자리)"""
    return str(round2(value))


def sum_money(values) -> Decimal:
    """금액 합계 (빈 목록이면 0.00)"""
    total = Money.ZERO
    for v in values:
        total += v
    return round2(total)
