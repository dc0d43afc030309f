"""
유틸리티 패키지

금액 정규화, 통제 기간 계산 등 공통 유틸리티
"""

from core.utils.money import money_str, round2, sum_money, to_money, to_positive_money
from core.utils.periods import PeriodWindow, to_date, window_for

__all__ = [
    "round2",
    "to_money",
    "to_positive_money",
    "money_str",
    "sum_money",
    "PeriodWindow",
    "to_date",
    "window_for",
]
