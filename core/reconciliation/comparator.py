"""
Reconciliation Comparator

독립적으로 작성된 두 금액 목록(외부 기준 vs 원장)을 비교하여 불일치 감지.

비교 방식:
- 센타보 단위 반올림 후 다중집합 빈도 비교
- 한쪽이 더 많이 가진 금액은 초과 횟수만큼 반복하여 결과에 포함
- net_difference = Σ only_in_store - Σ only_in_reference

어느 레코드가 어느 레코드와 짝인지는 보지 않음 (건수 비교만).
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.utils.money import money_str, sum_money, to_money

if TYPE_CHECKING:
    from core.ledger.journal import MovementJournal

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """비교 결과

    Attributes:
        only_in_reference: 기준 목록에만 있는(초과) 금액
        only_in_store: 원장에만 있는(초과) 금액
        net_difference: Σ only_in_store - Σ only_in_reference
        reference_count: 기준 목록 건수
        store_count: 원장 목록 건수
    """
    only_in_reference: list[Decimal] = field(default_factory=list)
    only_in_store: list[Decimal] = field(default_factory=list)
    net_difference: Decimal = Decimal("0.00")
    reference_count: int = 0
    store_count: int = 0

    @property
    def is_reconciled(self) -> bool:
        """불일치 없음 여부"""
        return not self.only_in_reference and not self.only_in_store

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "only_in_reference": [money_str(m) for m in self.only_in_reference],
            "only_in_store": [money_str(m) for m in self.only_in_store],
            "total_only_in_reference": money_str(sum_money(self.only_in_reference)),
            "total_only_in_store": money_str(sum_money(self.only_in_store)),
            "net_difference": money_str(self.net_difference),
            "reference_count": self.reference_count,
            "store_count": self.store_count,
            "is_reconciled": self.is_reconciled,
        }


def _excess(
    left: list[Decimal],
    left_counts: Counter,
    right_counts: Counter,
) -> list[Decimal]:
    """left가 right보다 많이 가진 금액 (최초 등장 순서, 초과 횟수만큼 반복)"""
    result: list[Decimal] = []
    for amount in dict.fromkeys(left):
        extra = left_counts[amount] - right_counts.get(amount, 0)
        result.extend([amount] * max(extra, 0))
    return result


class ReconciliationComparator:
    """금액 목록 비교기

    Args:
        journal: compare_account_egresos()용 원장 (compare()만 쓰면 불필요)
    """

    def __init__(self, journal: MovementJournal | None = None):
        self.journal = journal

    def compare(
        self,
        reference: Iterable[Decimal | int | float | str],
        store: Iterable[Decimal | int | float | str],
    ) -> ReconciliationResult:
        """두 금액 목록 비교

        Args:
            reference: 외부 기준 목록 (정규화된 숫자)
            store: 원장 측 목록

        Returns:
            ReconciliationResult

        Example:
            >>> r = ReconciliationComparator().compare([100, 100, 50], [100, 50, 50])
            >>> r.only_in_reference, r.only_in_store, r.net_difference
            ([Decimal('100.00')], [Decimal('50.00')], Decimal('-50.00'))
        """
        ref = [to_money(m) for m in reference]
        sto = [to_money(m) for m in store]

        ref_counts = Counter(ref)
        sto_counts = Counter(sto)

        only_ref = _excess(ref, ref_counts, sto_counts)
        only_sto = _excess(sto, sto_counts, ref_counts)

        net = sum_money(only_sto) - sum_money(only_ref)

        result = ReconciliationResult(
            only_in_reference=only_ref,
            only_in_store=only_sto,
            net_difference=net,
            reference_count=len(ref),
            store_count=len(sto),
        )

        logger.debug(
            f"비교 완료: 기준 {len(ref)}건, 원장 {len(sto)}건, 차이 {money_str(net)}",
            extra={
                "only_in_reference": len(only_ref),
                "only_in_store": len(only_sto),
            },
        )
        return result

    async def compare_account_egresos(
        self,
        cuenta_id: int,
        reference: Iterable[Decimal | int | float | str],
        desde: date | str | None = None,
        hasta: date | str | None = None,
    ) -> ReconciliationResult:
        """계정의 EGRESO(절댓값, 체인 순서)와 기준 목록 비교

        Raises:
            RuntimeError: journal 없이 생성된 경우
            NotFoundError: 계정이 없는 경우
        """
        if self.journal is None:
            raise RuntimeError("ReconciliationComparator requires a MovementJournal")

        movements = await self.journal.list_by_account(cuenta_id, desde, hasta)
        egresos = [-m.monto for m in movements if m.monto < 0]

        result = self.compare(reference, egresos)
        logger.info(
            f"계정 EGRESO 비교: 차이 {money_str(result.net_difference)}",
            extra={
                "cuenta_id": cuenta_id,
                "reference_count": result.reference_count,
                "store_count": result.store_count,
            },
        )
        return result
