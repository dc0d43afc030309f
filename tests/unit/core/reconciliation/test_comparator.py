"""
core/reconciliation/comparator.py 테스트

다중집합 빈도 비교, 초과분 반복, 순차이
"""

from decimal import Decimal

import pytest

from core.reconciliation.comparator import ReconciliationComparator, ReconciliationResult


@pytest.fixture
def comparator() -> ReconciliationComparator:
    return ReconciliationComparator()


class TestCompare:
    """compare 테스트"""

    def test_frequency_difference(self, comparator: ReconciliationComparator) -> None:
        """[100,100,50] vs [100,50,50] → 기준에 100 하나, 원장에 50 하나 초과"""
        result = comparator.compare([100, 100, 50], [100, 50, 50])

        assert result.only_in_reference == [Decimal("100.00")]
        assert result.only_in_store == [Decimal("50.00")]
        assert result.net_difference == Decimal("-50.00")
        assert result.reference_count == 3
        assert result.store_count == 3
        assert not result.is_reconciled

    def test_identical_multisets_any_order(self, comparator: ReconciliationComparator) -> None:
        result = comparator.compare(["10.00", "20.00", "10.00"], ["10", "10", "20"])

        assert result.is_reconciled
        assert result.net_difference == Decimal("0.00")

    def test_excess_repeated_by_count(self, comparator: ReconciliationComparator) -> None:
        """같은 금액이 3번 더 많으면 3번 반복"""
        result = comparator.compare([], ["5", "5", "5", "7"])

        assert result.only_in_store == [Decimal("5.00")] * 3 + [Decimal("7.00")]
        assert result.net_difference == Decimal("22.00")

    def test_first_appearance_order(self, comparator: ReconciliationComparator) -> None:
        result = comparator.compare(["30", "10", "30", "20"], [])

        assert result.only_in_reference == [
            Decimal("30.00"),
            Decimal("30.00"),
            Decimal("10.00"),
            Decimal("20.00"),
        ]

    def test_rounds_to_cents_before_comparing(self, comparator: ReconciliationComparator) -> None:
        """센타보 반올림 후 비교 (0.005 → 0.01)"""
        result = comparator.compare([Decimal("100.005")], [Decimal("100.01")])

        assert result.is_reconciled

    def test_empty(self, comparator: ReconciliationComparator) -> None:
        result = comparator.compare([], [])

        assert result.is_reconciled
        assert result.reference_count == 0


class TestReconciliationResult:
    """ReconciliationResult 테스트"""

    def test_to_dict(self) -> None:
        result = ReconciliationResult(
            only_in_reference=[Decimal("100.00")],
            only_in_store=[Decimal("50.00"), Decimal("25.50")],
            net_difference=Decimal("-24.50"),
            reference_count=4,
            store_count=5,
        )

        data = result.to_dict()

        assert data["only_in_reference"] == ["100.00"]
        assert data["only_in_store"] == ["50.00", "25.50"]
        assert data["total_only_in_reference"] == "100.00"
        assert data["total_only_in_store"] == "75.50"
        assert data["net_difference"] == "-24.50"
        assert data["is_reconciled"] is False


class TestCompareAccountEgresos:
    """compare_account_egresos 테스트 (journal 없음)"""

    @pytest.mark.asyncio
    async def test_requires_journal(self, comparator: ReconciliationComparator) -> None:
        with pytest.raises(RuntimeError):
            await comparator.compare_account_egresos(1, [])
