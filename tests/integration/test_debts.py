"""DebtTracker 통합 테스트

Pago 합계에서 상태 파생, 할부 금액, 요약
"""

from decimal import Decimal

import pytest

from core.debts.tracker import DebtTracker, derive_estado, installment_amount
from core.errors import NotFoundError, ValidationError
from core.types import EstadoDeuda, TipoPago


class TestDeriveEstado:
    """derive_estado 순수 함수 테스트"""

    def test_boundaries(self) -> None:
        total = Decimal("1000.00")

        assert derive_estado(Decimal("0"), total) == EstadoDeuda.PENDIENTE
        assert derive_estado(Decimal("0.01"), total) == EstadoDeuda.EN_CURSO
        assert derive_estado(Decimal("999.99"), total) == EstadoDeuda.EN_CURSO
        assert derive_estado(Decimal("1000.00"), total) == EstadoDeuda.PAGADA
        assert derive_estado(Decimal("1200.00"), total) == EstadoDeuda.PAGADA

    def test_installment_half_up(self) -> None:
        assert installment_amount(Decimal("1000.00"), 3) == Decimal("333.33")
        assert installment_amount(Decimal("100.00"), 8) == Decimal("12.50")
        assert installment_amount(Decimal("0.05"), 2) == Decimal("0.03")


class TestDebtLifecycle:
    """Deuda 등록 / 상환 테스트"""

    @pytest.mark.asyncio
    async def test_cuotas_example(self, debts: DebtTracker) -> None:
        """1000 / 4 할부: 250 두 번 → EN_CURSO, 500 한 번 더 → PAGADA"""
        deuda = await debts.create(
            "Préstamo", "Banco Provincia", "1000", TipoPago.CUOTAS, "2025-01-01",
            cantidad_cuotas=4,
        )
        assert deuda.monto_cuota == Decimal("250.00")
        assert deuda.estado == EstadoDeuda.PENDIENTE

        await debts.register_payment(deuda.id, "2025-02-01", "250", numero_cuota=1)
        _, message = await debts.register_payment(deuda.id, "2025-03-01", "250", numero_cuota=2)

        current = await debts.get(deuda.id)
        assert current.estado == EstadoDeuda.EN_CURSO
        assert current.total_pagado == Decimal("500.00")
        assert current.saldo_pendiente == Decimal("500.00")
        assert message == "Pago registrado. Pendiente: $500.00"

        pago, message = await debts.register_payment(deuda.id, "2025-04-01", "500")
        assert message == "Deuda pagada completamente!"
        assert pago.monto == Decimal("500.00")
        assert (await debts.get(deuda.id)).estado == EstadoDeuda.PAGADA

    @pytest.mark.asyncio
    async def test_delete_payment_rederives(self, debts: DebtTracker) -> None:
        deuda = await debts.create("Luz", "Edelap", "300", TipoPago.LIBRE, "2025-01-01")
        pago, _ = await debts.register_payment(deuda.id, "2025-01-10", "300")

        after = await debts.delete_payment(pago.id)

        assert after.estado == EstadoDeuda.PENDIENTE
        assert after.pagos == []

    @pytest.mark.asyncio
    async def test_order_independent(self, debts: DebtTracker) -> None:
        """같은 Pago 집합이면 입력/삭제 순서와 무관하게 같은 상태"""
        deuda = await debts.create("Alquiler", "Propietario", "900", TipoPago.LIBRE, "2025-01-01")
        p1, _ = await debts.register_payment(deuda.id, "2025-01-05", "600")
        await debts.register_payment(deuda.id, "2025-01-06", "300")
        await debts.delete_payment(p1.id)
        await debts.register_payment(deuda.id, "2025-01-07", "600")

        assert (await debts.get(deuda.id)).estado == EstadoDeuda.PAGADA

    @pytest.mark.asyncio
    async def test_libre_has_no_installments(self, debts: DebtTracker) -> None:
        deuda = await debts.create(
            "Varios", "Proveedor", "100", TipoPago.LIBRE, "2025-01-01", cantidad_cuotas=3
        )

        assert deuda.cantidad_cuotas is None
        assert deuda.monto_cuota is None

    @pytest.mark.asyncio
    async def test_invalid_inputs(self, debts: DebtTracker) -> None:
        with pytest.raises(ValidationError):
            await debts.create("X", "Y", "0", TipoPago.LIBRE, "2025-01-01")
        with pytest.raises(ValidationError):
            await debts.create("X", "Y", "10", TipoPago.CUOTAS, "2025-01-01", cantidad_cuotas=0)
        with pytest.raises(ValidationError):
            await debts.create("X", "Y", "10", "MENSUAL", "2025-01-01")

    @pytest.mark.asyncio
    async def test_payment_validation(self, debts: DebtTracker) -> None:
        deuda = await debts.create("X", "Y", "10", TipoPago.LIBRE, "2025-01-01")

        with pytest.raises(ValidationError):
            await debts.register_payment(deuda.id, "2025-01-02", "-5")
        with pytest.raises(NotFoundError):
            await debts.register_payment(999, "2025-01-02", "5")
        with pytest.raises(NotFoundError):
            await debts.delete_payment(999)


class TestUpdate:
    """update 테스트"""

    @pytest.mark.asyncio
    async def test_total_change_recomputes_cuota_and_estado(self, debts: DebtTracker) -> None:
        deuda = await debts.create(
            "Préstamo", "Banco", "1000", TipoPago.CUOTAS, "2025-01-01", cantidad_cuotas=4
        )
        await debts.register_payment(deuda.id, "2025-02-01", "600")

        updated = await debts.update(deuda.id, monto_total="600")

        assert updated.monto_cuota == Decimal("150.00")
        assert updated.estado == EstadoDeuda.PAGADA

    @pytest.mark.asyncio
    async def test_switch_to_libre_clears_installments(self, debts: DebtTracker) -> None:
        deuda = await debts.create(
            "Préstamo", "Banco", "1000", TipoPago.CUOTAS, "2025-01-01", cantidad_cuotas=4
        )

        updated = await debts.update(deuda.id, tipo_pago="LIBRE")

        assert updated.tipo_pago == TipoPago.LIBRE
        assert updated.cantidad_cuotas is None
        assert updated.monto_cuota is None

    @pytest.mark.asyncio
    async def test_text_only_keeps_cuota(self, debts: DebtTracker) -> None:
        deuda = await debts.create(
            "Préstamo", "Banco", "1000", TipoPago.CUOTAS, "2025-01-01", cantidad_cuotas=3
        )

        updated = await debts.update(deuda.id, acreedor="Banco Nación", observaciones="renegociado")

        assert updated.acreedor == "Banco Nación"
        assert updated.monto_cuota == Decimal("333.33")

    @pytest.mark.asyncio
    async def test_unknown_field(self, debts: DebtTracker) -> None:
        deuda = await debts.create("X", "Y", "10", TipoPago.LIBRE, "2025-01-01")

        with pytest.raises(ValidationError, match="estado"):
            await debts.update(deuda.id, estado="PAGADA")


class TestQueries:
    """목록 / 요약 / 삭제 테스트"""

    @pytest.mark.asyncio
    async def test_resumen_excludes_paid(self, debts: DebtTracker) -> None:
        a = await debts.create("A", "X", "1000", TipoPago.LIBRE, "2025-01-01")
        b = await debts.create("B", "X", "500", TipoPago.LIBRE, "2025-01-02")
        await debts.create("C", "X", "200", TipoPago.LIBRE, "2025-01-03")
        await debts.register_payment(a.id, "2025-01-10", "250")
        await debts.register_payment(b.id, "2025-01-10", "500")

        resumen = await debts.get_resumen()

        assert resumen == {
            "total_deuda": "1200.00",
            "total_pagado": "250.00",
            "total_pendiente": "950.00",
            "deudas_activas": 2,
            "deudas_pagadas": 1,
        }

    @pytest.mark.asyncio
    async def test_list_filter_and_order(self, debts: DebtTracker) -> None:
        old = await debts.create("Viejo", "X", "10", TipoPago.LIBRE, "2024-12-01")
        new = await debts.create("Nuevo", "X", "10", TipoPago.LIBRE, "2025-02-01")
        await debts.register_payment(new.id, "2025-02-02", "5")

        assert [d.id for d in await debts.list_all()] == [new.id, old.id]
        assert [d.id for d in await debts.list_all(EstadoDeuda.EN_CURSO)] == [new.id]
        assert (await debts.list_all())[0].total_pagado == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_delete_removes_payments(self, debts: DebtTracker, db) -> None:
        deuda = await debts.create("X", "Y", "10", TipoPago.LIBRE, "2025-01-01")
        await debts.register_payment(deuda.id, "2025-01-02", "5")

        await debts.delete(deuda.id)

        with pytest.raises(NotFoundError):
            await debts.get(deuda.id)
        row = await db.fetchone("SELECT COUNT(*) FROM deudas_pagos")
        assert row[0] == 0
