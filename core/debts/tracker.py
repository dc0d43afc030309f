"""
Deuda 추적

상환(Pago) 기록과 상태 파생.
estado는 항상 전체 Pago 합계에서 다시 계산 (증분 카운터 없음):
- total_pagado <= 0            → PENDIENTE
- total_pagado >= monto_total  → PAGADA
- 그 외                        → EN_CURSO

Pago 입력/삭제 순서와 무관하게 같은 Pago 집합이면 같은 상태.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.domain.models import Debt, Payment
from core.errors import NotFoundError, ValidationError
from core.types import EstadoDeuda, TipoPago
from core.utils.money import money_str, round2, sum_money, to_positive_money
from core.utils.periods import to_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

# update()에서 변경 가능한 필드
UPDATABLE_FIELDS = frozenset({
    "concepto",
    "acreedor",
    "monto_total",
    "tipo_pago",
    "cantidad_cuotas",
    "fecha_inicio",
    "observaciones",
})


def derive_estado(total_pagado: Decimal, monto_total: Decimal) -> EstadoDeuda:
    """Pago 합계에서 상태 파생"""
    if total_pagado <= 0:
        return EstadoDeuda.PENDIENTE
    if total_pagado >= monto_total:
        return EstadoDeuda.PAGADA
    return EstadoDeuda.EN_CURSO


def installment_amount(monto_total: Decimal, cantidad_cuotas: int) -> Decimal:
    """할부 1회 금액 (half-up 반올림)

    Example:
        >>> installment_amount(Decimal("1000.00"), 3)
        Decimal('333.33')
    """
    return round2(monto_total / Decimal(cantidad_cuotas))


class DebtTracker:
    """Deuda 추적기

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create(
        self,
        concepto: str,
        acreedor: str,
        monto_total: Decimal | int | float | str,
        tipo_pago: TipoPago | str,
        fecha_inicio: date | str,
        cantidad_cuotas: int | None = None,
        observaciones: str | None = None,
    ) -> Debt:
        """Deuda 등록 (PENDIENTE)

        CUOTAS + cantidad_cuotas면 monto_cuota 계산.

        Raises:
            ValidationError: monto_total <= 0, cantidad_cuotas <= 0
        """
        concepto = self._require_text(concepto, "concepto")
        acreedor = self._require_text(acreedor, "acreedor")
        total = to_positive_money(monto_total, "monto total")
        tipo_pago = self._parse_tipo_pago(tipo_pago)
        fecha_inicio = to_date(fecha_inicio)
        self._validate_cuotas(cantidad_cuotas)

        monto_cuota = None
        if tipo_pago == TipoPago.CUOTAS and cantidad_cuotas:
            monto_cuota = installment_amount(total, cantidad_cuotas)
        else:
            cantidad_cuotas = None if tipo_pago == TipoPago.LIBRE else cantidad_cuotas

        async with self.db.transaction():
            cursor = await self.db.execute(
                """
                INSERT INTO deudas (
                    concepto, acreedor, monto_total, tipo_pago, cantidad_cuotas,
                    monto_cuota, fecha_inicio, estado, observaciones
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    concepto,
                    acreedor,
                    money_str(total),
                    tipo_pago.value,
                    cantidad_cuotas,
                    money_str(monto_cuota) if monto_cuota is not None else None,
                    fecha_inicio.isoformat(),
                    EstadoDeuda.PENDIENTE.value,
                    observaciones,
                ),
            )
            deuda_id = cursor.lastrowid

        logger.info(
            f"Deuda 등록: {concepto} ({acreedor}) {money_str(total)}",
            extra={"deuda_id": deuda_id, "tipo_pago": tipo_pago.value},
        )
        return await self.get(deuda_id)

    async def register_payment(
        self,
        deuda_id: int,
        fecha: date | str,
        monto: Decimal | int | float | str,
        numero_cuota: int | None = None,
        observaciones: str | None = None,
    ) -> tuple[Payment, str]:
        """Pago 기록 후 상태 재계산

        Returns:
            (저장된 Payment, 사용자 메시지)

        Raises:
            ValidationError: monto <= 0
            NotFoundError: Deuda가 없는 경우
        """
        fecha = to_date(fecha)
        amount = to_positive_money(monto)

        async with self.db.transaction():
            await self._get_row(deuda_id)

            cursor = await self.db.execute(
                """
                INSERT INTO deudas_pagos (deuda_id, fecha, monto, numero_cuota, observaciones)
                VALUES (?, ?, ?, ?, ?)
                """,
                (deuda_id, fecha.isoformat(), money_str(amount), numero_cuota, observaciones),
            )
            pago_id = cursor.lastrowid

            debt = await self._rederive(deuda_id)

            row = await self.db.fetchone_dict(
                "SELECT * FROM deudas_pagos WHERE id = ?",
                (pago_id,),
            )

        if debt.estado == EstadoDeuda.PAGADA:
            message = "Deuda pagada completamente!"
        else:
            message = f"Pago registrado. Pendiente: ${money_str(debt.saldo_pendiente)}"

        logger.info(
            f"Pago 기록: {money_str(amount)} → {debt.estado.value}",
            extra={"deuda_id": deuda_id, "pago_id": pago_id},
        )
        return Payment.from_row(row), message

    async def delete_payment(self, pago_id: int) -> Debt:
        """Pago 삭제 후 상태 재계산

        Raises:
            NotFoundError: Pago가 없는 경우
        """
        async with self.db.transaction():
            row = await self.db.fetchone(
                "SELECT deuda_id FROM deudas_pagos WHERE id = ?",
                (pago_id,),
            )
            if row is None:
                raise NotFoundError("Pago", pago_id)
            deuda_id = row[0]

            await self.db.execute("DELETE FROM deudas_pagos WHERE id = ?", (pago_id,))
            debt = await self._rederive(deuda_id)

        logger.info(
            f"Pago 삭제 → {debt.estado.value}",
            extra={"deuda_id": deuda_id, "pago_id": pago_id},
        )
        return debt

    async def update(self, deuda_id: int, **fields: Any) -> Debt:
        """Deuda 수정

        LIBRE로 바뀌면 할부 정보 제거.
        CUOTAS에서 monto_total / cantidad_cuotas / tipo_pago가 바뀌면 monto_cuota 재계산.
        상태는 수정 후 다시 파생 (원금 변경으로 상태가 바뀔 수 있음).

        Raises:
            ValidationError: 알 수 없는 필드, 잘못된 값
            NotFoundError: Deuda가 없는 경우
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Campos no modificables: {', '.join(sorted(unknown))}")

        async with self.db.transaction():
            current = Debt.from_row(await self._get_row(deuda_id))

            concepto = (
                self._require_text(fields["concepto"], "concepto")
                if "concepto" in fields else current.concepto
            )
            acreedor = (
                self._require_text(fields["acreedor"], "acreedor")
                if "acreedor" in fields else current.acreedor
            )
            total = (
                to_positive_money(fields["monto_total"], "monto total")
                if "monto_total" in fields else current.monto_total
            )
            tipo_pago = (
                self._parse_tipo_pago(fields["tipo_pago"])
                if "tipo_pago" in fields else current.tipo_pago
            )
            fecha_inicio = (
                to_date(fields["fecha_inicio"])
                if "fecha_inicio" in fields else current.fecha_inicio
            )
            observaciones = fields.get("observaciones", current.observaciones)

            cantidad_cuotas = fields.get("cantidad_cuotas", current.cantidad_cuotas)
            self._validate_cuotas(cantidad_cuotas)

            monto_cuota = current.monto_cuota
            if tipo_pago == TipoPago.LIBRE:
                cantidad_cuotas = None
                monto_cuota = None
            elif {"monto_total", "cantidad_cuotas", "tipo_pago"} & set(fields):
                monto_cuota = installment_amount(total, cantidad_cuotas) if cantidad_cuotas else None

            await self.db.execute(
                """
                UPDATE deudas
                SET concepto = ?, acreedor = ?, monto_total = ?, tipo_pago = ?,
                    cantidad_cuotas = ?, monto_cuota = ?, fecha_inicio = ?,
                    observaciones = ?, updated_at = datetime('now')
                WHERE id = ?
                """,
                (
                    concepto,
                    acreedor,
                    money_str(total),
                    tipo_pago.value,
                    cantidad_cuotas,
                    money_str(monto_cuota) if monto_cuota is not None else None,
                    fecha_inicio.isoformat(),
                    observaciones,
                    deuda_id,
                ),
            )
            debt = await self._rederive(deuda_id)

        logger.info(
            "Deuda 수정",
            extra={"deuda_id": deuda_id, "fields": sorted(fields), "estado": debt.estado.value},
        )
        return debt

    async def delete(self, deuda_id: int) -> None:
        """Deuda 삭제 (Pago 함께 삭제)"""
        async with self.db.transaction():
            await self._get_row(deuda_id)
            await self.db.execute("DELETE FROM deudas_pagos WHERE deuda_id = ?", (deuda_id,))
            await self.db.execute("DELETE FROM deudas WHERE id = ?", (deuda_id,))

        logger.info("Deuda 삭제", extra={"deuda_id": deuda_id})

    async def get(self, deuda_id: int) -> Debt:
        """Deuda 조회 (Pago 포함)

        Raises:
            NotFoundError: Deuda가 없는 경우
        """
        row = await self._get_row(deuda_id)
        pagos = await self._list_payments([deuda_id])
        return Debt.from_row(row, pagos.get(deuda_id, []))

    async def list_all(self, estado: EstadoDeuda | str | None = None) -> list[Debt]:
        """Deuda 목록 (시작일 내림차순, Pago 포함)"""
        sql = "SELECT * FROM deudas"
        params: tuple[Any, ...] = ()
        if estado is not None:
            sql += " WHERE estado = ?"
            params = (EstadoDeuda(estado).value,)
        sql += " ORDER BY fecha_inicio DESC, id DESC"

        rows = await self.db.fetchall_dict(sql, params)
        if not rows:
            return []

        pagos = await self._list_payments([r["id"] for r in rows])
        return [Debt.from_row(r, pagos.get(r["id"], [])) for r in rows]

    async def get_resumen(self) -> dict[str, Any]:
        """요약 (미완납 Deuda 기준 합계)

        Returns:
            {total_deuda, total_pagado, total_pendiente, deudas_activas, deudas_pagadas}
        """
        debts = await self.list_all()
        activas = [d for d in debts if d.estado != EstadoDeuda.PAGADA]

        total_deuda = sum_money(d.monto_total for d in activas)
        total_pagado = sum_money(d.total_pagado for d in activas)

        return {
            "total_deuda": money_str(total_deuda),
            "total_pagado": money_str(total_pagado),
            "total_pendiente": money_str(total_deuda - total_pagado),
            "deudas_activas": len(activas),
            "deudas_pagadas": len(debts) - len(activas),
        }

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _get_row(self, deuda_id: int) -> dict[str, Any]:
        row = await self.db.fetchone_dict("SELECT * FROM deudas WHERE id = ?", (deuda_id,))
        if row is None:
            raise NotFoundError("Deuda", deuda_id)
        return row

    async def _list_payments(self, deuda_ids: list[int]) -> dict[int, list[Payment]]:
        placeholders = ", ".join("?" for _ in deuda_ids)
        rows = await self.db.fetchall_dict(
            f"SELECT * FROM deudas_pagos WHERE deuda_id IN ({placeholders}) ORDER BY fecha, id",
            tuple(deuda_ids),
        )
        grouped: dict[int, list[Payment]] = {}
        for row in rows:
            grouped.setdefault(row["deuda_id"], []).append(Payment.from_row(row))
        return grouped

    async def _rederive(self, deuda_id: int) -> Debt:
        """전체 Pago에서 상태 재계산 후 저장"""
        debt = await self.get(deuda_id)
        estado = derive_estado(debt.total_pagado, debt.monto_total)

        if estado != debt.estado:
            await self.db.execute(
                "UPDATE deudas SET estado = ?, updated_at = datetime('now') WHERE id = ?",
                (estado.value, deuda_id),
            )
            logger.debug(
                f"Deuda 상태 변경: {debt.estado.value} → {estado.value}",
                extra={"deuda_id": deuda_id},
            )
            debt.estado = estado

        return debt

    @staticmethod
    def _validate_cuotas(cantidad_cuotas: int | None) -> None:
        if cantidad_cuotas is not None and cantidad_cuotas <= 0:
            raise ValidationError(
                f"La cantidad de cuotas debe ser mayor a cero: {cantidad_cuotas}"
            )

    @staticmethod
    def _require_text(value: str, field: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError(f"El campo {field} es obligatorio")
        return value

    @staticmethod
    def _parse_tipo_pago(tipo_pago: TipoPago | str) -> TipoPago:
        try:
            return TipoPago(tipo_pago)
        except ValueError as e:
            raise ValidationError(f"Tipo de pago inválido: {tipo_pago!r}") from e
