"""
정기 통제(Control) 집계

concepto별 주간/반월 기간의 징수 합계(total_recaudado)를 Movimiento에서 재집계.
같은 (concepto, 기간)에는 항상 한 행만 존재하며, 같은 concepto의 기간은 겹치지 않음.

재집계는 멱등: 같은 Movimiento 집합이면 몇 번을 실행해도 같은 결과.
납부 여부(pagado, fecha_pago_real)는 재집계 시 보존.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.domain.models import PeriodicControl
from core.errors import NotFoundError, ValidationError
from core.types import Cadencia
from core.utils.money import money_str, sum_money
from core.utils.periods import PeriodWindow, is_canonical, to_date, window_for

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class PeriodicControlAggregator:
    """정기 통제 집계기

    Args:
        db: SQLite 어댑터
        cadencias: concepto → 주기 매핑 (sync_movement 대상, 설정 파일 controles)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        cadencias: Mapping[str, Cadencia | str] | None = None,
    ):
        self.db = db
        self.cadencias: dict[str, Cadencia] = {
            concepto: Cadencia(cadencia) for concepto, cadencia in (cadencias or {}).items()
        }

    async def recompute_window(self, concepto: str, window: PeriodWindow) -> PeriodicControl:
        """기간 재집계 (upsert)

        Args:
            concepto: 집계 대상 concepto
            window: 주기 규칙에 맞는 기간

        Returns:
            갱신된 PeriodicControl

        Raises:
            ValidationError: 비정규 기간, 설정과 다른 주기, 기존 기간과 겹침
        """
        if not is_canonical(window):
            raise ValidationError(
                f"Período inválido para {window.cadencia.value}: "
                f"{window.inicio.isoformat()} a {window.fin.isoformat()}"
            )

        # 설정된 주기와 다른 기간이 생기면 이후 sync_movement가 겹침으로 막힘
        configured = self.cadencias.get(concepto)
        if configured is not None and configured != window.cadencia:
            raise ValidationError(
                f"El concepto '{concepto}' está configurado como {configured.value}, "
                f"no {window.cadencia.value}"
            )

        inicio = window.inicio.isoformat()
        fin = window.fin.isoformat()

        async with self.db.transaction():
            overlap = await self.db.fetchone(
                """
                SELECT fecha_inicio, fecha_fin FROM controles_periodicos
                WHERE concepto = ?
                  AND fecha_inicio <= ? AND fecha_fin >= ?
                  AND NOT (fecha_inicio = ? AND fecha_fin = ?)
                LIMIT 1
                """,
                (concepto, fin, inicio, inicio, fin),
            )
            if overlap is not None:
                raise ValidationError(
                    f"El período {inicio} a {fin} se superpone con el control "
                    f"existente de '{concepto}' ({overlap[0]} a {overlap[1]})"
                )

            rows = await self.db.fetchall(
                """
                SELECT monto FROM movimientos
                WHERE concepto = ? AND fecha >= ? AND fecha <= ?
                """,
                (concepto, inicio, fin),
            )
            total = sum_money(Decimal(r[0]) for r in rows)

            await self.db.execute(
                """
                INSERT INTO controles_periodicos (
                    concepto, cadencia, fecha_inicio, fecha_fin,
                    total_recaudado, fecha_pago_programada
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(concepto, fecha_inicio, fecha_fin) DO UPDATE SET
                    total_recaudado = excluded.total_recaudado,
                    updated_at = datetime('now')
                """,
                (
                    concepto,
                    window.cadencia.value,
                    inicio,
                    fin,
                    money_str(total),
                    window.fecha_pago_programada.isoformat(),
                ),
            )

            row = await self.db.fetchone_dict(
                """
                SELECT * FROM controles_periodicos
                WHERE concepto = ? AND fecha_inicio = ? AND fecha_fin = ?
                """,
                (concepto, inicio, fin),
            )

        logger.debug(
            f"Control 재집계: {concepto} {inicio}~{fin} = {money_str(total)}",
            extra={"concepto": concepto, "movimientos": len(rows)},
        )
        return PeriodicControl.from_row(row)

    async def recompute_for_date(
        self,
        concepto: str,
        cadencia: Cadencia | str,
        fecha: date | str,
    ) -> PeriodicControl:
        """기준일이 속한 기간 재집계"""
        return await self.recompute_window(concepto, window_for(cadencia, fecha))

    async def sync_movement(self, concepto: str, fecha: date | str) -> PeriodicControl | None:
        """Movimiento 변경 후 해당 concepto의 기간 재집계

        설정에 주기가 없는 concepto는 무시 (None 반환).
        """
        cadencia = self.cadencias.get(concepto)
        if cadencia is None:
            return None
        return await self.recompute_for_date(concepto, cadencia, fecha)

    async def mark_paid(self, control_id: int, fecha_pago: date | str) -> PeriodicControl:
        """납부 처리

        Raises:
            NotFoundError: Control이 없는 경우
        """
        fecha_pago = to_date(fecha_pago)

        async with self.db.transaction():
            await self.get(control_id)
            await self.db.execute(
                """
                UPDATE controles_periodicos
                SET pagado = 1, fecha_pago_real = ?, updated_at = datetime('now')
                WHERE id = ?
                """,
                (fecha_pago.isoformat(), control_id),
            )

        logger.info(
            "Control 납부 처리",
            extra={"control_id": control_id, "fecha_pago": fecha_pago.isoformat()},
        )
        return await self.get(control_id)

    async def unmark_paid(self, control_id: int) -> PeriodicControl:
        """납부 취소"""
        async with self.db.transaction():
            await self.get(control_id)
            await self.db.execute(
                """
                UPDATE controles_periodicos
                SET pagado = 0, fecha_pago_real = NULL, updated_at = datetime('now')
                WHERE id = ?
                """,
                (control_id,),
            )

        logger.info("Control 납부 취소", extra={"control_id": control_id})
        return await self.get(control_id)

    async def get(self, control_id: int) -> PeriodicControl:
        """Control 조회

        Raises:
            NotFoundError: Control이 없는 경우
        """
        row = await self.db.fetchone_dict(
            "SELECT * FROM controles_periodicos WHERE id = ?",
            (control_id,),
        )
        if row is None:
            raise NotFoundError("Control", control_id)
        return PeriodicControl.from_row(row)

    async def delete(self, control_id: int) -> None:
        """Control 삭제"""
        async with self.db.transaction():
            await self.get(control_id)
            await self.db.execute(
                "DELETE FROM controles_periodicos WHERE id = ?",
                (control_id,),
            )
        logger.info("Control 삭제", extra={"control_id": control_id})

    async def list_pending(self, cadencia: Cadencia | str | None = None) -> list[PeriodicControl]:
        """미납 Control (납부 예정일 오름차순)"""
        sql = "SELECT * FROM controles_periodicos WHERE pagado = 0"
        params: list[Any] = []
        if cadencia is not None:
            sql += " AND cadencia = ?"
            params.append(Cadencia(cadencia).value)
        sql += " ORDER BY fecha_pago_programada, concepto"

        rows = await self.db.fetchall_dict(sql, tuple(params))
        return [PeriodicControl.from_row(r) for r in rows]

    async def list_controls(
        self,
        cadencia: Cadencia | str | None = None,
        concepto: str | None = None,
        pagado: bool | None = None,
    ) -> list[PeriodicControl]:
        """Control 목록 (납부 예정일 내림차순)"""
        where: list[str] = []
        params: list[Any] = []
        if cadencia is not None:
            where.append("cadencia = ?")
            params.append(Cadencia(cadencia).value)
        if concepto is not None:
            where.append("concepto = ?")
            params.append(concepto)
        if pagado is not None:
            where.append("pagado = ?")
            params.append(1 if pagado else 0)

        sql = "SELECT * FROM controles_periodicos"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY fecha_pago_programada DESC, concepto"

        rows = await self.db.fetchall_dict(sql, tuple(params))
        return [PeriodicControl.from_row(r) for r in rows]
