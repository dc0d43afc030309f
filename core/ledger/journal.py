"""
Movimiento 원장 (MovementJournal)

계정별 Movimiento 체인과 누적 잔액(saldo_resultante) 관리.

체인 순서: (fecha ASC, orden ASC)
- orden은 전역 입력 순번. 새 행/재입력 행은 max(orden)+1을 받아
  같은 날짜의 기존 행 뒤에 정렬됨.
- 불변식: saldo_resultante[i] == saldo_resultante[i-1] + monto[i] (첫 행은 0 + monto)

소급 입력/수정/삭제 시 해당 위치 이후의 꼬리(tail)만 한 번에 재계산.
모든 변경은 하나의 트랜잭션 안에서 수행 (중간 상태 저장 금지).
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.domain.models import Movement
from core.errors import NotFoundError, ValidationError
from core.utils.money import money_str, to_money
from core.utils.periods import to_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.controls.aggregator import PeriodicControlAggregator

logger = logging.getLogger(__name__)


class MovementJournal:
    """Movimiento 원장

    Args:
        db: SQLite 어댑터
        controls: 정기 통제 집계기 (지정 시 변경된 concepto의 기간을 같은 트랜잭션에서 재집계)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        controls: PeriodicControlAggregator | None = None,
    ):
        self.db = db
        self.controls = controls

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------

    async def append(
        self,
        cuenta_id: int,
        fecha: date | str,
        monto: Decimal | int | float | str,
        concepto: str,
        movimiento_origen_id: int | None = None,
    ) -> Movement:
        """Movimiento 추가

        과거 날짜 입력 허용. 삽입 위치 이후 체인 재계산.

        Args:
            cuenta_id: 계정 ID
            fecha: 거래일
            monto: 부호 있는 금액 (0 불가)
            concepto: 개념(항목명)
            movimiento_origen_id: 원본 Movimiento (약한 참조)

        Returns:
            저장된 Movement

        Raises:
            ValidationError: monto == 0, concepto 없음
            NotFoundError: 계정 또는 원본 Movimiento가 없는 경우
        """
        fecha = to_date(fecha)
        amount = self._validate_amount(monto)
        concepto = self._validate_concepto(concepto)

        async with self.db.transaction():
            await self._require_account(cuenta_id)
            if movimiento_origen_id is not None:
                await self.get(movimiento_origen_id)

            orden = await self._next_orden()
            cursor = await self.db.execute(
                """
                INSERT INTO movimientos (
                    cuenta_id, fecha, monto, concepto, saldo_resultante,
                    orden, movimiento_origen_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    cuenta_id,
                    fecha.isoformat(),
                    money_str(amount),
                    concepto,
                    money_str(amount),
                    orden,
                    movimiento_origen_id,
                ),
            )
            movement_id = cursor.lastrowid

            await self._recompute_tail(cuenta_id, fecha, orden)

            if self.controls is not None:
                await self.controls.sync_movement(concepto, fecha)

            movement = await self.get(movement_id)

        logger.info(
            f"Movimiento 추가: {concepto} {money_str(amount)}",
            extra={
                "cuenta_id": cuenta_id,
                "movimiento_id": movement_id,
                "fecha": fecha.isoformat(),
                "saldo_resultante": money_str(movement.saldo_resultante),
            },
        )
        return movement

    async def update(
        self,
        movement_id: int,
        monto: Decimal | int | float | str | None = None,
        fecha: date | str | None = None,
        concepto: str | None = None,
    ) -> Movement:
        """Movimiento 수정

        금액/날짜 변경은 삭제 후 재입력과 동일: 새 orden을 받고
        가장 이른 영향 위치부터 체인 재계산.
        concepto만 변경하면 잔액은 건드리지 않음.

        Raises:
            NotFoundError: Movimiento가 없는 경우
            ValidationError: monto == 0, concepto 없음
        """
        new_amount = self._validate_amount(monto) if monto is not None else None
        new_fecha = to_date(fecha) if fecha is not None else None
        new_concepto = self._validate_concepto(concepto) if concepto is not None else None

        async with self.db.transaction():
            old = await self.get(movement_id)

            amount = new_amount if new_amount is not None else old.monto
            fecha_final = new_fecha if new_fecha is not None else old.fecha
            concepto_final = new_concepto if new_concepto is not None else old.concepto

            resequence = amount != old.monto or fecha_final != old.fecha

            if resequence:
                orden = await self._next_orden()
                await self.db.execute(
                    """
                    UPDATE movimientos
                    SET fecha = ?, monto = ?, concepto = ?, orden = ?,
                        updated_at = datetime('now')
                    WHERE id = ?
                    """,
                    (
                        fecha_final.isoformat(),
                        money_str(amount),
                        concepto_final,
                        orden,
                        movement_id,
                    ),
                )
                start = min((old.fecha, old.orden), (fecha_final, orden))
                await self._recompute_tail(old.cuenta_id, start[0], start[1])
            else:
                await self.db.execute(
                    """
                    UPDATE movimientos
                    SET concepto = ?, updated_at = datetime('now')
                    WHERE id = ?
                    """,
                    (concepto_final, movement_id),
                )

            if self.controls is not None:
                await self.controls.sync_movement(old.concepto, old.fecha)
                if (concepto_final, fecha_final) != (old.concepto, old.fecha):
                    await self.controls.sync_movement(concepto_final, fecha_final)

            movement = await self.get(movement_id)

        logger.info(
            f"Movimiento 수정: {movement_id}",
            extra={
                "cuenta_id": movement.cuenta_id,
                "movimiento_id": movement_id,
                "resequenced": resequence,
            },
        )
        return movement

    async def delete(self, movement_id: int) -> None:
        """Movimiento 삭제

        이 Movimiento를 가리키는 약한 참조는 NULL 처리.

        Raises:
            NotFoundError: Movimiento가 없는 경우
        """
        async with self.db.transaction():
            old = await self.get(movement_id)

            await self._clear_weak_refs([movement_id])
            await self.db.execute(
                "DELETE FROM movimientos WHERE id = ?",
                (movement_id,),
            )
            await self._recompute_tail(old.cuenta_id, old.fecha, old.orden)

            if self.controls is not None:
                await self.controls.sync_movement(old.concepto, old.fecha)

        logger.info(
            f"Movimiento 삭제: {movement_id}",
            extra={"cuenta_id": old.cuenta_id, "movimiento_id": movement_id},
        )

    async def clear_account(self, cuenta_id: int) -> int:
        """계정의 모든 Movimiento 삭제

        Returns:
            삭제된 Movimiento 수
        """
        async with self.db.transaction():
            await self._require_account(cuenta_id)

            rows = await self.db.fetchall(
                "SELECT id, concepto, fecha FROM movimientos WHERE cuenta_id = ?",
                (cuenta_id,),
            )
            ids = [r[0] for r in rows]
            await self._clear_weak_refs(ids)
            await self.db.execute(
                "DELETE FROM movimientos WHERE cuenta_id = ?",
                (cuenta_id,),
            )

            if self.controls is not None:
                for concepto, fecha in {(r[1], r[2]) for r in rows}:
                    await self.controls.sync_movement(concepto, fecha)

        logger.info(
            f"Cuenta 초기화: {len(ids)}건 삭제",
            extra={"cuenta_id": cuenta_id},
        )
        return len(ids)

    # -------------------------------------------------------------------------
    # 재계산
    # -------------------------------------------------------------------------

    async def recompute_account(self, cuenta_id: int) -> tuple[int, Decimal]:
        """계정 전체 체인 재계산

        Returns:
            (처리한 Movimiento 수, 최종 잔액)
        """
        async with self.db.transaction():
            await self._require_account(cuenta_id)
            count, final = await self._recompute_from_balance(
                Decimal("0.00"),
                "WHERE cuenta_id = ?",
                (cuenta_id,),
            )

        logger.info(
            f"잔액 재계산 완료: {count}건, 최종 {money_str(final)}",
            extra={"cuenta_id": cuenta_id},
        )
        return count, final

    async def recompute_all(self) -> list[dict[str, Any]]:
        """모든 계정 재계산

        Returns:
            계정별 {cuenta_id, cuenta_nombre, movimientos, saldo_anterior, saldo_nuevo}
        """
        report: list[dict[str, Any]] = []

        async with self.db.transaction():
            accounts = await self.db.fetchall("SELECT id, nombre FROM cuentas ORDER BY id")
            for cuenta_id, nombre in accounts:
                before = await self.get_balance(cuenta_id)
                count, after = await self.recompute_account(cuenta_id)
                report.append({
                    "cuenta_id": cuenta_id,
                    "cuenta_nombre": nombre,
                    "movimientos": count,
                    "saldo_anterior": money_str(before),
                    "saldo_nuevo": money_str(after),
                })

        return report

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get(self, movement_id: int) -> Movement:
        """Movimiento 조회

        Raises:
            NotFoundError: Movimiento가 없는 경우
        """
        row = await self.db.fetchone_dict(
            "SELECT * FROM movimientos WHERE id = ?",
            (movement_id,),
        )
        if row is None:
            raise NotFoundError("Movimiento", movement_id)
        return Movement.from_row(row)

    async def list_by_account(
        self,
        cuenta_id: int,
        desde: date | str | None = None,
        hasta: date | str | None = None,
    ) -> list[Movement]:
        """계정 Movimiento 목록 (체인 순서)"""
        await self._require_account(cuenta_id)

        where = ["cuenta_id = ?"]
        params: list[Any] = [cuenta_id]
        if desde is not None:
            where.append("fecha >= ?")
            params.append(to_date(desde).isoformat())
        if hasta is not None:
            where.append("fecha <= ?")
            params.append(to_date(hasta).isoformat())

        rows = await self.db.fetchall_dict(
            f"SELECT * FROM movimientos WHERE {' AND '.join(where)} ORDER BY fecha, orden",
            tuple(params),
        )
        return [Movement.from_row(r) for r in rows]

    async def get_balance(self, cuenta_id: int) -> Decimal:
        """현재 잔액 (마지막 Movimiento의 saldo_resultante, 없으면 0)"""
        row = await self.db.fetchone(
            """
            SELECT saldo_resultante FROM movimientos
            WHERE cuenta_id = ?
            ORDER BY fecha DESC, orden DESC
            LIMIT 1
            """,
            (cuenta_id,),
        )
        return Decimal(row[0]) if row else Decimal("0.00")

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_amount(monto: Decimal | int | float | str) -> Decimal:
        amount = to_money(monto)
        if amount == 0:
            raise ValidationError("El monto del movimiento no puede ser cero")
        return amount

    @staticmethod
    def _validate_concepto(concepto: str) -> str:
        concepto = (concepto or "").strip()
        if not concepto:
            raise ValidationError("El concepto es obligatorio")
        return concepto

    async def _require_account(self, cuenta_id: int) -> None:
        row = await self.db.fetchone("SELECT 1 FROM cuentas WHERE id = ?", (cuenta_id,))
        if row is None:
            raise NotFoundError("Cuenta", cuenta_id)

    async def _next_orden(self) -> int:
        row = await self.db.fetchone("SELECT COALESCE(MAX(orden), 0) + 1 FROM movimientos")
        return row[0]

    async def _clear_weak_refs(self, movement_ids: list[int]) -> None:
        """삭제될 Movimiento를 가리키는 약한 참조 NULL 처리"""
        if not movement_ids:
            return
        params = [(mid,) for mid in movement_ids]
        await self.db.executemany(
            "UPDATE movimientos SET movimiento_origen_id = NULL WHERE movimiento_origen_id = ?",
            params,
        )
        await self.db.executemany(
            "UPDATE deposito_usos SET movimiento_id = NULL WHERE movimiento_id = ?",
            params,
        )
        await self.db.executemany(
            "UPDATE depositos SET movimiento_origen_id = NULL WHERE movimiento_origen_id = ?",
            params,
        )

    async def _recompute_tail(self, cuenta_id: int, fecha: date, orden: int) -> None:
        """(fecha, orden) 위치부터 체인 끝까지 재계산

        직전 Movimiento의 saldo_resultante를 시작값으로 꼬리를 한 번 순회.
        """
        fecha_iso = fecha.isoformat()
        prev = await self.db.fetchone(
            """
            SELECT saldo_resultante FROM movimientos
            WHERE cuenta_id = ?
              AND (fecha < ? OR (fecha = ? AND orden < ?))
            ORDER BY fecha DESC, orden DESC
            LIMIT 1
            """,
            (cuenta_id, fecha_iso, fecha_iso, orden),
        )
        start = Decimal(prev[0]) if prev else Decimal("0.00")

        count, _ = await self._recompute_from_balance(
            start,
            "WHERE cuenta_id = ? AND (fecha > ? OR (fecha = ? AND orden >= ?))",
            (cuenta_id, fecha_iso, fecha_iso, orden),
        )
        logger.debug(
            f"체인 재계산: {count}건",
            extra={"cuenta_id": cuenta_id, "desde": fecha_iso},
        )

    async def _recompute_from_balance(
        self,
        start: Decimal,
        where: str,
        params: tuple[Any, ...],
    ) -> tuple[int, Decimal]:
        """주어진 시작 잔액에서 조건에 맞는 행들을 체인 순서로 재계산"""
        rows = await self.db.fetchall(
            f"SELECT id, monto, saldo_resultante FROM movimientos {where} ORDER BY fecha, orden",
            params,
        )

        saldo = start
        updates: list[tuple[str, int]] = []
        for movement_id, monto, stored in rows:
            saldo = saldo + Decimal(monto)
            if Decimal(stored) != saldo:
                updates.append((money_str(saldo), movement_id))

        if updates:
            await self.db.executemany(
                "UPDATE movimientos SET saldo_resultante = ? WHERE id = ?",
                updates,
            )

        return len(rows), saldo
