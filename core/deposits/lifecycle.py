"""
Depósito 생명주기

PENDIENTE에서 시작해 사용(LIQUIDADO/A_CUENTA), 잔액 보유(A_FAVOR), 반환(DEVUELTO)으로 전이.
상태 전이는 DepositStateMachine이 검증.

saldo_actual는 매 변경마다 monto_original - Σ사용액으로 다시 계산 (DEVUELTO는 0).
항상 0 <= saldo_actual <= monto_original.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.domain.models import Deposit, DepositUse
from core.domain.state_machines import DepositStateMachine
from core.errors import InvalidStateError, NotFoundError, ValidationError
from core.ledger.journal import MovementJournal
from core.types import EstadoDeposito, TipoUsoDeposito
from core.utils.money import money_str, sum_money, to_positive_money
from core.utils.periods import to_date

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class DepositLifecycle:
    """Depósito 생명주기 관리

    Args:
        db: SQLite 어댑터
        journal: A_CUENTA 사용 시 INGRESO를 기록할 원장 (없으면 같은 db로 생성)
    """

    def __init__(self, db: SQLiteAdapter, journal: MovementJournal | None = None):
        self.db = db
        self.journal = journal or MovementJournal(db)

    # -------------------------------------------------------------------------
    # 생성 / 전이
    # -------------------------------------------------------------------------

    async def create(
        self,
        monto_original: Decimal | int | float | str,
        fecha_ingreso: date | str,
        titular: str,
        cuenta_id: int | None = None,
        cliente_id: int | None = None,
        observaciones: str | None = None,
        movimiento_origen_id: int | None = None,
    ) -> Deposit:
        """Depósito 등록 (PENDIENTE, saldo_actual = monto_original)

        Raises:
            ValidationError: monto_original <= 0, titular 없음
            NotFoundError: 계정 또는 원본 Movimiento가 없는 경우
        """
        amount = to_positive_money(monto_original, "monto original")
        fecha_ingreso = to_date(fecha_ingreso)
        titular = (titular or "").strip()
        if not titular:
            raise ValidationError("El titular del depósito es obligatorio")

        async with self.db.transaction():
            if cuenta_id is not None:
                await self._require_account(cuenta_id)
            if movimiento_origen_id is not None:
                await self.journal.get(movimiento_origen_id)

            cursor = await self.db.execute(
                """
                INSERT INTO depositos (
                    monto_original, saldo_actual, fecha_ingreso, estado,
                    titular, observaciones, cuenta_id, cliente_id, movimiento_origen_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    money_str(amount),
                    money_str(amount),
                    fecha_ingreso.isoformat(),
                    EstadoDeposito.PENDIENTE.value,
                    titular,
                    observaciones,
                    cuenta_id,
                    cliente_id,
                    movimiento_origen_id,
                ),
            )
            deposit_id = cursor.lastrowid

        logger.info(
            f"Depósito 등록: {titular} {money_str(amount)}",
            extra={"deposito_id": deposit_id, "cuenta_id": cuenta_id},
        )
        return await self.get(deposit_id)

    async def use(
        self,
        deposit_id: int,
        fecha_uso: date | str,
        tipo_uso: TipoUsoDeposito | str,
        monto: Decimal | int | float | str,
        descripcion: str | None = None,
    ) -> Deposit:
        """Depósito 사용

        전액 사용 → LIQUIDADO, 부분 사용 → A_CUENTA.
        tipo_uso가 A_CUENTA이고 계정이 연결되어 있으면 같은 트랜잭션에서
        해당 계정에 INGRESO Movimiento 추가.

        Raises:
            NotFoundError: Depósito가 없는 경우
            InvalidStateError: 사용할 수 없는 상태 (LIQUIDADO, A_FAVOR, DEVUELTO)
            ValidationError: monto <= 0 또는 잔액 초과
        """
        fecha_uso = to_date(fecha_uso)
        tipo_uso = self._parse_tipo_uso(tipo_uso)
        amount = to_positive_money(monto)

        async with self.db.transaction():
            deposit = await self.get(deposit_id)
            machine = DepositStateMachine(deposit.estado)
            if not machine.can_use:
                raise InvalidStateError(
                    f"El depósito {deposit_id} está {deposit.estado.value} y no puede usarse"
                )
            if amount > deposit.saldo_actual:
                raise ValidationError(
                    f"El monto a usar ({money_str(amount)}) excede el saldo disponible "
                    f"({money_str(deposit.saldo_actual)})"
                )

            movement_id = None
            if tipo_uso == TipoUsoDeposito.A_CUENTA and deposit.cuenta_id is not None:
                movement = await self.journal.append(
                    deposit.cuenta_id,
                    fecha_uso,
                    amount,
                    descripcion or f"Depósito de {deposit.titular}",
                )
                movement_id = movement.id

            await self.db.execute(
                """
                INSERT INTO deposito_usos (
                    deposito_id, fecha, tipo_uso, monto, descripcion, movimiento_id
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    deposit_id,
                    fecha_uso.isoformat(),
                    tipo_uso.value,
                    money_str(amount),
                    descripcion,
                    movement_id,
                ),
            )

            saldo = await self._derive_saldo(deposit)
            target = EstadoDeposito.LIQUIDADO if saldo == 0 else EstadoDeposito.A_CUENTA
            machine.transition(target)

            await self.db.execute(
                """
                UPDATE depositos
                SET saldo_actual = ?, estado = ?, fecha_uso = ?,
                    tipo_uso = ?, descripcion_uso = ?
                WHERE id = ?
                """,
                (
                    money_str(saldo),
                    target.value,
                    fecha_uso.isoformat(),
                    tipo_uso.value,
                    descripcion,
                    deposit_id,
                ),
            )

        logger.info(
            f"Depósito 사용: {money_str(amount)} → {target.value}",
            extra={
                "deposito_id": deposit_id,
                "tipo_uso": tipo_uso.value,
                "saldo_actual": money_str(saldo),
                "movimiento_id": movement_id,
            },
        )
        return await self.get(deposit_id)

    async def delete_use(self, use_id: int) -> Deposit:
        """사용 취소

        사용 내역을 삭제하고 연결된 INGRESO Movimiento도 원장에서 삭제 (잔액 재계산).
        saldo_actual는 남은 사용 내역으로 다시 계산, 남은 내역이 없으면 PENDIENTE,
        있으면 A_CUENTA.

        Raises:
            NotFoundError: 사용 내역이 없는 경우
            InvalidStateError: A_FAVOR, DEVUELTO 상태의 Depósito
        """
        async with self.db.transaction():
            row = await self.db.fetchone_dict(
                "SELECT * FROM deposito_usos WHERE id = ?",
                (use_id,),
            )
            if row is None:
                raise NotFoundError("Uso de depósito", use_id)
            deposit_use = DepositUse.from_row(row)

            deposit = await self.get(deposit_use.deposito_id)
            if not DepositStateMachine(deposit.estado).can_revert_use:
                raise InvalidStateError(
                    f"El depósito {deposit.id} está {deposit.estado.value} "
                    "y sus usos no pueden anularse"
                )

            if deposit_use.movimiento_id is not None:
                await self.journal.delete(deposit_use.movimiento_id)

            await self.db.execute("DELETE FROM deposito_usos WHERE id = ?", (use_id,))

            saldo = await self._derive_saldo(deposit)
            last = await self.db.fetchone_dict(
                """
                SELECT fecha, tipo_uso, descripcion FROM deposito_usos
                WHERE deposito_id = ? ORDER BY fecha DESC, id DESC LIMIT 1
                """,
                (deposit.id,),
            )
            target = EstadoDeposito.PENDIENTE if last is None else EstadoDeposito.A_CUENTA
            last = last or {"fecha": None, "tipo_uso": None, "descripcion": None}

            await self.db.execute(
                """
                UPDATE depositos
                SET saldo_actual = ?, estado = ?, fecha_uso = ?,
                    tipo_uso = ?, descripcion_uso = ?
                WHERE id = ?
                """,
                (
                    money_str(saldo),
                    target.value,
                    last["fecha"],
                    last["tipo_uso"],
                    last["descripcion"],
                    deposit.id,
                ),
            )

        logger.info(
            f"Depósito 사용 취소: {money_str(deposit_use.monto)} → {target.value}",
            extra={
                "deposito_id": deposit.id,
                "uso_id": use_id,
                "saldo_actual": money_str(saldo),
                "movimiento_id": deposit_use.movimiento_id,
            },
        )
        return await self.get(deposit.id)

    async def credit(self, deposit_id: int) -> Deposit:
        """잔액을 보유 금액(A_FAVOR)으로 전환 (종료 상태)

        Raises:
            InvalidStateError: 이미 종료 상태
        """
        async with self.db.transaction():
            deposit = await self.get(deposit_id)
            DepositStateMachine(deposit.estado).transition(EstadoDeposito.A_FAVOR)

            await self.db.execute(
                "UPDATE depositos SET estado = ? WHERE id = ?",
                (EstadoDeposito.A_FAVOR.value, deposit_id),
            )

        logger.info(
            "Depósito A_FAVOR",
            extra={"deposito_id": deposit_id, "saldo_actual": money_str(deposit.saldo_actual)},
        )
        return await self.get(deposit_id)

    async def return_(
        self,
        deposit_id: int,
        fecha_devolucion: date | str,
        monto_devuelto: Decimal | int | float | str,
    ) -> Deposit:
        """반환 (DEVUELTO)

        반환하지 않은 잔액은 소멸 (saldo_actual = 0).

        Raises:
            InvalidStateError: 이미 종료 상태
            ValidationError: monto_devuelto <= 0 또는 잔액 초과
        """
        fecha_devolucion = to_date(fecha_devolucion)
        amount = to_positive_money(monto_devuelto, "monto devuelto")

        async with self.db.transaction():
            deposit = await self.get(deposit_id)
            machine = DepositStateMachine(deposit.estado)
            if not machine.can_transition(EstadoDeposito.DEVUELTO):
                raise InvalidStateError(
                    f"El depósito {deposit_id} está {deposit.estado.value} y no puede devolverse"
                )
            if amount > deposit.saldo_actual:
                raise ValidationError(
                    f"El monto a devolver ({money_str(amount)}) excede el saldo disponible "
                    f"({money_str(deposit.saldo_actual)})"
                )
            machine.transition(EstadoDeposito.DEVUELTO)

            await self.db.execute(
                """
                UPDATE depositos
                SET estado = ?, fecha_devolucion = ?, monto_devuelto = ?, saldo_actual = ?
                WHERE id = ?
                """,
                (
                    EstadoDeposito.DEVUELTO.value,
                    fecha_devolucion.isoformat(),
                    money_str(amount),
                    money_str(Decimal("0")),
                    deposit_id,
                ),
            )

        logger.info(
            f"Depósito 반환: {money_str(amount)}",
            extra={
                "deposito_id": deposit_id,
                "saldo_perdido": money_str(deposit.saldo_actual - amount),
            },
        )
        return await self.get(deposit_id)

    async def link_account(self, deposit_id: int, cuenta_id: int | None) -> Deposit:
        """계정 연결 (약한 참조). None이면 연결 해제.

        Raises:
            InvalidStateError: 종료 상태의 Depósito
            NotFoundError: 계정이 없는 경우
        """
        async with self.db.transaction():
            deposit = await self.get(deposit_id)
            if not DepositStateMachine(deposit.estado).can_use:
                raise InvalidStateError(
                    f"El depósito {deposit_id} está {deposit.estado.value} y no puede asociarse"
                )
            if cuenta_id is not None:
                await self._require_account(cuenta_id)

            await self.db.execute(
                "UPDATE depositos SET cuenta_id = ? WHERE id = ?",
                (cuenta_id, deposit_id),
            )

        logger.info(
            "Depósito 계정 연결",
            extra={"deposito_id": deposit_id, "cuenta_id": cuenta_id},
        )
        return await self.get(deposit_id)

    async def delete(self, deposit_id: int) -> None:
        """Depósito 삭제

        원본 Movimiento가 있거나 사용 내역이 있으면 거부.

        Raises:
            InvalidStateError: 원장과 연결된 Depósito
        """
        async with self.db.transaction():
            deposit = await self.get(deposit_id)
            if deposit.movimiento_origen_id is not None:
                raise InvalidStateError(
                    "No se puede eliminar un depósito vinculado a un movimiento. "
                    "Elimine el movimiento primero."
                )
            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM deposito_usos WHERE deposito_id = ?",
                (deposit_id,),
            )
            if row[0] > 0:
                raise InvalidStateError(
                    f"El depósito {deposit_id} tiene {row[0]} usos registrados y no puede eliminarse"
                )

            await self.db.execute("DELETE FROM depositos WHERE id = ?", (deposit_id,))

        logger.info("Depósito 삭제", extra={"deposito_id": deposit_id})

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get(self, deposit_id: int) -> Deposit:
        """Depósito 조회

        Raises:
            NotFoundError: Depósito가 없는 경우
        """
        row = await self.db.fetchone_dict(
            "SELECT * FROM depositos WHERE id = ?",
            (deposit_id,),
        )
        if row is None:
            raise NotFoundError("Depósito", deposit_id)
        return Deposit.from_row(row)

    async def list_by_status(
        self,
        estado: EstadoDeposito | str | None = None,
        cuenta_id: int | None = None,
        desde: date | str | None = None,
        hasta: date | str | None = None,
    ) -> list[Deposit]:
        """Depósito 목록 (입금일 내림차순)"""
        where: list[str] = []
        params: list[Any] = []
        if estado is not None:
            where.append("estado = ?")
            params.append(EstadoDeposito(estado).value)
        if cuenta_id is not None:
            where.append("cuenta_id = ?")
            params.append(cuenta_id)
        if desde is not None:
            where.append("fecha_ingreso >= ?")
            params.append(to_date(desde).isoformat())
        if hasta is not None:
            where.append("fecha_ingreso <= ?")
            params.append(to_date(hasta).isoformat())

        sql = "SELECT * FROM depositos"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY fecha_ingreso DESC, id DESC"

        rows = await self.db.fetchall_dict(sql, tuple(params))
        return [Deposit.from_row(r) for r in rows]

    async def list_uses(self, deposit_id: int) -> list[DepositUse]:
        """사용 내역 (입력순)"""
        await self.get(deposit_id)
        rows = await self.db.fetchall_dict(
            "SELECT * FROM deposito_usos WHERE deposito_id = ? ORDER BY fecha, id",
            (deposit_id,),
        )
        return [DepositUse.from_row(r) for r in rows]

    async def list_unassociated(self) -> list[Deposit]:
        """계정/고객 미연결 Depósito (PENDIENTE, A_FAVOR)"""
        rows = await self.db.fetchall_dict(
            """
            SELECT * FROM depositos
            WHERE cuenta_id IS NULL AND cliente_id IS NULL
              AND estado IN (?, ?)
            ORDER BY fecha_ingreso DESC, id DESC
            """,
            (EstadoDeposito.PENDIENTE.value, EstadoDeposito.A_FAVOR.value),
        )
        return [Deposit.from_row(r) for r in rows]

    async def get_statistics(self) -> dict[str, Any]:
        """상태별 건수와 사용 가능 잔액 합계"""
        rows = await self.db.fetchall("SELECT estado, saldo_actual FROM depositos")

        counts = {estado.value: 0 for estado in EstadoDeposito}
        for estado, _ in rows:
            counts[estado] += 1

        usable = (
            EstadoDeposito.PENDIENTE.value,
            EstadoDeposito.A_CUENTA.value,
            EstadoDeposito.A_FAVOR.value,
        )
        disponible = sum_money(Decimal(saldo) for estado, saldo in rows if estado in usable)

        return {
            "total": len(rows),
            "por_estado": counts,
            "saldo_total_disponible": money_str(disponible),
        }

    # -------------------------------------------------------------------------
    # 내부
    # -------------------------------------------------------------------------

    async def _derive_saldo(self, deposit: Deposit) -> Decimal:
        """monto_original - Σ사용액 (DEVUELTO는 0)"""
        if deposit.estado == EstadoDeposito.DEVUELTO:
            return Decimal("0.00")

        rows = await self.db.fetchall(
            "SELECT monto FROM deposito_usos WHERE deposito_id = ?",
            (deposit.id,),
        )
        saldo = deposit.monto_original - sum_money(Decimal(r[0]) for r in rows)
        if saldo < 0:
            # 잔액 초과 사용은 use()에서 차단되므로 도달 불가
            raise ValidationError(f"Saldo negativo en depósito {deposit.id}")
        return saldo

    async def _require_account(self, cuenta_id: int) -> None:
        row = await self.db.fetchone("SELECT 1 FROM cuentas WHERE id = ?", (cuenta_id,))
        if row is None:
            raise NotFoundError("Cuenta", cuenta_id)

    @staticmethod
    def _parse_tipo_uso(tipo_uso: TipoUsoDeposito | str) -> TipoUsoDeposito:
        try:
            return TipoUsoDeposito(tipo_uso)
        except ValueError as e:
            raise ValidationError(f"Tipo de uso inválido: {tipo_uso!r}") from e
