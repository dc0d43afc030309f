"""
Cuenta Corriente 저장소

계정 생성/조회/이름 변경/삭제 및 요약.
잔액은 저장하지 않음 (MovementJournal의 마지막 saldo_resultante).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.domain.models import Account
from core.errors import InvalidStateError, NotFoundError, ValidationError
from core.types import TipoCuenta
from core.utils.money import money_str, sum_money

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class AccountStore:
    """Cuenta Corriente 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create(self, nombre: str, tipo: TipoCuenta | str) -> Account:
        """계정 생성

        Raises:
            ValidationError: 이름이 비었거나 이미 존재하는 경우
        """
        nombre = (nombre or "").strip()
        if not nombre:
            raise ValidationError("El nombre de la cuenta es obligatorio")
        tipo = self._parse_tipo(tipo)

        async with self.db.transaction():
            if await self.get_by_name(nombre) is not None:
                raise ValidationError(f"Ya existe una cuenta con el nombre '{nombre}'")

            cursor = await self.db.execute(
                "INSERT INTO cuentas (nombre, tipo) VALUES (?, ?)",
                (nombre, tipo.value),
            )
            account_id = cursor.lastrowid

        logger.info(
            f"Cuenta 생성: {nombre}",
            extra={"cuenta_id": account_id, "tipo": tipo.value},
        )
        return await self.get(account_id)

    async def get(self, cuenta_id: int) -> Account:
        """계정 조회

        Raises:
            NotFoundError: 계정이 없는 경우
        """
        row = await self.db.fetchone_dict(
            "SELECT * FROM cuentas WHERE id = ?",
            (cuenta_id,),
        )
        if row is None:
            raise NotFoundError("Cuenta", cuenta_id)
        return Account.from_row(row)

    async def get_by_name(self, nombre: str) -> Account | None:
        """이름으로 계정 조회 (없으면 None)"""
        row = await self.db.fetchone_dict(
            "SELECT * FROM cuentas WHERE nombre = ?",
            (nombre,),
        )
        return Account.from_row(row) if row else None

    async def list_all(self) -> list[Account]:
        """전체 계정 (이름순)"""
        rows = await self.db.fetchall_dict("SELECT * FROM cuentas ORDER BY nombre")
        return [Account.from_row(r) for r in rows]

    async def rename(
        self,
        cuenta_id: int,
        nombre: str,
        tipo: TipoCuenta | str | None = None,
    ) -> Account:
        """이름(및 유형) 변경. ID는 변하지 않음.

        Raises:
            NotFoundError: 계정이 없는 경우
            ValidationError: 이름 중복
        """
        nombre = (nombre or "").strip()
        if not nombre:
            raise ValidationError("El nombre de la cuenta es obligatorio")

        async with self.db.transaction():
            current = await self.get(cuenta_id)
            other = await self.get_by_name(nombre)
            if other is not None and other.id != cuenta_id:
                raise ValidationError(f"Ya existe una cuenta con el nombre '{nombre}'")

            new_tipo = self._parse_tipo(tipo) if tipo is not None else current.tipo
            await self.db.execute(
                "UPDATE cuentas SET nombre = ?, tipo = ? WHERE id = ?",
                (nombre, new_tipo.value, cuenta_id),
            )

        logger.info(
            f"Cuenta 이름 변경: {current.nombre} → {nombre}",
            extra={"cuenta_id": cuenta_id},
        )
        return await self.get(cuenta_id)

    async def delete(self, cuenta_id: int) -> None:
        """계정 삭제

        Movimiento가 있으면 거부. Depósito의 cuenta_id 약한 참조는 NULL 처리.

        Raises:
            NotFoundError: 계정이 없는 경우
            InvalidStateError: Movimiento가 존재하는 경우
        """
        async with self.db.transaction():
            await self.get(cuenta_id)

            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM movimientos WHERE cuenta_id = ?",
                (cuenta_id,),
            )
            if row[0] > 0:
                raise InvalidStateError(
                    f"La cuenta {cuenta_id} tiene {row[0]} movimientos y no puede eliminarse"
                )

            await self.db.execute(
                "UPDATE depositos SET cuenta_id = NULL WHERE cuenta_id = ?",
                (cuenta_id,),
            )
            await self.db.execute("DELETE FROM cuentas WHERE id = ?", (cuenta_id,))

        logger.info("Cuenta 삭제", extra={"cuenta_id": cuenta_id})

    async def get_summary(self, cuenta_id: int) -> dict[str, Any]:
        """계정 요약

        Returns:
            {cuenta, total_movimientos, total_ingresos, total_egresos, saldo_actual}
        """
        account = await self.get(cuenta_id)

        rows = await self.db.fetchall(
            """
            SELECT monto, saldo_resultante FROM movimientos
            WHERE cuenta_id = ?
            ORDER BY fecha, orden
            """,
            (cuenta_id,),
        )
        montos = [Decimal(r[0]) for r in rows]
        saldo = Decimal(rows[-1][1]) if rows else Decimal("0")

        return {
            "cuenta": account.to_dict(),
            "total_movimientos": len(montos),
            "total_ingresos": money_str(sum_money(m for m in montos if m >= 0)),
            "total_egresos": money_str(sum_money(-m for m in montos if m < 0)),
            "saldo_actual": money_str(saldo),
        }

    @staticmethod
    def _parse_tipo(tipo: TipoCuenta | str) -> TipoCuenta:
        try:
            return TipoCuenta(tipo)
        except ValueError as e:
            raise ValidationError(f"Tipo de cuenta inválido: {tipo!r}") from e
