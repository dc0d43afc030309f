"""
도메인 레코드

DB 행 ↔ dataclass 변환.
금액은 Decimal, 날짜는 date로 보관하고 to_dict()에서 문자열로 직렬화.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from core.constants import Money
from core.types import (
    Cadencia,
    EstadoDeposito,
    EstadoDeuda,
    TipoCuenta,
    TipoMovimiento,
    TipoPago,
    TipoUsoDeposito,
)
from core.utils.money import money_str, sum_money


def _dec(value: Any) -> Decimal:
    return Decimal(str(value))


def _opt_dec(value: Any) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def _opt_date(value: Any) -> date | None:
    return date.fromisoformat(value) if value else None


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Account:
    """Cuenta Corriente

    잔액 필드 없음. 잔액은 마지막 Movimiento의 saldo_resultante.
    """

    id: int
    nombre: str
    tipo: TipoCuenta
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Account":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            nombre=row["nombre"],
            tipo=TipoCuenta(row["tipo"]),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "nombre": self.nombre,
            "tipo": self.tipo.value,
            "created_at": self.created_at,
        }


@dataclass
class Movement:
    """Movimiento

    Attributes:
        monto: 부호 있는 금액 (INGRESO > 0, EGRESO < 0)
        saldo_resultante: 체인 순서상 직전 잔액 + monto
        orden: 입력 순서 (같은 날짜 내 정렬 기준)
        movimiento_origen_id: 다른 원장의 원본 Movimiento (약한 참조)
    """

    id: int
    cuenta_id: int
    fecha: date
    monto: Decimal
    concepto: str
    saldo_resultante: Decimal
    orden: int
    movimiento_origen_id: int | None = None
    created_at: str | None = None

    @property
    def tipo_movimiento(self) -> TipoMovimiento:
        """부호에서 파생된 방향"""
        return TipoMovimiento.INGRESO if self.monto >= 0 else TipoMovimiento.EGRESO

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Movement":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            cuenta_id=row["cuenta_id"],
            fecha=date.fromisoformat(row["fecha"]),
            monto=_dec(row["monto"]),
            concepto=row["concepto"],
            saldo_resultante=_dec(row["saldo_resultante"]),
            orden=row["orden"],
            movimiento_origen_id=row.get("movimiento_origen_id"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "cuenta_id": self.cuenta_id,
            "fecha": self.fecha.isoformat(),
            "tipo_movimiento": self.tipo_movimiento.value,
            "monto": money_str(self.monto),
            "concepto": self.concepto,
            "saldo_resultante": money_str(self.saldo_resultante),
            "movimiento_origen_id": self.movimiento_origen_id,
            "created_at": self.created_at,
        }


@dataclass
class DepositUse:
    """Depósito 사용 내역"""

    id: int
    deposito_id: int
    fecha: date
    tipo_uso: TipoUsoDeposito
    monto: Decimal
    descripcion: str | None = None
    movimiento_id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "DepositUse":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            deposito_id=row["deposito_id"],
            fecha=date.fromisoformat(row["fecha"]),
            tipo_uso=TipoUsoDeposito(row["tipo_uso"]),
            monto=_dec(row["monto"]),
            descripcion=row.get("descripcion"),
            movimiento_id=row.get("movimiento_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "deposito_id": self.deposito_id,
            "fecha": self.fecha.isoformat(),
            "tipo_uso": self.tipo_uso.value,
            "monto": money_str(self.monto),
            "descripcion": self.descripcion,
            "movimiento_id": self.movimiento_id,
        }


@dataclass
class Deposit:
    """Depósito

    saldo_actual는 monto_original - Σ사용액 (DEVUELTO 이후 0).
    cuenta_id / cliente_id는 약한 참조 (조회 전용).
    """

    id: int
    monto_original: Decimal
    saldo_actual: Decimal
    fecha_ingreso: date
    estado: EstadoDeposito
    titular: str
    fecha_uso: date | None = None
    fecha_devolucion: date | None = None
    tipo_uso: TipoUsoDeposito | None = None
    descripcion_uso: str | None = None
    monto_devuelto: Decimal = Money.ZERO
    observaciones: str | None = None
    cuenta_id: int | None = None
    cliente_id: int | None = None
    movimiento_origen_id: int | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Deposit":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            monto_original=_dec(row["monto_original"]),
            saldo_actual=_dec(row["saldo_actual"]),
            fecha_ingreso=date.fromisoformat(row["fecha_ingreso"]),
            estado=EstadoDeposito(row["estado"]),
            titular=row["titular"],
            fecha_uso=_opt_date(row.get("fecha_uso")),
            fecha_devolucion=_opt_date(row.get("fecha_devolucion")),
            tipo_uso=TipoUsoDeposito(row["tipo_uso"]) if row.get("tipo_uso") else None,
            descripcion_uso=row.get("descripcion_uso"),
            monto_devuelto=_dec(row.get("monto_devuelto") or "0.00"),
            observaciones=row.get("observaciones"),
            cuenta_id=row.get("cuenta_id"),
            cliente_id=row.get("cliente_id"),
            movimiento_origen_id=row.get("movimiento_origen_id"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "monto_original": money_str(self.monto_original),
            "saldo_actual": money_str(self.saldo_actual),
            "fecha_ingreso": self.fecha_ingreso.isoformat(),
            "fecha_uso": _iso(self.fecha_uso),
            "fecha_devolucion": _iso(self.fecha_devolucion),
            "estado": self.estado.value,
            "tipo_uso": self.tipo_uso.value if self.tipo_uso else None,
            "descripcion_uso": self.descripcion_uso,
            "monto_devuelto": money_str(self.monto_devuelto),
            "titular": self.titular,
            "observaciones": self.observaciones,
            "cuenta_id": self.cuenta_id,
            "cliente_id": self.cliente_id,
            "movimiento_origen_id": self.movimiento_origen_id,
            "created_at": self.created_at,
        }


@dataclass
class Payment:
    """Deuda 상환 (Pago)"""

    id: int
    deuda_id: int
    fecha: date
    monto: Decimal
    numero_cuota: int | None = None
    observaciones: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Payment":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            deuda_id=row["deuda_id"],
            fecha=date.fromisoformat(row["fecha"]),
            monto=_dec(row["monto"]),
            numero_cuota=row.get("numero_cuota"),
            observaciones=row.get("observaciones"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "deuda_id": self.deuda_id,
            "fecha": self.fecha.isoformat(),
            "monto": money_str(self.monto),
            "numero_cuota": self.numero_cuota,
            "observaciones": self.observaciones,
            "created_at": self.created_at,
        }


@dataclass
class Debt:
    """Deuda

    total_pagado / saldo_pendiente는 pagos에서 계산 (저장하지 않음).
    """

    id: int
    concepto: str
    acreedor: str
    monto_total: Decimal
    tipo_pago: TipoPago
    fecha_inicio: date
    estado: EstadoDeuda
    cantidad_cuotas: int | None = None
    monto_cuota: Decimal | None = None
    observaciones: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pagos: list[Payment] = field(default_factory=list)

    @property
    def total_pagado(self) -> Decimal:
        return sum_money(p.monto for p in self.pagos)

    @property
    def saldo_pendiente(self) -> Decimal:
        return self.monto_total - self.total_pagado

    @classmethod
    def from_row(cls, row: dict[str, Any], pagos: list[Payment] | None = None) -> "Debt":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            concepto=row["concepto"],
            acreedor=row["acreedor"],
            monto_total=_dec(row["monto_total"]),
            tipo_pago=TipoPago(row["tipo_pago"]),
            fecha_inicio=date.fromisoformat(row["fecha_inicio"]),
            estado=EstadoDeuda(row["estado"]),
            cantidad_cuotas=row.get("cantidad_cuotas"),
            monto_cuota=_opt_dec(row.get("monto_cuota")),
            observaciones=row.get("observaciones"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            pagos=pagos or [],
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "concepto": self.concepto,
            "acreedor": self.acreedor,
            "monto_total": money_str(self.monto_total),
            "tipo_pago": self.tipo_pago.value,
            "cantidad_cuotas": self.cantidad_cuotas,
            "monto_cuota": money_str(self.monto_cuota) if self.monto_cuota is not None else None,
            "fecha_inicio": self.fecha_inicio.isoformat(),
            "estado": self.estado.value,
            "observaciones": self.observaciones,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "pagos": [p.to_dict() for p in self.pagos],
            "total_pagado": money_str(self.total_pagado),
            "saldo_pendiente": money_str(self.saldo_pendiente),
        }


@dataclass
class PeriodicControl:
    """정기 통제 (concepto + 기간당 1행)"""

    id: int
    concepto: str
    cadencia: Cadencia
    fecha_inicio: date
    fecha_fin: date
    total_recaudado: Decimal
    fecha_pago_programada: date
    pagado: bool = False
    fecha_pago_real: date | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PeriodicControl":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            concepto=row["concepto"],
            cadencia=Cadencia(row["cadencia"]),
            fecha_inicio=date.fromisoformat(row["fecha_inicio"]),
            fecha_fin=date.fromisoformat(row["fecha_fin"]),
            total_recaudado=_dec(row["total_recaudado"]),
            fecha_pago_programada=date.fromisoformat(row["fecha_pago_programada"]),
            pagado=bool(row["pagado"]),
            fecha_pago_real=_opt_date(row.get("fecha_pago_real")),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "id": self.id,
            "concepto": self.concepto,
            "cadencia": self.cadencia.value,
            "fecha_inicio": self.fecha_inicio.isoformat(),
            "fecha_fin": self.fecha_fin.isoformat(),
            "total_recaudado": money_str(self.total_recaudado),
            "fecha_pago_programada": self.fecha_pago_programada.isoformat(),
            "pagado": self.pagado,
            "fecha_pago_real": _iso(self.fecha_pago_real),
        }
