"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 정규화된 숫자 또는 숫자 문자열 ("1234.56")로 입력 (지역 형식 불가).
업무 규칙 검증(금액 > 0, 잔액 초과 등)은 코어에서 수행.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from core.types import Cadencia, TipoCuenta, TipoPago, TipoUsoDeposito


# =========================================================================
# Cuentas / Movimientos
# =========================================================================


class CuentaCreateRequest(BaseModel):
    """계정 생성 요청"""

    nombre: str = Field(..., min_length=1, description="계정 이름 (고유)")
    tipo: TipoCuenta = Field(..., description="계정 유형")


class CuentaUpdateRequest(BaseModel):
    """계정 이름/유형 변경 요청"""

    nombre: str = Field(..., min_length=1, description="새 이름")
    tipo: TipoCuenta | None = Field(default=None, description="새 유형 (생략 시 유지)")


class MovimientoCreateRequest(BaseModel):
    """Movimiento 추가 요청"""

    fecha: date = Field(..., description="거래일 (과거 날짜 허용)")
    monto: Decimal = Field(..., description="부호 있는 금액 (INGRESO > 0, EGRESO < 0)")
    concepto: str = Field(..., min_length=1, description="개념")
    movimiento_origen_id: int | None = Field(default=None, description="원본 Movimiento ID")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"fecha": "2025-03-10", "monto": "1500.00", "concepto": "Ley 23.283"},
                {"fecha": "2025-03-01", "monto": "-200.00", "concepto": "Gasto librería"},
            ]
        }
    }


class MovimientoUpdateRequest(BaseModel):
    """Movimiento 수정 요청 (생략한 필드는 유지)"""

    fecha: date | None = None
    monto: Decimal | None = None
    concepto: str | None = None


# =========================================================================
# Depósitos
# =========================================================================


class DepositoCreateRequest(BaseModel):
    """Depósito 등록 요청"""

    monto_original: Decimal = Field(..., description="입금액")
    fecha_ingreso: date = Field(..., description="입금일")
    titular: str = Field(..., min_length=1, description="예금주")
    cuenta_id: int | None = Field(default=None, description="연결 계정")
    cliente_id: int | None = Field(default=None, description="연결 고객")
    observaciones: str | None = None
    movimiento_origen_id: int | None = None


class DepositoUsoRequest(BaseModel):
    """Depósito 사용 요청"""

    fecha_uso: date
    tipo_uso: TipoUsoDeposito
    monto: Decimal
    descripcion: str | None = None


class DepositoDevolucionRequest(BaseModel):
    """Depósito 반환 요청"""

    fecha_devolucion: date
    monto_devuelto: Decimal


class DepositoCuentaRequest(BaseModel):
    """Depósito 계정 연결 요청 (null이면 해제)"""

    cuenta_id: int | None = None


# =========================================================================
# Deudas
# =========================================================================


class DeudaCreateRequest(BaseModel):
    """Deuda 등록 요청"""

    concepto: str = Field(..., min_length=1)
    acreedor: str = Field(..., min_length=1, description="채권자")
    monto_total: Decimal = Field(..., description="원금")
    tipo_pago: TipoPago
    cantidad_cuotas: int | None = Field(default=None, description="할부 횟수 (CUOTAS)")
    fecha_inicio: date
    observaciones: str | None = None


class DeudaUpdateRequest(BaseModel):
    """Deuda 수정 요청 (보낸 필드만 반영)"""

    concepto: str | None = None
    acreedor: str | None = None
    monto_total: Decimal | None = None
    tipo_pago: TipoPago | None = None
    cantidad_cuotas: int | None = None
    fecha_inicio: date | None = None
    observaciones: str | None = None


class PagoCreateRequest(BaseModel):
    """Pago 기록 요청"""

    fecha: date
    monto: Decimal
    numero_cuota: int | None = None
    observaciones: str | None = None


# =========================================================================
# Controles / Conciliación
# =========================================================================


class ControlRecalcularRequest(BaseModel):
    """정기 통제 재집계 요청 (기준일이 속한 기간)"""

    concepto: str = Field(..., min_length=1)
    cadencia: Cadencia
    fecha: date = Field(..., description="기간 내 임의의 날짜")


class ControlPagoRequest(BaseModel):
    """정기 통제 납부 처리 요청"""

    fecha_pago: date


class ConciliacionRequest(BaseModel):
    """두 금액 목록 비교 요청"""

    reference: list[Decimal] = Field(default_factory=list, description="외부 기준 목록")
    store: list[Decimal] = Field(default_factory=list, description="원장 측 목록")


class ConciliacionCuentaRequest(BaseModel):
    """계정 EGRESO 대사 요청"""

    cuenta_id: int
    reference: list[Decimal] = Field(default_factory=list)
    desde: date | None = None
    hasta: date | None = None
