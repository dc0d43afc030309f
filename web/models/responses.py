"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 문자열(소수점 2자리)로 전달.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (production/testing)")
    version: str


class MessageResponse(BaseModel):
    """단순 메시지 응답"""

    message: str


class CuentaResponse(BaseModel):
    """계정 응답"""

    id: int
    nombre: str
    tipo: str
    created_at: str | None = None


class CuentaResumenResponse(BaseModel):
    """계정 요약 응답"""

    cuenta: CuentaResponse
    total_movimientos: int
    total_ingresos: str
    total_egresos: str
    saldo_actual: str


class MovimientoResponse(BaseModel):
    """Movimiento 응답"""

    id: int
    cuenta_id: int
    fecha: str
    tipo_movimiento: str = Field(..., description="INGRESO/EGRESO (부호에서 파생)")
    monto: str
    concepto: str
    saldo_resultante: str
    movimiento_origen_id: int | None = None
    created_at: str | None = None


class RecalculoResponse(BaseModel):
    """잔액 재계산 응답"""

    cuenta_id: int
    movimientos_actualizados: int
    saldo_final: str


class DepositoResponse(BaseModel):
    """Depósito 응답"""

    id: int
    monto_original: str
    saldo_actual: str
    fecha_ingreso: str
    fecha_uso: str | None = None
    fecha_devolucion: str | None = None
    estado: str
    tipo_uso: str | None = None
    descripcion_uso: str | None = None
    monto_devuelto: str
    titular: str
    observaciones: str | None = None
    cuenta_id: int | None = None
    cliente_id: int | None = None
    movimiento_origen_id: int | None = None
    created_at: str | None = None


class DepositoEstadisticasResponse(BaseModel):
    """Depósito 통계 응답"""

    total: int
    por_estado: dict[str, int]
    saldo_total_disponible: str


class PagoResponse(BaseModel):
    """Pago 응답"""

    id: int
    deuda_id: int
    fecha: str
    monto: str
    numero_cuota: int | None = None
    observaciones: str | None = None
    created_at: str | None = None


class PagoRegistradoResponse(BaseModel):
    """Pago 기록 결과"""

    message: str
    data: PagoResponse


class DeudaResponse(BaseModel):
    """Deuda 응답 (Pago 포함)"""

    id: int
    concepto: str
    acreedor: str
    monto_total: str
    tipo_pago: str
    cantidad_cuotas: int | None = None
    monto_cuota: str | None = None
    fecha_inicio: str
    estado: str
    observaciones: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pagos: list[PagoResponse] = Field(default_factory=list)
    total_pagado: str
    saldo_pendiente: str


class DeudaResumenResponse(BaseModel):
    """Deuda 요약 응답 (미완납 기준)"""

    total_deuda: str
    total_pagado: str
    total_pendiente: str
    deudas_activas: int
    deudas_pagadas: int


class ControlResponse(BaseModel):
    """정기 통제 응답"""

    id: int
    concepto: str
    cadencia: str
    fecha_inicio: str
    fecha_fin: str
    total_recaudado: str
    fecha_pago_programada: str
    pagado: bool
    fecha_pago_real: str | None = None


class ConciliacionResponse(BaseModel):
    """대사 결과 응답"""

    only_in_reference: list[str]
    only_in_store: list[str]
    total_only_in_reference: str
    total_only_in_store: str
    net_difference: str
    reference_count: int
    store_count: int
    is_reconciled: bool
