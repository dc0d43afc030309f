"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    ConciliacionCuentaRequest,
    ConciliacionRequest,
    ControlPagoRequest,
    ControlRecalcularRequest,
    CuentaCreateRequest,
    CuentaUpdateRequest,
    DepositoCreateRequest,
    DepositoCuentaRequest,
    DepositoDevolucionRequest,
    DepositoUsoRequest,
    DeudaCreateRequest,
    DeudaUpdateRequest,
    MovimientoCreateRequest,
    MovimientoUpdateRequest,
    PagoCreateRequest,
)
from web.models.responses import (
    ConciliacionResponse,
    ControlResponse,
    CuentaResponse,
    CuentaResumenResponse,
    DepositoEstadisticasResponse,
    DepositoResponse,
    DeudaResponse,
    DeudaResumenResponse,
    HealthResponse,
    MessageResponse,
    MovimientoResponse,
    PagoRegistradoResponse,
    PagoResponse,
    RecalculoResponse,
)

__all__ = [
    # Requests
    "ConciliacionCuentaRequest",
    "ConciliacionRequest",
    "ControlPagoRequest",
    "ControlRecalcularRequest",
    "CuentaCreateRequest",
    "CuentaUpdateRequest",
    "DepositoCreateRequest",
    "DepositoCuentaRequest",
    "DepositoDevolucionRequest",
    "DepositoUsoRequest",
    "DeudaCreateRequest",
    "DeudaUpdateRequest",
    "MovimientoCreateRequest",
    "MovimientoUpdateRequest",
    "PagoCreateRequest",
    # Responses
    "ConciliacionResponse",
    "ControlResponse",
    "CuentaResponse",
    "CuentaResumenResponse",
    "DepositoEstadisticasResponse",
    "DepositoResponse",
    "DeudaResponse",
    "DeudaResumenResponse",
    "HealthResponse",
    "MessageResponse",
    "MovimientoResponse",
    "PagoRegistradoResponse",
    "PagoResponse",
    "RecalculoResponse",
]
