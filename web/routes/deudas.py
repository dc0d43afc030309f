"""
Deudas API 라우트

Deuda 등록/수정/삭제, Pago 기록/삭제, 요약.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.debts.tracker import DebtTracker
from core.types import EstadoDeuda
from web.dependencies import get_db, get_db_write
from web.models.requests import DeudaCreateRequest, DeudaUpdateRequest, PagoCreateRequest
from web.models.responses import (
    DeudaResponse,
    DeudaResumenResponse,
    MessageResponse,
    PagoRegistradoResponse,
)

router = APIRouter(prefix="/api/deudas", tags=["Deudas"])


@router.get("", response_model=list[DeudaResponse])
async def list_deudas(
    estado: EstadoDeuda | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
) -> list[dict[str, Any]]:
    """Deuda 목록 (Pago 포함)"""
    debts = await DebtTracker(db).list_all(estado)
    return [d.to_dict() for d in debts]


@router.get("/resumen", response_model=DeudaResumenResponse)
async def get_resumen(db: SQLiteAdapter = Depends(get_db)) -> dict[str, Any]:
    """미완납 Deuda 요약"""
    return await DebtTracker(db).get_resumen()


@router.post("", response_model=DeudaResponse, status_code=201)
async def create_deuda(
    request: DeudaCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """Deuda 등록"""
    debt = await DebtTracker(db).create(
        concepto=request.concepto,
        acreedor=request.acreedor,
        monto_total=request.monto_total,
        tipo_pago=request.tipo_pago,
        fecha_inicio=request.fecha_inicio,
        cantidad_cuotas=request.cantidad_cuotas,
        observaciones=request.observaciones,
    )
    return debt.to_dict()


@router.get("/{deuda_id}", response_model=DeudaResponse)
async def get_deuda(deuda_id: int, db: SQLiteAdapter = Depends(get_db)) -> dict[str, Any]:
    """Deuda 조회"""
    debt = await DebtTracker(db).get(deuda_id)
    return debt.to_dict()


@router.patch("/{deuda_id}", response_model=DeudaResponse)
async def update_deuda(
    deuda_id: int,
    request: DeudaUpdateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """Deuda 수정 (보낸 필드만 반영)"""
    debt = await DebtTracker(db).update(deuda_id, **request.model_dump(exclude_unset=True))
    return debt.to_dict()


@router.delete("/{deuda_id}", response_model=MessageResponse)
async def delete_deuda(deuda_id: int, db: SQLiteAdapter = Depends(get_db_write)) -> dict[str, str]:
    """Deuda 삭제 (Pago 포함)"""
    await DebtTracker(db).delete(deuda_id)
    return {"message": "Deuda eliminada correctamente"}


@router.post("/{deuda_id}/pagos", response_model=PagoRegistradoResponse, status_code=201)
async def registrar_pago(
    deuda_id: int,
    request: PagoCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """Pago 기록"""
    payment, message = await DebtTracker(db).register_payment(
        deuda_id,
        request.fecha,
        request.monto,
        request.numero_cuota,
        request.observaciones,
    )
    return {"message": message, "data": payment.to_dict()}


@router.delete("/pagos/{pago_id}", response_model=MessageResponse)
async def eliminar_pago(pago_id: int, db: SQLiteAdapter = Depends(get_db_write)) -> dict[str, str]:
    """Pago 삭제"""
    await DebtTracker(db).delete_payment(pago_id)
    return {"message": "Pago eliminado correctamente"}
