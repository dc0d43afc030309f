"""
Controles API 라우트

정기 통제(주간/반월) 재집계, 미납 조회, 납부 처리.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.types import Cadencia
from web.dependencies import build_controls, get_app_settings, get_db, get_db_write
from web.models.requests import ControlPagoRequest, ControlRecalcularRequest
from web.models.responses import ControlResponse, MessageResponse

router = APIRouter(prefix="/api/controles", tags=["Controles"])


@router.get("", response_model=list[ControlResponse])
async def list_controles(
    cadencia: Cadencia | None = Query(default=None),
    concepto: str | None = Query(default=None),
    pagado: bool | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> list[dict[str, Any]]:
    """Control 목록 (납부 예정일 내림차순)"""
    controls = await build_controls(db, settings).list_controls(cadencia, concepto, pagado)
    return [c.to_dict() for c in controls]


@router.get("/pendientes", response_model=list[ControlResponse])
async def list_pendientes(
    cadencia: Cadencia | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> list[dict[str, Any]]:
    """미납 Control (납부 예정일 오름차순)"""
    controls = await build_controls(db, settings).list_pending(cadencia)
    return [c.to_dict() for c in controls]


@router.post("/recalcular", response_model=ControlResponse)
async def recalcular_control(
    request: ControlRecalcularRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """기준일이 속한 기간의 total_recaudado 재집계"""
    control = await build_controls(db, settings).recompute_for_date(
        request.concepto,
        request.cadencia,
        request.fecha,
    )
    return control.to_dict()


@router.post("/{control_id}/pagar", response_model=ControlResponse)
async def pagar_control(
    control_id: int,
    request: ControlPagoRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """납부 처리"""
    control = await build_controls(db, settings).mark_paid(control_id, request.fecha_pago)
    return control.to_dict()


@router.delete("/{control_id}/pagar", response_model=ControlResponse)
async def desmarcar_pago(
    control_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """납부 취소"""
    control = await build_controls(db, settings).unmark_paid(control_id)
    return control.to_dict()


@router.delete("/{control_id}", response_model=MessageResponse)
async def delete_control(
    control_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, str]:
    """Control 삭제"""
    await build_controls(db, settings).delete(control_id)
    return {"message": "Control eliminado correctamente"}
