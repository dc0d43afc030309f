"""
Depósitos API 라우트

Depósito 등록, 사용, 사용 취소, 잔액 보유, 반환, 계정 연결, 통계.
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.deposits.lifecycle import DepositLifecycle
from core.types import EstadoDeposito
from web.dependencies import build_deposits, get_app_settings, get_db, get_db_write
from web.models.requests import (
    DepositoCreateRequest,
    DepositoCuentaRequest,
    DepositoDevolucionRequest,
    DepositoUsoRequest,
)
from web.models.responses import (
    DepositoEstadisticasResponse,
    DepositoResponse,
    MessageResponse,
)

router = APIRouter(prefix="/api/depositos", tags=["Depositos"])


@router.get("", response_model=list[DepositoResponse])
async def list_depositos(
    estado: EstadoDeposito | None = Query(default=None),
    cuenta_id: int | None = Query(default=None),
    desde: date | None = Query(default=None),
    hasta: date | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
) -> list[dict[str, Any]]:
    """Depósito 목록 (입금일 내림차순)"""
    deposits = await DepositLifecycle(db).list_by_status(estado, cuenta_id, desde, hasta)
    return [d.to_dict() for d in deposits]


@router.get("/estadisticas", response_model=DepositoEstadisticasResponse)
async def get_estadisticas(db: SQLiteAdapter = Depends(get_db)) -> dict[str, Any]:
    """상태별 건수와 사용 가능 잔액 합계"""
    return await DepositLifecycle(db).get_statistics()


@router.get("/no-asociados", response_model=list[DepositoResponse])
async def list_no_asociados(db: SQLiteAdapter = Depends(get_db)) -> list[dict[str, Any]]:
    """계정/고객 미연결 Depósito"""
    deposits = await DepositLifecycle(db).list_unassociated()
    return [d.to_dict() for d in deposits]


@router.post("", response_model=DepositoResponse, status_code=201)
async def create_deposito(
    request: DepositoCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """Depósito 등록"""
    deposit = await DepositLifecycle(db).create(
        monto_original=request.monto_original,
        fecha_ingreso=request.fecha_ingreso,
        titular=request.titular,
        cuenta_id=request.cuenta_id,
        cliente_id=request.cliente_id,
        observaciones=request.observaciones,
        movimiento_origen_id=request.movimiento_origen_id,
    )
    return deposit.to_dict()


@router.get("/{deposito_id}", response_model=DepositoResponse)
async def get_deposito(deposito_id: int, db: SQLiteAdapter = Depends(get_db)) -> dict[str, Any]:
    """Depósito 조회"""
    deposit = await DepositLifecycle(db).get(deposito_id)
    return deposit.to_dict()


@router.get("/{deposito_id}/usos")
async def list_usos(deposito_id: int, db: SQLiteAdapter = Depends(get_db)) -> list[dict[str, Any]]:
    """사용 내역"""
    uses = await DepositLifecycle(db).list_uses(deposito_id)
    return [u.to_dict() for u in uses]


@router.post("/{deposito_id}/usar", response_model=DepositoResponse)
async def usar_deposito(
    deposito_id: int,
    request: DepositoUsoRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Depósito 사용 (전액 → LIQUIDADO, 부분 → A_CUENTA)"""
    deposit = await build_deposits(db, settings).use(
        deposito_id,
        request.fecha_uso,
        request.tipo_uso,
        request.monto,
        request.descripcion,
    )
    return deposit.to_dict()


@router.post("/{deposito_id}/a-favor", response_model=DepositoResponse)
async def marcar_a_favor(
    deposito_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """잔액을 보유 금액(A_FAVOR)으로 전환"""
    deposit = await DepositLifecycle(db).credit(deposito_id)
    return deposit.to_dict()


@router.post("/{deposito_id}/devolver", response_model=DepositoResponse)
async def devolver_deposito(
    deposito_id: int,
    request: DepositoDevolucionRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """Depósito 반환 (잔액 소멸)"""
    deposit = await DepositLifecycle(db).return_(
        deposito_id,
        request.fecha_devolucion,
        request.monto_devuelto,
    )
    return deposit.to_dict()


@router.put("/{deposito_id}/cuenta", response_model=DepositoResponse)
async def asociar_cuenta(
    deposito_id: int,
    request: DepositoCuentaRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """계정 연결/해제"""
    deposit = await DepositLifecycle(db).link_account(deposito_id, request.cuenta_id)
    return deposit.to_dict()


@router.delete("/{deposito_id}", response_model=MessageResponse)
async def delete_deposito(
    deposito_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, str]:
    """Depósito 삭제"""
    await DepositLifecycle(db).delete(deposito_id)
    return {"message": "Depósito eliminado correctamente"}


@router.delete("/usos/{uso_id}", response_model=DepositoResponse)
async def anular_uso(
    uso_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """사용 취소 (연결된 INGRESO Movimiento 삭제, 잔액 복원)"""
    deposit = await build_deposits(db, settings).delete_use(uso_id)
    return deposit.to_dict()
