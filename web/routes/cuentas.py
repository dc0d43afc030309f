"""
Cuentas Corrientes API 라우트

계정 CRUD, Movimiento 추가/수정/삭제, 잔액 재계산.
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.accounts import AccountStore
from core.ledger.journal import MovementJournal
from core.utils.money import money_str
from web.dependencies import build_journal, get_app_settings, get_db, get_db_write
from web.models.requests import (
    CuentaCreateRequest,
    CuentaUpdateRequest,
    MovimientoCreateRequest,
    MovimientoUpdateRequest,
)
from web.models.responses import (
    CuentaResponse,
    CuentaResumenResponse,
    MessageResponse,
    MovimientoResponse,
    RecalculoResponse,
)

router = APIRouter(prefix="/api", tags=["Cuentas"])


# =========================================================================
# Cuentas
# =========================================================================


@router.get("/cuentas", response_model=list[CuentaResponse])
async def list_cuentas(db: SQLiteAdapter = Depends(get_db)) -> list[dict[str, Any]]:
    """계정 목록 (이름순)"""
    accounts = await AccountStore(db).list_all()
    return [a.to_dict() for a in accounts]


@router.post("/cuentas", response_model=CuentaResponse, status_code=201)
async def create_cuenta(
    request: CuentaCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """계정 생성"""
    account = await AccountStore(db).create(request.nombre, request.tipo)
    return account.to_dict()


@router.get("/cuentas/{cuenta_id}", response_model=CuentaResponse)
async def get_cuenta(cuenta_id: int, db: SQLiteAdapter = Depends(get_db)) -> dict[str, Any]:
    """계정 조회"""
    account = await AccountStore(db).get(cuenta_id)
    return account.to_dict()


@router.patch("/cuentas/{cuenta_id}", response_model=CuentaResponse)
async def update_cuenta(
    cuenta_id: int,
    request: CuentaUpdateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """계정 이름/유형 변경"""
    account = await AccountStore(db).rename(cuenta_id, request.nombre, request.tipo)
    return account.to_dict()


@router.delete("/cuentas/{cuenta_id}", response_model=MessageResponse)
async def delete_cuenta(
    cuenta_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, str]:
    """계정 삭제 (Movimiento가 없는 경우만)"""
    await AccountStore(db).delete(cuenta_id)
    return {"message": "Cuenta eliminada correctamente"}


@router.get("/cuentas/{cuenta_id}/resumen", response_model=CuentaResumenResponse)
async def get_cuenta_resumen(
    cuenta_id: int,
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """계정 요약 (건수, 입금/출금 합계, 잔액)"""
    return await AccountStore(db).get_summary(cuenta_id)


# =========================================================================
# Movimientos
# =========================================================================


@router.get("/cuentas/{cuenta_id}/movimientos", response_model=list[MovimientoResponse])
async def list_movimientos(
    cuenta_id: int,
    desde: date | None = Query(default=None),
    hasta: date | None = Query(default=None),
    db: SQLiteAdapter = Depends(get_db),
) -> list[dict[str, Any]]:
    """계정 Movimiento 목록 (체인 순서)"""
    movements = await MovementJournal(db).list_by_account(cuenta_id, desde, hasta)
    return [m.to_dict() for m in movements]


@router.post(
    "/cuentas/{cuenta_id}/movimientos",
    response_model=MovimientoResponse,
    status_code=201,
)
async def create_movimiento(
    cuenta_id: int,
    request: MovimientoCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Movimiento 추가 (과거 날짜 허용, 이후 잔액 재계산)"""
    movement = await build_journal(db, settings).append(
        cuenta_id,
        request.fecha,
        request.monto,
        request.concepto,
        request.movimiento_origen_id,
    )
    return movement.to_dict()


@router.post("/cuentas/{cuenta_id}/recalcular", response_model=RecalculoResponse)
async def recalcular_saldos(
    cuenta_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """계정 전체 잔액 재계산"""
    count, final = await MovementJournal(db).recompute_account(cuenta_id)
    return {
        "cuenta_id": cuenta_id,
        "movimientos_actualizados": count,
        "saldo_final": money_str(final),
    }


@router.post("/cuentas/{cuenta_id}/limpiar", response_model=MessageResponse)
async def limpiar_cuenta(
    cuenta_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, str]:
    """계정의 모든 Movimiento 삭제"""
    count = await build_journal(db, settings).clear_account(cuenta_id)
    return {"message": f"Cuenta limpiada correctamente ({count} movimientos eliminados)"}


@router.get("/movimientos/{movimiento_id}", response_model=MovimientoResponse)
async def get_movimiento(
    movimiento_id: int,
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """Movimiento 조회"""
    movement = await MovementJournal(db).get(movimiento_id)
    return movement.to_dict()


@router.patch("/movimientos/{movimiento_id}", response_model=MovimientoResponse)
async def update_movimiento(
    movimiento_id: int,
    request: MovimientoUpdateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Movimiento 수정 (금액/날짜 변경 시 재입력과 동일하게 재계산)"""
    movement = await build_journal(db, settings).update(
        movimiento_id,
        monto=request.monto,
        fecha=request.fecha,
        concepto=request.concepto,
    )
    return movement.to_dict()


@router.delete("/movimientos/{movimiento_id}", response_model=MessageResponse)
async def delete_movimiento(
    movimiento_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, str]:
    """Movimiento 삭제 (이후 잔액 재계산)"""
    await build_journal(db, settings).delete(movimiento_id)
    return {"message": "Movimiento eliminado correctamente"}
