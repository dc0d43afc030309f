"""
Conciliación API 라우트

두 금액 목록 비교, 계정 EGRESO 대사.
"""

from typing import Any

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.journal import MovementJournal
from core.reconciliation.comparator import ReconciliationComparator
from web.dependencies import get_db
from web.models.requests import ConciliacionCuentaRequest, ConciliacionRequest
from web.models.responses import ConciliacionResponse

router = APIRouter(prefix="/api/conciliacion", tags=["Conciliacion"])


@router.post("/comparar", response_model=ConciliacionResponse)
async def comparar(request: ConciliacionRequest) -> dict[str, Any]:
    """두 금액 목록 비교 (건수 기반)"""
    result = ReconciliationComparator().compare(request.reference, request.store)
    return result.to_dict()


@router.post("/egresos", response_model=ConciliacionResponse)
async def comparar_egresos(
    request: ConciliacionCuentaRequest,
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """계정 EGRESO와 외부 목록 비교"""
    comparator = ReconciliationComparator(MovementJournal(db))
    result = await comparator.compare_account_egresos(
        request.cuenta_id,
        request.reference,
        request.desde,
        request.hasta,
    )
    return result.to_dict()
