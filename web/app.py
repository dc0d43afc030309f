"""
FastAPI 애플리케이션

라우터 등록, 도메인 예외 → HTTP 응답 매핑, 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings
from core.errors import InvalidStateError, NotFoundError, StorageError, ValidationError
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import conciliacion, controles, cuentas, depositos, deudas, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db)

    logger.info(
        "Web 시작",
        extra={"mode": settings.mode.value, "db_path": str(settings.db_path)},
    )
    yield


app = FastAPI(
    title="Registro Ledger API",
    description="Cuentas corrientes, depósitos, deudas y controles periódicos",
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# 도메인 예외 → HTTP 상태 코드
# =========================================================================


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"저장소 오류: {exc}", extra={"path": request.url.path})
    return JSONResponse(
        status_code=503,
        content={"detail": "Error de almacenamiento. La operación no fue aplicada."},
    )


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(cuentas.router)
app.include_router(depositos.router)
app.include_router(deudas.router)
app.include_router(controles.router)
app.include_router(conciliacion.router)
