"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
코어 컴포넌트는 요청마다 해당 요청의 DB 연결로 생성.
"""

from typing import AsyncGenerator

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.controls.aggregator import PeriodicControlAggregator
from core.deposits.lifecycle import DepositLifecycle
from core.ledger.journal import MovementJournal


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    조회 API에서 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    생성/수정/삭제 API에서 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


def build_controls(db: SQLiteAdapter, settings: Settings) -> PeriodicControlAggregator:
    """설정의 concepto → 주기 매핑을 가진 집계기"""
    return PeriodicControlAggregator(db, settings.controles)


def build_journal(db: SQLiteAdapter, settings: Settings) -> MovementJournal:
    """Movimiento 변경 시 정기 통제를 함께 재집계하는 원장"""
    return MovementJournal(db, controls=build_controls(db, settings))


def build_deposits(db: SQLiteAdapter, settings: Settings) -> DepositLifecycle:
    """A_CUENTA 사용이 build_journal() 원장으로 기록되는 Depósito 관리자"""
    return DepositLifecycle(db, journal=build_journal(db, settings))
