"""
pytest 공통 fixture 정의

임시 디렉토리, 스키마가 초기화된 임시 DB, 코어 컴포넌트, 테스트용 settings.yaml
"""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.controls.aggregator import PeriodicControlAggregator
from core.debts.tracker import DebtTracker
from core.deposits.lifecycle import DepositLifecycle
from core.ledger.accounts import AccountStore
from core.ledger.journal import MovementJournal
from core.ledger.schema import init_ledger_schema
from core.types import Cadencia


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest_asyncio.fixture
async def db(temp_dir: Path) -> SQLiteAdapter:
    """Ledger 스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(temp_dir / "test_registro.db")
    await adapter.connect()
    await init_ledger_schema(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture
def accounts(db: SQLiteAdapter) -> AccountStore:
    return AccountStore(db)


@pytest.fixture
def controls(db: SQLiteAdapter) -> PeriodicControlAggregator:
    """"Ley 23.283"은 주간, "ARBA"는 반월 집계"""
    return PeriodicControlAggregator(
        db,
        {"Ley 23.283": Cadencia.SEMANAL, "ARBA": Cadencia.QUINCENAL},
    )


@pytest.fixture
def journal(db: SQLiteAdapter, controls: PeriodicControlAggregator) -> MovementJournal:
    return MovementJournal(db, controls=controls)


@pytest.fixture
def deposits(db: SQLiteAdapter, journal: MovementJournal) -> DepositLifecycle:
    return DepositLifecycle(db, journal=journal)


@pytest.fixture
def debts(db: SQLiteAdapter) -> DebtTracker:
    return DebtTracker(db)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    db_path = (temp_dir / "web_registro.db").as_posix()
    settings_content = f"""# 테스트용 settings.yaml
mode: testing

database:
  path: "{db_path}"

web:
  host: 127.0.0.1
  port: 8123

controles:
  "Ley 23.283": SEMANAL
  ARBA: QUINCENAL
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 settings.yaml 파일 생성"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("mode: invalid_mode\n", encoding="utf-8")
    return settings_path
