"""
Web API 테스트 fixture

httpx.AsyncClient + ASGITransport는 lifespan을 실행하지 않으므로
설정 로드와 스키마 초기화를 fixture에서 직접 수행.
"""

from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger.schema import init_ledger_schema


@pytest_asyncio.fixture
async def client(temp_settings_file: Path) -> AsyncClient:
    """임시 DB를 사용하는 API 클라이언트"""
    Settings.reset()
    settings = get_settings(temp_settings_file)

    async with SQLiteAdapter(settings.db_path) as db:
        await init_ledger_schema(db)

    from web.app import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    Settings.reset()


@pytest_asyncio.fixture
async def cuenta_id(client: AsyncClient) -> int:
    response = await client.post("/api/cuentas", json={"nombre": "Caja", "tipo": "CAJA"})
    return response.json()["id"]
