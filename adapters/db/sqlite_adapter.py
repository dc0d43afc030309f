"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web과 스크립트가 동시에 접근 가능하도록 설정.

트랜잭션은 중첩 가능: 안쪽 transaction()은 바깥 트랜잭션에 합류하고
가장 바깥 블록만 커밋/롤백한다. 잔액 재계산처럼 여러 문장으로 이루어진
변경이 중간 상태로 저장되지 않도록 하기 위함.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.errors import StorageError
from core.types import RunMode

logger = logging.getLogger(__name__)


def get_db_path(mode: RunMode | str) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 실행 모드 (PRODUCTION/TESTING)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = RunMode(mode.lower())

    if mode == RunMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.TEST_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    if db_path_str != ":memory:":
        # 디렉토리가 없으면 생성
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    try:
        if readonly:
            conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
        else:
            conn = await aiosqlite.connect(db_path_str)

        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기
        await conn.execute("PRAGMA foreign_keys=ON")
    except aiosqlite.Error as e:
        raise StorageError(f"No se pudo abrir la base de datos {db_path_str}: {e}") from e

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회 전용 API용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction():
        await adapter.execute("INSERT INTO ...")
        async with adapter.transaction():  # 바깥 트랜잭션에 합류
            await adapter.execute("UPDATE ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._tx_depth = 0

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """transaction() 블록 내부 여부"""
        return self._tx_depth > 0

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            self._tx_depth = 0
            logger.info("SQLite 연결 종료")

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행

        Raises:
            StorageError: 드라이버 오류 (제약 위반 등)
        """
        conn = self._require_conn()
        try:
            if parameters:
                return await conn.execute(sql, parameters)
            return await conn.execute(sql)
        except aiosqlite.Error as e:
            raise StorageError(str(e)) from e

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        conn = self._require_conn()
        try:
            return await conn.executemany(sql, parameters)
        except aiosqlite.Error as e:
            raise StorageError(str(e)) from e

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def fetchone_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> dict[str, Any] | None:
        """단일 행 조회 (컬럼명 → 값 dict)"""
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()
        if row is None:
            return None
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))

    async def fetchall_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (컬럼명 → 값 dict 목록)"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋 (transaction() 블록 내부에서는 무시)"""
        if self._conn is not None and self._tx_depth == 0:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        중첩 호출은 바깥 트랜잭션에 합류 (커밋/롤백은 가장 바깥에서 1회).
        드라이버 오류는 StorageError로 변환되어 전파.
        """
        conn = self._require_conn()

        if self._tx_depth > 0:
            self._tx_depth += 1
            try:
                yield conn
            finally:
                self._tx_depth -= 1
            return

        self._tx_depth = 1
        try:
            if not self.readonly and not conn.in_transaction:
                await conn.execute("BEGIN IMMEDIATE")
            yield conn
            self._tx_depth = 0
            await conn.commit()
        except aiosqlite.Error as e:
            self._tx_depth = 0
            await conn.rollback()
            logger.error(f"트랜잭션 롤백 (저장소 오류): {e}")
            raise StorageError(str(e)) from e
        except BaseException:
            self._tx_depth = 0
            await conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 컬럼 정보 (PRAGMA table_info)"""
        return await self.fetchall_dict(f"PRAGMA table_info({table_name})")

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
