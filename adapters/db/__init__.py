"""
데이터베이스 어댑터

registro DB(SQLite, WAL) 연결과 트랜잭션 경계.
드라이버 오류는 StorageError로 변환되어 전달됨.
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    get_db_path,
)

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "get_db_path",
]
