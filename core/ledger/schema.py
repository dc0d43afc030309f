"""
Ledger 스키마 초기화

Web/스크립트 시작 시 자동으로 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액 컬럼은 TEXT (Decimal 문자열) 저장, 날짜는 ISO 'YYYY-MM-DD' TEXT.
약한 참조(movimiento_origen_id, depositos.cuenta_id, cliente_id,
deposito_usos.movimiento_id)에는 FOREIGN KEY를 걸지 않음 (조회 전용, 소유 관계 아님).
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: 연결된 SQLiteAdapter
    """
    await _create_tables(db)
    await _create_indexes(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_tables(db: "SQLiteAdapter") -> None:
    """테이블 생성"""

    # cuentas (Cuenta Corriente, 잔액 컬럼 없음 - 잔액은 movimientos에서 파생)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS cuentas (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            nombre           TEXT NOT NULL UNIQUE,
            tipo             TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # movimientos (체인 순서: fecha, orden)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS movimientos (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            cuenta_id            INTEGER NOT NULL,
            fecha                TEXT NOT NULL,
            monto                TEXT NOT NULL,
            concepto             TEXT NOT NULL,
            saldo_resultante     TEXT NOT NULL,
            orden                INTEGER NOT NULL,
            movimiento_origen_id INTEGER,
            created_at           TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at           TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (cuenta_id) REFERENCES cuentas(id)
        )
    """)

    # depositos
    await db.execute("""
        CREATE TABLE IF NOT EXISTS depositos (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            monto_original       TEXT NOT NULL,
            saldo_actual         TEXT NOT NULL,
            fecha_ingreso        TEXT NOT NULL,
            fecha_uso            TEXT,
            fecha_devolucion     TEXT,
            estado               TEXT NOT NULL DEFAULT 'PENDIENTE',
            tipo_uso             TEXT,
            descripcion_uso      TEXT,
            monto_devuelto       TEXT NOT NULL DEFAULT '0.00',
            titular              TEXT NOT NULL,
            observaciones        TEXT,
            cuenta_id            INTEGER,
            cliente_id           INTEGER,
            movimiento_origen_id INTEGER,
            created_at           TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # deposito_usos (depositos 소유, saldo_actual 재계산 근거)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS deposito_usos (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            deposito_id      INTEGER NOT NULL,
            fecha            TEXT NOT NULL,
            tipo_uso         TEXT NOT NULL,
            monto            TEXT NOT NULL,
            descripcion      TEXT,
            movimiento_id    INTEGER,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (deposito_id) REFERENCES depositos(id) ON DELETE CASCADE
        )
    """)

    # deudas
    await db.execute("""
        CREATE TABLE IF NOT EXISTS deudas (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            concepto         TEXT NOT NULL,
            acreedor         TEXT NOT NULL,
            monto_total      TEXT NOT NULL,
            tipo_pago        TEXT NOT NULL,
            cantidad_cuotas  INTEGER,
            monto_cuota      TEXT,
            fecha_inicio     TEXT NOT NULL,
            estado           TEXT NOT NULL DEFAULT 'PENDIENTE',
            observaciones    TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # deudas_pagos (deudas 소유)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS deudas_pagos (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            deuda_id         INTEGER NOT NULL,
            fecha            TEXT NOT NULL,
            monto            TEXT NOT NULL,
            numero_cuota     INTEGER,
            observaciones    TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (deuda_id) REFERENCES deudas(id) ON DELETE CASCADE
        )
    """)

    # controles_periodicos (concepto + 기간당 1행)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS controles_periodicos (
            id                    INTEGER PRIMARY KEY AUTOINCREMENT,
            concepto              TEXT NOT NULL,
            cadencia              TEXT NOT NULL,
            fecha_inicio          TEXT NOT NULL,
            fecha_fin             TEXT NOT NULL,
            total_recaudado       TEXT NOT NULL DEFAULT '0.00',
            fecha_pago_programada TEXT NOT NULL,
            pagado                INTEGER NOT NULL DEFAULT 0,
            fecha_pago_real       TEXT,
            created_at            TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at            TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE(concepto, fecha_inicio, fecha_fin)
        )
    """)


async def _create_indexes(db: "SQLiteAdapter") -> None:
    """인덱스 생성"""
    await db.execute("CREATE INDEX IF NOT EXISTS idx_movimientos_chain ON movimientos(cuenta_id, fecha, orden)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_movimientos_concepto ON movimientos(concepto, fecha)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_movimientos_origen ON movimientos(movimiento_origen_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_depositos_estado ON depositos(estado)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_depositos_cuenta ON depositos(cuenta_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_deposito_usos_deposito ON deposito_usos(deposito_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_deudas_estado ON deudas(estado)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_deudas_pagos_deuda ON deudas_pagos(deuda_id)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_controles_pendientes ON controles_periodicos(cadencia, pagado, fecha_pago_programada)")
    logger.debug("Ledger 인덱스 생성 완료")
