"""
잔액 재계산 스크립트

Movimiento 체인 전체를 다시 계산하여 saldo_resultante 정합 복구.
계정을 지정하지 않으면 모든 계정 처리.

사용법:
    python -m scripts.recompute_balances --mode testing
    python -m scripts.recompute_balances --mode production --cuenta 51
    python -m scripts.recompute_balances --db data/otro.db
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.ledger.journal import MovementJournal
from core.ledger.schema import init_ledger_schema
from core.logging import setup_logging
from core.types import RunMode
from core.utils.money import money_str

logger = logging.getLogger(__name__)


async def recompute(db_path: Path, cuenta_id: int | None = None) -> list[dict]:
    """재계산 실행

    Args:
        db_path: DB 파일 경로
        cuenta_id: 대상 계정 (None이면 전체)

    Returns:
        계정별 결과 목록
    """
    async with SQLiteAdapter(db_path) as db:
        await init_ledger_schema(db)
        journal = MovementJournal(db)

        if cuenta_id is None:
            return await journal.recompute_all()

        before = await journal.get_balance(cuenta_id)
        count, final = await journal.recompute_account(cuenta_id)
        return [{
            "cuenta_id": cuenta_id,
            "cuenta_nombre": None,
            "movimientos": count,
            "saldo_anterior": money_str(before),
            "saldo_nuevo": money_str(final),
        }]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Movimiento 잔액 재계산")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RunMode],
        default=RunMode.TESTING.value,
        help="실행 모드 (기본: testing)",
    )
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (지정 시 --mode 무시)")
    parser.add_argument("--cuenta", type=int, default=None, help="대상 계정 ID (생략 시 전체)")
    args = parser.parse_args(argv)

    setup_logging("scripts")

    db_path = args.db or get_db_path(args.mode)
    logger.info(f"잔액 재계산 시작: {db_path}")

    report = asyncio.run(recompute(db_path, args.cuenta))

    for item in report:
        changed = item["saldo_anterior"] != item["saldo_nuevo"]
        logger.info(
            f"  [{item['cuenta_id']}] {item['cuenta_nombre'] or ''} "
            f"{item['movimientos']}건: {item['saldo_anterior']} → {item['saldo_nuevo']}"
            f"{' (변경)' if changed else ''}"
        )

    logger.info(f"잔액 재계산 완료: {len(report)}개 계정")
    return 0


if __name__ == "__main__":
    sys.exit(main())
