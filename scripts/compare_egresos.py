"""
EGRESO 대사 스크립트

외부에서 받은 금액 목록(한 줄에 하나, 지역 형식 "$ 1.234,56")을
계정의 EGRESO와 비교하여 한쪽에만 있는 금액과 순차이 출력.

사용법:
    python -m scripts.compare_egresos --cuenta 51 --archivo lista.txt
    python -m scripts.compare_egresos --cuenta 51 --archivo lista.txt --desde 2025-01-01 --hasta 2025-03-31
"""

import argparse
import asyncio
import logging
import re
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.ledger.journal import MovementJournal
from core.logging import setup_logging
from core.reconciliation.comparator import ReconciliationComparator, ReconciliationResult
from core.types import RunMode
from core.utils.money import money_str, sum_money

logger = logging.getLogger(__name__)

# 빈 금액 표기 ("$ -")
_EMPTY_AMOUNT = re.compile(r"^\$?\s*-\s*$")


def parse_locale_amount(text: str) -> Decimal:
    """지역 형식 금액 파싱 (. 천 단위, , 소수점)

    Example:
        >>> parse_locale_amount(" $ 1.379.031,60")
        Decimal('1379031.60')
        >>> parse_locale_amount("$ -544.920,00")
        Decimal('-544920.00')

    Raises:
        ValueError: 숫자로 변환할 수 없는 경우
    """
    cleaned = text.replace("$", "").replace(" ", "").strip()
    cleaned = cleaned.replace(".", "").replace(",", ".")
    if not cleaned or cleaned == "-":
        raise ValueError(f"No se pudo extraer un monto de: '{text}'")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Monto inválido: '{text}'") from e


def parse_reference_lines(lines: list[str]) -> list[Decimal]:
    """기준 목록 파싱 (빈 줄, "$ -" 제외)"""
    amounts: list[Decimal] = []
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or _EMPTY_AMOUNT.match(line):
            continue
        try:
            amounts.append(parse_locale_amount(line))
        except ValueError as e:
            logger.warning(f"Línea {number} ignorada: {e}")
    return amounts


async def compare(
    db_path: Path,
    cuenta_id: int,
    reference: list[Decimal],
    desde: str | None = None,
    hasta: str | None = None,
) -> ReconciliationResult:
    """계정 EGRESO와 기준 목록 비교"""
    async with SQLiteAdapter(db_path, readonly=True) as db:
        comparator = ReconciliationComparator(MovementJournal(db))
        return await comparator.compare_account_egresos(cuenta_id, reference, desde, hasta)


def print_report(result: ReconciliationResult) -> None:
    """비교 결과 출력"""
    print("=== COMPARACIÓN EGRESOS ===\n")
    print(f"Lista de referencia: {result.reference_count} egresos")
    print(f"Base de datos: {result.store_count} egresos")

    print("\n=== MONTOS SOLO EN REFERENCIA ===")
    for amount in result.only_in_reference:
        print(f"  ${money_str(amount)}")

    print("\n=== MONTOS SOLO EN DB ===")
    for amount in result.only_in_store:
        print(f"  ${money_str(amount)}")

    print("\n=== RESUMEN ===")
    print(f"Total solo en referencia: ${money_str(sum_money(result.only_in_reference))}")
    print(f"Total solo en DB: ${money_str(sum_money(result.only_in_store))}")
    print(f"Diferencia neta: ${money_str(result.net_difference)}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="계정 EGRESO 대사")
    parser.add_argument("--cuenta", type=int, required=True, help="계정 ID")
    parser.add_argument("--archivo", type=Path, required=True, help="기준 금액 목록 파일")
    parser.add_argument("--desde", default=None, help="시작일 (YYYY-MM-DD)")
    parser.add_argument("--hasta", default=None, help="종료일 (YYYY-MM-DD)")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RunMode],
        default=RunMode.TESTING.value,
        help="실행 모드 (기본: testing)",
    )
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (지정 시 --mode 무시)")
    args = parser.parse_args(argv)

    setup_logging("scripts")

    lines = args.archivo.read_text(encoding="utf-8").splitlines()
    reference = parse_reference_lines(lines)

    db_path = args.db or get_db_path(args.mode)
    result = asyncio.run(compare(db_path, args.cuenta, reference, args.desde, args.hasta))

    print_report(result)
    return 0 if result.is_reconciled else 1


if __name__ == "__main__":
    sys.exit(main())
